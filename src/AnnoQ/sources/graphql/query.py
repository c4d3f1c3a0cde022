"""GraphQL query compiler.

Builds the query text for the three SNP operations exposed by the AnnoQ
GraphQL endpoint. The requested annotations become the selection set of
``snps``, one field per line. String arguments are emitted as JSON string
literals, which GraphQL accepts verbatim.
"""

from __future__ import annotations

import json
from typing import Iterable

from AnnoQ.core.errors import InvalidArgumentError

GRAPHQL_PAGE_SIZE = 10_000
RSID_EXISTS_FIELD = "rs_dbSNP151"

REGION_OPERATION = "get_SNPs_by_chromosome"
RSID_OPERATION = "get_SNPs_by_RsID"
RSIDS_OPERATION = "get_SNPs_by_RsIDs"


def annotations_selection(annotations: Iterable[str]) -> str:
    """Join annotation names into a selection set body."""
    if isinstance(annotations, str):
        annotations = [annotations]
    names = [str(name).strip() for name in annotations]
    names = [name for name in names if name]
    if not names:
        raise InvalidArgumentError("at least one annotation must be requested")
    return "\n".join(names)


def compile_region_query(
    chromosome: str,
    start: int,
    end: int,
    annotations: Iterable[str],
    *,
    page_size: int = GRAPHQL_PAGE_SIZE,
) -> str:
    args = (
        f"chr: {_literal(str(chromosome))}, start: {_int(start, 'start')}, end: {_int(end, 'end')}, "
        f"query_type_option: SNPS, page_args: {{size: {_page_size(page_size)}}}"
    )
    return _wrap(REGION_OPERATION, args, annotations)


def compile_rsid_query(rsid: str, annotations: Iterable[str]) -> str:
    args = (
        f"rsID: {_literal(str(rsid))}, query_type_option: SNPS, "
        f"filter_args: {{exists: [{_literal(RSID_EXISTS_FIELD)}]}}"
    )
    return _wrap(RSID_OPERATION, args, annotations)


def compile_rsids_query(
    rsids: Iterable[str],
    annotations: Iterable[str],
    *,
    page_size: int = GRAPHQL_PAGE_SIZE,
) -> str:
    if isinstance(rsids, str):
        rsids = rsids.split(",")
    values = [str(r).strip() for r in rsids if str(r).strip()]
    if not values:
        raise InvalidArgumentError("rsid list must contain at least one rsID")
    rsid_list = ", ".join(_literal(r) for r in values)
    args = (
        f"rsIDs: [{rsid_list}], query_type_option: SNPS, "
        f"filter_args: {{exists: [{_literal(RSID_EXISTS_FIELD)}]}}, "
        f"page_args: {{size: {_page_size(page_size)}}}"
    )
    return _wrap(RSIDS_OPERATION, args, annotations)


def _wrap(operation: str, args: str, annotations: Iterable[str]) -> str:
    selection = annotations_selection(annotations)
    return f"query {{\n  {operation}({args}) {{\n    snps {{\n      {selection}\n    }}\n  }}\n}}"


def _literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _int(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    return value


def _page_size(size: int) -> int:
    size = _int(size, "page_size")
    if size <= 0 or size > GRAPHQL_PAGE_SIZE:
        raise InvalidArgumentError(f"page_size must be between 1 and {GRAPHQL_PAGE_SIZE:,}")
    return size
