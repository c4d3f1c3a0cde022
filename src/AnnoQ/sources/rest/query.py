"""REST query-string compiler.

Turns lookup arguments into the query-string parameters of the REST
endpoints. All values are sent as strings:

- chromosome_identifier / start_position / end_position  (region lookups)
- rsid_list    comma-joined rsIDs
- gene         gene id, gene symbol or UniProt id
- fields       compact ``{"_source": [...]}`` JSON
- filter_fields comma-joined names that must be non-empty
"""

from __future__ import annotations

from typing import Any, Iterable

from AnnoQ.core.errors import InvalidArgumentError
from AnnoQ.core.fields import check_rest_field_limit, normalize_fields


def region_params(chromosome: str, start: int | None, end: int | None) -> dict[str, str]:
    chromosome_id = str(chromosome).strip()
    if not chromosome_id:
        raise InvalidArgumentError("chromosome identifier must not be empty")
    params = {"chromosome_identifier": chromosome_id}
    if start is not None:
        params["start_position"] = str(start)
    if end is not None:
        params["end_position"] = str(end)
    if start is not None and end is not None and start > end:
        raise InvalidArgumentError(f"start position {start} is after end position {end}")
    return params


def rsid_params(rsids: str | Iterable[str]) -> dict[str, str]:
    if isinstance(rsids, str):
        values = [part.strip() for part in rsids.split(",")]
    else:
        values = [str(part).strip() for part in rsids]
    values = [v for v in values if v]
    if not values:
        raise InvalidArgumentError("rsid list must contain at least one rsID")
    return {"rsid_list": ",".join(values)}


def gene_params(gene: str) -> dict[str, str]:
    gene_id = str(gene).strip()
    if not gene_id:
        raise InvalidArgumentError("gene must not be empty")
    return {"gene": gene_id}


def selection_params(*, fields: Any = None, filter_fields: Iterable[str] | None = None) -> dict[str, str]:
    """Compile field projection and non-empty filters.

    Raises:
        InvalidArgumentError: If the selection is malformed or exceeds the
            REST field limit.
        FieldSpecNotFoundError: If ``fields`` names a missing file.
    """
    params: dict[str, str] = {}
    spec = normalize_fields(fields)
    check_rest_field_limit(spec)
    if spec is not None:
        params["fields"] = spec.to_json()

    joined = join_filter_fields(filter_fields)
    if joined:
        params["filter_fields"] = joined
    return params


def join_filter_fields(filter_fields: Iterable[str] | None) -> str:
    if filter_fields is None:
        return ""
    if isinstance(filter_fields, str):
        filter_fields = [filter_fields]
    names = (str(name).strip() for name in filter_fields)
    return ",".join(name for name in names if name)
