"""AnnoQ GraphQL API client."""

from __future__ import annotations

from typing import Any, Iterable

import requests

from AnnoQ.core.errors import ProtocolError
from AnnoQ.core.models import SnpRecord
from AnnoQ.sources.graphql.query import (
    GRAPHQL_PAGE_SIZE,
    REGION_OPERATION,
    RSID_OPERATION,
    RSIDS_OPERATION,
    compile_region_query,
    compile_rsid_query,
    compile_rsids_query,
)
from AnnoQ.sources.http import AnnoqHttpClient, dump_payload, payload_text
from AnnoQ.utils.log import log

DEFAULT_GRAPHQL_URL = "https://annoq.org/api-v2/graphql"


class GraphqlApiClient:
    """Client for the AnnoQ GraphQL endpoint.

    Every call POSTs ``{"query": <text>}`` and reads the records from
    ``data.<operation>.snps``.
    """

    name = "graphql"

    def __init__(
        self,
        url: str = DEFAULT_GRAPHQL_URL,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.url = url
        self._http = AnnoqHttpClient(session, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> GraphqlApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def region_query(
        self,
        chromosome: str,
        start: int,
        end: int,
        annotations: Iterable[str],
        *,
        page_size: int = GRAPHQL_PAGE_SIZE,
    ) -> list[SnpRecord]:
        """Get SNPs in a chromosome region with the requested annotations."""
        text = compile_region_query(chromosome, start, end, annotations, page_size=page_size)
        return self._run(REGION_OPERATION, text)

    def rsid_query(self, rsid: str, annotations: Iterable[str]) -> list[SnpRecord]:
        """Get the SNP(s) recorded under one rsID."""
        return self._run(RSID_OPERATION, compile_rsid_query(rsid, annotations))

    def rsids_query(
        self,
        rsids: Iterable[str],
        annotations: Iterable[str],
        *,
        page_size: int = GRAPHQL_PAGE_SIZE,
    ) -> list[SnpRecord]:
        """Get SNPs for several rsIDs at once."""
        return self._run(RSIDS_OPERATION, compile_rsids_query(rsids, annotations, page_size=page_size))

    def execute(self, query: str) -> dict[str, Any]:
        """POST raw GraphQL text and return the decoded response object."""
        return self._http.post_json(self.url, body={"query": query})

    def _run(self, operation: str, text: str) -> list[SnpRecord]:
        payload = self.execute(text)
        snps = _extract_snps(payload, operation)
        log.debug("GraphQL %s returned %d records", operation, len(snps))
        return snps


def _extract_snps(payload: dict[str, Any], operation: str) -> list[SnpRecord]:
    data = payload.get("data")
    result = data.get(operation) if isinstance(data, dict) else None
    if isinstance(result, dict) and result.get("snps", ()) is None:
        # operation ran but matched nothing
        return []
    snps = result.get("snps") if isinstance(result, dict) else None
    if not isinstance(snps, list):
        errors = payload.get("errors")
        message = f"Unexpected response from server: missing data.{operation}.snps"
        if errors:
            message = f"{message} (errors: {dump_payload({'errors': errors})})"
        raise ProtocolError(message, body=payload_text(payload))
    return snps
