"""Search-engine (``/_search``) client.

Sends a built ``Query`` as an Elasticsearch-style request body and returns
the ``_source`` document of every hit.
"""

from __future__ import annotations

from typing import Any

import requests

from AnnoQ.core.errors import ProtocolError
from AnnoQ.core.models import PaginationWindow, SnpRecord
from AnnoQ.core.query import Query, to_wire_dict
from AnnoQ.sources.http import AnnoqHttpClient, payload_text, require_key
from AnnoQ.utils.log import log

DEFAULT_SEARCH_URL = "https://api.annoq.org"
SEARCH_PATH = "/_search"
HITS_KEY = "hits"


class SearchEngineClient:
    """Client for the legacy search-engine DSL endpoint."""

    name = "search"

    def __init__(
        self,
        base_url: str = DEFAULT_SEARCH_URL,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = AnnoqHttpClient(session, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> SearchEngineClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute_search(self, query: Query, window: PaginationWindow | None = None) -> list[SnpRecord]:
        """Run one page of ``query``.

        Args:
            query: Built query.
            window: Page to fetch; defaults to the first 1000 records. The
                window is validated when it is constructed, so an invalid
                one never reaches this call.

        Returns:
            The ``_source`` mapping of each hit, in backend order.

        Raises:
            RemoteError: On a non-2xx response.
            ProtocolError: If the body has no ``hits`` envelope.
        """
        window = window or PaginationWindow()
        body = build_search_body(query, window)
        payload = self._http.post_json(f"{self.base_url}{SEARCH_PATH}", body=body)
        records = _extract_hits(payload)
        log.debug("Search returned %d records (from=%d size=%d)", len(records), window.start, window.size)
        return records


def build_search_body(query: Query, window: PaginationWindow) -> dict[str, Any]:
    """Return the request body: the query wire form plus ``from``/``size``."""
    body = to_wire_dict(query)
    body["from"] = window.start
    body["size"] = window.size
    return body


def _extract_hits(payload: dict[str, Any]) -> list[SnpRecord]:
    hits = require_key(payload, HITS_KEY)
    entries = hits.get("hits") if isinstance(hits, dict) else None
    if not isinstance(entries, list):
        raise ProtocolError('Unexpected response from server: missing "hits.hits"', body=payload_text(payload))
    records: list[SnpRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ProtocolError("Unexpected hit entry", body=payload_text(payload))
        source = entry.get("_source", {})
        records.append(source if isinstance(source, dict) else {})
    return records
