"""Fetch-all strategy for the REST download endpoints.

The paged endpoints cannot address records past offset 10,000. Every lookup
therefore has a ``/download`` counterpart that streams the complete result
set as newline-delimited JSON. This module drives that download and
accumulates the records in arrival order.

The backend enforces the 1,000,000 record ceiling; nothing is truncated here.
Any failure while streaming discards what was read so far.
"""

from __future__ import annotations

import json
from time import time
from typing import TYPE_CHECKING, Mapping

from AnnoQ.core.errors import ProtocolError
from AnnoQ.core.models import MAX_FETCH_ALL, SnpRecord
from AnnoQ.utils.log import log

if TYPE_CHECKING:
    from AnnoQ.sources.http import AnnoqHttpClient

DOWNLOAD_FORMAT = "ndjson"
_PAGINATION_KEYS = ("pagination_from", "pagination_size")
_PROGRESS_EVERY = 100_000


def download_url(lookup_url: str) -> str:
    """Return the download counterpart of a paged lookup URL."""
    return lookup_url.rstrip("/") + "/download"


def fetch_all(http: AnnoqHttpClient, url: str, params: Mapping[str, str]) -> list[SnpRecord]:
    """Download every record matching ``params`` from ``url``.

    Args:
        http: HTTP client used for the streaming request.
        url: Download endpoint URL.
        params: Lookup parameters; pagination keys are dropped.

    Returns:
        Records in the order the backend sent them.

    Raises:
        RemoteError: If the backend answers with a non-2xx status.
        ProtocolError: If a line is not a JSON object.
    """
    request_params = {k: v for k, v in params.items() if k not in _PAGINATION_KEYS}
    request_params["format"] = DOWNLOAD_FORMAT

    start_time = time()
    records: list[SnpRecord] = []
    log.debug("Start fetch-all download: url=%s", url)
    for line_no, line in enumerate(http.stream_lines(url, params=request_params), start=1):
        if not line or not line.strip():
            continue
        records.append(_parse_record(line, line_no))

        count = len(records)
        if count % _PROGRESS_EVERY == 0:
            log.info("Downloaded %d records", count)
        if count == MAX_FETCH_ALL + 1:
            log.warning("Download exceeds the supported ceiling of %d records", MAX_FETCH_ALL)

    log.debug("Fetch-all finished: %d records in %.1fs", len(records), time() - start_time)
    return records


def _parse_record(line: str, line_no: int) -> SnpRecord:
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"Invalid JSON on download line {line_no}", body=line) from e
    if not isinstance(record, dict):
        raise ProtocolError(f"Download line {line_no} is not a JSON object", body=line)
    return record
