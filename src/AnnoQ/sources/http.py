"""Shared HTTP plumbing for the AnnoQ backends.

Each call is a single blocking request: no retries, no caching. Non-2xx
answers raise ``RemoteError`` and bodies that do not decode to a JSON object
raise ``ProtocolError``. Transport exceptions from ``requests`` propagate
unchanged.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any, Mapping

import requests

from AnnoQ.core.errors import ProtocolError, RemoteError
from AnnoQ.utils.log import log

DEFAULT_TIMEOUT = 60.0

HEADERS = {
    "User-Agent": "annoq-client/0.1",
    "Accept": "application/json",
}

NDJSON_DELIMITER = b"\n"


class JsonPayload(dict):
    """Decoded JSON object that remembers the response text it came from."""

    __slots__ = ("raw_text",)

    def __init__(self, data: Mapping[str, Any], raw_text: str | None = None) -> None:
        super().__init__(data)
        self.raw_text = raw_text


class AnnoqHttpClient:
    """Thin wrapper over ``requests.Session`` bound to one timeout.

    Args:
        session: Session to issue requests with; a new one is created when
            omitted. Tests pass an in-memory double here.
        timeout: Request timeout in seconds.
    """

    def __init__(self, session: requests.Session | None = None, *, timeout: float | None = None) -> None:
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout or DEFAULT_TIMEOUT

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> JsonPayload:
        """GET ``url`` and return the decoded JSON object."""
        log.debug("GET %s params=%s", url, dict(params or {}))
        response = self._session.get(url, params=params, headers=HEADERS, timeout=self._timeout)
        return _decode_object(_check_status(response, url))

    def post_json(self, url: str, *, body: Mapping[str, Any]) -> JsonPayload:
        """POST ``body`` as JSON to ``url`` and return the decoded JSON object."""
        log.debug("POST %s", url)
        response = self._session.post(url, json=body, headers=HEADERS, timeout=self._timeout)
        return _decode_object(_check_status(response, url))

    def stream_lines(self, url: str, *, params: Mapping[str, str] | None = None) -> Iterator[str]:
        """GET ``url`` in streaming mode and yield the body line by line.

        Lines are the raw body split on newline bytes and decoded as UTF-8. The
        response is closed when the iterator is exhausted or discarded.
        """
        log.debug("GET (stream) %s params=%s", url, dict(params or {}))
        response = self._session.get(url, params=params, headers=HEADERS, timeout=self._timeout, stream=True)
        try:
            _check_status(response, url)
            # split on \n only; JSON strings may hold U+2028, U+0085 and friends
            for line in response.iter_lines(delimiter=NDJSON_DELIMITER):
                yield _decode_line(line)
        finally:
            response.close()


def require_key(payload: Mapping[str, Any], key: str) -> Any:
    """Return ``payload[key]`` or raise ``ProtocolError`` carrying the body."""
    if key not in payload:
        raise ProtocolError(f'Unexpected response from server: missing "{key}"', body=payload_text(payload))
    return payload[key]


def _decode_line(line: bytes) -> str:
    try:
        return line.decode("utf-8").rstrip("\r")
    except UnicodeDecodeError as e:
        raise ProtocolError("Streamed line is not valid UTF-8", body=line.decode("utf-8", "replace")) from e


def _check_status(response: requests.Response, url: str) -> requests.Response:
    status = response.status_code
    if not 200 <= status < 300:
        raise RemoteError(status, _safe_text(response), url=url)
    return response


def _decode_object(response: requests.Response) -> JsonPayload:
    text = _safe_text(response)
    try:
        payload = response.json()
    except ValueError as e:
        raise ProtocolError("Response body is not valid JSON", body=text) from e
    if not isinstance(payload, dict):
        raise ProtocolError("Response body is not a JSON object", body=text)
    return JsonPayload(payload, text)


def _safe_text(response: requests.Response) -> str | None:
    try:
        return response.text
    except (UnicodeDecodeError, RuntimeError):
        return None


def dump_payload(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def payload_text(payload: Mapping[str, Any]) -> str:
    """Return the raw response text behind ``payload``, or its JSON dump."""
    raw_text = getattr(payload, "raw_text", None)
    return raw_text if raw_text is not None else dump_payload(payload)
