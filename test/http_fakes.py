"""In-memory stand-ins for ``requests.Session`` used by the client tests.

Responses are real ``requests.Response`` objects reading from an in-memory
body, so decoding and line splitting behave exactly as on the wire.
"""

from __future__ import annotations

import io
import json
from typing import Any

import requests


class FakeResponse(requests.Response):
    def __init__(
        self,
        status_code: int = 200,
        *,
        payload: Any = None,
        text: str | None = None,
        body: bytes | None = None,
    ) -> None:
        super().__init__()
        if body is None:
            if text is None:
                text = json.dumps(payload) if payload is not None else ""
            body = text.encode("utf-8")
        self.status_code = status_code
        self.raw = io.BytesIO(body)
        self.encoding = "utf-8"
        self.closed = False

    def close(self) -> None:
        self.closed = True
        super().close()


class FakeSession:
    """Records every request and answers from a queue of responses."""

    def __init__(self, *responses: FakeResponse) -> None:
        self._responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._answer("GET", url, kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._answer("POST", url, kwargs)

    def close(self) -> None:
        self.closed = True

    def _answer(self, method: str, url: str, kwargs: dict[str, Any]) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError(f"unexpected {method} {url}")
        response = self._responses.pop(0)
        response.url = url
        return response
