"""Error types raised by the AnnoQ client.

Input problems are detected before any request is sent and subclass the
matching builtin (``ValueError`` / ``FileNotFoundError``) so callers can catch
either the AnnoQ type or the builtin one. Backend outcomes are reported as
``RemoteError`` (non-2xx status) or ``ProtocolError`` (2xx with an unexpected
body).
"""

from __future__ import annotations


class AnnoqError(Exception):
    """Base class for all AnnoQ client errors."""


class InvalidArgumentError(AnnoqError, ValueError):
    """Caller input rejected before dispatch."""


class FieldSpecNotFoundError(AnnoqError, FileNotFoundError):
    """Field selection is neither valid inline JSON nor an existing file."""

    def __init__(self, path: str, message: str | None = None) -> None:
        super().__init__(message or f"Fields parameter appears to be a file path but file not found: {path}")
        self.path = path


class RemoteError(AnnoqError):
    """Backend answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code returned by the backend.
        body: Raw response body, when available.
    """

    def __init__(self, status_code: int, body: str | None = None, *, url: str | None = None) -> None:
        message = f"HTTP {status_code}"
        if url:
            message = f"{message} for {url}"
        if body:
            message = f"{message}: {_shorten(body)}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.url = url


class ProtocolError(AnnoqError):
    """Successful response whose body does not match the expected envelope."""

    def __init__(self, message: str, body: str | None = None) -> None:
        if body is not None:
            message = f"{message}: {_shorten(body)}"
        super().__init__(message)
        self.body = body


def _shorten(text: str, limit: int = 500) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
