from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from AnnoQ.core.errors import InvalidArgumentError

# Deepest offset the backend can address through paged requests.
MAX_RESULT_WINDOW: Final[int] = 10_000
# Largest result set the download endpoints support.
MAX_FETCH_ALL: Final[int] = 1_000_000
# Largest field selection accepted by the REST endpoints.
MAX_REST_FIELDS: Final[int] = 20

DEFAULT_PAGE_SIZE: Final[int] = 1000

SnpRecord = dict[str, Any]


@dataclass(frozen=True, slots=True)
class PaginationWindow:
    """One page of a paged request.

    Attributes:
        start: Zero-based offset of the first record.
        size: Number of records requested.

    Raises:
        InvalidArgumentError: On construction, when ``start`` is negative,
            ``size`` is not positive, or the window reaches past
            ``MAX_RESULT_WINDOW``.
    """

    start: int = 0
    size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        for name, value in (("pagination_from", self.start), ("pagination_size", self.size)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
        if self.start < 0 or self.size <= 0:
            raise InvalidArgumentError("pagination_from must be >= 0 and pagination_size must be > 0.")
        if self.start + self.size > MAX_RESULT_WINDOW:
            raise InvalidArgumentError(
                f"pagination_from + pagination_size must be <= {MAX_RESULT_WINDOW:,} "
                "when not fetching all results."
            )

    def to_params(self) -> dict[str, str]:
        """Return the window as REST query-string parameters."""
        return {
            "pagination_from": str(self.start),
            "pagination_size": str(self.size),
        }
