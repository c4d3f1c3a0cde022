"""Search-engine query builder.

Queries are immutable values: every builder function returns a new ``Query``
and leaves its argument untouched, so a query can be shared and extended by
several callers without aliasing surprises.

Wire format
- filters      -> {"query": {"bool": {"filter": [...]}}}
- free text    -> {"query": {"query_string": {"query": "..."}}}
- source fields -> top-level "_source": [...] after "query"

Filters are combined with AND and serialized in the order they were added.
Free text and structured filters are mutually exclusive.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any, Iterable, Union

from AnnoQ.core.errors import InvalidArgumentError


@dataclass(frozen=True, slots=True)
class ExistsFilter:
    """Field must be present and non-null."""

    field: str

    def to_dict(self) -> dict[str, Any]:
        return {"exists": {"field": self.field}}


@dataclass(frozen=True, slots=True)
class TermFilter:
    """Field must equal ``value``.

    String values are lower-cased on construction because the backend indexes
    keyword fields in lower case.
    """

    field: str
    value: Any

    def __post_init__(self) -> None:
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.lower())

    def to_dict(self) -> dict[str, Any]:
        return {"term": {self.field: self.value}}


@dataclass(frozen=True, slots=True)
class RangeFilter:
    """Field must lie strictly between the given open bounds.

    Attributes:
        field: Numeric annotation field.
        gt: Exclusive lower bound, or None.
        lt: Exclusive upper bound, or None.
    """

    field: str
    gt: float | int | None = None
    lt: float | int | None = None

    def __post_init__(self) -> None:
        if self.gt is None and self.lt is None:
            raise InvalidArgumentError(f"range filter on {self.field!r} needs at least one of gt/lt")

    def to_dict(self) -> dict[str, Any]:
        bounds: dict[str, Any] = {}
        if self.gt is not None:
            bounds["gt"] = self.gt
        if self.lt is not None:
            bounds["lt"] = self.lt
        return {"range": {self.field: bounds}}


FilterClause = Union[ExistsFilter, TermFilter, RangeFilter]


@dataclass(frozen=True, slots=True)
class Query:
    """Canonical search-engine request.

    Attributes:
        filters: Filter clauses combined with AND, in insertion order.
        source_fields: Fields to project, or None for the backend defaults.
        free_text: Full-text keyword clause, or None.
    """

    filters: tuple[FilterClause, ...] = ()
    source_fields: tuple[str, ...] | None = None
    free_text: str | None = None


def new_query() -> Query:
    """Return an empty query: no filters, no source restriction, no free text."""
    return Query()


def with_source(query: Query, fields: Iterable[str] | None) -> Query:
    """Return a copy of ``query`` projecting ``fields`` (None restores defaults).

    The field count is not checked here; REST-mode limits are enforced by the
    field normalizer of that backend.
    """
    if fields is None:
        return replace(query, source_fields=None)
    if isinstance(fields, str):
        raise InvalidArgumentError("source fields must be a list of field names, not a string")
    return replace(query, source_fields=tuple(_require_field(f) for f in fields))


def add_filter(query: Query, clause: FilterClause) -> Query:
    """Return a copy of ``query`` with ``clause`` appended to its filters."""
    if not isinstance(clause, (ExistsFilter, TermFilter, RangeFilter)):
        raise InvalidArgumentError(f"unsupported filter clause: {clause!r}")
    if query.free_text is not None:
        raise InvalidArgumentError("structured filters cannot be combined with a free-text query")
    return replace(query, filters=query.filters + (clause,))


def with_keyword(query: Query, text: str) -> Query:
    """Return a copy of ``query`` searching for ``text`` across all fields."""
    keyword = str(text).strip()
    if not keyword:
        raise InvalidArgumentError("keyword must not be empty")
    if query.filters:
        raise InvalidArgumentError("a free-text query cannot be combined with structured filters")
    return replace(query, free_text=keyword)


def exists_filter(field: str) -> ExistsFilter:
    return ExistsFilter(_require_field(field))


def term_filter(field: str, value: Any) -> TermFilter:
    return TermFilter(_require_field(field), value)


def range_filter(field: str, gt: float | int | None = None, lt: float | int | None = None) -> RangeFilter:
    """Build a range clause; raises ``InvalidArgumentError`` without bounds."""
    return RangeFilter(_require_field(field), gt=gt, lt=lt)


def to_wire_dict(query: Query) -> dict[str, Any]:
    """Return the nested-object form of ``query`` with a stable key order."""
    if query.free_text is not None:
        body: dict[str, Any] = {"query": {"query_string": {"query": query.free_text}}}
    else:
        body = {"query": {"bool": {"filter": [clause.to_dict() for clause in query.filters]}}}
    if query.source_fields is not None:
        body["_source"] = list(query.source_fields)
    return body


def to_wire_format(query: Query) -> str:
    """Serialize ``query`` to compact JSON text.

    The same query always produces the same text.
    """
    return json.dumps(to_wire_dict(query), separators=(",", ":"), ensure_ascii=False)


def _require_field(field: str) -> str:
    if not isinstance(field, str) or not field.strip():
        raise InvalidArgumentError(f"field name must be a non-empty string, got {field!r}")
    return field.strip()
