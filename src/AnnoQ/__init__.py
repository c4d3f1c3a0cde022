"""AnnoQ SNP annotation client package exports."""

from AnnoQ.core.errors import (
    AnnoqError,
    FieldSpecNotFoundError,
    InvalidArgumentError,
    ProtocolError,
    RemoteError,
)
from AnnoQ.core.fields import FieldSpec, normalize_fields
from AnnoQ.core.models import MAX_FETCH_ALL, MAX_RESULT_WINDOW, PaginationWindow
from AnnoQ.core.query import (
    Query,
    add_filter,
    exists_filter,
    new_query,
    range_filter,
    term_filter,
    to_wire_format,
    with_keyword,
    with_source,
)
from AnnoQ.sources.graphql.client import GraphqlApiClient
from AnnoQ.sources.rest.client import RestApiClient
from AnnoQ.sources.search.client import SearchEngineClient

__all__ = [
    "AnnoqError",
    "InvalidArgumentError",
    "FieldSpecNotFoundError",
    "RemoteError",
    "ProtocolError",
    "FieldSpec",
    "normalize_fields",
    "PaginationWindow",
    "MAX_RESULT_WINDOW",
    "MAX_FETCH_ALL",
    "Query",
    "new_query",
    "with_source",
    "with_keyword",
    "add_filter",
    "exists_filter",
    "term_filter",
    "range_filter",
    "to_wire_format",
    "RestApiClient",
    "GraphqlApiClient",
    "SearchEngineClient",
]
