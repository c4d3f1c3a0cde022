"""Backend registry and builders for AnnoQ clients."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Union

import requests

from AnnoQ.sources.graphql.client import GraphqlApiClient
from AnnoQ.sources.rest.client import RestApiClient
from AnnoQ.sources.search.client import SearchEngineClient

if TYPE_CHECKING:
    from AnnoQ.config import AppConfig

AnnoqClient = Union[RestApiClient, GraphqlApiClient, SearchEngineClient]
ClientBuilder = Callable[["AppConfig", "requests.Session | None"], AnnoqClient]


def build_client(
    backend: str,
    *,
    config: AppConfig,
    session: requests.Session | None = None,
) -> AnnoqClient:
    """Build a client for the named backend.

    Args:
        backend: Backend identifier (``rest``, ``graphql`` or ``search``).
        config: Parsed application configuration.
        session: Optional HTTP session shared with the client.

    Returns:
        Initialized client pointed at the configured endpoint.

    Raises:
        ValueError: If ``backend`` is not registered.
    """
    builder = _client_builders().get(backend)
    if builder is None:
        raise ValueError(f"Unsupported backend: {backend}")
    return builder(config, session)


def supported_backend_names() -> tuple[str, ...]:
    """Return all backend names that can be built by the registry."""
    return tuple(_client_builders().keys())


def _client_builders() -> dict[str, ClientBuilder]:
    return {
        "rest": _build_rest_client,
        "graphql": _build_graphql_client,
        "search": _build_search_client,
    }


def _build_rest_client(config: AppConfig, session: requests.Session | None) -> RestApiClient:
    return RestApiClient(config.api.base_url, session=session, timeout=config.api.timeout)


def _build_graphql_client(config: AppConfig, session: requests.Session | None) -> GraphqlApiClient:
    return GraphqlApiClient(config.api.graphql_url, session=session, timeout=config.api.timeout)


def _build_search_client(config: AppConfig, session: requests.Session | None) -> SearchEngineClient:
    return SearchEngineClient(config.api.search_url, session=session, timeout=config.api.timeout)
