"""Backend endpoint configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from AnnoQ.config.common import (
    expect_choice,
    expect_float,
    expect_http_url,
    expect_int,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)
from AnnoQ.core.models import DEFAULT_PAGE_SIZE, MAX_RESULT_WINDOW
from AnnoQ.sources.graphql.client import DEFAULT_GRAPHQL_URL
from AnnoQ.sources.registry import supported_backend_names
from AnnoQ.sources.rest.client import DEFAULT_BASE_URL
from AnnoQ.sources.search.client import DEFAULT_SEARCH_URL

_ALLOWED_BACKENDS = supported_backend_names()


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Store validated backend selection and endpoint settings.

    Attributes:
        backend: Backend style used by the CLI (rest/graphql/search).
        base_url: REST service root. Overridden by the environment variable
            named in ``base_url_env`` when that variable is set.
        graphql_url: GraphQL endpoint URL.
        search_url: Search-engine service root.
        timeout: Request timeout in seconds.
        page_size: Default page size for paged lookups.
        base_url_env: Name of the environment variable overriding ``base_url``.
    """

    backend: str
    base_url: str
    graphql_url: str
    search_url: str
    timeout: float
    page_size: int
    base_url_env: str


def load_api(raw: Mapping[str, Any]) -> ApiConfig:
    """Load the ``api`` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "api", required=True)
    base_url_env = expect_str(get_optional_value(section, "base_url_env", "ANNOQ_BASE_URL"), "api.base_url_env")
    base_url = expect_str(get_optional_value(section, "base_url", DEFAULT_BASE_URL), "api.base_url").strip()
    return ApiConfig(
        backend=expect_str(get_required_value(section, "backend", "api.backend"), "api.backend").strip().lower(),
        base_url=_load_base_url_from_env(base_url_env) or base_url,
        graphql_url=expect_str(get_optional_value(section, "graphql_url", DEFAULT_GRAPHQL_URL), "api.graphql_url").strip(),
        search_url=expect_str(get_optional_value(section, "search_url", DEFAULT_SEARCH_URL), "api.search_url").strip(),
        timeout=expect_float(get_optional_value(section, "timeout", 60), "api.timeout"),
        page_size=expect_int(get_optional_value(section, "page_size", DEFAULT_PAGE_SIZE), "api.page_size"),
        base_url_env=base_url_env,
    )


def check_api(config: ApiConfig) -> None:
    """Validate api domain constraints.

    Raises:
        ValueError: If values violate api constraints.
    """
    expect_choice(config.backend, _ALLOWED_BACKENDS, "api.backend")
    expect_http_url(config.base_url, "api.base_url")
    expect_http_url(config.graphql_url, "api.graphql_url")
    expect_http_url(config.search_url, "api.search_url")
    if config.timeout <= 0:
        raise ValueError("api.timeout must be positive")
    if not 0 < config.page_size <= MAX_RESULT_WINDOW:
        raise ValueError(f"api.page_size must be between 1 and {MAX_RESULT_WINDOW}")


def _load_base_url_from_env(base_url_env: str) -> str:
    if not base_url_env.strip():
        return ""
    return os.getenv(base_url_env, "").strip()
