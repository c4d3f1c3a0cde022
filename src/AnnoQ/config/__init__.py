from __future__ import annotations

"""Public configuration API for AnnoQ."""

from AnnoQ.config.api import ApiConfig
from AnnoQ.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from AnnoQ.config.runtime import RuntimeConfig

__all__ = [
    "ApiConfig",
    "AppConfig",
    "RuntimeConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
