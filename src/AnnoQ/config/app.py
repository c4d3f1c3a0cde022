from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints.

Config is layered: the shipped ``config/default.yml`` (or the built-in
defaults when that file is absent, e.g. for an installed package run outside
the repo) is deep-merged with an optional user file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from AnnoQ.config.api import ApiConfig, check_api, load_api
from AnnoQ.config.runtime import RuntimeConfig, check_runtime, load_runtime

DEFAULT_CONFIG_PATH = Path("config/default.yml")

BUILTIN_DEFAULTS: Mapping[str, Any] = {
    "log": {"level": "INFO", "to_file": False, "dir": "log"},
    "api": {"backend": "rest"},
}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    api: ApiConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse and validate a config mapping."""
    runtime = load_runtime(raw)
    api = load_api(raw)

    check_runtime(runtime)
    check_api(api)

    return AppConfig(runtime=runtime, api=api)


def load_config(path: Path) -> AppConfig:
    """Load a single YAML config file, without any defaults layer."""
    return parse_config_dict(read_yaml_file(path))


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load ``config_path`` on top of the defaults layer.

    Raises:
        FileNotFoundError: If ``config_path`` is a user file that does not exist.
        ValueError: If either file is not a YAML mapping or fails validation.
    """
    base = read_yaml_file(default_path) if default_path.is_file() else dict(BUILTIN_DEFAULTS)
    if config_path == default_path:
        return parse_config_dict(base)
    return parse_config_dict(merge_config_dicts(base, read_yaml_file(config_path)))


def read_yaml_file(path: Path) -> dict[str, Any]:
    try:
        return parse_yaml(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` into ``base``; lists and scalars are replaced."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
