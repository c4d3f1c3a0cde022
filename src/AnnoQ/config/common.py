from __future__ import annotations

"""Shared helpers for reading and validating config values.

Every helper takes the dotted config key (``api.timeout``) so error messages
point at the offending entry in the YAML file.
"""

from typing import Any, Collection, Mapping


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return a top-level section, or ``{}`` for an absent optional one.

    Raises:
        ValueError: If a required section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{key} must be an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def get_optional_value(section: Mapping[str, Any], field: str, default: Any) -> Any:
    value = section.get(field)
    return default if value is None else value


def expect_str(value: Any, config_key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{config_key} must be a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{config_key} must be a boolean")
    return value


def expect_int(value: Any, config_key: str) -> int:
    # bool is an int subclass; `page_size: true` is a typo, not 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{config_key} must be an integer")
    return value


def expect_float(value: Any, config_key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{config_key} must be a number")
    return float(value)


def expect_choice(value: str, choices: Collection[str], config_key: str) -> str:
    """Check that ``value`` is one of ``choices``.

    Raises:
        ValueError: Listing the accepted values.
    """
    if value not in choices:
        raise ValueError(f"{config_key} must be one of {sorted(choices)}, got {value!r}")
    return value


def expect_http_url(value: str, config_key: str) -> str:
    """Check that ``value`` is an absolute http(s) URL and strip it."""
    url = value.strip()
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"{config_key} must be an http(s) URL, got {value!r}")
    return url
