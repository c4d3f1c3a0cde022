"""Field-selection normalization.

A field selection can be given in three equivalent forms:

1. an inline list of names: ``["chr", "pos", "ref", "alt"]``
2. inline JSON text: ``'{"_source": ["chr", "pos", "ref", "alt"]}'``
3. a path to a file holding that JSON

The raw value is resolved once into one of ``InlineFields``, ``JsonFields`` or
``FileFields`` and then normalized into a ``FieldSpec``, which is what the
clients send.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence, Union

from AnnoQ.core.errors import FieldSpecNotFoundError, InvalidArgumentError
from AnnoQ.core.models import MAX_REST_FIELDS

SOURCE_KEY = "_source"


@dataclass(frozen=True, slots=True)
class InlineFields:
    names: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class JsonFields:
    text: str


@dataclass(frozen=True, slots=True)
class FileFields:
    path: Path


FieldInput = Union[InlineFields, JsonFields, FileFields]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Normalized field selection.

    Names keep their first-seen order; duplicates are dropped.
    """

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", _dedup_preserve_order(self.names))

    def __len__(self) -> int:
        return len(self.names)

    def to_payload(self) -> dict[str, list[str]]:
        return {SOURCE_KEY: list(self.names)}

    def to_json(self) -> str:
        """Return the compact ``{"_source": [...]}`` text sent to the backend."""
        return json.dumps(self.to_payload(), separators=(",", ":"), ensure_ascii=False)


def parse_field_input(value: Any) -> FieldInput | None:
    """Classify a raw field-selection value.

    Args:
        value: None, a list/tuple of names, JSON text, or a file path.

    Returns:
        The tagged input, or None when no selection was given.

    Raises:
        InvalidArgumentError: If ``value`` is a mapping or an unsupported type.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("{") and text.endswith("}"):
            return JsonFields(text)
        return FileFields(Path(text))
    if isinstance(value, os.PathLike):
        return FileFields(Path(value))
    if isinstance(value, Mapping):
        raise InvalidArgumentError(
            "Fields parameter must be a list of field names, JSON text or a file path; "
            f"got a mapping ({type(value).__name__})"
        )
    if isinstance(value, (list, tuple)):
        return InlineFields(_expect_names(value, "fields"))
    raise InvalidArgumentError(
        "Fields parameter must be a list of field names, JSON text or a file path; "
        f"got {type(value).__name__}"
    )


def normalize_fields(value: Any) -> FieldSpec | None:
    """Normalize any accepted field-selection form into a ``FieldSpec``.

    Raises:
        InvalidArgumentError: If the selection is malformed or empty.
        FieldSpecNotFoundError: If a file path does not exist, or inline
            JSON text does not parse.
    """
    field_input = value if isinstance(value, (InlineFields, JsonFields, FileFields)) else parse_field_input(value)
    if field_input is None:
        return None

    if isinstance(field_input, InlineFields):
        names = field_input.names
    elif isinstance(field_input, JsonFields):
        names = _names_from_inline_json(field_input.text)
    else:
        names = _names_from_json(_read_field_file(field_input.path), origin=str(field_input.path))

    if not names:
        raise InvalidArgumentError("field selection must name at least one field")
    return FieldSpec(names)


def check_rest_field_limit(spec: FieldSpec | None) -> None:
    """Reject selections larger than the REST endpoints accept."""
    if spec is not None and len(spec) > MAX_REST_FIELDS:
        raise InvalidArgumentError(
            f"Number of fields is limited to {MAX_REST_FIELDS}; got {len(spec)}"
        )


def _read_field_file(path: Path) -> str:
    if not path.is_file():
        raise FieldSpecNotFoundError(str(path))
    return path.read_text(encoding="utf-8")


def _names_from_inline_json(text: str) -> tuple[str, ...]:
    # unparseable inline text is treated like a path that does not exist
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FieldSpecNotFoundError(
            text, f"Fields parameter is neither valid JSON nor an existing file: {text} ({e.msg})"
        ) from e
    return _names_from_selection(data, origin="fields")


def _names_from_json(text: str, *, origin: str) -> tuple[str, ...]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(f"{origin}: invalid JSON field selection ({e.msg})") from e
    return _names_from_selection(data, origin=origin)


def _names_from_selection(data: Any, *, origin: str) -> tuple[str, ...]:
    if not isinstance(data, Mapping) or SOURCE_KEY not in data:
        raise InvalidArgumentError(f'{origin}: field selection must be an object with a "{SOURCE_KEY}" list')
    return _expect_names(data[SOURCE_KEY], f"{origin}.{SOURCE_KEY}")


def _expect_names(value: Any, config_key: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise InvalidArgumentError(f"{config_key} must be a list of field names")
    names: list[str] = []
    for idx, item in enumerate(value):
        if not isinstance(item, str):
            raise InvalidArgumentError(f"{config_key}[{idx}] must be a string")
        name = item.strip()
        if name:
            names.append(name)
    return tuple(names)


def _dedup_preserve_order(names: Sequence[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    unique: list[str] = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        unique.append(name)
    return tuple(unique)
