"""Output renderers for query results."""

from __future__ import annotations

from typing import Any

from AnnoQ.renderers.console import render_table
from AnnoQ.renderers.json import render_json

OUTPUT_FORMATS = ("json", "table")


def render_result(result: Any, output_format: str) -> str:
    """Render a query result in the requested format.

    Tables only make sense for record lists; counts and other scalar results
    fall back to JSON.

    Raises:
        ValueError: If ``output_format`` is unknown.
    """
    if output_format == "json":
        return render_json(result)
    if output_format == "table":
        if isinstance(result, list) and all(isinstance(item, dict) for item in result):
            return render_table(result)
        return render_json(result)
    raise ValueError(f"Unsupported output format: {output_format}")


__all__ = [
    "OUTPUT_FORMATS",
    "render_json",
    "render_result",
    "render_table",
]
