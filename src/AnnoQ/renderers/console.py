"""Console table renderer.

Renders SNP records as tab-separated text: one header row built from the
union of record keys (first-seen order), then one row per record.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

MISSING = "-"


def _fmt_value(value: Any) -> str:
    """Format one cell value.

    Args:
        value: Raw annotation value.

    Returns:
        ``-`` for missing values, JSON for nested values, ``str`` otherwise.
        Tabs and newlines are replaced so that rows stay aligned.
    """
    if value is None or value == "":
        return MISSING
    if isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    else:
        text = str(value)
    return text.replace("\t", " ").replace("\n", " ")


def table_columns(records: Iterable[Mapping[str, Any]]) -> list[str]:
    columns: list[str] = []
    seen: set[str] = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def render_table(records: Iterable[Mapping[str, Any]]) -> str:
    """Render records into a tab-separated table.

    Args:
        records: SNP records.

    Returns:
        Table text, or an empty string when there are no records.
    """
    rows = list(records)
    if not rows:
        return ""
    columns = table_columns(rows)
    lines = ["\t".join(columns)]
    for record in rows:
        lines.append("\t".join(_fmt_value(record.get(column)) for column in columns))
    return "\n".join(lines)
