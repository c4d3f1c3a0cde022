"""JSON output renderer."""

from __future__ import annotations

import json
from typing import Any


def render_json(result: Any) -> str:
    """Render query results (records, counts or attribute lists) as indented JSON."""
    return json.dumps(result, ensure_ascii=False, indent=2, default=str)
