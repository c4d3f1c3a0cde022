"""CLI package for AnnoQ command orchestration."""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from AnnoQ.cli.runner import CommandRunner
from AnnoQ.cli.ui import cli


def main() -> None:
    """Run AnnoQ CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
