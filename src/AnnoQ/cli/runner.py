"""Command runner for coordinating CLI execution.

Manages logging configuration, client lifecycle, output rendering and error
handling for command execution.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import click

from AnnoQ.config import AppConfig
from AnnoQ.sources.registry import AnnoqClient, build_client
from AnnoQ.renderers import render_result
from AnnoQ.utils.log import configure_logging, log


class CommandRunner:
    """Runs one client call per command with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run(
        self,
        *,
        action: str,
        backend: str,
        call: Callable[[AnnoqClient], Any],
        output_format: str,
    ) -> None:
        """Build the backend client, run ``call`` and print the rendered result.

        Args:
            action: The CLI command name (e.g., 'region').
            backend: Registered backend name used to build the client.
            call: Function issuing the request on the client.
            output_format: ``json`` or ``table``.

        Raises:
            click.Abort: When the command fails.
        """
        runtime = self.config.runtime
        configure_logging(
            level=runtime.level,
            action=action,
            log_to_file=runtime.to_file,
            log_dir=runtime.dir,
        )
        try:
            log.debug("Running %s on backend=%s", action, backend)
            with build_client(backend, config=self.config) as client:
                result = call(client)
            if isinstance(result, list):
                log.info("Fetched %d records", len(result))
            click.echo(render_result(result, output_format))
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action, e)
            raise click.Abort from e
