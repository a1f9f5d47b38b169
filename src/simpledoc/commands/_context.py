"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy service construction, interactivity
detection, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from simpledoc.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from simpledoc.config.settings import SimpleDocSettings
    from simpledoc.services.migrate import MigrateService
    from simpledoc.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The service is created lazily so ``--help`` and ``--examples`` never
    touch git.
    """

    def __init__(self, settings: SimpleDocSettings, *, command: str | None = None) -> None:
        self.settings = settings
        self._service: MigrateService | None = None

        from simpledoc.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json, command=command)

    @property
    def service(self) -> MigrateService:
        """The migrate service (created lazily on first access)."""
        if self._service is None:
            from simpledoc.services.migrate import MigrateService

            self._service = MigrateService(self.settings)
        return self._service

    @property
    def interactive(self) -> bool:
        """True when prompts may fire: no ``--no-interact``, no ``--json``, stdin is a TTY."""
        return (
            not self.settings.no_interact
            and not self.settings.json_output
            and sys.stdin.isatty()
        )

    @property
    def show_progress(self) -> bool:
        """True when a progress bar on stderr would reach a human."""
        return not self.settings.json_output and not self.settings.quiet and sys.stderr.isatty()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
