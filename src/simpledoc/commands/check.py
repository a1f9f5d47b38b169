"""Command: report whether the repository follows the doc conventions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from simpledoc.commands._base import SimpleDocCommand
from simpledoc.commands._progress import PlanningProgress

if TYPE_CHECKING:
    from simpledoc.commands._context import AppContext


@click.command(
    cls=SimpleDocCommand,
    examples="""\
  simpledoc check
  simpledoc --json check
  simpledoc -q check && echo compliant""",
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Check naming, frontmatter, and references. Exits 1 when changes are needed."""
    with PlanningProgress(app.show_progress, log_phases=app.settings.verbose) as progress:
        result = app.service.check(on_progress=progress.callback)
    app.emit(result)
