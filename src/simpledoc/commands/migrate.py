"""Command: rename docs, insert frontmatter, and rewrite references."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

import click

from simpledoc.commands._base import SimpleDocCommand
from simpledoc.commands._progress import PlanningProgress
from simpledoc.output.renderers import render_steps

if TYPE_CHECKING:
    from simpledoc.commands._context import AppContext
    from simpledoc.services.migrate import ConfirmCallback, PlanStep
    from simpledoc.services.planner import MigrationPlan


def _confirm_interactively(progress: PlanningProgress, plan: MigrationPlan, steps: list[PlanStep]) -> bool:
    progress.stop()
    click.echo(render_steps([step.model_dump(mode="json") for step in steps]))
    return click.confirm(f"\nApply {len(plan.actions)} change(s)?", default=False)


def _confirm_yes(_plan: MigrationPlan, _steps: list[PlanStep]) -> bool:
    return True


@click.command(
    cls=SimpleDocCommand,
    examples="""\
  simpledoc migrate --dry-run
  simpledoc migrate --yes
  simpledoc migrate --yes --force --author "Jane Doe <jane@example.com>"
  simpledoc migrate --no-root-move --no-references
  simpledoc migrate --yes --lowercase docs/TEST-FILE.md --force-date docs/TEST-FILE.md
  simpledoc migrate --yes --capitalized docs/2024-06-01-guide.md --force-undated docs/2024-06-01-guide.md""",
)
@click.option("--dry-run", is_flag=True, help="Preview planned changes without applying them.")
@click.option("-y", "--yes", is_flag=True, help="Apply without prompting.")
@click.option("--force", is_flag=True, help="Apply even when the working tree is dirty.")
@click.option("--author", default=None, help='Frontmatter author, e.g. "Name <email>".')
@click.option("--no-root-move", is_flag=True, help="Leave root Markdown files in place.")
@click.option("--no-date-prefix", is_flag=True, help="Skip date-prefixing and dated-name normalization.")
@click.option("--no-canonical", is_flag=True, help="Skip canonical/capitalized renames.")
@click.option("--no-frontmatter", is_flag=True, help="Skip frontmatter insertion.")
@click.option("--no-references", is_flag=True, help="Skip reference rewrites.")
@click.option("--lowercase", "lowercase", multiple=True, metavar="PATH", help="Force lowercase naming for PATH.")
@click.option(
    "--capitalized", "capitalized", multiple=True, metavar="PATH", help="Force capitalized naming for PATH."
)
@click.option("--force-date", "force_date", multiple=True, metavar="PATH", help="Add a date prefix to PATH.")
@click.option(
    "--force-undated", "force_undated", multiple=True, metavar="PATH", help="Remove the date prefix from PATH."
)
@click.pass_obj
def migrate(
    app: AppContext,
    dry_run: bool,
    yes: bool,
    force: bool,
    author: str | None,
    no_root_move: bool,
    no_date_prefix: bool,
    no_canonical: bool,
    no_frontmatter: bool,
    no_references: bool,
    lowercase: tuple[str, ...],
    capitalized: tuple[str, ...],
    force_date: tuple[str, ...],
    force_undated: tuple[str, ...],
) -> None:
    """Migrate docs to the naming and frontmatter conventions."""
    with PlanningProgress(app.show_progress, log_phases=app.settings.verbose) as progress:
        confirm: ConfirmCallback | None = None
        if yes:
            confirm = _confirm_yes
        elif app.interactive:
            confirm = partial(_confirm_interactively, progress)

        result = app.service.migrate(
            dry_run=dry_run,
            force=force,
            confirm=confirm,
            author=author,
            move_root=not no_root_move,
            date_prefix=not no_date_prefix,
            canonical=not no_canonical,
            frontmatter=not no_frontmatter,
            references=not no_references,
            lowercase=lowercase,
            capitalized=capitalized,
            force_date=force_date,
            force_undated=force_undated,
            on_progress=progress.callback,
        )
    app.emit(result)
