"""MigrateService — the ``check`` and ``migrate`` operations.

Both plan against the repository described by the settings. ``check``
only reports; ``migrate`` previews, enforces the dirty-tree and
confirmation guards, then applies.

Plan previews are grouped into steps:

1. root Markdown relocated into the docs root
2. dated/lowercase renames inside the docs root
3. every other rename (canonical and capitalized names)
4. frontmatter inserts
5. reference updates
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Iterable, Sequence
from enum import StrEnum
from typing import Any

from pydantic import BaseModel

from simpledoc.config.settings import SimpleDocSettings
from simpledoc.domain.actions import (
    ACTIONS_ADAPTER,
    MigrationAction,
    ReferenceUpdateAction,
    RenameAction,
    describe_action,
    frontmatters_of,
    references_of,
    renames_of,
)
from simpledoc.domain.naming import CaseMode, extract_date_prefix
from simpledoc.errors import SimpleDocError
from simpledoc.infrastructure.git import GitClient
from simpledoc.services.applier import apply_plan
from simpledoc.services.planner import MigrationPlan, PlanOptions, ProgressCallback, plan_migration
from simpledoc.services.result import ServiceResult

logger = logging.getLogger(__name__)


class StepKind(StrEnum):
    """Preview groups, in display order."""

    ROOT_MOVES = "root_moves"
    DATED_RENAMES = "dated_renames"
    OTHER_RENAMES = "other_renames"
    FRONTMATTER = "frontmatter"
    REFERENCES = "references"


class PlanStep(BaseModel):
    """One preview group: a title and its rendered action lines."""

    model_config = {"frozen": True}

    kind: StepKind
    title: str
    actions: list[str]

    @property
    def count(self) -> int:
        return len(self.actions)


ConfirmCallback = Callable[[MigrationPlan, list[PlanStep]], bool]


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


def detect_root_moves(renames: Iterable[RenameAction], docs_root: str) -> list[RenameAction]:
    """Renames that take a root-level file into the docs root."""
    prefix = f"{docs_root}/"
    return [r for r in renames if "/" not in r.from_path and r.to_path.startswith(prefix)]


def detect_dated_renames(renames: Iterable[RenameAction], docs_root: str) -> list[RenameAction]:
    """Renames within the docs root whose target carries a date prefix."""
    prefix = f"{docs_root}/"
    return [
        r
        for r in renames
        if r.from_path.startswith(prefix)
        and r.to_path.startswith(prefix)
        and extract_date_prefix(posixpath.basename(r.to_path)) is not None
    ]


def build_steps(plan: MigrationPlan) -> list[PlanStep]:
    """Group a plan's actions into ordered, non-empty preview steps."""
    renames = renames_of(plan.actions)
    root_moves = detect_root_moves(renames, plan.docs_root)
    dated = detect_dated_renames(renames, plan.docs_root)
    seen = {r.from_path for r in (*root_moves, *dated)}
    others = [r for r in renames if r.from_path not in seen]

    groups: list[tuple[StepKind, str, Sequence[MigrationAction]]] = [
        (
            StepKind.ROOT_MOVES,
            f"Relocate root Markdown docs into `{plan.docs_root}/`",
            root_moves,
        ),
        (
            StepKind.DATED_RENAMES,
            "Fix dated/lowercase doc filenames (adds missing YYYY-MM-DD + normalizes separators)",
            dated,
        ),
        (StepKind.OTHER_RENAMES, "Normalize capitalized/canonical Markdown filenames", others),
        (
            StepKind.FRONTMATTER,
            "Insert missing YAML frontmatter into date-prefixed docs",
            frontmatters_of(plan.actions),
        ),
        (
            StepKind.REFERENCES,
            "Update references to renamed doc filenames",
            references_of(plan.actions),
        ),
    ]
    return [
        PlanStep(kind=kind, title=title, actions=[describe_action(a) for a in actions])
        for kind, title, actions in groups
        if actions
    ]


def _plural(count: int, noun: str = "file") -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def summarize(plan: MigrationPlan) -> list[str]:
    """Per-category counts, one line each, empty categories omitted."""
    lines: list[str] = []
    renames = len(renames_of(plan.actions))
    frontmatter = len(frontmatters_of(plan.actions))
    refs = len(references_of(plan.actions))
    if renames:
        lines.append(f"Rename/move Markdown files: {_plural(renames)}")
    if frontmatter:
        lines.append(f"Insert YAML frontmatter: {_plural(frontmatter)}")
    if refs:
        lines.append(f"Update references to renamed docs: {_plural(refs)}")
    return lines


def _plan_data(plan: MigrationPlan) -> dict[str, Any]:
    return {
        "count": len(plan.actions),
        "summary": summarize(plan),
        "steps": [step.model_dump(mode="json") for step in build_steps(plan)],
        "actions": ACTIONS_ADAPTER.dump_python(list(plan.actions), mode="json"),
    }


# ---------------------------------------------------------------------------
# MigrateService
# ---------------------------------------------------------------------------


class MigrateService:
    """Runs check/migrate against the repository named by *settings*."""

    def __init__(self, settings: SimpleDocSettings, *, git: GitClient | None = None) -> None:
        self._settings = settings
        self._git = git or GitClient()

    def plan_options(self, **overrides: Any) -> PlanOptions:
        """PlanOptions seeded from config; keyword arguments win."""
        settings = self._settings
        base: dict[str, Any] = {
            "cwd": settings.repo_root,
            "docs_root": settings.docs_root,
            "ignore_globs": settings.check.ignore,
            "frontmatter_defaults": settings.frontmatter.defaults,
        }
        base.update(overrides)
        return PlanOptions(**base)

    def _meta(self, plan: MigrationPlan) -> dict[str, Any]:
        return {
            "repo_root": str(plan.repo_root),
            "docs_root": plan.docs_root,
            "dirty": plan.working_tree_dirty,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(self, *, on_progress: ProgressCallback | None = None) -> ServiceResult:
        """Report whether the repository already follows the conventions."""
        op = "check"
        try:
            plan = plan_migration(self.plan_options(), git=self._git, on_progress=on_progress)
        except SimpleDocError as exc:
            return ServiceResult.from_exception(op, exc)

        if plan.is_empty:
            return ServiceResult(
                ok=True,
                op=op,
                data={"count": 0, "message": "repo matches SimpleDoc conventions"},
                meta=self._meta(plan),
            )
        return ServiceResult.failure(
            op,
            "CHECK_FAILED",
            "SimpleDoc check failed. Run `simpledoc migrate` to fix.",
            detail=_plan_data(plan),
            meta=self._meta(plan),
        )

    def migrate(
        self,
        *,
        dry_run: bool = False,
        force: bool = False,
        confirm: ConfirmCallback | None = None,
        author: str | None = None,
        move_root: bool = True,
        date_prefix: bool = True,
        canonical: bool = True,
        frontmatter: bool = True,
        references: bool = True,
        lowercase: Iterable[str] = (),
        capitalized: Iterable[str] = (),
        force_date: Iterable[str] = (),
        force_undated: Iterable[str] = (),
        on_progress: ProgressCallback | None = None,
    ) -> ServiceResult:
        """Plan, guard, and apply a migration.

        Args:
            dry_run: Preview only; a dirty tree becomes a warning.
            force: Allow applying on a dirty working tree.
            confirm: Asked with the plan and its preview steps before
                applying. None means nobody can be asked, so applying is
                refused unless the plan is empty.
            author: Author for every inserted frontmatter block.
            move_root: Relocate root Markdown files into the docs root.
            date_prefix: Add date prefixes and normalize dated names in the docs root.
            canonical: Normalize canonical and capitalized names.
            frontmatter: Insert missing frontmatter.
            references: Rewrite references to renamed paths.
            lowercase: Paths forced to lowercase naming.
            capitalized: Paths forced to capitalized naming.
            force_date: Paths that must gain a date prefix.
            force_undated: Paths that must lose their date prefix.
        """
        op = "migrate"
        overrides = {p: CaseMode.LOWERCASE for p in lowercase}
        overrides.update({p: CaseMode.CAPITALIZED for p in capitalized})
        try:
            options = self.plan_options(
                author=author,
                move_root_markdown_to_docs=move_root,
                rename_docs_to_date_prefix=date_prefix,
                normalize_date_prefixed_docs=date_prefix,
                include_canonical_renames=canonical,
                add_frontmatter=frontmatter,
                rename_case_overrides=overrides,
                force_date_prefix_paths=frozenset(force_date),
                force_undated_paths=frozenset(force_undated),
            )
            plan = plan_migration(options, git=self._git, on_progress=on_progress)
        except SimpleDocError as exc:
            return ServiceResult.from_exception(op, exc)

        if not references:
            plan = plan.with_actions(a for a in plan.actions if not isinstance(a, ReferenceUpdateAction))

        meta = self._meta(plan)
        data = {**_plan_data(plan), "applied": False, "dry_run": dry_run}
        if plan.is_empty:
            return ServiceResult(
                ok=True,
                op=op,
                data={**data, "message": "No migration needed."},
                meta=meta,
            )

        warnings: list[str] = []
        if plan.working_tree_dirty and not force:
            if not dry_run:
                return ServiceResult.failure(
                    op,
                    "DIRTY_WORKTREE",
                    "Refusing to apply changes on a dirty working tree without --force.",
                    data=data,
                    meta=meta,
                )
            warnings.append("Working tree is dirty (use --force to apply).")

        if dry_run:
            return ServiceResult(ok=True, op=op, data=data, warnings=warnings, meta=meta)

        if confirm is None:
            return ServiceResult.failure(
                op,
                "CONFIRMATION_REQUIRED",
                "Refusing to apply changes without confirmation. Re-run with --yes.",
                data=data,
                meta=meta,
            )
        if not confirm(plan, build_steps(plan)):
            return ServiceResult.failure(op, "CANCELLED", "Operation cancelled.", data=data, meta=meta)

        try:
            apply_plan(plan, author_override=author, git=self._git)
        except (SimpleDocError, OSError) as exc:
            logger.debug("Apply failed", exc_info=True)
            code = exc.code if isinstance(exc, SimpleDocError) else "APPLY_FAILED"
            return ServiceResult.failure(op, code, " ".join(str(exc).split()), data=data, meta=meta)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                **data,
                "applied": True,
                "message": "Done. Review with `git status` / `git diff` and commit when ready.",
            },
            warnings=warnings,
            meta=meta,
        )
