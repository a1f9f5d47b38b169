"""Plan applier — execute a :class:`MigrationPlan` against the working tree.

Order is fixed: renames, then frontmatter inserts, then reference
rewrites. Frontmatter and reference actions name final paths, so they
only make sense after every rename has landed.

When any rename target equals (case-insensitively) some rename source,
all renames go through a temporary sibling first. This covers swaps,
longer cycles and case-only renames on case-insensitive filesystems.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Mapping, Sequence
from pathlib import Path

from simpledoc.domain import references
from simpledoc.domain.actions import (
    FrontmatterAction,
    RenameAction,
    format_actions,
    frontmatters_of,
    references_of,
    renames_of,
)
from simpledoc.domain.frontmatter import has_frontmatter, prepend_frontmatter, render_frontmatter
from simpledoc.errors import NamingExhaustedError
from simpledoc.infrastructure import filesystem
from simpledoc.infrastructure.git import GitClient
from simpledoc.services.planner import MigrationPlan

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".simpledoc-tmp"
MAX_TEMP_ATTEMPTS = 10_000


def needs_two_phase(renames: Sequence[RenameAction]) -> bool:
    """True when a target case-insensitively matches any source."""
    sources = {r.from_path.lower() for r in renames}
    return any(r.to_path.lower() in sources for r in renames)


def _unique_temp_path(repo_root: Path, source: str, occupied: set[str]) -> str:
    directory = posixpath.dirname(source)
    base = posixpath.basename(source)
    for i in range(1, MAX_TEMP_ATTEMPTS):
        suffix = TEMP_SUFFIX if i == 1 else f"{TEMP_SUFFIX}-{i}"
        candidate = posixpath.join(directory, f"{base}{suffix}")
        if candidate in occupied or filesystem.exists(repo_root, candidate):
            continue
        return candidate
    msg = f"Unable to allocate a temporary filename for: {source}"
    raise NamingExhaustedError(msg)


class _Mover:
    """Moves one path, through git when the original source is tracked."""

    def __init__(self, plan: MigrationPlan, git: GitClient) -> None:
        self._root = plan.repo_root
        self._tracked = plan.tracked_paths
        self._git = git

    def move(self, source: str, target: str, *, original: str) -> None:
        filesystem.ensure_parent_dir(self._root, target)
        if original in self._tracked:
            self._git.mv(self._root, source, target)
        else:
            filesystem.move(self._root, source, target)
        logger.info("Moved %s -> %s", source, target)


def _apply_renames(plan: MigrationPlan, renames: Sequence[RenameAction], git: GitClient) -> None:
    mover = _Mover(plan, git)
    if not needs_two_phase(renames):
        for r in renames:
            mover.move(r.from_path, r.to_path, original=r.from_path)
        return

    # Every temp name is reserved before the first move.
    occupied = {r.from_path for r in renames} | {r.to_path for r in renames}
    temps: dict[str, str] = {}
    for r in renames:
        temp = _unique_temp_path(plan.repo_root, r.from_path, occupied)
        occupied.add(temp)
        temps[r.from_path] = temp

    for r in renames:
        mover.move(r.from_path, temps[r.from_path], original=r.from_path)
    for r in renames:
        mover.move(temps[r.from_path], r.to_path, original=r.from_path)


def _resolve_author(
    action: FrontmatterAction,
    author_override: str | None,
    author_rewrites: Mapping[str, str] | None,
) -> str:
    if author_override is not None:
        return author_override
    if author_rewrites and action.author in author_rewrites:
        return author_rewrites[action.author]
    return action.author


def _apply_frontmatter(
    plan: MigrationPlan,
    action: FrontmatterAction,
    author_override: str | None,
    author_rewrites: Mapping[str, str] | None,
) -> None:
    content = filesystem.read_exact(plan.repo_root, action.path)
    if has_frontmatter(content):
        logger.debug("Frontmatter already present in %s", action.path)
        return
    block = render_frontmatter(
        title=action.title,
        author=_resolve_author(action, author_override, author_rewrites),
        date=action.date,
        tags=action.tags,
    )
    filesystem.write_text(plan.repo_root, action.path, prepend_frontmatter(content, block))


def apply_plan(
    plan: MigrationPlan,
    *,
    author_override: str | None = None,
    author_rewrites: Mapping[str, str] | None = None,
    git: GitClient | None = None,
) -> None:
    """Execute *plan*. Any I/O or git failure propagates mid-way.

    Args:
        plan: Plan produced by :func:`~simpledoc.services.planner.plan_migration`,
            possibly filtered with ``plan.with_actions``.
        author_override: Author for every inserted frontmatter block.
        author_rewrites: Planned author -> replacement author.
        git: Client used for ``git mv``.
    """
    git = git or GitClient()
    logger.debug("Applying %d actions:\n%s", len(plan.actions), format_actions(plan.actions))
    renames = renames_of(plan.actions)
    if renames:
        _apply_renames(plan, renames, git)

    for action in frontmatters_of(plan.actions):
        _apply_frontmatter(plan, action, author_override, author_rewrites)

    updates = references_of(plan.actions)
    if not updates:
        return
    replacements = references.build_replacements(renames)
    pattern = references.build_pattern(replacements)
    if pattern is None:
        return
    for action in updates:
        content = filesystem.read_small_text_file(plan.repo_root, action.path)
        if not content:
            continue
        updated = references.rewrite(content, pattern, replacements)
        if updated != content:
            filesystem.write_text(plan.repo_root, action.path, updated)
