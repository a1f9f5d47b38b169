"""Migration planner — compute the actions that bring a repo into line.

Pipeline (one call, one history cache):

1. discover candidates (root Markdown that is canonical, date-prefixed or
   all-lowercase, plus every Markdown file under the docs root)
2. classify each candidate and decide its desired target
3. resolve the earliest date for targets that need a fresh date prefix
4. resolve collisions against everything already on disk
5. decide which final paths need frontmatter
6. scan the repo for literal references to renamed paths

INVARIANT: a compliant repository yields an empty plan, and planning an
unchanged repository twice yields the same actions.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from simpledoc.config.models import FrontmatterDefaults
from simpledoc.domain import references
from simpledoc.domain.actions import (
    FrontmatterAction,
    MigrationAction,
    ReferenceUpdateAction,
    RenameAction,
)
from simpledoc.domain.classifier import (
    DEFAULT_DOCS_ROOT,
    DocClassification,
    DocKind,
    DocLocation,
    classify,
    normalize_docs_root,
)
from simpledoc.domain.frontmatter import has_frontmatter, title_from_markdown, title_from_slug
from simpledoc.domain.ignore import build_ignore_matcher
from simpledoc.domain.naming import (
    CaseMode,
    canonical_name_for,
    extract_date_prefix,
    is_all_lowercase_stem,
    is_markdown_document,
    reformat_stem,
    split_base_name,
    strip_date_prefix,
)
from simpledoc.errors import ConfigurationError, NamingExhaustedError
from simpledoc.infrastructure import filesystem
from simpledoc.infrastructure.git import GitClient
from simpledoc.infrastructure.history import HistoryLookup

logger = logging.getLogger(__name__)

# Suffixes tried by unique_target_path: -2 .. -9999.
MAX_NAME_SUFFIX = 10_000

ProgressCallback = Callable[[str, int, int], None]

PHASE_DISCOVER = "discover"
PHASE_HISTORY = "history"
PHASE_REFERENCES = "references"


def _normalize_rel_path(path: str) -> str:
    normalized = path.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class PlanOptions(BaseModel):
    """Inputs to :func:`plan_migration`.

    Every gate defaults to on. Paths in the override and force collections
    are repo-relative; ``./`` prefixes and backslashes are normalized.
    """

    model_config = {"frozen": True}

    cwd: Path = Field(default_factory=Path.cwd)
    docs_root: str = DEFAULT_DOCS_ROOT
    ignore_globs: tuple[str, ...] = ()
    move_root_markdown_to_docs: bool = True
    rename_docs_to_date_prefix: bool = True
    add_frontmatter: bool = True
    normalize_date_prefixed_docs: bool = True
    include_canonical_renames: bool = True
    rename_case_overrides: dict[str, CaseMode] = Field(default_factory=dict)
    force_date_prefix_paths: frozenset[str] = frozenset()
    force_undated_paths: frozenset[str] = frozenset()
    frontmatter_defaults: FrontmatterDefaults = Field(default_factory=FrontmatterDefaults)
    author: str | None = None

    @field_validator("docs_root")
    @classmethod
    def _normalize_docs_root(cls, value: str) -> str:
        return normalize_docs_root(value)

    @field_validator("rename_case_overrides")
    @classmethod
    def _normalize_override_keys(cls, value: dict[str, CaseMode]) -> dict[str, CaseMode]:
        return {_normalize_rel_path(k): v for k, v in value.items()}

    @field_validator("force_date_prefix_paths", "force_undated_paths")
    @classmethod
    def _normalize_paths(cls, value: frozenset[str]) -> frozenset[str]:
        return frozenset(_normalize_rel_path(p) for p in value)

    def is_explicit(self, rel_path: str) -> bool:
        """Whether the caller named *rel_path* in an override or force list."""
        return (
            rel_path in self.rename_case_overrides
            or rel_path in self.force_date_prefix_paths
            or rel_path in self.force_undated_paths
        )


@dataclass(frozen=True)
class MigrationPlan:
    """Immutable result of :func:`plan_migration`."""

    repo_root: Path
    tracked_paths: frozenset[str]
    working_tree_dirty: bool
    docs_root: str = DEFAULT_DOCS_ROOT
    actions: tuple[MigrationAction, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.actions

    def with_actions(self, actions: Iterable[MigrationAction]) -> MigrationPlan:
        """Same repository snapshot, different action list."""
        return replace(self, actions=tuple(actions))


@dataclass(frozen=True)
class _Intent:
    """Where a candidate should go, before dates and collisions are known."""

    directory: str
    base_name: str
    add_date: bool


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------


def unique_target_path(preferred: str, occupied: set[str] | frozenset[str]) -> str:
    """First free path among ``preferred``, ``name-2.ext``, ``name-3.ext``, ...

    Raises:
        NamingExhaustedError: every suffix up to the bound is taken.
    """
    if preferred not in occupied:
        return preferred
    directory = posixpath.dirname(preferred)
    stem, ext = split_base_name(posixpath.basename(preferred))
    for i in range(2, MAX_NAME_SUFFIX):
        candidate = posixpath.join(directory, f"{stem}-{i}{ext}")
        if candidate not in occupied:
            return candidate
    msg = f"Unable to find a unique filename for: {preferred}"
    raise NamingExhaustedError(msg)


def _is_date_only(classification: DocClassification) -> bool:
    stem, _ext = split_base_name(classification.base_name)
    return stem == classification.date_prefix


def _check_forced_overlap(options: PlanOptions) -> None:
    overlap = options.force_date_prefix_paths & options.force_undated_paths
    if overlap:
        listed = ", ".join(sorted(overlap))
        msg = f"Paths cannot be both force-dated and force-undated: {listed}"
        raise ConfigurationError(msg)


def _is_root_candidate(base_name: str) -> bool:
    if not is_markdown_document(base_name):
        return False
    return (
        canonical_name_for(base_name) is not None
        or extract_date_prefix(base_name) is not None
        or is_all_lowercase_stem(base_name)
    )


# ---------------------------------------------------------------------------
# Target decisions
# ---------------------------------------------------------------------------


def _desired_intent(c: DocClassification, options: PlanOptions) -> _Intent | None:
    """Decide the target for one candidate, or None to leave it in place."""
    path = c.rel_path
    mode = options.rename_case_overrides.get(path, c.desired_case_mode)
    explicit = options.is_explicit(path)
    force_date = path in options.force_date_prefix_paths
    force_undated = path in options.force_undated_paths
    directory = posixpath.dirname(path)

    match c.kind:
        case DocKind.CANONICAL | DocKind.CAPITALIZED_OTHER:
            if not options.include_canonical_renames and not explicit:
                return None
            return _Intent(directory, reformat_stem(c.base_name, mode), add_date=force_date)

        case DocKind.DATE_PREFIXED:
            if c.location is DocLocation.ROOT:
                if not options.move_root_markdown_to_docs:
                    return None
                directory = options.docs_root
            if force_undated:
                return _Intent(directory, reformat_stem(strip_date_prefix(c.base_name), mode), False)
            if _is_date_only(c):
                return _Intent(directory, c.base_name, False)
            if options.normalize_date_prefixed_docs or path in options.rename_case_overrides:
                return _Intent(directory, reformat_stem(c.base_name, mode), False)
            return _Intent(directory, c.base_name, False)

        case DocKind.REGULAR:
            base = reformat_stem(c.base_name, mode)
            if c.location is DocLocation.ROOT:
                if not options.move_root_markdown_to_docs:
                    return None
                return _Intent(options.docs_root, base, add_date=not force_undated)
            if force_undated:
                return _Intent(directory, base, False)
            if force_date or (options.rename_docs_to_date_prefix and c.should_add_date_prefix):
                return _Intent(directory, base, True)
            if path in options.rename_case_overrides:
                return _Intent(directory, base, False)
            return None

    return None


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def _report(on_progress: ProgressCallback | None, phase: str, current: int, total: int) -> None:
    if on_progress is not None:
        on_progress(phase, current, total)


def _discover_candidates(
    repo_root: Path,
    existing: Sequence[str],
    docs_root: str,
    is_ignored: Callable[[str], bool],
) -> list[str]:
    root_markdown = [name for name in filesystem.list_root_files(repo_root) if _is_root_candidate(name)]
    docs_prefix = f"{docs_root}/"
    docs_markdown = [
        p for p in existing if p.startswith(docs_prefix) and is_markdown_document(posixpath.basename(p))
    ]
    ordered = dict.fromkeys([*root_markdown, *docs_markdown])
    return [p for p in ordered if not is_ignored(p)]


def _resolve_collisions(
    desired: dict[str, str],
    existing: Iterable[str],
) -> list[RenameAction]:
    """Turn desired targets into collision-free rename actions, in order."""
    pending = [(src, dst) for src, dst in desired.items() if src != dst]
    sources = {src for src, _dst in pending}
    occupied = {p for p in existing if p not in sources}
    renames: list[RenameAction] = []
    for source, target in pending:
        final = unique_target_path(target, occupied)
        occupied.add(final)
        if final != target:
            logger.debug("Target %s taken; using %s", target, final)
        renames.append(RenameAction(from_path=source, to_path=final))
    return renames


def _plan_frontmatter(
    repo_root: Path,
    candidates: Sequence[str],
    rename_map: dict[str, str],
    options: PlanOptions,
    history: HistoryLookup,
) -> list[FrontmatterAction]:
    defaults = options.frontmatter_defaults
    fixed_author = options.author or defaults.author

    pending: list[tuple[str, str, str, str]] = []
    for source in candidates:
        target = rename_map.get(source, source)
        target_base = posixpath.basename(target)
        date = extract_date_prefix(target_base)
        if date is None:
            continue
        # Read the source: the target may not exist yet, or may still be
        # another file that leaves it in a rename cycle.
        content = filesystem.read_text(repo_root, source)
        if not content or has_frontmatter(content):
            continue
        title = title_from_markdown(content) or defaults.apply_title_prefix(title_from_slug(target_base))
        pending.append((source, target, date, title))

    if fixed_author is None:
        history.prefetch(source for source, _t, _d, _title in pending)

    return [
        FrontmatterAction(
            path=target,
            title=title,
            author=fixed_author or history.earliest_info(source).author,
            date=date,
            tags=defaults.tags,
        )
        for source, target, date, title in pending
    ]


def _plan_references(
    git: GitClient,
    repo_root: Path,
    renames: Sequence[RenameAction],
    existing: Sequence[str],
    tracked: frozenset[str],
    rename_map: dict[str, str],
    is_ignored: Callable[[str], bool],
    on_progress: ProgressCallback | None,
) -> list[ReferenceUpdateAction]:
    replacements = references.build_replacements(renames)
    pattern = references.build_pattern(replacements)
    if pattern is None:
        return []

    search_strings = list(dict.fromkeys(r.from_path for r in renames))
    scan = dict.fromkeys(git.grep_files_fixed(repo_root, search_strings))
    for rel_path in existing:
        if rel_path not in tracked:
            scan[rel_path] = None

    updates: list[ReferenceUpdateAction] = []
    total = len(scan)
    for index, rel_path in enumerate(scan, start=1):
        _report(on_progress, PHASE_REFERENCES, index, total)
        if is_ignored(rel_path):
            continue
        content = filesystem.read_small_text_file(repo_root, rel_path)
        if not content:
            continue
        count = references.count_matches(content, pattern)
        if count:
            updates.append(
                ReferenceUpdateAction(path=rename_map.get(rel_path, rel_path), match_count=count)
            )
    return updates


def plan_migration(
    options: PlanOptions | None = None,
    *,
    git: GitClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> MigrationPlan:
    """Inspect the repository containing ``options.cwd`` and plan a migration.

    Args:
        options: Gates, overrides and defaults; all gates on when omitted.
        git: Client to use; a fresh one with the default concurrency if None.
        on_progress: Called with ``(phase, current, total)`` as work proceeds.

    Raises:
        ConfigurationError: a path is both force-dated and force-undated.
        GitError: ``options.cwd`` is not inside a git repository.
        NamingExhaustedError: no free name for a rename target.
    """
    options = options or PlanOptions()
    _check_forced_overlap(options)
    git = git or GitClient()

    repo_root = git.repo_root(options.cwd)
    dirty = git.is_dirty(repo_root)
    tracked = frozenset(git.list_tracked_files(repo_root))
    existing = [p for p in git.list_repo_files(repo_root) if filesystem.exists(repo_root, p)]
    is_ignored = build_ignore_matcher(options.ignore_globs)
    docs_root = options.docs_root

    candidates = _discover_candidates(repo_root, existing, docs_root, is_ignored)
    logger.debug("Discovered %d candidate documents under %s", len(candidates), repo_root)

    intents: dict[str, _Intent] = {}
    total = len(candidates)
    for index, rel_path in enumerate(candidates, start=1):
        _report(on_progress, PHASE_DISCOVER, index, total)
        intent = _desired_intent(classify(rel_path, docs_root), options)
        if intent is not None:
            intents[rel_path] = intent

    history = HistoryLookup(git, repo_root, tracked)
    dated = [p for p, intent in intents.items() if intent.add_date]
    _report(on_progress, PHASE_HISTORY, 0, len(dated))
    history.prefetch(dated)
    _report(on_progress, PHASE_HISTORY, len(dated), len(dated))

    desired: dict[str, str] = {}
    for rel_path, intent in intents.items():
        base = intent.base_name
        if intent.add_date:
            base = f"{history.earliest_info(rel_path).date}-{base}"
        desired[rel_path] = posixpath.join(intent.directory, base)

    renames = _resolve_collisions(desired, existing)
    rename_map = {r.from_path: r.to_path for r in renames}

    actions: list[MigrationAction] = list(renames)
    if options.add_frontmatter:
        actions.extend(_plan_frontmatter(repo_root, candidates, rename_map, options, history))
    actions.extend(
        _plan_references(git, repo_root, renames, existing, tracked, rename_map, is_ignored, on_progress)
    )

    logger.debug("Planned %d actions", len(actions))
    return MigrationPlan(
        repo_root=repo_root,
        tracked_paths=tracked,
        working_tree_dirty=dirty,
        docs_root=docs_root,
        actions=tuple(actions),
    )
