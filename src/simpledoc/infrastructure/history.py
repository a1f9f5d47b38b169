"""History lookup — earliest date and author per path, memoized.

One :class:`HistoryLookup` belongs to exactly one planning pass. Lookups
hit git only for tracked paths; anything else (or any git failure) falls
back to the filesystem birth time, or modification time where the
platform has no birth time, with a placeholder author.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path

from simpledoc.domain.frontmatter import PLACEHOLDER_AUTHOR
from simpledoc.errors import GitError
from simpledoc.infrastructure import filesystem
from simpledoc.infrastructure.git import FileMeta, GitClient

logger = logging.getLogger(__name__)


def filesystem_info(repo_root: Path, rel_path: str) -> FileMeta:
    """Date from the file's birth time (or mtime) with the placeholder author."""
    stat = filesystem.resolve(repo_root, rel_path).stat()
    birth = getattr(stat, "st_birthtime", None)
    timestamp = birth if birth else stat.st_mtime
    date = datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d")
    return FileMeta(date=date, author=PLACEHOLDER_AUTHOR)


class HistoryLookup:
    """Per-plan cache of :class:`FileMeta` keyed by repo-relative path.

    Parameters:
        git: Client used for history queries.
        repo_root: Absolute repository root.
        tracked: Paths known to git; only these are looked up in history.
    """

    def __init__(self, git: GitClient, repo_root: Path, tracked: frozenset[str]) -> None:
        self._git = git
        self._repo_root = repo_root
        self._tracked = tracked
        self._cache: dict[str, FileMeta] = {}

    def earliest_info(self, rel_path: str) -> FileMeta:
        """Earliest known date/author for *rel_path* (cached)."""
        cached = self._cache.get(rel_path)
        if cached is not None:
            return cached
        info = self._lookup(rel_path)
        self._cache[rel_path] = info
        return info

    def prefetch(self, rel_paths: Iterable[str]) -> None:
        """Resolve many paths concurrently, bounded by the git client's limit."""
        pending = [p for p in dict.fromkeys(rel_paths) if p not in self._cache]
        if not pending:
            return
        if len(pending) == 1:
            self.earliest_info(pending[0])
            return
        # Each worker writes its own cache slot. Workers run in a copy of the
        # caller's context so bound log fields follow the git calls.
        context = contextvars.copy_context()
        with ThreadPoolExecutor(max_workers=self._git.max_concurrency) as pool:
            futures = [pool.submit(context.copy().run, self.earliest_info, p) for p in pending]
            for future in futures:
                future.result()

    def _lookup(self, rel_path: str) -> FileMeta:
        if rel_path in self._tracked:
            try:
                info = self._git.creation_info(self._repo_root, rel_path)
            except GitError as exc:
                logger.debug("History lookup failed for %s: %s", rel_path, exc)
                info = None
            if info is not None:
                return info
        logger.debug("Using filesystem timestamps for %s", rel_path)
        return filesystem_info(self._repo_root, rel_path)
