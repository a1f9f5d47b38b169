"""Git client — the version-control capability set the planner consumes.

Every subprocess goes through :meth:`GitClient._run_git`, which holds a
bounded semaphore so that at most ``max_concurrency`` git processes run
at once, however many threads ask. All reads are independent; ordering
between them is irrelevant.
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from simpledoc.domain.frontmatter import PLACEHOLDER_AUTHOR
from simpledoc.errors import GitError

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 4
# Patterns per ``git grep`` invocation, keeps argv well under OS limits.
GREP_CHUNK_SIZE = 64


@dataclass(frozen=True)
class FileMeta:
    """Earliest known date (``YYYY-MM-DD``) and author for a path."""

    date: str
    author: str


def _split_z(stdout: str) -> list[str]:
    return [p.strip() for p in stdout.split("\0") if p.strip()]


class GitClient:
    """Thin wrapper over the ``git`` binary.

    Methods take the working directory explicitly so one client can serve
    any repository; the concurrency limit is shared across all of them.
    """

    def __init__(self, *, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        self.max_concurrency = max(1, max_concurrency)
        self._slots = threading.BoundedSemaphore(self.max_concurrency)

    # ------------------------------------------------------------------
    # Subprocess helper
    # ------------------------------------------------------------------

    def _run_git(
        self,
        cwd: Path,
        *args: str,
        allow_exit_codes: Sequence[int] = (0,),
    ) -> subprocess.CompletedProcess[str]:
        """Run a git command in *cwd*. Raises GitError on a disallowed exit code."""
        command = ("git", "--no-pager", "-c", "color.ui=false", *args)
        logger.debug("git %s", " ".join(args), extra={"git_args": list(args), "cwd": str(cwd)})
        with self._slots:
            try:
                result = subprocess.run(
                    command,
                    cwd=cwd,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
                    check=False,
                )
            except OSError as exc:
                msg = f"Unable to run git: {exc}"
                raise GitError(msg, command=command) from exc
        if result.returncode not in allow_exit_codes:
            detail = (result.stderr or result.stdout).strip()
            msg = detail or f"git {' '.join(args)} failed with code {result.returncode}"
            raise GitError(msg, command=command, returncode=result.returncode)
        return result

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    def repo_root(self, cwd: Path) -> Path:
        """Top-level directory of the repository containing *cwd*."""
        try:
            result = self._run_git(cwd, "rev-parse", "--show-toplevel")
        except GitError as exc:
            msg = "Not a git repository (or git is not available)."
            raise GitError(msg, command=exc.command, returncode=exc.returncode) from exc
        root = result.stdout.strip()
        if not root:
            msg = "Not a git repository (or git is not available)."
            raise GitError(msg)
        return Path(root)

    def is_dirty(self, cwd: Path) -> bool:
        result = self._run_git(cwd, "status", "--porcelain")
        return bool(result.stdout.strip())

    def list_tracked_files(self, cwd: Path) -> list[str]:
        return _split_z(self._run_git(cwd, "ls-files", "-z").stdout)

    def list_repo_files(self, cwd: Path) -> list[str]:
        """Tracked plus untracked files, honouring ``.gitignore``."""
        result = self._run_git(
            cwd, "ls-files", "-z", "--cached", "--others", "--exclude-standard"
        )
        return _split_z(result.stdout)

    def creation_info(self, cwd: Path, rel_path: str) -> FileMeta | None:
        """Author and date of the oldest commit touching *rel_path*, following renames."""
        result = self._run_git(
            cwd, "log", "--follow", "--format=%aI\t%aN\t%aE", "--", rel_path
        )
        lines = [line for line in result.stdout.strip().splitlines() if line.strip()]
        if not lines:
            return None
        date_iso, _, rest = lines[-1].partition("\t")
        name, _, email = rest.partition("\t")
        if not date_iso:
            return None
        author = f"{name} <{email}>" if email else name
        return FileMeta(date=date_iso[:10], author=author or PLACEHOLDER_AUTHOR)

    def mv(self, cwd: Path, source: str, target: str) -> None:
        self._run_git(cwd, "mv", "--", source, target)

    def grep_files_fixed(self, cwd: Path, patterns: Sequence[str]) -> list[str]:
        """Tracked files containing any of *patterns* as a literal string."""
        found: dict[str, None] = {}
        for start in range(0, len(patterns), GREP_CHUNK_SIZE):
            chunk = patterns[start : start + GREP_CHUNK_SIZE]
            args = ["grep", "-l", "-F", "-z"]
            for pattern in chunk:
                args.extend(["-e", pattern])
            args.append("--")
            # Exit code 1 means no matches.
            result = self._run_git(cwd, *args, allow_exit_codes=(0, 1))
            for rel_path in _split_z(result.stdout):
                found[rel_path] = None
        return list(found)
