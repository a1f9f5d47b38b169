"""Filesystem operations on repo-relative POSIX paths.

The planner and applier speak in repo-relative POSIX paths (``docs/a.md``);
this module is the only place that turns them into absolute paths and
touches the disk.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path

logger = logging.getLogger(__name__)

# Files larger than this are never scanned or rewritten for references.
MAX_REFERENCE_FILE_BYTES = 1_000_000

REFERENCE_IGNORE_DIR_PREFIXES: tuple[str, ...] = (
    "node_modules/",
    "dist/",
    "dist-test/",
    "build/",
    ".git/",
)

REFERENCE_IGNORE_EXTENSIONS = frozenset(
    {
        ".7z",
        ".avi",
        ".bmp",
        ".class",
        ".dll",
        ".dmg",
        ".exe",
        ".gif",
        ".gz",
        ".ico",
        ".jar",
        ".jpeg",
        ".jpg",
        ".mkv",
        ".mov",
        ".mp3",
        ".mp4",
        ".o",
        ".otf",
        ".pdf",
        ".png",
        ".pyc",
        ".so",
        ".tar",
        ".tgz",
        ".tiff",
        ".ttf",
        ".webp",
        ".woff",
        ".woff2",
        ".zip",
    }
)


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def resolve(repo_root: Path, rel_path: str) -> Path:
    """Absolute path for a repo-relative POSIX path."""
    return repo_root.joinpath(*rel_path.split("/"))


def exists(repo_root: Path, rel_path: str) -> bool:
    return resolve(repo_root, rel_path).exists()


def list_root_files(repo_root: Path) -> list[str]:
    """Non-hidden regular files directly in the repository root, sorted."""
    return sorted(
        entry.name
        for entry in repo_root.iterdir()
        if entry.is_file() and not entry.name.startswith(".")
    )


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_exact(repo_root: Path, rel_path: str) -> str:
    """Read a UTF-8 file with its line endings untouched; errors propagate."""
    with resolve(repo_root, rel_path).open(encoding="utf-8", newline="") as fh:
        return fh.read()


def read_text(repo_root: Path, rel_path: str) -> str | None:
    """Like :func:`read_exact`, but None if the file vanished or cannot be decoded."""
    try:
        return read_exact(repo_root, rel_path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
        return None


def write_text(repo_root: Path, rel_path: str, content: str) -> None:
    """Write *content* verbatim (no newline translation); I/O errors propagate."""
    with resolve(repo_root, rel_path).open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def should_scan_for_references(rel_path: str) -> bool:
    """False for build-artifact directories and binary/media extensions."""
    if rel_path.startswith(REFERENCE_IGNORE_DIR_PREFIXES):
        return False
    _root, ext = posixpath.splitext(rel_path)
    return ext.lower() not in REFERENCE_IGNORE_EXTENSIONS


def read_small_text_file(repo_root: Path, rel_path: str) -> str | None:
    """Read a file eligible for reference rewriting.

    Returns None for skipped extensions/directories, files over
    :data:`MAX_REFERENCE_FILE_BYTES`, unreadable files, and files
    containing a NUL byte.
    """
    if not should_scan_for_references(rel_path):
        return None
    path = resolve(repo_root, rel_path)
    try:
        if path.stat().st_size > MAX_REFERENCE_FILE_BYTES:
            return None
    except OSError:
        return None
    content = read_text(repo_root, rel_path)
    if content is None or "\0" in content:
        return None
    return content


# ---------------------------------------------------------------------------
# Moves
# ---------------------------------------------------------------------------


def ensure_parent_dir(repo_root: Path, rel_path: str) -> None:
    resolve(repo_root, rel_path).parent.mkdir(parents=True, exist_ok=True)


def move(repo_root: Path, source: str, target: str) -> None:
    """Plain filesystem rename for untracked paths. Creates parent dirs."""
    ensure_parent_dir(repo_root, target)
    resolve(repo_root, source).rename(resolve(repo_root, target))
