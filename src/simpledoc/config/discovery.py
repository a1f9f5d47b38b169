"""Config file discovery and loading.

Two files at the repository root, both optional:

- ``simpledoc.json``: committed, shared by everyone
- ``.simpledoc.local.json``: personal overrides, deep-merged on top

The repository root is the git toplevel of the start directory, falling
back to the start directory itself outside a repository. The
``SIMPLEDOC_CONFIG`` env var or ``--config`` flag names a single file
that replaces both.
"""

from __future__ import annotations

import json
import logging
import os
import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from simpledoc.errors import ConfigurationError, GitError
from simpledoc.infrastructure.git import GitClient

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "simpledoc.json"
LOCAL_CONFIG_FILENAME = ".simpledoc.local.json"
CONFIG_ENV_VAR = "SIMPLEDOC_CONFIG"


def find_repo_root(start: Path | None = None, git: GitClient | None = None) -> Path:
    """Git toplevel containing *start* (default: cwd), else *start* itself."""
    start = (start or Path.cwd()).resolve()
    try:
        return (git or GitClient()).repo_root(start)
    except GitError:
        logger.debug("No git repository at %s; using it as the root", start)
        return start


def read_config_file(path: Path) -> dict[str, Any] | None:
    """Parse one JSON config file. Missing or blank files yield None.

    Raises:
        ConfigurationError: the file is unreadable, not JSON, or not an object.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        msg = f"Failed to read config {path}: {exc}"
        raise ConfigurationError(msg) from exc
    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Failed to read config {path}: {exc}"
        raise ConfigurationError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Failed to read config {path}: Config must be a JSON object at the top level."
        raise ConfigurationError(msg)
    return data


def merge_config(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge *override* into *base*; nested objects merge, all else replaces."""
    merged = dict(base)
    for key, value in override.items():
        existing = merged.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            merged[key] = merge_config(existing, value)
        else:
            merged[key] = value
    return merged


def config_files(repo_root: Path, config_path: Path | None = None) -> list[Path]:
    """Config files to read, lowest priority first."""
    explicit = config_path
    if explicit is None and os.environ.get(CONFIG_ENV_VAR):
        explicit = Path(os.environ[CONFIG_ENV_VAR])
    if explicit is not None:
        return [explicit]
    return [repo_root / CONFIG_FILENAME, repo_root / LOCAL_CONFIG_FILENAME]


def load_config_data(repo_root: Path, config_path: Path | None = None) -> dict[str, Any]:
    """Merged raw config for *repo_root*; ``{}`` when no file exists."""
    data: dict[str, Any] = {}
    for path in config_files(repo_root, config_path):
        loaded = read_config_file(path)
        if loaded is not None:
            logger.debug("Loaded config from %s", path)
            data = merge_config(data, loaded)
    return data


def normalize_repo_path(value: str, repo_root: Path, *, fallback: str, label: str) -> str:
    """Turn a configured path into a repo-relative POSIX path.

    Absolute paths must lie inside *repo_root*. Blank values and ``.``
    yield *fallback*.

    Raises:
        ConfigurationError: the path escapes the repository.
    """
    text = value.strip()
    if not text:
        return fallback
    if Path(text).is_absolute():
        try:
            text = Path(text).resolve().relative_to(repo_root.resolve()).as_posix()
        except ValueError as exc:
            msg = f"{label} must be inside the repository: {value}"
            raise ConfigurationError(msg) from exc
    text = text.replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    text = posixpath.normpath(text.rstrip("/") or ".")
    if text in ("", "."):
        return fallback
    if text == ".." or text.startswith("../"):
        msg = f"{label} must be inside the repository: {value}"
        raise ConfigurationError(msg)
    return text
