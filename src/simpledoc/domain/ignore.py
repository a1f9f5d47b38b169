"""Glob-style ignore patterns for repo-relative paths.

Supported syntax:

- ``*`` matches within one path segment
- ``?`` matches one character other than ``/``
- ``**`` matches across segments; ``**/`` also matches zero directories
- a trailing ``/**`` matches the directory itself and everything below it
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence


def _glob_source(pattern: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "*":
            if pattern[i + 1 : i + 2] == "*":
                if pattern[i + 2 : i + 3] == "/":
                    out.append("(?:.*/)?")
                    i += 3
                else:
                    out.append(".*")
                    i += 2
                continue
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile one glob pattern into an anchored regex."""
    normalized = pattern.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    normalized = normalized.rstrip("/")
    if normalized.endswith("/**"):
        return re.compile(f"^{_glob_source(normalized[:-3])}(?:/.*)?$")
    return re.compile(f"^{_glob_source(normalized)}$")


def build_ignore_matcher(patterns: Sequence[str]) -> Callable[[str], bool]:
    """Return a predicate that is True for paths matching any pattern."""
    regexes = [glob_to_regex(p) for p in patterns if p.strip()]
    if not regexes:
        return lambda _path: False

    def matches(rel_path: str) -> bool:
        normalized = rel_path.replace("\\", "/")
        return any(regex.match(normalized) for regex in regexes)

    return matches
