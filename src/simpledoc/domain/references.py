"""Reference rewriting — map old document paths to new ones inside text.

Each rename contributes three literal variants: ``docs/a.md``,
``./docs/a.md`` and ``../docs/a.md``. The search regex is an alternation
ordered longest-first so that a longer variant is never shadowed by one
of its prefixes.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from simpledoc.domain.actions import RenameAction

_VARIANT_PREFIXES = ("", "./", "../")


def build_replacements(renames: Iterable[RenameAction]) -> dict[str, str]:
    """Literal replacement map covering every path variant of every rename."""
    replacements: dict[str, str] = {}
    for rename in renames:
        for prefix in _VARIANT_PREFIXES:
            replacements[f"{prefix}{rename.from_path}"] = f"{prefix}{rename.to_path}"
    return replacements


def build_pattern(replacements: dict[str, str]) -> re.Pattern[str] | None:
    """Longest-first alternation over the map's keys, or None when empty."""
    if not replacements:
        return None
    keys = sorted(replacements, key=len, reverse=True)
    return re.compile("|".join(re.escape(k) for k in keys))


def count_matches(content: str, pattern: re.Pattern[str]) -> int:
    return sum(1 for _ in pattern.finditer(content))


def rewrite(content: str, pattern: re.Pattern[str], replacements: dict[str, str]) -> str:
    """Substitute every match with its mapped replacement."""
    return pattern.sub(lambda m: replacements.get(m.group(0), m.group(0)), content)
