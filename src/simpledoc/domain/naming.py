"""Naming rules — Markdown detection, date prefixes, canonical names, re-casing.

All functions here are pure: they look at a base name (``"Develop.md"``),
never at the filesystem.

Two case modes exist:

- ``lowercase``: ``2024-01-15-some-slug.md`` (dash-delimited, Unicode letters kept)
- ``capitalized``: ``SOME_SLUG.md`` (underscore-delimited, upper-cased)

INVARIANT: re-casing never touches a leading ``YYYY-MM-DD`` token and is
idempotent: reformatting an already-reformatted name returns it unchanged.
"""

from __future__ import annotations

import re
from enum import StrEnum


class CaseMode(StrEnum):
    """Desired filename casing for a document."""

    LOWERCASE = "lowercase"
    CAPITALIZED = "capitalized"


MARKDOWN_EXTENSIONS = frozenset({".md", ".mdx"})

# Stems (normalized to lowercase underscore form) that are "timeless" docs.
CANONICAL_STEMS: frozenset[str] = frozenset(
    {
        "readme",
        "agents",
        "install",
        "ideas",
        "todo",
        "principles",
        "relevant",
        "review_prompt",
        "jsend",
        "contributing",
        "code_of_conduct",
        "security",
        "support",
        "changelog",
        "history",
        "news",
        "notice",
        "authors",
        "contributors",
        "maintainers",
        "governance",
        "license",
        "licenses",
        "copying",
        "copyright",
        "patents",
        "third_party_notices",
        "faq",
        "roadmap",
    }
)

_RFC_RE = re.compile(r"^rfc[-_ ]?[0-9]+", re.IGNORECASE)
_DATE_PREFIX_RE = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2})(?:$|[-_\s])")
_DATE_PREFIXED_STEM_RE = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2})(?:[-_\s]+(.*))?$", re.DOTALL)

UNTITLED = "untitled"


def split_base_name(base_name: str) -> tuple[str, str]:
    """Split ``"Some Doc.MD"`` into ``("Some Doc", ".md")``.

    The extension is lower-cased; a name without a dot has an empty extension.
    """
    dot = base_name.rfind(".")
    if dot == -1:
        return base_name, ""
    return base_name[:dot], base_name[dot:].lower()


def is_markdown_document(base_name: str) -> bool:
    """Whether *base_name* carries a Markdown extension (case-insensitive)."""
    _stem, ext = split_base_name(base_name)
    return ext in MARKDOWN_EXTENSIONS


def extract_date_prefix(base_name: str) -> str | None:
    """Return the leading ``YYYY-MM-DD`` of the stem, or None.

    The date must be followed by the end of the stem or a separator
    (``-``, ``_`` or whitespace). The token is a label: ``9999-99-99``
    is accepted.

    Examples:
        >>> extract_date_prefix("2024-06-01_test-file.md")
        '2024-06-01'
        >>> extract_date_prefix("2024-06-01.md")
        '2024-06-01'
        >>> extract_date_prefix("20240601-notes.md") is None
        True
    """
    stem, _ext = split_base_name(base_name)
    match = _DATE_PREFIX_RE.match(stem)
    return match.group(1) if match else None


def is_all_caps_stem(base_name: str) -> bool:
    """At least one uppercase letter and no lowercase letter in the stem."""
    stem, _ext = split_base_name(base_name)
    return any(ch.isupper() for ch in stem) and not any(ch.islower() for ch in stem)


def is_all_lowercase_stem(base_name: str) -> bool:
    """At least one lowercase letter and no uppercase letter in the stem."""
    stem, _ext = split_base_name(base_name)
    return any(ch.islower() for ch in stem) and not any(ch.isupper() for ch in stem)


# ---------------------------------------------------------------------------
# Stem normalization
# ---------------------------------------------------------------------------


def _canonical_key(stem: str) -> str:
    key = stem.strip().lower()
    key = re.sub(r"[\s-]+", "_", key)
    key = re.sub(r"_+", "_", key)
    return key.strip("_")


def _lowercase_stem(stem: str) -> str:
    text = stem.strip().lower()
    text = re.sub(r"[\s_]+", "-", text)
    # \w minus underscore: Unicode letters and digits
    text = re.sub(r"[^\w-]|_", "", text)
    text = re.sub(r"-+", "-", text)
    return text.strip("-")


def _capitalized_stem(stem: str) -> str:
    text = stem.strip().lower()
    text = re.sub(r"[\s-]+", "_", text)
    text = re.sub(r"[^\w]", "", text)
    text = re.sub(r"_+", "_", text)
    return text.strip("_").upper()


def _recase(stem: str, mode: CaseMode) -> str:
    if mode is CaseMode.CAPITALIZED:
        return _capitalized_stem(stem)
    return _lowercase_stem(stem)


def _fallback(mode: CaseMode) -> str:
    return UNTITLED.upper() if mode is CaseMode.CAPITALIZED else UNTITLED


def canonical_name_for(base_name: str) -> str | None:
    """Return the canonical SNAKE_CASE name for a well-known doc, or None.

    Examples:
        >>> canonical_name_for("readme.md")
        'README.md'
        >>> canonical_name_for("Code-Of-Conduct.MD")
        'CODE_OF_CONDUCT.md'
        >>> canonical_name_for("RFC-6902-JSON-Patch.md")
        'RFC_6902_JSON_PATCH.md'
        >>> canonical_name_for("notes.md") is None
        True
    """
    if not is_markdown_document(base_name):
        return None
    stem, ext = split_base_name(base_name)
    if _canonical_key(stem) in CANONICAL_STEMS or _RFC_RE.match(stem):
        return f"{_capitalized_stem(stem)}{ext}"
    return None


def reformat_stem(base_name: str, mode: CaseMode) -> str:
    """Re-case a base name, keeping any ``YYYY-MM-DD-`` prefix verbatim.

    Examples:
        >>> reformat_stem("Develop.md", CaseMode.LOWERCASE)
        'develop.md'
        >>> reformat_stem("2024-06-01_test-file.md", CaseMode.CAPITALIZED)
        '2024-06-01-TEST_FILE.md'
        >>> reformat_stem("2024-06-01.md", CaseMode.LOWERCASE)
        '2024-06-01-untitled.md'
    """
    stem, ext = split_base_name(base_name)
    dated = _DATE_PREFIXED_STEM_RE.match(stem)
    if dated:
        rest = (dated.group(2) or "").strip() or _fallback(mode)
        return f"{dated.group(1)}-{_recase(rest, mode) or _fallback(mode)}{ext}"
    return f"{_recase(stem, mode)}{ext}"


def strip_date_prefix(base_name: str) -> str:
    """Drop a leading date token and its separator from *base_name*.

    A name that is only a date becomes ``untitled`` with the same extension.
    """
    stem, ext = split_base_name(base_name)
    dated = _DATE_PREFIXED_STEM_RE.match(stem)
    if not dated:
        return base_name
    rest = (dated.group(2) or "").strip()
    return f"{rest or UNTITLED}{ext}"
