"""Doc classifier — combine location and naming rules into one verdict.

Precedence (first match wins):

1. canonical name (README, LICENSE, RFC-*, ...)
2. date-prefixed
3. all-caps stem inside the docs root (``capitalized-other``)
4. regular

A canonical name is never date-prefixed, even inside the docs root.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import StrEnum

from simpledoc.domain.naming import (
    CaseMode,
    canonical_name_for,
    extract_date_prefix,
    is_all_caps_stem,
    is_markdown_document,
)
from simpledoc.errors import NotADocumentError

DEFAULT_DOCS_ROOT = "docs"


class DocLocation(StrEnum):
    """Where a document lives relative to the repository."""

    ROOT = "root"
    DOCS = "docs"
    OTHER = "other"


class DocKind(StrEnum):
    """Naming regime a document falls under."""

    CANONICAL = "canonical"
    DATE_PREFIXED = "date-prefixed"
    CAPITALIZED_OTHER = "capitalized-other"
    REGULAR = "regular"


@dataclass(frozen=True)
class DocClassification:
    """Classifier verdict for a single repo-relative path."""

    rel_path: str
    location: DocLocation
    base_name: str
    kind: DocKind
    date_prefix: str | None
    canonical_name: str | None
    desired_case_mode: CaseMode
    should_add_date_prefix: bool


def normalize_docs_root(docs_root: str | None) -> str:
    """Normalize a docs root setting to a bare POSIX relative path.

    Examples:
        >>> normalize_docs_root("./documentation/")
        'documentation'
        >>> normalize_docs_root(".")
        'docs'
    """
    normalized = (docs_root or DEFAULT_DOCS_ROOT).replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:].lstrip("/")
    normalized = normalized.rstrip("/")
    if not normalized or normalized == ".":
        return DEFAULT_DOCS_ROOT
    return normalized


def locate(rel_path: str, docs_root: str) -> DocLocation:
    """Place *rel_path* at the root, inside *docs_root*, or elsewhere."""
    if "/" not in rel_path:
        return DocLocation.ROOT
    if rel_path.startswith(f"{docs_root}/"):
        return DocLocation.DOCS
    return DocLocation.OTHER


def classify(rel_path: str, docs_root: str = DEFAULT_DOCS_ROOT) -> DocClassification:
    """Classify a repo-relative POSIX path.

    Raises:
        NotADocumentError: *rel_path* is not a Markdown file.
    """
    base_name = posixpath.basename(rel_path)
    if not is_markdown_document(base_name):
        msg = f"Expected a Markdown document, got: {rel_path}"
        raise NotADocumentError(msg)

    location = locate(rel_path, normalize_docs_root(docs_root))
    date_prefix = extract_date_prefix(base_name)
    canonical = canonical_name_for(base_name)

    if canonical is not None:
        kind = DocKind.CANONICAL
    elif date_prefix is not None:
        kind = DocKind.DATE_PREFIXED
    elif location is DocLocation.DOCS and is_all_caps_stem(base_name):
        kind = DocKind.CAPITALIZED_OTHER
    else:
        kind = DocKind.REGULAR

    if kind in (DocKind.CANONICAL, DocKind.CAPITALIZED_OTHER):
        mode = CaseMode.CAPITALIZED
    else:
        mode = CaseMode.LOWERCASE

    should_add_date_prefix = (
        mode is CaseMode.LOWERCASE
        and location is not DocLocation.OTHER
        and date_prefix is None
    )

    return DocClassification(
        rel_path=rel_path,
        location=location,
        base_name=base_name,
        kind=kind,
        date_prefix=date_prefix,
        canonical_name=canonical,
        desired_case_mode=mode,
        should_add_date_prefix=should_add_date_prefix,
    )
