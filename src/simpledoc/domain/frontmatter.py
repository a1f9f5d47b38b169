"""Frontmatter detection, title derivation, and YAML block rendering.

The block written by simpledoc is deliberately tiny and literal::

    ---
    title: "Some Doc"
    author: "Alice <alice@example.com>"
    date: "2024-03-02"
    tags: ["alpha", "beta"]
    ---

Keys appear in a fixed order; empty values are omitted.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from simpledoc.domain.naming import split_base_name

FRONTMATTER_KEY_ORDER: tuple[str, ...] = ("title", "author", "date", "tags")

PLACEHOLDER_AUTHOR = "Unknown <unknown@example.com>"

_BOM = "\ufeff"
_FENCE = "---"
_HEADING_RE = re.compile(r"^#\s+(.+?)\s*$")
_DATE_TOKEN_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}(?:[-_\s]+|$)")


def strip_bom(content: str) -> str:
    return content[1:] if content.startswith(_BOM) else content


def has_frontmatter(content: str) -> bool:
    """Whether *content* opens with a ``---`` fence closed by a second one."""
    text = strip_bom(content)
    if not (text.startswith("---\n") or text.startswith("---\r\n")):
        return False
    end = text.find("\n---", 4)
    if end == -1:
        return False
    after = text[end + 1 :]
    return after.startswith("---\n") or after.startswith("---\r\n") or after == _FENCE


def title_from_markdown(content: str) -> str | None:
    """First-level heading at the top of the document, if any.

    Only leading blank lines may precede the heading.
    """
    for line in strip_bom(content).splitlines():
        match = _HEADING_RE.match(line)
        if match:
            return match.group(1).strip()
        if line.strip():
            break
    return None


def title_from_slug(base_name: str) -> str:
    """Derive a title from a filename: ``2024-03-02-some-doc.md`` -> ``Some Doc``."""
    stem, _ext = split_base_name(base_name)
    stem = _DATE_TOKEN_RE.sub("", stem)
    words = [w for w in re.split(r"[-_\s]+", stem) if w]
    if not words:
        return "Untitled"
    return " ".join(w[0].upper() + w[1:] for w in words)


def yaml_quote(value: str) -> str:
    """Double-quote a scalar, escaping backslashes and quotes, flattening newlines."""
    text = re.sub(r"\r?\n", " ", str(value)).strip()
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def render_frontmatter(
    *,
    title: str,
    author: str,
    date: str,
    tags: Sequence[str] = (),
) -> str:
    """Render the frontmatter block, fences included, ending with a newline."""
    values: dict[str, str | Sequence[str]] = {
        "title": title,
        "author": author,
        "date": date,
        "tags": tags,
    }
    lines = [_FENCE]
    for key in FRONTMATTER_KEY_ORDER:
        value = values[key]
        if isinstance(value, str):
            if not value.strip():
                continue
            lines.append(f"{key}: {yaml_quote(value)}")
        elif value:
            lines.append(f"{key}: [{', '.join(yaml_quote(v) for v in value)}]")
    lines.append(_FENCE)
    return "\n".join(lines) + "\n"


def prepend_frontmatter(content: str, block: str) -> str:
    """Prepend *block* to *content* with exactly one blank line between them.

    A CRLF body gets a CRLF block so the file keeps a single line-ending style.
    """
    body = strip_bom(content)
    newline = "\r\n" if "\r\n" in body else "\n"
    if newline != "\n":
        block = block.replace("\n", newline)
    separator = "" if body.startswith(("\n", "\r\n")) else newline
    return f"{block}{separator}{body}"
