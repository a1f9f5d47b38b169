"""Tests for frontmatter detection, titles, and rendering."""

from __future__ import annotations

import pytest
from ruamel.yaml import YAML

from simpledoc.domain.frontmatter import (
    has_frontmatter,
    prepend_frontmatter,
    render_frontmatter,
    title_from_markdown,
    title_from_slug,
    yaml_quote,
)


def _load_block(block: str) -> dict:
    """Parse the YAML between the two fences."""
    body = block.split("---\n")[1]
    return YAML(typ="safe").load(body)


class TestHasFrontmatter:
    @pytest.mark.parametrize(
        "content",
        [
            "---\ntitle: x\n---\nbody",
            "---\r\ntitle: x\r\n---\r\nbody",
            "\ufeff---\na: 1\n---\n",
            "---\na: 1\n---",
        ],
    )
    def test_detected(self, content: str) -> None:
        assert has_frontmatter(content)

    @pytest.mark.parametrize(
        "content",
        ["# Title\n", "---\nunterminated\n", "", "text\n---\na: 1\n---\n", "---\na: 1\n----\n"],
    )
    def test_not_detected(self, content: str) -> None:
        assert not has_frontmatter(content)


class TestTitles:
    def test_heading_after_blank_lines(self) -> None:
        assert title_from_markdown("\n\n#  Spaced  \n\nBody") == "Spaced"

    def test_heading_must_lead(self) -> None:
        assert title_from_markdown("Intro\n# Later\n") is None

    def test_second_level_is_not_a_title(self) -> None:
        assert title_from_markdown("## Sub\n") is None

    def test_bom_ignored(self) -> None:
        assert title_from_markdown("\ufeff# Bom\n") == "Bom"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("2024-03-02-some-doc.md", "Some Doc"),
            ("2024-03-02.md", "Untitled"),
            ("my_great file.mdx", "My Great File"),
            ("RFC-6902.md", "RFC 6902"),
        ],
    )
    def test_title_from_slug(self, name: str, expected: str) -> None:
        assert title_from_slug(name) == expected


class TestRender:
    def test_quote_escapes(self) -> None:
        assert yaml_quote('say "hi"') == '"say \\"hi\\""'
        assert yaml_quote("a\\b") == '"a\\\\b"'
        assert yaml_quote("line1\nline2") == '"line1 line2"'

    def test_exact_block(self) -> None:
        block = render_frontmatter(
            title="Hello", author="Alice <alice@example.com>", date="2024-03-02"
        )
        assert block == (
            "---\n"
            'title: "Hello"\n'
            'author: "Alice <alice@example.com>"\n'
            'date: "2024-03-02"\n'
            "---\n"
        )

    def test_tags_and_empty_author(self) -> None:
        block = render_frontmatter(title="T", author="  ", date="2024-03-02", tags=("alpha", "beta"))
        assert "author:" not in block
        assert 'tags: ["alpha", "beta"]' in block

    def test_block_is_valid_yaml(self) -> None:
        title = 'say "hi" \\ there: #1'
        block = render_frontmatter(
            title=title, author="Bob <b@example.com>", date="2024-03-02", tags=("x",)
        )
        data = _load_block(block)
        assert data == {
            "title": title,
            "author": "Bob <b@example.com>",
            "date": "2024-03-02",
            "tags": ["x"],
        }


class TestPrepend:
    BLOCK = '---\ntitle: "T"\n---\n'

    def test_single_blank_line(self) -> None:
        assert prepend_frontmatter("# Hello\n", self.BLOCK) == self.BLOCK + "\n# Hello\n"

    def test_existing_blank_line_reused(self) -> None:
        assert prepend_frontmatter("\n# Hello\n", self.BLOCK) == self.BLOCK + "\n# Hello\n"

    def test_bom_dropped(self) -> None:
        assert prepend_frontmatter("\ufeffBody", self.BLOCK) == self.BLOCK + "\nBody"

    def test_crlf_body_gets_crlf_block(self) -> None:
        assert prepend_frontmatter("Body\r\nmore\r\n", self.BLOCK) == (
            '---\r\ntitle: "T"\r\n---\r\n\r\nBody\r\nmore\r\n'
        )

    def test_crlf_leading_blank_line_reused(self) -> None:
        assert prepend_frontmatter("\r\nBody\r\n", self.BLOCK) == '---\r\ntitle: "T"\r\n---\r\n\r\nBody\r\n'
