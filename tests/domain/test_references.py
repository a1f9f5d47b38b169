"""Tests for reference rewriting."""

from __future__ import annotations

from simpledoc.domain.actions import RenameAction
from simpledoc.domain.references import (
    build_pattern,
    build_replacements,
    count_matches,
    rewrite,
)


def _rename(a: str, b: str) -> RenameAction:
    return RenameAction(from_path=a, to_path=b)


class TestReplacements:
    def test_three_variants(self) -> None:
        assert build_replacements([_rename("docs/a.md", "docs/b.md")]) == {
            "docs/a.md": "docs/b.md",
            "./docs/a.md": "./docs/b.md",
            "../docs/a.md": "../docs/b.md",
        }

    def test_empty_map_has_no_pattern(self) -> None:
        assert build_pattern({}) is None


class TestRewrite:
    def test_all_variants_counted_and_rewritten(self) -> None:
        replacements = build_replacements([_rename("docs/a.md", "docs/b.md")])
        pattern = build_pattern(replacements)
        assert pattern is not None
        content = "see docs/a.md, ./docs/a.md and ../docs/a.md"
        assert count_matches(content, pattern) == 3
        assert rewrite(content, pattern, replacements) == "see docs/b.md, ./docs/b.md and ../docs/b.md"

    def test_longest_match_wins(self) -> None:
        replacements = build_replacements(
            [_rename("docs/a.md", "docs/b.md"), _rename("docs/a.mdx", "docs/c.mdx")]
        )
        pattern = build_pattern(replacements)
        assert pattern is not None
        assert rewrite("[x](docs/a.mdx)", pattern, replacements) == "[x](docs/c.mdx)"

    def test_swap_is_single_pass(self) -> None:
        replacements = build_replacements(
            [_rename("docs/a.md", "docs/b.md"), _rename("docs/b.md", "docs/a.md")]
        )
        pattern = build_pattern(replacements)
        assert pattern is not None
        assert rewrite("docs/a.md docs/b.md", pattern, replacements) == "docs/b.md docs/a.md"

    def test_no_match_leaves_text(self) -> None:
        replacements = build_replacements([_rename("docs/a.md", "docs/b.md")])
        pattern = build_pattern(replacements)
        assert pattern is not None
        assert count_matches("nothing here", pattern) == 0
        assert rewrite("nothing here", pattern, replacements) == "nothing here"
