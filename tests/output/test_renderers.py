"""Tests for result formatting and Rich renderers."""

from __future__ import annotations

import json

from simpledoc.output.console import style_for_action
from simpledoc.output.formatters import OutputSettings, format_result
from simpledoc.output.renderers import (
    MAX_PREVIEW_LINES,
    limit_lines,
    render_quiet,
    render_result,
    render_steps,
)
from simpledoc.services.result import ServiceResult

STEPS = [
    {
        "kind": "dated_renames",
        "title": "Fix dated/lowercase doc filenames",
        "actions": ["- rename: docs/Develop.md -> docs/2024-01-15-develop.md"],
    },
    {
        "kind": "references",
        "title": "Update references to renamed doc filenames",
        "actions": ["- update references: README.md (1)"],
    },
]


class TestLimitLines:
    def test_short_list_unchanged(self) -> None:
        assert limit_lines(["a", "b"]) == ["a", "b"]

    def test_truncated_with_marker(self) -> None:
        lines = [f"- rename: {i}" for i in range(MAX_PREVIEW_LINES + 5)]
        limited = limit_lines(lines)
        assert len(limited) == MAX_PREVIEW_LINES + 1
        assert limited[-1] == "- …and 5 more"


class TestRenderers:
    def test_steps(self) -> None:
        text = render_steps(STEPS)
        assert text.startswith("Planned changes:")
        assert "Step 1: Fix dated/lowercase doc filenames (1)" in text
        assert "Step 2: Update references to renamed doc filenames (1)" in text

    def test_quiet(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="check")) == "OK: check"
        failed = ServiceResult.failure("migrate", "CANCELLED", "Operation cancelled.")
        assert render_quiet(failed) == "ERROR: migrate - Operation cancelled."

    def test_check_failure(self) -> None:
        result = ServiceResult.failure(
            "check",
            "CHECK_FAILED",
            "SimpleDoc check failed. Run `simpledoc migrate` to fix.",
            detail={"summary": ["Rename/move Markdown files: 1 file"], "steps": STEPS},
        )
        text = render_result(result)
        assert text.startswith("ERROR  check - SimpleDoc check failed.")
        assert "- Rename/move Markdown files: 1 file" in text
        assert "- rename: docs/Develop.md -> docs/2024-01-15-develop.md" in text

    def test_migrate_applied(self) -> None:
        result = ServiceResult(
            ok=True,
            op="migrate",
            data={
                "count": 2,
                "applied": True,
                "steps": STEPS,
                "summary": ["Rename/move Markdown files: 1 file"],
                "message": "Done.",
            },
        )
        text = render_result(result)
        assert "applied 2 actions" in text
        assert text.endswith("Done.")

    def test_migrate_preview(self) -> None:
        result = ServiceResult(ok=True, op="migrate", data={"count": 2, "applied": False, "steps": STEPS})
        text = render_result(result)
        assert "dry run, nothing changed" in text
        assert "Planned changes:" in text

    def test_verbose_meta(self) -> None:
        result = ServiceResult(
            ok=True, op="check", data={"message": "ok"}, meta={"repo_root": "/repo"}
        )
        assert "repo_root: /repo" in render_result(result, verbose=True)
        assert "repo_root" not in render_result(result)

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="other", data={"docs_root": "docs", "items": [1]})
        text = render_result(result)
        assert "docs_root: docs" in text
        assert "items: [1]" in text


class TestFormatResult:
    def test_json_wins(self) -> None:
        result = ServiceResult(ok=True, op="check", data={"count": 0})
        text = format_result(result, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(text)["data"] == {"count": 0}

    def test_quiet(self) -> None:
        result = ServiceResult(ok=True, op="check")
        assert format_result(result, settings=OutputSettings(quiet=True)) == "OK: check"


class TestStyles:
    def test_action_styles(self) -> None:
        assert style_for_action("- rename: a -> b") == "sd.action.rename"
        assert style_for_action("- update references: README.md (2)") == "sd.action.references"
        assert style_for_action("- …and 3 more") == ""
