"""Tests for the config section models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from simpledoc.config.models import CheckConfig, DocsConfig, FrontmatterConfig, FrontmatterDefaults


class TestFrontmatterDefaults:
    def test_alias_and_field_name(self) -> None:
        assert FrontmatterDefaults.model_validate({"titlePrefix": "Note"}).title_prefix == "Note"
        assert FrontmatterDefaults(title_prefix="Note").title_prefix == "Note"

    def test_blank_values_collapse(self) -> None:
        defaults = FrontmatterDefaults(author="   ", tags=(" a ", "", "  "), title_prefix=" ")
        assert defaults.author is None
        assert defaults.title_prefix is None
        assert defaults.tags == ("a",)

    def test_apply_title_prefix(self) -> None:
        assert FrontmatterDefaults(title_prefix="RFC").apply_title_prefix("Patch") == "RFC Patch"
        assert FrontmatterDefaults().apply_title_prefix("Patch") == "Patch"

    def test_frozen(self) -> None:
        defaults = FrontmatterDefaults()
        with pytest.raises(ValidationError):
            defaults.author = "x"  # type: ignore[misc]

    def test_nested_section(self) -> None:
        config = FrontmatterConfig.model_validate(
            {"defaults": {"author": "A <a@example.com>", "tags": ["x"]}}
        )
        assert config.defaults.author == "A <a@example.com>"
        assert config.defaults.tags == ("x",)


class TestOtherSections:
    def test_docs_default(self) -> None:
        assert DocsConfig().root == "docs"

    def test_check_ignore_drops_blank(self) -> None:
        assert CheckConfig(ignore=("docs/gen/**", " ", "")).ignore == ("docs/gen/**",)

    def test_wrong_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CheckConfig.model_validate({"ignore": 5})
