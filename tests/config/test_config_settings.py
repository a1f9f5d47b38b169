"""Tests for SimpleDocSettings and its source priority."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from simpledoc.config.settings import SimpleDocSettings
from simpledoc.errors import ConfigurationError


@pytest.fixture
def root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in ("SIMPLEDOC_CONFIG", "SIMPLEDOC_DOCS__ROOT"):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


def _config(root: Path, data: dict) -> None:
    (root / "simpledoc.json").write_text(json.dumps(data), encoding="utf-8")


class TestSimpleDocSettings:
    def test_defaults(self, root: Path) -> None:
        settings = SimpleDocSettings.from_cli(repo_root=root)
        assert settings.docs_root == "docs"
        assert settings.check.ignore == ()
        assert settings.frontmatter.defaults.author is None
        assert not settings.json_output

    def test_json_file(self, root: Path) -> None:
        _config(
            root,
            {
                "docs": {"root": "./documentation"},
                "frontmatter": {"defaults": {"author": "A <a@example.com>", "titlePrefix": "Note"}},
                "check": {"ignore": ["docs/gen/**"]},
                "unknownSection": {"x": 1},
            },
        )
        settings = SimpleDocSettings.from_cli(repo_root=root)
        assert settings.docs_root == "documentation"
        assert settings.frontmatter.defaults.title_prefix == "Note"
        assert settings.check.ignore == ("docs/gen/**",)

    def test_env_beats_file(self, root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _config(root, {"docs": {"root": "documentation"}})
        monkeypatch.setenv("SIMPLEDOC_DOCS__ROOT", "handbook")
        assert SimpleDocSettings.from_cli(repo_root=root).docs_root == "handbook"

    def test_cli_flags_win(self, root: Path) -> None:
        settings = SimpleDocSettings.from_cli(repo_root=root, json_output=True, quiet=True)
        assert settings.json_output
        assert settings.quiet

    def test_explicit_config_path(self, root: Path) -> None:
        _config(root, {"docs": {"root": "shared"}})
        other = root / "custom.json"
        other.write_text(json.dumps({"docs": {"root": "custom"}}), encoding="utf-8")
        settings = SimpleDocSettings.from_cli(repo_root=root, config_path=str(other))
        assert settings.config_path == other
        assert settings.docs_root == "custom"

    def test_invalid_value(self, root: Path) -> None:
        _config(root, {"check": {"ignore": 5}})
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            SimpleDocSettings.from_cli(repo_root=root)

    def test_docs_root_outside_repo(self, root: Path) -> None:
        _config(root, {"docs": {"root": "../elsewhere"}})
        with pytest.raises(ConfigurationError, match="inside the repository"):
            SimpleDocSettings.from_cli(repo_root=root)

    def test_malformed_file(self, root: Path) -> None:
        (root / "simpledoc.json").write_text("{", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to read config"):
            SimpleDocSettings.from_cli(repo_root=root)
