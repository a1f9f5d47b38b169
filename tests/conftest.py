"""Shared pytest fixtures and test helpers for simpledoc tests."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest
from click.testing import CliRunner

DEFAULT_AUTHOR = "Test Author <test@example.com>"


class GitRepo:
    """A throwaway git repository with helpers for writing and committing."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def git(self, *args: str, env: dict[str, str] | None = None) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
            check=True,
            env={**os.environ, **(env or {})},
        )
        return result.stdout.strip()

    def write(self, rel_path: str, content: str = "") -> Path:
        path = self.root.joinpath(*rel_path.split("/"))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def read(self, rel_path: str) -> str:
        return self.root.joinpath(*rel_path.split("/")).read_text(encoding="utf-8")

    def exists(self, rel_path: str) -> bool:
        return self.root.joinpath(*rel_path.split("/")).exists()

    def commit_all(
        self,
        message: str = "commit",
        *,
        date: str = "2024-01-01T12:00:00Z",
        author: str = DEFAULT_AUTHOR,
    ) -> None:
        """Stage everything and commit with a fixed author and date."""
        self.git("add", "-A")
        self.git(
            "commit",
            "-q",
            "-m",
            message,
            "--author",
            author,
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )

    def tracked(self) -> list[str]:
        return self.git("ls-files").splitlines()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitRepo:
    """Empty git repository isolated from the user's git configuration."""
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    for key in ("SIMPLEDOC_CONFIG", "SIMPLEDOC_DOCS__ROOT"):
        monkeypatch.delenv(key, raising=False)

    root = tmp_path / "repo"
    root.mkdir()
    root = root.resolve()
    repo = GitRepo(root)
    repo.git("init", "-q")
    repo.git("config", "user.name", "Test Committer")
    repo.git("config", "user.email", "committer@example.com")
    repo.git("config", "commit.gpgsign", "false")
    return repo
