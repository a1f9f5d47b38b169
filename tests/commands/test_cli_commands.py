"""Tests for the check and migrate commands through the Click runner."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from conftest import GitRepo
from simpledoc.cli import cli
from simpledoc.commands._context import AppContext


@pytest.fixture
def repo(git_repo: GitRepo, monkeypatch: pytest.MonkeyPatch) -> GitRepo:
    monkeypatch.chdir(git_repo.root)
    return git_repo


@pytest.fixture
def messy(repo: GitRepo) -> GitRepo:
    repo.write("README.md", "See docs/Develop.md\n")
    repo.write("docs/Develop.md", "# Develop\n")
    repo.commit_all(date="2024-01-15T09:00:00Z")
    return repo


@pytest.fixture
def clean(repo: GitRepo) -> GitRepo:
    repo.write("README.md", "# Project\n")
    repo.commit_all()
    return repo


class TestRootGroup:
    def test_help_lists_commands(self, cli_runner: CliRunner, repo: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output
        assert "migrate" in result.output

    def test_version(self, cli_runner: CliRunner, repo: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_examples(self, cli_runner: CliRunner, repo: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate", "--examples"])
        assert result.exit_code == 0
        assert "Examples for" in result.output
        assert "simpledoc migrate --dry-run" in result.output

    def test_examples_as_json(self, cli_runner: CliRunner, repo: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "--examples"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["command"].endswith(" check")
        assert data["examples"][0] == "simpledoc check"
        assert all(not line.startswith(" ") for line in data["examples"])

    def test_bad_config(self, cli_runner: CliRunner, repo: GitRepo) -> None:
        repo.write("simpledoc.json", "{oops")
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 1
        assert "Failed to read config" in result.stderr


class TestCheckCommand:
    def test_clean(self, cli_runner: CliRunner, clean: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0
        assert "OK" in result.output
        assert "repo matches SimpleDoc conventions" in result.output

    def test_violations(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 1
        assert "SimpleDoc check failed" in result.stderr
        assert "Planned changes:" in result.stderr
        assert "- rename: docs/Develop.md -> docs/2024-01-15-develop.md" in result.stderr
        assert "- update references: README.md (1)" in result.stderr

    def test_json_failure(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["--json", "check"])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "CHECK_FAILED"
        assert payload["error"]["detail"]["count"] == 3

    def test_json_success(self, cli_runner: CliRunner, clean: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["--json", "check"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["op"] == "check"

    def test_verbose_json_logs(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["-v", "--log-json", "check"])
        assert result.exit_code == 1
        lines = [json.loads(line) for line in result.stderr.splitlines() if line.startswith("{")]
        assert lines
        assert all(line["command"] == "check" for line in lines)
        assert any(line.get("git_args", [None])[0] == "ls-files" for line in lines)
        assert {line["phase"] for line in lines if "phase" in line} >= {"discover", "history"}

    def test_quiet(self, cli_runner: CliRunner, clean: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["-q", "check"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "OK: check"


class TestMigrateCommand:
    def test_dry_run(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate", "--dry-run"])
        assert result.exit_code == 0
        assert "dry run, nothing changed" in result.output
        assert "Step 1: Fix dated/lowercase doc filenames" in result.output
        assert messy.exists("docs/Develop.md")

    def test_requires_confirmation(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate"])
        assert result.exit_code == 1
        assert "--yes" in result.stderr
        assert messy.exists("docs/Develop.md")

    def test_yes_applies(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate", "--yes", "--author", "Zed <z@example.com>"])
        assert result.exit_code == 0
        assert "Done." in result.output
        assert messy.exists("docs/2024-01-15-develop.md")
        assert messy.read("README.md") == "See docs/2024-01-15-develop.md\n"

    def test_json_applies(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["--json", "migrate", "--yes"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["data"]["applied"] is True
        assert payload["data"]["count"] == 3

    def test_nothing_to_do(self, cli_runner: CliRunner, clean: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate", "--yes"])
        assert result.exit_code == 0
        assert "No migration needed." in result.output

    def test_dirty_tree(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        messy.write("scratch.txt", "wip\n")
        refused = cli_runner.invoke(cli, ["migrate", "--yes"])
        assert refused.exit_code == 1
        assert "dirty working tree" in refused.stderr

        forced = cli_runner.invoke(cli, ["migrate", "--yes", "--force"])
        assert forced.exit_code == 0
        assert messy.exists("docs/2024-01-15-develop.md")

    def test_dirty_dry_run_warns(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        messy.write("scratch.txt", "wip\n")
        result = cli_runner.invoke(cli, ["migrate", "--dry-run"])
        assert result.exit_code == 0
        assert "WARNING: Working tree is dirty" in result.stderr

    def test_case_flags(self, cli_runner: CliRunner, repo: GitRepo) -> None:
        repo.write("docs/TEST-FILE.md", "# Test\n")
        repo.commit_all()
        result = cli_runner.invoke(cli, ["migrate", "--yes", "--lowercase", "docs/TEST-FILE.md"])
        assert result.exit_code == 0
        assert repo.exists("docs/test-file.md")


class TestInteractiveConfirm:
    @pytest.fixture(autouse=True)
    def _force_interactive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(AppContext, "interactive", property(lambda self: True))

    def test_accept(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate"], input="y\n")
        assert result.exit_code == 0
        assert "Planned changes:" in result.output
        assert "Apply 3 change(s)?" in result.output
        assert messy.exists("docs/2024-01-15-develop.md")

    def test_decline(self, cli_runner: CliRunner, messy: GitRepo) -> None:
        result = cli_runner.invoke(cli, ["migrate"], input="n\n")
        assert result.exit_code == 1
        assert "Operation cancelled." in result.stderr
        assert messy.exists("docs/Develop.md")
