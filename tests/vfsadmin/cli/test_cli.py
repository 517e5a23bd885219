"""Tests for the vfsadmin CLI."""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vfsadmin.cli.main import app
from vfsadmin.kernel.config import VFSAdminConfig
from vfsadmin.kernel.logging import configure_logging


@pytest.fixture
def runner():
    """Fixture providing a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def sqlite_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point the CLI at a throwaway SQLite store and restore logging afterwards."""
    monkeypatch.delenv("VFSADMIN_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VFSADMIN_STORAGE_BACKEND", "sqlite")
    monkeypatch.setenv("VFSADMIN_DB_PATH", str(tmp_path / "vfs.db"))
    monkeypatch.setenv("VFSADMIN_CONTENT_DIR", str(tmp_path / "blobs"))
    yield tmp_path
    # The CLI binds log sinks to the runner's streams; rebind to the real ones.
    configure_logging(level="WARNING", format="console", force_reconfigure=True)


class TestGlobalOptions:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "vfsadmin" in result.stdout

    def test_missing_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "fs", "ls"])
        assert result.exit_code == 2
        assert "not found" in result.output

    def test_invalid_log_level(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--log-level", "loud", "fs", "ls"])
        assert result.exit_code == 2

    def test_config_file_is_used(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "vfsadmin.yaml"
        config_file.write_text(
            "kind: Config\nspec:\n  server:\n    port: 9001\n", encoding="utf-8"
        )
        result = runner.invoke(app, ["-c", str(config_file), "config", "show", "server.port"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "9001"


class TestFsCommands:
    def test_readme_scenario(self, runner: CliRunner) -> None:
        assert runner.invoke(app, ["fs", "mkdir", "docs"]).exit_code == 0
        assert runner.invoke(app, ["fs", "write", "docs/readme.md", "hello"]).exit_code == 0

        result = runner.invoke(app, ["fs", "cat", "docs/readme.md"])
        assert result.exit_code == 0
        assert result.stdout == "hello"

        result = runner.invoke(app, ["fs", "stat", "docs/readme.md"])
        assert result.exit_code == 0
        attributes = json.loads(result.stdout)
        assert attributes["kind"] == "file"
        assert attributes["size"] == 5

        result = runner.invoke(app, ["fs", "rm", "docs"])
        assert result.exit_code == 1
        assert "directory_not_empty" in result.output

        assert runner.invoke(app, ["fs", "rm", "-r", "docs"]).exit_code == 0

        result = runner.invoke(app, ["fs", "exists", "docs/readme.md"])
        assert result.exit_code == 1
        assert result.stdout.strip() == "false"

    def test_exists_true(self, runner: CliRunner) -> None:
        runner.invoke(app, ["fs", "write", "f.txt", "x"])
        result = runner.invoke(app, ["fs", "exists", "f.txt"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "true"

    def test_write_from_local_file(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "payload.bin"
        source.write_bytes(b"from disk")
        result = runner.invoke(app, ["fs", "write", "copy.bin", "--from", str(source)])
        assert result.exit_code == 0
        assert runner.invoke(app, ["fs", "cat", "copy.bin"]).stdout == "from disk"

    def test_write_needs_exactly_one_source(self, runner: CliRunner) -> None:
        assert runner.invoke(app, ["fs", "write", "f.txt"]).exit_code == 2

    def test_ls(self, runner: CliRunner) -> None:
        runner.invoke(app, ["fs", "mkdir", "d"])
        runner.invoke(app, ["fs", "write", "d/a.txt", "x"])
        runner.invoke(app, ["fs", "mkdir", "d/sub"])

        result = runner.invoke(app, ["fs", "ls", "d"])
        assert result.exit_code == 0
        assert "a.txt" in result.stdout
        assert "sub" in result.stdout

        result = runner.invoke(app, ["fs", "ls"])
        assert result.exit_code == 0
        assert "d" in result.stdout

    def test_ls_empty(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["fs", "ls"])
        assert result.exit_code == 0
        assert "No entries" in result.stdout

    def test_errors_exit_with_kind(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["fs", "write", "a/b.txt", "x"])
        assert result.exit_code == 1
        assert "parent_missing" in result.output

        result = runner.invoke(app, ["fs", "cat", "../escape"])
        assert result.exit_code == 1
        assert "invalid_path" in result.output


class TestConfigShow:
    def test_show_all(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        config = json.loads(result.stdout)
        assert config["storage"]["backend"] == "sqlite"
        assert config["concurrency"]["lock_timeout"] == 30.0

    def test_show_section(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["config", "show", "storage"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["backend"] == "sqlite"

    def test_unknown_key(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["config", "show", "storage.nope"])
        assert result.exit_code == 1


class TestServe:
    def test_serve_passes_overrides(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        captured: list[VFSAdminConfig] = []
        monkeypatch.setattr("vfsadmin.server.main.run_server", captured.append)

        result = runner.invoke(app, ["serve", "--host", "0.0.0.0", "--port", "9100"])

        assert result.exit_code == 0
        assert len(captured) == 1
        assert captured[0].server.host == "0.0.0.0"
        assert captured[0].server.port == 9100
        assert captured[0].storage.backend == "sqlite"
        assert "vfsadmin" in result.stdout
