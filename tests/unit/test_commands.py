"""Tests for typed external command builders."""

import sys
from pathlib import Path

import pytest

from petflow_desktop.core.commands import (
    MigrationTool,
    StdioMode,
    ToolCommand,
    npm_command,
    runtime_command,
    stdio_for,
)


class TestToolCommand:
    def test_argv(self) -> None:
        command = runtime_command(Path("/usr/bin/node"), "dist/main.js")
        assert command.argv() == ["/usr/bin/node", "dist/main.js"]

    def test_env_overlays_parent_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PETFLOW_PARENT_VAR", "kept")
        monkeypatch.setenv("PORT", "9999")

        env = ToolCommand(program="node", env={"PORT": "3000"}).build_env()

        assert env["PETFLOW_PARENT_VAR"] == "kept"
        assert env["PORT"] == "3000"

    def test_rejects_non_string_env(self) -> None:
        with pytest.raises(TypeError, match="PORT"):
            ToolCommand(program="node", env={"PORT": 3000})  # type: ignore[dict-item]

    def test_rejects_empty_program(self) -> None:
        with pytest.raises(ValueError):
            ToolCommand(program="")

    def test_run_returns_exit_code(self) -> None:
        command = runtime_command(Path(sys.executable), "-c", "import sys; sys.exit(3)")
        assert command.run() == 3

    def test_run_passes_env_and_cwd(self, tmp_path: Path) -> None:
        script = "import os, sys; sys.exit(0 if os.environ['X_FLAG'] == 'yes' and os.getcwd() == sys.argv[1] else 1)"
        command = runtime_command(
            Path(sys.executable), "-c", script, str(tmp_path.resolve()), cwd=tmp_path.resolve(), env={"X_FLAG": "yes"}
        )
        assert command.run() == 0

    def test_run_missing_program_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            runtime_command(tmp_path / "missing").run()

    def test_stdio_for_mode(self) -> None:
        assert stdio_for(True) == StdioMode.INHERIT
        assert stdio_for(False) == StdioMode.DISCARD


class TestMigrationTool:
    def test_db_push(self, tmp_path: Path) -> None:
        tool = MigrationTool(runtime=Path("node"), core_dir=tmp_path)

        command = tool.db_push("prisma/master.prisma", "MASTER_DATABASE_URL", "file:/m.db")

        assert command.argv() == [
            "node",
            str(tmp_path / "node_modules" / "prisma" / "build" / "index.js"),
            "db",
            "push",
            "--schema",
            "prisma/master.prisma",
            "--skip-generate",
        ]
        assert dict(command.env) == {"MASTER_DATABASE_URL": "file:/m.db"}
        assert command.cwd == tmp_path

    def test_migrate_deploy(self, tmp_path: Path) -> None:
        tool = MigrationTool(runtime=Path("node"), core_dir=tmp_path, stdio=StdioMode.INHERIT)

        command = tool.migrate_deploy("prisma/schema.prisma", "DATABASE_URL", "file:/t.db")

        assert command.args[1:] == ("migrate", "deploy", "--schema", "prisma/schema.prisma")
        assert command.stdio == StdioMode.INHERIT

    def test_is_installed(self, fake_core) -> None:
        tool = MigrationTool(runtime=Path("node"), core_dir=fake_core.root)
        assert tool.is_installed() is False
        fake_core.install_prisma()
        assert tool.is_installed() is True


class TestNpmCommand:
    def test_uses_npm_execpath_when_set(self, tmp_path: Path) -> None:
        command = npm_command(
            ["run", "build"],
            cwd=tmp_path,
            runtime=Path("/opt/node"),
            environ={"npm_execpath": "/lib/npm-cli.js"},
        )
        assert command.argv() == ["/opt/node", "/lib/npm-cli.js", "run", "build"]

    def test_plain_npm(self, tmp_path: Path) -> None:
        command = npm_command(["run", "build"], cwd=tmp_path, environ={})
        assert command.args == ("run", "build")
        assert command.program in {"npm", "npm.cmd"}
