"""CLI 命令测试。"""

from pathlib import Path
from unittest.mock import MagicMock, patch

from petflow_desktop import app
from petflow_desktop.core.errors import MigrationError, RuntimeNotFoundError
from petflow_desktop.sidecar.lifecycle import LifecycleState


def test_version(cli_runner) -> None:
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "petflow-desktop" in result.output


def test_help_lists_commands(cli_runner) -> None:
    result = cli_runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("run", "doctor", "prepare"):
        assert name in result.output


class TestRun:
    def test_setup_failure_exits_with_error(self, cli_runner, tmp_path: Path) -> None:
        manager = MagicMock()
        manager.setup.side_effect = MigrationError("Prisma db push (master) 失败")

        with patch("petflow_desktop.commands.run.LifecycleManager", return_value=manager):
            result = cli_runner.invoke(app, ["run", "--data-dir", str(tmp_path)])

        assert result.exit_code == 1
        assert "master" in result.output
        manager.on_exit_requested.assert_called_once()

    def test_stopped_during_setup(self, cli_runner, tmp_path: Path) -> None:
        manager = MagicMock()
        manager.setup.return_value = LifecycleState.STOPPED
        manager.state = LifecycleState.STOPPED

        with patch("petflow_desktop.commands.run.LifecycleManager", return_value=manager):
            result = cli_runner.invoke(app, ["run", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        manager.on_exit_requested.assert_called_once()

    def test_exits_when_sidecar_dies(self, cli_runner, tmp_path: Path) -> None:
        manager = MagicMock()
        manager.setup.return_value = LifecycleState.RUNNING
        manager.slot.poll.return_value = 1
        manager.slot.pid = 4321
        manager.state = LifecycleState.STOPPED

        with patch("petflow_desktop.commands.run.LifecycleManager", return_value=manager), \
                patch("petflow_desktop.commands.run.WATCH_INTERVAL_S", 0.01):
            result = cli_runner.invoke(app, ["run", "--data-dir", str(tmp_path)])

        assert result.exit_code == 0
        manager.on_exit_requested.assert_called_once()

    def test_invalid_config(self, cli_runner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["run", "--config", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1


class TestDoctor:
    def test_reports_missing_runtime(self, cli_runner, tmp_path: Path) -> None:
        with patch(
            "petflow_desktop.commands.doctor.resolve_runtime_binary",
            side_effect=RuntimeNotFoundError("找不到 Node.js"),
        ):
            result = cli_runner.invoke(
                app, ["doctor", "--data-dir", str(tmp_path), "--resource-dir", str(tmp_path)]
            )

        assert result.exit_code == 1
        assert "Node.js" in result.output

    def test_all_checks_pass(self, cli_runner, fake_core, tmp_path: Path) -> None:
        fake_core.install_prisma()
        fake_core.build()

        with patch(
            "petflow_desktop.commands.doctor.resolve_runtime_binary", return_value=Path("node")
        ):
            result = cli_runner.invoke(
                app,
                ["doctor", "--data-dir", str(tmp_path / "data"), "--resource-dir", str(tmp_path)],
            )

        assert result.exit_code == 0, result.output


class TestPrepare:
    def test_bundle_error(self, cli_runner, fake_core, tmp_path: Path) -> None:
        with patch(
            "petflow_desktop.commands.prepare.resolve_runtime_binary", return_value=Path("node")
        ):
            result = cli_runner.invoke(
                app,
                [
                    "prepare",
                    "--core-dir",
                    str(fake_core.root),
                    "--resources-dir",
                    str(tmp_path / "out"),
                ],
            )

        assert result.exit_code == 1
        assert "npm install" in result.output

    def test_success(self, cli_runner, fake_core, tmp_path: Path) -> None:
        out = tmp_path / "out"
        with patch(
            "petflow_desktop.commands.prepare.resolve_runtime_binary", return_value=Path("node")
        ), patch(
            "petflow_desktop.commands.prepare.prepare_resources", return_value=out / "petflow-core"
        ) as prepare:
            result = cli_runner.invoke(
                app, ["prepare", "--core-dir", str(fake_core.root), "--resources-dir", str(out)]
            )

        assert result.exit_code == 0, result.output
        prepare.assert_called_once_with(fake_core.root, out, Path("node"))
