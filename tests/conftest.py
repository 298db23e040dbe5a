"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import socket
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest
from typer.testing import CliRunner

# Add src directory to Python path for tests
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from petflow_desktop.core.config import DesktopConfig  # noqa: E402


@dataclass
class FakeCore:
    """Test helper to build a minimal petflow-core installation."""

    root: Path

    @property
    def prisma_cli(self) -> Path:
        return self.root / "node_modules" / "prisma" / "build" / "index.js"

    @property
    def entry(self) -> Path:
        return self.root / "dist" / "main.js"

    def install_prisma(self) -> Path:
        self.prisma_cli.parent.mkdir(parents=True, exist_ok=True)
        self.prisma_cli.write_text("// prisma cli\n", encoding="utf-8")
        (self.root / "prisma").mkdir(parents=True, exist_ok=True)
        (self.root / "prisma" / "schema.prisma").write_text("// tenant\n", encoding="utf-8")
        (self.root / "prisma" / "master.prisma").write_text("// master\n", encoding="utf-8")
        return self.prisma_cli

    def build(self, content: str = "// built\n") -> Path:
        self.entry.parent.mkdir(parents=True, exist_ok=True)
        self.entry.write_text(content, encoding="utf-8")
        return self.entry


@pytest.fixture
def fake_core(tmp_path: Path) -> FakeCore:
    core = FakeCore(root=tmp_path / "petflow-core")
    core.root.mkdir()
    return core


@pytest.fixture
def free_port() -> int:
    """A port that nothing listens on (bound then released)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


@pytest.fixture
def listening_socket():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(8)
        yield s


@pytest.fixture
def config(free_port: int) -> DesktopConfig:
    cfg = DesktopConfig()
    cfg.service.port = free_port
    cfg.service.startup_timeout_s = 1.0
    cfg.service.poll_interval_s = 0.05
    return cfg


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "PETFLOW_NODE_BINARY",
        "PETFLOW_NODE",
        "PETFLOW_ADMIN_EMAIL",
        "PETFLOW_ADMIN_PASSWORD",
        "PETFLOW_DESKTOP_CONFIG",
        "PETFLOW_DESKTOP_MODE",
        "PETFLOW_CORE_DIR",
        "npm_execpath",
    ):
        monkeypatch.delenv(key, raising=False)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(item.fspath))
        if "tests" not in path.parts:
            continue
        tests_index = path.parts.index("tests")
        if len(path.parts) <= tests_index + 1:
            continue
        group = path.parts[tests_index + 1]
        if group in {"unit", "cli"}:
            item.add_marker(getattr(pytest.mark, group))
