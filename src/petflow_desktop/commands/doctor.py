"""petflow-desktop doctor 命令：检查启动 petflow-core 所需的条件。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from petflow_desktop.commands._common import host_paths, load_config_or_exit
from petflow_desktop.core.commands import MigrationTool
from petflow_desktop.core.errors import SupervisorError
from petflow_desktop.runtime.locator import resolve_runtime_binary
from petflow_desktop.sidecar.launcher import entry_script
from petflow_desktop.sidecar.local_state import SECRET_FILE_NAME
from petflow_desktop.sidecar.readiness import is_port_open
from petflow_desktop.sidecar.resources import resolve_core_dir
from petflow_desktop.ui.display import show_status_table

console = Console()


def doctor_command(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="配置文件路径"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="私有数据目录"),
    resource_dir: Optional[Path] = typer.Option(None, "--resource-dir", help="打包资源目录"),
    dev: bool = typer.Option(False, "--dev", help="按开发模式检查"),
) -> None:
    """检查运行时、资源、数据目录与端口状态（不会启动任何进程）。"""
    config = load_config_or_exit(console, config_path, dev)
    host = host_paths(config, data_dir, resource_dir)

    rows: list[tuple[str, str, bool | None]] = [("构建模式", config.mode.value, None)]
    failed = False

    runtime: Path | None = None
    try:
        runtime = resolve_runtime_binary()
        rows.append(("Node.js", str(runtime), True))
    except SupervisorError as e:
        rows.append(("Node.js", e.message, False))
        failed = True

    try:
        core_dir = resolve_core_dir(config, host)
        rows.append(("petflow-core", str(core_dir), True))
        cli = MigrationTool(runtime=runtime or Path("node"), core_dir=core_dir).cli_path
        rows.append(("Prisma CLI", str(cli), cli.exists()))
        entry = entry_script(core_dir)
        rows.append(("构建产物", str(entry), entry.exists()))
        failed = failed or not cli.exists() or not entry.exists()
    except SupervisorError as e:
        rows.append(("petflow-core", e.message, False))
        failed = True

    if host.app_data_dir is None:
        rows.append(("数据目录", "无法确定", False))
        failed = True
    else:
        rows.append(("数据目录", str(host.app_data_dir), None))
        secret_exists = (host.app_data_dir / SECRET_FILE_NAME).exists()
        rows.append(("签名密钥", "已存在" if secret_exists else "首次启动时生成", None))

    port = config.service.port
    occupied = is_port_open(port, config.service.host, config.service.connect_timeout_s)
    rows.append((f"端口 {port}", "已被占用（将复用现有实例）" if occupied else "空闲", None))

    show_status_table(console, rows)
    if failed:
        raise typer.Exit(1)
