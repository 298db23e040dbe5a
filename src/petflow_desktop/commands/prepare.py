"""petflow-desktop prepare 命令：构建并打包 petflow-core 到资源目录。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from petflow_desktop.commands._common import load_config_or_exit
from petflow_desktop.core.errors import SupervisorError
from petflow_desktop.runtime.locator import resolve_runtime_binary
from petflow_desktop.sidecar.bundle import prepare_resources
from petflow_desktop.sidecar.resources import CORE_DIR_NAME
from petflow_desktop.ui.display import show_error_panel
from petflow_desktop.utils.log import setup_logging

console = Console()


def prepare_command(
    core_dir: Optional[Path] = typer.Option(
        None, "--core-dir", help="petflow-core 源码目录（默认 ../petflow-core）"
    ),
    resources_dir: Path = typer.Option(
        Path("resources"), "--resources-dir", "-o", help="输出的资源目录"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="配置文件路径"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="输出调试日志"),
) -> None:
    """构建 petflow-core，并把 dist/node_modules/prisma 复制到资源目录。"""
    setup_logging(verbose)
    config = load_config_or_exit(console, config_path, dev=False)
    source = core_dir or (Path(config.core_dir) if config.core_dir else Path.cwd().parent / CORE_DIR_NAME)

    try:
        runtime = resolve_runtime_binary()
        bundled = prepare_resources(source, resources_dir, runtime)
    except SupervisorError as e:
        show_error_panel(console, e)
        raise typer.Exit(1)

    console.print(f"[green]OK：[/green] 资源已就绪：{bundled}")
