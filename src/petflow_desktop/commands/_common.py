"""命令之间共享的参数解析。"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from petflow_desktop.core.config import BuildMode, DesktopConfig, resolve_config
from petflow_desktop.core.errors import SupervisorError
from petflow_desktop.sidecar.resources import HostPaths
from petflow_desktop.ui.display import show_error_panel
from petflow_desktop.utils.files import default_app_data_dir


def load_config_or_exit(console: Console, config_path: Path | None, dev: bool) -> DesktopConfig:
    try:
        config = resolve_config(config_path)
    except SupervisorError as e:
        show_error_panel(console, e)
        raise typer.Exit(1)
    if dev:
        config.mode = BuildMode.DEVELOPMENT
    return config


def host_paths(config: DesktopConfig, data_dir: Path | None, resource_dir: Path | None) -> HostPaths:
    """命令行参数优先，否则使用与桌面宿主相同的默认数据目录。"""
    return HostPaths(
        app_data_dir=data_dir or default_app_data_dir(config.identifier),
        resource_dir=resource_dir,
    )
