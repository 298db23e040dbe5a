"""petflow-desktop run 命令：在终端中扮演桌面宿主。

启动时执行与桌面应用相同的 setup 流程，然后等待 Ctrl+C / SIGTERM，
收到信号后按退出事件结束 petflow-core。
"""

from __future__ import annotations

import logging
import signal
import threading
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from petflow_desktop.commands._common import host_paths, load_config_or_exit
from petflow_desktop.core.errors import SupervisorError
from petflow_desktop.sidecar.lifecycle import LifecycleManager, LifecycleState
from petflow_desktop.ui.display import show_error_panel, show_state
from petflow_desktop.utils.log import setup_logging

console = Console()
logger = logging.getLogger(__name__)

WATCH_INTERVAL_S = 0.5


def run_command(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="配置文件路径（默认读取 PETFLOW_DESKTOP_CONFIG）"
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", help="私有数据目录（默认与桌面应用一致）"
    ),
    resource_dir: Optional[Path] = typer.Option(
        None, "--resource-dir", help="打包资源目录（生产模式）"
    ),
    dev: bool = typer.Option(False, "--dev", help="以开发模式运行（输出 sidecar 日志）"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="输出调试日志"),
) -> None:
    """启动 petflow-core 并保持运行，直到收到退出信号。

    \b
    示例：
        petflow-desktop run --dev
        petflow-desktop run --resource-dir ./resources
    """
    setup_logging(verbose)
    config = load_config_or_exit(console, config_path, dev)
    manager = LifecycleManager(config, host_paths(config, data_dir, resource_dir))

    stop = threading.Event()

    def _on_signal(signum: int, frame: object) -> None:
        del frame
        logger.info("收到信号 %s，正在退出", signum)
        stop.set()
        # 退出事件与启动流程在不同线程上执行
        threading.Thread(target=manager.on_exit_requested, daemon=True).start()

    previous = {sig: signal.signal(sig, _on_signal) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        try:
            state = manager.setup()
        except SupervisorError as e:
            show_error_panel(console, e)
            raise typer.Exit(1)

        if state == LifecycleState.UNMANAGED:
            show_state(console, state.value, f"端口 {config.service.port} 由其他实例提供")
        elif state == LifecycleState.RUNNING:
            show_state(console, state.value, f"PID {manager.slot.pid}，端口 {config.service.port}")

        if state in (LifecycleState.RUNNING, LifecycleState.UNMANAGED):
            while not stop.wait(WATCH_INTERVAL_S):
                code = manager.slot.poll()
                if code is not None:
                    logger.warning("petflow-core 已退出（退出码 %s）", code)
                    break
    finally:
        manager.on_exit_requested()
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    show_state(console, manager.state.value)
