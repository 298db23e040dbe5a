"""基于 Rich 的终端 UI 展示组件。"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from petflow_desktop.core.errors import ErrorKind, SupervisorError

# 主题配置
THEME = {
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "idle": "dim",
    "unmanaged": "cyan",
    "starting": "yellow",
    "running": "green",
    "stopped": "dim",
    "failed": "red",
}

# 生命周期状态显示名称
STATE_NAMES = {
    "idle": "空闲",
    "unmanaged": "外部实例",
    "starting": "启动中",
    "running": "运行中",
    "stopped": "已停止",
    "failed": "失败",
}

ERROR_TITLES = {
    ErrorKind.CONFIGURATION: "配置错误",
    ErrorKind.FILESYSTEM: "文件系统错误",
    ErrorKind.MIGRATION: "数据库迁移失败",
    ErrorKind.LAUNCH: "启动失败",
    ErrorKind.TIMEOUT: "就绪超时",
}


def show_state(console: Console, state: str, detail: str = "") -> None:
    """以主题颜色显示生命周期状态。"""
    color = THEME.get(state, "white")
    name = STATE_NAMES.get(state, state)
    suffix = f" [dim]{detail}[/dim]" if detail else ""
    console.print(f"[cyan]petflow-core：[/cyan] [{color}]{name}[/{color}]{suffix}")


def show_error_panel(console: Console, error: SupervisorError) -> None:
    title = ERROR_TITLES.get(error.kind, "错误")
    console.print(
        Panel(
            Text(error.message),
            title=f"[bold red]{title}[/bold red]",
            border_style=THEME["error"],
        )
    )


def show_status_table(console: Console, rows: list[tuple[str, str, bool | None]]) -> None:
    """显示诊断结果表格。

    参数：
        console：Rich 控制台实例
        rows：(检查项, 结果, 是否通过) 列表；是否通过为 None 表示仅展示信息
    """
    table = Table(title="petflow-desktop 诊断", show_header=True, header_style="bold cyan")
    table.add_column("检查项", style="bold")
    table.add_column("结果")
    table.add_column("状态", justify="center")

    for label, value, ok in rows:
        if ok is None:
            status = "[dim]-[/dim]"
        elif ok:
            status = f"[{THEME['success']}]√[/{THEME['success']}]"
        else:
            status = f"[{THEME['error']}]×[/{THEME['error']}]"
        table.add_row(label, value, status)

    console.print(table)
