"""petflow-desktop：桌面端 petflow-core sidecar 的启动与生命周期管理。"""

import typer
from rich.console import Console

from petflow_desktop.commands import doctor as doctor_cmd
from petflow_desktop.commands import prepare as prepare_cmd
from petflow_desktop.commands import run as run_cmd
from petflow_desktop.version import CONFIG_VERSION, PACKAGE_VERSION

__version__ = PACKAGE_VERSION

app = typer.Typer(
    name="petflow-desktop",
    help="petflow 桌面端 sidecar supervisor",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(False, "--version", "-v", help="显示版本信息"),
) -> None:
    """确保 petflow-core 在桌面端可用，并在退出时结束它。"""
    if version:
        console.print(f"[bold]petflow-desktop[/bold] 版本 {__version__}")
        console.print(f"config {CONFIG_VERSION}")
        raise typer.Exit()


# 注册命令
app.command(name="run", help="启动 petflow-core 并等待退出信号")(run_cmd.run_command)
app.command(name="doctor", help="检查启动 petflow-core 所需的条件")(doctor_cmd.doctor_command)
app.command(name="prepare", help="构建并打包 petflow-core 到资源目录")(prepare_cmd.prepare_command)


def main() -> None:
    """CLI 入口。"""
    app()


if __name__ == "__main__":
    main()
