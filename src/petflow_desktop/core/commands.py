"""外部工具调用的类型化封装。

所有子进程（node 运行时、Prisma CLI、npm）都通过 ToolCommand 构建，
参数与环境变量的约定在这里集中检查一次，各调用方直接复用。
"""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Sequence


class StdioMode(str, Enum):
    """子进程标准输出/错误的处理方式。"""

    INHERIT = "inherit"  # 开发模式：直接输出到终端便于诊断
    DISCARD = "discard"  # 生产模式：丢弃


def stdio_for(is_development: bool) -> StdioMode:
    return StdioMode.INHERIT if is_development else StdioMode.DISCARD


@dataclass(frozen=True)
class ToolCommand:
    """一次外部进程调用的完整描述。

    env 只包含需要覆盖的变量，执行时叠加在当前进程环境之上。
    """

    program: str
    args: tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    stdio: StdioMode = StdioMode.DISCARD

    def __post_init__(self) -> None:
        if not self.program:
            raise ValueError("ToolCommand.program 不能为空")
        for key, value in self.env.items():
            if not isinstance(value, str):
                raise TypeError(f"环境变量 {key} 的值必须是字符串，实际为 {type(value).__name__}")

    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def build_env(self) -> dict[str, str]:
        merged = dict(os.environ)
        merged.update(self.env)
        return merged

    def _stdio_target(self) -> int | None:
        return None if self.stdio == StdioMode.INHERIT else subprocess.DEVNULL

    def run(self) -> int:
        """同步执行并返回退出码。

        异常：
            OSError：进程无法启动（可执行文件不存在、无权限等）
        """
        target = self._stdio_target()
        completed = subprocess.run(
            self.argv(),
            cwd=str(self.cwd) if self.cwd else None,
            env=self.build_env(),
            stdin=subprocess.DEVNULL,
            stdout=target,
            stderr=target,
            check=False,
        )
        return completed.returncode

    def spawn(self) -> subprocess.Popen:
        """启动进程但不等待其结束。"""
        target = self._stdio_target()
        return subprocess.Popen(
            self.argv(),
            cwd=str(self.cwd) if self.cwd else None,
            env=self.build_env(),
            stdin=subprocess.DEVNULL,
            stdout=target,
            stderr=target,
        )

    def describe(self) -> str:
        return " ".join(self.argv())


def runtime_command(
    runtime: Path,
    *args: str,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    stdio: StdioMode = StdioMode.DISCARD,
) -> ToolCommand:
    """构建 `<runtime> <args...>` 调用。"""
    return ToolCommand(
        program=str(runtime),
        args=tuple(str(a) for a in args),
        cwd=cwd,
        env=dict(env or {}),
        stdio=stdio,
    )


PRISMA_CLI_PARTS = ("node_modules", "prisma", "build", "index.js")
MASTER_SCHEMA = "prisma/master.prisma"
TENANT_SCHEMA = "prisma/schema.prisma"
MASTER_URL_ENV = "MASTER_DATABASE_URL"
TENANT_URL_ENV = "DATABASE_URL"


@dataclass(frozen=True)
class MigrationTool:
    """随 petflow-core 一起分发的 Prisma CLI。

    调用形式：`<runtime> <cli> <subcommand...> --schema <schema> [flags]`，
    数据库 URL 通过每次调用独立的环境变量传入。
    """

    runtime: Path
    core_dir: Path
    stdio: StdioMode = StdioMode.DISCARD

    @property
    def cli_path(self) -> Path:
        return self.core_dir.joinpath(*PRISMA_CLI_PARTS)

    def is_installed(self) -> bool:
        return self.cli_path.exists()

    def _command(self, subcommand: Sequence[str], schema: str, env: Mapping[str, str], *flags: str) -> ToolCommand:
        return runtime_command(
            self.runtime,
            str(self.cli_path),
            *subcommand,
            "--schema",
            schema,
            *flags,
            cwd=self.core_dir,
            env=env,
            stdio=self.stdio,
        )

    def db_push(self, schema: str, url_env: str, url: str) -> ToolCommand:
        """直接把 schema 同步到数据库（不生成客户端代码）。"""
        return self._command(("db", "push"), schema, {url_env: url}, "--skip-generate")

    def migrate_deploy(self, schema: str, url_env: str, url: str) -> ToolCommand:
        """应用尚未执行的迁移。"""
        return self._command(("migrate", "deploy"), schema, {url_env: url})

    def generate(self, schema: str, env: Mapping[str, str]) -> ToolCommand:
        return self._command(("generate",), schema, env)


def npm_command(
    args: Sequence[str],
    *,
    cwd: Path,
    runtime: Path | None = None,
    env: Mapping[str, str] | None = None,
    stdio: StdioMode = StdioMode.INHERIT,
    environ: Mapping[str, str] | None = None,
) -> ToolCommand:
    """构建 npm 调用。

    在 npm 脚本中运行时（存在 npm_execpath），通过 node 直接执行该路径，
    避免 Windows 上 npm.cmd 的解析问题。
    """
    source = os.environ if environ is None else environ
    npm_exec_path = (source.get("npm_execpath") or "").strip()
    if npm_exec_path:
        program = str(runtime) if runtime else "node"
        return ToolCommand(
            program=program,
            args=(npm_exec_path, *args),
            cwd=cwd,
            env=dict(env or {}),
            stdio=stdio,
        )
    program = "npm.cmd" if sys.platform.startswith("win") else "npm"
    return ToolCommand(program=program, args=tuple(args), cwd=cwd, env=dict(env or {}), stdio=stdio)
