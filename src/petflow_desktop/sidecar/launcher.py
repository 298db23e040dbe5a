"""以固定环境启动 petflow-core 子进程。"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping

from petflow_desktop.core.commands import runtime_command, stdio_for
from petflow_desktop.core.config import DesktopConfig
from petflow_desktop.core.errors import LaunchError
from petflow_desktop.sidecar.local_state import LocalState

logger = logging.getLogger(__name__)

ADMIN_EMAIL_ENV = "PETFLOW_ADMIN_EMAIL"
ADMIN_PASSWORD_ENV = "PETFLOW_ADMIN_PASSWORD"
ENTRY_PARTS = ("dist", "main.js")


def entry_script(core_dir: Path) -> Path:
    return core_dir.joinpath(*ENTRY_PARTS)


def build_service_env(
    config: DesktopConfig,
    state: LocalState,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """构建传给 sidecar 的环境变量（叠加在父进程环境之上）。

    参数：
        config：桌面配置（模式、端口、来源白名单）
        state：本地状态（数据库 URL 与密钥）
        environ：读取管理员覆盖变量的来源（默认 os.environ）
    """
    env = os.environ if environ is None else environ
    service = config.service
    return {
        "NODE_ENV": config.mode.value,
        "PORT": str(service.port),
        "DESKTOP": "true",
        "FRONTEND_ORIGIN": ",".join(service.allowed_origins),
        "AUTH_COOKIE_SECURE": "true" if service.cookie_secure else "false",
        "MASTER_DATABASE_URL": state.master_db_url,
        "DATABASE_URL": state.tenant_db_url,
        "AUTH_TOKEN_SECRET": state.auth_token_secret,
        "AUTH_BOOTSTRAP_USER": env.get(ADMIN_EMAIL_ENV, config.admin.email),
        "AUTH_BOOTSTRAP_PASSWORD": env.get(ADMIN_PASSWORD_ENV, config.admin.password),
    }


def start_core(
    runtime: Path,
    core_dir: Path,
    state: LocalState,
    config: DesktopConfig,
) -> subprocess.Popen:
    """启动 `<runtime> dist/main.js`，立即返回进程句柄。

    异常：
        LaunchError：构建产物缺失或进程无法启动
    """
    entry = entry_script(core_dir)
    if not entry.exists():
        raise LaunchError(
            f"找不到 petflow-core 构建产物（期望位置：{entry}）。"
            "请先在 petflow-core 中执行 `npm run build`。"
        )

    command = runtime_command(
        runtime,
        str(entry),
        cwd=core_dir,
        env=build_service_env(config, state),
        stdio=stdio_for(config.is_development),
    )
    try:
        proc = command.spawn()
    except OSError as e:
        raise LaunchError(f"启动 petflow-core 失败：{e}") from e

    logger.info("petflow-core 已启动（PID %s，端口 %s）", proc.pid, config.service.port)
    return proc
