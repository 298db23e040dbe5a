"""把 petflow-core 打包到桌面应用的资源目录。

步骤：
1. 确认 petflow-core 已安装依赖（存在 Prisma CLI）
2. 为 tenant / master 两个 schema 生成 Prisma 客户端
3. 执行 `npm run build`
4. 用 dist、node_modules、prisma 三个目录替换 <resources>/petflow-core
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from petflow_desktop.core.commands import (
    MASTER_SCHEMA,
    TENANT_SCHEMA,
    MigrationTool,
    StdioMode,
    ToolCommand,
    npm_command,
)
from petflow_desktop.core.errors import BundleError
from petflow_desktop.sidecar.resources import CORE_DIR_NAME
from petflow_desktop.utils.files import ensure_dir

logger = logging.getLogger(__name__)

BUNDLED_DIRS = ("dist", "node_modules", "prisma")

# 生成客户端时只需要 URL 格式合法，不会真正连接数据库
BUILD_ENV = {
    "DATABASE_URL": "file:./prisma/dev.db",
    "MASTER_DATABASE_URL": "file:./prisma/master.db",
}


def _run_step(command: ToolCommand) -> None:
    logger.info("执行：%s", command.describe())
    try:
        code = command.run()
    except OSError as e:
        raise BundleError(f"{command.describe()} 无法执行：{e}") from e
    if code != 0:
        raise BundleError(f"{command.describe()} 退出码为 {code}")


def prepare_resources(core_dir: Path, resources_dir: Path, runtime: Path) -> Path:
    """构建 petflow-core 并复制到资源目录。

    参数：
        core_dir：petflow-core 源码目录
        resources_dir：桌面应用的资源目录
        runtime：用于执行 Prisma CLI 的 node

    返回：
        打包后的 petflow-core 目录

    异常：
        BundleError：依赖缺失或任一步骤失败
    """
    ensure_dir(resources_dir)
    bundled = resources_dir / CORE_DIR_NAME
    shutil.rmtree(bundled, ignore_errors=True)

    tool = MigrationTool(runtime=runtime, core_dir=core_dir, stdio=StdioMode.INHERIT)
    if not tool.is_installed():
        raise BundleError(
            f"找不到 Prisma CLI：{tool.cli_path}\n"
            "请先在 petflow-core 中执行 `npm install`，然后重新运行 `petflow-desktop prepare`。"
        )

    _run_step(tool.generate(TENANT_SCHEMA, BUILD_ENV))
    _run_step(tool.generate(MASTER_SCHEMA, BUILD_ENV))
    _run_step(npm_command(["run", "build"], cwd=core_dir, runtime=runtime, env=BUILD_ENV))

    ensure_dir(bundled)
    for name in BUNDLED_DIRS:
        source = core_dir / name
        if not source.exists():
            raise BundleError(f"petflow-core 缺少 {name} 目录：{source}")
        shutil.copytree(source, bundled / name, symlinks=True)

    logger.info("资源已就绪：%s", bundled)
    return bundled
