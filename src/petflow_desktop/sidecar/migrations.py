"""启动 sidecar 之前同步两个数据库的 schema。

执行策略：
- master 库：`db push`（显式 schema，跳过客户端生成），失败即中止
- tenant 库：先 `migrate deploy`；失败时（例如全新数据库没有迁移历史）
  回退一次 `db push`，回退仍失败才中止
"""

from __future__ import annotations

import logging
from pathlib import Path

from petflow_desktop.core.commands import (
    MASTER_SCHEMA,
    MASTER_URL_ENV,
    TENANT_SCHEMA,
    TENANT_URL_ENV,
    MigrationTool,
    StdioMode,
    ToolCommand,
)
from petflow_desktop.core.errors import MigrationError, MigrationToolMissingError

logger = logging.getLogger(__name__)


class MigrationOrchestrator:
    """按顺序执行 master / tenant 两个库的迁移。"""

    def __init__(self, tool: MigrationTool, master_db_url: str, tenant_db_url: str) -> None:
        self.tool = tool
        self.master_db_url = master_db_url
        self.tenant_db_url = tenant_db_url

    def _run(self, command: ToolCommand, label: str) -> int:
        logger.debug("执行 %s：%s", label, command.describe())
        try:
            return command.run()
        except OSError as e:
            raise MigrationError(f"Prisma {label} 执行失败：{e}") from e

    def run(self) -> None:
        """同步两个库。

        异常：
            MigrationToolMissingError：sidecar 中没有 Prisma CLI
            MigrationError：任一库同步失败
        """
        if not self.tool.is_installed():
            raise MigrationToolMissingError(
                f"petflow-core 中未安装 Prisma CLI（期望位置：{self.tool.cli_path}）。"
            )

        master = self.tool.db_push(MASTER_SCHEMA, MASTER_URL_ENV, self.master_db_url)
        if self._run(master, "db push (master)") != 0:
            raise MigrationError("Prisma db push (master) 失败")

        deploy = self.tool.migrate_deploy(TENANT_SCHEMA, TENANT_URL_ENV, self.tenant_db_url)
        if self._run(deploy, "migrate deploy (tenant)") == 0:
            return

        # 无法区分“新库没有迁移历史”与“库已损坏”，两者都会走到这里
        logger.warning(
            "tenant 库 migrate deploy 失败，回退为 db push（若数据库已损坏，后续错误可能与此相关）"
        )
        fallback = self.tool.db_push(TENANT_SCHEMA, TENANT_URL_ENV, self.tenant_db_url)
        if self._run(fallback, "db push (tenant)") != 0:
            raise MigrationError("Prisma migrate deploy / db push (tenant) 均失败")


def ensure_databases(
    runtime: Path,
    core_dir: Path,
    master_db_url: str,
    tenant_db_url: str,
    *,
    stdio: StdioMode = StdioMode.DISCARD,
) -> None:
    tool = MigrationTool(runtime=runtime, core_dir=core_dir, stdio=stdio)
    MigrationOrchestrator(tool, master_db_url, tenant_db_url).run()
