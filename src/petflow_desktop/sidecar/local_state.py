"""私有数据目录准备：db 目录、数据库 URL 与持久化的签名密钥。"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from pathlib import Path

from petflow_desktop.core.errors import LocalStateError
from petflow_desktop.utils.files import ensure_dir

logger = logging.getLogger(__name__)

DB_DIR_NAME = "db"
MASTER_DB_NAME = "master.db"
TENANT_DB_NAME = "dev.db"
SECRET_FILE_NAME = "auth_token_secret.txt"
SECRET_BYTES = 32


@dataclass(frozen=True)
class LocalState:
    data_dir: Path
    db_dir: Path
    master_db_url: str
    tenant_db_url: str
    auth_token_secret: str


def sqlite_url(path: Path) -> str:
    """`file:` 形式的 SQLite URL，Windows 反斜杠统一为 `/`。"""
    return "file:" + str(path).replace("\\", "/")


def load_or_create_secret(app_data_dir: Path) -> str:
    """读取已有密钥，不存在时生成并写入。

    已有文件永远不会被覆盖；内容不完整的文件同样按原样使用，
    损坏时需要用户手动删除该文件。

    异常：
        LocalStateError：读取或写入失败
    """
    secret_path = app_data_dir / SECRET_FILE_NAME
    if secret_path.exists():
        try:
            return secret_path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise LocalStateError(f"读取 {SECRET_FILE_NAME} 失败：{e}") from e

    secret = secrets.token_bytes(SECRET_BYTES).hex()
    try:
        secret_path.write_text(secret, encoding="utf-8")
    except OSError as e:
        raise LocalStateError(f"写入 {SECRET_FILE_NAME} 失败：{e}") from e
    logger.info("已生成新的 token 签名密钥：%s", secret_path)
    return secret


def prepare_local_state(app_data_dir: Path) -> LocalState:
    """创建数据目录并返回数据库 URL 与密钥。

    参数：
        app_data_dir：宿主提供的私有数据目录

    返回：
        LocalState

    异常：
        LocalStateError：目录创建或密钥读写失败
    """
    try:
        ensure_dir(app_data_dir)
    except OSError as e:
        raise LocalStateError(f"创建数据目录失败：{e}") from e

    db_dir = app_data_dir / DB_DIR_NAME
    try:
        ensure_dir(db_dir)
    except OSError as e:
        raise LocalStateError(f"创建 db 目录失败：{e}") from e

    secret = load_or_create_secret(app_data_dir)

    return LocalState(
        data_dir=app_data_dir,
        db_dir=db_dir,
        master_db_url=sqlite_url(db_dir / MASTER_DB_NAME),
        tenant_db_url=sqlite_url(db_dir / TENANT_DB_NAME),
        auth_token_secret=secret,
    )
