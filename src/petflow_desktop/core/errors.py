"""Supervisor 错误类型。

所有错误都以可直接展示给用户的消息表示，宿主负责显示并中止启动。
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """启动失败的分类。"""

    CONFIGURATION = "configuration"  # 运行时/资源/配置无法解析
    FILESYSTEM = "filesystem"  # 目录或密钥读写失败
    MIGRATION = "migration"  # 迁移工具缺失或退出码非零
    LAUNCH = "launch"  # 构建产物缺失或进程无法启动
    TIMEOUT = "timeout"  # 服务端口在截止时间内未就绪


class SupervisorError(Exception):
    """所有 supervisor 错误的基类。"""

    kind: ErrorKind = ErrorKind.CONFIGURATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigError(SupervisorError):
    kind = ErrorKind.CONFIGURATION


class RuntimeNotFoundError(SupervisorError):
    """找不到可用的 Node.js 运行时。"""

    kind = ErrorKind.CONFIGURATION


class ResourceNotFoundError(SupervisorError):
    """找不到 petflow-core 的安装目录。"""

    kind = ErrorKind.CONFIGURATION


class LocalStateError(SupervisorError):
    kind = ErrorKind.FILESYSTEM


class MigrationToolMissingError(SupervisorError):
    """sidecar 发行包中没有附带 Prisma CLI。"""

    kind = ErrorKind.MIGRATION


class MigrationError(SupervisorError):
    kind = ErrorKind.MIGRATION


class LaunchError(SupervisorError):
    kind = ErrorKind.LAUNCH


class BundleError(SupervisorError):
    """资源打包（prepare）失败。"""

    kind = ErrorKind.LAUNCH


class ReadinessTimeoutError(SupervisorError):
    kind = ErrorKind.TIMEOUT
