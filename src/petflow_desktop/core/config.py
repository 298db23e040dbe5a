"""petflow-desktop 的配置管理。

该模块提供配置的加载、保存与管理能力。
配置文件为可选的 YAML 文件；缺失字段使用默认值，默认值即桌面端的固定约定
（端口 3000、20 秒就绪超时等）。
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml

from petflow_desktop.core.errors import ConfigError
from petflow_desktop.version import CONFIG_VERSION

CONFIG_PATH_ENV = "PETFLOW_DESKTOP_CONFIG"
MODE_ENV = "PETFLOW_DESKTOP_MODE"
CORE_DIR_ENV = "PETFLOW_CORE_DIR"

DEFAULT_PORT = 3000
DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "tauri://localhost",
    "https://tauri.localhost",
]


class BuildMode(str, Enum):
    """supervisor 的构建模式，同时决定 sidecar 的 NODE_ENV。"""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


@dataclass
class ServiceConfig:
    """sidecar 服务的网络与就绪检测配置。

    属性：
        host：就绪检测连接的地址
        port：sidecar 监听的固定端口
        startup_timeout_s：等待端口就绪的总时长（秒）
        poll_interval_s：两次探测之间的间隔（秒）
        connect_timeout_s：单次 TCP 连接的超时（秒）
        allowed_origins：允许调用服务的来源
        cookie_secure：是否强制 secure cookie（桌面回环场景下关闭）
    """

    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    startup_timeout_s: float = 20.0
    poll_interval_s: float = 0.2
    connect_timeout_s: float = 0.2
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    cookie_secure: bool = False

    def to_dict(self) -> dict[str, Any]:
        """转换为字典以便 YAML 序列化。"""
        return {
            "host": self.host,
            "port": self.port,
            "startup_timeout_s": self.startup_timeout_s,
            "poll_interval_s": self.poll_interval_s,
            "connect_timeout_s": self.connect_timeout_s,
            "allowed_origins": self.allowed_origins,
            "cookie_secure": self.cookie_secure,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ServiceConfig":
        """从字典创建实例。"""
        return cls(
            host=data.get("host", "127.0.0.1"),
            port=int(data.get("port", DEFAULT_PORT)),
            startup_timeout_s=float(data.get("startup_timeout_s", 20.0)),
            poll_interval_s=float(data.get("poll_interval_s", 0.2)),
            connect_timeout_s=float(data.get("connect_timeout_s", 0.2)),
            allowed_origins=list(data.get("allowed_origins", DEFAULT_ORIGINS)),
            cookie_secure=bool(data.get("cookie_secure", False)),
        )


@dataclass
class AdminConfig:
    """首次启动时引导创建的管理员账号（环境变量优先）。"""

    email: str = "admin@local"
    password: str = "admin"

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "password": self.password}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AdminConfig":
        return cls(
            email=data.get("email", "admin@local"),
            password=data.get("password", "admin"),
        )


@dataclass
class DesktopConfig:
    """桌面 supervisor 的主配置。

    属性：
        version：配置格式版本
        identifier：应用标识，用于推导私有数据目录
        mode：构建模式（development/production）
        core_dir：开发模式下 petflow-core 的源码目录
        service：sidecar 服务配置
        admin：引导管理员配置
    """

    version: str = CONFIG_VERSION
    identifier: str = "com.petflow.desktop"
    mode: BuildMode = BuildMode.PRODUCTION
    core_dir: str | None = None
    service: ServiceConfig = field(default_factory=ServiceConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)

    @property
    def is_development(self) -> bool:
        return self.mode == BuildMode.DEVELOPMENT

    def to_dict(self) -> dict[str, Any]:
        """转换为字典以便 YAML 序列化。"""
        result: dict[str, Any] = {
            "version": self.version,
            "identifier": self.identifier,
            "mode": self.mode.value,
            "service": self.service.to_dict(),
            "admin": self.admin.to_dict(),
        }
        if self.core_dir:
            result["core_dir"] = self.core_dir
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DesktopConfig":
        """从字典创建实例。"""
        return cls(
            version=str(data.get("version", CONFIG_VERSION)),
            identifier=data.get("identifier", "com.petflow.desktop"),
            mode=parse_mode(data.get("mode", BuildMode.PRODUCTION.value)),
            core_dir=data.get("core_dir"),
            service=ServiceConfig.from_dict(data.get("service") or {}),
            admin=AdminConfig.from_dict(data.get("admin") or {}),
        )


def parse_mode(value: str) -> BuildMode:
    """解析构建模式，接受 dev/prod 简写。"""
    raw = str(value).strip().lower()
    aliases = {"dev": BuildMode.DEVELOPMENT, "prod": BuildMode.PRODUCTION}
    if raw in aliases:
        return aliases[raw]
    try:
        return BuildMode(raw)
    except ValueError:
        raise ConfigError(
            f"无效的构建模式 '{value}'，可选：development、production"
        ) from None


def load_config(config_path: Path) -> DesktopConfig:
    """从 YAML 文件加载配置。

    参数：
        config_path：配置文件路径

    返回：
        加载后的 DesktopConfig 实例（缺失字段使用默认值）

    异常：
        ConfigError：文件不存在或内容不合法
    """
    if not config_path.exists():
        raise ConfigError(f"未找到配置文件：{config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"配置文件格式错误：{config_path}（{e}）") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"配置文件顶层必须是映射：{config_path}")

    return DesktopConfig.from_dict(data)


def save_config(config: DesktopConfig, config_path: Path) -> None:
    """将配置保存到 YAML 文件。

    异常：
        OSError：无法写入文件
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            config.to_dict(),
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def resolve_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DesktopConfig:
    """加载配置并应用环境变量覆盖。

    优先级：
    1. 显式传入的 config_path
    2. PETFLOW_DESKTOP_CONFIG 环境变量
    3. 内置默认值

    之后再应用 PETFLOW_DESKTOP_MODE 与 PETFLOW_CORE_DIR 覆盖。
    """
    env = os.environ if environ is None else environ

    if config_path is None:
        raw_path = (env.get(CONFIG_PATH_ENV) or "").strip()
        if raw_path:
            config_path = Path(raw_path)

    config = load_config(config_path) if config_path is not None else DesktopConfig()

    raw_mode = (env.get(MODE_ENV) or "").strip()
    if raw_mode:
        config.mode = parse_mode(raw_mode)

    raw_core_dir = (env.get(CORE_DIR_ENV) or "").strip()
    if raw_core_dir:
        config.core_dir = raw_core_dir

    return config
