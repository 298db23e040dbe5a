"""petflow-core 安装目录的解析。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from petflow_desktop.core.config import DesktopConfig
from petflow_desktop.core.errors import ResourceNotFoundError

CORE_DIR_NAME = "petflow-core"


@dataclass(frozen=True)
class HostPaths:
    """宿主提供的目录。

    属性：
        app_data_dir：私有数据目录
        resource_dir：打包资源目录（仅生产模式需要）
    """

    app_data_dir: Path | None
    resource_dir: Path | None = None


def bundled_core_candidates(resource_dir: Path) -> list[Path]:
    return [
        resource_dir / CORE_DIR_NAME,
        resource_dir / "resources" / CORE_DIR_NAME,
    ]


def resolve_core_dir(config: DesktopConfig, host: HostPaths) -> Path:
    """开发模式使用源码目录，生产模式使用打包在资源目录中的副本。"""
    if config.is_development:
        core_dir = Path(config.core_dir) if config.core_dir else Path.cwd().parent / CORE_DIR_NAME
        if core_dir.exists():
            return core_dir
        raise ResourceNotFoundError(f"开发模式下找不到 petflow-core（期望位置：{core_dir}）")

    if host.resource_dir is None:
        raise ResourceNotFoundError("宿主未提供资源目录，无法定位打包的 petflow-core")

    for candidate in bundled_core_candidates(host.resource_dir):
        if candidate.exists():
            return candidate
    raise ResourceNotFoundError(
        "打包资源中找不到 petflow-core（构建前请先执行 `petflow-desktop prepare`）。"
    )
