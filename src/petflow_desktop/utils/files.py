"""petflow-desktop 的文件系统工具。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from petflow_desktop.core.platform import LINUX, MACOS, WINDOWS, current_platform


def ensure_dir(path: Path) -> None:
    """确保目录存在（必要时创建，已存在不报错）。"""
    path.mkdir(parents=True, exist_ok=True)


def default_app_data_dir(
    identifier: str,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Optional[Path]:
    """推导与桌面宿主一致的私有数据目录。

    - macOS：~/Library/Application Support/<identifier>
    - Windows：%APPDATA%\\<identifier>
    - Linux：$XDG_DATA_HOME/<identifier>（默认 ~/.local/share）

    无法确定主目录时返回 None。
    """
    env = os.environ if environ is None else environ
    platform = platform or current_platform()

    if platform == WINDOWS:
        appdata = env.get("APPDATA")
        if appdata:
            return Path(appdata) / identifier
        profile = env.get("USERPROFILE")
        return Path(profile) / "AppData" / "Roaming" / identifier if profile else None

    home = env.get("HOME")
    if platform == MACOS:
        return Path(home) / "Library" / "Application Support" / identifier if home else None

    if platform == LINUX:
        xdg = env.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg) / identifier
    return Path(home) / ".local" / "share" / identifier if home else None
