"""平台相关的数据表。

候选路径按平台以数据表形式维护，新增平台或路径时只需修改这里。
"""

from __future__ import annotations

import sys

MACOS = "darwin"
WINDOWS = "win32"
LINUX = "linux"

# 常见的 Node.js 安装位置（按优先级排序）
RUNTIME_CANDIDATES: dict[str, list[str]] = {
    MACOS: [
        "/opt/homebrew/bin/node",
        "/usr/local/bin/node",
        "/usr/bin/node",
    ],
    WINDOWS: [
        r"C:\Program Files\nodejs\node.exe",
        r"C:\Program Files (x86)\nodejs\node.exe",
        r"C:\ProgramData\chocolatey\bin\node.exe",
    ],
    LINUX: [
        "/usr/local/bin/node",
        "/usr/bin/node",
    ],
}

# 支持扫描用户级版本管理器（nvm）的平台
VERSION_MANAGER_PLATFORMS: frozenset[str] = frozenset({MACOS})

# nvm 安装目录相对于 HOME 的路径
NVM_VERSIONS_DIR = (".nvm", "versions", "node")


def current_platform() -> str:
    """将 sys.platform 归一化为数据表中的键。"""
    if sys.platform.startswith("win"):
        return WINDOWS
    if sys.platform == "darwin":
        return MACOS
    return LINUX
