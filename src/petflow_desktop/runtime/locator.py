"""Node.js 运行时定位。

解析顺序（先成功者胜出）：
1. PETFLOW_NODE_BINARY / PETFLOW_NODE 环境变量（指向不存在的路径时直接报错，不回退）
2. PATH 中的 `node`
3. 平台常见安装位置
4. macOS 上额外扫描 ~/.nvm 中安装的版本（新版本优先）

每个候选都通过 `<bin> --version` 校验，退出码为 0 才视为可用。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from petflow_desktop.core.commands import StdioMode, runtime_command
from petflow_desktop.core.errors import RuntimeNotFoundError
from petflow_desktop.core.platform import (
    NVM_VERSIONS_DIR,
    RUNTIME_CANDIDATES,
    VERSION_MANAGER_PLATFORMS,
    current_platform,
)

logger = logging.getLogger(__name__)

OVERRIDE_ENV_KEYS = ("PETFLOW_NODE_BINARY", "PETFLOW_NODE")
BARE_COMMAND = "node"


def is_runtime_available(binary: Path) -> bool:
    """通过 `--version` 检查运行时能否正常启动。"""
    try:
        return runtime_command(binary, "--version", stdio=StdioMode.DISCARD).run() == 0
    except OSError:
        return False


def candidate_paths(platform: str) -> list[Path]:
    return [Path(p) for p in RUNTIME_CANDIDATES.get(platform, [])]


def find_version_manager_runtimes(home: Path) -> list[Path]:
    """列出 nvm 安装的 node，按路径降序排列（字典序最新的版本在前）。"""
    versions_dir = home.joinpath(*NVM_VERSIONS_DIR)
    try:
        entries = list(versions_dir.iterdir())
    except OSError:
        return []

    nodes = [entry / "bin" / "node" for entry in entries]
    nodes = [node for node in nodes if node.exists()]
    nodes.sort(reverse=True)
    return nodes


def _resolve_override(env: Mapping[str, str]) -> Path | None:
    for key in OVERRIDE_ENV_KEYS:
        value = env.get(key)
        if value is None:
            continue
        trimmed = value.strip()
        if not trimmed:
            continue
        path = Path(trimmed)
        if not path.exists():
            raise RuntimeNotFoundError(f"{key} 指向的 Node 可执行文件不存在：{path}")
        if not is_runtime_available(path):
            raise RuntimeNotFoundError(f"{key} 指向的 Node 可执行文件无法运行：{path}")
        logger.info("使用 %s 指定的运行时：%s", key, path)
        return path
    return None


def resolve_runtime_binary(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    home: Path | None = None,
) -> Path:
    """返回经过校验的 Node.js 运行时路径。

    参数：
        env：环境变量（默认 os.environ）
        platform：平台键（默认当前平台）
        home：用户主目录（默认取 HOME/USERPROFILE）

    异常：
        RuntimeNotFoundError：覆盖变量无效或所有策略都失败
    """
    env = os.environ if env is None else env
    platform = platform or current_platform()

    override = _resolve_override(env)
    if override is not None:
        return override

    bare = Path(BARE_COMMAND)
    if is_runtime_available(bare):
        return bare

    candidates = candidate_paths(platform)
    if platform in VERSION_MANAGER_PLATFORMS:
        if home is None:
            raw_home = env.get("HOME") or env.get("USERPROFILE")
            home = Path(raw_home) if raw_home else None
        if home is not None:
            candidates.extend(find_version_manager_runtimes(home))

    for candidate in candidates:
        if not candidate.exists():
            continue
        if is_runtime_available(candidate):
            logger.debug("找到运行时：%s", candidate)
            return candidate

    raise RuntimeNotFoundError(
        "找不到用于启动 petflow-core 的 Node.js。\n"
        f"请安装 Node.js（例如通过 Homebrew），或设置 {OVERRIDE_ENV_KEYS[0]}=/path/to/node"
        f"（也可使用 {OVERRIDE_ENV_KEYS[1]}）。"
    )
