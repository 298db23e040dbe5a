"""Node.js 运行时定位。"""

from .locator import (
    OVERRIDE_ENV_KEYS,
    candidate_paths,
    find_version_manager_runtimes,
    is_runtime_available,
    resolve_runtime_binary,
)

__all__ = [
    "OVERRIDE_ENV_KEYS",
    "candidate_paths",
    "find_version_manager_runtimes",
    "is_runtime_available",
    "resolve_runtime_binary",
]
