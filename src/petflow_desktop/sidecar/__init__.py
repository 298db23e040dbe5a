"""petflow-core sidecar 的准备、启动与生命周期管理。"""

from .lifecycle import LifecycleManager, LifecycleState, ServiceSlot
from .resources import HostPaths

__all__ = [
    "HostPaths",
    "LifecycleManager",
    "LifecycleState",
    "ServiceSlot",
]
