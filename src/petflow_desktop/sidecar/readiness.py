"""基于 TCP 连通性的就绪检测（不检查协议层健康状态）。"""

from __future__ import annotations

import socket
import time

DEFAULT_HOST = "127.0.0.1"
CONNECT_TIMEOUT_S = 0.2
POLL_INTERVAL_S = 0.2


def is_port_open(port: int, host: str = DEFAULT_HOST, timeout: float = CONNECT_TIMEOUT_S) -> bool:
    """检查端口是否能建立连接。"""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def wait_for_port(
    port: int,
    timeout: float,
    *,
    host: str = DEFAULT_HOST,
    poll_interval: float = POLL_INTERVAL_S,
    connect_timeout: float = CONNECT_TIMEOUT_S,
) -> bool:
    """阻塞轮询直到端口可连接（True）或超过截止时间（False）。"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if is_port_open(port, host, connect_timeout):
            return True
        time.sleep(poll_interval)
    return False
