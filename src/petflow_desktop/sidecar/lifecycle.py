"""sidecar 生命周期管理。

状态机：

    idle ──► starting ──► running ──► stopped
      │          │
      │          └──► failed（任一步骤出错；已启动的进程先被结束）
      └──► unmanaged（端口已被其他实例占用，不持有进程，退出时什么也不做）

进程句柄保存在带锁的 ServiceSlot 中：启动线程与宿主的退出事件可能在不同线程上执行，
kill + wait 只会对同一个句柄执行一次，之后槽位为空，重复调用是空操作。
"""

from __future__ import annotations

import contextlib
import logging
import subprocess
import threading
from enum import Enum
from pathlib import Path

from petflow_desktop.core.commands import stdio_for
from petflow_desktop.core.config import DesktopConfig
from petflow_desktop.core.errors import LocalStateError, ReadinessTimeoutError, SupervisorError
from petflow_desktop.runtime.locator import resolve_runtime_binary
from petflow_desktop.sidecar.launcher import start_core
from petflow_desktop.sidecar.local_state import prepare_local_state
from petflow_desktop.sidecar.migrations import ensure_databases
from petflow_desktop.sidecar.readiness import is_port_open, wait_for_port
from petflow_desktop.sidecar.resources import HostPaths, resolve_core_dir

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    IDLE = "idle"
    UNMANAGED = "unmanaged"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


def terminate_process(proc: subprocess.Popen) -> None:
    """结束进程并回收。进程已退出时 kill 的错误被忽略。"""
    with contextlib.suppress(OSError):
        proc.kill()
    proc.wait()


class ServiceSlot:
    """持有 sidecar 进程句柄的互斥槽位。"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._proc: subprocess.Popen | None = None

    def put(self, proc: subprocess.Popen) -> None:
        with self._lock:
            if self._proc is not None:
                raise RuntimeError("ServiceSlot 已持有一个进程")
            self._proc = proc

    def kill(self) -> bool:
        """结束并回收持有的进程。

        返回：
            槽位中确实有进程时返回 True；槽位为空（已结束过）返回 False
        """
        with self._lock:
            proc, self._proc = self._proc, None
            if proc is None:
                return False
            logger.info("正在结束 petflow-core（PID %s）", proc.pid)
            terminate_process(proc)
            return True

    def poll(self) -> int | None:
        """子进程已退出时返回其退出码，仍在运行或槽位为空时返回 None。"""
        with self._lock:
            return self._proc.poll() if self._proc is not None else None

    @property
    def pid(self) -> int | None:
        with self._lock:
            return self._proc.pid if self._proc is not None else None

    @property
    def occupied(self) -> bool:
        with self._lock:
            return self._proc is not None


class LifecycleManager:
    """在宿主启动时确保 petflow-core 可用，在宿主退出时结束它。

    参数：
        config：桌面配置
        host：宿主提供的目录
    """

    def __init__(self, config: DesktopConfig, host: HostPaths) -> None:
        self.config = config
        self.host = host
        self.slot = ServiceSlot()
        self.error: SupervisorError | None = None
        self._lock = threading.Lock()
        self._state = LifecycleState.IDLE
        self._exit_requested = False

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def is_managed(self) -> bool:
        return self.slot.occupied

    def _set_state(self, state: LifecycleState) -> None:
        with self._lock:
            logger.debug("生命周期：%s -> %s", self._state.value, state.value)
            self._state = state

    def _exit_pending(self) -> bool:
        with self._lock:
            return self._exit_requested

    def setup(self) -> LifecycleState:
        """宿主启动钩子：阻塞直到服务就绪或失败。

        返回：
            最终状态（running / unmanaged / stopped）

        异常：
            SupervisorError：任一步骤失败，状态变为 failed
        """
        with self._lock:
            if self._state != LifecycleState.IDLE:
                return self._state

        service = self.config.service
        if is_port_open(service.port, service.host, service.connect_timeout_s):
            logger.info("端口 %s 已被占用，使用现有的 petflow-core 实例", service.port)
            self._set_state(LifecycleState.UNMANAGED)
            return LifecycleState.UNMANAGED

        self._set_state(LifecycleState.STARTING)
        try:
            return self._start()
        except BaseException as e:
            self.slot.kill()
            if isinstance(e, SupervisorError):
                self.error = e
                logger.error("petflow-core 启动失败：%s", e)
            self._set_state(LifecycleState.FAILED)
            raise

    def _start(self) -> LifecycleState:
        runtime: Path = resolve_runtime_binary()
        core_dir = resolve_core_dir(self.config, self.host)
        if self.host.app_data_dir is None:
            raise LocalStateError("宿主未提供私有数据目录（app_data_dir）")
        state = prepare_local_state(self.host.app_data_dir)

        ensure_databases(
            runtime,
            core_dir,
            state.master_db_url,
            state.tenant_db_url,
            stdio=stdio_for(self.config.is_development),
        )

        if self._exit_pending():
            self._set_state(LifecycleState.STOPPED)
            return LifecycleState.STOPPED

        self.slot.put(start_core(runtime, core_dir, state, self.config))

        service = self.config.service
        ready = wait_for_port(
            service.port,
            service.startup_timeout_s,
            host=service.host,
            poll_interval=service.poll_interval_s,
            connect_timeout=service.connect_timeout_s,
        )

        with self._lock:
            exit_requested = self._exit_requested
            if not exit_requested and ready:
                self._state = LifecycleState.RUNNING
                logger.info("petflow-core 已就绪（端口 %s）", service.port)
                return LifecycleState.RUNNING

        if exit_requested:
            # 退出事件可能发生在 put 之前，此时槽位里的进程尚未被结束
            self.slot.kill()
            self._set_state(LifecycleState.STOPPED)
            return LifecycleState.STOPPED

        raise ReadinessTimeoutError(
            f"petflow-core 在 {service.startup_timeout_s:g} 秒内未在端口 {service.port} 上响应（超时）。"
        )

    def on_exit_requested(self) -> None:
        """宿主退出事件：结束持有的进程。可重复调用。"""
        with self._lock:
            self._exit_requested = True
            if self._state == LifecycleState.UNMANAGED:
                return

        self.slot.kill()

        with self._lock:
            if self._state in (LifecycleState.IDLE, LifecycleState.RUNNING):
                self._state = LifecycleState.STOPPED
