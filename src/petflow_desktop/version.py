"""petflow-desktop 版本常量（集中管理）。"""

from __future__ import annotations

__version__ = "0.3.2"
PACKAGE_VERSION = __version__
CONFIG_VERSION = "1.0"
