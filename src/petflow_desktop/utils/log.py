"""日志配置：标准库 logging + Rich 控制台输出。"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "petflow_desktop"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """配置 petflow_desktop 日志器，重复调用不会重复添加 handler。

    参数：
        verbose：是否输出 DEBUG 级别日志
        console：Rich 控制台（默认输出到 stderr）
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
