"""
core.logger
-----------

统一日志入口：各模块通过 get_logger(__name__) 获取 logger，
脚本入口调用 setup_logging() 安装一次输出 handler。

注意：禁止引用 modules 下的任何内容。
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = "INFO"


def get_logger(name: str) -> logging.Logger:
    """按模块名返回 logger，本身不安装 handler。"""
    return logging.getLogger(name)


def setup_logging(level: Optional[Union[str, int]] = None) -> None:
    """
    为根 logger 安装单个 StreamHandler（重复调用不会叠加 handler）。

    输入：
        level: 日志级别，可为 "DEBUG" 等字符串或 logging 常量；
               为 None 时读取环境变量 LOG_LEVEL，缺省为 INFO。
    输出：
        无。
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", _DEFAULT_LEVEL)
    if isinstance(level, str):
        level = level.upper()

    root = logging.getLogger()
    root.setLevel(level)
    if not any(getattr(h, "_core_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._core_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
