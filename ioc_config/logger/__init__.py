"""
日志模块
Logger Module

作者: mrkingu
日期: 2025-06-21
描述: 为 ioc_config 包配置统一的控制台日志输出
"""

import logging
import sys
from typing import Optional, TextIO

from .formatters import JSONFormatter, SimpleFormatter, ColoredFormatter

ROOT_LOGGER_NAME = "ioc_config"

_FORMATTERS = {
    "json": JSONFormatter,
    "simple": SimpleFormatter,
    "colored": ColoredFormatter,
}


def create_formatter(fmt: str = "simple") -> logging.Formatter:
    """
    按名称创建格式化器

    Args:
        fmt: simple / json / colored

    Returns:
        格式化器实例
    """
    formatter_class = _FORMATTERS.get(fmt)
    if formatter_class is None:
        raise ValueError(f"Unknown log format: {fmt}")
    return formatter_class()


def setup_logging(level: str = "INFO", fmt: str = "simple", stream: Optional[TextIO] = None) -> logging.Logger:
    """
    初始化日志系统

    重复调用时替换之前安装的处理器

    Args:
        level: 日志级别
        fmt: 日志格式
        stream: 输出流，默认 stderr

    Returns:
        ioc_config 根日志器
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_ioc_config_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(create_formatter(fmt))
    handler._ioc_config_handler = True
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    获取日志器实例

    Args:
        name: 日志器名称，自动归入 ioc_config 命名空间

    Returns:
        日志器
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


__all__ = [
    'setup_logging',
    'get_logger',
    'create_formatter',
    'JSONFormatter',
    'SimpleFormatter',
    'ColoredFormatter',
]
