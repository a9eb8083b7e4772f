"""
日志格式化器
Logger Formatters

作者: mrkingu
日期: 2025-06-21
描述: 解析过程日志的三种输出格式：单行JSON、纯文本以及按级别着色的终端文本。
     通过 logger.debug(..., extra={...}) 传入的字段会附加到输出中
"""

import json
import logging
from typing import Any, Dict, Optional

# 空记录上的属性加上格式化过程中生成的属性，其余都是 extra 字段
_STANDARD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """获取通过 extra 传入的字段"""
    return {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRIBUTES}


class JSONFormatter(logging.Formatter):
    """
    单行JSON格式化器

    输出字段: time, level, logger, message, location，
    有 extra 字段时放在 extra 下，有异常时附带 exception
    """

    def __init__(self, datefmt: str = "%Y-%m-%dT%H:%M:%S"):
        super().__init__(datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.lineno}",
        }
        extra = extra_fields(record)
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        # 非JSON类型（如 Path、类对象）按字符串输出
        return json.dumps(payload, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """
    纯文本格式化器

    输出形如: 2025-06-21 10:00:00 DEBUG    ioc_config.context.parser: app.Config: DONE [phase=parse]
    """

    DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None, show_extra: bool = True):
        """
        Args:
            fmt: % 风格的格式字符串
            datefmt: 时间格式
            show_extra: 是否在行尾输出 extra 字段
        """
        super().__init__(fmt or self.DEFAULT_FORMAT, datefmt)
        self.show_extra = show_extra

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = extra_fields(record) if self.show_extra else None
        if extra:
            line = f"{line} [{', '.join(f'{k}={v}' for k, v in extra.items())}]"
        return line


class ColoredFormatter(SimpleFormatter):
    """终端彩色格式化器，只给级别名称着色"""

    RESET = "\033[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)

        levelname = record.levelname
        # 先补齐宽度再加颜色码，保证各级别对齐
        record.levelname = f"{color}{levelname:<8}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname
