"""
解析器设置
Resolver Settings

作者: mrkingu
日期: 2025-06-21
描述: 解析会话的参数配置，支持从YAML或JSON文件加载
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..context.source_unit import DEFAULT_RESERVED_NAMESPACES

logger = logging.getLogger(__name__)

LOG_FORMATS = ("simple", "json", "colored")


class ResolverSettings(BaseModel):
    """解析器设置"""

    model_config = ConfigDict(
        # 禁止额外字段
        extra="forbid",
        # 使用枚举值
        use_enum_values=True,
        # 允许属性验证
        validate_assignment=True
    )

    reserved_namespaces: List[str] = Field(
        default_factory=lambda: list(DEFAULT_RESERVED_NAMESPACES),
        description="始终反射加载的平台命名空间"
    )
    base_dir: Optional[str] = Field(default=None, description="相对资源路径的基准目录")
    default_encoding: str = Field(default="utf-8", description="属性源默认编码")
    include_system_environment: bool = Field(default=True, description="环境是否包含系统环境变量")
    allow_bean_definition_overriding: bool = Field(default=True, description="是否允许覆盖同名Bean定义")
    log_level: str = Field(default="INFO", description="日志级别")
    log_format: str = Field(default="simple", description="日志格式: simple / json / colored")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        if value not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {value}, expected one of {LOG_FORMATS}")
        return value


def load_settings(path: Union[str, Path]) -> ResolverSettings:
    """
    从文件加载设置

    Args:
        path: .yaml / .yml / .json 文件路径

    Returns:
        设置对象

    Raises:
        FileNotFoundError: 文件不存在
        ValueError: 文件格式不支持或内容不合法
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f) or {}
        elif path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported settings file: {path}")

    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")
    # 允许整体放在 ioc_config 节点下
    data = data.get("ioc_config", data)

    settings = ResolverSettings(**data)
    logger.info(f"Loaded resolver settings from {path}")
    return settings


_settings: Optional[ResolverSettings] = None


def get_settings() -> ResolverSettings:
    """
    获取全局默认设置

    Returns:
        设置对象
    """
    global _settings
    if _settings is None:
        _settings = ResolverSettings()
    return _settings
