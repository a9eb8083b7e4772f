"""
属性源工厂
Property Source Factory

作者: mrkingu
日期: 2025-06-21
描述: 根据资源扩展名创建属性源，支持 .properties、.yaml/.yml 和 .json，
     嵌套结构展开为点分键
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import yaml

from ..exceptions import BeanDefinitionParsingError
from .property_source import PropertySource, ResourcePropertySource
from .resource import Resource

logger = logging.getLogger(__name__)


class PropertySourceFactory(ABC):
    """属性源工厂接口"""

    @abstractmethod
    def create_property_source(self, name: Optional[str], resource: Resource,
                               encoding: Optional[str] = None) -> PropertySource:
        """
        创建属性源

        Args:
            name: 属性源名称，None 时使用资源描述
            resource: 资源
            encoding: 编码

        Returns:
            属性源
        """


def flatten(data: Any, prefix: str = "") -> Dict[str, Any]:
    """
    将嵌套结构展开为点分键

    Args:
        data: 字典、列表或标量
        prefix: 键前缀

    Returns:
        例如 {"db": {"hosts": ["a"]}} -> {"db.hosts[0]": "a"}
    """
    result: Dict[str, Any] = {}
    if isinstance(data, dict):
        for key, value in data.items():
            child = f"{prefix}.{key}" if prefix else str(key)
            result.update(flatten(value, child))
    elif isinstance(data, list):
        for index, value in enumerate(data):
            result.update(flatten(value, f"{prefix}[{index}]"))
    elif prefix:
        result[prefix] = data
    return result


def parse_properties(text: str) -> Dict[str, str]:
    """
    解析 .properties 格式文本

    支持 # 与 ! 注释、= 或 : 分隔符以及行尾反斜杠续行
    """
    result: Dict[str, str] = {}
    logical = ""
    for raw_line in text.splitlines():
        line = raw_line.strip() if not logical else raw_line.lstrip()
        if not logical and (not line or line[0] in "#!"):
            continue
        if line.endswith("\\") and not line.endswith("\\\\"):
            logical += line[:-1]
            continue
        logical += line

        separators = [i for i in (logical.find("="), logical.find(":")) if i != -1]
        if separators:
            index = min(separators)
            key, value = logical[:index].strip(), logical[index + 1:].strip()
        else:
            key, _, value = logical.partition(" ")
            value = value.strip()
        if key:
            result[key] = value
        logical = ""
    return result


class DefaultPropertySourceFactory(PropertySourceFactory):
    """默认属性源工厂"""

    def create_property_source(self, name: Optional[str], resource: Resource,
                               encoding: Optional[str] = None) -> PropertySource:
        text = resource.read_text(encoding)
        filename = resource.filename.lower()

        if filename.endswith((".yaml", ".yml")):
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError as e:
                raise BeanDefinitionParsingError(f"Invalid YAML in {resource.description}: {e}") from e
            properties = flatten(data)
        elif filename.endswith(".json"):
            try:
                data = json.loads(text) if text.strip() else {}
            except json.JSONDecodeError as e:
                raise BeanDefinitionParsingError(f"Invalid JSON in {resource.description}: {e}") from e
            properties = flatten(data)
        else:
            properties = parse_properties(text)

        logger.debug(f"Loaded {len(properties)} properties from {resource.description}")
        return ResourcePropertySource(name, properties, resource.description)
