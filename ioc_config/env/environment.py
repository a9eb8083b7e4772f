"""
环境与占位符解析
Environment and Placeholder Resolution

作者: mrkingu
日期: 2025-06-21
描述: 基于有序属性源链的环境实现，支持 ${key} 与 ${key:default} 占位符（可嵌套）
"""

import logging
import os
from typing import Any, Callable, Optional, Set

from ..exceptions import PlaceholderResolutionError
from .property_source import MapPropertySource, MutablePropertySources

logger = logging.getLogger(__name__)

PLACEHOLDER_PREFIX = "${"
PLACEHOLDER_SUFFIX = "}"
VALUE_SEPARATOR = ":"


class PlaceholderHelper:
    """
    占位符解析器

    使用示例:
        helper = PlaceholderHelper()
        helper.replace_placeholders("${app.name:demo}", props.get)
    """

    def __init__(self, ignore_unresolvable: bool = False):
        self.ignore_unresolvable = ignore_unresolvable

    def replace_placeholders(self, text: str, resolver: Callable[[str], Optional[Any]]) -> str:
        """
        替换文本中的占位符

        Args:
            text: 含占位符的文本
            resolver: 根据键返回值的函数，无值时返回None

        Returns:
            替换后的文本

        Raises:
            PlaceholderResolutionError: 占位符无法解析或存在循环引用
        """
        return self._parse(text, text, resolver, set())

    def _parse(self, value: str, original_text: str, resolver: Callable[[str], Optional[Any]],
               visiting: Set[str]) -> str:
        result = value
        start = result.find(PLACEHOLDER_PREFIX)
        while start != -1:
            end = self._find_placeholder_end(result, start)
            if end == -1:
                break

            raw = result[start + len(PLACEHOLDER_PREFIX):end]
            if raw in visiting:
                raise PlaceholderResolutionError(raw, f"circular placeholder reference in \"{original_text}\"")
            visiting.add(raw)

            placeholder = self._parse(raw, original_text, resolver, visiting)
            key, separator, default = placeholder.partition(VALUE_SEPARATOR)
            resolved = resolver(placeholder)
            if resolved is None and separator:
                resolved = resolver(key)
                if resolved is None:
                    resolved = default

            if resolved is not None:
                resolved = self._parse(str(resolved), original_text, resolver, visiting)
                result = result[:start] + resolved + result[end + len(PLACEHOLDER_SUFFIX):]
                start = result.find(PLACEHOLDER_PREFIX, start + len(resolved))
            elif self.ignore_unresolvable:
                start = result.find(PLACEHOLDER_PREFIX, end + len(PLACEHOLDER_SUFFIX))
            else:
                raise PlaceholderResolutionError(placeholder, original_text)

            visiting.discard(raw)
        return result

    def _find_placeholder_end(self, text: str, start: int) -> int:
        index = start + len(PLACEHOLDER_PREFIX)
        nested = 0
        while index < len(text):
            if text.startswith(PLACEHOLDER_SUFFIX, index):
                if nested == 0:
                    return index
                nested -= 1
                index += len(PLACEHOLDER_SUFFIX)
            elif text.startswith(PLACEHOLDER_PREFIX, index):
                nested += 1
                index += len(PLACEHOLDER_PREFIX)
            elif text[index] == "{":
                nested += 1
                index += 1
            else:
                index += 1
        return -1


class StandardEnvironment:
    """
    标准环境

    属性按属性源链顺序查找，排在前面的优先
    """

    SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME = "systemEnvironment"

    def __init__(self, include_system_environment: bool = True):
        self.property_sources = MutablePropertySources()
        self._strict_helper = PlaceholderHelper(ignore_unresolvable=False)
        self._lenient_helper = PlaceholderHelper(ignore_unresolvable=True)
        if include_system_environment:
            self.property_sources.add_last(
                MapPropertySource(self.SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME, dict(os.environ))
            )

    def get_property(self, key: str, default: Any = None) -> Any:
        """
        获取属性值，字符串值中的占位符会被解析

        Args:
            key: 属性键
            default: 默认值

        Returns:
            属性值
        """
        value = self._raw_property(key)
        if value is None:
            return default
        if isinstance(value, str):
            return self._lenient_helper.replace_placeholders(value, self._raw_property)
        return value

    def contains_property(self, key: str) -> bool:
        return any(ps.contains_property(key) for ps in self.property_sources)

    def resolve_placeholders(self, text: str) -> str:
        """解析占位符，无法解析的保留原样"""
        return self._lenient_helper.replace_placeholders(text, self._raw_property)

    def resolve_required_placeholders(self, text: str) -> str:
        """
        解析占位符

        Raises:
            PlaceholderResolutionError: 存在无法解析的占位符
        """
        return self._strict_helper.replace_placeholders(text, self._raw_property)

    def _raw_property(self, key: str) -> Any:
        for property_source in self.property_sources:
            value = property_source.get_property(key)
            if value is not None:
                logger.debug(f"Found key '{key}' in PropertySource '{property_source.name}'")
                return value
        return None
