"""
属性源
Property Sources

作者: mrkingu
日期: 2025-06-21
描述: 命名属性源、组合属性源以及环境使用的有序可变属性源链
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class PropertySource:
    """
    命名属性源

    身份由名称决定，同名属性源视为相等
    """

    def __init__(self, name: str, source: Any = None):
        if not name:
            raise ValueError("Property source name must contain at least one character")
        self.name = name
        self.source = source if source is not None else {}

    def get_property(self, key: str) -> Any:
        return None

    def contains_property(self, key: str) -> bool:
        return self.get_property(key) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertySource):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__} {{name='{self.name}'}}"


class MapPropertySource(PropertySource):
    """基于字典的属性源"""

    def __init__(self, name: str, source: Dict[str, Any]):
        super().__init__(name, source)

    def get_property(self, key: str) -> Any:
        return self.source.get(key)

    def contains_property(self, key: str) -> bool:
        return key in self.source

    @property
    def property_names(self) -> List[str]:
        return list(self.source)


class ResourcePropertySource(MapPropertySource):
    """
    从资源加载的属性源

    记录资源描述，便于同名冲突时以资源描述重命名
    """

    def __init__(self, name: Optional[str], source: Dict[str, Any], resource_name: str):
        super().__init__(name or resource_name, source)
        self.resource_name = resource_name

    def with_name(self, name: str) -> "ResourcePropertySource":
        """返回使用新名称的副本"""
        if self.name == name:
            return self
        return ResourcePropertySource(name, self.source, self.resource_name)

    def with_resource_name(self) -> "ResourcePropertySource":
        """返回以资源描述命名的副本"""
        return self.with_name(self.resource_name)


class CompositePropertySource(PropertySource):
    """
    组合属性源

    按成员顺序查找属性，排在前面的成员优先
    """

    def __init__(self, name: str):
        super().__init__(name, [])
        self.property_sources: List[PropertySource] = []

    def add_property_source(self, property_source: PropertySource) -> None:
        self.property_sources.append(property_source)

    def add_first_property_source(self, property_source: PropertySource) -> None:
        if property_source in self.property_sources:
            self.property_sources.remove(property_source)
        self.property_sources.insert(0, property_source)

    def get_property(self, key: str) -> Any:
        for property_source in self.property_sources:
            value = property_source.get_property(key)
            if value is not None:
                return value
        return None

    def contains_property(self, key: str) -> bool:
        return any(ps.contains_property(key) for ps in self.property_sources)

    @property
    def property_names(self) -> List[str]:
        names: Dict[str, None] = {}
        for property_source in self.property_sources:
            for name in getattr(property_source, "property_names", ()):
                names.setdefault(name, None)
        return list(names)

    def __repr__(self) -> str:
        return f"CompositePropertySource {{name='{self.name}', property_sources={self.property_sources}}}"


class MutablePropertySources:
    """
    有序可变属性源链

    越靠前优先级越高；添加同名属性源时先移除旧的
    """

    def __init__(self):
        self._sources: List[PropertySource] = []

    def __iter__(self) -> Iterator[PropertySource]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)

    def contains(self, name: str) -> bool:
        return any(ps.name == name for ps in self._sources)

    def get(self, name: str) -> Optional[PropertySource]:
        for property_source in self._sources:
            if property_source.name == name:
                return property_source
        return None

    def names(self) -> List[str]:
        return [ps.name for ps in self._sources]

    def add_first(self, property_source: PropertySource) -> None:
        self._remove_if_present(property_source.name)
        self._sources.insert(0, property_source)

    def add_last(self, property_source: PropertySource) -> None:
        self._remove_if_present(property_source.name)
        self._sources.append(property_source)

    def add_before(self, relative_name: str, property_source: PropertySource) -> None:
        """
        在指定属性源之前插入

        Args:
            relative_name: 参照属性源名称
            property_source: 要插入的属性源

        Raises:
            ValueError: 参照自身或参照不存在
        """
        self._assert_legal_relative_addition(relative_name, property_source)
        self._remove_if_present(property_source.name)
        self._sources.insert(self._index_of(relative_name), property_source)

    def add_after(self, relative_name: str, property_source: PropertySource) -> None:
        self._assert_legal_relative_addition(relative_name, property_source)
        self._remove_if_present(property_source.name)
        self._sources.insert(self._index_of(relative_name) + 1, property_source)

    def replace(self, name: str, property_source: PropertySource) -> None:
        """
        替换同名位置上的属性源

        Raises:
            ValueError: 名称不存在
        """
        self._sources[self._index_of(name)] = property_source

    def remove(self, name: str) -> Optional[PropertySource]:
        for index, property_source in enumerate(self._sources):
            if property_source.name == name:
                return self._sources.pop(index)
        return None

    def _index_of(self, name: str) -> int:
        for index, property_source in enumerate(self._sources):
            if property_source.name == name:
                return index
        raise ValueError(f"PropertySource named '{name}' does not exist")

    def _assert_legal_relative_addition(self, relative_name: str, property_source: PropertySource) -> None:
        if property_source.name == relative_name:
            raise ValueError(f"PropertySource named '{relative_name}' cannot be added relative to itself")

    def _remove_if_present(self, name: str) -> None:
        if self.remove(name) is not None:
            logger.debug(f"Removed existing property source '{name}' before re-adding")

    def __repr__(self) -> str:
        return f"MutablePropertySources({self.names()})"
