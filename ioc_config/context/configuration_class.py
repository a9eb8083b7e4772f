"""
配置类模型
Configuration Class Model

作者: mrkingu
日期: 2025-06-21
描述: 解析结果的数据模型。ConfigurationClass 仅以类名作为身份，导入来源在合并时累加
"""

import logging
from typing import Any, Dict, List, Optional, Type

from .annotations import Configuration
from ..exceptions import BeanDefinitionParsingError
from .metadata_reader import MethodMetadata
from .source_unit import SourceUnit

logger = logging.getLogger(__name__)


class BeanMethod:
    """配置类上的一个Bean方法"""

    def __init__(self, metadata: MethodMetadata, configuration_class: "ConfigurationClass"):
        self.metadata = metadata
        self.configuration_class = configuration_class

    @property
    def name(self) -> str:
        return self.metadata.name

    def validate(self) -> None:
        """
        校验Bean方法

        Raises:
            BeanDefinitionParsingError: 代理模式下方法被 final 标记
        """
        if self.metadata.is_static:
            # 静态Bean方法不经过代理，没有额外约束
            return
        if self.configuration_class.is_proxied() and self.metadata.is_final:
            raise BeanDefinitionParsingError(
                f"@Bean method '{self.name}' must not be final; "
                f"remove the final marker to continue",
                bean_name=self.configuration_class.bean_name
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BeanMethod):
            return NotImplemented
        return self.metadata == other.metadata

    def __hash__(self) -> int:
        return hash(self.metadata)

    def __repr__(self) -> str:
        return f"BeanMethod({self.metadata.declaring_class_name}.{self.name})"


class ConfigurationClass:
    """
    配置类

    一个已解析的配置单元，包含Bean方法、导入资源、注册器以及导入来源
    """

    def __init__(self, source_unit: SourceUnit, bean_name: Optional[str] = None,
                 imported_by: Optional["ConfigurationClass"] = None):
        """
        初始化配置类

        Args:
            source_unit: 底层源单元
            bean_name: 显式声明时的Bean名称，纯导入时为None
            imported_by: 导入该类的配置类
        """
        self.metadata = source_unit
        self.bean_name = bean_name
        # 使用 dict 作为有序集合
        self._imported_by: Dict[ConfigurationClass, None] = {}
        if imported_by is not None:
            self._imported_by[imported_by] = None
        self._bean_methods: Dict[BeanMethod, None] = {}
        self.imported_resources: Dict[str, Optional[Type]] = {}
        self.import_bean_definition_registrars: Dict[Any, SourceUnit] = {}

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def simple_name(self) -> str:
        return self.metadata.simple_name

    @property
    def imported_by(self) -> List["ConfigurationClass"]:
        return list(self._imported_by)

    @property
    def bean_methods(self) -> List[BeanMethod]:
        return list(self._bean_methods)

    def is_imported(self) -> bool:
        """是否仅由导入产生"""
        return bool(self._imported_by)

    def is_proxied(self) -> bool:
        """是否是启用Bean方法代理的完整配置类"""
        attributes = self.metadata.get_annotation_attributes(Configuration)
        if not attributes:
            return False
        return attributes[0].get("proxy_bean_methods", True) is not False

    def merge_imported_by(self, other: "ConfigurationClass") -> None:
        """合并另一条导入路径的来源"""
        for importer in other._imported_by:
            self._imported_by.setdefault(importer, None)

    def add_bean_method(self, bean_method: BeanMethod) -> None:
        self._bean_methods.setdefault(bean_method, None)

    def add_imported_resource(self, location: str, reader: Optional[Type] = None) -> None:
        self.imported_resources[location] = reader

    def add_import_bean_definition_registrar(self, registrar: Any, importing_metadata: SourceUnit) -> None:
        self.import_bean_definition_registrars[registrar] = importing_metadata

    def validate(self) -> None:
        """
        校验配置类

        Raises:
            BeanDefinitionParsingError: 代理模式的配置类或其Bean方法被 final 标记
        """
        if self.is_proxied():
            if self.metadata.is_final():
                raise BeanDefinitionParsingError(
                    f"@Configuration class '{self.simple_name}' may not be final; "
                    f"remove the final marker to continue",
                    bean_name=self.bean_name
                )
            for bean_method in self._bean_methods:
                bean_method.validate()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationClass):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ConfigurationClass: bean_name '{self.bean_name}', {self.name}"
