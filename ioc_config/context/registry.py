"""
Bean定义注册表
Bean Definition Registry

作者: mrkingu
日期: 2025-06-21
描述: 解析阶段输入与组件扫描输出使用的Bean定义及其注册表。
     Bean定义可以携带源单元、已加载的类或仅类名
"""

import logging
from typing import Any, Dict, List, Optional

from .annotations import qualified_name
from ..exceptions import BeanDefinitionOverrideError, IoCException

logger = logging.getLogger(__name__)


class BeanDefinition:
    """Bean定义"""

    def __init__(self, bean_class: Optional[type] = None, bean_class_name: Optional[str] = None,
                 metadata: Any = None, source: Optional[str] = None):
        """
        初始化Bean定义

        Args:
            bean_class: 已加载的类
            bean_class_name: 类的全限定名
            metadata: 已有的源单元
            source: 定义来源描述（例如扫描它的配置类）
        """
        self.bean_class = bean_class
        if bean_class_name is None:
            if bean_class is not None:
                bean_class_name = qualified_name(bean_class)
            elif metadata is not None:
                bean_class_name = metadata.name
        self.bean_class_name = bean_class_name
        self.metadata = metadata
        self.source = source
        self.attributes: Dict[str, Any] = {}

    def has_bean_class(self) -> bool:
        return self.bean_class is not None

    def source_unit(self, factory: Any) -> Any:
        """
        获取Bean定义对应的源单元

        Args:
            factory: SourceUnitFactory

        Returns:
            源单元，优先使用已有元数据，其次已加载的类，最后按名称读取
        """
        if self.metadata is not None:
            return self.metadata
        if self.bean_class is not None:
            self.metadata = factory.source_unit_for(self.bean_class)
        else:
            self.metadata = factory.source_unit_for(self.bean_class_name)
        return self.metadata

    def __repr__(self) -> str:
        return f"BeanDefinition(class={self.bean_class_name}, source={self.source})"


class BeanDefinitionHolder:
    """带名称的Bean定义"""

    def __init__(self, bean_definition: BeanDefinition, bean_name: str):
        self.bean_definition = bean_definition
        self.bean_name = bean_name

    def __repr__(self) -> str:
        return f"BeanDefinitionHolder({self.bean_name}: {self.bean_definition})"


class BeanDefinitionRegistry:
    """
    Bean定义注册表

    按注册顺序保存Bean定义；下游注册阶段是唯一的共享写入方
    """

    def __init__(self, allow_bean_definition_overriding: bool = True):
        self.allow_bean_definition_overriding = allow_bean_definition_overriding
        self._definitions: Dict[str, BeanDefinition] = {}

    def register_bean_definition(self, bean_name: str, bean_definition: BeanDefinition) -> None:
        """
        注册Bean定义

        Args:
            bean_name: Bean名称
            bean_definition: Bean定义

        Raises:
            BeanDefinitionOverrideError: 名称已存在且不允许覆盖
        """
        if not bean_name:
            raise IoCException("Bean name must not be empty")
        existing = self._definitions.get(bean_name)
        if existing is not None:
            if not self.allow_bean_definition_overriding:
                raise BeanDefinitionOverrideError(bean_name)
            logger.debug(f"Overriding bean definition for bean '{bean_name}': {existing} -> {bean_definition}")
        self._definitions[bean_name] = bean_definition

    def remove_bean_definition(self, bean_name: str) -> None:
        if self._definitions.pop(bean_name, None) is None:
            raise IoCException(f"No bean named '{bean_name}' available")

    def get_bean_definition(self, bean_name: str) -> BeanDefinition:
        definition = self._definitions.get(bean_name)
        if definition is None:
            raise IoCException(f"No bean named '{bean_name}' available")
        return definition

    def contains_bean_definition(self, bean_name: str) -> bool:
        return bean_name in self._definitions

    def get_bean_definition_names(self) -> List[str]:
        return list(self._definitions)

    def contains_bean_class(self, class_name: str) -> bool:
        """是否已有同一个类的Bean定义"""
        return any(d.bean_class_name == class_name for d in self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)
