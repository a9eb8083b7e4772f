"""
导入与条件契约
Import and Condition Contracts

作者: mrkingu
日期: 2025-06-21
描述: 配置类解析过程中使用的扩展点接口：ImportSelector、DeferredImportSelector、
     ImportBeanDefinitionRegistrar、各类 Aware 能力以及条件判断接口
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Union

if TYPE_CHECKING:
    from .source_unit import SourceUnit


class ConfigurationPhase(Enum):
    """条件判断的阶段"""
    PARSE_CONFIGURATION = "parse_configuration"
    REGISTER_BEAN = "register_bean"


class ImportSelector(ABC):
    """
    导入选择器

    根据导入方的元数据返回需要导入的类（全限定名或类型）
    """

    @abstractmethod
    def select_imports(self, importing_metadata: "SourceUnit") -> List[Union[str, type]]:
        """
        选择要导入的类

        Args:
            importing_metadata: 声明 @Import 的类的元数据

        Returns:
            要导入的类名或类型列表
        """


class DeferredImportSelector(ImportSelector):
    """
    延迟导入选择器

    在所有配置类解析完成后才处理，可通过分组统一计算导入结果
    """

    def get_import_group(self) -> Optional[type]:
        """返回分组类型，None 表示不分组"""
        return None

    @dataclass(frozen=True)
    class Entry:
        """分组导入条目"""
        metadata: "SourceUnit"
        import_class_name: Union[str, type]

    class Group(ABC):
        """延迟导入分组：先 process 所有成员，再一次性 select_imports"""

        @abstractmethod
        def process(self, metadata: "SourceUnit", selector: "DeferredImportSelector") -> None:
            """处理一个成员选择器"""

        @abstractmethod
        def select_imports(self) -> Iterable["DeferredImportSelector.Entry"]:
            """返回最终的导入条目"""


class ImportBeanDefinitionRegistrar(ABC):
    """Bean定义注册器，由下游注册阶段调用，解析阶段只负责记录"""

    @abstractmethod
    def register_bean_definitions(self, importing_metadata: "SourceUnit", registry: Any) -> None:
        """
        注册额外的Bean定义

        Args:
            importing_metadata: 导入方的元数据
            registry: Bean定义注册表
        """


class EnvironmentAware:
    """需要注入环境对象"""

    def set_environment(self, environment: Any) -> None:
        self.environment = environment


class ResourceLoaderAware:
    """需要注入资源加载器"""

    def set_resource_loader(self, resource_loader: Any) -> None:
        self.resource_loader = resource_loader


class RegistryAware:
    """需要注入Bean定义注册表"""

    def set_registry(self, registry: Any) -> None:
        self.registry = registry


class ConditionContext:
    """条件判断上下文"""

    def __init__(self, registry: Any = None, environment: Any = None, resource_loader: Any = None):
        self.registry = registry
        self.environment = environment
        self.resource_loader = resource_loader


class Condition(ABC):
    """条件接口，决定被 @Conditional 标记的类是否参与解析"""

    @abstractmethod
    def matches(self, context: ConditionContext, metadata: "SourceUnit") -> bool:
        """
        判断条件是否满足

        Args:
            context: 条件上下文
            metadata: 被判断类的元数据

        Returns:
            是否满足
        """


class ConfigurationCondition(Condition):
    """只在指定阶段生效的条件"""

    @abstractmethod
    def get_configuration_phase(self) -> ConfigurationPhase:
        """返回条件生效的阶段"""
