"""
配置解析入口
Configuration Resolver

作者: mrkingu
日期: 2025-06-21
描述: 一次 resolve() 调用就是一个独立的解析会话：注册根候选、解析、校验，
     返回配置类集合、导入注册表、环境和Bean定义注册表
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from .configuration_class import ConfigurationClass
from .configuration_utils import ORDER_ATTRIBUTE, check_configuration_class_candidate, decapitalize, generate_bean_name
from .import_stack import ImportRegistry
from .ordering import LOWEST_PRECEDENCE
from .parser import ConfigurationClassParser
from .registry import BeanDefinition, BeanDefinitionHolder, BeanDefinitionRegistry
from .source_unit import SourceUnitFactory
from ..env.environment import StandardEnvironment
from ..env.factory import PropertySourceFactory
from ..env.resource import DefaultResourceLoader
from ..exceptions import ClassResolutionError

logger = logging.getLogger(__name__)


@dataclass
class ResolutionResult:
    """一次解析会话的结果"""
    configuration_classes: List[ConfigurationClass]
    import_registry: ImportRegistry
    environment: StandardEnvironment
    registry: BeanDefinitionRegistry

    def get(self, class_name: str) -> Optional[ConfigurationClass]:
        """按全限定名查找配置类"""
        for configuration_class in self.configuration_classes:
            if configuration_class.name == class_name:
                return configuration_class
        return None

    @property
    def class_names(self) -> List[str]:
        return [c.name for c in self.configuration_classes]


class ConfigurationResolver:
    """
    配置解析器入口

    使用示例:
        resolver = ConfigurationResolver()
        result = resolver.resolve(AppConfig)
        for configuration_class in result.configuration_classes:
            print(configuration_class.name, configuration_class.bean_methods)
    """

    def __init__(self, settings: Any = None, property_source_factory: Optional[PropertySourceFactory] = None):
        """
        初始化

        Args:
            settings: ResolverSettings，None 时使用全局默认设置
            property_source_factory: 默认属性源工厂
        """
        if settings is None:
            from ..config.settings import get_settings
            settings = get_settings()
        self.settings = settings
        self.property_source_factory = property_source_factory

    def create_environment(self) -> StandardEnvironment:
        return StandardEnvironment(include_system_environment=self.settings.include_system_environment)

    def resolve(self, *targets: Any, environment: Optional[StandardEnvironment] = None) -> ResolutionResult:
        """
        解析根配置类

        Args:
            targets: 类或全限定类名
            environment: 使用已有环境，None 时新建

        Returns:
            解析结果

        Raises:
            BeanDefinitionStoreError: 解析失败
        """
        registry = BeanDefinitionRegistry(self.settings.allow_bean_definition_overriding)
        environment = environment if environment is not None else self.create_environment()
        resource_loader = DefaultResourceLoader(self.settings.base_dir)
        factory = SourceUnitFactory(self.settings.reserved_namespaces)

        candidates = []
        for target in targets:
            holder = self._register_root(target, registry, factory)
            definition = holder.bean_definition
            if definition.metadata is None or check_configuration_class_candidate(definition, factory):
                candidates.append(holder)
            else:
                logger.debug(f"{definition.bean_class_name} is not a configuration class candidate")

        if not candidates:
            logger.info("No configuration class candidates found")
        candidates.sort(key=lambda h: h.bean_definition.attributes.get(ORDER_ATTRIBUTE, LOWEST_PRECEDENCE))

        logger.info(f"Resolving {len(candidates)} configuration class candidate(s)")
        parser = ConfigurationClassParser(
            registry, environment, resource_loader,
            factory=factory,
            property_source_factory=self.property_source_factory,
            default_encoding=self.settings.default_encoding,
        )
        parser.parse(candidates)
        parser.validate()

        configuration_classes = parser.get_configuration_classes()
        logger.info(f"Resolved {len(configuration_classes)} configuration class(es)")
        return ResolutionResult(
            configuration_classes=configuration_classes,
            import_registry=parser.get_import_registry(),
            environment=environment,
            registry=registry,
        )

    def _register_root(self, target: Any, registry: BeanDefinitionRegistry,
                       factory: SourceUnitFactory) -> BeanDefinitionHolder:
        if isinstance(target, str):
            definition = BeanDefinition(bean_class_name=target)
        else:
            definition = BeanDefinition(bean_class=target)

        try:
            bean_name = generate_bean_name(definition.source_unit(factory))
        except ClassResolutionError:
            # 交给解析器报告带类名的错误
            definition.metadata = None
            bean_name = decapitalize(definition.bean_class_name.rsplit(".", 1)[-1])

        registry.register_bean_definition(bean_name, definition)
        return BeanDefinitionHolder(definition, bean_name)
