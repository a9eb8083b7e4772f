"""
配置类解析引擎
Configuration Class Resolution Engine

作者: mrkingu
日期: 2025-06-21
描述: 在任何对象实例化之前，把带注解的配置类解析为去重后的配置类集合，
     处理导入、延迟导入分组、循环导入检测、属性源注册和重复类合并
"""

from .annotations import (
    Annotation, Component, Configuration, Import, PropertySource, ComponentScan,
    ImportResource, Order, Conditional, Bean
)
from .contracts import (
    ImportSelector, DeferredImportSelector, ImportBeanDefinitionRegistrar,
    EnvironmentAware, ResourceLoaderAware, RegistryAware,
    Condition, ConditionContext, ConfigurationCondition, ConfigurationPhase
)
from .ordering import Ordered, HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE
from .source_unit import SourceUnit, ClassSourceUnit, StructuralSourceUnit, SourceUnitFactory
from .configuration_class import ConfigurationClass, BeanMethod
from .import_stack import ImportRegistry, ImportStack
from .registry import BeanDefinition, BeanDefinitionHolder, BeanDefinitionRegistry
from .parser import ConfigurationClassParser, ProcessingState
from .resolver import ConfigurationResolver, ResolutionResult

__all__ = [
    # 注解
    'Annotation',
    'Component',
    'Configuration',
    'Import',
    'PropertySource',
    'ComponentScan',
    'ImportResource',
    'Order',
    'Conditional',
    'Bean',

    # 扩展点
    'ImportSelector',
    'DeferredImportSelector',
    'ImportBeanDefinitionRegistrar',
    'EnvironmentAware',
    'ResourceLoaderAware',
    'RegistryAware',
    'Condition',
    'ConditionContext',
    'ConfigurationCondition',
    'ConfigurationPhase',
    'Ordered',
    'HIGHEST_PRECEDENCE',
    'LOWEST_PRECEDENCE',

    # 核心类
    'SourceUnit',
    'ClassSourceUnit',
    'StructuralSourceUnit',
    'SourceUnitFactory',
    'ConfigurationClass',
    'BeanMethod',
    'ImportRegistry',
    'ImportStack',
    'BeanDefinition',
    'BeanDefinitionHolder',
    'BeanDefinitionRegistry',
    'ConfigurationClassParser',
    'ProcessingState',
    'ConfigurationResolver',
    'ResolutionResult',
]
