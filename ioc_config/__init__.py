"""
IoC配置解析
IoC Configuration Resolution

作者: mrkingu
日期: 2025-06-21
描述: 类似Spring的配置类解析：@Configuration、@Import、@PropertySource、@ComponentScan、
     @Bean 等声明在实例化之前被解析为配置模型
"""

from .exceptions import (
    IoCException, BeanDefinitionStoreError, BeanDefinitionParsingError, CircularImportError,
    ClassResolutionError, PlaceholderResolutionError, ResourceNotFoundError,
    GroupContractViolation, BeanInstantiationError, BeanDefinitionOverrideError
)
from .context import (
    Component, Configuration, Import, PropertySource, ComponentScan, ImportResource,
    Order, Conditional, Bean, ImportSelector, DeferredImportSelector,
    ImportBeanDefinitionRegistrar, Condition, ConfigurationCondition, ConfigurationPhase,
    ConfigurationResolver, ResolutionResult
)

__version__ = "1.0.0"

__all__ = [
    # 注解
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
    'Condition',
    'ConfigurationCondition',
    'ConfigurationPhase',

    # 入口
    'ConfigurationResolver',
    'ResolutionResult',

    # 异常
    'IoCException',
    'BeanDefinitionStoreError',
    'BeanDefinitionParsingError',
    'CircularImportError',
    'ClassResolutionError',
    'PlaceholderResolutionError',
    'ResourceNotFoundError',
    'GroupContractViolation',
    'BeanInstantiationError',
    'BeanDefinitionOverrideError',
]
