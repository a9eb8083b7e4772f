"""
策略对象实例化
Strategy Instantiation Utilities

作者: mrkingu
日期: 2025-06-21
描述: 实例化导入选择器、注册器、分组和条件，并注入 Aware 能力
"""

import inspect
import logging
from typing import Any, Optional

from .contracts import EnvironmentAware, RegistryAware, ResourceLoaderAware
from ..exceptions import BeanInstantiationError

logger = logging.getLogger(__name__)


def instantiate_class(clazz: type, assignable_to: type, environment: Any = None,
                      resource_loader: Any = None, registry: Any = None) -> Any:
    """
    实例化策略类

    构造函数中名为 environment / resource_loader / registry 的参数会被自动传入，
    实例化后再注入 Aware 能力

    Args:
        clazz: 要实例化的类
        assignable_to: 期望的父类型
        environment: 环境
        resource_loader: 资源加载器
        registry: Bean定义注册表

    Returns:
        实例

    Raises:
        BeanInstantiationError: 类型不匹配或构造失败
    """
    class_name = getattr(clazz, "__qualname__", repr(clazz))
    if not inspect.isclass(clazz) or not issubclass(clazz, assignable_to):
        raise BeanInstantiationError(class_name, f"not assignable to {assignable_to.__name__}")
    if inspect.isabstract(clazz):
        raise BeanInstantiationError(class_name, "class is abstract")

    available = {
        "environment": environment,
        "resource_loader": resource_loader,
        "registry": registry,
    }
    kwargs = {}
    try:
        parameters = inspect.signature(clazz).parameters
    except (TypeError, ValueError):
        parameters = {}
    for name in parameters:
        if name in available:
            kwargs[name] = available[name]

    try:
        instance = clazz(**kwargs)
    except Exception as e:
        raise BeanInstantiationError(class_name, str(e)) from e

    invoke_aware_methods(instance, environment, resource_loader, registry)
    return instance


def invoke_aware_methods(instance: Any, environment: Any = None, resource_loader: Any = None,
                         registry: Optional[Any] = None) -> None:
    """
    注入 Aware 能力

    Args:
        instance: 策略实例
        environment: 环境
        resource_loader: 资源加载器
        registry: Bean定义注册表
    """
    if isinstance(instance, EnvironmentAware):
        instance.set_environment(environment)
    if isinstance(instance, ResourceLoaderAware):
        instance.set_resource_loader(resource_loader)
    if isinstance(instance, RegistryAware):
        instance.set_registry(registry)
    logger.debug(f"Instantiated {type(instance).__qualname__}")
