"""
测试配置文件
Test Configuration File

作者: mrkingu
日期: 2025-06-21
描述: pytest fixtures：解析器设置、环境、源单元工厂、Bean定义注册表与解析器，
     以及示例应用中记录调用的全局状态的清理
"""

import os
import sys

import pytest

# 添加项目根目录与测试目录（示例应用 sample_app 所在位置）到路径
TEST_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.dirname(TEST_DIR))
sys.path.insert(0, TEST_DIR)

from ioc_config.config import ResolverSettings
from ioc_config.context import (
    BeanDefinition, BeanDefinitionHolder, BeanDefinitionRegistry,
    ConfigurationClassParser, ConfigurationResolver, SourceUnitFactory
)
from ioc_config.env import DefaultResourceLoader, MapPropertySource, StandardEnvironment


@pytest.fixture
def settings():
    """不包含系统环境变量的设置，保证测试结果可重复"""
    return ResolverSettings(include_system_environment=False)


@pytest.fixture
def resolver(settings):
    return ConfigurationResolver(settings)


@pytest.fixture
def environment():
    return StandardEnvironment(include_system_environment=False)


@pytest.fixture
def make_environment():
    """
    创建带测试属性的环境

    使用示例:
        env = make_environment({"feature.enabled": "true"})
    """
    def _make(properties=None):
        env = StandardEnvironment(include_system_environment=False)
        if properties:
            env.property_sources.add_first(MapPropertySource("test", dict(properties)))
        return env
    return _make


@pytest.fixture
def factory():
    return SourceUnitFactory()


@pytest.fixture
def registry():
    return BeanDefinitionRegistry()


@pytest.fixture
def make_parser(registry, factory):
    """创建共享 registry 与 factory 的解析器"""
    def _make(environment=None):
        env = environment if environment is not None else StandardEnvironment(include_system_environment=False)
        return ConfigurationClassParser(registry, env, DefaultResourceLoader(), factory=factory)
    return _make


@pytest.fixture
def holders():
    """把类或类名包装成 BeanDefinitionHolder 列表"""
    def _wrap(*targets):
        result = []
        for target in targets:
            if isinstance(target, str):
                definition = BeanDefinition(bean_class_name=target)
            else:
                definition = BeanDefinition(bean_class=target)
            simple_name = definition.bean_class_name.rsplit(".", 1)[-1]
            result.append(BeanDefinitionHolder(definition, simple_name[0].lower() + simple_name[1:]))
        return result
    return _wrap


@pytest.fixture(autouse=True)
def reset_sample_state():
    """每个测试前清理示例应用记录的调用"""
    from sample_app import conditions, deferred, registrars
    deferred.CALLS.clear()
    deferred.SharedGroup.instances.clear()
    conditions.EVALUATED.clear()
    registrars.RegistrySelector.seen_registries.clear()
    yield
