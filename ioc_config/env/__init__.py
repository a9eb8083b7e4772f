"""
环境模块
Environment Module

作者: mrkingu
日期: 2025-06-21
描述: 属性源链、占位符解析、资源加载与属性源工厂
"""

from .property_source import (
    PropertySource, MapPropertySource, ResourcePropertySource,
    CompositePropertySource, MutablePropertySources
)
from .environment import StandardEnvironment, PlaceholderHelper
from .resource import Resource, FileSystemResource, PackageResource, DefaultResourceLoader
from .factory import PropertySourceFactory, DefaultPropertySourceFactory

__all__ = [
    'PropertySource',
    'MapPropertySource',
    'ResourcePropertySource',
    'CompositePropertySource',
    'MutablePropertySources',
    'StandardEnvironment',
    'PlaceholderHelper',
    'Resource',
    'FileSystemResource',
    'PackageResource',
    'DefaultResourceLoader',
    'PropertySourceFactory',
    'DefaultPropertySourceFactory',
]
