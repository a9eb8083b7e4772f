"""
环境与占位符测试
Environment and Placeholder Tests

作者: mrkingu
日期: 2025-06-21
描述: 验证占位符的默认值、嵌套、循环检测、严格与宽松模式以及环境的属性查找顺序
"""

import sys
import os

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ioc_config import PlaceholderResolutionError
from ioc_config.env import MapPropertySource, PlaceholderHelper, StandardEnvironment


class TestPlaceholderHelper:
    """占位符解析测试"""

    def setup_method(self):
        self.properties = {
            "name": "demo",
            "greeting": "Hello ${name}",
            "inner": "name",
            "loop.a": "${loop.b}",
            "loop.b": "${loop.a}",
        }
        self.strict = PlaceholderHelper()
        self.lenient = PlaceholderHelper(ignore_unresolvable=True)

    def resolve(self, helper, text):
        return helper.replace_placeholders(text, self.properties.get)

    def test_simple_placeholder(self):
        """测试简单占位符"""
        assert self.resolve(self.strict, "${name}") == "demo"
        assert self.resolve(self.strict, "app-${name}-v1") == "app-demo-v1"
        assert self.resolve(self.strict, "no placeholders") == "no placeholders"

    def test_default_value(self):
        """测试默认值"""
        assert self.resolve(self.strict, "${missing:fallback}") == "fallback"
        assert self.resolve(self.strict, "${missing:}") == ""
        assert self.resolve(self.strict, "${name:fallback}") == "demo"

    def test_recursive_values(self):
        """测试属性值中的占位符继续解析"""
        assert self.resolve(self.strict, "${greeting}!") == "Hello demo!"

    def test_nested_placeholder_keys(self):
        """测试键本身含占位符"""
        assert self.resolve(self.strict, "${${inner}}") == "demo"
        assert self.resolve(self.strict, "${missing:${name}}") == "demo"

    def test_unresolvable_strict(self):
        """测试严格模式下无法解析时报错"""
        with pytest.raises(PlaceholderResolutionError) as exc_info:
            self.resolve(self.strict, "x-${missing}")
        assert exc_info.value.placeholder == "missing"

    def test_unresolvable_lenient(self):
        """测试宽松模式下无法解析的占位符保留原样"""
        assert self.resolve(self.lenient, "${missing}-${name}") == "${missing}-demo"

    def test_circular_reference(self):
        """测试循环引用报错"""
        with pytest.raises(PlaceholderResolutionError):
            self.resolve(self.strict, "${loop.a}")

    def test_unclosed_placeholder_is_kept(self):
        """测试未闭合的占位符保留原样"""
        assert self.resolve(self.strict, "${name") == "${name"


class TestStandardEnvironment:
    """标准环境测试"""

    def test_lookup_order(self):
        """测试排在前面的属性源优先"""
        environment = StandardEnvironment(include_system_environment=False)
        environment.property_sources.add_last(MapPropertySource("low", {"key": "low", "only.low": "1"}))
        environment.property_sources.add_first(MapPropertySource("high", {"key": "high"}))

        assert environment.get_property("key") == "high"
        assert environment.get_property("only.low") == "1"
        assert environment.get_property("missing") is None
        assert environment.get_property("missing", "default") == "default"
        assert environment.contains_property("only.low")
        assert not environment.contains_property("missing")

    def test_values_resolve_placeholders(self, make_environment):
        """测试属性值中的占位符被解析"""
        environment = make_environment({"host": "localhost", "url": "http://${host}:${port:8080}"})
        assert environment.get_property("url") == "http://localhost:8080"

    def test_non_string_values(self, make_environment):
        """测试非字符串值原样返回"""
        environment = make_environment({"port": 8080, "enabled": False})
        assert environment.get_property("port") == 8080
        assert environment.get_property("enabled") is False

    def test_resolve_placeholders(self, make_environment):
        """测试宽松与严格解析"""
        environment = make_environment({"name": "demo"})
        assert environment.resolve_placeholders("${name}/${unknown}") == "demo/${unknown}"
        with pytest.raises(PlaceholderResolutionError):
            environment.resolve_required_placeholders("${name}/${unknown}")

    def test_system_environment(self, monkeypatch):
        """测试系统环境变量"""
        monkeypatch.setenv("IOC_CONFIG_TEST_VALUE", "from-os")
        environment = StandardEnvironment()
        assert environment.property_sources.names() == [StandardEnvironment.SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME]
        assert environment.get_property("IOC_CONFIG_TEST_VALUE") == "from-os"

        assert len(StandardEnvironment(include_system_environment=False).property_sources) == 0
