"""
组件扫描测试
Component Scanner Tests

作者: mrkingu
日期: 2025-06-21
描述: 验证 @ComponentScan 的包扫描、Bean名称生成、重复注册处理以及扫描到的配置类被继续解析
"""

import sys
import os

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ioc_config import BeanDefinitionOverrideError
from ioc_config.context import BeanDefinition
from ioc_config.context.scanner import ComponentScanner

from sample_app.scan_root import PlaceholderScanConfig, ScanRootConfig


class TestComponentScanner:
    """组件扫描器测试"""

    @pytest.fixture
    def scanner(self, registry, factory, environment):
        return ComponentScanner(registry, factory, environment)

    def test_scan_registers_components(self, scanner, registry):
        """测试扫描注册被 @Component 标记的类"""
        holders = scanner.scan({"value": ["sample_app.scanned"]}, "sample_app.scan_root.ScanRootConfig")

        assert [h.bean_name for h in holders] == ["customName", "plainComponent", "scannedConfig"]
        assert registry.get_bean_definition_names() == ["customName", "plainComponent", "scannedConfig"]
        definition = registry.get_bean_definition("plainComponent")
        assert definition.bean_class_name == "sample_app.scanned.components.PlainComponent"
        assert definition.source == "sample_app.scan_root.ScanRootConfig"

    def test_default_package_is_declaring_package(self, scanner):
        """测试未指定包时扫描声明类所在的包"""
        holders = scanner.scan({"value": []}, "sample_app.scanned.components.PlainComponent")
        assert "scannedConfig" in [h.bean_name for h in holders]

    def test_comma_separated_and_placeholder_packages(self, scanner, make_environment, registry, factory):
        """测试逗号分隔与占位符形式的包名"""
        environment = make_environment({"scan.package": "sample_app.scanned.components"})
        scanner = ComponentScanner(registry, factory, environment)
        holders = scanner.scan({"base_packages": ["${scan.package}, sample_app.scanned"]}, "x.Y")
        assert len(holders) == 3

    def test_already_registered_class_is_skipped(self, scanner):
        """测试重复扫描时跳过已注册的类"""
        scanner.scan({"value": ["sample_app.scanned"]}, "a.B")
        assert scanner.scan({"value": ["sample_app.scanned"]}, "a.B") == []

    def test_conflicting_bean_name(self, scanner, registry):
        """测试Bean名称被其它类占用时报错"""
        registry.register_bean_definition("plainComponent", BeanDefinition(bean_class_name="other.PlainComponent"))
        with pytest.raises(BeanDefinitionOverrideError):
            scanner.scan({"value": ["sample_app.scanned"]}, "a.B")

    def test_missing_package(self, scanner):
        """测试包不存在时扫描结果为空"""
        assert scanner.scan({"value": ["sample_app.no_such_package"]}, "a.B") == []


class TestScanDuringResolution:
    """解析过程中的组件扫描测试"""

    def test_scanned_configuration_classes_are_parsed(self, resolver):
        """测试扫描到的配置类与组件被继续解析"""
        result = resolver.resolve(ScanRootConfig)

        assert result.class_names == [
            "sample_app.scanned.components.NamedComponent",
            "sample_app.scanned.components.PlainComponent",
            "sample_app.scanned.components.ScannedConfig",
            "sample_app.scan_root.ScanRootConfig",
        ]
        scanned = result.get("sample_app.scanned.components.ScannedConfig")
        assert [m.name for m in scanned.bean_methods] == ["scanned_bean"]
        assert not scanned.is_imported()
        assert scanned.bean_name == "scannedConfig"
        assert result.get("sample_app.scanned.components.NotAComponent") is None
        assert result.registry.contains_bean_definition("customName")

    def test_placeholder_default_package(self, resolver):
        """测试包名占位符默认值"""
        result = resolver.resolve(PlaceholderScanConfig)
        assert "sample_app.scanned.components.ScannedConfig" in result.class_names
