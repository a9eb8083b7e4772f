"""
导入栈测试
Import Stack Tests

作者: mrkingu
日期: 2025-06-21
描述: 验证导入栈的后进先出行为、字符串表示以及导入注册表的记录与移除
"""

import sys
import os

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ioc_config.context import ConfigurationClass, ImportStack

from sample_app.imports import FirstImporter, SecondImporter, SharedConfig


class TestImportStack:
    """导入栈测试"""

    def setup_method(self):
        self.stack = ImportStack()

    def _configuration_class(self, factory, cls):
        return ConfigurationClass(factory.source_unit_for(cls))

    def test_push_pop_peek(self, factory):
        """测试压栈、出栈与栈顶"""
        first = self._configuration_class(factory, FirstImporter)
        shared = self._configuration_class(factory, SharedConfig)

        assert self.stack.peek() is None
        self.stack.push(first)
        self.stack.push(shared)
        assert len(self.stack) == 2
        assert self.stack.peek() is shared
        assert shared in self.stack

        assert self.stack.pop() is shared
        assert shared not in self.stack
        assert list(self.stack) == [first]

    def test_membership_is_by_class_name(self, factory):
        """测试以类名判断是否在栈中"""
        self.stack.push(self._configuration_class(factory, SharedConfig))
        assert self._configuration_class(factory, SharedConfig) in self.stack

    def test_string_rendering(self, factory):
        """测试字符串表示为由栈底到栈顶的简单类名"""
        self.stack.push(self._configuration_class(factory, FirstImporter))
        self.stack.push(self._configuration_class(factory, SharedConfig))
        assert str(self.stack) == "[FirstImporter->SharedConfig]"
        assert self.stack.chain() == ["sample_app.imports.FirstImporter", "sample_app.imports.SharedConfig"]

    def test_empty_rendering(self):
        """测试空栈的字符串表示"""
        assert str(self.stack) == "[]"


class TestImportRegistry:
    """导入注册表测试"""

    def setup_method(self):
        self.registry = ImportStack()

    def test_latest_importer_wins(self, factory):
        """测试返回最近一次导入的导入方"""
        first = factory.source_unit_for(FirstImporter)
        second = factory.source_unit_for(SecondImporter)
        self.registry.register_import(first, "sample_app.imports.SharedConfig")
        self.registry.register_import(second, "sample_app.imports.SharedConfig")

        assert self.registry.get_importing_class_for("sample_app.imports.SharedConfig") is second
        assert self.registry.get_importing_classes_for("sample_app.imports.SharedConfig") == [first, second]
        assert self.registry.imported_class_names() == ["sample_app.imports.SharedConfig"]

    def test_unknown_import(self):
        """测试未记录的类"""
        assert self.registry.get_importing_class_for("sample_app.imports.SharedConfig") is None
        assert self.registry.get_importing_classes_for("sample_app.imports.SharedConfig") == []

    def test_remove_importing_class(self, factory):
        """测试移除导入方的全部记录"""
        first = factory.source_unit_for(FirstImporter)
        second = factory.source_unit_for(SecondImporter)
        self.registry.register_import(first, "sample_app.imports.SharedConfig")
        self.registry.register_import(second, "sample_app.imports.SharedConfig")
        self.registry.register_import(first, "sample_app.app.ExtraConfig")

        self.registry.remove_importing_class("sample_app.imports.FirstImporter")

        assert self.registry.get_importing_classes_for("sample_app.imports.SharedConfig") == [second]
        assert "sample_app.app.ExtraConfig" not in self.registry.imported_class_names()
