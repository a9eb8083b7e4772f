"""
注解与排序测试
Annotation and Ordering Tests

作者: mrkingu
日期: 2025-06-21
描述: 验证注解声明的记录方式、属性规范化以及 @Order / Ordered 排序
"""

import sys
import os

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ioc_config import Bean, Component, Configuration, Import, Order
from ioc_config.context import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, Ordered
from ioc_config.context.annotations import declared_annotations, normalize_attributes, qualified_name
from ioc_config.context.ordering import find_order, get_order, sort_by_order


class TestAnnotationDeclaration:
    """注解声明测试"""

    def test_positional_arguments_become_value_list(self):
        """测试位置参数进入 value 列表"""
        annotation = Import("a.B", "c.D")
        assert annotation.value == ["a.B", "c.D"]
        assert annotation.attributes == {"value": ["a.B", "c.D"]}

    def test_keyword_value_is_normalized_to_list(self):
        """测试关键字 value 被规范化为列表"""
        assert normalize_attributes((), {"value": "x"}) == {"value": ["x"]}
        assert normalize_attributes((), {"value": ("x", "y")}) == {"value": ["x", "y"]}

    def test_value_given_twice_is_rejected(self):
        """测试 value 同时以位置参数和关键字给出时报错"""
        with pytest.raises(TypeError):
            Import("a.B", value=["c.D"])

    def test_other_attributes_are_kept(self):
        """测试其它属性原样保留"""
        annotation = Configuration(name="custom", proxy_bean_methods=False)
        assert annotation.get("name") == "custom"
        assert annotation.get("proxy_bean_methods") is False
        assert annotation.get("missing", "default") == "default"
        assert annotation.value == []

    def test_declarations_keep_source_order(self):
        """测试多个装饰器按源码自上而下的顺序记录"""

        @Order(1)
        @Import("a.B")
        @Configuration()
        class Decorated:
            pass

        types = [type(a) for a in declared_annotations(Decorated)]
        assert types == [Order, Import, Configuration]

    def test_declarations_are_not_inherited(self):
        """测试子类不继承父类声明的注解"""

        @Configuration()
        class Parent:
            pass

        class Child(Parent):
            pass

        assert len(declared_annotations(Parent)) == 1
        assert declared_annotations(Child) == []

    def test_static_method_declaration_is_stored_on_function(self):
        """测试静态方法上的注解挂在底层函数上"""

        class Holder:
            @Bean()
            @staticmethod
            def factory_method():
                return 1

        raw = vars(Holder)["factory_method"]
        assert isinstance(raw, staticmethod)
        assert [type(a) for a in declared_annotations(raw)] == [Bean]
        assert [type(a) for a in declared_annotations(raw.__func__)] == [Bean]

    def test_configuration_is_meta_annotated_with_component(self):
        """测试 @Configuration 本身被 @Component 标记"""
        assert [type(a) for a in declared_annotations(Configuration)] == [Component]

    def test_qualified_name_of_nested_class(self):
        """测试嵌套类的全限定名"""
        from sample_app.members import OuterConfig
        assert qualified_name(OuterConfig.FirstInner) == "sample_app.members.OuterConfig.FirstInner"


class TestOrdering:
    """排序测试"""

    def test_order_annotation_value(self):
        """测试 @Order 的排序值"""
        assert Order(5).order == 5
        assert Order().order is None

    def test_find_order_sources(self):
        """测试从 Ordered 实例、@Order 类及其实例获取排序值"""

        class Fixed(Ordered):
            def get_order(self):
                return 3

        @Order(7)
        class Annotated:
            pass

        class Plain:
            pass

        assert find_order(Fixed()) == 3
        assert find_order(Annotated) == 7
        assert find_order(Annotated()) == 7
        assert find_order(Plain) is None
        assert get_order(Plain()) == LOWEST_PRECEDENCE

    def test_sort_is_stable(self):
        """测试排序稳定：相同排序值保持原有顺序"""

        @Order(HIGHEST_PRECEDENCE)
        class First:
            pass

        class Second:
            pass

        class Third:
            pass

        @Order(0)
        class Middle:
            pass

        assert sort_by_order([Second, Third, Middle, First]) == [First, Middle, Second, Third]

    def test_sort_with_key(self):
        """测试使用 key 取出排序对象"""

        @Order(2)
        class Late:
            pass

        @Order(1)
        class Early:
            pass

        pairs = [("late", Late), ("early", Early)]
        assert [name for name, _ in sort_by_order(pairs, key=lambda p: p[1])] == ["early", "late"]
