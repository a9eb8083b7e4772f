"""
延迟导入测试
Deferred Import Tests

作者: mrkingu
日期: 2025-06-21
描述: 验证延迟导入选择器在所有候选处理完后才执行、同一分组共享实例、按顺序执行、
     处理期间到达的选择器立即处理以及分组契约检查
"""

import sys
import os

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ioc_config import GroupContractViolation
from ioc_config.context.deferred_imports import HandlerState

from sample_app import deferred
from sample_app.deferred import (
    BrokenGroupHost, DeferredHostOne, DeferredHostTwo, EarlyHost, EmptyGroupHost, EnvironmentHost,
    LateHost, MixedHost, NestedDeferredHost, SharedGroup
)


def class_names(parser):
    return [c.name for c in parser.get_configuration_classes()]


class TestDeferredImports:
    """延迟导入测试"""

    def test_deferred_import_runs_after_all_candidates(self, make_parser, holders):
        """测试延迟导入在普通导入之后处理"""
        parser = make_parser()
        parser.parse(holders(MixedHost))

        assert class_names(parser) == [
            "sample_app.deferred.EagerTarget",
            "sample_app.deferred.MixedHost",
            "sample_app.deferred.DeferredTargetOne",
        ]
        target = parser.get_configuration_classes()[-1]
        assert [c.name for c in target.imported_by] == ["sample_app.deferred.MixedHost"]

    def test_shared_group_instance(self, make_parser, holders):
        """测试声明同一分组的选择器共享一个分组实例"""
        parser = make_parser()
        parser.parse(holders(DeferredHostOne, DeferredHostTwo))

        assert len(SharedGroup.instances) == 1
        group = SharedGroup.instances[0]
        assert group.processed == [
            ("sample_app.deferred.DeferredHostOne", "GroupedSelectorOne"),
            ("sample_app.deferred.DeferredHostTwo", "GroupedSelectorTwo"),
        ]
        assert group.select_calls == 1

        classes = {c.name: c for c in parser.get_configuration_classes()}
        one = classes["sample_app.deferred.DeferredTargetOne"]
        two = classes["sample_app.deferred.DeferredTargetTwo"]
        assert [c.name for c in one.imported_by] == ["sample_app.deferred.DeferredHostOne"]
        assert [c.name for c in two.imported_by] == ["sample_app.deferred.DeferredHostTwo"]

    def test_selectors_run_in_order(self, make_parser, holders):
        """测试延迟选择器按 @Order 执行，与声明顺序无关"""
        parser = make_parser()
        parser.parse(holders(LateHost, EarlyHost))
        assert deferred.CALLS == ["early", "late"]

    def test_selector_arriving_during_processing_runs_immediately(self, make_parser, holders):
        """测试处理延迟导入期间到达的延迟选择器立即处理"""
        parser = make_parser()
        parser.parse(holders(NestedDeferredHost))

        assert class_names(parser) == [
            "sample_app.deferred.NestedDeferredHost",
            "sample_app.deferred.InnerTarget",
            "sample_app.deferred.InnerDeferredHost",
        ]
        assert parser.deferred_import_selector_handler.state == HandlerState.COLLECTING

    def test_group_returning_none_violates_contract(self, make_parser, holders):
        """测试分组返回None时报告契约违规"""
        parser = make_parser()
        with pytest.raises(GroupContractViolation) as exc_info:
            parser.parse(holders(BrokenGroupHost))
        assert "BrokenGroup" in str(exc_info.value)
        assert parser.deferred_import_selector_handler.state == HandlerState.COLLECTING

    def test_group_may_select_nothing(self, make_parser, holders):
        """测试分组可以不选择任何导入"""
        parser = make_parser()
        parser.parse(holders(EmptyGroupHost))
        assert class_names(parser) == ["sample_app.deferred.EmptyGroupHost"]

    def test_selector_sees_environment(self, make_parser, make_environment, holders):
        """测试延迟选择器可以读取环境"""
        parser = make_parser(make_environment({"deferred.enabled": "true"}))
        parser.parse(holders(EnvironmentHost))
        assert "sample_app.deferred.DeferredTargetTwo" in class_names(parser)

        parser = make_parser()
        parser.parse(holders(EnvironmentHost))
        assert class_names(parser) == ["sample_app.deferred.EnvironmentHost"]


class TestDeferredImportSelectorHandler:
    """延迟导入处理器测试"""

    def test_process_without_selectors(self, make_parser):
        """测试没有缓存选择器时 process 不做任何事"""
        handler = make_parser().deferred_import_selector_handler
        assert handler.state == HandlerState.COLLECTING
        handler.process()
        assert handler.state == HandlerState.COLLECTING

    def test_handler_is_drained_during_processing(self, make_parser, holders):
        """测试处理期间处理器处于 DRAINED 状态"""
        parser = make_parser()
        handler = parser.deferred_import_selector_handler
        original = parser.process_imports
        observed = []

        def spy(*args, **kwargs):
            observed.append(handler.state)
            return original(*args, **kwargs)

        parser.process_imports = spy
        parser.parse(holders(DeferredHostOne))
        assert observed[0] == HandlerState.COLLECTING
        assert HandlerState.DRAINED in observed
        assert handler.state == HandlerState.COLLECTING
