"""
条件评估器
Condition Evaluator

作者: mrkingu
日期: 2025-06-21
描述: 根据 @Conditional 声明（直接或元注解）判断类是否应在某阶段被跳过
"""

import logging
from typing import Any, List, Optional

from .annotations import Conditional
from .configuration_utils import is_configuration_candidate
from .contracts import Condition, ConditionContext, ConfigurationCondition, ConfigurationPhase
from .ordering import sort_by_order
from .source_unit import SourceUnit, SourceUnitFactory
from .strategy_utils import instantiate_class

logger = logging.getLogger(__name__)


class ConditionEvaluator:
    """条件评估器"""

    def __init__(self, factory: SourceUnitFactory, registry: Any = None,
                 environment: Any = None, resource_loader: Any = None):
        self.factory = factory
        self.context = ConditionContext(registry, environment, resource_loader)

    def should_skip(self, unit: Optional[SourceUnit], phase: Optional[ConfigurationPhase] = None) -> bool:
        """
        判断是否跳过

        Args:
            unit: 源单元
            phase: 判断阶段，None 时配置类候选按解析阶段、其它按注册阶段

        Returns:
            任一适用阶段的条件不满足时返回True
        """
        if unit is None or not unit.is_annotated(Conditional):
            return False

        if phase is None:
            if is_configuration_candidate(unit):
                return self.should_skip(unit, ConfigurationPhase.PARSE_CONFIGURATION)
            return self.should_skip(unit, ConfigurationPhase.REGISTER_BEAN)

        for condition in sort_by_order(self._conditions(unit)):
            required_phase = None
            if isinstance(condition, ConfigurationCondition):
                required_phase = condition.get_configuration_phase()
            if (required_phase is None or required_phase == phase) and not condition.matches(self.context, unit):
                logger.debug(f"Condition {type(condition).__name__} did not match for {unit.name} at {phase.name}")
                return True
        return False

    def _conditions(self, unit: SourceUnit) -> List[Condition]:
        conditions = []
        for attributes in unit.find_annotation_attributes(Conditional):
            for condition_class in attributes.get("value") or []:
                clazz = self.factory.source_unit_for(condition_class).load()
                conditions.append(instantiate_class(
                    clazz, Condition,
                    environment=self.context.environment,
                    resource_loader=self.context.resource_loader,
                    registry=self.context.registry,
                ))
        return conditions
