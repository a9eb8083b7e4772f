"""
配置类工具
Configuration Class Utilities

作者: mrkingu
日期: 2025-06-21
描述: 配置类候选判断与Bean名称生成
"""

import logging
from typing import Any, Optional

from .annotations import Annotation, Component, ComponentScan, Configuration, Import, ImportResource
from ..exceptions import ClassResolutionError
from .ordering import LOWEST_PRECEDENCE
from .source_unit import SourceUnit

logger = logging.getLogger(__name__)

CONFIGURATION_CLASS_ATTRIBUTE = "configuration_class"
ORDER_ATTRIBUTE = "order"

CONFIGURATION_CLASS_FULL = "full"
CONFIGURATION_CLASS_LITE = "lite"

CANDIDATE_INDICATORS = (Component, ComponentScan, Import, ImportResource)


def is_configuration_candidate(unit: SourceUnit) -> bool:
    """
    判断类是否是配置类候选（完整或精简模式）

    Args:
        unit: 源单元

    Returns:
        注解类型本身不是候选；带有组件类注解或Bean方法的类是候选
    """
    if unit.is_assignable_to(Annotation):
        return False
    for indicator in CANDIDATE_INDICATORS:
        if unit.is_annotated(indicator):
            return True
    return unit.has_bean_methods()


def check_configuration_class_candidate(bean_definition: Any, factory: Any) -> bool:
    """
    检查Bean定义是否是配置类候选，并在定义上标记完整/精简模式与排序值

    Args:
        bean_definition: Bean定义
        factory: SourceUnitFactory

    Returns:
        是否是配置类候选
    """
    if bean_definition.bean_class_name is None and bean_definition.metadata is None:
        return False
    try:
        unit = bean_definition.source_unit(factory)
    except ClassResolutionError as e:
        logger.debug(f"Could not find class file for introspecting configuration annotations: "
                     f"{bean_definition.bean_class_name}: {e}")
        return False

    config_attributes = unit.get_annotation_attributes(Configuration)
    if config_attributes and config_attributes[0].get("proxy_bean_methods", True) is not False:
        bean_definition.attributes[CONFIGURATION_CLASS_ATTRIBUTE] = CONFIGURATION_CLASS_FULL
    elif config_attributes or is_configuration_candidate(unit):
        bean_definition.attributes[CONFIGURATION_CLASS_ATTRIBUTE] = CONFIGURATION_CLASS_LITE
    else:
        return False

    order = unit.get_order()
    if order != LOWEST_PRECEDENCE:
        bean_definition.attributes[ORDER_ATTRIBUTE] = order
    return True


def decapitalize(name: str) -> str:
    """
    首字母小写；前两个字符都是大写时保持不变（如 URLConfig）

    Args:
        name: 简单类名

    Returns:
        Bean名称
    """
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]


def explicit_bean_name(unit: SourceUnit) -> Optional[str]:
    """获取组件类注解上显式声明的名称"""
    candidates = unit.get_annotation_attributes(Configuration) + unit.find_annotation_attributes(Component)
    for attributes in candidates:
        name = attributes.get("name")
        if not name:
            value = attributes.get("value") or []
            name = value[0] if value and isinstance(value[0], str) else None
        if name:
            return name
    return None


def generate_bean_name(unit: SourceUnit) -> str:
    """
    生成Bean名称

    Args:
        unit: 源单元

    Returns:
        显式名称，否则为首字母小写的简单类名
    """
    return explicit_bean_name(unit) or decapitalize(unit.simple_name)
