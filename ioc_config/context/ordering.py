"""
排序支持
Ordering Support

作者: mrkingu
日期: 2025-06-21
描述: Ordered 接口与基于 @Order 注解的排序工具
"""

import inspect
import sys
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from .annotations import Order, declared_annotations

T = TypeVar("T")

HIGHEST_PRECEDENCE = -sys.maxsize - 1
LOWEST_PRECEDENCE = sys.maxsize


class Ordered:
    """可排序对象接口"""

    def get_order(self) -> int:
        return LOWEST_PRECEDENCE


def find_order(obj: Any) -> Optional[int]:
    """
    查找对象的排序值

    Args:
        obj: Ordered 实例、类或普通实例

    Returns:
        排序值，未声明时返回None
    """
    if isinstance(obj, Ordered):
        return obj.get_order()
    target = obj if inspect.isclass(obj) else type(obj)
    for annotation in declared_annotations(target):
        if isinstance(annotation, Order):
            return annotation.order
    return None


def get_order(obj: Any) -> int:
    """获取排序值，未声明时为最低优先级"""
    order = find_order(obj)
    return LOWEST_PRECEDENCE if order is None else order


def sort_by_order(items: Iterable[T], key: Optional[Callable[[T], Any]] = None) -> List[T]:
    """
    按排序值稳定排序

    Args:
        items: 待排序对象
        key: 从元素中取出参与排序的对象

    Returns:
        排序后的新列表
    """
    if key is None:
        return sorted(items, key=get_order)
    return sorted(items, key=lambda item: get_order(key(item)))
