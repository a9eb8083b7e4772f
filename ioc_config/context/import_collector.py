"""
导入收集器
Import Collector

作者: mrkingu
日期: 2025-06-21
描述: 深度优先遍历类的注解及元注解，收集所有 @Import 声明的目标
"""

import logging
from typing import Dict, List, Set

from .annotations import Import, qualified_name
from .source_unit import SourceUnit, SourceUnitFactory

logger = logging.getLogger(__name__)

IMPORT_ANNOTATION = qualified_name(Import)


class ImportCollector:
    """导入收集器"""

    def __init__(self, factory: SourceUnitFactory):
        self.factory = factory

    def collect_imports(self, unit: SourceUnit) -> List[SourceUnit]:
        """
        收集类直接或通过元注解声明的导入目标

        Args:
            unit: 源单元

        Returns:
            按遇到顺序排列、去重后的导入目标

        Raises:
            ClassResolutionError: 导入目标本身无法解析
        """
        imports: Dict[SourceUnit, None] = {}
        self._collect(unit, imports, set())
        return list(imports)

    def _collect(self, unit: SourceUnit, imports: Dict[SourceUnit, None], visited: Set[str]) -> None:
        if unit.name in visited:
            return
        visited.add(unit.name)

        for annotation in unit.annotations():
            if annotation.name == IMPORT_ANNOTATION or self.factory.is_reserved(annotation.name):
                continue
            self._collect(annotation, imports, visited)

        for attributes in unit.get_annotation_attributes(IMPORT_ANNOTATION):
            for target in attributes.get("value") or []:
                imports.setdefault(self.factory.source_unit_for(target), None)
