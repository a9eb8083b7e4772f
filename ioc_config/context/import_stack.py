"""
导入栈与导入注册表
Import Stack and Import Registry

作者: mrkingu
日期: 2025-06-21
描述: 记录当前正在展开的配置类链（用于循环导入检测），以及"谁导入了谁"的多值映射
"""

from collections import deque
from typing import Dict, Iterator, List, Optional

from .configuration_class import ConfigurationClass
from .source_unit import SourceUnit


class ImportRegistry:
    """导入注册表：被导入类名 -> 导入方元数据列表"""

    def __init__(self):
        self._imports: Dict[str, List[SourceUnit]] = {}

    def register_import(self, importing_class: SourceUnit, imported_class: str) -> None:
        """
        记录一次导入

        Args:
            importing_class: 导入方元数据
            imported_class: 被导入类的全限定名
        """
        self._imports.setdefault(imported_class, []).append(importing_class)

    def get_importing_class_for(self, imported_class: str) -> Optional[SourceUnit]:
        """获取最近一次导入该类的导入方"""
        importers = self._imports.get(imported_class)
        return importers[-1] if importers else None

    def get_importing_classes_for(self, imported_class: str) -> List[SourceUnit]:
        """获取所有导入该类的导入方"""
        return list(self._imports.get(imported_class, ()))

    def remove_importing_class(self, importing_class: str) -> None:
        """移除某个导入方的全部导入记录"""
        for imported_class in list(self._imports):
            importers = [m for m in self._imports[imported_class] if m.name != importing_class]
            if importers:
                self._imports[imported_class] = importers
            else:
                del self._imports[imported_class]

    def imported_class_names(self) -> List[str]:
        return list(self._imports)


class ImportStack(ImportRegistry):
    """
    导入栈

    后进先出；栈外的导入记录在整个会话内保留
    """

    def __init__(self):
        super().__init__()
        self._stack: deque = deque()

    def push(self, configuration_class: ConfigurationClass) -> None:
        self._stack.append(configuration_class)

    def pop(self) -> ConfigurationClass:
        return self._stack.pop()

    def peek(self) -> Optional[ConfigurationClass]:
        return self._stack[-1] if self._stack else None

    def __contains__(self, configuration_class: object) -> bool:
        return configuration_class in self._stack

    def __iter__(self) -> Iterator[ConfigurationClass]:
        return iter(self._stack)

    def __len__(self) -> int:
        return len(self._stack)

    def chain(self) -> List[str]:
        """当前栈中的类名，由栈底到栈顶"""
        return [c.name for c in self._stack]

    def __str__(self) -> str:
        return "[" + "->".join(c.simple_name for c in self._stack) + "]"
