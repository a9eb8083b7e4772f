"""
延迟导入处理
Deferred Import Handling

作者: mrkingu
日期: 2025-06-21
描述: 在主解析过程中缓存延迟导入选择器，全部可达配置类解析完成后按分组统一处理，
     并把分组产生的导入条目交回普通导入展开流程
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from .configuration_class import ConfigurationClass
from .contracts import DeferredImportSelector
from ..exceptions import BeanDefinitionStoreError, GroupContractViolation
from .ordering import get_order
from .source_unit import SourceUnit
from .strategy_utils import instantiate_class

if TYPE_CHECKING:
    from .parser import ConfigurationClassParser

logger = logging.getLogger(__name__)


class DeferredImportSelectorHolder:
    """延迟导入选择器与声明它的配置类"""

    def __init__(self, configuration_class: ConfigurationClass, import_selector: DeferredImportSelector):
        self.configuration_class = configuration_class
        self.import_selector = import_selector

    def __repr__(self) -> str:
        return f"DeferredImportSelectorHolder({self.configuration_class.name}, {type(self.import_selector).__name__})"


class DefaultDeferredImportSelectorGroup(DeferredImportSelector.Group):
    """默认分组：依次收集每个选择器自身的选择结果"""

    def __init__(self):
        self._imports: List[DeferredImportSelector.Entry] = []

    def process(self, metadata: SourceUnit, selector: DeferredImportSelector) -> None:
        for import_class_name in selector.select_imports(metadata):
            self._imports.append(DeferredImportSelector.Entry(metadata, import_class_name))

    def select_imports(self) -> Iterable[DeferredImportSelector.Entry]:
        return self._imports


class DeferredImportSelectorGrouping:
    """一个分组实例及其成员"""

    def __init__(self, group: DeferredImportSelector.Group):
        self.group = group
        self.deferred_imports: List[DeferredImportSelectorHolder] = []

    def add(self, holder: DeferredImportSelectorHolder) -> None:
        self.deferred_imports.append(holder)

    def get_imports(self) -> Iterable[DeferredImportSelector.Entry]:
        """
        先对所有成员调用 process，再调用一次 select_imports

        Raises:
            GroupContractViolation: select_imports 返回 None
        """
        for holder in self.deferred_imports:
            self.group.process(holder.configuration_class.metadata, holder.import_selector)
        entries = self.group.select_imports()
        if entries is None:
            raise GroupContractViolation(type(self.group).__qualname__)
        return entries


class DeferredImportSelectorGroupingHandler:
    """按分组键登记延迟导入并处理各分组"""

    def __init__(self, parser: "ConfigurationClassParser"):
        self.parser = parser
        # 分组键 -> 分组；未声明分组的选择器以其 holder 本身为键
        self.groupings: Dict[Any, DeferredImportSelectorGrouping] = {}
        self.configuration_classes: Dict[SourceUnit, ConfigurationClass] = {}

    def register(self, holder: DeferredImportSelectorHolder) -> None:
        group_type = holder.import_selector.get_import_group()
        key = group_type if group_type is not None else holder
        grouping = self.groupings.get(key)
        if grouping is None:
            grouping = DeferredImportSelectorGrouping(self._create_group(group_type))
            self.groupings[key] = grouping
        grouping.add(holder)
        self.configuration_classes[holder.configuration_class.metadata] = holder.configuration_class

    def process_group_imports(self) -> None:
        for grouping in self.groupings.values():
            for entry in grouping.get_imports():
                configuration_class = self.configuration_classes[entry.metadata]
                try:
                    self.parser.process_imports(
                        configuration_class,
                        configuration_class.metadata,
                        self.parser.factory.source_units_for([entry.import_class_name]),
                        check_for_circular_imports=False,
                    )
                except BeanDefinitionStoreError:
                    raise
                except Exception as e:
                    raise BeanDefinitionStoreError(
                        f"Failed to process import candidates for configuration class "
                        f"[{configuration_class.name}]: {e}"
                    ) from e

    def _create_group(self, group_type: Optional[type]) -> DeferredImportSelector.Group:
        effective_type = group_type if group_type is not None else DefaultDeferredImportSelectorGroup
        return instantiate_class(
            effective_type, DeferredImportSelector.Group,
            environment=self.parser.environment,
            resource_loader=self.parser.resource_loader,
            registry=self.parser.registry,
        )


class HandlerState(Enum):
    """延迟导入处理器状态"""
    COLLECTING = "collecting"
    DRAINED = "drained"


class DeferredImportSelectorHandler:
    """
    延迟导入处理器

    COLLECTING 时缓存选择器；process() 期间处于 DRAINED，此时新到的延迟选择器立即处理，
    结束后重新安装空缓冲区
    """

    def __init__(self, parser: "ConfigurationClassParser"):
        self.parser = parser
        self._deferred_import_selectors: Optional[List[DeferredImportSelectorHolder]] = []

    @property
    def state(self) -> HandlerState:
        if self._deferred_import_selectors is None:
            return HandlerState.DRAINED
        return HandlerState.COLLECTING

    def handle(self, configuration_class: ConfigurationClass, import_selector: DeferredImportSelector) -> None:
        """
        处理一个延迟导入选择器

        Args:
            configuration_class: 声明该选择器的配置类
            import_selector: 选择器实例
        """
        holder = DeferredImportSelectorHolder(configuration_class, import_selector)
        if self._deferred_import_selectors is None:
            logger.debug(f"Processing deferred import selector immediately: {holder}")
            handler = DeferredImportSelectorGroupingHandler(self.parser)
            handler.register(holder)
            handler.process_group_imports()
        else:
            self._deferred_import_selectors.append(holder)

    def process(self) -> None:
        """处理所有缓存的延迟导入选择器"""
        deferred_imports = self._deferred_import_selectors
        self._deferred_import_selectors = None
        try:
            if deferred_imports:
                logger.debug(f"Processing {len(deferred_imports)} deferred import selector(s)")
                handler = DeferredImportSelectorGroupingHandler(self.parser)
                for holder in sorted(deferred_imports, key=lambda h: get_order(h.import_selector)):
                    handler.register(holder)
                handler.process_group_imports()
        finally:
            self._deferred_import_selectors = []
