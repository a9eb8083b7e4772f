"""
组件扫描器
Component Scanner

作者: mrkingu
日期: 2025-06-21
描述: 扫描 @ComponentScan 指定的包，查找带有组件注解（直接或元注解）的类并注册Bean定义
"""

import importlib
import inspect
import logging
import pkgutil
from typing import Any, Dict, List, Optional, Set

from .annotations import Annotation, Component
from .conditions import ConditionEvaluator
from .configuration_utils import generate_bean_name
from ..exceptions import BeanDefinitionOverrideError
from .registry import BeanDefinition, BeanDefinitionHolder, BeanDefinitionRegistry
from .source_unit import SourceUnit, SourceUnitFactory

logger = logging.getLogger(__name__)


class ComponentScanner:
    """
    组件扫描器

    负责导入指定包下的所有模块，查找被 @Component 标记的类
    """

    def __init__(self, registry: BeanDefinitionRegistry, factory: SourceUnitFactory,
                 environment: Any = None, condition_evaluator: Optional[ConditionEvaluator] = None):
        self.registry = registry
        self.factory = factory
        self.environment = environment
        self.condition_evaluator = condition_evaluator

    def scan(self, attributes: Dict[str, Any], declaring_class_name: str) -> List[BeanDefinitionHolder]:
        """
        执行一次组件扫描

        Args:
            attributes: @ComponentScan 的属性
            declaring_class_name: 声明扫描的类

        Returns:
            新注册的Bean定义
        """
        packages: List[str] = []
        for package in list(attributes.get("value") or []) + list(attributes.get("base_packages") or []):
            if self.environment is not None:
                package = self.environment.resolve_placeholders(package)
            packages.extend(p.strip() for p in package.split(",") if p.strip())
        if not packages:
            packages.append(self.factory.source_unit_for(declaring_class_name).package_name)

        logger.info(f"Starting component scan on packages: {packages}")
        holders: List[BeanDefinitionHolder] = []
        scanned: Set[str] = set()
        for package in packages:
            for module_name in self._module_names(package):
                if module_name in scanned:
                    continue
                scanned.add(module_name)
                holders.extend(self._scan_module(module_name, declaring_class_name))
        logger.info(f"Component scan completed. Registered {len(holders)} bean definition(s)")
        return holders

    def _module_names(self, package: str) -> List[str]:
        try:
            module = importlib.import_module(package)
        except ImportError as e:
            logger.warning(f"Could not import scan package {package}: {e}")
            return []

        names = [package]
        path = getattr(module, "__path__", None)
        if path is not None:
            for info in pkgutil.walk_packages(path, prefix=f"{package}.", onerror=self._on_error):
                names.append(info.name)
        return names

    def _on_error(self, name: str) -> None:
        logger.debug(f"Could not import package {name} while walking")

    def _scan_module(self, module_name: str, declaring_class_name: str) -> List[BeanDefinitionHolder]:
        try:
            module = importlib.import_module(module_name)
            logger.debug(f"Successfully imported module: {module_name}")
        except Exception as e:
            logger.debug(f"Could not import module {module_name}: {e}")
            return []

        holders = []
        for name, obj in inspect.getmembers(module, inspect.isclass):
            # 只扫描在当前模块中定义的类
            if obj.__module__ != module.__name__ or issubclass(obj, Annotation):
                continue
            unit = self.factory.source_unit_for(obj)
            if not self._is_candidate_component(unit):
                continue

            bean_name = generate_bean_name(unit)
            if self.registry.contains_bean_class(unit.name):
                logger.debug(f"Skipping already registered component class: {unit.name}")
                continue
            if self.registry.contains_bean_definition(bean_name):
                raise BeanDefinitionOverrideError(bean_name)

            definition = BeanDefinition(bean_class=obj, metadata=unit, source=declaring_class_name)
            self.registry.register_bean_definition(bean_name, definition)
            holders.append(BeanDefinitionHolder(definition, bean_name))
            logger.debug(f"Found component class: {bean_name} ({unit.name})")
        return holders

    def _is_candidate_component(self, unit: SourceUnit) -> bool:
        if not unit.is_annotated(Component):
            return False
        if self.condition_evaluator is not None and self.condition_evaluator.should_skip(unit):
            return False
        return True
