"""
配置类解析器
Configuration Class Parser

作者: mrkingu
日期: 2025-06-21
描述: 将候选配置类解析为 ConfigurationClass 集合。处理顺序：成员类、属性源、组件扫描、
     @Import（选择器/延迟选择器/注册器/普通类）、导入资源、Bean方法、接口默认Bean方法、父类。
     同一个类经不同路径到达时合并记录，循环导入直接报错
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .annotations import Bean, Component, ComponentScan, ImportResource, PropertySource, qualified_name
from .conditions import ConditionEvaluator
from .configuration_class import BeanMethod, ConfigurationClass
from .configuration_utils import check_configuration_class_candidate, is_configuration_candidate
from .contracts import ConfigurationPhase, DeferredImportSelector, ImportBeanDefinitionRegistrar, ImportSelector
from .deferred_imports import DeferredImportSelectorHandler
from ..exceptions import (
    BeanDefinitionParsingError, BeanDefinitionStoreError, CircularImportError,
    ClassResolutionError, PlaceholderResolutionError, ResourceNotFoundError
)
from .import_collector import ImportCollector
from .import_stack import ImportStack
from .metadata_reader import MethodMetadata
from .ordering import sort_by_order
from .registry import BeanDefinitionHolder, BeanDefinitionRegistry
from .scanner import ComponentScanner
from .source_unit import ClassSourceUnit, SourceUnit, SourceUnitFactory
from .strategy_utils import instantiate_class
from ..env.factory import DefaultPropertySourceFactory, PropertySourceFactory
from ..env.property_source import CompositePropertySource, ResourcePropertySource

logger = logging.getLogger(__name__)

BEAN_ANNOTATION = qualified_name(Bean)


class ProcessingState(Enum):
    """单个配置类在解析过程中的状态"""
    SKIPPED = "skipped"
    MERGED = "merged"
    REPLACED = "replaced"
    PROCESSING = "processing"
    SUPERCLASS_PENDING = "superclass_pending"
    DONE = "done"


class ConfigurationClassParser:
    """
    配置类解析器

    一个实例对应一次解析会话，会话内的导入栈、延迟导入缓冲区、配置类记录和
    属性源名称列表都只属于该实例

    使用示例:
        parser = ConfigurationClassParser(registry, environment, resource_loader)
        parser.parse(candidates)
        parser.validate()
        classes = parser.get_configuration_classes()
    """

    def __init__(self, registry: BeanDefinitionRegistry, environment: Any, resource_loader: Any,
                 factory: Optional[SourceUnitFactory] = None,
                 condition_evaluator: Optional[ConditionEvaluator] = None,
                 scanner: Optional[ComponentScanner] = None,
                 property_source_factory: Optional[PropertySourceFactory] = None,
                 default_encoding: str = "utf-8"):
        """
        初始化解析器

        Args:
            registry: Bean定义注册表
            environment: 环境，属性源会被追加到其属性源链
            resource_loader: 资源加载器
            factory: 源单元工厂
            condition_evaluator: 条件评估器
            scanner: 组件扫描器
            property_source_factory: 默认属性源工厂
            default_encoding: 属性源未声明编码时使用的编码
        """
        self.registry = registry
        self.environment = environment
        self.resource_loader = resource_loader
        self.factory = factory or SourceUnitFactory()
        self.condition_evaluator = condition_evaluator or ConditionEvaluator(
            self.factory, registry, environment, resource_loader
        )
        self.scanner = scanner or ComponentScanner(
            registry, self.factory, environment, self.condition_evaluator
        )
        self.property_source_factory = property_source_factory or DefaultPropertySourceFactory()
        self.default_encoding = default_encoding
        self.import_collector = ImportCollector(self.factory)

        self.configuration_classes: Dict[ConfigurationClass, ConfigurationClass] = {}
        self.known_superclasses: Dict[str, ConfigurationClass] = {}
        self.property_source_names: List[str] = []
        self.import_stack = ImportStack()
        self.deferred_import_selector_handler = DeferredImportSelectorHandler(self)
        self.states: Dict[str, ProcessingState] = {}

    def parse(self, candidates: Iterable[BeanDefinitionHolder]) -> None:
        """
        解析一批候选配置类，最后处理延迟导入

        Args:
            candidates: 候选Bean定义

        Raises:
            BeanDefinitionStoreError: 任一候选解析失败
        """
        for holder in candidates:
            definition = holder.bean_definition
            try:
                if definition.metadata is not None:
                    self.parse_unit(definition.metadata, holder.bean_name)
                elif definition.has_bean_class():
                    self.parse_class(definition.bean_class, holder.bean_name)
                else:
                    self.parse_name(definition.bean_class_name, holder.bean_name)
            except BeanDefinitionStoreError as e:
                # 标记出错的根候选
                if e.bean_name is None:
                    e.bean_name = holder.bean_name
                raise
            except Exception as e:
                raise BeanDefinitionStoreError(
                    f"Failed to parse configuration class [{definition.bean_class_name}]: {e}",
                    bean_name=holder.bean_name
                ) from e

        self.deferred_import_selector_handler.process()

    def parse_unit(self, unit: SourceUnit, bean_name: Optional[str]) -> None:
        self.process_configuration_class(ConfigurationClass(unit, bean_name))

    def parse_class(self, clazz: type, bean_name: Optional[str]) -> None:
        self.parse_unit(self.factory.source_unit_for(clazz), bean_name)

    def parse_name(self, class_name: str, bean_name: Optional[str]) -> None:
        self.parse_unit(self.factory.source_unit_for(class_name), bean_name)

    def validate(self) -> None:
        """校验所有已解析的配置类"""
        for configuration_class in self.configuration_classes:
            configuration_class.validate()

    def get_configuration_classes(self) -> List[ConfigurationClass]:
        return list(self.configuration_classes)

    def get_import_registry(self) -> ImportStack:
        return self.import_stack

    def _transition(self, configuration_class: ConfigurationClass, state: ProcessingState) -> None:
        self.states[configuration_class.name] = state
        logger.debug(f"{configuration_class.name}: {state.name}")

    def process_configuration_class(self, configuration_class: ConfigurationClass) -> None:
        """
        处理一个配置类，必要时与已有记录合并或替换已有记录

        Args:
            configuration_class: 配置类
        """
        if self.condition_evaluator.should_skip(configuration_class.metadata,
                                                ConfigurationPhase.PARSE_CONFIGURATION):
            self._transition(configuration_class, ProcessingState.SKIPPED)
            return

        existing = self.configuration_classes.get(configuration_class)
        if existing is not None:
            if configuration_class.is_imported():
                if existing.is_imported():
                    existing.merge_imported_by(configuration_class)
                # 已有显式声明时忽略导入得到的同名类
                self._transition(configuration_class, ProcessingState.MERGED)
                return
            # 显式声明替换之前由导入得到的记录
            del self.configuration_classes[existing]
            for superclass, owner in list(self.known_superclasses.items()):
                if owner == configuration_class:
                    del self.known_superclasses[superclass]
            self._transition(configuration_class, ProcessingState.REPLACED)

        self._transition(configuration_class, ProcessingState.PROCESSING)
        unit: Optional[SourceUnit] = configuration_class.metadata
        while unit is not None:
            unit = self._do_process_configuration_class(configuration_class, unit)
            if unit is not None:
                self._transition(configuration_class, ProcessingState.SUPERCLASS_PENDING)

        self.configuration_classes[configuration_class] = configuration_class
        self._transition(configuration_class, ProcessingState.DONE)

    def _do_process_configuration_class(self, configuration_class: ConfigurationClass,
                                        unit: SourceUnit) -> Optional[SourceUnit]:
        """
        处理配置类自身（或其父类）的内容

        Returns:
            需要继续处理的父类，没有时返回None
        """
        if configuration_class.metadata.is_annotated(Component):
            self._process_member_classes(configuration_class, unit)

        for attributes in unit.find_annotation_attributes(PropertySource):
            self._process_property_source(attributes)

        component_scans = unit.find_annotation_attributes(ComponentScan)
        if component_scans and not self.condition_evaluator.should_skip(unit, ConfigurationPhase.REGISTER_BEAN):
            for attributes in component_scans:
                for holder in self.scanner.scan(attributes, unit.name):
                    definition = holder.bean_definition
                    if check_configuration_class_candidate(definition, self.factory):
                        self.parse_unit(definition.source_unit(self.factory), holder.bean_name)

        self.process_imports(configuration_class, unit, self.import_collector.collect_imports(unit))

        for attributes in unit.find_annotation_attributes(ImportResource):
            reader = attributes.get("reader")
            reader_class = self.factory.source_unit_for(reader).load() if reader else None
            for location in list(attributes.get("value") or []) + list(attributes.get("locations") or []):
                resolved = self.environment.resolve_required_placeholders(location)
                configuration_class.add_imported_resource(resolved, reader_class)

        for method in self._retrieve_bean_method_metadata(unit):
            configuration_class.add_bean_method(BeanMethod(method, configuration_class))

        self._process_interfaces(configuration_class, unit)

        super_name = unit.super_unit_name
        if (super_name is not None and not self.factory.is_reserved(super_name)
                and super_name not in self.known_superclasses):
            self.known_superclasses[super_name] = configuration_class
            return unit.super_unit()
        return None

    def _process_member_classes(self, configuration_class: ConfigurationClass, unit: SourceUnit) -> None:
        candidates = [
            member for member in unit.member_units()
            if is_configuration_candidate(member) and member.name != configuration_class.name
        ]
        for candidate in sort_by_order(candidates):
            if configuration_class in self.import_stack:
                top = self.import_stack.peek()
                raise CircularImportError(self.import_stack.chain(), top.name, configuration_class.name)
            self.import_stack.push(configuration_class)
            try:
                self.process_configuration_class(ConfigurationClass(candidate, imported_by=configuration_class))
            finally:
                self.import_stack.pop()

    def _process_interfaces(self, configuration_class: ConfigurationClass, unit: SourceUnit) -> None:
        for interface in unit.interfaces():
            self._process_interface(configuration_class, interface)

    def _process_interface(self, configuration_class: ConfigurationClass, interface: SourceUnit) -> None:
        if self.factory.is_reserved(interface.name):
            return
        for method in self._retrieve_bean_method_metadata(interface):
            if not method.is_abstract:
                configuration_class.add_bean_method(BeanMethod(method, configuration_class))
        super_interfaces = list(interface.interfaces())
        super_unit = interface.super_unit()
        if super_unit is not None:
            super_interfaces.insert(0, super_unit)
        for super_interface in super_interfaces:
            self._process_interface(configuration_class, super_interface)

    def _retrieve_bean_method_metadata(self, unit: SourceUnit) -> List[MethodMetadata]:
        """
        获取Bean方法，反射来源时与源码中的声明顺序核对

        Args:
            unit: 源单元

        Returns:
            Bean方法元数据
        """
        bean_methods = unit.bean_methods()
        if len(bean_methods) > 1 and isinstance(unit, ClassSourceUnit):
            try:
                structural = self.factory.reader.read(unit.name)
            except ClassResolutionError as e:
                logger.debug(f"Failed to read source of {unit.name} for determining @Bean method order: {e}")
                return bean_methods

            ordered = [m for m in structural.methods if m.is_annotated(BEAN_ANNOTATION)]
            if len(ordered) >= len(bean_methods):
                selected = []
                for declared in ordered:
                    for method in bean_methods:
                        if method.name == declared.name:
                            selected.append(method)
                            break
                if len(selected) == len(bean_methods):
                    bean_methods = selected
                else:
                    logger.debug(f"Declared @Bean methods of {unit.name} do not match, keeping reflective order")
        return bean_methods

    def _process_property_source(self, attributes: Dict[str, Any]) -> None:
        name = attributes.get("name") or None
        encoding = attributes.get("encoding") or self.default_encoding
        locations = list(attributes.get("value") or [])
        if not locations:
            raise BeanDefinitionParsingError("At least one @PropertySource(value) location is required")
        ignore_resource_not_found = bool(attributes.get("ignore_resource_not_found", False))

        factory_class = attributes.get("factory")
        if factory_class:
            factory = instantiate_class(
                self.factory.source_unit_for(factory_class).load(), PropertySourceFactory,
                environment=self.environment, resource_loader=self.resource_loader, registry=self.registry,
            )
        else:
            factory = self.property_source_factory

        for location in locations:
            try:
                resolved = self.environment.resolve_required_placeholders(location)
                resource = self.resource_loader.get_resource(resolved)
                self._add_property_source(factory.create_property_source(name, resource, encoding))
            except (PlaceholderResolutionError, ResourceNotFoundError) as e:
                if not ignore_resource_not_found:
                    raise
                logger.info(f"Properties location [{location}] not resolvable: {e}")

    def _add_property_source(self, property_source: Any) -> None:
        name = property_source.name
        property_sources = self.environment.property_sources

        if name in self.property_source_names:
            existing = property_sources.get(name)
            if existing is not None:
                new_source = property_source
                if isinstance(new_source, ResourcePropertySource):
                    new_source = new_source.with_resource_name()
                if isinstance(existing, CompositePropertySource):
                    existing.add_first_property_source(new_source)
                else:
                    if isinstance(existing, ResourcePropertySource):
                        existing = existing.with_resource_name()
                    composite = CompositePropertySource(name)
                    composite.add_property_source(new_source)
                    composite.add_property_source(existing)
                    property_sources.replace(name, composite)
                return

        if not self.property_source_names:
            property_sources.add_last(property_source)
        else:
            last_added = self.property_source_names[-1]
            property_sources.add_before(last_added, property_source)
        self.property_source_names.append(name)

    def process_imports(self, configuration_class: ConfigurationClass, current_unit: SourceUnit,
                        import_candidates: List[SourceUnit], check_for_circular_imports: bool = True) -> None:
        """
        展开导入目标

        Args:
            configuration_class: 正在处理的配置类
            current_unit: 声明导入的源单元（配置类本身或其父类）
            import_candidates: 导入目标
            check_for_circular_imports: 是否检测循环导入

        Raises:
            CircularImportError: 导入链回到自身
            BeanDefinitionStoreError: 导入处理失败
        """
        if not import_candidates:
            return

        if check_for_circular_imports and self._is_chained_import_on_stack(configuration_class):
            top = self.import_stack.peek()
            raise CircularImportError(self.import_stack.chain(), top.name, configuration_class.name)

        self.import_stack.push(configuration_class)
        try:
            for candidate in import_candidates:
                if candidate.is_assignable_to(ImportSelector):
                    selector = instantiate_class(
                        candidate.load(), ImportSelector,
                        environment=self.environment, resource_loader=self.resource_loader, registry=self.registry,
                    )
                    if isinstance(selector, DeferredImportSelector):
                        self.deferred_import_selector_handler.handle(configuration_class, selector)
                    else:
                        import_class_names = selector.select_imports(current_unit)
                        import_units = self.factory.source_units_for(import_class_names)
                        self.process_imports(configuration_class, current_unit, import_units, False)
                elif candidate.is_assignable_to(ImportBeanDefinitionRegistrar):
                    registrar = instantiate_class(
                        candidate.load(), ImportBeanDefinitionRegistrar,
                        environment=self.environment, resource_loader=self.resource_loader, registry=self.registry,
                    )
                    configuration_class.add_import_bean_definition_registrar(registrar, current_unit)
                else:
                    # 普通类按配置类处理
                    self.import_stack.register_import(current_unit, candidate.name)
                    self.process_configuration_class(ConfigurationClass(candidate, imported_by=configuration_class))
        except BeanDefinitionStoreError:
            raise
        except Exception as e:
            raise BeanDefinitionStoreError(
                f"Failed to process import candidates for configuration class [{configuration_class.name}]: {e}"
            ) from e
        finally:
            self.import_stack.pop()

    def _is_chained_import_on_stack(self, configuration_class: ConfigurationClass) -> bool:
        if configuration_class not in self.import_stack:
            return False
        name = configuration_class.name
        visited = set()
        importing = self.import_stack.get_importing_class_for(name)
        while importing is not None and importing.name not in visited:
            if importing.name == name:
                return True
            visited.add(importing.name)
            importing = self.import_stack.get_importing_class_for(importing.name)
        return False
