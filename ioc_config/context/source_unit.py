"""
源单元抽象
Source Unit Abstraction

作者: mrkingu
日期: 2025-06-21
描述: 统一访问类的注解、Bean方法、成员类、父类和接口，屏蔽元数据来自运行时反射
     还是结构化源码读取的差异。同名的源单元无论来源如何都相等
"""

import importlib
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from .annotations import Bean, Import, Order, declared_annotations, qualified_name, type_name_of
from ..exceptions import ClassResolutionError
from .metadata_reader import AnnotationDescriptor, ClassMetadata, MetadataReader, MethodMetadata
from .ordering import LOWEST_PRECEDENCE, Ordered

logger = logging.getLogger(__name__)

DEFAULT_RESERVED_NAMESPACES = (
    "builtins", "typing", "abc", "collections", "enum", "dataclasses", "functools",
)

BEAN_ANNOTATION = qualified_name(Bean)
IMPORT_ANNOTATION = qualified_name(Import)
ORDER_ANNOTATION = qualified_name(Order)


class SourceUnit(Ordered, ABC):
    """
    源单元

    以全限定名作为身份的类元数据视图
    """

    def __init__(self, factory: "SourceUnitFactory"):
        self._factory = factory

    @property
    @abstractmethod
    def name(self) -> str:
        """全限定名"""

    @property
    @abstractmethod
    def module_name(self) -> str:
        """定义所在模块"""

    @property
    @abstractmethod
    def super_unit_name(self) -> Optional[str]:
        """父类全限定名"""

    @abstractmethod
    def declared_annotations(self) -> List[AnnotationDescriptor]:
        """自身声明的注解，按声明顺序"""

    @abstractmethod
    def methods(self) -> List[MethodMetadata]:
        """自身声明的方法"""

    @abstractmethod
    def bean_methods(self) -> List[MethodMetadata]:
        """自身声明的Bean方法，顺序取决于元数据来源"""

    @abstractmethod
    def member_units(self) -> List["SourceUnit"]:
        """成员（嵌套）类"""

    @abstractmethod
    def interfaces(self) -> List["SourceUnit"]:
        """接口（第一个基类之外的基类）"""

    @abstractmethod
    def load(self) -> type:
        """加载为运行时类型，失败抛出 ClassResolutionError"""

    @abstractmethod
    def is_final(self) -> bool:
        """是否被 typing.final 标记"""

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def package_name(self) -> str:
        return self.module_name.rpartition(".")[0] or self.module_name

    def super_unit(self) -> Optional["SourceUnit"]:
        """
        获取父类源单元

        Returns:
            父类源单元，无父类或无法解析时返回None
        """
        super_name = self.super_unit_name
        if super_name is None:
            return None
        try:
            return self._factory.source_unit_for(super_name)
        except ClassResolutionError as e:
            logger.warning(f"Ignoring unresolvable superclass of {self.name}: {e}")
            return None

    def annotations(self) -> List["SourceUnit"]:
        """
        获取注解类型对应的源单元

        Returns:
            去重后按声明顺序排列的注解源单元，无法解析的注解被忽略
        """
        result: List[SourceUnit] = []
        for descriptor in self.declared_annotations():
            target = descriptor.annotation_type or descriptor.type_name
            try:
                unit = self._factory.source_unit_for(target)
            except ClassResolutionError:
                continue
            if unit not in result:
                result.append(unit)
        return result

    def has_annotation(self, annotation_type: Any) -> bool:
        """是否直接声明了注解"""
        type_name = type_name_of(annotation_type)
        return any(d.type_name == type_name for d in self.declared_annotations())

    def is_annotated(self, annotation_type: Any) -> bool:
        """是否直接或通过元注解声明了注解"""
        return bool(self.find_annotation_attributes(annotation_type))

    def get_annotation_attributes(self, annotation_type: Any) -> List[Dict[str, Any]]:
        """
        获取直接声明的注解属性

        Args:
            annotation_type: 注解类型或名称

        Returns:
            每次声明一个属性字典
        """
        type_name = type_name_of(annotation_type)
        return [d.attributes for d in self.declared_annotations() if d.type_name == type_name]

    def find_annotation_attributes(self, annotation_type: Any) -> List[Dict[str, Any]]:
        """
        获取直接及元注解上声明的注解属性

        Args:
            annotation_type: 注解类型或名称

        Returns:
            属性字典列表，直接声明在前
        """
        type_name = type_name_of(annotation_type)
        result: List[Dict[str, Any]] = []
        self._collect_attributes(self, type_name, result, set())
        return result

    def _collect_attributes(self, unit: "SourceUnit", type_name: str,
                            result: List[Dict[str, Any]], visited: Set[str]) -> None:
        if unit.name in visited:
            return
        visited.add(unit.name)
        result.extend(unit.get_annotation_attributes(type_name))
        for annotation in unit.annotations():
            if not self._factory.is_reserved(annotation.name):
                self._collect_attributes(annotation, type_name, result, visited)

    def has_bean_methods(self) -> bool:
        return any(m.is_annotated(BEAN_ANNOTATION) for m in self.methods())

    def is_assignable_to(self, target: Any) -> bool:
        """
        判断是否可赋值给目标类型

        Args:
            target: 类型或全限定名

        Returns:
            自身或任一基类与目标同名时返回True
        """
        target_name = type_name_of(target)
        visited: Set[str] = set()
        pending: List[SourceUnit] = [self]
        while pending:
            unit = pending.pop()
            if unit.name == target_name:
                return True
            if unit.name in visited:
                continue
            visited.add(unit.name)
            super_unit = unit.super_unit()
            if super_unit is not None:
                pending.append(super_unit)
            pending.extend(unit.interfaces())
        return False

    def get_order(self) -> int:
        for attributes in self.get_annotation_attributes(ORDER_ANNOTATION):
            value = attributes.get("value")
            if value:
                return value[0]
        return LOWEST_PRECEDENCE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceUnit):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


def _method_metadata(class_name: str, name: str, member: Any) -> Optional[MethodMetadata]:
    func = getattr(member, "__func__", member)
    if not inspect.isfunction(func):
        return None
    descriptors = tuple(
        AnnotationDescriptor(qualified_name(type(a)), dict(a.attributes), type(a))
        for a in declared_annotations(func)
    )
    return MethodMetadata(
        name=name,
        declaring_class_name=class_name,
        annotations=descriptors,
        is_abstract=getattr(func, "__isabstractmethod__", False),
        is_static=isinstance(member, staticmethod),
        is_final=getattr(func, "__final__", False),
    )


class ClassSourceUnit(SourceUnit):
    """基于运行时反射的源单元"""

    def __init__(self, cls: type, factory: "SourceUnitFactory"):
        super().__init__(factory)
        self._cls = cls
        self._name = qualified_name(cls)

    @property
    def name(self) -> str:
        return self._name

    @property
    def module_name(self) -> str:
        return self._cls.__module__

    @property
    def super_unit_name(self) -> Optional[str]:
        bases = self._cls.__bases__
        return qualified_name(bases[0]) if bases else None

    def super_unit(self) -> Optional[SourceUnit]:
        bases = self._cls.__bases__
        return self._factory.source_unit_for(bases[0]) if bases else None

    def declared_annotations(self) -> List[AnnotationDescriptor]:
        return [
            AnnotationDescriptor(qualified_name(type(a)), dict(a.attributes), type(a))
            for a in declared_annotations(self._cls)
        ]

    def methods(self) -> List[MethodMetadata]:
        result = []
        # 类命名空间保持声明顺序
        for name, value in vars(self._cls).items():
            method = _method_metadata(self._name, name, value)
            if method is not None:
                result.append(method)
        return result

    def bean_methods(self) -> List[MethodMetadata]:
        return [m for m in self.methods() if m.is_annotated(BEAN_ANNOTATION)]

    def member_units(self) -> List[SourceUnit]:
        prefix = self._cls.__qualname__ + "."
        return [
            self._factory.source_unit_for(value)
            for value in vars(self._cls).values()
            if inspect.isclass(value) and value.__qualname__ == prefix + value.__name__
        ]

    def interfaces(self) -> List[SourceUnit]:
        return [self._factory.source_unit_for(base) for base in self._cls.__bases__[1:]]

    def load(self) -> type:
        return self._cls

    def is_final(self) -> bool:
        return bool(vars(self._cls).get("__final__", False))

    def is_assignable_to(self, target: Any) -> bool:
        if inspect.isclass(target):
            return issubclass(self._cls, target)
        target_name = type_name_of(target)
        return any(qualified_name(k) == target_name for k in self._cls.__mro__)


class StructuralSourceUnit(SourceUnit):
    """基于结构化元数据（源码语法树）的源单元"""

    def __init__(self, metadata: ClassMetadata, factory: "SourceUnitFactory"):
        super().__init__(factory)
        self.metadata = metadata

    @property
    def name(self) -> str:
        return self.metadata.class_name

    @property
    def module_name(self) -> str:
        return self.metadata.module_name

    @property
    def super_unit_name(self) -> Optional[str]:
        return self.metadata.super_class_name

    def declared_annotations(self) -> List[AnnotationDescriptor]:
        return list(self.metadata.annotations)

    def methods(self) -> List[MethodMetadata]:
        return list(self.metadata.methods)

    def bean_methods(self) -> List[MethodMetadata]:
        return [m for m in self.metadata.methods if m.is_annotated(BEAN_ANNOTATION)]

    def member_units(self) -> List[SourceUnit]:
        members = []
        for member_name in self.metadata.member_class_names:
            try:
                members.append(self._factory.source_unit_for(member_name))
            except ClassResolutionError:
                logger.debug(f"Failed to resolve member class [{member_name}] - "
                             f"not considering it as a configuration class candidate")
        return members

    def interfaces(self) -> List[SourceUnit]:
        result = []
        for interface_name in self.metadata.interface_names:
            try:
                result.append(self._factory.source_unit_for(interface_name))
            except ClassResolutionError as e:
                logger.warning(f"Ignoring unresolvable interface of {self.name}: {e}")
        return result

    def load(self) -> type:
        return self._factory.load_class(self.name)

    def is_final(self) -> bool:
        return self.metadata.is_final


class SourceUnitFactory:
    """
    源单元工厂

    在一次解析会话内按名称缓存源单元；类型得到反射源单元，名称优先结构化读取
    （不产生导入副作用），失败时再尝试加载。保留命名空间中的名称总是反射加载
    """

    def __init__(self, reserved_namespaces: Optional[Sequence[str]] = None,
                 reader: Optional[MetadataReader] = None):
        self.reserved_namespaces = tuple(
            DEFAULT_RESERVED_NAMESPACES if reserved_namespaces is None else reserved_namespaces
        )
        self.reader = reader or MetadataReader()
        self._units: Dict[str, SourceUnit] = {}
        self._classes: Dict[str, type] = {}

    def is_reserved(self, name: str) -> bool:
        """是否属于保留的平台命名空间"""
        return any(name == ns or name.startswith(ns + ".") for ns in self.reserved_namespaces)

    def source_unit_for(self, target: Any = None) -> SourceUnit:
        """
        获取源单元

        Args:
            target: 类型、全限定名或源单元，None 表示 object

        Returns:
            源单元

        Raises:
            ClassResolutionError: 无法读取也无法加载
        """
        if target is None:
            target = object
        if isinstance(target, SourceUnit):
            return target
        if isinstance(target, str):
            return self._for_name(target)
        if inspect.isclass(target):
            return self._for_class(target)
        raise ClassResolutionError(repr(target), "not a class or class name")

    def source_units_for(self, targets: Iterable[Any]) -> List[SourceUnit]:
        return [self.source_unit_for(t) for t in targets]

    def _for_class(self, cls: type) -> SourceUnit:
        name = qualified_name(cls)
        unit = self._units.get(name)
        if isinstance(unit, ClassSourceUnit):
            return unit
        unit = ClassSourceUnit(cls, self)
        self._units[name] = unit
        self._classes[name] = cls
        return unit

    def _for_name(self, name: str) -> SourceUnit:
        unit = self._units.get(name)
        if unit is not None:
            return unit

        if self.is_reserved(name):
            return self._for_class(self.load_class(name))

        try:
            metadata = self.reader.read(name)
        except ClassResolutionError as e:
            logger.debug(f"Structural read failed, loading {name} reflectively: {e}")
            return self._for_class(self.load_class(name))

        unit = self._units.get(metadata.class_name)
        if unit is None:
            unit = StructuralSourceUnit(metadata, self)
            self._units[metadata.class_name] = unit
        self._units[name] = unit
        return unit

    def load_class(self, name: str) -> type:
        """
        按全限定名加载类

        Args:
            name: 全限定名

        Returns:
            类型

        Raises:
            ClassResolutionError: 模块无法导入或名称不是类
        """
        cls = self._classes.get(name)
        if cls is not None:
            return cls

        parts = name.split(".")
        for i in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:i])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError as e:
                if e.name == module_name or module_name.startswith(f"{e.name}."):
                    continue
                raise ClassResolutionError(name, str(e)) from e
            except Exception as e:
                raise ClassResolutionError(name, str(e)) from e

            obj: Any = module
            for part in parts[i:]:
                obj = getattr(obj, part, None)
                if obj is None:
                    raise ClassResolutionError(name, f"'{part}' not found in {module_name}")
            if not inspect.isclass(obj):
                raise ClassResolutionError(name, "not a class")
            self._classes[name] = obj
            return obj

        raise ClassResolutionError(name, "no importable module")
