"""
结构化元数据读取器
Structural Metadata Reader

作者: mrkingu
日期: 2025-06-21
描述: 在不执行目标模块的前提下，通过语法树读取类的注解、方法、成员类和基类信息。
     方法按源码声明顺序返回，是Bean方法排序的权威来源
"""

import ast
import builtins
import importlib.util
import inspect
import logging
import sys
import tokenize
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .annotations import normalize_attributes, qualified_name, type_name_of
from ..exceptions import ClassResolutionError

logger = logging.getLogger(__name__)

_MAX_REDIRECTS = 16

ABSTRACT_METHOD = "abc.abstractmethod"
STATIC_METHOD = "builtins.staticmethod"
FINAL_MARKERS = ("typing.final", "typing_extensions.final")


@dataclass(frozen=True)
class AnnotationDescriptor:
    """一次注解声明的元数据"""
    type_name: str
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    annotation_type: Optional[type] = field(default=None, compare=False, hash=False)


@dataclass(frozen=True, eq=False)
class MethodMetadata:
    """方法元数据"""
    name: str
    declaring_class_name: str
    annotations: Tuple[AnnotationDescriptor, ...] = ()
    is_abstract: bool = False
    is_static: bool = False
    is_final: bool = False

    def is_annotated(self, annotation_type: Any) -> bool:
        type_name = type_name_of(annotation_type)
        return any(a.type_name == type_name for a in self.annotations)

    def get_annotation_attributes(self, annotation_type: Any) -> Optional[Dict[str, Any]]:
        type_name = type_name_of(annotation_type)
        for descriptor in self.annotations:
            if descriptor.type_name == type_name:
                return descriptor.attributes
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MethodMetadata):
            return NotImplemented
        return (self.declaring_class_name, self.name) == (other.declaring_class_name, other.name)

    def __hash__(self) -> int:
        return hash((self.declaring_class_name, self.name))

    def __repr__(self) -> str:
        return f"MethodMetadata({self.declaring_class_name}.{self.name})"


@dataclass
class ClassMetadata:
    """类的结构化元数据"""
    class_name: str
    module_name: str
    annotations: List[AnnotationDescriptor] = field(default_factory=list)
    methods: List[MethodMetadata] = field(default_factory=list)
    member_class_names: List[str] = field(default_factory=list)
    super_class_name: Optional[str] = None
    interface_names: List[str] = field(default_factory=list)
    is_final: bool = False


class _ModuleInfo:
    """单个模块的语法树索引"""

    def __init__(self, name: str, tree: ast.Module, is_package: bool):
        self.name = name
        self.tree = tree
        self.is_package = is_package
        # 名称 -> (种类, 载荷)；种类为 class / def / ref / alias
        self.symbols: Dict[str, Tuple[str, Any]] = {}
        self._index(tree.body)

    def _index(self, body: List[ast.stmt]) -> None:
        package = self.name if self.is_package else self.name.rpartition(".")[0]
        for node in body:
            if isinstance(node, ast.ClassDef):
                self.symbols[node.name] = ("class", node)
            elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                self.symbols[node.name] = ("def", node)
            elif isinstance(node, ast.Import):
                for alias in node.names:
                    if alias.asname:
                        self.symbols[alias.asname] = ("ref", alias.name)
                    else:
                        top = alias.name.split(".")[0]
                        self.symbols[top] = ("ref", top)
            elif isinstance(node, ast.ImportFrom):
                base = _resolve_from(node, package)
                for alias in node.names:
                    if alias.name == "*":
                        continue
                    target = f"{base}.{alias.name}" if base else alias.name
                    self.symbols[alias.asname or alias.name] = ("ref", target)
            elif isinstance(node, ast.Assign):
                if (len(node.targets) == 1 and isinstance(node.targets[0], ast.Name)
                        and isinstance(node.value, (ast.Name, ast.Attribute))):
                    self.symbols[node.targets[0].id] = ("alias", node.value)
            elif isinstance(node, ast.If):
                # 例如 TYPE_CHECKING 分支中的导入
                self._index(node.body)
            elif isinstance(node, ast.Try):
                self._index(node.body)


def _resolve_from(node: ast.ImportFrom, package: str) -> str:
    if node.level == 0:
        return node.module or ""
    parts = package.split(".") if package else []
    if node.level > 1:
        parts = parts[:len(parts) - (node.level - 1)]
    base = ".".join(parts)
    if node.module:
        return f"{base}.{node.module}" if base else node.module
    return base


def _nested_classes(node: ast.ClassDef, class_name: str) -> Dict[str, str]:
    return {
        child.name: f"{class_name}.{child.name}"
        for child in node.body
        if isinstance(child, ast.ClassDef)
    }


class MetadataReader:
    """
    结构化元数据读取器

    通过 importlib 定位模块源码（不执行该模块本身），解析语法树并根据模块的导入绑定
    解析装饰器和基类名称，跟随重新导出找到类真正的定义位置
    """

    def __init__(self):
        self._modules: Dict[str, Optional[_ModuleInfo]] = {}
        self._cache: Dict[str, ClassMetadata] = {}

    def read(self, class_name: str) -> ClassMetadata:
        """
        读取类的结构化元数据

        Args:
            class_name: 类的全限定名

        Returns:
            类元数据

        Raises:
            ClassResolutionError: 找不到源码级别的类定义
        """
        cached = self._cache.get(class_name)
        if cached is not None:
            return cached

        located = self._locate(class_name, 0)
        if located is None:
            raise ClassResolutionError(class_name, "no source-level class definition found")

        canonical, info, node, scope = located
        metadata = self._build(canonical, info, node, scope)
        self._cache[class_name] = metadata
        self._cache[canonical] = metadata
        logger.debug(f"Read structural metadata for {canonical}")
        return metadata

    def canonical_name(self, dotted: str) -> str:
        """
        将引用名称转换为类定义处的全限定名

        Args:
            dotted: 点分名称，可能指向重新导出

        Returns:
            规范名称，无法定位时原样返回
        """
        located = self._locate(dotted, 0)
        if located is not None:
            return located[0]
        imported = _lookup_imported(dotted)
        if inspect.isclass(imported):
            return qualified_name(imported)
        return dotted

    def _module(self, module_name: str) -> Optional[_ModuleInfo]:
        if module_name in self._modules:
            return self._modules[module_name]

        info = None
        try:
            # 父包可能被导入，目标模块本身不会被执行
            spec = importlib.util.find_spec(module_name)
        except Exception as e:
            logger.debug(f"Could not locate module {module_name}: {e}")
            spec = None

        if spec is not None and spec.origin and spec.origin.endswith(".py"):
            try:
                with tokenize.open(spec.origin) as f:
                    source = f.read()
                tree = ast.parse(source, filename=spec.origin)
                info = _ModuleInfo(module_name, tree, spec.submodule_search_locations is not None)
            except (OSError, SyntaxError, UnicodeDecodeError, ValueError) as e:
                logger.debug(f"Could not parse module source {spec.origin}: {e}")

        self._modules[module_name] = info
        return info

    def _locate(self, dotted: str, depth: int) -> Optional[Tuple[str, _ModuleInfo, ast.ClassDef, Dict[str, str]]]:
        if depth > _MAX_REDIRECTS:
            return None
        parts = dotted.split(".")
        for i in range(len(parts) - 1, 0, -1):
            if any(p.startswith("<") for p in parts[:i]):
                continue
            info = self._module(".".join(parts[:i]))
            if info is not None:
                return self._locate_in(info, parts[i:], depth)
        return None

    def _locate_in(self, info: _ModuleInfo, qual_parts: List[str], depth: int):
        symbol = info.symbols.get(qual_parts[0])
        if symbol is None:
            return None

        kind, payload = symbol
        if kind == "class":
            node = payload
            name = f"{info.name}.{node.name}"
            scope: Dict[str, str] = {}
            for part in qual_parts[1:]:
                scope = _nested_classes(node, name)
                child = next(
                    (c for c in node.body if isinstance(c, ast.ClassDef) and c.name == part),
                    None
                )
                if child is None:
                    return None
                node = child
                name = f"{name}.{part}"
            return name, info, node, scope

        if kind == "ref":
            target = payload
        elif kind == "alias":
            target = self._dotted(info, payload, {})
        else:
            return None
        if not target:
            return None
        return self._locate(".".join([target] + qual_parts[1:]), depth + 1)

    def _dotted(self, info: _ModuleInfo, expr: ast.expr, scope: Dict[str, str], depth: int = 0) -> Optional[str]:
        if depth > _MAX_REDIRECTS:
            return None
        if isinstance(expr, ast.Name):
            if expr.id in scope:
                return scope[expr.id]
            symbol = info.symbols.get(expr.id)
            if symbol is not None:
                kind, payload = symbol
                if kind == "ref":
                    return payload
                if kind == "alias":
                    return self._dotted(info, payload, {}, depth + 1)
                return f"{info.name}.{expr.id}"
            if hasattr(builtins, expr.id):
                return f"builtins.{expr.id}"
            return f"{info.name}.{expr.id}"
        if isinstance(expr, ast.Attribute):
            base = self._dotted(info, expr.value, scope, depth + 1)
            return f"{base}.{expr.attr}" if base else None
        if isinstance(expr, ast.Subscript):
            return self._dotted(info, expr.value, scope, depth + 1)
        return None

    def _class_ref(self, info: _ModuleInfo, expr: ast.expr, scope: Dict[str, str]) -> Optional[str]:
        dotted = self._dotted(info, expr, scope)
        return self.canonical_name(dotted) if dotted else None

    def _evaluate(self, info: _ModuleInfo, expr: ast.expr, scope: Dict[str, str]) -> Any:
        if isinstance(expr, ast.Constant):
            return expr.value
        if isinstance(expr, (ast.List, ast.Tuple, ast.Set)):
            return [self._evaluate(info, e, scope) for e in expr.elts]
        if isinstance(expr, ast.Dict):
            return {
                self._evaluate(info, k, scope): self._evaluate(info, v, scope)
                for k, v in zip(expr.keys, expr.values)
                if k is not None
            }
        if isinstance(expr, (ast.Name, ast.Attribute)):
            # 类引用以规范全限定名表示
            return self._class_ref(info, expr, scope)
        try:
            return ast.literal_eval(expr)
        except ValueError:
            logger.debug(f"Unsupported annotation attribute expression in {info.name}: {ast.dump(expr)}")
            return None

    def _descriptors(self, info: _ModuleInfo, decorators: List[ast.expr],
                     scope: Dict[str, str]) -> List[AnnotationDescriptor]:
        result = []
        for decorator in decorators:
            if isinstance(decorator, ast.Call):
                type_name = self._class_ref(info, decorator.func, scope)
                args = tuple(self._evaluate(info, a, scope) for a in decorator.args
                             if not isinstance(a, ast.Starred))
                kwargs = {k.arg: self._evaluate(info, k.value, scope)
                          for k in decorator.keywords if k.arg is not None}
            else:
                type_name = self._class_ref(info, decorator, scope)
                args, kwargs = (), {}
            if type_name is None:
                continue
            try:
                attributes = normalize_attributes(args, kwargs)
            except TypeError:
                attributes = dict(kwargs)
            result.append(AnnotationDescriptor(type_name, attributes))
        return result

    def _build(self, class_name: str, info: _ModuleInfo, node: ast.ClassDef,
               scope: Dict[str, str]) -> ClassMetadata:
        annotations = self._descriptors(info, node.decorator_list, scope)
        body_scope = _nested_classes(node, class_name)

        methods = []
        for child in node.body:
            if not isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            descriptors = self._descriptors(info, child.decorator_list, body_scope)
            names = {d.type_name for d in descriptors}
            methods.append(MethodMetadata(
                name=child.name,
                declaring_class_name=class_name,
                annotations=tuple(descriptors),
                is_abstract=ABSTRACT_METHOD in names,
                is_static=STATIC_METHOD in names,
                is_final=any(m in names for m in FINAL_MARKERS),
            ))

        bases = [b for b in (self._class_ref(info, base, scope) for base in node.bases) if b]
        return ClassMetadata(
            class_name=class_name,
            module_name=info.name,
            annotations=annotations,
            methods=methods,
            member_class_names=list(body_scope.values()),
            super_class_name=bases[0] if bases else "builtins.object",
            interface_names=bases[1:],
            is_final=any(d.type_name in FINAL_MARKERS for d in annotations),
        )


def _lookup_imported(dotted: str) -> Any:
    """只在已导入的模块中查找对象，不触发任何导入"""
    parts = dotted.split(".")
    for i in range(len(parts) - 1, 0, -1):
        module = sys.modules.get(".".join(parts[:i]))
        if module is None:
            continue
        obj = module
        for part in parts[i:]:
            obj = getattr(obj, part, None)
            if obj is None:
                return None
        return obj
    return None
