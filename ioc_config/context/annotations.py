"""
IoC注解实现
IoC Annotations Implementation

作者: mrkingu
日期: 2025-06-20
描述: 提供@Configuration, @Import, @Bean等注解。注解类型本身也是类，可以再被注解（元注解），
     注解声明保存在被装饰对象自身上，不进入任何全局注册表
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# 注解声明保存在目标对象上的属性名
ANNOTATIONS_ATTR = "__ioc_annotations__"


def qualified_name(target: Any) -> str:
    """
    获取类型的全限定名

    Args:
        target: 类型或函数

    Returns:
        "<module>.<qualname>" 形式的名称
    """
    return f"{target.__module__}.{target.__qualname__}"


def type_name_of(target: Any) -> str:
    """类型或名称统一转换为全限定名"""
    if isinstance(target, str):
        return target
    return qualified_name(target)


def normalize_attributes(args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """
    规范化注解属性：位置参数统一进入 value 列表

    Args:
        args: 位置参数
        kwargs: 关键字参数

    Returns:
        注解属性字典
    """
    attributes = dict(kwargs)
    if "value" in attributes:
        if args:
            raise TypeError("Annotation 'value' given both positionally and as keyword")
        value = attributes["value"]
        if isinstance(value, (list, tuple, set, frozenset)):
            attributes["value"] = list(value)
        else:
            attributes["value"] = [value]
    else:
        attributes["value"] = list(args)
    return attributes


def _unwrap(target: Any) -> Any:
    # staticmethod / classmethod 的声明挂在底层函数上
    return getattr(target, "__func__", target)


def declared_annotations(target: Any) -> List["Annotation"]:
    """
    获取目标自身声明的注解（不含继承）

    Args:
        target: 类或函数

    Returns:
        按声明顺序排列的注解实例列表
    """
    holder = _unwrap(target)
    try:
        return list(vars(holder).get(ANNOTATIONS_ATTR, ()))
    except TypeError:
        return []


class Annotation:
    """
    注解基类

    子类即注解类型，实例即一次注解声明，可作为类或函数装饰器使用

    使用示例:
        @Import(CacheConfig)
        class EnableCaching(Annotation):
            pass

        @EnableCaching()
        @Configuration()
        class AppConfig:
            pass
    """

    def __init__(self, *value: Any, **attributes: Any):
        self.attributes: Dict[str, Any] = normalize_attributes(value, attributes)

    def __call__(self, target: Any) -> Any:
        holder = _unwrap(target)
        declared = vars(holder).get(ANNOTATIONS_ATTR)
        if declared is None:
            declared = []
            setattr(holder, ANNOTATIONS_ATTR, declared)
        # 装饰器自下而上执行，插入到最前以保持源码声明顺序
        declared.insert(0, self)
        logger.debug(f"Declared @{type(self).__name__} on {getattr(holder, '__qualname__', holder)}")
        return target

    @property
    def value(self) -> List[Any]:
        return self.attributes["value"]

    def get(self, name: str, default: Any = None) -> Any:
        """获取注解属性"""
        return self.attributes.get(name, default)

    def __repr__(self) -> str:
        return f"@{type(self).__name__}({self.attributes})"


class Component(Annotation):
    """组件注解 - 标记由容器管理的类"""
    pass


@Component()
class Configuration(Annotation):
    """
    配置类注解

    属性:
        name: Bean名称
        proxy_bean_methods: 是否代理Bean方法，默认True
    """
    pass


class Import(Annotation):
    """导入注解 - 导入配置类、ImportSelector 或 ImportBeanDefinitionRegistrar"""
    pass


class PropertySource(Annotation):
    """
    属性源注解

    属性:
        value: 资源位置列表，支持占位符
        name: 属性源名称
        encoding: 资源编码
        ignore_resource_not_found: 资源不存在时是否忽略
        factory: 自定义 PropertySourceFactory 类型
    """
    pass


class ComponentScan(Annotation):
    """组件扫描注解 - value/base_packages 指定要扫描的包"""
    pass


class ImportResource(Annotation):
    """资源导入注解 - 记录外部定义资源及其读取器类型"""
    pass


class Order(Annotation):
    """排序注解，值越小优先级越高"""

    @property
    def order(self) -> Optional[int]:
        return self.value[0] if self.value else None


class Conditional(Annotation):
    """条件注解 - value 为 Condition 类型列表"""
    pass


class Bean(Annotation):
    """
    Bean方法注解

    使用示例:
        @Configuration()
        class AppConfig:
            @Bean()
            def data_source(self):
                return DataSource()
    """
    pass
