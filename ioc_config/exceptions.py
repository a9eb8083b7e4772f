"""
IoC异常定义
IoC Exception Definitions

作者: mrkingu
日期: 2025-06-20
描述: 定义配置类解析相关的异常类
"""

from typing import List, Optional


class IoCException(Exception):
    """IoC容器基础异常"""
    pass


class BeanDefinitionStoreError(IoCException):
    """Bean定义存储异常，解析配置类失败时抛出"""

    def __init__(self, message: str, bean_name: Optional[str] = None):
        self.bean_name = bean_name
        super().__init__(message)


class BeanDefinitionParsingError(BeanDefinitionStoreError):
    """Bean定义解析异常，配置内容本身存在问题"""
    pass


class CircularImportError(BeanDefinitionParsingError):
    """循环导入异常"""

    def __init__(self, import_chain: List[str], importing_class: str, attempted_import: str):
        self.import_chain = import_chain
        self.importing_class = importing_class
        self.attempted_import = attempted_import
        chain_str = "->".join(import_chain)
        super().__init__(
            f"A circular import has been detected: Illegal attempt by configuration class "
            f"'{importing_class}' to import class '{attempted_import}' as '{attempted_import}' "
            f"is already present in the current import stack [{chain_str}]"
        )


class ClassResolutionError(IoCException):
    """类解析异常，无法加载或读取类型"""

    def __init__(self, class_name: str, reason: str = ""):
        self.class_name = class_name
        self.reason = reason
        message = f"Failed to resolve class [{class_name}]"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class PlaceholderResolutionError(IoCException):
    """占位符解析异常"""

    def __init__(self, placeholder: str, text: str):
        self.placeholder = placeholder
        self.text = text
        super().__init__(f"Could not resolve placeholder '{placeholder}' in value \"{text}\"")


class ResourceNotFoundError(IoCException):
    """资源不存在"""

    def __init__(self, location: str, reason: str = ""):
        self.location = location
        self.reason = reason
        message = f"Resource not found: {location}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class GroupContractViolation(IoCException):
    """延迟导入分组契约异常，select_imports 返回了空值"""

    def __init__(self, group_name: str):
        self.group_name = group_name
        super().__init__(f"Deferred import group [{group_name}] returned no import entries (None)")


class BeanInstantiationError(IoCException):
    """策略对象实例化异常"""

    def __init__(self, class_name: str, reason: str):
        self.class_name = class_name
        self.reason = reason
        super().__init__(f"Failed to instantiate [{class_name}]: {reason}")


class BeanDefinitionOverrideError(IoCException):
    """Bean定义覆盖异常"""

    def __init__(self, bean_name: str):
        self.bean_name = bean_name
        super().__init__(f"Cannot register bean definition for bean '{bean_name}': there is already one bound")
