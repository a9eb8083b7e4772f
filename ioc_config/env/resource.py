"""
资源抽象与资源加载器
Resources and Resource Loader

作者: mrkingu
日期: 2025-06-21
描述: 文件系统资源、包内资源（importlib.resources）以及按前缀分派的默认资源加载器
"""

import importlib.resources
import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import ResourceNotFoundError

logger = logging.getLogger(__name__)

CLASSPATH_PREFIX = "classpath:"
FILE_PREFIX = "file:"


class Resource:
    """资源接口"""

    @property
    def description(self) -> str:
        raise NotImplementedError

    @property
    def filename(self) -> str:
        raise NotImplementedError

    def exists(self) -> bool:
        raise NotImplementedError

    def read_bytes(self) -> bytes:
        """
        读取资源内容

        Raises:
            ResourceNotFoundError: 资源不存在或无法读取
        """
        raise NotImplementedError

    def read_text(self, encoding: Optional[str] = None) -> str:
        return self.read_bytes().decode(encoding or "utf-8")

    def __repr__(self) -> str:
        return self.description


class FileSystemResource(Resource):
    """文件系统资源"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    @property
    def description(self) -> str:
        return f"file [{self.path}]"

    @property
    def filename(self) -> str:
        return self.path.name

    def exists(self) -> bool:
        return self.path.is_file()

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise ResourceNotFoundError(str(self.path), str(e)) from e


class PackageResource(Resource):
    """
    包内资源

    位置形如 "my_package/resources/app.yaml"，第一段是可导入的包
    """

    def __init__(self, path: str):
        self.path = path.lstrip("/")

    @property
    def description(self) -> str:
        return f"class path resource [{self.path}]"

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def _traversable(self):
        package, _, relative = self.path.partition("/")
        if not package or not relative:
            raise ResourceNotFoundError(self.path, "expected '<package>/<path>'")
        try:
            root = importlib.resources.files(package)
        except (ModuleNotFoundError, TypeError) as e:
            raise ResourceNotFoundError(self.path, str(e)) from e
        return root.joinpath(relative)

    def exists(self) -> bool:
        try:
            return self._traversable().is_file()
        except ResourceNotFoundError:
            return False

    def read_bytes(self) -> bytes:
        target = self._traversable()
        try:
            return target.read_bytes()
        except OSError as e:
            raise ResourceNotFoundError(self.path, str(e)) from e


class DefaultResourceLoader:
    """
    默认资源加载器

    "classpath:" 前缀得到包内资源，"file:" 前缀或无前缀得到文件系统资源，
    相对路径基于 base_dir
    """

    def __init__(self, base_dir: Optional[Union[str, Path]] = None):
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def get_resource(self, location: str) -> Resource:
        """
        获取资源

        Args:
            location: 资源位置

        Returns:
            资源对象（不保证存在）
        """
        if location.startswith(CLASSPATH_PREFIX):
            return PackageResource(location[len(CLASSPATH_PREFIX):])
        if location.startswith(FILE_PREFIX):
            location = location[len(FILE_PREFIX):]
        path = Path(location)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return FileSystemResource(path)
