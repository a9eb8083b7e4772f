"""
资源加载测试
Resource Loading Tests

作者: mrkingu
日期: 2025-06-21
描述: 验证资源位置前缀分派、文件系统资源、包内资源以及资源缺失的处理
"""

import sys
import os

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ioc_config import ResourceNotFoundError
from ioc_config.env import DefaultPropertySourceFactory, DefaultResourceLoader, FileSystemResource, PackageResource


class TestDefaultResourceLoader:
    """默认资源加载器测试"""

    def test_classpath_prefix(self):
        """测试 classpath: 前缀得到包内资源"""
        resource = DefaultResourceLoader().get_resource("classpath:sample_app/resources/app.properties")
        assert isinstance(resource, PackageResource)
        assert resource.exists()
        assert resource.filename == "app.properties"
        assert resource.description == "class path resource [sample_app/resources/app.properties]"
        assert "app.name=sample" in resource.read_text()

    def test_relative_path_uses_base_dir(self, tmp_path):
        """测试相对路径基于 base_dir"""
        (tmp_path / "app.properties").write_text("key=value", encoding="utf-8")
        loader = DefaultResourceLoader(tmp_path)

        resource = loader.get_resource("app.properties")
        assert isinstance(resource, FileSystemResource)
        assert resource.exists()
        assert resource.read_text() == "key=value"

        prefixed = loader.get_resource("file:app.properties")
        assert prefixed.path == tmp_path / "app.properties"

    def test_absolute_path_ignores_base_dir(self, tmp_path):
        """测试绝对路径不受 base_dir 影响"""
        target = tmp_path / "absolute.properties"
        target.write_text("a=1", encoding="utf-8")
        resource = DefaultResourceLoader("/somewhere/else").get_resource(str(target))
        assert resource.path == target
        assert resource.exists()

    def test_missing_file(self, tmp_path):
        """测试文件不存在"""
        resource = DefaultResourceLoader(tmp_path).get_resource("missing.properties")
        assert not resource.exists()
        with pytest.raises(ResourceNotFoundError):
            resource.read_bytes()

    def test_missing_package_resource(self):
        """测试包内资源不存在"""
        for location in ("sample_app/resources/missing.yaml", "no_such_package_xyz/app.yaml", "app.yaml"):
            resource = PackageResource(location)
            assert not resource.exists()
            with pytest.raises(ResourceNotFoundError):
                resource.read_bytes()


class TestDefaultPropertySourceFactory:
    """默认属性源工厂测试"""

    def test_format_by_extension(self, tmp_path):
        """测试按扩展名选择解析格式"""
        (tmp_path / "a.yml").write_text("server:\n  port: 80\n", encoding="utf-8")
        (tmp_path / "b.json").write_text('{"server": {"host": "h"}}', encoding="utf-8")
        (tmp_path / "c.conf").write_text("server.name = n\n", encoding="utf-8")
        loader = DefaultResourceLoader(tmp_path)
        factory = DefaultPropertySourceFactory()

        assert factory.create_property_source(None, loader.get_resource("a.yml")).source == {"server.port": 80}
        assert factory.create_property_source(None, loader.get_resource("b.json")).source == {"server.host": "h"}
        assert factory.create_property_source(None, loader.get_resource("c.conf")).source == {"server.name": "n"}

    def test_name_defaults_to_description(self, tmp_path):
        """测试未命名时使用资源描述作为名称"""
        (tmp_path / "a.properties").write_text("k=v", encoding="utf-8")
        resource = DefaultResourceLoader(tmp_path).get_resource("a.properties")
        property_source = DefaultPropertySourceFactory().create_property_source(None, resource)
        assert property_source.name == resource.description
        assert DefaultPropertySourceFactory().create_property_source("named", resource).name == "named"

    def test_encoding(self, tmp_path):
        """测试按声明的编码读取"""
        (tmp_path / "latin.properties").write_bytes("name=caf\xe9".encode("latin-1"))
        resource = DefaultResourceLoader(tmp_path).get_resource("latin.properties")
        property_source = DefaultPropertySourceFactory().create_property_source(None, resource, "latin-1")
        assert property_source.get_property("name") == "caf\xe9"

    def test_invalid_content(self, tmp_path):
        """测试格式错误的文件"""
        from ioc_config import BeanDefinitionParsingError

        (tmp_path / "bad.yaml").write_text("key: [unclosed", encoding="utf-8")
        (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
        loader = DefaultResourceLoader(tmp_path)
        factory = DefaultPropertySourceFactory()
        for name in ("bad.yaml", "bad.json"):
            with pytest.raises(BeanDefinitionParsingError):
                factory.create_property_source(None, loader.get_resource(name))
