"""
依赖缺失、无法导入的模块，只能结构化读取
Module With a Missing Dependency
"""

import nonexistent_dependency_for_tests  # noqa: F401

from ioc_config import Bean, Configuration, ImportSelector


@Configuration()
class UnloadableConfig:
    @Bean()
    def second(self):
        return 2

    @Bean()
    def first(self):
        return 1


class UnloadableSelector(ImportSelector):
    def select_imports(self, importing_metadata):
        return []
