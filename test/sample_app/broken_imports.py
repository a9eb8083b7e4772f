"""
导入目标无法加载的示例
Import Targets That Cannot Be Loaded
"""

from ioc_config import Configuration, Import


@Import("sample_app.unloadable.UnloadableSelector")
@Configuration()
class ImportsUnloadableSelector:
    pass


@Import("sample_app.unloadable.UnloadableConfig")
@Configuration()
class ImportsUnloadableConfig:
    pass


@Import("sample_app.nowhere.MissingConfig")
@Configuration()
class ImportsMissingClass:
    pass
