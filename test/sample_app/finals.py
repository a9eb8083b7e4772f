"""
final 标记校验示例
Final Marker Validation Samples
"""

from typing import final

from ioc_config import Bean, Configuration


@final
@Configuration()
class FinalConfig:
    pass


@final
@Configuration(proxy_bean_methods=False)
class LiteFinalConfig:
    @Bean()
    @final
    def bean(self):
        return "bean"


@Configuration()
class FinalBeanMethodConfig:
    @Bean()
    @final
    def bean(self):
        return "bean"


@Configuration()
class FinalStaticBeanConfig:
    @Bean()
    @final
    @staticmethod
    def bean():
        return "bean"
