"""
组件扫描示例
Component Scan Samples
"""

from ioc_config import ComponentScan, Configuration


@ComponentScan("sample_app.scanned")
@Configuration()
class ScanRootConfig:
    pass


@ComponentScan(base_packages=["${scan.package:sample_app.scanned}"])
@Configuration()
class PlaceholderScanConfig:
    pass
