"""
测试用配置类包
Sample Configuration Package

作者: mrkingu
日期: 2025-06-21
描述: 测试使用的模块级配置类。结构化读取需要类定义在模块顶层
"""
