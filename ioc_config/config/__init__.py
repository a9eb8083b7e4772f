"""
配置模块
Configuration Module

作者: mrkingu
日期: 2025-06-21
描述: 解析器设置
"""

from .settings import ResolverSettings, get_settings, load_settings

__all__ = ["ResolverSettings", "get_settings", "load_settings"]
