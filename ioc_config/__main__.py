#!/usr/bin/env python3
"""
配置解析命令行
Configuration Resolution CLI

作者: mrkingu
日期: 2025-06-21
描述: 解析给定的根配置类并输出配置类、导入来源、Bean方法与属性源，
     用法: python -m ioc_config [--settings FILE] [--set KEY=VALUE] [--json] CLASS [CLASS ...]
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import yaml

from .config import ResolverSettings, load_settings
from .context import ConfigurationResolver, ResolutionResult
from .env import MapPropertySource
from .exceptions import IoCException
from .logger import setup_logging

COMMAND_LINE_PROPERTY_SOURCE_NAME = "commandLineArgs"


def parse_assignments(assignments: List[str]) -> Dict[str, str]:
    """
    解析 KEY=VALUE 形式的属性

    Raises:
        ValueError: 缺少等号或键为空
    """
    properties = {}
    for assignment in assignments:
        key, separator, value = assignment.partition("=")
        if not separator or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got: {assignment}")
        properties[key.strip()] = value
    return properties


def summarize(result: ResolutionResult) -> Dict[str, Any]:
    """把解析结果转换为可序列化的摘要"""
    return {
        "configuration_classes": [
            {
                "name": c.name,
                "bean_name": c.bean_name,
                "imported_by": [i.name for i in c.imported_by],
                "bean_methods": [m.name for m in c.bean_methods],
                "imported_resources": list(c.imported_resources),
            }
            for c in result.configuration_classes
        ],
        "property_sources": result.environment.property_sources.names(),
    }


def render_text(summary: Dict[str, Any]) -> str:
    lines = []
    for item in summary["configuration_classes"]:
        line = item["name"]
        if item["imported_by"]:
            line += f" (imported by {', '.join(item['imported_by'])})"
        lines.append(line)
        for method in item["bean_methods"]:
            lines.append(f"  @Bean {method}")
        for location in item["imported_resources"]:
            lines.append(f"  @ImportResource {location}")
    if summary["property_sources"]:
        lines.append("Property sources: " + " > ".join(summary["property_sources"]))
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """
    主入口函数

    Args:
        argv: 命令行参数，None 时使用 sys.argv

    Returns:
        退出码：0 成功，1 解析失败，2 参数或设置错误
    """
    parser = argparse.ArgumentParser(prog="ioc_config", description="解析配置类并输出配置模型")
    parser.add_argument(
        "classes",
        nargs="+",
        help="根配置类的全限定名"
    )
    parser.add_argument(
        "--settings",
        help="解析器设置文件 (.yaml / .yml / .json)"
    )
    parser.add_argument(
        "--set",
        dest="properties",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="添加最高优先级的属性，可重复"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="以JSON格式输出"
    )

    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings) if args.settings else ResolverSettings()
        properties = parse_assignments(args.properties)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"设置错误: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level, settings.log_format)
    resolver = ConfigurationResolver(settings)
    environment = resolver.create_environment()
    if properties:
        environment.property_sources.add_first(MapPropertySource(COMMAND_LINE_PROPERTY_SOURCE_NAME, properties))

    try:
        result = resolver.resolve(*args.classes, environment=environment)
    except IoCException as e:
        print(f"解析失败: {e}", file=sys.stderr)
        return 1

    summary = summarize(result)
    if args.json:
        print(json.dumps(summary, ensure_ascii=False, indent=2))
    else:
        print(render_text(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
