#!/usr/bin/env python3
"""
测试运行器
Test Runner

作者: mrkingu
日期: 2025-06-21
描述: 统一测试运行脚本，按模块分组运行解析引擎、环境与属性源、设置与日志测试
"""

import argparse
import sys
import subprocess
import os
from pathlib import Path

TEST_GROUPS = {
    "engine": [
        "test/test_annotations.py",
        "test/test_metadata_reader.py",
        "test/test_source_unit.py",
        "test/test_configuration_utils.py",
        "test/test_import_collector.py",
        "test/test_import_stack.py",
        "test/test_parser.py",
        "test/test_deferred_imports.py",
        "test/test_conditions.py",
        "test/test_scanner.py",
        "test/test_resolver.py",
    ],
    "env": [
        "test/test_property_sources.py",
        "test/test_environment.py",
        "test/test_resource.py",
    ],
    "config": [
        "test/test_settings.py",
        "test/test_logger.py",
        "test/test_main.py",
    ],
}


def run_group(name, verbose=False):
    """运行一组测试"""
    print(f"Running {name} tests...")
    cmd = [sys.executable, "-m", "pytest", *TEST_GROUPS[name], "--tb=short"]
    if verbose:
        cmd.append("-v")
    return subprocess.run(cmd, cwd=Path(__file__).parent).returncode


def run_all_tests(verbose=False):
    """运行所有测试"""
    print("="*60)
    print("RUNNING ALL TESTS")
    print("="*60)

    results = [(name, run_group(name, verbose)) for name in TEST_GROUPS]

    # 打印结果
    print("\n" + "="*60)
    print("TEST RESULTS SUMMARY")
    print("="*60)

    all_passed = True
    for group, result in results:
        status = "PASSED" if result == 0 else "FAILED"
        print(f"{group}: {status}")
        if result != 0:
            all_passed = False

    if all_passed:
        print("\n✅ All tests passed!")
        return 0
    else:
        print("\n❌ Some tests failed!")
        return 1


def main():
    parser = argparse.ArgumentParser(description="ioc_config Test Runner")
    parser.add_argument(
        "test_type",
        choices=[*TEST_GROUPS, "all"],
        help="Type of tests to run"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    # 设置工作目录
    os.chdir(Path(__file__).parent)

    if args.test_type == "all":
        return run_all_tests(args.verbose)
    return run_group(args.test_type, args.verbose)


if __name__ == "__main__":
    sys.exit(main())
