# -*- coding: utf-8 -*-
"""
CLI验证器模块
"""

import logging
from typing import List

VALID_OUTPUT_FORMATS = ('json', 'xlsx', 'csv', 'png')


def validate_output_formats(format_spec: str) -> List[str]:
    """
    验证输出格式组合是否合规

    Args:
        format_spec: 逗号分隔的输出格式，如 "json,xlsx"

    Returns:
        List[str]: 验证后的格式列表

    Raises:
        ValueError: 如果格式组合不合法
    """
    if not format_spec or not format_spec.strip():
        raise ValueError("输出格式不能为空")

    formats = [fmt.strip() for fmt in format_spec.split(',')]
    for fmt in formats:
        if not fmt:
            raise ValueError("输出格式不能为空字符串")
        if fmt not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"不支持的输出格式: {fmt}。支持的格式: {', '.join(VALID_OUTPUT_FORMATS)}")

    if len(formats) != len(set(formats)):
        raise ValueError("输出格式不能重复")

    return formats


def validate_log_level(level: str) -> int:
    """日志级别名称转换为 logging 常量"""
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"不支持的日志级别: {level}")
    return value
