"""
文件处理工具模块
"""

import os
import glob
from typing import List

EVENT_FILE_SUFFIXES = ('.json', '.jsonl', '.json.gz', '.jsonl.gz')


def is_event_file(path: str) -> bool:
    return path.lower().endswith(EVENT_FILE_SUFFIXES)


def parse_file_paths(file_pattern: str) -> List[str]:
    """
    解析文件路径，支持 glob 模式

    Args:
        file_pattern: 文件路径模式，支持 glob 通配符

    Returns:
        List[str]: 匹配的文件路径列表
    """
    if '*' in file_pattern or '?' in file_pattern or '[' in file_pattern:
        matched_files = glob.glob(file_pattern)
        if not matched_files:
            raise ValueError(f"glob 模式 {file_pattern} 没有匹配到任何文件")

        event_files = [f for f in matched_files if is_event_file(f)]
        if not event_files:
            raise ValueError(f"glob 模式 {file_pattern} 没有匹配到任何事件文件")

        return sorted(event_files)
    else:
        if not os.path.exists(file_pattern):
            raise ValueError(f"文件不存在: {file_pattern}")

        if not is_event_file(file_pattern):
            raise ValueError(f"文件不是 JSON / JSONL 格式: {file_pattern}")

        return [file_pattern]


def base_name_for(file_path: str, label: str = None) -> str:
    """输出文件的基础名称，优先使用标签"""
    if label:
        return label
    name = os.path.basename(file_path)
    for suffix in sorted(EVENT_FILE_SUFFIXES, key=len, reverse=True):
        if name.lower().endswith(suffix):
            return name[:-len(suffix)]
    return name
