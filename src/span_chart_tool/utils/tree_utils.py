"""
树结构处理工具模块
"""

from typing import Any, Dict, Iterator, List, Optional
import logging

from ..models import Span, Trace

logger = logging.getLogger(__name__)


def iter_spans(root: Span) -> Iterator[Span]:
    """深度优先遍历，子节点按顺序访问"""
    stack = [root]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def get_span_path(span: Span) -> List[str]:
    """
    获取从根到当前 span 的名称路径（不含合成根节点）

    Args:
        span: 目标 span

    Returns:
        List[str]: 名称路径
    """
    path = []
    current = span
    while current is not None and not current.is_root:
        path.append(current.name)
        current = current.parent
    return list(reversed(path))


def get_span_depth(span: Span) -> int:
    """span 的深度，根节点为 0"""
    depth = 0
    current = span.parent
    while current is not None:
        depth += 1
        current = current.parent
    return depth


def extract_span_paths(trace: Trace) -> Dict[Any, List[str]]:
    """
    提取所有 span 的名称路径

    Returns:
        Dict[Any, List[str]]: 键为 span ID，值为名称路径
    """
    return {span.span_id: get_span_path(span) for span in trace.spans}


def get_trace_statistics(trace: Trace) -> Dict[str, Any]:
    """
    获取 Trace 的统计信息

    Args:
        trace: 构建完成的 Trace

    Returns:
        Dict[str, Any]: 统计信息
    """
    stats = {
        'total_spans': trace.total_spans,
        'top_level_spans': len(trace.root.children),
        'max_depth': 0,
        'max_fan_out': 0,
        'leaf_spans': 0,
        'auto_closed_spans': len(trace.auto_closed),
        'scheduled_intervals': 0,
        'total_scheduled_time': 0,
        'start_ts': trace.root.interval.start,
        'max_ts': trace.max_ts,
    }

    # 迭代计算深度，避免深树递归
    depths = {trace.root: 0}
    for span in iter_spans(trace.root):
        depth = depths[span]
        for child in span.children:
            depths[child] = depth + 1
        if span.is_root:
            continue
        stats['max_depth'] = max(stats['max_depth'], depth)
        stats['max_fan_out'] = max(stats['max_fan_out'], len(span.children))
        if not span.children:
            stats['leaf_spans'] += 1
        stats['scheduled_intervals'] += len(span.scheduled)
        stats['total_scheduled_time'] += span.scheduled_time

    return stats


def format_trace_tree(root: Span, max_depth: Optional[int] = 10) -> List[str]:
    """
    将 span 树格式化为文本行

    Args:
        root: 树根节点
        max_depth: 最大深度，None 表示不限制

    Returns:
        List[str]: 每个 span 一行
    """
    lines = []
    stack = [(root, 0, "")]
    while stack:
        node, depth, prefix = stack.pop()
        if max_depth is not None and depth > max_depth:
            continue
        interval = node.interval
        lines.append(f"{prefix}{node.name} (start={interval.start}, end={interval.end})")

        child_count = len(node.children)
        for i in range(child_count - 1, -1, -1):
            is_last = i == child_count - 1
            child_prefix = prefix.replace("├── ", "│   ").replace("└── ", "    ") + ("└── " if is_last else "├── ")
            stack.append((node.children[i], depth + 1, child_prefix))
    return lines


def print_trace_tree(root: Span, max_depth: Optional[int] = 10):
    """打印 span 树结构"""
    for line in format_trace_tree(root, max_depth):
        print(line)
