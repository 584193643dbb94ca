"""
工具模块
"""

from .work_queue import WorkQueue
from .tree_utils import (
    iter_spans,
    get_span_path,
    get_span_depth,
    extract_span_paths,
    get_trace_statistics,
    print_trace_tree,
)

__all__ = [
    'WorkQueue',
    'iter_spans',
    'get_span_path',
    'get_span_depth',
    'extract_span_paths',
    'get_trace_statistics',
    'print_trace_tree',
]
