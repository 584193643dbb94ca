# -*- coding: utf-8 -*-
"""
泳道布局引擎

两遍算法:
1. 自底向上: 叶子先于父节点，对每个 span 的子节点做贪心行分配，得到局部布局
2. 自顶向下: 从根节点 (第 0 行) 开始深度优先遍历，把相对行号累加为绝对行号

同一行内的 span 在时间上互不重叠，子节点总是位于父节点下方。
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .exceptions import LayoutConsistencyError, RowOverlapError
from .models import Interval, Span, Trace
from .utils.work_queue import WorkQueue

logger = logging.getLogger(__name__)


@dataclass
class LayoutRect:
    """子节点相对父节点的位置: row 为行偏移 (>= 1)，height 为其子树占用的行数"""
    interval: Interval
    row: int
    height: int


@dataclass
class LocalLayout:
    """一个 span 对其子节点的布局，第 0 行留给 span 自身"""
    total_height: int = 1
    children: Dict[Span, LayoutRect] = field(default_factory=dict)


def overlaps(a: LayoutRect, b: LayoutRect) -> bool:
    """二维矩形重叠判断: 时间区间相交且行范围相交"""
    left = a.interval.end < b.interval.start
    right = b.interval.end < a.interval.start
    up = a.row + a.height <= b.row
    down = b.row + b.height <= a.row
    return not (left or right or up or down)


def sorted_children(span: Span) -> List[Span]:
    """按开始时间稳定排序的子节点"""
    return sorted(span.children, key=lambda child: child.interval.start)


class LayoutEngine:
    """泳道布局计算器"""

    def __init__(self):
        self.logger = logger

    def compute_local_layout(self, span: Span, layouts: Dict[Span, LocalLayout]) -> LocalLayout:
        """
        计算单个 span 的局部布局

        每个子节点从第 1 行开始尝试，和已放置的兄弟节点重叠就下移一行，直到不重叠。

        Args:
            span: 要布局的 span，其所有子节点必须已经完成局部布局
            layouts: 已完成的局部布局

        Returns:
            LocalLayout: span 的局部布局
        """
        layout = LocalLayout()
        placed: List[LayoutRect] = []

        for child in sorted_children(span):
            child_layout = layouts.get(child)
            if child_layout is None:
                raise LayoutConsistencyError(f"缺少子节点的局部布局: {child!r}")

            candidate = LayoutRect(interval=child.interval, row=1, height=child_layout.total_height)
            while any(overlaps(candidate, other) for other in placed):
                candidate.row += 1

            placed.append(candidate)
            layout.children[child] = candidate
            layout.total_height = max(layout.total_height, candidate.row + candidate.height)

        return layout

    def compute_local_layouts(self, trace: Trace) -> Dict[Span, LocalLayout]:
        """
        第一遍: 按叶子先于父节点的顺序计算所有 span 的局部布局

        每个 span 记录剩余未完成的子节点数，归零时入队，因此每个 span 恰好入队一次。
        """
        children_remaining: Dict[Span, int] = {}
        leaves = []
        for span in (trace.root,) + trace.spans:
            if span.children:
                children_remaining[span] = len(span.children)
            else:
                leaves.append(span)

        layouts: Dict[Span, LocalLayout] = {}
        queue = WorkQueue(leaves)

        while len(queue) > 0:
            span = queue.pop()
            layouts[span] = self.compute_local_layout(span, layouts)
            if span.parent is not None:
                remaining = children_remaining[span.parent] - 1
                children_remaining[span.parent] = remaining
                if remaining == 0:
                    queue.push(span.parent)

        return layouts

    def place_rows(self, trace: Trace, layouts: Dict[Span, LocalLayout]) -> List[List[Span]]:
        """
        第二遍: 自顶向下把相对行号转换为绝对行号

        子节点逆序入栈，按开始时间正序出栈，所以每一行内天然按时间排序。
        """
        root_layout = layouts.get(trace.root)
        if root_layout is None:
            raise LayoutConsistencyError("缺少根节点的局部布局")

        rows: List[List[Span]] = [[] for _ in range(root_layout.total_height)]
        stack = [(trace.root, 0)]

        while stack:
            span, row = stack.pop()
            rows[row].append(span)

            span_layout = layouts.get(span)
            if span_layout is None:
                raise LayoutConsistencyError(f"缺少局部布局: {span!r}")
            for child in reversed(sorted_children(span)):
                rect = span_layout.children.get(child)
                if rect is None:
                    raise LayoutConsistencyError(f"缺少子节点的布局矩形: {child!r}")
                stack.append((child, row + rect.row))

        return rows

    def compute_layout(self, trace: Trace) -> List[List[Span]]:
        """
        计算泳道布局

        Args:
            trace: finalize 之后的 Trace

        Returns:
            List[List[Span]]: 每一行的 span 列表，rows[0] 只包含根节点

        Raises:
            LayoutConsistencyError: 遍历顺序被破坏
            RowOverlapError: 布局结果校验失败
        """
        layouts = self.compute_local_layouts(trace)
        rows = self.place_rows(trace, layouts)
        verify_rows(rows)
        self.logger.info(f"布局完成: {trace.total_spans} 个 span, {len(rows)} 行")
        return rows


def check_rows(rows: List[List[Span]]) -> Dict[Span, str]:
    """
    检查每一行内的 span 是否按时间不重叠

    Returns:
        Dict[Span, str]: 有问题的 span 及原因，空字典表示布局正确
    """
    bad = {}
    for row_idx, row in enumerate(rows):
        previous_end = None
        for span in row:
            start, end = span.interval.start, span.interval.end
            if end is None or end < start:
                bad[span] = f"第 {row_idx} 行: span 结束时间 {end} 早于开始时间 {start}"
            elif previous_end is not None and start < previous_end:
                bad[span] = f"第 {row_idx} 行: span 开始于 {start}，与前一个结束于 {previous_end} 的 span 重叠"
            previous_end = end
    return bad


def verify_rows(rows: List[List[Span]]):
    problems = check_rows(rows)
    if problems:
        raise RowOverlapError(problems)


def row_index(rows: List[List[Span]]) -> Dict[Span, int]:
    """每个 span 所在的绝对行号"""
    return {span: row_idx for row_idx, row in enumerate(rows) for span in row}


def compute_layout(trace: Trace) -> List[List[Span]]:
    """计算 Trace 泳道布局的便捷函数"""
    return LayoutEngine().compute_layout(trace)
