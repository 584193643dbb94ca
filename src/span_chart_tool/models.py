# -*- coding: utf-8 -*-
"""
Span 事件流与 Trace 数据模型定义
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Optional, Tuple, Union

SpanId = Hashable
Timestamp = Union[int, float]

# 合成根节点保留的 ID
ROOT_SPAN_ID = 0
ROOT_SPAN_NAME = "ROOT"


@dataclass
class Interval:
    """时间区间，end 为 None 表示尚未结束"""
    start: Timestamp
    end: Optional[Timestamp] = None

    @property
    def is_closed(self) -> bool:
        return self.end is not None

    @property
    def duration(self) -> Timestamp:
        """区间长度，未结束的区间返回 0"""
        if self.end is None:
            return 0
        return self.end - self.start


@dataclass(eq=False)
class Span:
    """
    一个工作单元

    parent 只是反向引用，树通过 children 自顶向下持有 span。
    eq=False 使 span 按对象身份哈希，可以直接作为布局映射的键。
    """
    span_id: SpanId
    name: str
    interval: Interval
    parent: Optional['Span'] = None
    children: Union[List['Span'], Tuple['Span', ...]] = field(default_factory=list)
    scheduled: Union[List[Interval], Tuple[Interval, ...]] = field(default_factory=list)
    frozen: bool = False

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def scheduled_time(self) -> Timestamp:
        """实际在资源上运行的总时长"""
        return sum(interval.duration for interval in self.scheduled)

    def freeze(self):
        """冻结 span，之后 children 和 scheduled 不可再修改"""
        self.children = tuple(self.children)
        self.scheduled = tuple(self.scheduled)
        self.frozen = True

    def __repr__(self) -> str:
        return f"Span(id={self.span_id!r}, name={self.name!r}, start={self.interval.start}, end={self.interval.end})"


@dataclass(frozen=True)
class Trace:
    """构建完成后的只读 span 树"""
    spans: Tuple[Span, ...]
    root: Span
    auto_closed: Tuple[SpanId, ...] = ()

    @property
    def max_ts(self) -> Timestamp:
        return self.root.interval.end

    @property
    def total_spans(self) -> int:
        return len(self.spans)


@dataclass(frozen=True)
class SpanStart:
    """span 开始事件，parent 为 None 时挂到根节点下"""
    id: SpanId
    parent: Optional[SpanId]
    ts: Timestamp
    name: str


@dataclass(frozen=True)
class Schedule:
    """span 开始在资源上运行"""
    id: SpanId
    ts: Timestamp


@dataclass(frozen=True)
class Deschedule:
    """span 离开资源"""
    id: SpanId
    ts: Timestamp


@dataclass(frozen=True)
class SpanEnd:
    """span 结束事件"""
    id: SpanId
    ts: Timestamp


Event = Union[SpanStart, Schedule, Deschedule, SpanEnd]

EVENT_TYPES = {
    'SpanStart': SpanStart,
    'Schedule': Schedule,
    'Deschedule': Deschedule,
    'SpanEnd': SpanEnd,
}
