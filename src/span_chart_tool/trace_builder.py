# -*- coding: utf-8 -*-
"""
基于事件流的 Trace 构建器

逐个消费按时间排序的 span 生命周期事件，增量构建以合成根节点为根的 span 树。
每个事件 O(1) 校验，发现问题立即抛出异常。
"""

import logging
import math
from typing import Dict, Iterable, Optional, Set

from .exceptions import (
    DuplicateCloseError,
    DuplicateScheduleError,
    DuplicateSpanError,
    InvalidParentError,
    InvalidTimestampError,
    MismatchedDescheduleError,
    NonMonotonicTimestampError,
    TraceFinalizedError,
    UnclosedSpanError,
    UnknownSpanError,
)
from .models import (
    ROOT_SPAN_ID,
    ROOT_SPAN_NAME,
    Deschedule,
    Event,
    Interval,
    Schedule,
    Span,
    SpanEnd,
    SpanId,
    SpanStart,
    Timestamp,
    Trace,
)

logger = logging.getLogger(__name__)


class TraceBuilder:
    """
    Trace 构建器

    Args:
        close_unclosed: finalize 时是否强制关闭仍未结束的 span。
            为 False 时存在未关闭的 span 会抛出 UnclosedSpanError。
    """

    def __init__(self, close_unclosed: bool = True):
        self.logger = logger
        self.close_unclosed = close_unclosed
        self.names: Dict[str, str] = {}
        self.root = Span(span_id=ROOT_SPAN_ID, name=ROOT_SPAN_NAME, interval=Interval(start=0))
        self.spans: Dict[SpanId, Span] = {ROOT_SPAN_ID: self.root}
        self.unclosed: Set[SpanId] = set()
        self.event_count = 0

    @property
    def finalized(self) -> bool:
        """finalize 会冻结包括根节点在内的所有 span"""
        return self.root.frozen

    @property
    def max_ts(self) -> Optional[Timestamp]:
        """目前见到的最大时间戳，记录在根节点的 interval.end 上"""
        return self.root.interval.end

    def cache_string(self, s: str) -> str:
        """名称去重，相同内容的名称共享同一个字符串对象"""
        return self.names.setdefault(s, s)

    def add_events(self, events: Iterable[Event]):
        for event in events:
            self.add_event(event)

    def add_event(self, event: Event):
        """
        处理单个事件

        先完成全部校验再修改状态，被拒绝的事件不会留下任何修改。

        Args:
            event: SpanStart / Schedule / Deschedule / SpanEnd 之一

        Raises:
            TraceError: 事件流不合法
            TypeError: 不支持的事件类型
        """
        if self.finalized:
            raise TraceFinalizedError()
        if not isinstance(event, (SpanStart, Schedule, Deschedule, SpanEnd)):
            raise TypeError(f"不支持的事件类型: {type(event).__name__}")

        if not math.isfinite(event.ts):
            raise InvalidTimestampError(event.ts, event.id)
        if self.max_ts is not None and event.ts <= self.max_ts:
            raise NonMonotonicTimestampError(self.max_ts, event.ts)

        if isinstance(event, SpanStart):
            self._start_span(event)
        elif isinstance(event, Schedule):
            self._schedule(event)
        elif isinstance(event, Deschedule):
            self._deschedule(event)
        else:
            self._end_span(event)

        if self.max_ts is None:
            self.root.interval.start = event.ts
        self.root.interval.end = event.ts
        self.event_count += 1

    def _get_span(self, span_id: SpanId) -> Span:
        span = self.spans.get(span_id)
        if span is None or span is self.root:
            raise UnknownSpanError(span_id)
        if span.frozen:
            raise TraceFinalizedError()
        return span

    def _start_span(self, event: SpanStart):
        if event.id in self.spans:
            raise DuplicateSpanError(event.id)

        parent = self.root
        if event.parent is not None:
            parent = self.spans.get(event.parent)
            if parent is None:
                raise InvalidParentError(event.id, event.parent)
        if parent.frozen:
            raise TraceFinalizedError()

        span = Span(
            span_id=event.id,
            name=self.cache_string(event.name),
            interval=Interval(start=event.ts),
            parent=parent,
        )
        parent.children.append(span)
        self.spans[event.id] = span
        self.unclosed.add(event.id)

    def _schedule(self, event: Schedule):
        span = self._get_span(event.id)
        if span.scheduled and not span.scheduled[-1].is_closed:
            raise DuplicateScheduleError(event.id)
        span.scheduled.append(Interval(start=event.ts))

    def _deschedule(self, event: Deschedule):
        span = self._get_span(event.id)
        if not span.scheduled or span.scheduled[-1].is_closed:
            raise MismatchedDescheduleError(event.id)
        span.scheduled[-1].end = event.ts

    def _end_span(self, event: SpanEnd):
        span = self._get_span(event.id)
        if event.id not in self.unclosed:
            raise DuplicateCloseError(event.id)
        self.unclosed.discard(event.id)
        span.interval.end = event.ts

    def finalize(self) -> Trace:
        """
        完成构建，返回只读的 Trace

        仍未关闭的 span 以当前最大时间戳强制关闭，保证采集中途截断的 trace 也能渲染。

        Returns:
            Trace: span 树快照
        """
        if self.finalized:
            raise TraceFinalizedError()

        if self.root.interval.end is None:
            self.root.interval.end = self.root.interval.start
        max_ts = self.root.interval.end

        if self.unclosed and not self.close_unclosed:
            raise UnclosedSpanError(sorted(self.unclosed, key=str))

        # 按创建顺序关闭，保证 auto_closed 的顺序稳定
        auto_closed = [span_id for span_id in self.spans if span_id in self.unclosed]
        for span_id in auto_closed:
            self.spans[span_id].interval.end = max_ts
        if auto_closed:
            self.logger.warning(f"{len(auto_closed)} 个 span 没有 SpanEnd 事件，已在 ts={max_ts} 强制关闭")
        self.unclosed.clear()

        for span in self.spans.values():
            # 未 Deschedule 的调度区间在 span 结束时关闭，SpanEnd 之后才 Schedule 的区间长度为 0
            if span.scheduled and not span.scheduled[-1].is_closed:
                last = span.scheduled[-1]
                last.end = max(span.interval.end, last.start)
            # 稳定排序，开始时间相同的保持事件到达顺序
            span.children.sort(key=lambda child: child.interval.start)
            span.freeze()

        spans = tuple(span for span in self.spans.values() if span is not self.root)
        self.logger.debug(f"Trace 构建完成: {self.event_count} 个事件, {len(spans)} 个 span, max_ts={max_ts}")
        return Trace(spans=spans, root=self.root, auto_closed=tuple(auto_closed))


def build_trace(events: Iterable[Event], close_unclosed: bool = True) -> Trace:
    """
    从事件序列构建 Trace 的便捷函数

    Args:
        events: 按时间排序的事件序列
        close_unclosed: finalize 时是否强制关闭未结束的 span

    Returns:
        Trace: 构建完成的 Trace
    """
    builder = TraceBuilder(close_unclosed=close_unclosed)
    builder.add_events(events)
    return builder.finalize()
