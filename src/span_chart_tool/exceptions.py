# -*- coding: utf-8 -*-
"""
异常定义

事件流校验错误继承 ValueError，布局一致性错误继承 RuntimeError。
"""


class TraceError(ValueError):
    """事件流完整性错误"""

    def __init__(self, message: str, span_id=None):
        super().__init__(message)
        self.span_id = span_id


class NonMonotonicTimestampError(TraceError):
    """时间戳没有严格递增"""

    def __init__(self, previous_ts, ts):
        super().__init__(f"时间回退: 从 {previous_ts} 到 {ts}")
        self.previous_ts = previous_ts
        self.ts = ts


class InvalidTimestampError(TraceError):
    """时间戳不是有限数值 (NaN / Infinity)"""

    def __init__(self, ts, span_id=None):
        super().__init__(f"时间戳必须是有限数值: {ts}", span_id)
        self.ts = ts


class DuplicateSpanError(TraceError):
    def __init__(self, span_id):
        super().__init__(f"重复的 span ID: {span_id}", span_id)


class InvalidParentError(TraceError):
    def __init__(self, span_id, parent_id):
        super().__init__(f"span {span_id} 的父节点 ID 无效: {parent_id}", span_id)
        self.parent_id = parent_id


class UnknownSpanError(TraceError):
    def __init__(self, span_id):
        super().__init__(f"未知的 span ID: {span_id}", span_id)


class DuplicateScheduleError(TraceError):
    def __init__(self, span_id):
        super().__init__(f"span {span_id} 收到重复的 Schedule 事件", span_id)


class MismatchedDescheduleError(TraceError):
    def __init__(self, span_id):
        super().__init__(f"span {span_id} 的 Deschedule 事件没有匹配的 Schedule", span_id)


class DuplicateCloseError(TraceError):
    def __init__(self, span_id):
        super().__init__(f"span {span_id} 被重复关闭", span_id)


class UnclosedSpanError(TraceError):
    """严格模式下 finalize 时仍有未关闭的 span"""

    def __init__(self, span_ids):
        span_ids = list(span_ids)
        super().__init__(f"finalize 时存在 {len(span_ids)} 个未关闭的 span: {span_ids[:10]}")
        self.span_ids = span_ids


class TraceFinalizedError(TraceError):
    def __init__(self):
        super().__init__("Trace 已经 finalize，不能再修改")


class EventFormatError(ValueError):
    """事件数据格式错误"""

    def __init__(self, message: str, index=None):
        if index is not None:
            message = f"第 {index} 个事件格式错误: {message}"
        super().__init__(message)
        self.index = index


class LayoutError(RuntimeError):
    """布局算法内部错误"""


class LayoutConsistencyError(LayoutError):
    """遍历顺序被破坏，子节点的局部布局缺失"""


class RowOverlapError(LayoutError):
    """布局完成后同一行内出现重叠或区间倒置"""

    def __init__(self, problems):
        self.problems = problems
        details = "; ".join(f"{span!r}: {msg}" for span, msg in list(problems.items())[:5])
        super().__init__(f"布局校验失败，{len(problems)} 个 span 有问题: {details}")
