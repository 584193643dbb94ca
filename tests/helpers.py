"""
测试辅助函数
"""

import random

from span_chart_tool.models import SpanStart, SpanEnd, Schedule, Deschedule


def make_nested_events(seed: int, count: int, with_schedule: bool = False):
    """
    生成合法的嵌套事件流

    只有没有未结束子节点的 span 才会被关闭，因此子节点的区间总在父节点区间内。
    """
    rng = random.Random(seed)
    events = []
    ts = 0
    next_id = 1
    open_ids = []
    open_children = {}
    parent_of = {}
    scheduled = set()

    while next_id <= count or open_ids:
        ts += rng.randint(1, 3)
        closable = [span_id for span_id in open_ids if open_children[span_id] == 0]

        if with_schedule and open_ids and rng.random() < 0.2:
            span_id = rng.choice(open_ids)
            if span_id in scheduled:
                events.append(Deschedule(id=span_id, ts=ts))
                scheduled.discard(span_id)
            else:
                events.append(Schedule(id=span_id, ts=ts))
                scheduled.add(span_id)
            continue

        if next_id <= count and (not closable or rng.random() < 0.6):
            parent = rng.choice(open_ids) if open_ids and rng.random() < 0.85 else None
            events.append(SpanStart(id=next_id, parent=parent, ts=ts, name=f"span-{next_id % 7}"))
            open_ids.append(next_id)
            open_children[next_id] = 0
            parent_of[next_id] = parent
            if parent is not None:
                open_children[parent] += 1
            next_id += 1
        else:
            span_id = rng.choice(closable)
            events.append(SpanEnd(id=span_id, ts=ts))
            open_ids.remove(span_id)
            parent = parent_of[span_id]
            if parent is not None:
                open_children[parent] -= 1

    return events


def nested_example_events():
    """A 下有两个时间重叠的子节点 B 和 C"""
    return [
        SpanStart(id=1, parent=None, ts=0, name="A"),
        SpanStart(id=2, parent=1, ts=1, name="B"),
        SpanStart(id=3, parent=1, ts=2, name="C"),
        SpanEnd(id=2, ts=5),
        SpanEnd(id=3, ts=6),
        SpanEnd(id=1, ts=10),
    ]
