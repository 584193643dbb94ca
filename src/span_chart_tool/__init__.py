"""
Span Chart Tool Package
"""

from .models import Interval, Span, Trace, SpanStart, Schedule, Deschedule, SpanEnd, ROOT_SPAN_ID
from .trace_builder import TraceBuilder, build_trace
from .layout import LayoutEngine, compute_layout, check_rows
from .parser import load_events, load_trace

__all__ = [
    'Interval',
    'Span',
    'Trace',
    'SpanStart',
    'Schedule',
    'Deschedule',
    'SpanEnd',
    'ROOT_SPAN_ID',
    'TraceBuilder',
    'build_trace',
    'LayoutEngine',
    'compute_layout',
    'check_rows',
    'load_events',
    'load_trace',
]
