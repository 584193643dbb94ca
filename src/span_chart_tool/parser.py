"""
Span 事件文件解析器

支持 JSON 数组、带 "events" 字段的 JSON 对象以及 JSON Lines，文件名以 .gz 结尾时按 gzip 读取。
"""

import json
import math
import gzip
from pathlib import Path
from typing import Any, Dict, List, Union
import logging

from .exceptions import EventFormatError
from .models import EVENT_TYPES, Event, SpanStart, Trace
from .trace_builder import build_trace

logger = logging.getLogger(__name__)


def _require(event_data: Dict[str, Any], key: str, index: int):
    if key not in event_data:
        raise EventFormatError(f"缺少字段 '{key}'", index)
    return event_data[key]


def _is_valid_id(value: Any) -> bool:
    return isinstance(value, (int, str)) and not isinstance(value, bool)


def parse_event(event_data: Dict[str, Any], index: int = None) -> Event:
    """
    解析单个事件

    Args:
        event_data: 事件数据字典
        index: 事件在文件中的序号，用于错误信息

    Returns:
        Event: 解析后的事件对象

    Raises:
        EventFormatError: 事件格式不合法
    """
    if not isinstance(event_data, dict):
        raise EventFormatError(f"事件必须是 JSON 对象，实际为 {type(event_data).__name__}", index)

    event_type = _require(event_data, 'type', index)
    event_cls = EVENT_TYPES.get(event_type)
    if event_cls is None:
        raise EventFormatError(f"不支持的事件类型: {event_type}。支持的类型: {', '.join(EVENT_TYPES)}", index)

    span_id = _require(event_data, 'id', index)
    if not _is_valid_id(span_id):
        raise EventFormatError(f"span ID 必须是整数或字符串: {span_id!r}", index)
    ts = _require(event_data, 'ts', index)
    if isinstance(ts, bool) or not isinstance(ts, (int, float)):
        raise EventFormatError(f"时间戳必须是数字: {ts!r}", index)
    # json 模块接受 NaN / Infinity 字面量
    if not math.isfinite(ts):
        raise EventFormatError(f"时间戳必须是有限数值: {ts!r}", index)

    if event_cls is SpanStart:
        name = _require(event_data, 'name', index)
        if not isinstance(name, str):
            raise EventFormatError(f"span 名称必须是字符串: {name!r}", index)
        parent = event_data.get('parent')
        if parent is not None and not _is_valid_id(parent):
            raise EventFormatError(f"父节点 ID 必须是整数或字符串: {parent!r}", index)
        return SpanStart(id=span_id, parent=parent, ts=ts, name=name)

    return event_cls(id=span_id, ts=ts)


def parse_events(raw_events: List[Dict[str, Any]]) -> List[Event]:
    """批量解析事件，保持原有顺序"""
    return [parse_event(raw_event, index) for index, raw_event in enumerate(raw_events)]


def _read_text(file_path: Path) -> str:
    open_func = gzip.open if file_path.suffix == '.gz' else open
    with open_func(file_path, 'rt', encoding='utf-8') as f:
        return f.read()


def _is_jsonl(file_path: Path) -> bool:
    suffixes = file_path.suffixes
    if suffixes and suffixes[-1] == '.gz':
        suffixes = suffixes[:-1]
    return bool(suffixes) and suffixes[-1] == '.jsonl'


def load_events(file_path: Union[str, Path]) -> List[Event]:
    """
    读取事件文件

    Args:
        file_path: 事件文件路径 (.json / .jsonl，可选 .gz 压缩)

    Returns:
        List[Event]: 事件列表

    Raises:
        FileNotFoundError: 文件不存在
        EventFormatError: 文件内容格式错误
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"文件不存在: {file_path}")

    text = _read_text(file_path)

    if _is_jsonl(file_path):
        raw_events = []
        for line_no, line in enumerate(text.splitlines(), 1):
            line = line.strip()
            if not line:
                continue
            try:
                raw_events.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise EventFormatError(f"第 {line_no} 行不是合法的 JSON: {e}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise EventFormatError(f"文件不是合法的 JSON: {e}") from e
        if isinstance(data, dict):
            if 'events' not in data:
                raise EventFormatError("JSON 对象中缺少 'events' 字段")
            raw_events = data['events']
        else:
            raw_events = data
        if not isinstance(raw_events, list):
            raise EventFormatError("事件数据必须是数组")

    logger.info(f"读取到 {len(raw_events)} 个原始事件: {file_path}")
    return parse_events(raw_events)


def load_trace(file_path: Union[str, Path], close_unclosed: bool = True) -> Trace:
    """
    读取事件文件并构建 Trace

    Args:
        file_path: 事件文件路径
        close_unclosed: finalize 时是否强制关闭未结束的 span

    Returns:
        Trace: 构建完成的 Trace
    """
    events = load_events(file_path)
    return build_trace(events, close_unclosed=close_unclosed)
