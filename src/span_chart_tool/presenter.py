"""
布局结果展示 (纯函数实现)

把泳道布局整理成表格，输出 JSON / Excel / CSV 文件或 markdown 表格。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import pandas as pd

from .layout import row_index
from .models import Span, Trace
from .utils.tree_utils import get_span_depth

logger = logging.getLogger(__name__)

SUPPORTED_OUTPUT_FORMATS = ('json', 'xlsx', 'csv')


def build_span_records(trace: Trace, rows: List[List[Span]]) -> List[Dict[str, Any]]:
    """
    每个 span 一条记录，按行号和开始时间排序

    Args:
        trace: 构建完成的 Trace
        rows: compute_layout 的结果

    Returns:
        List[Dict[str, Any]]: span 记录列表
    """
    auto_closed = set(trace.auto_closed)
    records = []
    for row_idx, row in enumerate(rows):
        for span in row:
            if span.is_root:
                continue
            records.append({
                'row': row_idx,
                'span_id': span.span_id,
                'name': span.name,
                'start': span.interval.start,
                'end': span.interval.end,
                'duration': span.interval.duration,
                'depth': get_span_depth(span),
                'parent_id': None if span.parent.is_root else span.parent.span_id,
                'scheduled_count': len(span.scheduled),
                'scheduled_time': span.scheduled_time,
                'auto_closed': span.span_id in auto_closed,
            })
    return records


def layout_to_dataframe(trace: Trace, rows: List[List[Span]]) -> pd.DataFrame:
    """布局结果转换为 DataFrame"""
    columns = ['row', 'span_id', 'name', 'start', 'end', 'duration', 'depth',
               'parent_id', 'scheduled_count', 'scheduled_time', 'auto_closed']
    return pd.DataFrame(build_span_records(trace, rows), columns=columns)


def row_summary_dataframe(trace: Trace, rows: List[List[Span]]) -> pd.DataFrame:
    """
    按泳道汇总

    utilization 为该行 span 覆盖的总时长占整个 trace 时间范围的比例。
    """
    df = layout_to_dataframe(trace, rows)
    columns = ['row', 'span_count', 'busy_time', 'first_start', 'last_end', 'utilization']
    if df.empty:
        return pd.DataFrame(columns=columns)

    summary = df.groupby('row').agg(
        span_count=('span_id', 'count'),
        busy_time=('duration', 'sum'),
        first_start=('start', 'min'),
        last_end=('end', 'max'),
    ).reset_index()

    trace_range = trace.max_ts - trace.root.interval.start
    if trace_range > 0:
        summary['utilization'] = (summary['busy_time'] / trace_range).round(4)
    else:
        summary['utilization'] = 0.0
    return summary[columns]


def print_markdown_table(records: List[Dict[str, Any]], title: str) -> None:
    """打印markdown格式的表格"""
    if not records:
        print(f"# {title}\n\n没有数据可显示")
        return

    print(f"# {title}\n")

    columns = list(records[0].keys())
    print("| " + " | ".join(columns) + " |")
    print("| " + " | ".join(["---"] * len(columns)) + " |")

    for record in records:
        values = []
        for col in columns:
            value = record.get(col, "")
            if isinstance(value, str):
                value = value.replace("\n", "<br>").replace("|", "\\|")
            values.append(str(value))
        print("| " + " | ".join(values) + " |")

    print()


def generate_output_files(trace: Trace, rows: List[List[Span]], output_dir: str,
                          base_name: str, output_formats: Optional[List[str]] = None) -> List[Path]:
    """
    生成输出文件

    Args:
        trace: 构建完成的 Trace
        rows: 布局结果
        output_dir: 输出目录
        base_name: 基础文件名
        output_formats: 输出格式列表，支持 json / xlsx / csv，默认 json 和 xlsx

    Returns:
        List[Path]: 生成的文件路径列表
    """
    if output_formats is None:
        output_formats = ['json', 'xlsx']

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    records = build_span_records(trace, rows)
    generated_files = []

    if 'json' in output_formats:
        json_file = output_path / f"{base_name}.json"
        payload = {
            'row_count': len(rows),
            'max_ts': trace.max_ts,
            'spans': records,
        }
        with open(json_file, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        logger.info(f"JSON 文件已生成: {json_file}")
        generated_files.append(json_file)

    if 'xlsx' in output_formats or 'csv' in output_formats:
        span_df = layout_to_dataframe(trace, rows)
        summary_df = row_summary_dataframe(trace, rows)

        if 'xlsx' in output_formats:
            xlsx_file = output_path / f"{base_name}.xlsx"
            try:
                with pd.ExcelWriter(xlsx_file, engine='openpyxl') as writer:
                    span_df.to_excel(writer, sheet_name='Span布局', index=False)
                    summary_df.to_excel(writer, sheet_name='泳道汇总', index=False)
                logger.info(f"Excel 文件已生成: {xlsx_file}")
                generated_files.append(xlsx_file)
            except ImportError:
                logger.warning("openpyxl 不可用，改为生成 CSV 文件")
                if 'csv' not in output_formats:
                    output_formats = list(output_formats) + ['csv']

        if 'csv' in output_formats:
            csv_file = output_path / f"{base_name}.csv"
            span_df.to_csv(csv_file, index=False, encoding='utf-8')
            logger.info(f"CSV 文件已生成: {csv_file}")
            generated_files.append(csv_file)

    return generated_files
