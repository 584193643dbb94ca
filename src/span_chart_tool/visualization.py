"""
泳道图可视化模块
"""

from pathlib import Path
from typing import List, Union
import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .models import Span, Trace

logger = logging.getLogger(__name__)


class SwimlaneVisualizer:
    """泳道图绘制器，布局由 LayoutEngine 计算，这里只负责把行和区间画出来"""

    def __init__(self, colormap: str = 'viridis', row_height: float = 0.9):
        plt.rcParams['font.sans-serif'] = ['DejaVu Sans', 'Arial', 'sans-serif']
        plt.rcParams['axes.unicode_minus'] = False
        self.colormap = colormap
        self.row_height = row_height

    def plot(self, trace: Trace, rows: List[List[Span]], output_file: Union[str, Path],
             title: str = "Span Swimlanes", show_labels: bool = True) -> Path:
        """
        绘制泳道图

        每个 span 的生命周期画成浅色条，调度区间叠加成深色条。
        颜色按 span 在布局中的顺序从 colormap 中取。

        Args:
            trace: 构建完成的 Trace
            rows: compute_layout 的结果
            output_file: 输出 PNG 路径
            title: 图标题
            show_labels: 是否在条上标注 span 名称

        Returns:
            Path: 生成的文件路径
        """
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        total_spans = sum(len(row) for row in rows)
        cmap = matplotlib.colormaps[self.colormap]
        start_ts = trace.root.interval.start
        max_ts = trace.max_ts

        fig_height = max(2.0, 0.35 * len(rows) + 1.0)
        fig, ax = plt.subplots(figsize=(14, fig_height))

        spans_processed = 0
        for row_idx, row in enumerate(rows):
            for span in row:
                color = cmap(spans_processed / max(total_spans, 1))
                spans_processed += 1

                lifetime = [(span.interval.start, span.interval.duration)]
                ax.broken_barh(lifetime, (row_idx, self.row_height), facecolors=color, alpha=0.45)

                scheduled = [(interval.start, interval.duration) for interval in span.scheduled]
                if scheduled:
                    ax.broken_barh(scheduled, (row_idx, self.row_height), facecolors=color)

                if show_labels and span.interval.duration > 0:
                    ax.text(span.interval.start, row_idx + self.row_height / 2, span.name,
                            va='center', ha='left', fontsize=7, clip_on=True)

        ax.set_xlim(start_ts, max_ts if max_ts > start_ts else start_ts + 1)
        ax.set_ylim(len(rows), 0)
        ax.set_xlabel('timestamp')
        ax.set_ylabel('row')
        ax.set_title(title)
        ax.grid(axis='x', linestyle=':', alpha=0.5)

        try:
            fig.tight_layout()
            fig.savefig(output_file, dpi=150)
        finally:
            plt.close(fig)

        logger.info(f"泳道图已生成: {output_file}")
        return output_file
