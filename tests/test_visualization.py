"""
泳道图可视化单元测试
"""

import os
import sys
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from helpers import make_nested_events
from span_chart_tool.layout import compute_layout
from span_chart_tool.trace_builder import build_trace
from span_chart_tool.visualization import SwimlaneVisualizer

import matplotlib.pyplot as plt


class TestSwimlaneVisualizer(unittest.TestCase):
    """测试泳道图生成"""

    def test_plot_creates_png(self):
        trace = build_trace(make_nested_events(seed=5, count=40, with_schedule=True))
        rows = compute_layout(trace)
        with tempfile.TemporaryDirectory() as temp_dir:
            output = SwimlaneVisualizer().plot(trace, rows, Path(temp_dir) / "sub" / "lanes.png")
            self.assertTrue(output.exists())
            with open(output, 'rb') as f:
                self.assertEqual(f.read(8), b'\x89PNG\r\n\x1a\n')

    def test_plot_empty_trace(self):
        trace = build_trace([])
        rows = compute_layout(trace)
        with tempfile.TemporaryDirectory() as temp_dir:
            output = SwimlaneVisualizer().plot(trace, rows, os.path.join(temp_dir, "empty.png"))
            self.assertTrue(output.exists())

    def test_figure_closed_when_save_fails(self):
        trace = build_trace(make_nested_events(seed=3, count=10, with_schedule=False))
        rows = compute_layout(trace)
        open_figures = len(plt.get_fignums())
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ValueError):
                SwimlaneVisualizer().plot(trace, rows, Path(temp_dir) / "lanes.unknownfmt")
        self.assertEqual(len(plt.get_fignums()), open_figures)


if __name__ == '__main__':
    unittest.main()
