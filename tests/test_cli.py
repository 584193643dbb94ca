"""
CLI 单元测试
"""

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from span_chart_tool.cli.file_utils import base_name_for, parse_file_paths
from span_chart_tool.cli.main import main
from span_chart_tool.cli.validators import validate_log_level, validate_output_formats


GOOD_EVENTS = [
    {"type": "SpanStart", "id": 1, "ts": 0, "name": "A"},
    {"type": "SpanStart", "id": 2, "parent": 1, "ts": 1, "name": "B"},
    {"type": "SpanStart", "id": 3, "parent": 1, "ts": 2, "name": "C"},
    {"type": "SpanEnd", "id": 2, "ts": 5},
    {"type": "SpanEnd", "id": 3, "ts": 6},
    {"type": "SpanEnd", "id": 1, "ts": 10},
]

# X 超出父节点 A 的区间，布局后与 Y 在同一行重叠
OVERLAPPING_EVENTS = [
    {"type": "SpanStart", "id": 1, "ts": 0, "name": "A"},
    {"type": "SpanStart", "id": 2, "parent": 1, "ts": 1, "name": "X"},
    {"type": "SpanEnd", "id": 1, "ts": 2},
    {"type": "SpanStart", "id": 3, "ts": 3, "name": "D"},
    {"type": "SpanStart", "id": 4, "parent": 3, "ts": 4, "name": "Y"},
    {"type": "SpanEnd", "id": 4, "ts": 5},
    {"type": "SpanEnd", "id": 2, "ts": 6},
    {"type": "SpanEnd", "id": 3, "ts": 7},
]


def run_cli(argv):
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        status = main(argv)
    return status, buffer.getvalue()


class TestValidators(unittest.TestCase):
    """测试参数验证"""

    def test_output_formats(self):
        self.assertEqual(validate_output_formats("json, png"), ["json", "png"])
        for bad in ["", "json,", "pdf", "json,json"]:
            with self.assertRaises(ValueError):
                validate_output_formats(bad)

    def test_log_level(self):
        self.assertEqual(validate_log_level("info"), 20)
        with self.assertRaises(ValueError):
            validate_log_level("loud")


class TestFileUtils(unittest.TestCase):
    """测试文件路径解析"""

    def test_parse_file_paths(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            for name in ["b.json", "a.jsonl.gz", "notes.txt"]:
                (Path(temp_dir) / name).write_text("[]", encoding="utf-8")
            files = parse_file_paths(str(Path(temp_dir) / "*"))
            self.assertEqual([Path(f).name for f in files], ["a.jsonl.gz", "b.json"])
            with self.assertRaises(ValueError):
                parse_file_paths(str(Path(temp_dir) / "notes.txt"))
            with self.assertRaises(ValueError):
                parse_file_paths(str(Path(temp_dir) / "missing.json"))

    def test_base_name(self):
        self.assertEqual(base_name_for("dir/trace.jsonl.gz"), "trace")
        self.assertEqual(base_name_for("dir/trace.json", "run1"), "run1")


class TestCommands(unittest.TestCase):
    """测试 layout / check 命令"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.good = self.dir / "good.json"
        self.good.write_text(json.dumps(GOOD_EVENTS), encoding="utf-8")
        self.bad = self.dir / "bad.json"
        self.bad.write_text(json.dumps(OVERLAPPING_EVENTS), encoding="utf-8")

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_no_command(self):
        status, output = run_cli([])
        self.assertEqual(status, 1)

    def test_layout_writes_outputs(self):
        out_dir = self.dir / "out"
        status, output = run_cli(["layout", str(self.good), "--output-dir", str(out_dir),
                                  "--output-format", "json,csv", "--print-markdown"])
        self.assertEqual(status, 0)
        self.assertTrue((out_dir / "good_layout.json").exists())
        self.assertTrue((out_dir / "good_layout.csv").exists())
        self.assertIn("| row | span_id |", output)
        with open(out_dir / "good_layout.json", encoding="utf-8") as f:
            self.assertEqual(json.load(f)["row_count"], 4)

    def test_layout_png(self):
        out_dir = self.dir / "out"
        status, _ = run_cli(["layout", str(self.good), "--output-dir", str(out_dir),
                             "--output-format", "png", "--label", "demo"])
        self.assertEqual(status, 0)
        self.assertTrue((out_dir / "demo_layout.png").exists())

    def test_layout_invalid_format(self):
        status, output = run_cli(["layout", str(self.good), "--output-format", "pdf"])
        self.assertEqual(status, 1)
        self.assertIn("输出格式验证失败", output)

    def test_layout_fails_on_overlap(self):
        status, output = run_cli(["layout", str(self.bad), "--output-dir", str(self.dir / "out"),
                                  "--output-format", "json"])
        self.assertEqual(status, 1)
        self.assertFalse((self.dir / "out" / "bad_layout.json").exists())

    def test_layout_strict_rejects_unclosed(self):
        path = self.dir / "open.json"
        path.write_text(json.dumps(GOOD_EVENTS[:3]), encoding="utf-8")
        status, _ = run_cli(["layout", str(path), "--strict", "--output-format", "json",
                             "--output-dir", str(self.dir / "out")])
        self.assertEqual(status, 1)

        status, output = run_cli(["layout", str(path), "--output-format", "json",
                                  "--output-dir", str(self.dir / "out")])
        self.assertEqual(status, 0)
        self.assertIn("强制关闭", output)

    def test_check_good(self):
        status, output = run_cli(["check", str(self.good), "--print-tree"])
        self.assertEqual(status, 0)
        self.assertIn("布局校验通过", output)
        self.assertIn("└── A", output)

    def test_check_reports_overlap(self):
        status, output = run_cli(["check", str(self.bad)])
        self.assertEqual(status, 1)
        self.assertIn("1 个布局问题", output)

    def test_check_invalid_stream(self):
        path = self.dir / "dup.json"
        path.write_text(json.dumps(GOOD_EVENTS + [{"type": "SpanEnd", "id": 1, "ts": 11}]), encoding="utf-8")
        status, output = run_cli(["check", str(path)])
        self.assertEqual(status, 1)
        self.assertIn("事件流不合法", output)

    def test_unhashable_id_reported(self):
        path = self.dir / "list_id.json"
        path.write_text(json.dumps([{"type": "SpanStart", "id": [1], "ts": 1, "name": "a"}]), encoding="utf-8")
        status, output = run_cli(["check", str(path)])
        self.assertEqual(status, 1)
        self.assertIn("span ID 必须是整数或字符串", output)

        status, output = run_cli(["layout", str(path), "--output-format", "json",
                                  "--output-dir", str(self.dir / "out")])
        self.assertEqual(status, 1)


if __name__ == '__main__':
    unittest.main()
