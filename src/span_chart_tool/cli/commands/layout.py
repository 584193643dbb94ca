"""
布局命令模块
"""

import time
from pathlib import Path
from typing import List

from ..validators import validate_output_formats
from ..file_utils import parse_file_paths, base_name_for
from ...exceptions import LayoutError, TraceError
from ...layout import LayoutEngine
from ...parser import load_trace
from ...presenter import build_span_records, generate_output_files, print_markdown_table
from ...visualization import SwimlaneVisualizer


class LayoutCommand:
    """布局命令处理器"""

    def __init__(self):
        self.engine = LayoutEngine()

    def run(self, args) -> int:
        """读取事件文件，计算泳道布局并输出结果"""
        print(f"=== 泳道布局 ===")
        print(f"文件模式: {args.file}")
        print(f"标签: {args.label if args.label else '无'}")
        print(f"输出格式: {args.output_format}")
        print(f"输出目录: {args.output_dir}")
        print(f"严格模式: {args.strict}")
        print()

        try:
            output_formats = validate_output_formats(args.output_format)
        except ValueError as e:
            print(f"错误: 输出格式验证失败 - {e}")
            return 1

        try:
            file_paths = parse_file_paths(args.file)
        except ValueError as e:
            print(f"错误: 解析文件路径失败 - {e}")
            return 1

        if args.label and len(file_paths) > 1:
            print("错误: 多个文件时不能指定 --label")
            return 1

        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        start_time = time.time()
        generated_files: List[Path] = []
        for file_path in file_paths:
            try:
                generated_files.extend(self._process_file(file_path, args, output_formats, output_dir))
            except (TraceError, LayoutError, ValueError, OSError) as e:
                print(f"错误: 处理文件 {file_path} 失败 - {e}")
                return 1

        total_time = time.time() - start_time
        print(f"\n布局完成，总耗时: {total_time:.2f} 秒")

        print("\n生成的文件:")
        for file_path in generated_files:
            print(f"  {file_path}")
        return 0

    def _process_file(self, file_path: str, args, output_formats: List[str], output_dir: Path) -> List[Path]:
        print(f"正在解析文件: {file_path}")
        trace = load_trace(file_path, close_unclosed=not args.strict)
        print(f"构建了 {trace.total_spans} 个 span，max_ts={trace.max_ts}")
        if trace.auto_closed:
            print(f"警告: {len(trace.auto_closed)} 个 span 未结束，已强制关闭")

        rows = self.engine.compute_layout(trace)
        print(f"布局共 {len(rows)} 行")

        base_name = base_name_for(file_path, args.label)

        if args.print_markdown:
            print_markdown_table(build_span_records(trace, rows), f"{base_name} 泳道布局")

        files = generate_output_files(
            trace, rows, str(output_dir), f"{base_name}_layout",
            output_formats=[fmt for fmt in output_formats if fmt != 'png'],
        )
        if 'png' in output_formats:
            visualizer = SwimlaneVisualizer()
            files.append(visualizer.plot(trace, rows, output_dir / f"{base_name}_layout.png", title=base_name))
        return files
