"""
校验命令模块
"""

from ..file_utils import parse_file_paths
from ...exceptions import LayoutError, TraceError
from ...layout import LayoutEngine, check_rows
from ...parser import load_trace
from ...utils.tree_utils import get_trace_statistics, print_trace_tree


class CheckCommand:
    """校验命令处理器: 检查事件流和布局结果，不生成文件"""

    def run(self, args) -> int:
        try:
            file_paths = parse_file_paths(args.file)
        except ValueError as e:
            print(f"错误: 解析文件路径失败 - {e}")
            return 1

        status = 0
        for file_path in file_paths:
            print(f"=== 校验文件: {file_path} ===")
            try:
                trace = load_trace(file_path, close_unclosed=not args.strict)
            except (TraceError, ValueError, OSError) as e:
                print(f"错误: 事件流不合法 - {e}")
                status = 1
                continue

            stats = get_trace_statistics(trace)
            for key, value in stats.items():
                print(f"  {key}: {value}")

            if args.print_tree:
                print_trace_tree(trace.root, max_depth=args.max_depth)

            engine = LayoutEngine()
            try:
                layouts = engine.compute_local_layouts(trace)
                rows = engine.place_rows(trace, layouts)
            except LayoutError as e:
                print(f"错误: 布局失败 - {e}")
                status = 1
                continue

            problems = check_rows(rows)
            print(f"  rows: {len(rows)}")
            if problems:
                status = 1
                print(f"发现 {len(problems)} 个布局问题:")
                for span, message in problems.items():
                    print(f"  {span.name}: {message}")
            else:
                print("布局校验通过")
            print()

        return status
