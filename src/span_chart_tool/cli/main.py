"""
CLI主模块
"""

import argparse
import logging
import sys

from .commands import LayoutCommand, CheckCommand
from .validators import validate_log_level


def build_parser() -> argparse.ArgumentParser:
    """构建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog='span-chart-tool',
        description="Span Chart Tool - 从 span 事件流构建 trace 并计算泳道布局",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 计算布局，输出 JSON 和 Excel (默认)
  span-chart-tool layout events.json

  # 输出 CSV 和泳道图
  span-chart-tool layout events.jsonl --output-format csv,png --output-dir out/

  # 在stdout中打印markdown表格
  span-chart-tool layout events.json --print-markdown --output-format json

  # 批量处理
  span-chart-tool layout "traces/*.json.gz" --output-dir out/

  # 严格模式: 存在未结束的 span 时报错，而不是强制关闭
  span-chart-tool layout events.json --strict

  # 只校验事件流和布局，打印 span 树
  span-chart-tool check events.json --print-tree --max-depth 5
        """
    )
    parser.add_argument('--log-level', default='WARNING',
                        help='日志级别: DEBUG, INFO, WARNING, ERROR (默认: WARNING)')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # layout 命令
    layout_parser = subparsers.add_parser('layout', help='计算泳道布局并输出结果')
    layout_parser.add_argument('file', help='事件文件路径 (.json / .jsonl，可 gzip 压缩)，支持 glob 模式')
    layout_parser.add_argument('--label', default=None, help='输出文件名前缀 (默认: 使用文件名)')
    layout_parser.add_argument('--output-format', default='json,xlsx',
                               help='输出格式，逗号分隔: json, xlsx, csv, png (默认: json,xlsx)')
    layout_parser.add_argument('--output-dir', default='.', help='输出目录 (默认: 当前目录)')
    layout_parser.add_argument('--print-markdown', action='store_true',
                               help='是否在stdout中以markdown格式打印表格 (默认: False)')
    layout_parser.add_argument('--strict', action='store_true',
                               help='存在未结束的 span 时报错 (默认: 以最大时间戳强制关闭)')

    # check 命令
    check_parser = subparsers.add_parser('check', help='校验事件流和布局结果')
    check_parser.add_argument('file', help='事件文件路径，支持 glob 模式')
    check_parser.add_argument('--strict', action='store_true',
                              help='存在未结束的 span 时报错 (默认: 以最大时间戳强制关闭)')
    check_parser.add_argument('--print-tree', action='store_true', help='打印 span 树结构')
    check_parser.add_argument('--max-depth', type=int, default=10, help='打印 span 树的最大深度 (默认: 10)')

    return parser


def main(argv=None):
    """主函数"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = validate_log_level(args.log_level)
    except ValueError as e:
        print(f"错误: {e}")
        return 1
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    if not args.command:
        print("错误: 请指定命令 (layout, check)")
        print("使用 --help 查看帮助信息")
        return 1

    if args.command == 'layout':
        command = LayoutCommand()
        return command.run(args)
    elif args.command == 'check':
        command = CheckCommand()
        return command.run(args)
    else:
        print(f"错误: 未知命令: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
