#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Span Chart Tool 主入口
支持 python3 -m span_chart_tool 调用
"""

import sys

from .cli.main import main

if __name__ == "__main__":
    sys.exit(main())
