# -*- coding: utf-8 -*-
"""
CLI模块 - 命令行接口
"""

from .main import main
from .commands import LayoutCommand, CheckCommand

__all__ = ['main', 'LayoutCommand', 'CheckCommand']
