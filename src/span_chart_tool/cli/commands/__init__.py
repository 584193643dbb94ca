"""
CLI命令模块
"""

from .layout import LayoutCommand
from .check import CheckCommand

__all__ = ['LayoutCommand', 'CheckCommand']
