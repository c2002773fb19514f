#!/usr/bin/env python3
"""
External tool execution for the panEDTA pipeline.
"""
from .base import ToolRunner, ToolResult
from .local import LocalToolRunner
from .factory import create_tool_runner

__all__ = [
    'ToolRunner',
    'ToolResult',
    'LocalToolRunner',
    'create_tool_runner',
]
