#!/usr/bin/env python3
"""
panEDTA pipeline stages and orchestration
"""
from .orchestrator import PipelineOrchestrator, reduce_library
from .report import write_run_summary, format_run_summary

__all__ = ['PipelineOrchestrator', 'reduce_library', 'write_run_summary', 'format_run_summary']
