#!/usr/bin/env python3
"""
Per-genome state tracking for the panEDTA pipeline
"""
from .models import GenomeState, GenomeStatus, PipelineRun, ALLOWED_TRANSITIONS
from .stage_manager import StageManager

__all__ = ['GenomeState', 'GenomeStatus', 'PipelineRun', 'ALLOWED_TRANSITIONS', 'StageManager']
