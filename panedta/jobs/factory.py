#!/usr/bin/env python3
"""
Tool runner factory for the panEDTA pipeline.
"""
import logging
from typing import Dict, Any, Optional

from .base import ToolRunner
from .local import LocalToolRunner

logger = logging.getLogger("panedta.jobs.factory")


def create_tool_runner(config: Dict[str, Any], runner_type: Optional[str] = None) -> ToolRunner:
    """Create a tool runner based on configuration

    Args:
        config: Configuration dictionary
        runner_type: Optional runner type override (only 'local' is known)

    Returns:
        ToolRunner instance
    """
    if runner_type is None:
        runner_type = config.get('job_manager', {}).get('type', 'local')

    if runner_type.lower() != 'local':
        logger.warning(f"Unknown tool runner type {runner_type}, falling back to local execution")

    logger.debug("Using local tool runner")
    return LocalToolRunner(config)
