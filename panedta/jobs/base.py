#!/usr/bin/env python3
"""
Base interfaces for running the external tools of the panEDTA pipeline.
"""
import abc
import time
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ToolResult:
    """Outcome of one external tool invocation"""
    name: str
    command: List[str]
    return_code: Optional[int] = None
    stdout_path: Optional[str] = None
    stderr_path: Optional[str] = None
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        return self.dry_run or self.return_code == 0

    @property
    def duration(self) -> float:
        if self.end_time is None:
            return 0.0
        return self.end_time - self.start_time


class ToolRunner(abc.ABC):
    """Base interface for tool runners"""

    @abc.abstractmethod
    def run(self, command: List[str], name: str, cwd: Optional[str] = None) -> ToolResult:
        """Run a command to completion

        Args:
            command: Program and arguments
            name: Job name used for log files
            cwd: Working directory

        Returns:
            ToolResult of a successful run

        Raises:
            ToolExecutionError: If the program cannot start or exits non-zero
        """
        pass
