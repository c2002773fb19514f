#!/usr/bin/env python3
"""
Local tool runner for the panEDTA pipeline.
Executes external programs on the local machine.
"""
import os
import re
import shlex
import subprocess
import logging
import time
import threading
from typing import Dict, Any, List, Optional

from panedta.exceptions import ToolExecutionError
from panedta.utils.file import ensure_dir
from .base import ToolResult, ToolRunner

logger = logging.getLogger("panedta.jobs.local")

_UNSAFE = re.compile(r'[^A-Za-z0-9._-]+')


class LocalToolRunner(ToolRunner):
    """Run tools as subprocesses, capturing output to per-job log files"""

    def __init__(self, config: Dict[str, Any], log_dir: Optional[str] = None,
                 dry_run: Optional[bool] = None):
        """Initialize with configuration

        Args:
            config: Configuration dictionary
            log_dir: Directory for job stdout/stderr files
            dry_run: Only record commands; defaults to pipeline.dry_run
        """
        self.config = config
        paths = config.get('paths', {})
        self.log_dir = log_dir or os.path.join(paths.get('work_dir', '.'),
                                               paths.get('log_dir', 'panedta_logs'))
        if dry_run is None:
            dry_run = bool(config.get('pipeline', {}).get('dry_run', False))
        self.dry_run = dry_run
        self.history: List[ToolResult] = []
        self._lock = threading.Lock()

    def _record(self, result: ToolResult) -> None:
        with self._lock:
            self.history.append(result)

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
        job_name = _UNSAFE.sub('_', name)
        command_line = " ".join(shlex.quote(part) for part in command)

        if self.dry_run:
            logger.info(f"[dry run] {job_name}: {command_line}")
            result = ToolResult(name=job_name, command=list(command), dry_run=True, end_time=time.time())
            self._record(result)
            return result

        ensure_dir(self.log_dir)
        stdout_path = os.path.join(self.log_dir, f"{job_name}.out")
        stderr_path = os.path.join(self.log_dir, f"{job_name}.err")
        result = ToolResult(name=job_name, command=list(command),
                            stdout_path=stdout_path, stderr_path=stderr_path)

        logger.info(f"Running {job_name}: {command_line}")
        try:
            with open(stdout_path, 'w') as stdout_file, open(stderr_path, 'w') as stderr_file:
                process = subprocess.run(command, stdout=stdout_file, stderr=stderr_file,
                                         cwd=cwd, check=False)
        except OSError as e:
            result.end_time = time.time()
            self._record(result)
            raise ToolExecutionError(f"Could not start {command[0]} for {job_name}: {str(e)}",
                                     {"job": job_name, "command": command_line}) from e

        result.return_code = process.returncode
        result.end_time = time.time()
        self._record(result)

        if process.returncode != 0:
            raise ToolExecutionError(
                f"{job_name} exited with code {process.returncode}; see {stderr_path}",
                {"job": job_name, "command": command_line, "return_code": process.returncode,
                 "stderr": stderr_path}
            )

        logger.info(f"Job {job_name} finished in {result.duration:.1f}s")
        return result
