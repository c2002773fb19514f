#!/usr/bin/env python3
"""
Tests for local tool execution
"""

import os

import pytest

from panedta.exceptions import ToolExecutionError
from panedta.jobs import LocalToolRunner, create_tool_runner


@pytest.fixture
def config(temp_dir):
    return {'paths': {'work_dir': temp_dir, 'log_dir': 'logs'}, 'pipeline': {'dry_run': False}}


class TestLocalToolRunner:

    def test_successful_command_writes_logs(self, config, temp_dir):
        runner = LocalToolRunner(config)

        result = runner.run(["echo", "hello"], "echo test")

        assert result.success
        assert result.name == "echo_test"
        with open(result.stdout_path) as f:
            assert f.read().strip() == "hello"
        assert os.path.dirname(result.stdout_path) == os.path.join(temp_dir, "logs")

    def test_non_zero_exit_raises(self, config):
        runner = LocalToolRunner(config)

        with pytest.raises(ToolExecutionError) as excinfo:
            runner.run(["false"], "always_fails")

        assert excinfo.value.details["return_code"] == 1
        assert runner.history[-1].return_code == 1

    def test_missing_program_raises(self, config):
        with pytest.raises(ToolExecutionError):
            LocalToolRunner(config).run(["panedta-no-such-program"], "missing")

    def test_dry_run_records_only(self, config, temp_dir):
        runner = LocalToolRunner(config, dry_run=True)

        result = runner.run(["false"], "not_run")

        assert result.dry_run and result.success
        assert [r.command for r in runner.history] == [["false"]]
        assert not os.path.exists(os.path.join(temp_dir, "logs"))

    def test_factory(self, config):
        assert isinstance(create_tool_runner(config), LocalToolRunner)
        assert isinstance(create_tool_runner(config, "slurm"), LocalToolRunner)
