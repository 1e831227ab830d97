"""Tests for gmwrap.executor: running shell commands."""
from __future__ import annotations

import os

from gmwrap.classify import parse_result
from gmwrap.executor import run_command


class TestRunCommand:
    def test_captures_stdout(self):
        completed = run_command("printf 'hello'")
        assert completed == {"command": "printf 'hello'", "returncode": 0, "output": "hello"}

    def test_combines_stderr_with_stdout(self):
        completed = run_command("printf 'out'; printf 'err' 1>&2")
        assert completed["output"] == "outerr"

    def test_reports_exit_status(self):
        completed = run_command("exit 3")
        assert completed["returncode"] == 3
        assert completed["output"] == ""

    def test_passes_environment(self):
        env = dict(os.environ, GMWRAP_TEST_VALUE="from-env")
        assert run_command('printf "$GMWRAP_TEST_VALUE"', env=env)["output"] == "from-env"

    def test_missing_command_output_is_captured(self):
        completed = run_command("gmwrap-definitely-missing-binary version")
        assert completed["returncode"] != 0
        assert "not found" in completed["output"]

    def test_undecodable_output_is_replaced(self):
        completed = run_command("printf 'unable to open image caf\\351.jpg'")
        assert completed["output"].startswith("unable to open image caf")
        assert completed["output"].endswith(".jpg")
        assert "�" in completed["output"]

    def test_undecodable_output_still_classifies(self):
        output = run_command("printf 'gm convert: unable to open image caf\\351.jpg'")["output"]
        assert parse_result(output).error == "unable_to_open"
