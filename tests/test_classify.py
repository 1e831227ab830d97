"""Tests for gmwrap.classify: mapping gm output onto results."""
from __future__ import annotations

from gmwrap.classify import ERROR_RULES, classify, parse_result
from gmwrap.types import CommandResult


class TestClassify:
    def test_each_rule(self):
        assert classify("sh: gm: command not found") == "command_not_found"
        assert classify("gm convert: No such file or directory (a.jpg)") == "file_not_found"
        assert classify("gm convert: Request did not return an image.") == "no_image_returned"
        assert classify("gm identify: unable to open image `a.jpg'") == "unable_to_open"

    def test_no_match(self):
        assert classify("all good") is None

    def test_first_rule_wins(self):
        text = "unable to open image `x': No such file or directory"
        assert classify(text) == "file_not_found"

    def test_rule_order_is_fixed(self):
        assert [kind for _, kind in ERROR_RULES] == [
            "command_not_found",
            "file_not_found",
            "no_image_returned",
            "unable_to_open",
        ]


class TestParseResult:
    def test_empty_output_is_success(self):
        result = parse_result("")
        assert result == CommandResult()
        assert result.ok

    def test_known_error_with_trailing_content(self):
        result = parse_result("gm convert: unable to open image `in.jpg'.\nmore diagnostics follow\n")
        assert result.error == "unable_to_open"
        assert not result.ok

    def test_unclassified_carries_literal_text(self):
        result = parse_result("convert: some warning\n")
        assert result.error == "unclassified"
        assert result.output == "convert: some warning\n"

    def test_exit_status_ignored_by_default(self):
        assert parse_result("", 1).ok

    def test_exit_status_checked_when_enabled(self):
        result = parse_result("", 3, check_exit_status=True)
        assert result.error == "unclassified"
        assert result.output == "exit status 3"

    def test_zero_exit_status_is_success_when_checked(self):
        assert parse_result("", 0, check_exit_status=True).ok
