"""Test helper utilities for the pmctl test suite."""

from tests.helpers.builders import make_snapshot, write_logs
from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
    assert_output_excludes,
)
from tests.helpers.waiting import wait_for

__all__ = [
    "assert_command_success",
    "assert_command_failed",
    "assert_output_contains",
    "assert_output_excludes",
    "assert_error_message",
    "make_snapshot",
    "write_logs",
    "wait_for",
]
