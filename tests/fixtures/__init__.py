"""Test fixtures for pmctl."""

from tests.fixtures.fake_daemon import FakeDaemon

__all__ = ["FakeDaemon"]
