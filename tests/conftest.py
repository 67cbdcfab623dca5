"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import Mock

import pytest

from pmctl.domain.entities import ProcessDetail, ProcessSet
from pmctl.ports.supervisor import SupervisorClient
from tests.fixtures import FakeDaemon

# ============================================================================
# Daemon Fixtures
# ============================================================================
# Unix socket paths are limited to ~104 bytes, so sockets live in a short
# temporary directory rather than under tmp_path.


@pytest.fixture
def socket_path() -> Iterator[Path]:
    """Short path for a Unix socket, removed after the test."""
    directory = Path(tempfile.mkdtemp(prefix="pmctl-"))
    try:
        yield directory / "main.sock"
    finally:
        shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def fake_daemon(socket_path: Path) -> Iterator[FakeDaemon]:
    """A running fake supervisor daemon listening on ``socket_path``."""
    daemon = FakeDaemon(socket_path).start()
    try:
        yield daemon
    finally:
        daemon.stop()


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest.fixture
def mock_client() -> Mock:
    """SupervisorClient mock where every process lookup succeeds."""
    client = Mock(spec=SupervisorClient)
    client.query_by_name.side_effect = lambda name: ProcessDetail(name, {"name": name})
    client.query_all_status.return_value = ProcessSet()
    return client


# ============================================================================
# Log Directory Fixtures
# ============================================================================


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """Empty directory standing in for the user's home."""
    home = tmp_path / "home"
    home.mkdir()
    return home
