"""Remote client adapter for the supervisor daemon.

Implements the SupervisorClient port by sending one JSON-RPC request per
operation over the daemon's Unix socket. No retries and no caching: every
call opens a fresh connection and a transport failure is surfaced as-is.
"""

import contextlib
import itertools
import json
import logging
import socket
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pmctl.adapters.daemon.protocol import (
    ProtocolError,
    Request,
    Response,
    receive_message,
    send_message,
)
from pmctl.adapters.daemon.timeouts import DaemonTimeouts
from pmctl.domain.entities import ProcessDescriptor, ProcessDetail, ProcessSet
from pmctl.domain.exceptions import DaemonUnavailableError, RemoteCallError

logger = logging.getLogger(__name__)


# ============================================================================
# Socket Connection Management
# ============================================================================


@contextmanager
def daemon_socket_connection(
    socket_path: Path,
    timeout: float = DaemonTimeouts.CALL,
) -> Iterator[socket.socket]:
    """Context manager for daemon socket connections.

    Args:
        socket_path: Path to the Unix domain socket.
        timeout: Socket operation timeout in seconds.

    Yields:
        Connected socket ready for communication.

    Raises:
        ConnectionRefusedError: If daemon is not accepting connections.
        FileNotFoundError: If socket file doesn't exist.
        TimeoutError: If connection times out.
        OSError: For other socket-related errors.
    """
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.settimeout(timeout)
    try:
        sock.connect(str(socket_path))
        yield sock
    finally:
        with contextlib.suppress(OSError):
            sock.close()


class RemoteClient:
    """Synchronous facade over the daemon's remote-call surface.

    Use ``RemoteClient.connect`` to build one; it probes the daemon first so
    an unreachable daemon is reported before any command logic runs.
    """

    def __init__(self, socket_path: Path, call_timeout: float = DaemonTimeouts.CALL):
        self.socket_path = socket_path
        self.call_timeout = call_timeout
        self._ids = itertools.count(1)

    @classmethod
    def connect(
        cls,
        socket_path: Path,
        connect_timeout: float = DaemonTimeouts.CONNECT,
        call_timeout: float = DaemonTimeouts.CALL,
    ) -> "RemoteClient":
        """Create a client after confirming the daemon answers a health probe.

        Raises:
            DaemonUnavailableError: If the daemon cannot be reached or does
                not answer within ``connect_timeout``.
        """
        client = cls(socket_path, call_timeout=call_timeout)
        try:
            client._call("health", {}, timeout=connect_timeout)
        except RemoteCallError as e:
            raise DaemonUnavailableError(
                f"Failed to start remote client due to: {e.message}",
                hint=f"Is the supervisor daemon running on {socket_path}?",
            ) from e
        logger.debug("Connected to daemon at %s", socket_path)
        return client

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _call(self, method: str, params: dict[str, Any], timeout: float | None = None) -> Any:
        """Send one request and return its result.

        Raises:
            RemoteCallError: On socket, protocol, or daemon-reported errors.
        """
        request = Request(method=method, params=params, request_id=next(self._ids))
        logger.debug("-> %s %s", method, params)
        try:
            with daemon_socket_connection(
                self.socket_path, timeout=timeout or self.call_timeout
            ) as sock:
                send_message(sock, request)
                response = receive_message(sock, Response)
        except (ProtocolError, OSError) as e:
            raise RemoteCallError(
                f"Daemon communication failed: {e}", method=method
            ) from e

        if response.is_error():
            raise RemoteCallError(
                f"Daemon error: {response.error_message}",
                method=method,
                code=response.error_code,
            )
        logger.debug("<- %s ok", method)
        return response.result

    # ------------------------------------------------------------------
    # Daemon capabilities
    # ------------------------------------------------------------------

    def save_all(self) -> None:
        self._call("save", {})

    def start_from_source(
        self,
        source_path: str,
        name: str,
        keep_alive: bool,
        args: list[str],
        is_binary: bool,
    ) -> None:
        self._call(
            "start_from_source",
            {
                "source_path": source_path,
                "name": name,
                "keep_alive": keep_alive,
                "args": list(args),
                "binary": is_binary,
            },
        )

    def start_by_name(self, name: str) -> None:
        self._call("start", {"name": name})

    def restart_by_name(self, name: str) -> None:
        self._call("restart", {"name": name})

    def stop_by_name(self, name: str) -> None:
        self._call("stop", {"name": name})

    def delete_by_name(self, name: str) -> None:
        self._call("delete", {"name": name})

    def query_by_name(self, name: str) -> ProcessDetail | None:
        """Look up one process; the daemon answers null or {} for unknown names."""
        result = self._call("get_process", {"name": name})
        if not result:
            return None
        if not isinstance(result, dict):
            raise RemoteCallError(
                f"Unexpected process detail payload: {type(result).__name__}",
                method="get_process",
            )
        return ProcessDetail.from_dict(name, result)

    def query_all_status(self) -> ProcessSet:
        """Fetch a fresh snapshot of every process.

        Raises:
            RemoteCallError: If the call fails or the daemon answers anything
                but ``{"processes": [...]}``.
        """
        result = self._call("status", {})
        entries = result.get("processes") if isinstance(result, dict) else None
        if not isinstance(entries, list):
            raise RemoteCallError(
                "Unexpected status payload: expected an object with a 'processes' list,"
                f" got {json.dumps(result)[:80]}",
                method="status",
            )
        try:
            return ProcessSet.from_descriptors(
                ProcessDescriptor.from_dict(entry) for entry in entries
            )
        except (ValueError, AttributeError) as e:
            raise RemoteCallError(f"Invalid status payload: {e}", method="status") from e
