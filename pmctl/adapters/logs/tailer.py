"""Follow a single log file, surviving rotation and truncation.

Reads the file from its beginning and emits each complete line. A tailer
sleeps until it is woken by a filesystem event (see ``watcher``) or its
rescan interval passes, then reopens the path when its inode changed
(rotated and replaced) or rewinds when the file shrank below the read
position (truncated in place).
"""

import contextlib
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from pmctl.adapters.daemon.timeouts import DaemonTimeouts

logger = logging.getLogger(__name__)


def decode_line(raw: bytes) -> str:
    """Decode a log line, dropping the trailing newline."""
    return raw.decode("utf-8", errors="replace").rstrip("\r\n")


class FileTailer:
    """Emits lines appended to one file until its stop event is set.

    Attributes:
        path: File to follow.
        poll_interval: Longest sleep between wake-ups; the file is rechecked
            after it even when no event arrived.
    """

    def __init__(
        self,
        path: Path,
        emit: Callable[[str], None],
        poll_interval: float = DaemonTimeouts.LOG_POLL_INTERVAL,
        stop_event: threading.Event | None = None,
    ):
        self.path = path
        self.emit = emit
        self.poll_interval = poll_interval
        self.stop_event = stop_event or threading.Event()
        self._wake = threading.Event()
        self._handle: BinaryIO | None = None
        self._inode: int | None = None
        self._pending = b""

    def wake(self) -> None:
        """Recheck the file now instead of at the end of the current sleep."""
        self._wake.set()

    def stop(self) -> None:
        self.stop_event.set()
        self._wake.set()

    def _sleep(self, timeout: float) -> None:
        self._wake.wait(timeout)
        self._wake.clear()

    def _open(self) -> bool:
        """Open the file from the beginning; False if it does not exist yet.

        Raises:
            OSError: If the path exists but cannot be read as a file.
        """
        try:
            handle = self.path.open("rb")
        except FileNotFoundError:
            return False
        self._handle = handle
        self._inode = os.fstat(handle.fileno()).st_ino
        logger.debug("Opened %s (inode %s)", self.path, self._inode)
        return True

    def _close(self) -> None:
        if self._handle is not None:
            with contextlib.suppress(OSError):
                self._handle.close()
        self._handle = None
        self._inode = None

    def _drain(self) -> None:
        """Emit every complete line available; hold a trailing partial line."""
        assert self._handle is not None
        while True:
            raw = self._handle.readline()
            if not raw:
                return
            if not raw.endswith(b"\n"):
                self._pending += raw
                return
            self.emit(decode_line(self._pending + raw))
            self._pending = b""

    def _flush_pending(self) -> None:
        if self._pending:
            self.emit(decode_line(self._pending))
            self._pending = b""

    def _check_replaced(self) -> None:
        """Reopen after rotation or rewind after truncation."""
        assert self._handle is not None
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            # Rotated away and not yet replaced; keep the old handle.
            return
        if stat.st_ino != self._inode:
            logger.debug("%s was replaced, reopening", self.path)
            self._drain()
            # The old file will never get the rest of its last line.
            self._flush_pending()
            self._close()
            self._open()
        elif stat.st_size < self._handle.tell():
            logger.debug("%s was truncated, rewinding", self.path)
            self._handle.seek(0)
            self._pending = b""

    def follow(self) -> None:
        """Follow the file until the stop event is set.

        Blocks the calling thread; a missing file is waited for.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        try:
            while not self.stop_event.is_set():
                if self._handle is None and not self._open():
                    self._sleep(DaemonTimeouts.LOG_MISSING_FILE_INTERVAL)
                    continue
                self._check_replaced()
                if self._handle is not None:
                    self._drain()
                self._sleep(self.poll_interval)
        finally:
            self._close()
