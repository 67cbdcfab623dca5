"""Filesystem event watching for followed log files.

A watchdog Observer on a process's log directory wakes the tailer of the
file an event names, so appends are picked up as soon as they are written.
Rotation shows up as moved, deleted and created events on the same path.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from pmctl.adapters.logs.tailer import FileTailer

logger = logging.getLogger(__name__)


class LogDirectoryHandler(FileSystemEventHandler):
    """Routes events in one log directory to the tailers of the files involved."""

    def __init__(self, tailers: Iterable[FileTailer]):
        self._tailers = {Path(t.path): t for t in tailers}

    def _wake(self, *paths: str | bytes) -> None:
        for raw in paths:
            if not raw:
                continue
            tailer = self._tailers.get(Path(os.fsdecode(raw)))
            if tailer is not None:
                tailer.wake()

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._wake(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._wake(event.src_path)

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        # Rotated away (src) or a new file renamed into place (dest).
        self._wake(event.src_path, event.dest_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._wake(event.src_path)


def watch_log_directory(directory: Path, tailers: Iterable[FileTailer]) -> BaseObserver:
    """Start an observer on ``directory`` that wakes ``tailers``.

    The caller stops and joins the returned observer.
    """
    observer = Observer()
    observer.schedule(LogDirectoryHandler(tailers), str(directory), recursive=False)
    observer.start()
    logger.debug("Watching %s for log changes", directory)
    return observer
