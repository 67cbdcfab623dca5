"""Read or follow the split stdout/stderr logs the daemon writes per process.

Log files live at ``<home>/.pmgo/<name>/<name>.err`` and ``<name>.out``.
Reading never contacts the daemon.

Modes:
- not found: no per-process log directory; LogsNotFoundError, no reads.
- one-shot: print the stderr file, then the stdout file, then return.
- following: one worker thread per stream prints lines as they are appended,
  woken by a watchdog observer on the log directory; the caller blocks until
  every worker finishes, which happens when the session is ended from
  outside or a worker fails.

Lines from one stream keep their file order. Lines from different streams
are interleaved in whatever order the workers write them.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path

import click

from pmctl.adapters.daemon.timeouts import DaemonTimeouts
from pmctl.adapters.logs.tailer import FileTailer, decode_line
from pmctl.adapters.logs.watcher import watch_log_directory
from pmctl.domain.entities import LogFileReference
from pmctl.domain.exceptions import LogFollowError, LogsNotFoundError

logger = logging.getLogger(__name__)


class LogFollower:
    """Prints a process's log files once or follows them indefinitely.

    Args:
        home: Home directory the ``.pmgo`` tree lives under.
        emit: Line sink; called once per line, possibly from several threads.
        poll_interval: Longest a tailer sleeps without a filesystem event.
        stop_event: Ends a follow session when set. The CLI never sets it.
    """

    def __init__(
        self,
        home: Path,
        emit: Callable[[str], None] = click.echo,
        poll_interval: float = DaemonTimeouts.LOG_POLL_INTERVAL,
        stop_event: threading.Event | None = None,
    ):
        self.home = home
        self.emit = emit
        self.poll_interval = poll_interval
        self.stop_event = stop_event or threading.Event()

    def log_files(self, name: str) -> list[LogFileReference]:
        """Log file references for ``name``, stderr first."""
        return LogFileReference.for_process(self.home, name)

    def logs(self, name: str, follow: bool = False) -> None:
        """Print the logs of ``name``, following them if requested.

        Raises:
            LogsNotFoundError: If the process has no log directory, or a log
                file is missing in one-shot mode.
            LogFollowError: If a stream fails while following.
        """
        log_dir = LogFileReference.log_dir(self.home, name)
        if not log_dir.is_dir():
            raise LogsNotFoundError(name, str(log_dir))
        if follow:
            self.follow(name)
        else:
            self.read(name)

    def read(self, name: str) -> None:
        """Print each stream file fully, stderr then stdout."""
        for ref in self.log_files(name):
            path = ref.path
            if not path.is_file():
                raise LogsNotFoundError(name, str(path))
            with path.open("rb") as f:
                for raw in f:
                    self.emit(decode_line(raw))

    def follow(self, name: str) -> None:
        """Follow both stream files, one worker each, and join them.

        Raises:
            LogFollowError: If a stream could not be followed; the other
                stream is stopped as well.
        """
        refs = self.log_files(name)
        tailers = [
            FileTailer(
                ref.path,
                self.emit,
                poll_interval=self.poll_interval,
                stop_event=self.stop_event,
            )
            for ref in refs
        ]
        failures: list[tuple[FileTailer, Exception]] = []

        def run(tailer: FileTailer) -> None:
            try:
                tailer.follow()
            except Exception as e:
                logger.debug("Following %s failed: %s", tailer.path, e)
                failures.append((tailer, e))
                for other in tailers:
                    other.stop()

        workers = [
            threading.Thread(
                target=run,
                args=(tailer,),
                name=f"tail-{name}-{ref.stream.value}",
                daemon=True,
            )
            for tailer, ref in zip(tailers, refs)
        ]

        observer = watch_log_directory(LogFileReference.log_dir(self.home, name), tailers)
        try:
            for worker in workers:
                worker.start()
            logger.debug("Following %d log stream(s) for %s", len(workers), name)
            for worker in workers:
                worker.join()
        finally:
            observer.stop()
            observer.join()

        if failures:
            tailer, error = failures[0]
            raise LogFollowError(name, str(tailer.path), error) from error
