"""Domain entities for pmctl.

Read-only views of the state the supervisor daemon reports about the
processes it manages, plus the local log file references derived from a
process name. The client never mutates these; it only reads and renders them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

LOG_ROOT_DIRNAME = ".pmgo"


class ProcessStatus(str, Enum):
    """Lifecycle status of a supervised process as reported by the daemon."""

    RUNNING = "running"
    STOPPED = "stopped"
    ERRORED = "errored"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> ProcessStatus:
        """Parse a daemon status string, mapping anything unrecognized to UNKNOWN."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNKNOWN


@dataclass(frozen=True)
class ProcessDescriptor:
    """Status of one supervised process in a snapshot.

    Attributes:
        name: Unique process name.
        pid: Process id, 0 when the process is not running.
        status: Lifecycle status.
        uptime: Elapsed time since the last start, as reported by the daemon.
        restarts: Number of restarts performed by the daemon.
        cpu_percent: CPU usage percentage.
        memory_bytes: Resident memory in bytes.
    """

    name: str
    pid: int = 0
    status: ProcessStatus = ProcessStatus.UNKNOWN
    uptime: str = ""
    restarts: int = 0
    cpu_percent: float = 0.0
    memory_bytes: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Process name cannot be empty")
        if self.restarts < 0:
            raise ValueError(f"restarts cannot be negative, got {self.restarts}")

    @property
    def is_running(self) -> bool:
        return self.status is ProcessStatus.RUNNING

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProcessDescriptor:
        """Build a descriptor from the daemon's JSON representation.

        Missing numeric fields default to zero; ``pid`` may be null for
        processes that are not running.

        Raises:
            ValueError: If the name is missing or a field has the wrong type.
        """
        try:
            return cls(
                name=str(data["name"]),
                pid=int(data.get("pid") or 0),
                status=ProcessStatus.parse(data.get("status")),
                uptime=str(data.get("uptime") or ""),
                restarts=int(data.get("restarts") or 0),
                cpu_percent=float(data.get("cpu_percent") or 0.0),
                memory_bytes=int(data.get("memory_bytes") or 0),
            )
        except KeyError as e:
            raise ValueError(f"Process descriptor missing field: {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid process descriptor: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "pid": self.pid,
            "status": self.status.value,
            "uptime": self.uptime,
            "restarts": self.restarts,
            "cpu_percent": self.cpu_percent,
            "memory_bytes": self.memory_bytes,
        }


@dataclass(frozen=True)
class ProcessSet:
    """Point-in-time snapshot of every supervised process, keyed by name.

    Iteration yields descriptors in the order the daemon reported them.
    Snapshots are never cached; each command fetches a fresh one.
    """

    processes: dict[str, ProcessDescriptor] = field(default_factory=dict)

    @classmethod
    def from_descriptors(cls, descriptors: Iterable[ProcessDescriptor]) -> ProcessSet:
        """Build a snapshot, rejecting duplicate names.

        Raises:
            ValueError: If two descriptors share a name.
        """
        processes: dict[str, ProcessDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in processes:
                raise ValueError(f"Duplicate process name in snapshot: {descriptor.name}")
            processes[descriptor.name] = descriptor
        return cls(processes=processes)

    def __len__(self) -> int:
        return len(self.processes)

    def __iter__(self) -> Iterator[ProcessDescriptor]:
        return iter(self.processes.values())

    def names(self) -> list[str]:
        return list(self.processes)

    def is_empty(self) -> bool:
        return not self.processes


@dataclass(frozen=True)
class ProcessDetail:
    """Full description of one process as field name to display string.

    A found process may have an empty ``fields`` mapping; absence is expressed
    by the lookup returning None, never by an empty detail.
    """

    name: str
    fields: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> ProcessDetail:
        return cls(name=name, fields={str(k): _display(v) for k, v in data.items()})

    def items(self) -> list[tuple[str, str]]:
        """Field pairs sorted by field name."""
        return sorted(self.fields.items())


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return " ".join(_display(v) for v in value)
    return str(value)


class LogStream(str, Enum):
    """Output stream of a supervised process; the value is the file suffix."""

    STDERR = "err"
    STDOUT = "out"

    @classmethod
    def reading_order(cls) -> tuple[LogStream, LogStream]:
        """Streams in the order one-shot reads print them."""
        return (cls.STDERR, cls.STDOUT)


@dataclass(frozen=True)
class LogFileReference:
    """Location of one stream's log file for a process.

    Resolves to ``<home>/.pmgo/<name>/<name>.<err|out>``. Recomputed per
    invocation and never persisted.
    """

    home: Path
    process_name: str
    stream: LogStream

    @staticmethod
    def log_dir(home: Path, process_name: str) -> Path:
        return home / LOG_ROOT_DIRNAME / process_name

    @property
    def path(self) -> Path:
        return self.log_dir(self.home, self.process_name) / f"{self.process_name}.{self.stream.value}"

    @classmethod
    def for_process(cls, home: Path, process_name: str) -> list[LogFileReference]:
        """References for both streams, stderr first."""
        return [cls(home, process_name, stream) for stream in LogStream.reading_order()]
