"""Process-control command dispatcher.

Translates each operator command into an optional existence check, one call
to the supervisor client, and a severity classification of the result.

Severity policy:
- FATAL: the remote call failed for a command whose outcome the operator
  can no longer reason about; raised as FatalCommandError so the whole
  invocation aborts.
- ERROR: the command aborted locally (unknown name for restart/delete/info,
  or a failed start-by-name); reported, session continues.
- WARNING: nothing to do (stop on an unknown name, delete-all on an empty
  snapshot).
- INFO: success.

Existence checks always precede restart, stop and delete so that an unknown
name is never forwarded to the daemon.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pmctl.domain.entities import ProcessDetail, ProcessSet
from pmctl.domain.exceptions import FatalCommandError, RemoteCallError
from pmctl.ports.supervisor import SupervisorClient

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """How a command outcome should be reported."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


@dataclass(frozen=True)
class CommandOutcome:
    """Result of dispatching one operator command.

    Attributes:
        command: Command name (e.g., "restart").
        severity: Classification of the outcome.
        message: Human-readable report.
        payload: ProcessSet or ProcessDetail for read-only commands.
        items: Per-process outcomes for delete-all, in snapshot order.
    """

    command: str
    severity: Severity
    message: str
    payload: Any = None
    items: tuple["CommandOutcome", ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.severity is Severity.INFO


def _not_found(name: str) -> str:
    return f"process {name} not found"


class CommandDispatcher:
    """Runs operator commands against a SupervisorClient.

    Every method returns a CommandOutcome, except where the outcome is fatal,
    in which case FatalCommandError is raised with the outcome attached.
    """

    def __init__(self, client: SupervisorClient):
        self.client = client

    def _fatal(self, command: str, action: str, error: RemoteCallError) -> FatalCommandError:
        outcome = CommandOutcome(
            command=command,
            severity=Severity.FATAL,
            message=f"Failed to {action} due to: {error.message}",
        )
        logger.debug("%s failed fatally: %s", command, error)
        return FatalCommandError(outcome, hint=error.hint)

    def _lookup(self, command: str, name: str) -> ProcessDetail | None:
        try:
            return self.client.query_by_name(name)
        except RemoteCallError as e:
            raise self._fatal(command, f"look up process {name}", e) from e

    def save(self) -> CommandOutcome:
        """Persist the daemon's current process list."""
        try:
            self.client.save_all()
        except RemoteCallError as e:
            raise self._fatal("save", "save list of processes", e) from e
        return CommandOutcome("save", Severity.INFO, "Saved process list")

    def start_from_source(
        self,
        source_path: str,
        name: str,
        keep_alive: bool = False,
        args: list[str] | None = None,
        is_binary: bool = False,
    ) -> CommandOutcome:
        """Register a new process from ``source_path`` and start it."""
        try:
            self.client.start_from_source(
                source_path, name, keep_alive, list(args or []), is_binary
            )
        except RemoteCallError as e:
            raise self._fatal("start", "start go bin", e) from e
        return CommandOutcome("start", Severity.INFO, f"Started process {name}")

    def restart(self, name: str) -> CommandOutcome:
        if self._lookup("restart", name) is None:
            return CommandOutcome("restart", Severity.ERROR, _not_found(name))
        try:
            self.client.restart_by_name(name)
        except RemoteCallError as e:
            raise self._fatal("restart", "restart process", e) from e
        return CommandOutcome("restart", Severity.INFO, f"Restarted process {name}")

    def start(self, name: str) -> CommandOutcome:
        """Start a registered process; the daemon decides whether the name exists."""
        try:
            self.client.start_by_name(name)
        except RemoteCallError as e:
            return CommandOutcome(
                "start", Severity.ERROR, f"Failed to start process due to: {e.message}"
            )
        return CommandOutcome("start", Severity.INFO, f"Started process {name}")

    def stop(self, name: str) -> CommandOutcome:
        if self._lookup("stop", name) is None:
            return CommandOutcome("stop", Severity.WARNING, _not_found(name))
        try:
            self.client.stop_by_name(name)
        except RemoteCallError as e:
            raise self._fatal("stop", "stop process", e) from e
        return CommandOutcome("stop", Severity.INFO, f"Stopped process {name}")

    def delete(self, name: str) -> CommandOutcome:
        if self._lookup("delete", name) is None:
            return CommandOutcome("delete", Severity.ERROR, _not_found(name))
        try:
            self.client.delete_by_name(name)
        except RemoteCallError as e:
            raise self._fatal("delete", "delete process", e) from e
        return CommandOutcome("delete", Severity.INFO, f"Deleted process {name}")

    def status(self) -> CommandOutcome:
        """Fetch a fresh snapshot; the ProcessSet is the outcome's payload."""
        snapshot = self._snapshot("status")
        return CommandOutcome(
            "status", Severity.INFO, f"{len(snapshot)} process(es)", payload=snapshot
        )

    def info(self, name: str) -> CommandOutcome:
        """Look up one process; the ProcessDetail is the outcome's payload."""
        detail = self._lookup("info", name)
        if detail is None:
            return CommandOutcome("info", Severity.ERROR, _not_found(name))
        return CommandOutcome("info", Severity.INFO, f"Process {name}", payload=detail)

    def delete_all(self) -> CommandOutcome:
        """Delete every process in a fresh snapshot, one by one.

        Best effort: a failed delete is recorded and the remaining processes
        are still attempted. Only a failed snapshot fetch is fatal.
        """
        snapshot = self._snapshot("delete-all")
        if snapshot.is_empty():
            return CommandOutcome(
                "delete-all", Severity.WARNING, "No processes found, nothing to delete"
            )
        logger.debug("Deleting %s", ", ".join(snapshot.names()))

        items: list[CommandOutcome] = []
        for descriptor in snapshot:
            try:
                self.client.delete_by_name(descriptor.name)
            except RemoteCallError as e:
                logger.debug("delete %s failed: %s", descriptor.name, e)
                items.append(
                    CommandOutcome(
                        "delete",
                        Severity.ERROR,
                        f"Failed to delete process {descriptor.name} due to: {e.message}",
                    )
                )
                continue
            items.append(
                CommandOutcome("delete", Severity.INFO, f"proc: {descriptor.name} has quit")
            )

        failed = sum(1 for item in items if not item.ok)
        if failed:
            return CommandOutcome(
                "delete-all",
                Severity.ERROR,
                f"Deleted {len(items) - failed} of {len(items)} process(es), {failed} failed",
                items=tuple(items),
            )
        return CommandOutcome(
            "delete-all",
            Severity.INFO,
            f"Deleted {len(items)} process(es)",
            items=tuple(items),
        )

    def _snapshot(self, command: str) -> ProcessSet:
        try:
            return self.client.query_all_status()
        except RemoteCallError as e:
            raise self._fatal(command, "get status", e) from e
