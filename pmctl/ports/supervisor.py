"""Port interface for the supervisor daemon.

Defines the synchronous facade the command dispatcher drives. One method per
daemon capability; implementations perform no retries and no caching.
"""

from typing import Protocol

from pmctl.domain.entities import ProcessDetail, ProcessSet


class SupervisorClient(Protocol):
    """Protocol for issuing lifecycle commands to the supervisor daemon.

    Every method raises RemoteCallError when the remote call fails.
    """

    def save_all(self) -> None:
        """Persist the daemon's current process list."""
        ...

    def start_from_source(
        self,
        source_path: str,
        name: str,
        keep_alive: bool,
        args: list[str],
        is_binary: bool,
    ) -> None:
        """Register a new process from a source path (or binary) and start it."""
        ...

    def start_by_name(self, name: str) -> None:
        """Start an already registered process."""
        ...

    def restart_by_name(self, name: str) -> None:
        """Restart a registered process."""
        ...

    def stop_by_name(self, name: str) -> None:
        """Stop a registered process."""
        ...

    def delete_by_name(self, name: str) -> None:
        """Stop a process and remove it and its bookkeeping permanently."""
        ...

    def query_by_name(self, name: str) -> ProcessDetail | None:
        """Look up one process.

        Returns:
            The process detail, or None if the daemon does not know the name.
        """
        ...

    def query_all_status(self) -> ProcessSet:
        """Fetch a fresh snapshot of every supervised process."""
        ...
