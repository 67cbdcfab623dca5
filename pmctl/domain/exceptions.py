"""Domain exceptions for pmctl.

These exceptions describe failures of the control client itself: the daemon
could not be reached, a remote call failed, a command had to be aborted, a
process has no logs on the local filesystem, or following them failed. They
are caught at the CLI boundary and converted to user-facing messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pmctl.core.dispatcher import CommandOutcome


class PmctlError(Exception):
    """Base exception for all pmctl errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class DaemonUnavailableError(PmctlError):
    """Raised when the daemon cannot be reached while constructing a client."""

    pass


class RemoteCallError(PmctlError):
    """Raised when a single remote call to the daemon fails.

    Attributes:
        method: Remote method that failed.
        code: Error code reported by the daemon, if any.
    """

    def __init__(
        self,
        message: str,
        method: str,
        code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.method = method
        self.code = code


class FatalCommandError(PmctlError):
    """Raised when a command outcome must abort the whole invocation."""

    def __init__(self, outcome: CommandOutcome, hint: str | None = None) -> None:
        super().__init__(outcome.message, hint=hint)
        self.outcome = outcome


class LogsNotFoundError(PmctlError):
    """Raised when a process has no log directory or log file locally."""

    def __init__(self, name: str, path: str | None = None) -> None:
        super().__init__(
            f"Process {name} logs not found",
            hint=f"Expected logs under {path}" if path else None,
        )
        self.name = name
        self.path = path


class LogFollowError(PmctlError):
    """Raised when following a process's logs stops because a stream failed."""

    def __init__(self, name: str, path: str, cause: Exception) -> None:
        super().__init__(
            f"Failed to follow {path} due to: {cause}",
            hint=f"Check that the logs of {name} are readable files",
        )
        self.name = name
        self.path = path
        self.cause = cause
