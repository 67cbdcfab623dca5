"""CLI error handling with actionable hints.

Provides consistent error formatting for all pmctl commands.
"""

from typing import NoReturn

import click


class PmctlCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise PmctlCliError(
            "Failed to start remote client",
            hint="Is the supervisor daemon running?",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def config_exists_error(path: str) -> NoReturn:
    """Raise error when a config file would be overwritten.

    Raises:
        PmctlCliError: Always raises with --force hint.
    """
    raise PmctlCliError(
        f"Config file already exists: {path}",
        hint="Use 'pmctl config init --force' to overwrite it",
    )


def invalid_start_arguments_error() -> NoReturn:
    """Raise error when start-from-source options are given without a name.

    Raises:
        PmctlCliError: Always raises with usage hint.
    """
    raise PmctlCliError(
        "--keep-alive, --bin and extra arguments require a source and a name",
        hint="Use 'pmctl start <source> <name> [ARGS...]' to start from source",
    )
