"""Centralized timeout defaults for daemon and log operations.

All values are in seconds. Config values override the connection defaults;
these constants are what the built-in config and tests fall back to.
"""


class DaemonTimeouts:
    """Timeout defaults for talking to the supervisor daemon.

    Groups:
        CONNECT: Establishing the client session
        CALL: A single remote call
        LOG_*: Following log files
    """

    CONNECT: float = 5.0
    """Time allowed for the health probe made while constructing a client.

    If the daemon does not answer within this window the session cannot
    proceed at all.
    """

    CALL: float = 30.0
    """Time allowed for one remote call (connect, send, receive).

    Starting or deleting a process makes the daemon spawn or reap children,
    so this is much longer than the connect probe.
    """

    LOG_POLL_INTERVAL: float = 1.0
    """Longest a log follower sleeps without a filesystem event before
    rechecking its file anyway."""

    LOG_MISSING_FILE_INTERVAL: float = 1.0
    """Delay between checks for a log file that does not exist yet."""
