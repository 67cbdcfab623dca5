"""Config domain models for pmctl.

Configuration is stored in ~/.config/pmctl/config.toml and describes how to
reach the supervisor daemon, how long a log follower may sleep between file
checks, and how to render output. These dataclasses represent validated
configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal


@dataclass(frozen=True)
class DaemonConfig:
    """Configuration for reaching the supervisor daemon.

    Attributes:
        socket_path: Path to the daemon's Unix socket ("~" is expanded)
        connect_timeout: Seconds to wait for the daemon when creating a client
        call_timeout: Seconds to wait for any single remote call

    Raises:
        ValueError: If socket_path is empty or a timeout is not positive.
    """

    socket_path: str = "~/.pmgo/main.sock"
    connect_timeout: float = 5.0
    call_timeout: float = 30.0

    def __post_init__(self) -> None:
        """Validate daemon config after initialization."""
        if not self.socket_path:
            raise ValueError("socket_path cannot be empty")
        if self.connect_timeout <= 0:
            raise ValueError(
                f"connect_timeout must be positive, got {self.connect_timeout}"
            )
        if self.call_timeout <= 0:
            raise ValueError(f"call_timeout must be positive, got {self.call_timeout}")

    @property
    def resolved_socket_path(self) -> Path:
        return Path(self.socket_path).expanduser()


@dataclass(frozen=True)
class LogsConfig:
    """Configuration for reading process logs.

    Attributes:
        poll_interval: Longest a follower sleeps between filesystem events
            before rechecking its file
    """

    poll_interval: float = 1.0

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")


@dataclass(frozen=True)
class DisplayConfig:
    """Configuration for output display.

    Attributes:
        color: Color output mode - "auto" (default), "always", or "never"
    """

    color: Literal["auto", "always", "never"] = "auto"

    def __post_init__(self) -> None:
        if self.color not in ("auto", "always", "never"):
            raise ValueError(
                f"color must be one of 'auto', 'always', 'never', got {self.color!r}"
            )

    def color_flag(self) -> bool | None:
        """Value for click's ``color`` argument (None lets click auto-detect)."""
        if self.color == "always":
            return True
        if self.color == "never":
            return False
        return None


@dataclass(frozen=True)
class PmctlConfig:
    """Complete pmctl configuration.

    Attributes:
        daemon: Daemon connection configuration
        logs: Log reading configuration
        display: Display configuration
    """

    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    logs: LogsConfig = field(default_factory=LogsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @staticmethod
    def default() -> "PmctlConfig":
        """Create a config with all default values."""
        return PmctlConfig(
            daemon=DaemonConfig(),
            logs=LogsConfig(),
            display=DisplayConfig(),
        )

    @classmethod
    def from_partial(cls, base: "PmctlConfig", data: dict[str, Any]) -> "PmctlConfig":
        """Apply a partial config dictionary on top of an existing config.

        Sections and keys absent from ``data`` keep their values from ``base``.

        Raises:
            ValueError: If a section is not a table, a key is unknown, or a
                value fails validation.
        """
        sections: dict[str, Any] = {}
        for section_name, section_cls in (
            ("daemon", DaemonConfig),
            ("logs", LogsConfig),
            ("display", DisplayConfig),
        ):
            current = getattr(base, section_name)
            override = data.get(section_name, {})
            if not isinstance(override, dict):
                raise ValueError(f"[{section_name}] must be a table")
            merged = {**current.__dict__, **override}
            try:
                sections[section_name] = section_cls(**merged)
            except TypeError as e:
                raise ValueError(f"Invalid key in [{section_name}]: {e}") from e
        return cls(**sections)
