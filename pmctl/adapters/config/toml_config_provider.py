"""TOML-based configuration provider.

Config loading priority (highest to lowest):
1. Command-line overrides (applied by the CLI)
2. Global: ~/.config/pmctl/config.toml
3. Built-in defaults
"""

import logging
from pathlib import Path

from pmctl.domain.config import PmctlConfig
from pmctl.shared.config_io import get_global_config_path, load_config

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from a TOML file.

    A missing file yields the defaults. An unreadable or invalid file is
    reported as a warning and the defaults are used instead.
    """

    def __init__(self, path: Path | None = None):
        self.path = path

    def load(self) -> PmctlConfig:
        path = self.path or get_global_config_path()
        if not path.exists():
            logger.debug("No config at %s, using defaults", path)
            return PmctlConfig.default()

        try:
            config = load_config(path)
            logger.debug("Loaded config from %s", path)
        except (OSError, ValueError) as e:
            logger.warning(
                "Failed to parse config at %s: %s. Using default configuration.",
                path,
                e,
            )
            return PmctlConfig.default()
        return config
