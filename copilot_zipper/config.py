# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Zipper configuration."""

import os
import tempfile
from dataclasses import dataclass

from .exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_IGNORE_FILE = ".zipperignore"


def _env_bool(value: str | None, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ZipperConfig:
    """Configuration shared by the manager, handlers and CLI."""

    insecure: bool = False
    """Disable TLS certificate verification for HTTP and git over HTTPS."""

    temp_dir: str | None = None
    """Directory for temporary archives and working trees (system default if None)."""

    ignore_file: str = DEFAULT_IGNORE_FILE
    """Name of the ignore file read from the root of local directories."""

    git_binary: str = "git"
    """Executable used for repository sources."""

    log_level: str = "INFO"
    """Logging level for the command-line front end."""

    def __post_init__(self):
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}. Must be one of {list(LOG_LEVELS)}"
            )
        if self.temp_dir is not None and not os.path.isdir(self.temp_dir):
            raise ConfigurationError(f"Temporary directory does not exist: {self.temp_dir}")

    @property
    def effective_temp_dir(self) -> str:
        """Directory actually used for temporary files."""
        return self.temp_dir or tempfile.gettempdir()

    @classmethod
    def from_env(cls) -> "ZipperConfig":
        """Load configuration from ``ZIPPER_*`` environment variables."""
        return cls(
            insecure=_env_bool(os.getenv("ZIPPER_INSECURE")),
            temp_dir=os.getenv("ZIPPER_TEMP_DIR") or None,
            ignore_file=os.getenv("ZIPPER_IGNORE_FILE", DEFAULT_IGNORE_FILE),
            git_binary=os.getenv("ZIPPER_GIT_BINARY", "git"),
            log_level=os.getenv("ZIPPER_LOG_LEVEL", "INFO"),
        )
