"""Configuration for petiteplatypus.

Loads configuration from the environment, optionally seeded from a ``.env``
file, and provides typed access to settings. Every setting has a default, so
a fresh checkout runs without any configuration.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import PetitePlatypusError

__all__ = [
    "ConfigError",
    "ENV_PREFIX",
    "Settings",
    "load_env_file",
]

ENV_PREFIX = "PETITEPLATYPUS_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class ConfigError(PetitePlatypusError):
    """Raised when configuration is invalid."""

    pass


@dataclass
class Settings:
    """Centralized settings.

    Attributes
    ----------
    log_level : str | None
        Explicit log level; overrides the ``-v`` count when set
    log_file : Path | None
        JSON lines log file
    config_dir : Path | None
        Override of the platform user configuration directory
    templates_dir : Path | None
        Directory of custom templates instead of the packaged ones
    registry_lock : bool
        Take an advisory lock around registry updates
    lock_timeout : float
        Seconds to wait for the registry lock
    """

    log_level: str | None = None
    log_file: Path | None = None
    config_dir: Path | None = None
    templates_dir: Path | None = None
    registry_lock: bool = True
    lock_timeout: float = 10.0

    def __post_init__(self):
        """Validate settings after initialization."""
        if isinstance(self.log_file, str):
            self.log_file = Path(self.log_file)
        if isinstance(self.config_dir, str):
            self.config_dir = Path(self.config_dir)
        if isinstance(self.templates_dir, str):
            self.templates_dir = Path(self.templates_dir)

        if self.log_level is not None:
            self.log_level = self.log_level.upper()
            if self.log_level not in _LOG_LEVELS:
                raise ConfigError(
                    f"{ENV_PREFIX}LOG_LEVEL must be one of {', '.join(sorted(_LOG_LEVELS))}, "
                    f"got {self.log_level!r}"
                )

        if self.config_dir is not None and not self.config_dir.is_absolute():
            raise ConfigError(f"{ENV_PREFIX}CONFIG_DIR must be an absolute path, got {str(self.config_dir)!r}")

        if not math.isfinite(self.lock_timeout) or self.lock_timeout < 0:
            raise ConfigError(
                f"{ENV_PREFIX}LOCK_TIMEOUT must be a finite, non-negative number, got {self.lock_timeout}"
            )

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, otherwise from os.environ only.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Raises
        ------
        ConfigError
            If settings are invalid
        """
        env_file = Path(env_file) if env_file is not None else Path(".env")

        if env_file.exists():
            load_env_file(env_file)

        try:
            return cls(
                log_level=_env("LOG_LEVEL"),
                log_file=_env_path("LOG_FILE"),
                config_dir=_env_path("CONFIG_DIR"),
                templates_dir=_env_path("TEMPLATES_DIR"),
                registry_lock=_env_bool("REGISTRY_LOCK", True),
                lock_timeout=float(_env("LOCK_TIMEOUT") or "10.0"),
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


def _env(name: str) -> str | None:
    value = os.environ.get(ENV_PREFIX + name, "").strip()
    return value or None


def _env_path(name: str) -> Path | None:
    value = _env(name)
    return Path(value).expanduser() if value else None


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    if value.lower() in _TRUE_VALUES:
        return True
    if value.lower() in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Variables already present in the environment are not overridden.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ.setdefault(key, value)
