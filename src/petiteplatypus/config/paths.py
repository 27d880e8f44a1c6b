"""Platform per-user configuration directory lookup.

Follows the usual conventions:

- Linux and other Unixes: ``$XDG_CONFIG_HOME`` if set, else ``$HOME/.config``
- macOS: ``$HOME/Library/Application Support``
- Windows: ``%APPDATA%``
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable, Mapping

from ..core.errors import ConfigDirUnavailable

__all__ = [
    "ConfigDirProvider",
    "REGISTRY_APP_DIR",
    "REGISTRY_FILENAME",
    "registry_path_in",
    "user_config_dir",
]

REGISTRY_APP_DIR = "obsidian"
REGISTRY_FILENAME = "obsidian.json"

ConfigDirProvider = Callable[[], Path]


def user_config_dir(
    *,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the platform's per-user configuration directory.

    Parameters
    ----------
    platform
        ``sys.platform`` value to use (default: the running platform)
    environ
        Environment to read (default: ``os.environ``)

    Raises
    ------
    ConfigDirUnavailable
        If the required environment variables are missing or not absolute
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    if platform.startswith("win"):
        appdata = environ.get("APPDATA", "")
        if not appdata:
            raise ConfigDirUnavailable("%AppData% is not defined")
        return Path(appdata)

    if platform == "darwin":
        home = environ.get("HOME", "")
        if not home:
            raise ConfigDirUnavailable("$HOME is not defined")
        return Path(home) / "Library" / "Application Support"

    xdg = environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        if not os.path.isabs(xdg):
            raise ConfigDirUnavailable("path in $XDG_CONFIG_HOME is relative")
        return Path(xdg)

    home = environ.get("HOME", "")
    if not home:
        raise ConfigDirUnavailable("neither $XDG_CONFIG_HOME nor $HOME are defined")
    return Path(home) / ".config"


def registry_path_in(config_dir: Path) -> Path:
    """Return the registry file location inside a user configuration directory."""
    return config_dir / REGISTRY_APP_DIR / REGISTRY_FILENAME
