"""Configuration: settings and platform paths."""

from .paths import REGISTRY_APP_DIR, REGISTRY_FILENAME, registry_path_in, user_config_dir
from .settings import ConfigError, Settings

__all__ = [
    "ConfigError",
    "REGISTRY_APP_DIR",
    "REGISTRY_FILENAME",
    "Settings",
    "registry_path_in",
    "user_config_dir",
]
