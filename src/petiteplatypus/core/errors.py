"""Error taxonomy for vault generation.

Every failure raised by the builder, the identifier generator or the
registry updater is a subclass of :class:`PetitePlatypusError`. The
orchestrator wraps them once in :class:`VaultCreationError`, which names the
phase that failed.
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ConfigDirUnavailable",
    "DirectoryCreateError",
    "FileWriteError",
    "PathResolutionError",
    "PetitePlatypusError",
    "RandomnessUnavailable",
    "RegistryCorrupt",
    "RegistryError",
    "RegistryLockTimeout",
    "RegistryReadError",
    "RegistrySerializeError",
    "RegistryWriteError",
    "TemplateLoadError",
    "VaultCreationError",
]


class PetitePlatypusError(Exception):
    """Base class for all vault generation errors."""

    pass


class RandomnessUnavailable(PetitePlatypusError):
    """Raised when the cryptographic randomness source cannot be read."""

    pass


class PathResolutionError(PetitePlatypusError):
    """Raised when a vault path cannot be made absolute."""

    pass


class DirectoryCreateError(PetitePlatypusError):
    """Raised when a directory cannot be created."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"failed to create directory {self.path}: {reason}")


class TemplateLoadError(PetitePlatypusError):
    """Raised when a named template is missing or unreadable."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"failed to load template {name}: {reason}")


class FileWriteError(PetitePlatypusError):
    """Raised when a vault file cannot be written."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"failed to write {self.path.name}: {reason}")


class ConfigDirUnavailable(PetitePlatypusError):
    """Raised when the platform cannot supply a user configuration directory."""

    pass


class RegistryError(PetitePlatypusError):
    """Base class for failures of the global vault registry."""

    _prefix = "registry error at"

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self._prefix} {self.path}: {reason}")


class RegistryCorrupt(RegistryError):
    """Raised when an existing registry file is not a well-formed registry."""

    _prefix = "failed to parse existing config"


class RegistryReadError(RegistryError):
    """Raised when the registry file exists but cannot be read."""

    _prefix = "failed to read config file"


class RegistrySerializeError(RegistryError):
    """Raised when the in-memory registry cannot be serialized."""

    _prefix = "failed to marshal config for"


class RegistryWriteError(RegistryError):
    """Raised when the registry file cannot be written."""

    _prefix = "failed to write config file"


class RegistryLockTimeout(RegistryError):
    """Raised when the registry lock is held by another process for too long."""

    _prefix = "failed to lock config file"


class VaultCreationError(PetitePlatypusError):
    """Terminal failure of one vault creation, naming the failing phase.

    The underlying taxonomy error is available as ``cause`` and as the
    chained ``__cause__``.
    """

    def __init__(self, phase: str, cause: Exception) -> None:
        self.phase = phase
        self.cause = cause
        super().__init__(f"failed to {phase}: {cause}")
