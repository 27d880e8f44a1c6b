"""petiteplatypus - scaffold Obsidian vaults and register them globally."""

from .core.errors import (
    ConfigDirUnavailable,
    DirectoryCreateError,
    FileWriteError,
    PathResolutionError,
    PetitePlatypusError,
    RandomnessUnavailable,
    RegistryCorrupt,
    RegistryLockTimeout,
    RegistryReadError,
    RegistrySerializeError,
    RegistryWriteError,
    TemplateLoadError,
    VaultCreationError,
)
from .core.generator import VaultCreationResult, create_vault
from .core.ids import generate_vault_id
from .core.registry import Registry, VaultRecord, list_vaults, load_registry, register_vault

__version__ = "0.1.0"

__all__ = [
    "ConfigDirUnavailable",
    "DirectoryCreateError",
    "FileWriteError",
    "PathResolutionError",
    "PetitePlatypusError",
    "RandomnessUnavailable",
    "Registry",
    "RegistryCorrupt",
    "RegistryLockTimeout",
    "RegistryReadError",
    "RegistrySerializeError",
    "RegistryWriteError",
    "TemplateLoadError",
    "VaultCreationError",
    "VaultCreationResult",
    "VaultRecord",
    "__version__",
    "create_vault",
    "generate_vault_id",
    "list_vaults",
    "load_registry",
    "register_vault",
]
