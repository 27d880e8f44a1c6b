"""Global vault registry (``obsidian.json``).

The registry is one JSON document per user, shared by every vault this tool
has created and by the note-taking application itself::

    {
      "vaults": {
        "<vault id>": {"path": "/abs/path", "ts": 1757173820641, "open": true}
      },
      "openSchemes": {"chrome-extension": true, "vscode": true}
    }

Registration is a read-modify-write of the whole file:

1. resolve the file location from the user configuration directory
2. make sure its directory exists
3. read and parse the current document (absent means empty; malformed
   means :class:`RegistryCorrupt`, and the file is left alone)
4. default missing ``vaults`` / ``openSchemes``
5. insert the new record (an existing ID is overwritten)
6. serialize and replace the file

Concurrency: by default steps 3-6 run under an exclusive advisory lock on
``obsidian.json.lock`` and the file is replaced atomically, so concurrent
runs of this tool never lose each other's records. Writers that ignore the
lock still race at file granularity. With ``use_lock=False`` the update is
plain last-writer-wins: two runs reading the same state each write back only
their own record.

Keys of the document that this module does not model are kept as read, at
the top level and inside each vault record.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..config.paths import ConfigDirProvider, registry_path_in, user_config_dir
from ..observability.loguru_config import get_logger
from ..storage.atomic import atomic_write_bytes
from ..storage.locks import FileLock, LockTimeoutError, NoOpLock, lock_path_for
from .errors import (
    ConfigDirUnavailable,
    RegistryCorrupt,
    RegistryLockTimeout,
    RegistryReadError,
    RegistrySerializeError,
    RegistryWriteError,
)
from .time import Clock, get_current_utc, to_epoch_millis
from .vault_init import ensure_directory

__all__ = [
    "DEFAULT_OPEN_SCHEMES",
    "Registry",
    "VaultRecord",
    "list_vaults",
    "load_registry",
    "parse_registry",
    "register_vault",
    "resolve_registry_path",
    "save_registry",
    "serialize_registry",
]

DEFAULT_OPEN_SCHEMES: dict[str, bool] = {
    "vscode": True,
    "chrome-extension": True,
}

logger = get_logger("registry")


@dataclass
class VaultRecord:
    """One registered vault.

    Attributes
    ----------
    path : str
        Absolute vault path
    ts : int
        Registration time in epoch milliseconds
    open : bool
        Whether the application opens the vault
    extra : dict[str, Any]
        Record keys not modelled here, preserved on rewrite
    """

    path: str
    ts: int
    open: bool = True
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "ts": self.ts, "open": self.open, **self.extra}


@dataclass
class Registry:
    """In-memory registry document.

    ``vaults`` and ``open_schemes`` are ``None`` when the document omitted
    them (or set them to null); :meth:`with_defaults` fills them in.
    """

    vaults: dict[str, VaultRecord] | None = None
    open_schemes: dict[str, bool] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def with_defaults(self) -> Registry:
        if self.vaults is None:
            logger.trace("Initializing empty vaults map")
            self.vaults = {}
        if self.open_schemes is None:
            logger.trace("Initializing default open schemes")
            self.open_schemes = dict(DEFAULT_OPEN_SCHEMES)
        return self

    def add_vault(self, vault_id: str, record: VaultRecord) -> None:
        """Insert a record, replacing any record with the same ID."""
        vaults = self.with_defaults().vaults
        vaults[vault_id] = record

    def to_dict(self) -> dict[str, Any]:
        # Map keys sorted, record fields in fixed order
        return {
            "vaults": (
                None
                if self.vaults is None
                else {vault_id: self.vaults[vault_id].to_dict() for vault_id in sorted(self.vaults)}
            ),
            "openSchemes": (
                None
                if self.open_schemes is None
                else {scheme: self.open_schemes[scheme] for scheme in sorted(self.open_schemes)}
            ),
            **self.extra,
        }


def _parse_record(path: Path, vault_id: str, raw: Any) -> VaultRecord:
    if not isinstance(raw, dict):
        raise RegistryCorrupt(path, f"vault {vault_id!r} is not an object")

    record_path = raw.get("path", "")
    ts = raw.get("ts", 0)
    is_open = raw.get("open", False)

    if record_path is None:
        record_path = ""
    if ts is None:
        ts = 0
    if is_open is None:
        is_open = False

    if not isinstance(record_path, str):
        raise RegistryCorrupt(path, f"vault {vault_id!r} has a non-string path")
    # bool is an int subclass; reject it explicitly
    if isinstance(ts, bool) or not isinstance(ts, int):
        raise RegistryCorrupt(path, f"vault {vault_id!r} has a non-integer ts")
    if not isinstance(is_open, bool):
        raise RegistryCorrupt(path, f"vault {vault_id!r} has a non-boolean open flag")

    extra = {key: value for key, value in raw.items() if key not in ("path", "ts", "open")}
    return VaultRecord(path=record_path, ts=ts, open=is_open, extra=extra)


def parse_registry(data: bytes, path: Path) -> Registry:
    """Parse registry bytes.

    Parameters
    ----------
    data
        Raw file content
    path
        File the bytes came from (for error messages)

    Raises
    ------
    RegistryCorrupt
        If the bytes are not a well-formed registry document
    """
    try:
        document = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise RegistryCorrupt(path, str(exc)) from exc

    if document is None:
        return Registry()
    if not isinstance(document, dict):
        raise RegistryCorrupt(path, f"expected a JSON object, got {type(document).__name__}")

    raw_vaults = document.get("vaults")
    raw_schemes = document.get("openSchemes")

    vaults: dict[str, VaultRecord] | None = None
    if raw_vaults is not None:
        if not isinstance(raw_vaults, dict):
            raise RegistryCorrupt(path, "'vaults' is not an object")
        vaults = {vault_id: _parse_record(path, vault_id, raw) for vault_id, raw in raw_vaults.items()}

    open_schemes: dict[str, bool] | None = None
    if raw_schemes is not None:
        if not isinstance(raw_schemes, dict):
            raise RegistryCorrupt(path, "'openSchemes' is not an object")
        if not all(isinstance(value, bool) for value in raw_schemes.values()):
            raise RegistryCorrupt(path, "'openSchemes' values must be booleans")
        open_schemes = dict(raw_schemes)

    extra = {key: value for key, value in document.items() if key not in ("vaults", "openSchemes")}
    return Registry(vaults=vaults, open_schemes=open_schemes, extra=extra)


def serialize_registry(registry: Registry, path: Path) -> bytes:
    """Serialize a registry to its canonical 2-space indented form.

    Raises
    ------
    RegistrySerializeError
        If the registry holds values JSON cannot represent
    """
    try:
        text = json.dumps(registry.to_dict(), indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise RegistrySerializeError(path, str(exc)) from exc
    return text.encode("utf-8")


def load_registry(path: Path) -> Registry:
    """Read the registry file, returning an empty registry if it does not exist.

    Raises
    ------
    RegistryCorrupt
        If the file exists but is malformed
    RegistryReadError
        If the file exists but cannot be read
    """
    logger.debug("Reading existing global config")
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.trace("No existing config file found, creating new one")
        return Registry()
    except OSError as exc:
        raise RegistryReadError(path, exc.strerror or str(exc)) from exc

    registry = parse_registry(data, path)
    logger.trace("Successfully parsed existing config with {} vaults", len(registry.vaults or {}))
    return registry


def save_registry(path: Path, registry: Registry, *, atomic: bool = True) -> None:
    """Serialize and write the registry, replacing the file.

    Raises
    ------
    RegistrySerializeError
        If serialization fails
    RegistryWriteError
        If the file cannot be written
    """
    data = serialize_registry(registry, path)

    logger.debug("Writing updated config to: {}", path)
    try:
        if atomic:
            try:
                mode = path.stat().st_mode & 0o777
            except FileNotFoundError:
                mode = 0o644
            atomic_write_bytes(path, data, mode=mode)
        else:
            path.write_bytes(data)
    except OSError as exc:
        raise RegistryWriteError(path, exc.strerror or str(exc)) from exc


def resolve_registry_path(
    *,
    registry_path: Path | None = None,
    config_dir: Path | ConfigDirProvider | None = None,
) -> Path:
    """Locate the registry file.

    Parameters
    ----------
    registry_path
        Explicit file location; wins over everything else
    config_dir
        User configuration directory, or a callable returning it
        (default: :func:`~petiteplatypus.config.paths.user_config_dir`)

    Raises
    ------
    ConfigDirUnavailable
        If no configuration directory can be determined
    """
    if registry_path is not None:
        return Path(registry_path)

    logger.debug("Getting user config directory")
    if config_dir is None:
        base = user_config_dir()
    elif callable(config_dir):
        try:
            base = config_dir()
        except ConfigDirUnavailable:
            raise
        except Exception as exc:
            raise ConfigDirUnavailable(f"failed to get user config directory: {exc}") from exc
    else:
        base = Path(config_dir)

    logger.debug("User config directory: {}", base)
    return registry_path_in(Path(base))


def register_vault(
    vault_path: Path | str,
    vault_id: str,
    *,
    registry_path: Path | None = None,
    config_dir: Path | ConfigDirProvider | None = None,
    clock: Clock | None = None,
    use_lock: bool = True,
    lock_timeout: float = 10.0,
) -> Registry:
    """Add a vault to the global registry.

    Parameters
    ----------
    vault_path
        Absolute vault path to record
    vault_id
        Key of the new record
    registry_path
        Explicit registry file location
    config_dir
        User configuration directory or provider (ignored with ``registry_path``)
    clock
        Source of the registration time (default: current UTC time)
    use_lock
        Serialize against other runs with an advisory lock and replace the
        file atomically; False overwrites in place, last writer wins
    lock_timeout
        Seconds to wait for the lock

    Returns
    -------
    Registry
        The registry as written

    Raises
    ------
    ConfigDirUnavailable, DirectoryCreateError, RegistryCorrupt,
    RegistryReadError, RegistrySerializeError, RegistryWriteError,
    RegistryLockTimeout
    """
    path = resolve_registry_path(registry_path=registry_path, config_dir=config_dir)
    # Write through a symlinked registry instead of replacing the link
    path = Path(os.path.realpath(path))
    logger.info("Global Obsidian config path: {}", path)

    logger.debug("Ensuring config directory exists: {}", path.parent)
    ensure_directory(path.parent)

    lock = FileLock(lock_path_for(path), timeout=lock_timeout) if use_lock else NoOpLock()
    try:
        with lock:
            registry = load_registry(path).with_defaults()

            record = VaultRecord(
                path=str(vault_path),
                ts=to_epoch_millis((clock or get_current_utc)()),
                open=True,
            )
            logger.debug("Adding new vault to config: {} -> {}", vault_id, record.path)
            registry.add_vault(vault_id, record)

            save_registry(path, registry, atomic=use_lock)
    except LockTimeoutError as exc:
        raise RegistryLockTimeout(path, str(exc)) from exc
    except OSError as exc:
        # Lock file could not be opened
        raise RegistryWriteError(path, exc.strerror or str(exc)) from exc

    logger.trace("Global config file written successfully")
    return registry


def list_vaults(
    *,
    registry_path: Path | None = None,
    config_dir: Path | ConfigDirProvider | None = None,
) -> dict[str, VaultRecord]:
    """Return the registered vaults, keyed by vault ID (empty if no registry exists)."""
    path = resolve_registry_path(registry_path=registry_path, config_dir=config_dir)
    return dict(load_registry(path).vaults or {})
