"""Vault creation orchestrator.

Runs the phases of one vault creation in order::

    resolve path -> create vault directory -> create config directory
    -> generate vault ID -> write config files -> write initial files
    -> update global config

The first failing phase aborts the run with a :class:`VaultCreationError`
naming it. Nothing created by earlier phases is removed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TypeVar

from ..config.paths import ConfigDirProvider
from ..observability.loguru_config import get_logger, timing_context
from .errors import PetitePlatypusError, VaultCreationError
from .ids import RandomBytes, generate_vault_id
from .registry import register_vault
from .templates import TemplateSource, get_default_template_source
from .time import Clock
from .vault_init import (
    CONFIG_DIR_NAME,
    ensure_directory,
    resolve_vault_path,
    write_config_files,
    write_initial_files,
)

__all__ = [
    "PHASES",
    "VaultCreationResult",
    "create_vault",
]

T = TypeVar("T")

PHASES = (
    "get absolute path",
    "create vault directory",
    f"create {CONFIG_DIR_NAME} directory",
    "generate vault ID",
    "create obsidian config files",
    "create initial files",
    "update global config",
)

logger = get_logger("generator")


@dataclass(frozen=True)
class VaultCreationResult:
    """Outcome of a successful vault creation."""

    absolute_path: Path
    vault_id: str


def _run_phase(phase: str, step: Callable[[], T]) -> T:
    logger.info("Starting phase: {}", phase)
    try:
        with timing_context(phase, component="generator"):
            result = step()
    except PetitePlatypusError as exc:
        logger.debug("Phase failed: {}: {}", phase, exc)
        raise VaultCreationError(phase, exc) from exc
    logger.debug("Phase completed: {}", phase)
    return result


def create_vault(
    vault_path: Path | str,
    *,
    templates: TemplateSource | None = None,
    registry_path: Path | None = None,
    config_dir: Path | ConfigDirProvider | None = None,
    random_bytes: RandomBytes | None = None,
    clock: Clock | None = None,
    use_lock: bool = True,
    lock_timeout: float = 10.0,
) -> VaultCreationResult:
    """Create a vault on disk and register it in the global registry.

    Parameters
    ----------
    vault_path
        Target directory (relative paths resolve against the working directory)
    templates
        Template source (default: packaged templates)
    registry_path
        Explicit registry file location
    config_dir
        User configuration directory or provider holding the registry
    random_bytes
        Randomness source for the vault ID
    clock
        Source of the registration time
    use_lock
        Lock the registry during its update
    lock_timeout
        Seconds to wait for the registry lock

    Returns
    -------
    VaultCreationResult
        Absolute vault path and the new vault ID

    Raises
    ------
    VaultCreationError
        Naming the failing phase; ``__cause__`` is the underlying error
    """
    if templates is None:
        templates = get_default_template_source()
    logger.info("Starting vault generation for path: {}", vault_path)

    (
        resolve_phase,
        root_phase,
        config_phase,
        id_phase,
        config_files_phase,
        initial_files_phase,
        registry_phase,
    ) = PHASES

    vault_root = _run_phase(resolve_phase, lambda: resolve_vault_path(vault_path))
    _run_phase(root_phase, lambda: ensure_directory(vault_root))
    config_path = _run_phase(config_phase, lambda: ensure_directory(vault_root / CONFIG_DIR_NAME))
    vault_id = _run_phase(id_phase, lambda: generate_vault_id(random_bytes))
    logger.info("Generated vault ID: {}", vault_id)
    _run_phase(config_files_phase, lambda: write_config_files(config_path, templates))
    _run_phase(initial_files_phase, lambda: write_initial_files(vault_root, templates))
    _run_phase(
        registry_phase,
        lambda: register_vault(
            vault_root,
            vault_id,
            registry_path=registry_path,
            config_dir=config_dir,
            clock=clock,
            use_lock=use_lock,
            lock_timeout=lock_timeout,
        ),
    )

    logger.info("Vault generation completed successfully")
    return VaultCreationResult(absolute_path=vault_root, vault_id=vault_id)
