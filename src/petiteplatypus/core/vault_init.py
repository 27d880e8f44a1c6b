"""Vault directory scaffolding.

Creates the vault root, its hidden ``.obsidian`` configuration directory, the
configuration documents and the starter note. Content comes from a
:class:`~petiteplatypus.core.templates.TemplateSource`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from ..observability.loguru_config import get_logger
from .errors import DirectoryCreateError, FileWriteError, PathResolutionError
from .templates import CONFIG_TEMPLATES, INITIAL_TEMPLATES, TemplateSource

__all__ = [
    "CONFIG_DIR_NAME",
    "ensure_directory",
    "resolve_vault_path",
    "write_config_files",
    "write_initial_files",
    "write_template_files",
]

CONFIG_DIR_NAME = ".obsidian"

logger = get_logger("vault")


def resolve_vault_path(vault_path: Path | str) -> Path:
    """Return the absolute, normalized form of a vault path.

    Raises
    ------
    PathResolutionError
        If the path cannot be made absolute (e.g. the working directory is gone)
    """
    try:
        absolute = Path(os.path.abspath(os.fspath(vault_path)))
    except (OSError, TypeError, ValueError) as exc:
        raise PathResolutionError(f"failed to get absolute path for {vault_path!r}: {exc}") from exc

    logger.info("Absolute vault path: {}", absolute)
    return absolute


def ensure_directory(path: Path) -> Path:
    """Create a directory and its parents, tolerating an existing one.

    Raises
    ------
    DirectoryCreateError
        On permission or filesystem errors, or if ``path`` is a file
    """
    try:
        path.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreateError(path, exc.strerror or str(exc)) from exc
    return path


def write_template_files(target_dir: Path, names: Iterable[str], templates: TemplateSource) -> list[Path]:
    """Write named templates into ``target_dir``.

    Every template is loaded before the first file is written, so a missing
    template leaves the directory untouched. Existing files are overwritten.
    A failed write stops the loop; files written before it stay on disk.

    Returns
    -------
    list[Path]
        Paths written, in order

    Raises
    ------
    TemplateLoadError
        If any named template cannot be loaded
    FileWriteError
        If a file cannot be written
    """
    names = list(names)
    logger.debug("Loading {} templates for {}", len(names), target_dir)
    contents = []
    for name in names:
        logger.trace("Loading template for: {}", name)
        contents.append((name, templates.load(name)))

    written: list[Path] = []
    for name, content in contents:
        file_path = target_dir / name
        logger.trace("Writing file: {}", file_path)
        try:
            file_path.write_bytes(content)
        except OSError as exc:
            raise FileWriteError(file_path, exc.strerror or str(exc)) from exc
        written.append(file_path)

    return written


def write_config_files(config_dir: Path, templates: TemplateSource) -> list[Path]:
    """Write the configuration documents into the configuration directory."""
    logger.info("Creating Obsidian config files")
    return write_template_files(config_dir, CONFIG_TEMPLATES, templates)


def write_initial_files(vault_root: Path, templates: TemplateSource) -> list[Path]:
    """Write the starter note into the vault root."""
    logger.info("Creating initial markdown files")
    return write_template_files(vault_root, INITIAL_TEMPLATES, templates)
