"""Template sources for vault scaffolding.

A template source hands out the static byte content written into a new
vault, looked up by logical name (``app.json``, ``Welcome.md``, ...).
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Mapping, Protocol

from .errors import TemplateLoadError

__all__ = [
    "CONFIG_TEMPLATES",
    "DirectoryTemplateSource",
    "INITIAL_TEMPLATES",
    "MappingTemplateSource",
    "PackagedTemplateSource",
    "TemplateSource",
    "get_default_template_source",
]

# Files written into the vault's configuration directory
CONFIG_TEMPLATES: tuple[str, ...] = (
    "app.json",
    "appearance.json",
    "core-plugins.json",
    "graph.json",
    "workspace.json",
)

# Files written into the vault root
INITIAL_TEMPLATES: tuple[str, ...] = ("Welcome.md",)


class TemplateSource(Protocol):
    """Protocol for template providers."""

    def load(self, name: str) -> bytes:
        """Return the content of the named template.

        Raises
        ------
        TemplateLoadError
            If the template is missing or unreadable
        """
        ...


class PackagedTemplateSource:
    """Templates shipped inside the ``petiteplatypus.templates`` package data."""

    def __init__(self, package: str = "petiteplatypus") -> None:
        self.package = package

    def load(self, name: str) -> bytes:
        try:
            resource = resources.files(self.package) / "templates" / name
            return resource.read_bytes()
        except (OSError, ModuleNotFoundError) as exc:
            raise TemplateLoadError(name, f"failed to read embedded template file: {exc}") from exc

    def __repr__(self) -> str:
        return f"PackagedTemplateSource(package={self.package!r})"


class DirectoryTemplateSource:
    """Templates read from a user-supplied directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def load(self, name: str) -> bytes:
        path = self.directory / name
        try:
            return path.read_bytes()
        except OSError as exc:
            raise TemplateLoadError(name, f"failed to read template file {path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"DirectoryTemplateSource(directory={str(self.directory)!r})"


class MappingTemplateSource:
    """In-memory templates, keyed by name."""

    def __init__(self, templates: Mapping[str, bytes | str]) -> None:
        self._templates = {
            name: content.encode("utf-8") if isinstance(content, str) else bytes(content)
            for name, content in templates.items()
        }

    def load(self, name: str) -> bytes:
        try:
            return self._templates[name]
        except KeyError as exc:
            raise TemplateLoadError(name, "no such template") from exc

    def __repr__(self) -> str:
        return f"MappingTemplateSource(names={sorted(self._templates)!r})"


def get_default_template_source(templates_dir: Path | str | None = None) -> TemplateSource:
    """Return the directory source if ``templates_dir`` is set, else the packaged one."""
    if templates_dir:
        return DirectoryTemplateSource(templates_dir)
    return PackagedTemplateSource()
