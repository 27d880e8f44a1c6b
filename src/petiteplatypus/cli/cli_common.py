"""Common CLI utilities: stable exit codes and human/JSON output."""

from __future__ import annotations

import json
import traceback
from enum import IntEnum
from typing import Any

import click

from ..config.settings import ConfigError
from ..core.errors import (
    ConfigDirUnavailable,
    DirectoryCreateError,
    FileWriteError,
    RegistryCorrupt,
    RegistryLockTimeout,
    RegistryReadError,
    RegistryWriteError,
    TemplateLoadError,
    VaultCreationError,
)

__all__ = [
    "CLIContext",
    "ExitCode",
    "exit_code_for",
]


class ExitCode(IntEnum):
    """Stable exit codes for CLI commands."""

    SUCCESS = 0  # Successful execution
    IO_LOCK_ERROR = 5  # I/O or lock error
    CONFIG_ERROR = 6  # Configuration error
    UNKNOWN_ERROR = 7  # Unknown/unexpected error
    REGISTRY_CORRUPT = 8  # Existing registry file is malformed


_IO_ERRORS = (
    DirectoryCreateError,
    FileWriteError,
    TemplateLoadError,
    RegistryReadError,
    RegistryWriteError,
    RegistryLockTimeout,
    OSError,
)


def exit_code_for(exc: BaseException) -> ExitCode:
    """Map an exception to its exit code, looking through VaultCreationError."""
    if isinstance(exc, VaultCreationError):
        exc = exc.cause

    if isinstance(exc, RegistryCorrupt):
        return ExitCode.REGISTRY_CORRUPT
    if isinstance(exc, (ConfigDirUnavailable, ConfigError)):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, _IO_ERRORS):
        return ExitCode.IO_LOCK_ERROR
    return ExitCode.UNKNOWN_ERROR


class CLIContext:
    """Output settings shared by the commands of one invocation."""

    def __init__(self, json_output: bool = False, verbosity: int = 0) -> None:
        self.json_output = json_output
        self.verbosity = verbosity

    def success(self, data: dict[str, Any], lines: list[str]) -> int:
        """Print a success result and return the success exit code."""
        if self.json_output:
            click.echo(json.dumps({"status": "success", "data": data}, ensure_ascii=False, indent=2))
        else:
            for line in lines:
                click.echo(line)
        return int(ExitCode.SUCCESS)

    def failure(self, exc: Exception) -> int:
        """Print an error and return the exit code for it."""
        exit_code = exit_code_for(exc)
        error: dict[str, Any] = {
            "status": "error",
            "error": str(exc),
            "error_type": type(exc).__name__,
            "exit_code": int(exit_code),
        }
        if isinstance(exc, VaultCreationError):
            error["phase"] = exc.phase
            error["error_type"] = type(exc.cause).__name__

        if self.json_output:
            click.echo(json.dumps(error, ensure_ascii=False, indent=2))
        else:
            click.echo(f"❌ {exc}", err=True)

        if self.verbosity >= 2 and not self.json_output:
            click.echo("\nTraceback:", err=True)
            click.echo("".join(traceback.format_exception(exc)), err=True)

        return int(exit_code)
