"""Loguru configuration for petiteplatypus.

The command line maps its repeatable ``-v`` flag onto loguru levels:

- no flag: warnings and errors only
- ``-v``: INFO (phase progress)
- ``-vv``: DEBUG (per-step detail)
- ``-vvv``: TRACE (per-file detail)

Library modules log through :func:`get_logger` and never configure sinks.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "configure_loguru",
    "get_logger",
    "level_for_verbosity",
    "timing_context",
]

_VERBOSITY_LEVELS = ("WARNING", "INFO", "DEBUG", "TRACE")

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)

# Records logged without a bound component still render with CONSOLE_FORMAT
logger.configure(extra={"component": "petiteplatypus"})


def _stderr_sink(message: str) -> None:
    # Looks up sys.stderr on every write
    sys.stderr.write(message)


def level_for_verbosity(verbosity: int) -> str:
    """Map a ``-v`` count to a loguru level name."""
    if verbosity <= 0:
        return _VERBOSITY_LEVELS[0]
    return _VERBOSITY_LEVELS[min(verbosity, len(_VERBOSITY_LEVELS) - 1)]


def configure_loguru(
    *,
    verbosity: int = 0,
    level: str | None = None,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "10 days",
    enable_console: bool = True,
) -> None:
    """Configure loguru sinks.

    Parameters
    ----------
    verbosity
        Count of ``-v`` flags; ignored when ``level`` is given
    level
        Explicit minimum level (DEBUG, INFO, WARNING, ...)
    log_file
        Optional JSON lines log file
    rotation
        Log rotation policy for the file sink
    retention
        Log retention policy for the file sink
    enable_console
        Enable stderr output
    """
    level = (level or level_for_verbosity(verbosity)).upper()

    logger.remove()

    if enable_console:
        logger.add(
            _stderr_sink,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=sys.stderr.isatty(),
            backtrace=False,
            diagnose=False,
        )

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            serialize=True,
            backtrace=True,
            diagnose=False,
        )

    logger.debug("Loguru configured", level=level, log_file=str(log_file) if log_file else None)


def get_logger(component: str = "petiteplatypus") -> Any:
    """Get logger instance bound to a component.

    Parameters
    ----------
    component
        Component name (vault, registry, generator, cli)

    Returns
    -------
    Logger
        Loguru logger bound to component
    """
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "petiteplatypus",
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Log the duration of an operation at DEBUG level.

    Example
    -------
    >>> with timing_context("update global config", component="generator") as ctx:
    ...     ctx["vault_id"] = vault_id
    """
    bound = logger.bind(component=component, operation=operation)
    context: dict[str, Any] = dict(metadata)
    start_ns = time.perf_counter_ns()
    bound.trace("START: {}", operation, **metadata)

    try:
        yield context
    finally:
        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        bound.debug("END: {} ({:.2f} ms)", operation, duration_ms, duration_ms=duration_ms, **context)
