"""Observability module for petiteplatypus.

Provides loguru configuration and timing instrumentation.
"""

from .loguru_config import configure_loguru, get_logger, level_for_verbosity, timing_context

__all__ = [
    "configure_loguru",
    "get_logger",
    "level_for_verbosity",
    "timing_context",
]
