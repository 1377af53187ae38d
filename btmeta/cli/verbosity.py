"""Verbosity management for the btmeta CLI.

Provides multi-level verbosity control with -v, -vv, -vvv flags.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any

from btmeta.models import LogLevel


class VerbosityLevel(IntEnum):
    """Verbosity levels for CLI commands."""

    NORMAL = 0  # Default: errors and warnings
    VERBOSE = 1  # -v: All above + info
    DEBUG = 2  # -vv: All above + debug messages
    TRACE = 3  # -vvv: All above + stack traces on failure


class VerbosityManager:
    """Manages verbosity levels and maps them to logging levels."""

    LEVEL_TO_LOGGING: dict[VerbosityLevel, int] = {
        VerbosityLevel.NORMAL: logging.WARNING,
        VerbosityLevel.VERBOSE: logging.INFO,
        VerbosityLevel.DEBUG: logging.DEBUG,
        VerbosityLevel.TRACE: logging.DEBUG,  # TRACE uses DEBUG with stack traces
    }

    def __init__(self, verbosity_count: int = 0):
        """Initialize verbosity manager.

        Args:
            verbosity_count: Number of -v flags (0-3)

        """
        self.verbosity_count = max(0, min(3, verbosity_count))  # Clamp to 0-3
        self.level = VerbosityLevel(self.verbosity_count)
        self.logging_level = self.LEVEL_TO_LOGGING[self.level]

    @classmethod
    def from_count(cls, count: int) -> VerbosityManager:
        """Create VerbosityManager from count."""
        return cls(count)

    def should_show_stack_trace(self) -> bool:
        """Check if stack traces should be shown."""
        return self.level == VerbosityLevel.TRACE

    def is_verbose(self) -> bool:
        """Check if verbose mode is enabled."""
        return self.level >= VerbosityLevel.VERBOSE

    def is_debug(self) -> bool:
        """Check if debug mode is enabled."""
        return self.level >= VerbosityLevel.DEBUG

    def apply(self, configured: LogLevel) -> LogLevel:
        """Return the more verbose of ``configured`` and the -v level."""
        if self.level == VerbosityLevel.NORMAL:
            return configured
        if self.logging_level < getattr(logging, configured.value):
            return LogLevel(logging.getLevelName(self.logging_level))
        return configured


def get_verbosity_from_ctx(ctx: dict[str, Any] | None) -> VerbosityManager:
    """Get verbosity manager from Click context object.

    Defaults to NORMAL if not found.
    """
    if ctx is None:
        return VerbosityManager(0)

    verbosity_count = ctx.get("verbosity", 0)
    return VerbosityManager.from_count(verbosity_count)
