"""Shared utilities and infrastructure.

This module contains the error types and logging setup used throughout the
application.
"""

from __future__ import annotations

from btmeta.utils.exceptions import (
    BencodeDecodeError,
    BencodeEncodeError,
    BencodeError,
    BtMetaError,
    ConfigurationError,
    ErrorKind,
    TorrentError,
    ValidationError,
)
from btmeta.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BencodeDecodeError",
    "BencodeEncodeError",
    "BencodeError",
    "BtMetaError",
    "ConfigurationError",
    "ErrorKind",
    "TorrentError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
