"""Command line interface for btmeta."""

from __future__ import annotations

from btmeta.cli.main import cli, main

__all__ = ["cli", "main"]
