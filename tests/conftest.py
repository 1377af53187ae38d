"""Pytest configuration and shared fixtures for btmeta tests."""

from __future__ import annotations

import hashlib
import logging

import pytest

from btmeta.config.config import ENV_MAPPINGS, reset_config


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("core", "marks tests as core functionality tests"),
        ("cli", "marks tests as CLI tests"),
        ("config", "marks tests as configuration tests"),
        ("observability", "marks tests as observability tests"),
        ("property", "marks tests as property-based tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep environment and stray btmeta.toml files out of every test."""
    for env_name in ENV_MAPPINGS:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)


@pytest.fixture
def piece_hash() -> bytes:
    """A single 20-byte piece hash."""
    return hashlib.sha1(b"piece data").digest()


@pytest.fixture
def torrent_bytes(piece_hash: bytes) -> bytes:
    """Minimal single-file torrent, canonically encoded."""
    return (
        b"d8:announce31:http://tracker.example/announce"
        b"4:infod6:lengthi16384e12:piece lengthi16384e6:pieces20:"
        + piece_hash
        + b"ee"
    )


@pytest.fixture
def torrent_file(tmp_path, torrent_bytes: bytes):
    """The minimal torrent written to disk."""
    path = tmp_path / "example.torrent"
    path.write_bytes(torrent_bytes)
    return path
