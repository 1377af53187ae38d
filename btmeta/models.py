"""Pydantic models for btmeta.

Provides validated data models for torrent metadata and configuration.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

SHA1_HEX_LENGTH = 40


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _check_sha1_hex(value: str) -> str:
    if len(value) != SHA1_HEX_LENGTH or value.strip("0123456789abcdef"):
        msg = f"expected {SHA1_HEX_LENGTH} lowercase hex characters, got {value!r}"
        raise ValueError(msg)
    return value


class TorrentInfo(BaseModel):
    """Metadata extracted from a single-file torrent."""

    announce: bytes = Field(..., description="Tracker URL as raw bytes")
    length: int = Field(..., description="Content length in bytes")
    info_hash: str = Field(
        ...,
        description="SHA-1 of the canonical info dictionary, lowercase hex",
    )
    piece_length: int = Field(..., description="Piece length in bytes")
    piece_hashes: list[str] = Field(
        default_factory=list,
        description="Per-piece SHA-1 hashes, lowercase hex, in piece order",
    )

    # Informational fields, present only when the torrent carries them
    name: bytes | None = Field(None, description="Suggested file name")
    comment: bytes | None = Field(None, description="Torrent comment")
    created_by: bytes | None = Field(None, description="Created by")
    creation_date: int | None = Field(None, description="Creation date (epoch)")
    is_private: bool = Field(
        default=False,
        description="Whether torrent is marked as private (BEP 27)",
    )

    model_config = {"frozen": True}

    @field_validator("info_hash")
    @classmethod
    def validate_info_hash(cls, v: str) -> str:
        """Validate info_hash is a 40-character lowercase hex digest."""
        return _check_sha1_hex(v)

    @field_validator("piece_hashes")
    @classmethod
    def validate_piece_hashes(cls, v: list[str]) -> list[str]:
        """Validate every piece hash is a 40-character lowercase hex digest."""
        for piece_hash in v:
            _check_sha1_hex(piece_hash)
        return v

    @property
    def num_pieces(self) -> int:
        """Number of pieces."""
        return len(self.piece_hashes)

    @property
    def info_hash_bytes(self) -> bytes:
        """Info hash as 20 raw bytes."""
        return bytes.fromhex(self.info_hash)

    @property
    def tracker_url(self) -> str:
        """Announce URL as text, for display only."""
        return self.announce.decode("utf-8", errors="replace")


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Use structured (JSON) logging",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string for file output",
    )


class BencodeConfig(BaseModel):
    """Decoder limits."""

    max_depth: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Maximum nesting of lists/dictionaries accepted by the decoder",
    )


class Config(BaseModel):
    """Main configuration model."""

    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
    bencode: BencodeConfig = Field(
        default_factory=BencodeConfig,
        description="Bencode decoder configuration",
    )
