"""Torrent metadata extraction.

This module reads the fields of a decoded torrent description, computes
the info hash from the canonical encoding of the ``info`` dictionary and
splits the ``pieces`` string into per-piece SHA-1 hashes.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import TypeVar

from btmeta.core.bencode import DEFAULT_MAX_DEPTH, BencodeDecoder, Buffer, encode
from btmeta.core.values import ByteString, Dictionary, Integer, List, Value
from btmeta.models import TorrentInfo
from btmeta.utils.exceptions import (
    InvalidPieceLengthError,
    MissingFieldError,
    TorrentError,
    TypeMismatchError,
)
from btmeta.utils.logging_config import get_logger

logger = get_logger(__name__)

PIECE_HASH_LENGTH = 20

_SHAPE_NAMES = {
    ByteString: "byte string",
    Integer: "integer",
    List: "list",
    Dictionary: "dictionary",
}

_V = TypeVar("_V", ByteString, Integer, List, Dictionary)


def _shape(value: Value) -> str:
    return _SHAPE_NAMES.get(type(value), type(value).__name__)


def _require(container: Dictionary, key: str, shape: type[_V], where: str) -> _V:
    if key not in container:
        msg = f"Missing required key {key!r} in {where}"
        raise MissingFieldError(msg, key=key)
    value = container[key]
    if not isinstance(value, shape):
        msg = (
            f"Key {key!r} in {where} must be a {_SHAPE_NAMES[shape]}, "
            f"got {_shape(value)}"
        )
        raise TypeMismatchError(msg, key=key)
    return value


def _optional(
    container: Dictionary, key: str, shape: type[_V], where: str
) -> _V | None:
    """Return an informational value, or None when absent or the wrong shape."""
    value = container.get(key)
    if value is None:
        return None
    if not isinstance(value, shape):
        logger.debug(
            "Ignoring key %r in %s: expected %s, got %s",
            key,
            where,
            _SHAPE_NAMES[shape],
            _shape(value),
        )
        return None
    return value


def compute_info_hash(info: Value) -> str:
    """Return the SHA-1 of the canonical encoding of ``info`` as lowercase hex."""
    return hashlib.sha1(encode(info)).hexdigest()  # nosec B324 - SHA-1 required by BitTorrent protocol (BEP 3)


def split_piece_hashes(pieces: bytes) -> list[str]:
    """Split concatenated 20-byte piece hashes into lowercase hex strings.

    Raises:
        InvalidPieceLengthError: If ``pieces`` is not a multiple of 20 bytes

    """
    if len(pieces) % PIECE_HASH_LENGTH != 0:
        msg = (
            f"Invalid pieces data length: {len(pieces)} bytes "
            f"(should be multiple of {PIECE_HASH_LENGTH})"
        )
        raise InvalidPieceLengthError(msg, key="pieces")
    return [
        pieces[start : start + PIECE_HASH_LENGTH].hex()
        for start in range(0, len(pieces), PIECE_HASH_LENGTH)
    ]


def extract(top_level: Value) -> TorrentInfo:
    """Extract tracker URL, lengths, info hash and piece hashes.

    Only single-file torrents are described: ``length`` is required and a
    ``files`` list, if any, is ignored. Informational keys (name, private,
    comment, created by, creation date) holding the wrong shape are skipped.

    Args:
        top_level: The decoded torrent description

    Returns:
        TorrentInfo with the extracted fields

    Raises:
        MissingFieldError: If a required key is absent
        TypeMismatchError: If a required key holds the wrong kind of value
        InvalidPieceLengthError: If ``pieces`` is not a multiple of 20 bytes

    """
    if not isinstance(top_level, Dictionary):
        msg = f"Torrent must be a dictionary, got {_shape(top_level)}"
        raise TypeMismatchError(msg)

    announce = _require(top_level, "announce", ByteString, "torrent")
    info = _require(top_level, "info", Dictionary, "torrent")

    info_hash = compute_info_hash(info)

    piece_length = _require(info, "piece length", Integer, "info")
    pieces = _require(info, "pieces", ByteString, "info")
    length = _require(info, "length", Integer, "info")
    piece_hashes = split_piece_hashes(pieces.data)

    name = _optional(info, "name", ByteString, "info")
    private = _optional(info, "private", Integer, "info")
    comment = _optional(top_level, "comment", ByteString, "torrent")
    created_by = _optional(top_level, "created by", ByteString, "torrent")
    creation_date = _optional(top_level, "creation date", Integer, "torrent")

    return TorrentInfo(
        announce=announce.data,
        length=length.value,
        info_hash=info_hash,
        piece_length=piece_length.value,
        piece_hashes=piece_hashes,
        name=name.data if name is not None else None,
        comment=comment.data if comment is not None else None,
        created_by=created_by.data if created_by is not None else None,
        creation_date=creation_date.value if creation_date is not None else None,
        is_private=private is not None and private.value != 0,
    )


class TorrentParser:
    """Parser for BitTorrent torrent files."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        """Initialize the torrent parser.

        Args:
            max_depth: Nesting limit handed to the decoder

        """
        self.decoder = BencodeDecoder(max_depth)

    def parse(self, torrent_path: str | Path) -> TorrentInfo:
        """Parse a torrent file from a local path.

        Raises:
            TorrentError: If the file cannot be read or fails validation
            BencodeDecodeError: If the file is not valid bencode

        """
        return self.parse_bytes(self._read_from_file(torrent_path))

    def parse_bytes(self, data: Buffer) -> TorrentInfo:
        """Decode ``data`` and extract its metadata."""
        decoded = self.decoder.decode(data)
        torrent_info = extract(decoded)
        logger.debug(
            "Parsed torrent %s: %d piece(s) of %d bytes",
            torrent_info.info_hash,
            torrent_info.num_pieces,
            torrent_info.piece_length,
        )
        return torrent_info

    def _read_from_file(self, file_path: str | Path) -> bytes:
        """Read torrent data from a local file."""
        path = Path(file_path)
        if not path.is_file():
            msg = f"Torrent file not found: {path}"
            raise TorrentError(msg, details={"path": str(path)})

        try:
            data = path.read_bytes()
        except OSError as e:
            msg = f"Failed to read torrent file {path}: {e}"
            raise TorrentError(msg, details={"path": str(path)}) from e
        logger.debug("Read %d bytes from %s", len(data), path)
        return data
