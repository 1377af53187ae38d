"""Core codec and metadata extraction.

This module contains the fundamental components:
- Value model for decoded data
- Bencoding (decoding/canonical encoding)
- Torrent metadata extraction
"""

from __future__ import annotations

from btmeta.core.bencode import (
    BencodeDecoder,
    BencodeEncoder,
    decode,
    decode_at,
    encode,
)
from btmeta.core.torrent import (
    TorrentParser,
    compute_info_hash,
    extract,
    split_piece_hashes,
)
from btmeta.core.values import (
    ByteString,
    Dictionary,
    Integer,
    List,
    Value,
    from_python,
)

__all__ = [
    # Bencoding
    "BencodeDecoder",
    "BencodeEncoder",
    # Values
    "ByteString",
    "Dictionary",
    "Integer",
    "List",
    # Torrent
    "TorrentParser",
    "Value",
    "compute_info_hash",
    "decode",
    "decode_at",
    "encode",
    "extract",
    "from_python",
    "split_piece_hashes",
]
