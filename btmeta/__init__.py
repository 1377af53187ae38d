"""btmeta - B-encoding codec and torrent metadata extractor."""

from __future__ import annotations

__version__ = "0.1.0"

from btmeta.core.bencode import BencodeDecoder, BencodeEncoder, decode, encode
from btmeta.core.torrent import TorrentParser, extract
from btmeta.core.values import ByteString, Dictionary, Integer, List, Value
from btmeta.models import TorrentInfo

__all__ = [
    "BencodeDecoder",
    "BencodeEncoder",
    "ByteString",
    "Dictionary",
    "Integer",
    "List",
    "TorrentInfo",
    "TorrentParser",
    "Value",
    "__version__",
    "decode",
    "encode",
    "extract",
]
