"""Exception hierarchy for btmeta.

Every failure of the codec or the metadata extractor is a typed exception
carrying an ``ErrorKind`` so callers can inspect it without parsing text.
The first error aborts the whole call; nothing in the core recovers from it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kinds of codec and extractor failures."""

    MALFORMED_LENGTH = "MalformedLength"
    UNEXPECTED_EOF = "UnexpectedEof"
    INVALID_INTEGER = "InvalidInteger"
    MISSING_TERMINATOR = "MissingTerminator"
    INVALID_DICTIONARY_KEY = "InvalidDictionaryKey"
    DUPLICATE_KEY = "DuplicateKey"
    UNRECOGNIZED_TOKEN = "UnrecognizedToken"
    TRAILING_DATA = "TrailingData"
    NESTING_TOO_DEEP = "NestingTooDeep"
    INVALID_PIECE_LENGTH = "InvalidPieceLength"
    MISSING_FIELD = "MissingField"
    TYPE_MISMATCH = "TypeMismatch"


class BtMetaError(Exception):
    """Base exception for all btmeta errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize btmeta error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(BtMetaError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class BencodeError(ValidationError):
    """Bencode encoding/decoding errors."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize bencode error with the offending byte offset."""
        super().__init__(message, details)
        self.position = position


class BencodeDecodeError(BencodeError):
    """Malformed bencoded input."""

    def __str__(self) -> str:
        """Return the message with the byte offset appended."""
        text = super().__str__()
        if self.position is not None:
            return f"{text} at offset {self.position}"
        return text


class MalformedLengthError(BencodeDecodeError):
    """Byte string length prefix is empty, non-numeric or too large."""

    kind = ErrorKind.MALFORMED_LENGTH


class UnexpectedEofError(BencodeDecodeError):
    """Input ended before a complete value was read."""

    kind = ErrorKind.UNEXPECTED_EOF


class MissingTerminatorError(UnexpectedEofError):
    """Integer, list or dictionary has no closing ``e``."""

    kind = ErrorKind.MISSING_TERMINATOR


class InvalidIntegerError(BencodeDecodeError):
    """Integer text is not in minimal decimal form."""

    kind = ErrorKind.INVALID_INTEGER


class InvalidDictionaryKeyError(BencodeDecodeError):
    """Dictionary key is not a byte string."""

    kind = ErrorKind.INVALID_DICTIONARY_KEY


class DuplicateKeyError(InvalidDictionaryKeyError):
    """Dictionary key appears more than once."""

    kind = ErrorKind.DUPLICATE_KEY


class UnrecognizedTokenError(BencodeDecodeError):
    """Byte does not start any bencoded value."""

    kind = ErrorKind.UNRECOGNIZED_TOKEN


class TrailingDataError(BencodeDecodeError):
    """Bytes remain after the top-level value."""

    kind = ErrorKind.TRAILING_DATA


class NestingTooDeepError(BencodeDecodeError):
    """Lists/dictionaries are nested beyond the configured depth."""

    kind = ErrorKind.NESTING_TOO_DEEP


class BencodeEncodeError(BencodeError):
    """Python object cannot be represented as a bencoded value."""


class TorrentError(ValidationError):
    """Torrent file validation errors."""

    kind: ErrorKind | None = None

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize torrent error naming the offending key."""
        super().__init__(message, details)
        self.key = key


class InvalidPieceLengthError(TorrentError):
    """``pieces`` is not a whole number of 20-byte SHA-1 digests."""

    kind = ErrorKind.INVALID_PIECE_LENGTH


class MissingFieldError(TorrentError):
    """Required key is absent."""

    kind = ErrorKind.MISSING_FIELD


class TypeMismatchError(TorrentError):
    """Key is present but holds the wrong kind of value."""

    kind = ErrorKind.TYPE_MISMATCH
