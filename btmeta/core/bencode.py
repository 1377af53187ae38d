"""Bencode decoding and canonical encoding.

The decoder turns a byte buffer into a value tree (see ``btmeta.core.values``)
and the encoder writes a value tree back in canonical form: dictionary keys
sorted by raw byte value and integers in minimal decimal text. Both walk the
tree with an explicit stack, so nesting is limited only by ``max_depth``.
"""

from __future__ import annotations

import re
from typing import Any, Union

from btmeta.core.values import (
    ByteString,
    Dictionary,
    Integer,
    List,
    Value,
    from_python,
)
from btmeta.utils.exceptions import (
    BencodeEncodeError,
    DuplicateKeyError,
    InvalidDictionaryKeyError,
    InvalidIntegerError,
    MalformedLengthError,
    MissingTerminatorError,
    NestingTooDeepError,
    TrailingDataError,
    UnexpectedEofError,
    UnrecognizedTokenError,
)

DEFAULT_MAX_DEPTH = 1000

# a signed 64-bit length has at most 19 digits
MAX_LENGTH_DIGITS = 19

_INT = ord("i")
_LIST = ord("l")
_DICT = ord("d")
_END = ord("e")
_SEP = ord(":")
_DIGITS = frozenset(b"0123456789")

_LENGTH_RE = re.compile(rb"[0-9]*")
_INTEGER_RE = re.compile(rb"-?(?:0|[1-9][0-9]*)")

Buffer = Union[bytes, bytearray, memoryview]


class _Frame:
    """An open list or dictionary while decoding."""

    __slots__ = ("is_dict", "items", "key", "keys", "start")

    def __init__(self, is_dict: bool, start: int):
        self.is_dict = is_dict
        self.start = start
        self.items: list[Any] = []
        self.key: ByteString | None = None
        self.keys: set[bytes] = set()

    def add(self, value: Value) -> None:
        if self.is_dict:
            self.items.append((self.key, value))
            self.key = None
        else:
            self.items.append(value)

    def close(self) -> Value:
        if self.is_dict:
            return Dictionary(tuple(self.items))
        return List(tuple(self.items))


class BencodeDecoder:
    """Decoder for bencoded data.

    The decoder holds only its depth limit; every call works on its own
    cursor, so one instance can be shared freely.
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        """Initialize the decoder.

        Args:
            max_depth: Maximum number of nested lists/dictionaries

        """
        if max_depth < 1:
            msg = f"max_depth must be at least 1, got {max_depth}"
            raise ValueError(msg)
        self.max_depth = max_depth

    def decode(self, data: Buffer) -> Value:
        """Decode a complete bencoded buffer.

        Args:
            data: The whole encoded value

        Returns:
            The decoded value

        Raises:
            BencodeDecodeError: If the buffer is malformed or has bytes
                left over after the top-level value

        """
        data = _as_bytes(data)
        value, position = self.decode_at(data, 0)
        if position != len(data):
            msg = f"{len(data) - position} trailing byte(s) after value"
            raise TrailingDataError(msg, position)
        return value

    def decode_at(self, data: Buffer, position: int = 0) -> tuple[Value, int]:
        """Decode one value starting at ``position``.

        Returns:
            The value and the offset just past it

        """
        data = _as_bytes(data)
        size = len(data)
        stack: list[_Frame] = []

        while True:
            if position >= size:
                if stack and not (stack[-1].is_dict and stack[-1].key is not None):
                    kind = "dictionary" if stack[-1].is_dict else "list"
                    msg = f"Unterminated {kind} starting at offset {stack[-1].start}"
                    raise MissingTerminatorError(msg, position)
                msg = "Unexpected end of input"
                raise UnexpectedEofError(msg, position)

            token = data[position]
            frame = stack[-1] if stack else None

            if frame is not None and frame.is_dict and frame.key is None:
                if token == _END:
                    stack.pop()
                    value = frame.close()
                    position += 1
                else:
                    if token not in _DIGITS:
                        msg = f"Dictionary key must be a byte string, got {chr(token)!r}"
                        raise InvalidDictionaryKeyError(msg, position)
                    key, end = _decode_string(data, position)
                    if key.data in frame.keys:
                        msg = f"Duplicate dictionary key {key.data!r}"
                        raise DuplicateKeyError(msg, position)
                    frame.keys.add(key.data)
                    frame.key = key
                    position = end
                    continue
            elif token == _END and frame is not None and not frame.is_dict:
                stack.pop()
                value = frame.close()
                position += 1
            elif token in _DIGITS:
                value, position = _decode_string(data, position)
            elif token == _INT:
                value, position = _decode_int(data, position)
            elif token in (_LIST, _DICT):
                if len(stack) >= self.max_depth:
                    msg = f"Nesting deeper than {self.max_depth} levels"
                    raise NestingTooDeepError(msg, position)
                stack.append(_Frame(token == _DICT, position))
                position += 1
                continue
            else:
                msg = f"Unrecognized token {bytes([token])!r}"
                raise UnrecognizedTokenError(msg, position)

            if not stack:
                return value, position
            stack[-1].add(value)


class BencodeEncoder:
    """Canonical encoder for bencoded data."""

    def encode(self, value: Value | Any) -> bytes:
        """Encode a value tree (or plain Python data) canonically.

        Raises:
            BencodeEncodeError: If plain Python data has no bencoded form

        """
        out = bytearray()
        # bytes entries are literal output, everything else is still to encode
        stack: list[Value | bytes] = [from_python(value)]
        while stack:
            item = stack.pop()
            if isinstance(item, bytes):
                out += item
            elif isinstance(item, ByteString):
                out += b"%d:" % len(item.data)
                out += item.data
            elif isinstance(item, Integer):
                try:
                    out += b"i%de" % item.value
                except ValueError as e:
                    # interpreter refuses to format extremely long integers
                    bits = item.value.bit_length()
                    msg = f"Integer with {bits} bits is too large to encode"
                    raise BencodeEncodeError(msg) from e
            elif isinstance(item, List):
                out.append(_LIST)
                stack.append(b"e")
                stack.extend(reversed(item.items))
            elif isinstance(item, Dictionary):
                out.append(_DICT)
                stack.append(b"e")
                for key, child in reversed(item.sorted_items()):
                    stack.append(child)
                    stack.append(key)
            else:
                msg = f"{type(item).__name__} is not bencodable"
                raise BencodeEncodeError(msg)
        return bytes(out)


def _as_bytes(data: Buffer) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    msg = f"Bencoded data must be bytes, got {type(data).__name__}"
    raise TypeError(msg)


def _decode_string(data: bytes, position: int) -> tuple[ByteString, int]:
    digits = _LENGTH_RE.match(data, position).group()
    colon = position + len(digits)
    if not digits:
        msg = "Empty byte string length"
        raise MalformedLengthError(msg, position)
    if len(digits) > MAX_LENGTH_DIGITS:
        msg = f"Byte string length {digits[:20].decode()}... is too large"
        raise MalformedLengthError(msg, position)
    if colon >= len(data):
        msg = "Unexpected end of input in byte string length"
        raise UnexpectedEofError(msg, colon)
    if data[colon] != _SEP:
        msg = f"Expected ':' after byte string length, got {bytes([data[colon]])!r}"
        raise MalformedLengthError(msg, colon)

    start = colon + 1
    end = start + int(digits)
    if end > len(data):
        msg = f"Byte string needs {int(digits)} bytes, only {len(data) - start} left"
        raise UnexpectedEofError(msg, start)
    return ByteString(data[start:end]), end


def _decode_int(data: bytes, position: int) -> tuple[Integer, int]:
    end = data.find(b"e", position + 1)
    if end == -1:
        msg = "Integer has no terminating 'e'"
        raise MissingTerminatorError(msg, position)
    text = data[position + 1 : end]
    if not _INTEGER_RE.fullmatch(text) or text == b"-0":
        msg = f"Invalid integer {text[:32]!r}"
        raise InvalidIntegerError(msg, position)
    try:
        number = int(text)
    except ValueError as e:
        # interpreter refuses to convert extremely long digit strings
        msg = f"Integer with {len(text)} digits is too large"
        raise InvalidIntegerError(msg, position) from e
    return Integer(number), end + 1


def decode(data: Buffer, max_depth: int = DEFAULT_MAX_DEPTH) -> Value:
    """Decode a complete bencoded buffer."""
    return BencodeDecoder(max_depth).decode(data)


def decode_at(
    data: Buffer,
    position: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[Value, int]:
    """Decode one value at ``position``; returns the value and next offset."""
    return BencodeDecoder(max_depth).decode_at(data, position)


def encode(value: Value | Any) -> bytes:
    """Encode a value canonically."""
    return BencodeEncoder().encode(value)
