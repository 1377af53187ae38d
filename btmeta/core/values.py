"""In-memory representation of bencoded terms.

A value is one of four immutable shapes: ``ByteString``, ``Integer``,
``List`` and ``Dictionary``. Byte strings are raw bytes with no assumed
text encoding; dictionary keys are always byte strings.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from btmeta.utils.exceptions import (
    BencodeEncodeError,
    DuplicateKeyError,
    InvalidDictionaryKeyError,
)


@dataclass(frozen=True)
class ByteString:
    """Raw byte sequence."""

    data: bytes

    def __post_init__(self) -> None:
        """Normalise bytes-like payloads to ``bytes``."""
        if isinstance(self.data, (bytearray, memoryview)):
            object.__setattr__(self, "data", bytes(self.data))
        elif not isinstance(self.data, bytes):
            msg = f"ByteString requires bytes, got {type(self.data).__name__}"
            raise TypeError(msg)

    def __len__(self) -> int:
        """Return number of bytes."""
        return len(self.data)

    def __lt__(self, other: ByteString) -> bool:
        """Order by raw byte value."""
        if not isinstance(other, ByteString):
            return NotImplemented
        return self.data < other.data

    def to_python(self) -> bytes:
        """Return the raw bytes."""
        return self.data


@dataclass(frozen=True)
class Integer:
    """Signed integer of arbitrary magnitude."""

    value: int

    def __post_init__(self) -> None:
        """Reject non-integer payloads."""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            msg = f"Integer requires int, got {type(self.value).__name__}"
            raise TypeError(msg)

    def __int__(self) -> int:
        """Return the integer value."""
        return self.value

    def to_python(self) -> int:
        """Return the integer value."""
        return self.value


@dataclass(frozen=True)
class List:
    """Ordered sequence of values."""

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        """Freeze the item sequence."""
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        """Return number of items."""
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        """Iterate items in order."""
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        """Return item at ``index``."""
        return self.items[index]

    def to_python(self) -> list[Any]:
        """Return a plain ``list``."""
        return _to_python(self)


def _as_key(key: ByteString | bytes | str) -> ByteString:
    if isinstance(key, ByteString):
        return key
    if isinstance(key, str):
        return ByteString(key.encode("utf-8"))
    return ByteString(key)


@dataclass(frozen=True, eq=False)
class Dictionary(Mapping):
    """Mapping from byte-string keys to values.

    Keys keep the order in which they were decoded or supplied. Equality
    ignores that order: two dictionaries are equal when they hold the same
    keys with equal values.
    """

    entries: tuple[tuple[ByteString, Value], ...] = ()
    _index: dict[ByteString, Value] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        """Validate keys and build the lookup index."""
        entries = tuple(tuple(entry) for entry in self.entries)
        index: dict[ByteString, Value] = {}
        for position, (key, value) in enumerate(entries):
            if not isinstance(key, ByteString):
                msg = f"Dictionary key must be a ByteString, got {type(key).__name__}"
                raise InvalidDictionaryKeyError(msg)
            if key in index:
                msg = f"Duplicate dictionary key {key.data!r}"
                raise DuplicateKeyError(msg, details={"entry": position})
            index[key] = value
        object.__setattr__(self, "entries", entries)
        object.__setattr__(self, "_index", index)

    def __getitem__(self, key: ByteString | bytes | str) -> Value:
        """Look up ``key``; plain bytes and str are accepted."""
        return self._index[_as_key(key)]

    def __contains__(self, key: object) -> bool:
        """Check for ``key``."""
        if not isinstance(key, (ByteString, bytes, bytearray, str)):
            return False
        return _as_key(key) in self._index

    def __iter__(self) -> Iterator[ByteString]:
        """Iterate keys in insertion order."""
        return iter(self._index)

    def __len__(self) -> int:
        """Return number of entries."""
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        """Compare key sets and values, ignoring insertion order."""
        if not isinstance(other, Dictionary):
            return NotImplemented
        return self._index == other._index

    __hash__ = None  # type: ignore[assignment]

    def sorted_items(self) -> list[tuple[ByteString, Value]]:
        """Return entries in ascending raw-byte key order."""
        return sorted(self.entries, key=lambda entry: entry[0].data)

    def to_python(self) -> dict[bytes, Any]:
        """Return a plain ``dict`` keyed by bytes."""
        return _to_python(self)


Value = Union[ByteString, Integer, List, Dictionary]


def _to_python(value: Value) -> Any:
    """Convert a value tree to plain Python without recursion."""
    if isinstance(value, (ByteString, Integer)):
        return value.to_python()

    root: list[Any] | dict[bytes, Any] = [] if isinstance(value, List) else {}
    # each frame: (pending (key, value) pairs, container being filled)
    stack: list[tuple[Iterator[tuple[bytes | None, Value]], Any]] = [
        (_children(value), root)
    ]
    while stack:
        children, target = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            continue
        key, item = child
        if isinstance(item, (List, Dictionary)):
            converted: Any = [] if isinstance(item, List) else {}
            stack.append((_children(item), converted))
        else:
            converted = item.to_python()
        if key is None:
            target.append(converted)
        else:
            target[key] = converted
    return root


def _children(value: List | Dictionary) -> Iterator[tuple[bytes | None, Value]]:
    if isinstance(value, List):
        return ((None, item) for item in value.items)
    return ((key.data, item) for key, item in value.entries)


def from_python(obj: Any) -> Value:
    """Build a value tree from plain Python objects.

    ``bytes`` become byte strings, ``str`` is UTF-8 encoded, ``int``
    becomes an integer, lists and tuples become lists, and mappings with
    ``bytes``/``str`` keys become dictionaries. Values already in the
    value model are returned unchanged.

    Raises:
        BencodeEncodeError: If an object (or a dictionary key) has no
            bencoded representation.

    """
    if isinstance(obj, (ByteString, Integer, List, Dictionary)):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return ByteString(bytes(obj))
    if isinstance(obj, str):
        return ByteString(obj.encode("utf-8"))
    if isinstance(obj, bool):
        msg = "bool is not bencodable"
        raise BencodeEncodeError(msg)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, (list, tuple)):
        return List(tuple(from_python(item) for item in obj))
    if isinstance(obj, Mapping):
        entries = []
        for key, item in obj.items():
            if not isinstance(key, (bytes, str, ByteString)):
                msg = f"Dictionary keys must be bytes or str, got {type(key).__name__}"
                raise BencodeEncodeError(msg)
            entries.append((_as_key(key), from_python(item)))
        return Dictionary(tuple(entries))
    msg = f"{type(obj).__name__} is not bencodable"
    raise BencodeEncodeError(msg)
