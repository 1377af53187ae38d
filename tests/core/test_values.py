"""Tests for the value model."""

from __future__ import annotations

import dataclasses

import pytest

pytestmark = [pytest.mark.unit, pytest.mark.core]

from btmeta.core.values import ByteString, Dictionary, Integer, List, from_python
from btmeta.utils.exceptions import (
    BencodeEncodeError,
    DuplicateKeyError,
    ErrorKind,
    InvalidDictionaryKeyError,
)


class TestByteString:
    """Test ByteString construction and comparison."""

    def test_equality_is_bytewise(self):
        """Test byte strings compare by content."""
        assert ByteString(b"spam") == ByteString(b"spam")
        assert ByteString(b"spam") != ByteString(b"Spam")
        assert ByteString(b"1") != Integer(1)

    def test_normalises_bytes_like(self):
        """Test bytearray and memoryview payloads become bytes."""
        assert ByteString(bytearray(b"ab")).data == b"ab"
        assert type(ByteString(memoryview(b"ab")).data) is bytes

    def test_rejects_text(self):
        """Test str payloads are refused."""
        with pytest.raises(TypeError):
            ByteString("spam")  # type: ignore[arg-type]

    def test_ordering_and_length(self):
        """Test ordering follows raw bytes."""
        assert ByteString(b"B") < ByteString(b"a")
        assert sorted([ByteString(b"b"), ByteString(b"a")]) == [
            ByteString(b"a"),
            ByteString(b"b"),
        ]
        assert len(ByteString(b"spam")) == 4

    def test_immutable(self):
        """Test fields cannot be reassigned."""
        value = ByteString(b"spam")
        with pytest.raises(dataclasses.FrozenInstanceError):
            value.data = b"eggs"  # type: ignore[misc]


class TestInteger:
    """Test Integer construction."""

    def test_value(self):
        """Test integers hold arbitrary magnitude."""
        assert Integer(2**80).value == 2**80
        assert int(Integer(-5)) == -5

    @pytest.mark.parametrize("bad", [True, 1.0, "1", None])
    def test_rejects_non_int(self, bad):
        """Test bools, floats and text are refused."""
        with pytest.raises(TypeError):
            Integer(bad)


class TestList:
    """Test List behaviour."""

    def test_order_sensitive_equality(self):
        """Test lists compare element by element in order."""
        a = List((Integer(1), Integer(2)))
        assert a == List([Integer(1), Integer(2)])
        assert a != List((Integer(2), Integer(1)))

    def test_sequence_access(self):
        """Test indexing, iteration and length."""
        value = List((ByteString(b"x"), Integer(3)))
        assert len(value) == 2
        assert value[1] == Integer(3)
        assert list(value) == [ByteString(b"x"), Integer(3)]
        assert isinstance(value.items, tuple)


class TestDictionary:
    """Test Dictionary behaviour."""

    def test_lookup(self):
        """Test lookups by ByteString, bytes and str."""
        value = Dictionary(((ByteString(b"cow"), ByteString(b"moo")),))
        assert value[ByteString(b"cow")] == ByteString(b"moo")
        assert value[b"cow"] == ByteString(b"moo")
        assert value["cow"] == ByteString(b"moo")
        assert "cow" in value
        assert "pig" not in value
        assert 1 not in value
        assert value.get("pig") is None
        with pytest.raises(KeyError):
            value["pig"]

    def test_preserves_insertion_order(self):
        """Test keys iterate in the order supplied."""
        value = Dictionary(
            (
                (ByteString(b"b"), Integer(1)),
                (ByteString(b"a"), Integer(2)),
            )
        )
        assert list(value) == [ByteString(b"b"), ByteString(b"a")]
        assert [key.data for key, _ in value.sorted_items()] == [b"a", b"b"]

    def test_equality_ignores_order(self):
        """Test equality depends on keys and values only."""
        first = Dictionary(
            ((ByteString(b"a"), Integer(1)), (ByteString(b"b"), Integer(2)))
        )
        second = Dictionary(
            ((ByteString(b"b"), Integer(2)), (ByteString(b"a"), Integer(1)))
        )
        third = Dictionary(
            ((ByteString(b"a"), Integer(1)), (ByteString(b"b"), Integer(3)))
        )
        assert first == second
        assert first != third
        assert first != {b"a": 1, b"b": 2}

    def test_unhashable(self):
        """Test dictionaries cannot be used as keys."""
        with pytest.raises(TypeError):
            hash(Dictionary())

    def test_duplicate_key(self):
        """Test duplicate keys are rejected at construction."""
        with pytest.raises(DuplicateKeyError) as exc_info:
            Dictionary(
                (
                    (ByteString(b"a"), Integer(1)),
                    (ByteString(b"a"), Integer(2)),
                )
            )
        assert exc_info.value.kind is ErrorKind.DUPLICATE_KEY

    def test_non_bytestring_key(self):
        """Test keys must be byte strings."""
        with pytest.raises(InvalidDictionaryKeyError):
            Dictionary(((Integer(1), Integer(2)),))  # type: ignore[arg-type]

    def test_to_python(self):
        """Test conversion to plain Python data."""
        value = Dictionary(
            (
                (ByteString(b"list"), List((Integer(1), ByteString(b"x")))),
                (ByteString(b"empty"), Dictionary()),
            )
        )
        assert value.to_python() == {b"list": [1, b"x"], b"empty": {}}


class TestFromPython:
    """Test building values from plain Python data."""

    def test_scalars(self):
        """Test bytes, text and integers."""
        assert from_python(b"x") == ByteString(b"x")
        assert from_python("é") == ByteString("é".encode())
        assert from_python(7) == Integer(7)

    def test_containers(self):
        """Test lists, tuples and mappings."""
        assert from_python([1, (b"a",)]) == List(
            (Integer(1), List((ByteString(b"a"),)))
        )
        assert from_python({"k": 1}) == Dictionary(
            ((ByteString(b"k"), Integer(1)),)
        )

    def test_values_pass_through(self):
        """Test existing values are returned unchanged."""
        value = List((Integer(1),))
        assert from_python(value) is value

    def test_str_and_bytes_key_collision(self):
        """Test a str key and equal bytes key collide."""
        with pytest.raises(DuplicateKeyError):
            from_python({"a": 1, b"a": 2})

    @pytest.mark.parametrize("bad", [1.5, None, False, object(), {1: 2}])
    def test_unsupported(self, bad):
        """Test objects with no bencoded form."""
        with pytest.raises(BencodeEncodeError):
            from_python(bad)
