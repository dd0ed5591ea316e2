"""Tests for idna_mapping.pool: the replacement sequence store."""

import pytest

from idna_mapping.errors import TableCorruptionError
from idna_mapping.pool import MAX_LENGTH, PoolBuilder, SequenceRef, StringPool


def test_intern_deduplicates_identical_sequences() -> None:
    builder = PoolBuilder()
    a = builder.intern("ss")
    b = builder.intern("a")
    c = builder.intern("ss")
    assert a == c == SequenceRef(0, 2)
    assert b == SequenceRef(2, 1)
    pool = builder.finish()
    assert len(pool) == 3
    assert pool.resolve(a) == "ss"
    assert pool.resolve(b) == "a"


def test_empty_sequence_is_a_valid_reference() -> None:
    builder = PoolBuilder()
    ref = builder.intern("")
    pool = builder.finish()
    assert ref.length == 0
    assert pool.contains(ref)
    assert pool.resolve(ref) == ""


def test_supplementary_codepoints_count_as_one() -> None:
    builder = PoolBuilder()
    ref = builder.intern("\U0002a600")
    assert ref == SequenceRef(0, 1)
    assert builder.finish().slice(0, 1) == "\U0002a600"


@pytest.mark.parametrize("offset,length", [(0, 4), (3, 1), (-1, 1), (0, -1)])
def test_slice_out_of_bounds(offset: int, length: int) -> None:
    pool = StringPool("abc")
    with pytest.raises(TableCorruptionError, match="outside pool"):
        pool.slice(offset, length)


def test_rejects_overlong_sequence() -> None:
    with pytest.raises(TableCorruptionError, match="too long"):
        PoolBuilder().intern("x" * (MAX_LENGTH + 1))


def test_to_bytes_is_utf32() -> None:
    assert StringPool("aß").to_bytes() == b"a\0\0\0\xdf\0\0\0"
