# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""Flat storage for replacement sequences.

Every distinct replacement sequence is stored once, back to back, in a
single string. Table entries point into it with an ``(offset, length)``
pair counted in codepoints.
"""

from typing import NamedTuple

from .errors import TableCorruptionError

MAX_OFFSET = 2**32 - 1
MAX_LENGTH = 2**16 - 1


class SequenceRef(NamedTuple):
    offset: int
    length: int


class StringPool:
    __slots__ = ("_data",)

    def __init__(self, data: str):
        self._data = data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, StringPool) and self._data == other._data

    def contains(self, ref: SequenceRef) -> bool:
        return 0 <= ref.offset and 0 <= ref.length and ref.offset + ref.length <= len(self._data)

    def slice(self, offset: int, length: int) -> str:
        if not self.contains(SequenceRef(offset, length)):
            raise TableCorruptionError(
                f"sequence {offset}+{length} outside pool of {len(self._data)}", "pool"
            )
        return self._data[offset : offset + length]

    def resolve(self, ref: SequenceRef) -> str:
        return self.slice(ref.offset, ref.length)

    def to_bytes(self) -> bytes:
        return self._data.encode("utf-32-le")


class PoolBuilder:
    def __init__(self):
        self._chunks: list[str] = []
        self._size = 0
        self._seen: dict[str, SequenceRef] = {}

    def intern(self, sequence: str) -> SequenceRef:
        if (ref := self._seen.get(sequence)) is not None:
            return ref
        if len(sequence) > MAX_LENGTH:
            raise TableCorruptionError(f"sequence of {len(sequence)} codepoints too long", "pool")
        if self._size + len(sequence) > MAX_OFFSET:
            raise TableCorruptionError("pool exceeds 32-bit offsets", "pool")
        ref = SequenceRef(self._size, len(sequence))
        self._chunks.append(sequence)
        self._size += len(sequence)
        self._seen[sequence] = ref
        return ref

    def finish(self) -> StringPool:
        return StringPool("".join(self._chunks))
