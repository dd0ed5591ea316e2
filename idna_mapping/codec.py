# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""Interval tables over the Unicode codepoint space.

A table is a sorted run of disjoint, closed ``[start, end]`` ranges, each
tagged with a value, plus a default for every codepoint no range covers.
Lookups bisect the range starts, so a table of R ranges answers in
O(log R) without allocating.
"""

import bisect
import re
import struct
from typing import Any, Callable, Generic, Iterable, Iterator, NamedTuple, TypeVar

from .errors import InvalidCodepointError, TableCorruptionError

NUM_CODEPOINTS = 0x110000
MAX_CODEPOINT = NUM_CODEPOINTS - 1
SURROGATES = (0xD800, 0xDFFF)

Codepoint = int
V = TypeVar("V")


class CodepointRange(NamedTuple):
    start: Codepoint
    end: Codepoint
    value: Any


def to_codepoint(c: int | str) -> Codepoint:
    """Normalize a lookup argument to an integer codepoint.

    Accepts an ``int`` in 0..=0x10FFFF or a one-character ``str``. Anything
    else is a caller error and is rejected here, before it reaches a table.
    """
    if isinstance(c, str):
        if len(c) != 1:
            raise InvalidCodepointError(f"expected a single character, got {len(c)}")
        return ord(c)
    if not isinstance(c, int):
        raise TypeError(f"codepoint must be int or str, not {type(c).__name__}")
    if not 0 <= c <= MAX_CODEPOINT:
        raise InvalidCodepointError(f"codepoint {c:#x} outside 0..=0x10FFFF")
    return c


def format_range(start: Codepoint, end: Codepoint) -> str:
    return f"{start:04X}" if start == end else f"{start:04X}..{end:04X}"


_RANGE = re.compile(r"^([0-9A-F]{4,6})(?:\.\.([0-9A-F]{4,6}))?$")


def parse_range(field: str, source: str, line: int) -> tuple[Codepoint, Codepoint]:
    """Parse a UCD ``XXXX`` or ``XXXX..YYYY`` codepoint field."""
    m = _RANGE.match(field)
    if not m:
        raise TableCorruptionError(f"bad codepoint range {field!r}", source, line)
    lo = int(m.group(1), 16)
    hi = int(m.group(2), 16) if m.group(2) else lo
    if not lo <= hi <= MAX_CODEPOINT:
        raise TableCorruptionError(f"bad codepoint range {field!r}", source, line)
    return lo, hi


def iter_fields(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line number, fields)`` for each data line of a UCD-style file."""
    for lineno, raw in enumerate(lines, 1):
        line = raw.split("#", 1)[0].strip()
        if line:
            yield lineno, [f.strip() for f in line.split(";")]


class RangeTable(Generic[V]):
    __slots__ = ("name", "starts", "ends", "values", "default")

    def __init__(
        self,
        starts: Iterable[Codepoint],
        ends: Iterable[Codepoint],
        values: Iterable[V],
        default: V,
        name: str = "table",
    ):
        self.name = name
        self.starts: tuple[Codepoint, ...] = tuple(starts)
        self.ends: tuple[Codepoint, ...] = tuple(ends)
        self.values: tuple[V, ...] = tuple(values)
        self.default = default
        if not len(self.starts) == len(self.ends) == len(self.values):
            raise TableCorruptionError("column lengths differ", name)

    def __len__(self) -> int:
        return len(self.starts)

    def lookup(self, cp: Codepoint) -> V:
        i = bisect.bisect_right(self.starts, cp) - 1
        if i >= 0 and cp <= self.ends[i]:
            return self.values[i]
        return self.default

    def ranges(self) -> Iterator[CodepointRange]:
        for start, end, value in zip(self.starts, self.ends, self.values):
            yield CodepointRange(start, end, value)

    def validate(self) -> None:
        prev_end = -1
        for start, end, _ in self.ranges():
            if not 0 <= start <= end <= MAX_CODEPOINT:
                raise TableCorruptionError(
                    f"range {format_range(start, end)} outside codepoint space", self.name
                )
            if start <= prev_end:
                raise TableCorruptionError(
                    f"range {format_range(start, end)} overlaps or precedes {prev_end:04X}",
                    self.name,
                )
            prev_end = end

    def to_bytes(self, encode_value: Callable[[V], bytes]) -> bytes:
        """Serialize as little-endian ``(count, (start, end, value)*, default)``."""
        out = bytearray(struct.pack("<I", len(self)))
        for start, end, value in self.ranges():
            out += struct.pack("<II", start, end)
            out += encode_value(value)
        out += encode_value(self.default)
        return bytes(out)


def _split_around(
    ranges: list[tuple[Codepoint, Codepoint, V]], lo: Codepoint, hi: Codepoint, value: V
) -> list[tuple[Codepoint, Codepoint, V]]:
    out: list[tuple[Codepoint, Codepoint, V]] = []
    for start, end, v in ranges:
        if end < lo or start > hi:
            out.append((start, end, v))
            continue
        if start < lo:
            out.append((start, lo - 1, v))
        if end > hi:
            out.append((hi + 1, end, v))
    out.append((lo, hi, value))
    out.sort(key=lambda r: r[0])
    return out


class RangeTableBuilder(Generic[V]):
    """Accumulate ascending ranges and produce a compact ``RangeTable``.

    Ranges must arrive sorted by start and must not overlap. ``finish``
    applies forced overrides, merges adjacent ranges that carry equal
    values, and drops ranges equal to the default since lookups fall back
    to it anyway.
    """

    def __init__(self, default: V, name: str = "table"):
        self.default = default
        self.name = name
        self._ranges: list[tuple[Codepoint, Codepoint, V]] = []
        self._forced: list[tuple[Codepoint, Codepoint, V]] = []

    def add(self, start: Codepoint, end: Codepoint, value: V, line: int | None = None):
        if not 0 <= start <= end <= MAX_CODEPOINT:
            raise TableCorruptionError(
                f"range {start:#x}..{end:#x} outside codepoint space", self.name, line
            )
        if self._ranges and start <= self._ranges[-1][1]:
            prev = self._ranges[-1]
            raise TableCorruptionError(
                f"range {format_range(start, end)} overlaps or precedes "
                f"{format_range(prev[0], prev[1])}",
                self.name,
                line,
            )
        self._ranges.append((start, end, value))

    def force(self, start: Codepoint, end: Codepoint, value: V):
        """Override whatever was added for ``start..=end`` once the table is finished."""
        if not 0 <= start <= end <= MAX_CODEPOINT:
            raise TableCorruptionError(
                f"forced range {start:#x}..{end:#x} outside codepoint space", self.name
            )
        self._forced.append((start, end, value))

    def finish(self) -> RangeTable[V]:
        ranges = self._ranges
        for lo, hi, value in self._forced:
            ranges = _split_around(ranges, lo, hi, value)

        starts: list[Codepoint] = []
        ends: list[Codepoint] = []
        values: list[V] = []
        for start, end, value in ranges:
            if value == self.default:
                continue
            if ends and ends[-1] == start - 1 and values[-1] == value:
                ends[-1] = end
            else:
                starts.append(start)
                ends.append(end)
                values.append(value)

        table = RangeTable(starts, ends, values, self.default, name=self.name)
        table.validate()
        return table
