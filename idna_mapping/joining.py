# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""Joining_Type property table, built from ``DerivedJoiningType.txt``.

Only the lookup lives here. The CheckJoiners rule that consumes it belongs
to the IDNA layer.
"""

import enum
import hashlib
import logging
import struct
from typing import Iterable, Iterator

from .codec import Codepoint, RangeTable, RangeTableBuilder, iter_fields, parse_range, to_codepoint
from .errors import TableCorruptionError

_logger = logging.getLogger(__name__)

JOINING_SOURCE = "DerivedJoiningType.txt"


class JoiningTypeMask(enum.IntFlag):
    NON_JOINING = 1 << 0
    LEFT_JOINING = 1 << 1
    RIGHT_JOINING = 1 << 2
    DUAL_JOINING = 1 << 3
    TRANSPARENT = 1 << 4
    JOIN_CAUSING = 1 << 5

    def intersects(self, other: "JoiningTypeMask") -> bool:
        return bool(self & other)


class JoiningType(enum.IntEnum):
    NON_JOINING = 0
    LEFT_JOINING = 1
    RIGHT_JOINING = 2
    DUAL_JOINING = 3
    TRANSPARENT = 4
    JOIN_CAUSING = 5

    @classmethod
    def from_field(cls, value: str) -> "JoiningType":
        """Accept the short (``D``) or long (``Dual_Joining``) value alias."""
        try:
            return _ALIASES[value.upper()]
        except KeyError:
            raise ValueError(f"unknown joining type {value!r}") from None

    @property
    def mask(self) -> JoiningTypeMask:
        return JoiningTypeMask(1 << self)

    @property
    def is_transparent(self) -> bool:
        return self == JoiningType.TRANSPARENT


_ALIASES = {
    **{c: JoiningType.NON_JOINING for c in ["U", "NON_JOINING"]},
    **{c: JoiningType.LEFT_JOINING for c in ["L", "LEFT_JOINING"]},
    **{c: JoiningType.RIGHT_JOINING for c in ["R", "RIGHT_JOINING"]},
    **{c: JoiningType.DUAL_JOINING for c in ["D", "DUAL_JOINING"]},
    **{c: JoiningType.TRANSPARENT for c in ["T", "TRANSPARENT"]},
    **{c: JoiningType.JOIN_CAUSING for c in ["C", "JOIN_CAUSING"]},
}

LEFT_OR_DUAL_JOINING_MASK = JoiningTypeMask.LEFT_JOINING | JoiningTypeMask.DUAL_JOINING
RIGHT_OR_DUAL_JOINING_MASK = JoiningTypeMask.RIGHT_JOINING | JoiningTypeMask.DUAL_JOINING


class JoiningTypeTable:
    def __init__(self, ranges: RangeTable[JoiningType], version: str):
        self.ranges = ranges
        self.version = version
        ranges.validate()

    def __len__(self) -> int:
        return len(self.ranges)

    def joining_type(self, c: int | str) -> JoiningType:
        return self.ranges.lookup(to_codepoint(c))

    def to_bytes(self) -> bytes:
        return (
            self.version.encode("ascii")
            + b"\0"
            + self.ranges.to_bytes(lambda jt: struct.pack("<B", int(jt)))
        )

    def fingerprint(self) -> str:
        return hashlib.sha256(self.to_bytes()).hexdigest()


def parse_joining_types(
    lines: Iterable[str], source: str = JOINING_SOURCE
) -> Iterator[tuple[Codepoint, Codepoint, JoiningType, int]]:
    for lineno, fields in iter_fields(lines):
        if len(fields) != 2:
            raise TableCorruptionError("expected 'range ; value'", source, lineno)
        lo, hi = parse_range(fields[0], source, lineno)
        try:
            jt = JoiningType.from_field(fields[1])
        except ValueError as e:
            raise TableCorruptionError(str(e), source, lineno) from None
        yield lo, hi, jt, lineno


def build_joining_table(
    lines: Iterable[str], version: str, source: str = JOINING_SOURCE
) -> JoiningTypeTable:
    builder: RangeTableBuilder[JoiningType] = RangeTableBuilder(
        JoiningType.NON_JOINING, name=source
    )
    # The file is grouped by value, not by codepoint.
    for lo, hi, jt, lineno in sorted(parse_joining_types(lines, source)):
        builder.add(lo, hi, jt, line=lineno)

    table = JoiningTypeTable(builder.finish(), version)
    _logger.debug("built %s joining type table: %d ranges", version, len(table))
    return table
