# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""UTS #46 mapping status table.

The table is built from ``IdnaMappingTable.txt``. Each line gives a
codepoint range, a status and, for mapped and deviation entries, the
replacement sequence as space-separated hex codepoints::

    0041          ; mapped                 ; 0061
    00DF          ; deviation              ; 0073 0073
    200B          ; ignored

Replacement sequences live in a ``StringPool``. Range values only hold a
``SequenceRef`` into it, so the ~5000 mapped codepoints share one string.
"""

import enum
import hashlib
import logging
import struct
from typing import Iterable, Iterator, NamedTuple

from .codec import (
    MAX_CODEPOINT,
    SURROGATES,
    Codepoint,
    RangeTable,
    RangeTableBuilder,
    iter_fields,
    parse_range,
    to_codepoint,
)
from .errors import TableCorruptionError
from .pool import PoolBuilder, SequenceRef, StringPool

_logger = logging.getLogger(__name__)

MAPPING_SOURCE = "IdnaMappingTable.txt"


class Status(enum.IntEnum):
    VALID = 0
    IGNORED = 1
    MAPPED = 2
    DEVIATION = 3
    DISALLOWED = 4
    DISALLOWED_STD3_VALID = 5
    DISALLOWED_STD3_MAPPED = 6

    @classmethod
    def from_field(cls, name: str) -> "Status":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"unknown status {name!r}") from None

    def requires_mapping(self) -> bool:
        return self in (Status.MAPPED, Status.DISALLOWED_STD3_MAPPED)

    def allows_mapping(self) -> bool:
        return self.requires_mapping() or self == Status.DEVIATION


class MappingStatus(NamedTuple):
    """A resolved classification: the status and its replacement, if any.

    ``mapping`` is ``None`` for statuses that carry no replacement. An empty
    string is a replacement that deletes the codepoint.
    """

    status: Status
    mapping: str | None = None

    @property
    def codepoints(self) -> tuple[Codepoint, ...]:
        return tuple(map(ord, self.mapping or ""))

    @property
    def is_std3(self) -> bool:
        return self.status in (Status.DISALLOWED_STD3_VALID, Status.DISALLOWED_STD3_MAPPED)

    def effective(
        self, transitional: bool = False, use_std3_ascii_rules: bool = False
    ) -> "MappingStatus":
        """Fold STD3 and deviation statuses into the one a caller acts on.

        The result is always ``VALID``, ``IGNORED``, ``MAPPED`` or
        ``DISALLOWED``.
        """
        s = self.status
        if s == Status.DISALLOWED_STD3_VALID:
            return _DISALLOWED if use_std3_ascii_rules else _VALID
        if s == Status.DISALLOWED_STD3_MAPPED:
            return _DISALLOWED if use_std3_ascii_rules else MappingStatus(Status.MAPPED, self.mapping)
        if s == Status.DEVIATION:
            return MappingStatus(Status.MAPPED, self.mapping or "") if transitional else _VALID
        return self


_VALID = MappingStatus(Status.VALID)
_DISALLOWED = MappingStatus(Status.DISALLOWED)


class MappingEntry(NamedTuple):
    """Range value stored in the table: a status and a pool reference."""

    status: Status
    ref: SequenceRef | None = None


DEFAULT_ENTRY = MappingEntry(Status.DISALLOWED)

_NO_REF = SequenceRef(0xFFFFFFFF, 0)


def _encode_entry(entry: MappingEntry) -> bytes:
    ref = entry.ref or _NO_REF
    return struct.pack("<BIH", int(entry.status), ref.offset, ref.length)


class MappingTable:
    """Mapping status for every codepoint, for one Unicode version."""

    def __init__(self, ranges: RangeTable[MappingEntry], pool: StringPool, version: str):
        self.ranges = ranges
        self.pool = pool
        self.version = version
        self.validate()

    def __len__(self) -> int:
        return len(self.ranges)

    def classify(self, c: int | str) -> MappingStatus:
        entry = self.ranges.lookup(to_codepoint(c))
        if entry.ref is None:
            return MappingStatus(entry.status)
        return MappingStatus(entry.status, self.pool.resolve(entry.ref))

    def validate(self) -> None:
        self.ranges.validate()
        for entry in (*self.ranges.values, self.ranges.default):
            if entry.ref is not None:
                if not entry.status.allows_mapping():
                    raise TableCorruptionError(
                        f"{entry.status.name} entry carries a sequence", self.ranges.name
                    )
                if not self.pool.contains(entry.ref):
                    raise TableCorruptionError(
                        f"sequence {entry.ref.offset}+{entry.ref.length} outside pool "
                        f"of {len(self.pool)}",
                        self.ranges.name,
                    )
            elif entry.status.requires_mapping():
                raise TableCorruptionError(
                    f"{entry.status.name} entry without a sequence", self.ranges.name
                )
        lo, hi = SURROGATES
        for cp in range(lo, hi + 1):
            if self.ranges.lookup(cp).status != Status.DISALLOWED:
                raise TableCorruptionError(f"surrogate {cp:04X} not disallowed", self.ranges.name)

    def to_bytes(self) -> bytes:
        return (
            self.version.encode("ascii")
            + b"\0"
            + self.ranges.to_bytes(_encode_entry)
            + self.pool.to_bytes()
        )

    def fingerprint(self) -> str:
        return hashlib.sha256(self.to_bytes()).hexdigest()


def _parse_sequence(field: str, source: str, line: int) -> str:
    out = []
    for h in field.split():
        try:
            cp = int(h, 16)
        except ValueError:
            raise TableCorruptionError(f"bad codepoint {h!r} in mapping", source, line) from None
        if not 0 <= cp <= MAX_CODEPOINT or SURROGATES[0] <= cp <= SURROGATES[1]:
            raise TableCorruptionError(f"mapping to non-scalar {h}", source, line)
        out.append(chr(cp))
    return "".join(out)


def parse_mapping_table(
    lines: Iterable[str], source: str = MAPPING_SOURCE
) -> Iterator[tuple[Codepoint, Codepoint, Status, str | None, int]]:
    """Yield ``(start, end, status, mapping, line)`` for each data line."""
    for lineno, fields in iter_fields(lines):
        if len(fields) < 2:
            raise TableCorruptionError("missing status field", source, lineno)
        lo, hi = parse_range(fields[0], source, lineno)
        try:
            status = Status.from_field(fields[1])
        except ValueError as e:
            raise TableCorruptionError(str(e), source, lineno) from None

        mapping = None
        if len(fields) > 2 and (fields[2] or status == Status.DEVIATION):
            if not status.allows_mapping():
                raise TableCorruptionError(f"{fields[1]} entry with a mapping", source, lineno)
            mapping = _parse_sequence(fields[2], source, lineno)
        if status.requires_mapping() and not mapping:
            raise TableCorruptionError(f"{fields[1]} entry without a mapping", source, lineno)
        yield lo, hi, status, mapping, lineno


def build_mapping_table(
    lines: Iterable[str], version: str, source: str = MAPPING_SOURCE
) -> MappingTable:
    builder: RangeTableBuilder[MappingEntry] = RangeTableBuilder(DEFAULT_ENTRY, name=source)
    pool = PoolBuilder()
    for lo, hi, status, mapping, lineno in parse_mapping_table(lines, source):
        ref = None if mapping is None else pool.intern(mapping)
        builder.add(lo, hi, MappingEntry(status, ref), line=lineno)
    builder.force(*SURROGATES, DEFAULT_ENTRY)

    table = MappingTable(builder.finish(), pool.finish(), version)
    _logger.debug(
        "built %s mapping table: %d ranges, %d pooled codepoints",
        version,
        len(table),
        len(table.pool),
    )
    return table
