# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""UTS #46 mapping data and Joining_Type lookups for IDNA processing.

    >>> classify("A")
    MappingStatus(status=<Status.MAPPED: 2>, mapping='a')
    >>> joining_type(0x0644)
    <JoiningType.DUAL_JOINING: 3>

Both tables are immutable and are built from the bundled Unicode data the
first time they are used. Lookups accept an ``int`` codepoint or a
one-character ``str``; anything outside 0..=0x10FFFF raises
``InvalidCodepointError``.
"""

from .builder import UNICODE_VERSION, parse_version
from .errors import InvalidCodepointError, TableCorruptionError
from .joining import (
    LEFT_OR_DUAL_JOINING_MASK,
    RIGHT_OR_DUAL_JOINING_MASK,
    JoiningType,
    JoiningTypeMask,
    JoiningTypeTable,
)
from .mapper import map_chars, map_text
from .mapping import MappingStatus, MappingTable, Status
from .tables import joining_table, mapping_table

__all__ = [
    "UNICODE_VERSION",
    "InvalidCodepointError",
    "JoiningType",
    "JoiningTypeMask",
    "JoiningTypeTable",
    "LEFT_OR_DUAL_JOINING_MASK",
    "MappingStatus",
    "MappingTable",
    "RIGHT_OR_DUAL_JOINING_MASK",
    "Status",
    "TableCorruptionError",
    "classify",
    "joining_table",
    "joining_type",
    "map_chars",
    "map_text",
    "mapping_table",
    "unicode_version",
]


def classify(c: int | str) -> MappingStatus:
    return mapping_table().classify(c)


def joining_type(c: int | str) -> JoiningType:
    return joining_table().joining_type(c)


def unicode_version() -> tuple[int, int, int]:
    """The Unicode version the tables are generated from, e.g. ``(15, 1, 0)``."""
    return parse_version(UNICODE_VERSION)
