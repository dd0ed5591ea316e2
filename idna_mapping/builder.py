# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""Build the mapping and joining type tables from Unicode data files.

The two source files are bundled under ``idna_mapping/data`` for the
pinned ``UNICODE_VERSION``. Both carry their version in a header comment
and a build fails if either disagrees with the version asked for.
"""

import logging
import re
import time
from importlib import resources
from typing import Sequence

from .errors import TableCorruptionError
from .joining import JOINING_SOURCE, JoiningTypeTable, build_joining_table
from .mapping import MAPPING_SOURCE, MappingTable, build_mapping_table

_logger = logging.getLogger(__name__)

UNICODE_VERSION = "15.1.0"

_VERSION_PATTERNS = (
    re.compile(r"^#\s*Version:\s*(\d+\.\d+\.\d+)"),
    re.compile(r"^#\s*\w+-(\d+\.\d+\.\d+)\.txt"),
)


def parse_version(version: str) -> tuple[int, int, int]:
    m = re.fullmatch(r"(\d+)\.(\d+)\.(\d+)", version)
    if not m:
        raise ValueError(f"bad Unicode version {version!r}")
    return tuple(map(int, m.groups()))  # type: ignore[return-value]


def read_version(lines: Sequence[str], source: str) -> str:
    """Find the Unicode version declared in a data file's header comments."""
    for line in lines:
        if not line.startswith("#"):
            break
        for pattern in _VERSION_PATTERNS:
            if m := pattern.match(line):
                return m.group(1)
    raise TableCorruptionError("no Unicode version in header", source)


def _check_version(lines: Sequence[str], source: str, version: str):
    found = read_version(lines, source)
    if found != version:
        raise TableCorruptionError(f"data is for Unicode {found}, expected {version}", source)


def read_data(name: str) -> list[str]:
    path = resources.files(__package__) / "data" / name
    return path.read_text(encoding="utf-8").splitlines()


def load_mapping_table(
    lines: Sequence[str] | None = None, version: str = UNICODE_VERSION
) -> MappingTable:
    if lines is None:
        lines = read_data(MAPPING_SOURCE)
    _check_version(lines, MAPPING_SOURCE, version)
    t0 = time.perf_counter()
    table = build_mapping_table(lines, version)
    _logger.debug("mapping table built in %.1f ms", (time.perf_counter() - t0) * 1000)
    return table


def load_joining_table(
    lines: Sequence[str] | None = None, version: str = UNICODE_VERSION
) -> JoiningTypeTable:
    if lines is None:
        lines = read_data(JOINING_SOURCE)
    _check_version(lines, JOINING_SOURCE, version)
    t0 = time.perf_counter()
    table = build_joining_table(lines, version)
    _logger.debug("joining type table built in %.1f ms", (time.perf_counter() - t0) * 1000)
    return table


def build(
    mapping_lines: Sequence[str] | None = None,
    joining_lines: Sequence[str] | None = None,
    version: str = UNICODE_VERSION,
) -> tuple[MappingTable, JoiningTypeTable]:
    """Build both tables for ``version``, from the bundled files by default.

    Raises ``TableCorruptionError`` if either file is malformed, is for a
    different version, or yields a table that fails validation. Neither
    table is returned unless both build.
    """
    mapping = load_mapping_table(mapping_lines, version)
    joining = load_joining_table(joining_lines, version)
    return mapping, joining
