# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""Process-wide tables, built from the bundled data on first use.

Each table has its own lock so either can be built (or replaced in tests)
without touching the other. A table is published only after its build
succeeded.
"""

import threading

from . import builder
from .joining import JoiningTypeTable
from .mapping import MappingTable

_mapping_lock = threading.Lock()
_joining_lock = threading.Lock()
_mapping: MappingTable | None = None
_joining: JoiningTypeTable | None = None


def mapping_table() -> MappingTable:
    global _mapping
    table = _mapping
    if table is None:
        with _mapping_lock:
            if _mapping is None:
                _mapping = builder.load_mapping_table()
            table = _mapping
    return table


def joining_table() -> JoiningTypeTable:
    global _joining
    table = _joining
    if table is None:
        with _joining_lock:
            if _joining is None:
                _joining = builder.load_joining_table()
            table = _joining
    return table
