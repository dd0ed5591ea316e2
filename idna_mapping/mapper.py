# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
"""The UTS #46 mapping step over a stream of characters.

Disallowed characters come out as U+FFFD so the caller's validity check
rejects the label later, rather than the mapping step failing part way.
"""

from typing import Iterable, Iterator

from .mapping import MappingTable, Status
from .tables import mapping_table

REPLACEMENT_CHARACTER = "\ufffd"

# Already in their mapped form under every option combination.
_FAST_PATH = frozenset(".-0123456789abcdefghijklmnopqrstuvwxyz")


def map_chars(
    chars: Iterable[str],
    *,
    transitional: bool = False,
    use_std3_ascii_rules: bool = False,
    ignored_as_errors: bool = False,
    table: MappingTable | None = None,
) -> Iterator[str]:
    if table is None:
        table = mapping_table()
    for c in chars:
        if c in _FAST_PATH:
            yield c
            continue
        status = table.classify(c).effective(transitional, use_std3_ascii_rules)
        if status.status == Status.VALID:
            yield c
        elif status.status == Status.IGNORED:
            if ignored_as_errors:
                yield REPLACEMENT_CHARACTER
        elif status.status == Status.MAPPED:
            yield from status.mapping or ""
        else:
            yield REPLACEMENT_CHARACTER


def map_text(text: str, **kwargs) -> str:
    return "".join(map_chars(text, **kwargs))
