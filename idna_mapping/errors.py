# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.


class TableCorruptionError(Exception):
    """Raised when table data cannot be built or fails validation.

    Only table construction raises this. A lookup against a table that was
    built successfully never does.
    """

    def __init__(self, message: str, source: str | None = None, line: int | None = None):
        self.source = source
        self.line = line
        if source is not None and line is not None:
            message = f"{source}:{line}: {message}"
        elif source is not None:
            message = f"{source}: {message}"
        super().__init__(message)


class InvalidCodepointError(ValueError):
    """Raised for a lookup argument that is not a Unicode scalar in 0..=0x10FFFF."""
