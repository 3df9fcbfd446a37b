"""
Byte size units and human-readable size parsing.
"""

# filefrag/units.py

import re
from enum import Enum


class ByteSize(Enum):
    """Binary size units."""

    KB = 1024
    MB = 1024 ** 2
    GB = 1024 ** 3
    TB = 1024 ** 4

    def bytes(self) -> int:
        return self.value


_SIZE_RE = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([kmgt]?b?)?\s*$', re.IGNORECASE)

_SUFFIXES = {
    '': 1,
    'b': 1,
    'k': ByteSize.KB.value,
    'kb': ByteSize.KB.value,
    'm': ByteSize.MB.value,
    'mb': ByteSize.MB.value,
    'g': ByteSize.GB.value,
    'gb': ByteSize.GB.value,
    't': ByteSize.TB.value,
    'tb': ByteSize.TB.value,
}


def byte_value_of(value: int, size: ByteSize) -> int:
    """Convert `value` expressed in `size` units to bytes."""
    return value * size.value


def parse_size(text) -> int:
    """
    Parse a size such as "512", "4MB" or "1.5 kb" into a number of bytes.

    Integers are returned unchanged. Fractional results are truncated.
    """
    if isinstance(text, int):
        return text

    match = _SIZE_RE.match(str(text))
    if not match:
        raise ValueError(f"Invalid size: {text!r}")

    number, suffix = match.groups()
    multiplier = _SUFFIXES[(suffix or '').lower()]
    return int(float(number) * multiplier)


def format_size(num_bytes: int) -> str:
    """Format a byte count for log output."""
    for unit in reversed(ByteSize):
        if num_bytes >= unit.value:
            return f"{num_bytes / unit.value:.1f}{unit.name}"
    return f"{num_bytes}B"
