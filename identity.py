"""
Identifiers for fragment sets and standalone blocks.

A fragment set ID is derived from the source file's absolute path, so splitting
the same file twice yields the same ID. A standalone block ID is derived from a
high-resolution clock reading and is only unlikely to collide.
"""

# filefrag/identity.py

import hashlib
import os
import struct
import time
import logging
from typing import Optional

from errors import IdentityError

log = logging.getLogger('filefrag')

DEFAULT_ALGORITHM = 'md5'
FILE_ID_LENGTH = 12
BLOCK_ID_LENGTH = 8

_LONG = struct.Struct('>q')


def long_to_bytes(value: int) -> bytes:
    """Pack a signed 64-bit integer as 8 big-endian bytes."""
    return _LONG.pack(value)


def bytes_to_long(data: bytes) -> int:
    """Unpack 8 big-endian bytes into a signed 64-bit integer."""
    if len(data) != _LONG.size:
        raise ValueError(f"Expected {_LONG.size} bytes, got {len(data)}")
    return _LONG.unpack(data)[0]


class IdentityProvider:
    def __init__(self, algorithm: str = DEFAULT_ALGORITHM,
                 file_id_length: int = FILE_ID_LENGTH,
                 block_id_length: int = BLOCK_ID_LENGTH):
        self.algorithm = algorithm
        self.file_id_length = file_id_length
        self.block_id_length = block_id_length

    @classmethod
    def from_config(cls, config) -> 'IdentityProvider':
        return cls(config.digest_algorithm, config.file_id_length, config.block_id_length)

    def digest(self, data: bytes) -> str:
        """Hex digest of `data` using the configured algorithm."""
        try:
            h = hashlib.new(self.algorithm, usedforsecurity=False)
        except (ValueError, TypeError) as e:
            raise IdentityError(f"Digest algorithm '{self.algorithm}' is not available: {e}") from e
        h.update(data)
        return h.hexdigest()

    def file_id(self, path) -> str:
        """Deterministic fragment set ID for the file at `path`."""
        abs_path = os.path.abspath(os.fsdecode(path))
        file_id = self.digest(os.fsencode(abs_path))[-self.file_id_length:]
        log.debug(f"File ID for {abs_path}: {file_id}")
        return file_id

    def fresh_id(self, seed: Optional[int] = None) -> str:
        """Unique-enough ID for a block that belongs to no fragment set."""
        if seed is None:
            seed = time.perf_counter_ns()
        return self.digest(long_to_bytes(seed))[-self.block_id_length:]
