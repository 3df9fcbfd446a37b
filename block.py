"""
A block is one contiguous chunk of a source file, held in memory or in a backing file.
"""

# filefrag/block.py

import os
import logging
from dataclasses import dataclass
from typing import Optional, Union

from errors import DestinationConflictError
from identity import IdentityProvider

log = logging.getLogger('filefrag')

DEFAULT_NAME_PREFIX = 'frag_'


@dataclass(frozen=True)
class InMemory:
    """Keep block content in process memory."""


@dataclass(frozen=True)
class OnDisk:
    """Write block content to `<save_dir>/<name_prefix><set id>-<index>`."""

    save_dir: str
    name_prefix: Optional[str] = None

    @property
    def prefix(self) -> str:
        return DEFAULT_NAME_PREFIX if self.name_prefix is None else self.name_prefix


Persistence = Union[InMemory, OnDisk]


def fragment_file_name(name_prefix: str, fragment_set_id: str, index: int) -> str:
    return f"{name_prefix}{fragment_set_id}-{index}"


class Block:
    """
    A chunk of a source file plus its identity and position.

    Content is written once with set_content() and read any number of times
    with get_content(). A disk-backed block refuses to overwrite an existing
    backing file; a memory-backed block simply replaces its content.
    """

    def __init__(self, size: int, index: int, fragment_set_id: str,
                 persistence: Optional[Persistence] = None):
        self.size = size
        self._index = index
        self._fragment_set_id = fragment_set_id
        self.persistence = persistence if persistence is not None else InMemory()
        self._data = None

        if isinstance(self.persistence, OnDisk):
            self.backing_path = os.path.join(
                os.fsdecode(self.persistence.save_dir),
                fragment_file_name(self.persistence.prefix, fragment_set_id, index)
            )
        else:
            self.backing_path = None

    @classmethod
    def standalone(cls, size: int, persistence: Optional[Persistence] = None,
                   identity: Optional[IdentityProvider] = None) -> 'Block':
        """Create a block that belongs to no fragment set, identified by a fresh ID."""
        identity = identity or IdentityProvider()
        return cls(size, 0, identity.fresh_id(), persistence)

    @property
    def id(self) -> str:
        return self._fragment_set_id

    @property
    def index(self) -> int:
        return self._index

    @property
    def on_disk(self) -> bool:
        return self.backing_path is not None

    def set_content(self, data: bytes) -> 'Block':
        """
        Store the block's content and return the block for chaining.

        Raises DestinationConflictError if the backing file already exists;
        the existing file is left untouched.
        """
        data = bytes(data)
        if not self.on_disk:
            self._data = data
            self.size = len(data)
            return self

        try:
            with open(self.backing_path, 'xb') as f:
                f.write(data)
        except FileExistsError:
            raise DestinationConflictError(self.backing_path) from None

        log.debug(f"  Block {self._index} written to {self.backing_path} ({len(data)} bytes)")
        return self

    def get_content(self) -> Optional[bytes]:
        """
        Return the block's content, or None if it cannot be read.
        Callers must treat None as a read failure.
        """
        if not self.on_disk:
            return self._data

        try:
            with open(self.backing_path, 'rb') as f:
                return f.read(self.size)
        except OSError as e:
            log.warning(f"  Could not read block {self._index} from {self.backing_path}: {e}")
            return None

    def __repr__(self):
        where = self.backing_path or 'memory'
        return f"Block(id={self._fragment_set_id!r}, index={self._index}, size={self.size}, at={where!r})"
