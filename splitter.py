"""
File splitting — computes block boundaries and populates blocks from a single
sequential read of the source file.
"""

# filefrag/splitter.py

import os
import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from block import Block, InMemory, OnDisk, Persistence
from errors import (
    DestinationUnavailableError,
    FragmentationImpossibleError,
    SourceUnavailableError,
)
from identity import IdentityProvider
from units import parse_size, format_size

log = logging.getLogger('filefrag')


@dataclass(frozen=True)
class ChunkPlan:
    """
    Block layout for one source file.

    With extra_block=False the last of `pieces` blocks absorbs the remainder.
    With extra_block=True a non-zero remainder gets its own trailing block.
    """

    block_size: int
    pieces: int
    remainder: int
    extra_block: bool = False

    @property
    def block_count(self) -> int:
        if self.extra_block and self.remainder:
            return self.pieces + 1
        return self.pieces

    def sizes(self) -> List[int]:
        if self.extra_block:
            sizes = [self.block_size] * self.pieces
            if self.remainder:
                sizes.append(self.remainder)
            return sizes
        return [self.block_size] * (self.pieces - 1) + [self.block_size + self.remainder]


def plan_fixed(source_size: int, pieces: int) -> ChunkPlan:
    """Plan `pieces` blocks of equal size, the last one taking the remainder."""
    if pieces <= 0:
        raise FragmentationImpossibleError(f"Invalid number of pieces '{pieces}'")
    if pieces > source_size:
        raise FragmentationImpossibleError(
            f"Cannot split {source_size} bytes into {pieces} pieces: "
            f"number of pieces larger than file size"
        )
    return ChunkPlan(source_size // pieces, pieces, source_size % pieces)


def plan_dynamic(source_size: int, max_block_size: int) -> ChunkPlan:
    """Plan blocks of at most `max_block_size`, with any remainder as an extra block."""
    if max_block_size <= 0:
        raise FragmentationImpossibleError(f"Invalid max block size '{max_block_size}'")
    if source_size <= max_block_size:
        return ChunkPlan(source_size, 1, 0, extra_block=True)
    return ChunkPlan(max_block_size, source_size // max_block_size,
                     source_size % max_block_size, extra_block=True)


class Splitter:
    def __init__(self, config=None, identity: Optional[IdentityProvider] = None):
        self.config = config
        if identity is None:
            identity = IdentityProvider.from_config(config) if config else IdentityProvider()
        self.identity = identity

    @property
    def name_prefix(self) -> Optional[str]:
        return self.config.name_prefix if self.config else None

    def split(self, source, pieces: int,
              persistence: Optional[Persistence] = None) -> List[Block]:
        """Split `source` into exactly `pieces` blocks."""
        source = self._check_source(source)
        plan = plan_fixed(os.path.getsize(source), pieces)
        return self._split_into_blocks(source, plan, persistence)

    def split_dynamic(self, source, max_block_size,
                      persistence: Optional[Persistence] = None) -> List[Block]:
        """Split `source` into as many blocks as needed, none larger than `max_block_size`."""
        source = self._check_source(source)
        try:
            max_size = parse_size(max_block_size)
        except ValueError:
            raise FragmentationImpossibleError(f"Invalid max block size '{max_block_size}'") from None
        plan = plan_dynamic(os.path.getsize(source), max_size)
        return self._split_into_blocks(source, plan, persistence)

    def _check_source(self, source) -> str:
        source = os.fsdecode(source)
        if not os.path.exists(source):
            raise SourceUnavailableError(f"Source file not found: {source}")
        if not os.path.isfile(source):
            raise SourceUnavailableError(f"Source is not a regular file: {source}")
        if not os.access(source, os.R_OK):
            raise SourceUnavailableError(f"Source file is not readable: {source}")
        return source

    def _resolve_persistence(self, persistence: Optional[Persistence]) -> Persistence:
        if persistence is None:
            return InMemory()
        if isinstance(persistence, OnDisk):
            if persistence.name_prefix is None and self.name_prefix is not None:
                persistence = replace(persistence, name_prefix=self.name_prefix)
            try:
                os.makedirs(persistence.save_dir, exist_ok=True)
            except OSError as e:
                raise DestinationUnavailableError(
                    f"Could not create save directory {os.fsdecode(persistence.save_dir)}: {e}"
                ) from e
        return persistence

    def _split_into_blocks(self, source: str, plan: ChunkPlan,
                           persistence: Optional[Persistence]) -> List[Block]:
        persistence = self._resolve_persistence(persistence)
        file_id = self.identity.file_id(source)

        log.info(f"Splitting {source} into {plan.block_count} blocks "
                 f"of {format_size(plan.block_size)} (set {file_id})")

        blocks = []
        with open(source, 'rb') as f:
            for index, size in enumerate(plan.sizes()):
                data = f.read(size)
                block = Block(size, index, file_id, persistence).set_content(data)
                log.debug(f"  Block {index}: {len(data)} bytes")
                blocks.append(block)

        log.info(f"  ✓ Split complete: {len(blocks)} blocks")
        return blocks
