"""
Reassembly of blocks, or of a directory of persisted fragments, into one file.
"""

# filefrag/reassembler.py

import os
import logging
from typing import Iterable, List

from block import Block
from errors import (
    BlockReadError,
    DestinationUnavailableError,
    FragmentNameError,
    SourceUnavailableError,
)

log = logging.getLogger('filefrag')


def fragment_index(name: str) -> int:
    """Parse the numeric index after the last '-' of a fragment file name."""
    suffix = os.path.basename(name).rsplit('-', 1)[-1]
    try:
        return int(suffix)
    except ValueError:
        raise FragmentNameError(f"Fragment '{name}' has no numeric index suffix") from None


class Reassembler:
    def __init__(self, config=None):
        self.config = config

    @property
    def separator(self) -> bytes:
        return self.config.separator if self.config else b''

    def list_fragments(self, fragments_dir) -> List[str]:
        """Fragment paths in `fragments_dir`, ordered by index."""
        fragments_dir = os.fspath(fragments_dir)
        if not os.path.isdir(fragments_dir):
            raise SourceUnavailableError(f"Fragments directory not found: {fragments_dir}")
        if not os.access(fragments_dir, os.R_OK):
            raise SourceUnavailableError(f"Fragments directory is not readable: {fragments_dir}")

        try:
            with os.scandir(fragments_dir) as entries:
                names = [e.name for e in entries if e.is_file()]
        except OSError as e:
            raise SourceUnavailableError(f"Could not list {fragments_dir}: {e}") from e

        return [os.path.join(fragments_dir, n) for n in sorted(names, key=fragment_index)]

    def reassemble_from_directory(self, fragments_dir, output_file, separator: bytes = None) -> str:
        """
        Append every fragment in `fragments_dir` to `output_file`, in index order.

        `separator` (default: the configured one) is written between fragments,
        never after the last.
        """
        if separator is None:
            separator = self.separator
        fragments = self.list_fragments(fragments_dir)

        log.info(f"Joining {len(fragments)} fragments from {fragments_dir} -> {output_file}")
        with self._open_output(output_file) as out_f:
            for position, path in enumerate(fragments):
                try:
                    with open(path, 'rb') as frag_f:
                        data = frag_f.read()
                except OSError as e:
                    raise BlockReadError(f"Could not read fragment {path}: {e}") from e
                self._write(out_f, data, output_file)
                if separator and position != len(fragments) - 1:
                    self._write(out_f, separator, output_file)
                log.debug(f"  Appended {path} ({len(data)} bytes)")

        log.info(f"  ✓ Join complete: {output_file}")
        return os.fspath(output_file)

    def reassemble_from_blocks(self, blocks: Iterable[Block], output_file) -> str:
        """
        Append the content of each block to `output_file` in the given order.
        Blocks are not re-sorted. If a block cannot be read, the blocks before
        it have already been appended and stay in the output.
        """
        count = 0
        with self._open_output(output_file) as out_f:
            for block in blocks:
                data = block.get_content()
                if data is None:
                    raise BlockReadError(
                        f"Could not read block {block.index} of set {block.id}"
                        + (f" from {block.backing_path}" if block.backing_path else "")
                    )
                self._write(out_f, data, output_file)
                count += 1

        log.info(f"  ✓ Reassembled {count} blocks -> {output_file}")
        return os.fspath(output_file)

    def _open_output(self, output_file):
        output_file = os.fspath(output_file)
        if os.path.exists(output_file) and not os.path.isfile(output_file):
            raise DestinationUnavailableError(f"Output is not a regular file: {output_file}")
        try:
            return open(output_file, 'ab')
        except OSError as e:
            raise DestinationUnavailableError(f"Could not open output file {output_file}: {e}") from e

    @staticmethod
    def _write(out_f, data: bytes, output_file):
        try:
            out_f.write(data)
        except OSError as e:
            raise DestinationUnavailableError(f"Could not write to {output_file}: {e}") from e
