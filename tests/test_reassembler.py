"""
Tests for reassembler.py
"""
import unittest
import tempfile
import os
import sys
from unittest.mock import Mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from block import Block, InMemory, OnDisk
from errors import (
    BlockReadError,
    DestinationUnavailableError,
    FragmentNameError,
    SourceUnavailableError,
)
from reassembler import Reassembler, fragment_index
from splitter import Splitter


class TestFragmentIndex(unittest.TestCase):
    def test_parses_last_suffix(self):
        self.assertEqual(fragment_index('frag_abc-12'), 12)
        self.assertEqual(fragment_index('/some/dir/my-file-name-3'), 3)

    def test_non_numeric_suffix(self):
        with self.assertRaises(FragmentNameError):
            fragment_index('frag_abc-last')
        with self.assertRaises(ValueError):
            fragment_index('README')


class TestReassembler(unittest.TestCase):
    def setUp(self):
        self.reassembler = Reassembler()
        self.splitter = Splitter()
        self.temp_dir = tempfile.mkdtemp()
        self.frag_dir = os.path.join(self.temp_dir, 'frags')
        self.output = os.path.join(self.temp_dir, 'out.bin')

    def tearDown(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_source(self, data: bytes) -> str:
        path = os.path.join(self.temp_dir, 'source.bin')
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def _read_output(self) -> bytes:
        with open(self.output, 'rb') as f:
            return f.read()

    def test_roundtrip_from_blocks_for_every_piece_count(self):
        data = bytes(range(256)) * 2 + b'tail'
        source = self._write_source(data)
        for pieces in (1, 2, 7, 100, len(data)):
            if os.path.exists(self.output):
                os.remove(self.output)
            blocks = self.splitter.split(source, pieces, InMemory())
            self.reassembler.reassemble_from_blocks(blocks, self.output)
            self.assertEqual(self._read_output(), data)

    def test_roundtrip_from_disk_blocks(self):
        data = b'The quick brown fox jumps over the lazy dog' * 50
        source = self._write_source(data)
        blocks = self.splitter.split_dynamic(source, 128, OnDisk(self.frag_dir))
        self.reassembler.reassemble_from_blocks(blocks, self.output)
        self.assertEqual(self._read_output(), data)

    def test_blocks_are_not_resorted(self):
        blocks = [Block(1, i, 'abc').set_content(c) for i, c in enumerate([b'a', b'b', b'c'])]
        self.reassembler.reassemble_from_blocks(reversed(blocks), self.output)
        self.assertEqual(self._read_output(), b'cba')

    def test_unreadable_block_raises(self):
        good = Block(1, 0, 'abc').set_content(b'a')
        bad = Mock(index=1, id='abc', backing_path='/gone/frag_abc-1')
        bad.get_content.return_value = None
        with self.assertRaises(BlockReadError):
            self.reassembler.reassemble_from_blocks([good, bad], self.output)
        self.assertEqual(self._read_output(), b'a')

    def test_output_is_appended(self):
        with open(self.output, 'wb') as f:
            f.write(b'head:')
        blocks = [Block(1, 0, 'abc').set_content(b'x')]
        self.reassembler.reassemble_from_blocks(blocks, self.output)
        self.assertEqual(self._read_output(), b'head:x')

    def test_output_directory_is_rejected(self):
        with self.assertRaises(DestinationUnavailableError):
            self.reassembler.reassemble_from_blocks([], self.temp_dir)

    def test_output_in_missing_directory_is_rejected(self):
        missing = os.path.join(self.temp_dir, 'nope', 'out.bin')
        with self.assertRaises(DestinationUnavailableError):
            self.reassembler.reassemble_from_blocks([], missing)

    def test_directory_order_by_numeric_suffix(self):
        os.makedirs(self.frag_dir)
        for name, content in (('frag_abc-2', b'C'), ('frag_abc-10', b'D'),
                              ('frag_abc-0', b'A'), ('frag_abc-1', b'B')):
            with open(os.path.join(self.frag_dir, name), 'wb') as f:
                f.write(content)

        self.reassembler.reassemble_from_directory(self.frag_dir, self.output)
        self.assertEqual(self._read_output(), b'ABCD')

    def test_directory_roundtrip(self):
        data = b'line one\nline two\r\n\x00\xffbinary' * 30
        source = self._write_source(data)
        self.splitter.split(source, 9, OnDisk(self.frag_dir))
        self.reassembler.reassemble_from_directory(self.frag_dir, self.output)
        self.assertEqual(self._read_output(), data)

    def test_directory_separator_between_fragments_only(self):
        os.makedirs(self.frag_dir)
        for i, content in enumerate((b'a', b'b', b'c')):
            with open(os.path.join(self.frag_dir, f'frag_x-{i}'), 'wb') as f:
                f.write(content)

        self.reassembler.reassemble_from_directory(self.frag_dir, self.output, separator=b'\n')
        self.assertEqual(self._read_output(), b'a\nb\nc')

    def test_directory_ignores_subdirectories(self):
        os.makedirs(os.path.join(self.frag_dir, 'nested'))
        with open(os.path.join(self.frag_dir, 'frag_x-0'), 'wb') as f:
            f.write(b'only')
        self.reassembler.reassemble_from_directory(self.frag_dir, self.output)
        self.assertEqual(self._read_output(), b'only')

    def test_directory_with_bad_name(self):
        os.makedirs(self.frag_dir)
        with open(os.path.join(self.frag_dir, 'notes.txt'), 'wb') as f:
            f.write(b'?')
        with self.assertRaises(FragmentNameError):
            self.reassembler.reassemble_from_directory(self.frag_dir, self.output)

    def test_missing_directory(self):
        with self.assertRaises(SourceUnavailableError):
            self.reassembler.reassemble_from_directory(self.frag_dir, self.output)

    def test_file_instead_of_directory(self):
        source = self._write_source(b'x')
        with self.assertRaises(SourceUnavailableError):
            self.reassembler.reassemble_from_directory(source, self.output)


if __name__ == '__main__':
    unittest.main()
