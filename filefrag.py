#!/usr/bin/env python3
"""
filefrag - Split files into ordered fragments and join them back.

Main entry point and CLI.
"""

# filefrag/filefrag.py

import argparse
import sys
import logging
from typing import List, Optional

from config import Config
from block import Block, InMemory, OnDisk
from errors import FragmentationError
from reassembler import Reassembler
from splitter import Splitter

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(message)s'
)
log = logging.getLogger('filefrag')


class FileFrag:
    """Main orchestrator for filefrag operations."""

    def __init__(self, config_path: str = None):
        self.config = Config(config_path)
        self.splitter = Splitter(self.config)
        self.reassembler = Reassembler(self.config)

    def split(self, source: str, pieces: Optional[int] = None, max_size=None,
              save_dir: Optional[str] = None, prefix: Optional[str] = None,
              in_memory: bool = False) -> List[Block]:
        """Split a file by piece count or by maximum block size."""
        if (pieces is None) == (max_size is None):
            raise ValueError("Exactly one of pieces or max_size must be given")

        if in_memory:
            persistence = InMemory()
        else:
            persistence = OnDisk(save_dir or self.config.save_dir, prefix)

        if pieces is not None:
            return self.splitter.split(source, pieces, persistence)
        return self.splitter.split_dynamic(source, max_size, persistence)

    def join(self, fragments_dir: str, output: str) -> str:
        """Join a directory of fragments into a single file."""
        return self.reassembler.reassemble_from_directory(fragments_dir, output)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='filefrag',
        description='Split files into ordered fragments and join them back'
    )
    parser.add_argument('-c', '--config', default='~/.config/filefrag/config.json',
                        help='Config file path')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every block')

    subparsers = parser.add_subparsers(dest='command', help='Command')

    # split
    p_split = subparsers.add_parser('split', help='Split a file into fragments')
    p_split.add_argument('source', help='File to split')
    policy = p_split.add_mutually_exclusive_group(required=True)
    policy.add_argument('-n', '--pieces', type=int, help='Number of pieces')
    policy.add_argument('-m', '--max-size', help='Maximum block size (e.g., 4MB)')
    p_split.add_argument('-o', '--out', help='Directory for the fragments')
    p_split.add_argument('-p', '--prefix', help='Fragment file name prefix')

    # join
    p_join = subparsers.add_parser('join', help='Join a directory of fragments')
    p_join.add_argument('fragments_dir', help='Directory holding the fragments')
    p_join.add_argument('output', help='Output file')

    # init
    subparsers.add_parser('init', help='Write a default config')

    args = parser.parse_args(argv)

    if args.verbose:
        log.setLevel(logging.DEBUG)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == 'init':
        Config.write_default(args.config)
        return

    frag = FileFrag(args.config)

    try:
        if args.command == 'split':
            frag.split(args.source, pieces=args.pieces, max_size=args.max_size,
                       save_dir=args.out, prefix=args.prefix)
        elif args.command == 'join':
            frag.join(args.fragments_dir, args.output)
    except (FragmentationError, ValueError) as e:
        log.error(str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
