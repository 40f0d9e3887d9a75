"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
boardhash command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..hashing.algorithms import HashAlgorithm
from ..workflows.rehash import RehashMode
from ..workflows.similarity import SimilarityFormula


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--db',
        dest='db_path',
        default=None,
        help='Path to the hash store (default: from config)'
    )

    parser.add_argument(
        '--upload-root',
        default=None,
        help='Directory stored original paths are relative to (default: from config)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        dest='as_json',
        help='Print results as JSON'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance with one subcommand per operation
    """
    parser = argparse.ArgumentParser(
        prog='boardhash',
        description='Perceptual image hashing and similarity for moderation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s hash photo.jpg --algorithm perceptual
      Print the pHash of a file

  %(prog)s ingest uploads/images/original/img_1.jpg --approve
      Register a stored original with its hashes

  %(prog)s compare 0a1b2-c3d4e-f5a6b-7c8d9-e0f1a 1b2c3-d4e5f-a6b7c-8d9e0-f1a2b
      Show the similarity of two stored images

  %(prog)s rehash --mode batch
      Recompute hashes for the next batch of approved images
        """
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    hash_parser = subparsers.add_parser('hash', help='Hash an image file')
    hash_parser.add_argument('file', type=Path, help='Image file to hash')
    hash_parser.add_argument(
        '-a', '--algorithm',
        choices=[a.value for a in HashAlgorithm],
        default=None,
        help='Algorithm to run. Default: aHash, dHash and pHash with blocks'
    )

    ingest_parser = subparsers.add_parser('ingest', help='Register a stored original')
    ingest_parser.add_argument(
        'path',
        help="Stored path of the original, e.g. 'uploads/images/original/x.jpg'"
    )
    ingest_parser.add_argument(
        '--approve',
        action='store_true',
        help='Store the image as approved instead of pending'
    )

    compare_parser = subparsers.add_parser('compare', help='Compare two stored images')
    compare_parser.add_argument('image_id_a', help='First image id')
    compare_parser.add_argument('image_id_b', help='Second image id')
    compare_parser.add_argument(
        '-f', '--formula',
        choices=[f.value for f in SimilarityFormula],
        default=SimilarityFormula.LEGACY.value,
        help='Similarity formula. Default: legacy'
    )

    rehash_parser = subparsers.add_parser('rehash', help='Recompute stored hashes')
    rehash_parser.add_argument(
        '-m', '--mode',
        choices=[m.value for m in RehashMode],
        default=RehashMode.BATCH.value,
        help='Rehash one image or the next batch. Default: batch'
    )
    rehash_parser.add_argument(
        'image_id',
        nargs='?',
        default=None,
        help='Image to rehash (single mode)'
    )
    rehash_parser.add_argument(
        '-b', '--batch-size',
        type=int,
        default=None,
        help='Images per batch (default: from config)'
    )

    candidates_parser = subparsers.add_parser('candidates', help='Find near-duplicates of a stored image')
    candidates_parser.add_argument('image_id', help='Image to find candidates for')
    candidates_parser.add_argument(
        '-d', '--max-distance',
        type=int,
        default=None,
        help='Largest pHash distance to report. Default: 15'
    )

    subparsers.add_parser('stats', help='Show hash store statistics')

    config_parser = subparsers.add_parser('config', help='Show or create the user configuration')
    config_parser.add_argument(
        '-i', '--init',
        action='store_true',
        help='Create an example config file'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['compare', 'a', 'b', '--formula', 'normalized'])
        >>> args.formula
        'normalized'
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
