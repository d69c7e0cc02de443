"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
quadmatch command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..config import (
    DEFAULT_MAX_DIMENSION,
    DEFAULT_SPLIT_QUADRANTS,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_BACKGROUND_REMOVAL_FRACTION,
    DEFAULT_MAX_IMAGES,
    DEFAULT_WORKERS,
)
from ..utils.exporters import EXPORT_FORMATS


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance

    Notes:
        - Matching options default to None so values from the environment
          and ~/.quadmatch/config.json apply when not given
        - Mutually exclusive group for pre-filter control
    """
    parser = argparse.ArgumentParser(
        prog='quadmatch',
        description='Find visually similar images by position-binned color fingerprints',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s /path/to/photos
      Scan .jpg/.jpeg files and print the match groups

  %(prog)s /path/to/photos --export report.html
      Write an HTML review page

  %(prog)s /path/to/photos --threshold 0.9 --export groups.csv --export-format csv
      Stricter matching, results as CSV

  %(prog)s /path/to/photos --extensions .jpg .png --recursive
      Include PNG files and subdirectories
        """
    )

    # Positional argument
    parser.add_argument(
        'directory',
        type=Path,
        nargs='?',
        default=None,
        help='Directory to scan for similar images'
    )

    # Scanning options
    parser.add_argument(
        '-r', '--recursive',
        action='store_true',
        help='Also scan subdirectories'
    )

    parser.add_argument(
        '--extensions',
        nargs='+',
        default=None,
        metavar='EXT',
        help='File extensions to scan. Default: .jpg .jpeg'
    )

    limit_group = parser.add_mutually_exclusive_group()
    limit_group.add_argument(
        '--max-images',
        type=int,
        default=None,
        help=f'Scan at most this many images. Default: {DEFAULT_MAX_IMAGES}'
    )
    limit_group.add_argument(
        '--no-limit',
        action='store_true',
        help='Scan every image found'
    )

    # Matching options
    parser.add_argument(
        '-t', '--threshold',
        type=float,
        default=None,
        help=f'Similarity threshold (0-1], higher=stricter. Default: {DEFAULT_SIMILARITY_THRESHOLD}'
    )

    parser.add_argument(
        '--max-dimension',
        type=int,
        default=None,
        help=f'Longer side of the normalized image. Default: {DEFAULT_MAX_DIMENSION}'
    )

    parser.add_argument(
        '--split-quadrants',
        type=int,
        default=None,
        help=f'Grid cell target, half of it per axis (even). Default: {DEFAULT_SPLIT_QUADRANTS}'
    )

    parser.add_argument(
        '--background-fraction',
        type=float,
        default=None,
        help=f'Fraction of most frequent colors ignored. Default: {DEFAULT_BACKGROUND_REMOVAL_FRACTION}'
    )

    # Pre-filter control (mutually exclusive)
    prefilter_group = parser.add_mutually_exclusive_group()
    prefilter_group.add_argument(
        '--prefilter',
        action='store_true',
        dest='force_prefilter',
        help='Force the luminance pre-filter on'
    )
    prefilter_group.add_argument(
        '--no-prefilter',
        action='store_true',
        dest='no_prefilter',
        help='Force brute-force comparison (disable pre-filter auto-selection)'
    )

    # Performance options
    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help=f'Number of parallel workers. Default: {DEFAULT_WORKERS}'
    )

    # Export options
    parser.add_argument(
        '-e', '--export',
        type=Path,
        help='Export results to file'
    )

    parser.add_argument(
        '--export-format',
        choices=list(EXPORT_FORMATS),
        default='html',
        help='Export format. Default: html'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
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
        >>> args = parse_arguments(['/path/to/photos', '--threshold', '0.9'])
        >>> args.directory
        PosixPath('/path/to/photos')
        >>> args.threshold
        0.9
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
