"""
Scanner package for quadmatch.

Provides image normalization, fingerprint extraction, similarity
comparison and corpus-wide matching.

Public API:
- find_image_files: Discover image files in directories
- resize_keep_aspect: Aspect-preserving target size
- normalize_image: Decode and downscale an image
- divide_evenly: Split a length into near-equal chunks
- extract_pixels: Enumerate a raster's pixels
- find_background_colors: Most frequent colors to discard
- extract_fingerprint: Position-binned color sums of a raster
- within_threshold: Tolerance test on one channel grid
- fingerprints_similar: Tolerance test on all three channels
- analyze_image: Fingerprint one image file
- analyze_images_parallel: Fingerprint many images in parallel
- MatchingEngine / match_corpus: All-pairs matching
- scan_corpus / scan_directory: Full pipeline
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .file_discovery import find_image_files
from .normalizer import resize_keep_aspect, normalize_image
from .fingerprint import (
    divide_evenly,
    cell_index,
    extract_pixels,
    find_background_colors,
    extract_fingerprint,
)
from .comparator import within_threshold, fingerprints_similar, similar_to_many
from .analysis import analyze_image
from .matching import MatchingEngine, match_corpus
from .parallel import analyze_images_parallel, scan_corpus, scan_directory

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # File discovery
    'find_image_files',
    # Normalization
    'resize_keep_aspect',
    'normalize_image',
    # Fingerprints
    'divide_evenly',
    'cell_index',
    'extract_pixels',
    'find_background_colors',
    'extract_fingerprint',
    # Comparison
    'within_threshold',
    'fingerprints_similar',
    'similar_to_many',
    # Pipeline
    'analyze_image',
    'analyze_images_parallel',
    'MatchingEngine',
    'match_corpus',
    'scan_corpus',
    'scan_directory',
    # Feature detection
    'has_heif_support',
]
