"""
quadmatch
=========
Finds visually similar images by comparing position-binned color
fingerprints.

Features:
- Background-color suppression before fingerprinting
- Per-channel tolerance matching with exact integer arithmetic
- Parallel fingerprinting and matching
- Luminance pre-filter for large collections
- HTML/TXT/CSV/JSON export
- CLI for automation, web page for review
"""

__version__ = "1.0.0"

from .config import MatchConfig, IMAGE_EXTENSIONS
from .errors import QuadmatchError, ConfigError, DecodeError, FingerprintShapeError
from .models import Fingerprint, ImageRecord, MatchGroup, ScanFailure, ScanResult
from .scanner import (
    find_image_files,
    resize_keep_aspect,
    normalize_image,
    divide_evenly,
    extract_fingerprint,
    within_threshold,
    fingerprints_similar,
    analyze_image,
    analyze_images_parallel,
    match_corpus,
    scan_corpus,
    scan_directory,
)
from .prefilter import LuminanceIndex
from .rendering import image_fragment, render_report_html

__all__ = [
    "MatchConfig",
    "IMAGE_EXTENSIONS",
    "QuadmatchError",
    "ConfigError",
    "DecodeError",
    "FingerprintShapeError",
    "Fingerprint",
    "ImageRecord",
    "MatchGroup",
    "ScanFailure",
    "ScanResult",
    "find_image_files",
    "resize_keep_aspect",
    "normalize_image",
    "divide_evenly",
    "extract_fingerprint",
    "within_threshold",
    "fingerprints_similar",
    "analyze_image",
    "analyze_images_parallel",
    "match_corpus",
    "scan_corpus",
    "scan_directory",
    "LuminanceIndex",
    "image_fragment",
    "render_report_html",
]
