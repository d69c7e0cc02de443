"""
Configuration constants for quadmatch.

This module contains all configurable settings including:
- Supported image extensions
- Fingerprint and matching defaults
- The MatchConfig structure passed to the extractor and comparator
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from fractions import Fraction
from typing import Optional

from .errors import ConfigError

# Extensions picked up by the directory scan (compared case-insensitively)
IMAGE_EXTENSIONS = {'.jpg', '.jpeg'}

# Extensions Pillow can decode that may be enabled with --extensions
SUPPORTED_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    '.heic', '.heif',
}

# Longer side of the normalized raster, in pixels
DEFAULT_MAX_DIMENSION = 250

# Total quadrant target; cells per axis = DEFAULT_SPLIT_QUADRANTS // 2
DEFAULT_SPLIT_QUADRANTS = 32

# Per-channel similarity threshold, tolerance per cell is 1 - threshold
# Higher = stricter matching (0-1 range)
DEFAULT_SIMILARITY_THRESHOLD = 0.85

# Fraction of distinct colors, by frequency rank, discarded as background
DEFAULT_BACKGROUND_REMOVAL_FRACTION = 0.05

# Cap on corpus size (None = unlimited)
DEFAULT_MAX_IMAGES = 1000

# Default number of parallel workers for extraction and matching
DEFAULT_WORKERS = 4

# Luminance pre-filter: auto-enable when corpus has >= this many images
PREFILTER_AUTO_THRESHOLD = 2000

# Largest denominator used when turning float ratios into exact fractions
RATIO_MAX_DENOMINATOR = 1_000_000


def to_ratio(value: float) -> Fraction:
    """Convert a user-facing decimal (e.g. 0.85) to an exact fraction (17/20)."""
    return Fraction(str(value)).limit_denominator(RATIO_MAX_DENOMINATOR)


@dataclass(frozen=True)
class MatchConfig:
    """
    Settings for one fingerprinting and matching run.

    Attributes:
        max_dimension: Cap on the normalized raster's longer side
        split_quadrants: Grid cell target; per-axis count is half of it
        similarity_threshold: Per-channel similarity threshold in (0, 1]
        background_removal_fraction: Fraction of distinct colors dropped
        max_images: Optional cap on the number of images scanned
        workers: Number of parallel workers
        use_prefilter: Force the luminance pre-filter on/off, None for auto
    """
    max_dimension: int = DEFAULT_MAX_DIMENSION
    split_quadrants: int = DEFAULT_SPLIT_QUADRANTS
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    background_removal_fraction: float = DEFAULT_BACKGROUND_REMOVAL_FRACTION
    max_images: Optional[int] = DEFAULT_MAX_IMAGES
    workers: int = DEFAULT_WORKERS
    use_prefilter: Optional[bool] = None

    @property
    def elements_per_dimension(self) -> int:
        """Number of grid cells along each axis."""
        return self.split_quadrants // 2

    def threshold_ratio(self) -> Fraction:
        """Similarity threshold as an exact fraction."""
        return to_ratio(self.similarity_threshold)

    def tolerance_ratio(self) -> Fraction:
        """Allowed per-cell deviation as a fraction of the larger value."""
        return 1 - self.threshold_ratio()

    def removal_ratio(self) -> Fraction:
        """Background removal fraction as an exact fraction."""
        return to_ratio(self.background_removal_fraction)

    def validate(self) -> 'MatchConfig':
        """
        Check every setting, raising ConfigError on the first invalid one.

        Returns:
            self, so construction and validation can be chained
        """
        if not _is_int(self.max_dimension) or self.max_dimension <= 0:
            raise ConfigError(f"max_dimension must be a positive integer, got {self.max_dimension!r}")

        if (not _is_int(self.split_quadrants) or self.split_quadrants <= 0
                or self.split_quadrants % 2 != 0):
            raise ConfigError(
                f"split_quadrants must be a positive even integer, got {self.split_quadrants!r}"
            )

        threshold = _as_ratio('similarity_threshold', self.similarity_threshold)
        if not 0 < threshold <= 1:
            raise ConfigError(f"similarity_threshold must be in (0, 1], got {self.similarity_threshold}")

        fraction = _as_ratio('background_removal_fraction', self.background_removal_fraction)
        if not 0 <= fraction <= 1:
            raise ConfigError(
                f"background_removal_fraction must be in [0, 1], got {self.background_removal_fraction}"
            )

        if self.max_images is not None and (not _is_int(self.max_images) or self.max_images < 1):
            raise ConfigError(f"max_images must be a positive integer or None, got {self.max_images!r}")

        if not _is_int(self.workers) or self.workers < 1:
            raise ConfigError(f"workers must be a positive integer, got {self.workers!r}")

        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_ratio(name: str, value) -> Fraction:
    """Exact fraction of a real int or float setting; bools and strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return to_ratio(value)
