"""
Image analysis module for the scanner package.

Turns one image file into an ImageRecord: decode, normalize, fingerprint.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..config import MatchConfig
from ..models import ImageRecord
from .fingerprint import extract_fingerprint
from .normalizer import normalize_image


def analyze_image(
    filepath: Union[str, Path],
    config: Optional[MatchConfig] = None,
    stream: Optional[BinaryIO] = None,
) -> ImageRecord:
    """
    Fingerprint a single image.

    Args:
        filepath: Path identifying the image
        config: Normalization and fingerprint settings
        stream: Optional binary stream to read instead of opening filepath

    Returns:
        ImageRecord with width, height and fingerprint set and an empty
        match list

    Raises:
        DecodeError: If the image cannot be read or decoded
    """
    config = config or MatchConfig()
    filepath = str(filepath)

    raster = normalize_image(stream if stream is not None else filepath, config.max_dimension)
    try:
        fingerprint = extract_fingerprint(raster, config)
        width, height = raster.size
    finally:
        raster.close()

    return ImageRecord(path=filepath, width=width, height=height, fingerprint=fingerprint)


__all__ = ['analyze_image']
