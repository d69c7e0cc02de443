"""
Image normalization for the scanner package.

Decodes an image and scales it so its longer side equals the configured
maximum dimension, preserving aspect ratio with floor rounding.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Union

from ..config import DEFAULT_MAX_DIMENSION
from ..errors import DecodeError
from .dependencies import Image, _logger

ImageSource = Union[str, Path, BinaryIO]


def resize_keep_aspect(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """
    Compute the target size for an aspect-preserving resize.

    scale = min(max_dimension / width, max_dimension / height) and each
    side is floored. Integer arithmetic keeps the result exact, so a
    1000x500 image at 250 gives exactly (250, 125).

    Args:
        width: Source width in pixels
        height: Source height in pixels
        max_dimension: Target length of the longer side

    Returns:
        (new_width, new_height), each side at least 1
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    longest = max(width, height)
    new_width = width * max_dimension // longest
    new_height = height * max_dimension // longest
    return max(1, new_width), max(1, new_height)


def _source_name(source: ImageSource) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, 'name', '<stream>'))


def normalize_image(source: ImageSource, max_dimension: int = DEFAULT_MAX_DIMENSION) -> Image.Image:
    """
    Load an image and return its bounded RGB raster.

    Args:
        source: Path or binary stream of the image
        max_dimension: Length of the longer side after resizing

    Returns:
        New RGB image of size resize_keep_aspect(w, h, max_dimension)

    Raises:
        DecodeError: If the source cannot be read or is not a supported image
    """
    name = _source_name(source)

    try:
        with Image.open(source) as img:
            # Force load to detect truncated images early
            img.load()
            if img.mode != 'RGB':
                img = img.convert('RGB')

            size = resize_keep_aspect(img.width, img.height, max_dimension)
            raster = img.resize(size, resample=Image.Resampling.BILINEAR)
    except FileNotFoundError:
        raise DecodeError(name, "File not found")
    except PermissionError:
        raise DecodeError(name, "File not readable (permission denied)")
    except Image.UnidentifiedImageError as e:
        raise DecodeError(name, f"Not a valid image file: {e}") from e
    except Exception as e:
        raise DecodeError(name, f"Failed to decode image: {e}") from e

    _logger.debug(f"Normalized {name} to {raster.width}x{raster.height}")
    return raster


__all__ = ['resize_keep_aspect', 'normalize_image']
