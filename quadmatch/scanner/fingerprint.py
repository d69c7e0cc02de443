"""
Fingerprint extraction for the scanner package.

A fingerprint is three grids (red, green, blue) holding the summed channel
intensity of every pixel that falls in each grid cell. Before summing, the
most frequent exact colors of the image are discarded so that flat
backgrounds (sky, studio backdrops) do not dominate every cell.

Pixels are mapped to cells from their global (x, y) coordinate: each axis
is split into chunks by divide_evenly and a coordinate belongs to the chunk
whose cumulative offset range contains it.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Optional, Sequence, Union

from ..config import MatchConfig, to_ratio
from ..models import Fingerprint, PixelTable
from .dependencies import Image, np


def divide_evenly(length: int, parts: int) -> list[int]:
    """
    Split length into parts chunks whose sizes differ by at most 1.

    The first (length % parts) chunks get the extra unit.

    Examples:
        >>> divide_evenly(10, 3)
        [4, 3, 3]
        >>> divide_evenly(3, 5)
        [1, 1, 1, 0, 0]
    """
    if parts <= 0:
        raise ValueError(f"parts must be positive, got {parts}")

    quotient, remainder = divmod(length, parts)
    return [quotient + 1 if i < remainder else quotient for i in range(parts)]


def cell_index(coords: np.ndarray, chunks: Sequence[int]) -> np.ndarray:
    """
    Map global coordinates to the index of the chunk containing them.

    Chunk i covers [offset_i, offset_i + chunks[i]) where offset_i is the
    sum of the preceding chunks. Empty chunks never receive a coordinate.
    """
    ends = np.cumsum(np.asarray(chunks, dtype=np.int64))
    return np.searchsorted(ends, coords, side='right')


def extract_pixels(raster: Image.Image) -> PixelTable:
    """
    Enumerate every pixel of an RGB raster as (x, y, color).

    Order is column-major (x outer, y inner), which fixes the tie-break
    order used by background removal.
    """
    if raster.mode != 'RGB':
        raster = raster.convert('RGB')

    width, height = raster.size
    # (H, W, 3) -> (W, H, 3) so that flattening walks x outer, y inner
    rgb = np.asarray(raster, dtype=np.uint8).transpose(1, 0, 2).reshape(-1, 3)

    xs = np.repeat(np.arange(width, dtype=np.int64), height)
    ys = np.tile(np.arange(height, dtype=np.int64), width)

    channels = rgb.astype(np.uint32)
    packed = (channels[:, 0] << 16) | (channels[:, 1] << 8) | channels[:, 2]

    return PixelTable(xs=xs, ys=ys, rgb=rgb, packed=packed)


def find_background_colors(
    pixels: PixelTable,
    removal_fraction: Union[float, Fraction],
) -> np.ndarray:
    """
    Return the most frequent colors to discard as background.

    Distinct colors are ranked by pixel count (descending), ties broken
    by first appearance in enumeration order. The top
    floor(distinct * removal_fraction) colors are returned.

    Args:
        pixels: Pixel table of one raster
        removal_fraction: Fraction of distinct colors to discard

    Returns:
        Packed colors to remove (possibly empty)
    """
    ratio = removal_fraction if isinstance(removal_fraction, Fraction) else to_ratio(removal_fraction)

    if len(pixels) == 0:
        return np.empty(0, dtype=np.uint32)

    colors, first_seen, counts = np.unique(pixels.packed, return_index=True, return_counts=True)

    remove_count = len(colors) * ratio.numerator // ratio.denominator
    if remove_count == 0:
        return np.empty(0, dtype=np.uint32)

    # lexsort: last key is primary
    ranking = np.lexsort((first_seen, -counts.astype(np.int64)))
    return colors[ranking[:remove_count]]


def extract_fingerprint(raster: Image.Image, config: Optional[MatchConfig] = None) -> Fingerprint:
    """
    Compute the fingerprint of a normalized raster.

    Args:
        raster: RGB image, normally the output of normalize_image
        config: Grid size and background removal settings

    Returns:
        Fingerprint with three (n, n) int64 grids, n = split_quadrants // 2.
        An image whose pixels are all background yields all-zero grids.
    """
    config = config or MatchConfig()
    n = config.elements_per_dimension

    pixels = extract_pixels(raster)
    background = find_background_colors(pixels, config.removal_ratio())

    if len(background):
        keep = ~np.isin(pixels.packed, background)
        xs, ys, rgb = pixels.xs[keep], pixels.ys[keep], pixels.rgb[keep]
    else:
        xs, ys, rgb = pixels.xs, pixels.ys, pixels.rgb
    del pixels

    column = cell_index(xs, divide_evenly(raster.width, n))
    row = cell_index(ys, divide_evenly(raster.height, n))
    cells = row * n + column

    grids = []
    for channel in range(3):
        # Float weights are exact here: sums stay far below 2**53
        sums = np.bincount(cells, weights=rgb[:, channel], minlength=n * n)
        grids.append(sums.astype(np.int64).reshape(n, n))

    return Fingerprint(red=grids[0], green=grids[1], blue=grids[2])


__all__ = [
    'divide_evenly',
    'cell_index',
    'extract_pixels',
    'find_background_colors',
    'extract_fingerprint',
]
