"""
Similarity comparison for the scanner package.

Two grids are similar when every cell pair (a, b) satisfies
|a - b| <= max(a, b) * (1 - threshold). The threshold is held as an exact
fraction num/den and the test is evaluated on integers as

    |a - b| * den <= max(a, b) * (den - num)

so results at the boundary do not depend on floating point rounding.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Union

from ..config import to_ratio
from ..errors import FingerprintShapeError
from ..models import Fingerprint
from .dependencies import np

Threshold = Union[float, Fraction]


def threshold_terms(threshold: Threshold) -> tuple[int, int]:
    """
    Return (den, den - num) for a threshold num/den.

    The pair multiplies the difference and the larger value respectively.
    """
    ratio = threshold if isinstance(threshold, Fraction) else to_ratio(threshold)
    return ratio.denominator, ratio.denominator - ratio.numerator


def within_threshold(grid1, grid2, threshold: Threshold) -> bool:
    """
    Check whether two channel grids are within tolerance cell by cell.

    Args:
        grid1: First grid of channel sums
        grid2: Second grid, same shape as grid1
        threshold: Similarity threshold in (0, 1]

    Returns:
        True if no cell differs by more than its allowed delta

    Raises:
        FingerprintShapeError: If the grids have different shapes
    """
    a = np.asarray(grid1, dtype=np.int64)
    b = np.asarray(grid2, dtype=np.int64)
    if a.shape != b.shape:
        raise FingerprintShapeError(f"Cannot compare grids of shape {a.shape} and {b.shape}")

    diff_scale, max_scale = threshold_terms(threshold)
    return bool(np.all(np.abs(a - b) * diff_scale <= np.maximum(a, b) * max_scale))


def fingerprints_similar(first: Fingerprint, second: Fingerprint, threshold: Threshold) -> bool:
    """Two fingerprints match only if all three channels are within threshold."""
    return all(
        within_threshold(c1, c2, threshold)
        for c1, c2 in zip(first.channels, second.channels)
    )


def similar_to_many(stack: np.ndarray, target: np.ndarray, threshold: Threshold) -> np.ndarray:
    """
    Compare one stacked fingerprint against many at once.

    Args:
        stack: (N, 3, n, n) int64 array of fingerprints
        target: (3, n, n) int64 fingerprint
        threshold: Similarity threshold in (0, 1]

    Returns:
        Boolean array of length N, True where every cell of every channel
        is within tolerance
    """
    if stack.shape[1:] != target.shape:
        raise FingerprintShapeError(
            f"Cannot compare fingerprint of shape {target.shape} against {stack.shape[1:]}"
        )
    if len(stack) == 0:
        return np.zeros(0, dtype=bool)

    diff_scale, max_scale = threshold_terms(threshold)
    passed = np.abs(stack - target) * diff_scale <= np.maximum(stack, target) * max_scale
    return passed.reshape(len(stack), -1).all(axis=1)


__all__ = [
    'threshold_terms',
    'within_threshold',
    'fingerprints_similar',
    'similar_to_many',
]
