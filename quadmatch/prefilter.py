"""
Luminance-window pre-filter for fast fingerprint matching.

Every cell pair (a, b) that passes the tolerance test satisfies

    min(a, b) >= threshold * max(a, b)

and summing that inequality over all cells and channels gives the same
bound on the total intensities S1 and S2 of two fingerprints. So a
fingerprint with total S can only match fingerprints whose total lies in
[threshold * S, S / threshold]. Sorting the corpus by total and looking up
that window with binary search skips most comparisons without ever
dropping a pair the full comparison would report.

Performance:
- Brute force: O(n^2) grid comparisons
- Pre-filter: O(n log n) lookups plus comparisons inside each window
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from fractions import Fraction
from typing import Sequence, Union

import numpy as np

from .config import to_ratio


@dataclass
class PrefilterStats:
    """Statistics about pre-filter usage."""
    total_images: int = 0
    total_candidates: int = 0

    @property
    def avg_candidates_per_image(self) -> float:
        """Average number of candidates checked per image."""
        if self.total_images == 0:
            return 0.0
        return self.total_candidates / self.total_images

    @property
    def reduction_ratio(self) -> float:
        """How much we reduced comparisons vs brute force."""
        brute_force = self.total_images * self.total_images
        if brute_force == 0:
            return 0.0
        return 1.0 - (self.total_candidates / brute_force)


class LuminanceIndex:
    """
    Sorted index of fingerprint totals.

    Usage:
        index = LuminanceIndex(totals, threshold=0.85)

        for idx in range(len(totals)):
            candidates = index.get_candidates(idx)
            # Only compare these candidates (idx itself included)
    """

    def __init__(self, totals: Sequence[int], threshold: Union[float, Fraction]):
        """
        Initialize the index.

        Args:
            totals: Total intensity of each fingerprint, by corpus position
            threshold: Similarity threshold in (0, 1]
        """
        ratio = threshold if isinstance(threshold, Fraction) else to_ratio(threshold)
        if not 0 < ratio <= 1:
            raise ValueError(f"threshold must be in (0, 1], got {threshold}")

        self.threshold = ratio
        self.totals = [int(t) for t in totals]
        self.order = np.argsort(np.asarray(self.totals, dtype=np.int64), kind='stable')
        self.sorted_totals = np.asarray(self.totals, dtype=np.int64)[self.order]
        self.stats = PrefilterStats(total_images=len(self.totals))
        self._stats_lock = threading.Lock()

    def window(self, total: int) -> tuple[int, int]:
        """
        Return the inclusive range of totals that can match total.

        Bounds are ceil(t * S) and floor(S / t), computed exactly.
        """
        num, den = self.threshold.numerator, self.threshold.denominator
        low = -((-total * num) // den)
        high = (total * den) // num
        return low, high

    def get_candidates(self, idx: int) -> np.ndarray:
        """
        Get corpus positions whose totals fall in idx's window.

        Args:
            idx: Corpus position of the query fingerprint

        Returns:
            Sorted array of candidate positions, including idx itself
        """
        low, high = self.window(self.totals[idx])
        start = np.searchsorted(self.sorted_totals, low, side='left')
        stop = np.searchsorted(self.sorted_totals, high, side='right')

        candidates = np.sort(self.order[start:stop])
        with self._stats_lock:
            self.stats.total_candidates += len(candidates)
        return candidates

    @property
    def size(self) -> int:
        """Number of fingerprints in the index."""
        return len(self.totals)


def estimate_window_fraction(threshold: Union[float, Fraction]) -> float:
    """
    Relative width of a match window, (1/t - t).

    A rough guide to how much of a uniformly spread corpus each image is
    compared against; real corpora cluster, so actual savings vary.
    """
    ratio = threshold if isinstance(threshold, Fraction) else to_ratio(threshold)
    return float(1 / ratio - ratio)


__all__ = ['LuminanceIndex', 'PrefilterStats', 'estimate_window_fraction']
