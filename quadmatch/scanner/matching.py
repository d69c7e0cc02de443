"""
Matching module for the scanner package.

Cross-references every fingerprint against the whole corpus and gives each
record the list of images judged similar to it. Comparisons can be
narrowed with the luminance pre-filter, which never changes the result.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Callable

from ..config import MatchConfig, PREFILTER_AUTO_THRESHOLD
from ..errors import FingerprintShapeError
from ..models import ImageRecord
from ..prefilter import LuminanceIndex, estimate_window_fraction
from ..rendering import image_fragment
from .comparator import similar_to_many
from .dependencies import np, make_progress_bar


class MatchingEngine:
    """
    All-pairs matcher over a fixed, read-only corpus.

    The corpus fingerprints are stacked into one (N, 3, n, n) array once;
    find_matches only reads shared state, so it is safe to call from
    several threads at the same time.
    """

    def __init__(
        self,
        records: list[ImageRecord],
        config: Optional[MatchConfig] = None,
        use_prefilter: Optional[bool] = None,
    ):
        """
        Args:
            records: Fingerprinted corpus
            config: Matching settings
            use_prefilter: Force the pre-filter on/off, or None for auto-select
                based on corpus size
        """
        self.config = config or MatchConfig()
        self.records = list(records)
        self.threshold = self.config.threshold_ratio()
        self._positions = {record.path: i for i, record in enumerate(self.records)}

        n = self.config.elements_per_dimension
        if self.records:
            stacks = []
            for record in self.records:
                stacked = record.fingerprint.stacked()
                if stacked.shape != (3, n, n):
                    raise FingerprintShapeError(
                        f"{record.path}: fingerprint shape {stacked.shape[1:]} does not match "
                        f"configured grid ({n}, {n})"
                    )
                stacks.append(stacked)
            self.stack = np.stack(stacks).astype(np.int64)
        else:
            self.stack = np.zeros((0, 3, n, n), dtype=np.int64)

        if use_prefilter is None:
            use_prefilter = len(self.records) >= PREFILTER_AUTO_THRESHOLD
        self.index: Optional[LuminanceIndex] = None
        if use_prefilter:
            totals = self.stack.reshape(len(self.records), -1).sum(axis=1)
            self.index = LuminanceIndex(totals, self.threshold)

    @property
    def uses_prefilter(self) -> bool:
        return self.index is not None

    def _candidates(self, record: ImageRecord) -> np.ndarray:
        position = self._positions.get(record.path)
        if self.index is None or position is None:
            return np.arange(len(self.records))
        return self.index.get_candidates(position)

    def find_matches(self, record: ImageRecord) -> list[str]:
        """
        Compute the match list of one record.

        Args:
            record: Record to match against the corpus

        Returns:
            Paths of the record itself and every other record judged
            similar, without duplicates, ordered by descending rendered
            image fragment
        """
        candidates = self._candidates(record)
        similar = similar_to_many(self.stack[candidates], record.fingerprint.stacked(), self.threshold)

        entries = {record.path: record}
        for position in candidates[similar]:
            peer = self.records[position]
            if peer.path != record.path:
                entries.setdefault(peer.path, peer)

        size = self.config.max_dimension
        ordered = sorted(entries.values(), key=lambda r: image_fragment(r, size), reverse=True)
        return [r.path for r in ordered]


def match_corpus(
    records: list[ImageRecord],
    config: Optional[MatchConfig] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> list[ImageRecord]:
    """
    Fill in the match list of every record.

    Each worker computes one record's list and returns it; only this
    coordinating function assigns it to the record.

    Args:
        records: Fingerprinted corpus (fully populated)
        config: Matching settings (workers, threshold, pre-filter mode)
        progress_callback: Optional callback(current, total) for progress
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages

    Returns:
        The same records, with matches assigned
    """
    config = config or MatchConfig()
    if not records:
        return []

    engine = MatchingEngine(records, config, use_prefilter=config.use_prefilter)
    if logger:
        mode = "brute force"
        if engine.uses_prefilter:
            width = estimate_window_fraction(engine.threshold)
            mode = f"luminance pre-filter, window {width:.0%} of each total"
        logger.info(f"Matching {len(records):,} images ({mode}, threshold={config.similarity_threshold})")

    pbar = make_progress_bar(len(records), "Matching images", "img", show_progress)
    total = len(records)

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        futures = {
            executor.submit(engine.find_matches, record): record
            for record in records
        }

        for i, future in enumerate(as_completed(futures)):
            record = futures[future]
            record.matches = future.result()

            if pbar is not None:
                pbar.update(1)
            if progress_callback:
                progress_callback(i + 1, total)

    if pbar is not None:
        pbar.close()

    if logger and engine.index is not None:
        stats = engine.index.stats
        logger.info(
            f"Pre-filter: {stats.avg_candidates_per_image:.1f} candidates per image "
            f"({stats.reduction_ratio:.1%} of comparisons skipped)"
        )

    return records


__all__ = ['MatchingEngine', 'match_corpus']
