"""
Parallel processing module for the scanner package.

Runs fingerprint extraction over a corpus on a thread pool, then (after
every extraction has finished) runs matching over the completed corpus.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, Optional, Callable

from ..config import MatchConfig
from ..errors import DecodeError
from ..models import ImageRecord, ScanFailure, ScanResult
from .analysis import analyze_image
from .dependencies import make_progress_bar
from .file_discovery import find_image_files
from .matching import match_corpus

_logger = logging.getLogger(__name__)


def analyze_images_parallel(
    filepaths: list[str],
    config: Optional[MatchConfig] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> tuple[list[ImageRecord], list[ScanFailure]]:
    """
    Fingerprint multiple images in parallel.

    A file that cannot be decoded is logged and returned as a ScanFailure;
    it never stops the other workers.

    Args:
        filepaths: List of image paths to analyze
        config: Settings (worker count, grid size, ...)
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages

    Returns:
        Tuple of (records sorted by path, failures sorted by path)
    """
    config = config or MatchConfig()
    if not filepaths:
        return [], []

    log = logger or _logger
    records: list[ImageRecord] = []
    failures: list[ScanFailure] = []

    pbar = make_progress_bar(len(filepaths), "Fingerprinting images", "img", show_progress)

    # Batch progress callbacks to reduce overhead (every 100 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 100
    callback_interval = 1.0  # seconds

    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        futures = {
            executor.submit(analyze_image, path, config): path
            for path in filepaths
        }

        for i, future in enumerate(as_completed(futures)):
            try:
                records.append(future.result())
            except DecodeError as e:
                log.warning(f"Skipping {e.path}: {e.reason}")
                failures.append(ScanFailure(path=futures[future], error=e.reason))

            if pbar is not None:
                pbar.update(1)

            if progress_callback:
                current_time = time.time()
                should_callback = (
                    (i + 1) % callback_batch_size == 0 or
                    current_time - last_callback_time >= callback_interval or
                    i == len(filepaths) - 1  # Always callback on last item
                )
                if should_callback:
                    progress_callback(i + 1, len(filepaths))
                    last_callback_time = current_time

    if pbar is not None:
        pbar.close()

    records.sort(key=lambda r: r.path)
    failures.sort(key=lambda f: f.path)
    return records, failures


def scan_corpus(
    filepaths: Iterable[str],
    config: Optional[MatchConfig] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> ScanResult:
    """
    Fingerprint and match a list of images.

    Args:
        filepaths: Image paths (capped at config.max_images)
        config: Run settings, validated before any work starts
        show_progress: Whether to show tqdm progress bars
        logger: Optional logger for status messages

    Returns:
        ScanResult with matched records and skipped files

    Raises:
        ConfigError: If the configuration is invalid
    """
    config = (config or MatchConfig()).validate()

    paths = list(filepaths)
    if config.max_images is not None and len(paths) > config.max_images:
        if logger:
            logger.info(f"Limiting scan to the first {config.max_images:,} of {len(paths):,} images")
        paths = paths[:config.max_images]

    if logger:
        logger.info(f"Fingerprinting {len(paths):,} images...")
    records, failures = analyze_images_parallel(
        paths, config, show_progress=show_progress, logger=logger,
    )
    if failures and logger:
        logger.warning(f"Could not process {len(failures):,} files")

    # Barrier: matching reads the whole corpus, so it starts only now
    match_corpus(records, config, show_progress=show_progress, logger=logger)

    return ScanResult(records=records, failures=failures)


def scan_directory(
    directory: str | Path,
    config: Optional[MatchConfig] = None,
    recursive: bool = False,
    extensions: Optional[Iterable[str]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> ScanResult:
    """Find images in a directory, then fingerprint and match them."""
    config = (config or MatchConfig()).validate()
    filepaths = find_image_files(
        directory,
        recursive=recursive,
        extensions=extensions,
        max_images=config.max_images,
    )
    return scan_corpus(filepaths, config, show_progress=show_progress, logger=logger)


__all__ = ['analyze_images_parallel', 'scan_corpus', 'scan_directory']
