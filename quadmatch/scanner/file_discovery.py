"""
File discovery module for the scanner package.

Enumerates image files in a directory using a case-insensitive extension
check, with optional recursion and a cap on the number of files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from ..config import IMAGE_EXTENSIONS
from .dependencies import HAS_HEIF_SUPPORT


def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    """Lower-case extensions and make sure each has a leading dot."""
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith('.') else f'.{ext}')
    return normalized


def find_image_files(
    root_path: str | Path,
    recursive: bool = False,
    extensions: Optional[Iterable[str]] = None,
    max_images: Optional[int] = None,
) -> list[str]:
    """
    Find image files in the given directory.

    Args:
        root_path: Directory path to search for images
        recursive: If True, search subdirectories recursively
        extensions: Extensions to accept (default: .jpg and .jpeg)
        max_images: Keep at most this many files (None = all)

    Returns:
        Sorted list of absolute file paths as strings

    Notes:
        - Extensions are compared case-insensitively on the real suffix
        - HEIC/HEIF files are skipped if pillow-heif is not installed
        - Files reached through several symlinks are listed once
    """
    root = Path(root_path)

    extensions_to_scan = normalize_extensions(extensions or IMAGE_EXTENSIONS)
    if not HAS_HEIF_SUPPORT:
        extensions_to_scan -= {'.heic', '.heif'}

    images = []
    seen = set()

    iterator = root.rglob('*') if recursive else root.glob('*')

    for filepath in iterator:
        if filepath.is_file() and filepath.suffix.lower() in extensions_to_scan:
            resolved = str(filepath.resolve())
            if resolved not in seen:
                seen.add(resolved)
                images.append(resolved)

    images.sort()
    if max_images is not None:
        images = images[:max_images]

    return images


__all__ = ['find_image_files', 'normalize_extensions']
