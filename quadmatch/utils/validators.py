"""
Input checks for the quadmatch entry points.

The CLI and the review server run these before any image is decoded, so a
bad directory or export destination is reported up front instead of after
a long fingerprinting pass. Each check returns (is_valid, error_message)
and leaves the exit code or HTTP status to the caller.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Container, Optional, Union

from .exporters import EXPORT_FORMATS

PathLike = Union[str, Path]


def validate_scan_directory(directory: Optional[PathLike]) -> tuple[bool, str]:
    """
    Check that a directory can be listed for images.

    Examples:
        >>> validate_scan_directory('/nonexistent/photos')
        (False, 'Directory not found: /nonexistent/photos')
    """
    if directory is None or str(directory) == "":
        return False, "No directory given"

    path = Path(directory)
    if not path.exists():
        return False, f"Directory not found: {path}"
    if not path.is_dir():
        return False, f"Not a directory: {path}"
    if not os.access(path, os.R_OK | os.X_OK):
        return False, f"Cannot list directory (permission denied): {path}"

    return True, ""


def validate_export_target(output_path: Optional[PathLike], export_format: str) -> tuple[bool, str]:
    """
    Check that results can be written to output_path in export_format.

    No export requested (output_path None) is valid.
    """
    if output_path is None:
        return True, ""

    if export_format not in EXPORT_FORMATS:
        return False, f"Unsupported export format: {export_format}"

    path = Path(output_path)
    if path.is_dir():
        return False, f"Export path is a directory: {path}"

    parent = path.parent
    if not parent.is_dir():
        return False, f"Export directory does not exist: {parent}"
    if not os.access(parent, os.W_OK):
        return False, f"Export directory is not writable: {parent}"

    return True, ""


def preview_status(path: str, scanned_paths: Container[str]) -> tuple[int, str]:
    """
    Decide whether the review server may send an image file.

    Only files that took part in the scan are served.

    Returns:
        (HTTP status, error message); (200, "") when the file can be sent
    """
    if not path:
        return 400, "No path specified"
    if path not in scanned_paths:
        return 403, "Access denied: file not part of this scan"
    if not os.path.isfile(path):
        return 404, "File no longer exists"
    return 200, ""


__all__ = [
    'validate_scan_directory',
    'validate_export_target',
    'preview_status',
]
