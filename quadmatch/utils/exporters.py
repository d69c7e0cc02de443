"""
Export functionality for quadmatch.

Provides functions to export match results to HTML, TXT, CSV and JSON.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import TextIO

from ..config import DEFAULT_MAX_DIMENSION
from ..models import ScanResult
from ..rendering import render_report_html
from .formatters import format_count

EXPORT_FORMATS = ('html', 'txt', 'csv', 'json')


def _export_txt(result: ScanResult, file_handle: TextIO) -> None:
    """
    Export match groups to TXT format.

    Args:
        result: Scan result to export
        file_handle: Open file handle to write to
    """
    file_handle.write("SIMILAR IMAGE REPORT\n")
    file_handle.write("=" * 70 + "\n")

    for group in result.match_groups():
        file_handle.write(f"\nGroup {group.id} ({format_count(group.image_count, 'image')}):\n")
        for img in group.images:
            file_handle.write(f"  {img.path}\n")

    if result.failures:
        file_handle.write("\n\nSKIPPED FILES\n")
        file_handle.write("-" * 70 + "\n")
        for failure in result.failures:
            file_handle.write(f"  {failure.path}: {failure.error}\n")


def _export_csv(result: ScanResult, file_handle: TextIO) -> None:
    """
    Export match groups to CSV format.

    Args:
        result: Scan result to export
        file_handle: Open file handle to write to

    Notes:
        CSV includes: group_id, path, width, height, greater_dimension
    """
    writer = csv.writer(file_handle, lineterminator='\n')
    writer.writerow(['group_id', 'path', 'width', 'height', 'greater_dimension'])

    for group in result.match_groups():
        for img in group.images:
            writer.writerow([group.id, img.path, img.width, img.height, img.greater_dimension])


def export_results(
    result: ScanResult,
    output_path: Path,
    export_format: str = 'html',
    image_size: int = DEFAULT_MAX_DIMENSION,
) -> None:
    """
    Export match results to a file.

    Args:
        result: Scan result to export
        output_path: Path to output file
        export_format: One of 'html', 'txt', 'csv', 'json'. Default: 'html'
        image_size: Pixel size of each image's dominant dimension (html only)

    Raises:
        ValueError: If export_format is not supported
        OSError: If file cannot be written
    """
    if export_format not in EXPORT_FORMATS:
        raise ValueError(
            f"Unsupported export format: {export_format}. Use one of {', '.join(EXPORT_FORMATS)}."
        )

    newline = '' if export_format == 'csv' else None
    with open(output_path, 'w', encoding='utf-8', newline=newline) as f:
        if export_format == 'html':
            f.write(render_report_html(result, size=image_size))
        elif export_format == 'txt':
            _export_txt(result, f)
        elif export_format == 'csv':
            _export_csv(result, f)
        elif export_format == 'json':
            json.dump(result.to_dict(), f, indent=2)


__all__ = ['export_results', 'EXPORT_FORMATS']
