"""
Report formatting and display for the CLI interface.

Provides functions to print match groups and skipped files in a
human-readable format.
"""

from __future__ import annotations

from ..models import MatchGroup, ScanResult
from ..utils.formatters import format_count


def _format_group_header(group: MatchGroup) -> str:
    """Format a group header line."""
    return f"\nGroup {group.id} ({format_count(group.image_count, 'image')}):"


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def _calculate_statistics(result: ScanResult, groups: list[MatchGroup]) -> dict[str, int]:
    """
    Calculate summary statistics.

    Returns:
        Dictionary with:
        - total_images: Images fingerprinted
        - total_groups: Reported match groups
        - matched_images: Images that appear in at least one group
        - skipped: Files that could not be processed
    """
    matched = {path for g in groups for path in g.paths}
    return {
        'total_images': len(result.records),
        'total_groups': len(groups),
        'matched_images': len(matched),
        'skipped': len(result.failures),
    }


def print_match_report(result: ScanResult) -> None:
    """
    Print a report of similar images.

    Args:
        result: Scan result to display

    Notes:
        - Prints to stdout with formatted sections
        - Groups are ordered by size, largest first
        - Skipped files are listed at the end
    """
    groups = result.match_groups()
    stats = _calculate_statistics(result, groups)

    print("\n" + "=" * 70)
    print("SIMILAR IMAGE REPORT")
    print("=" * 70)

    print(f"\nImages scanned: {stats['total_images']:,}")
    print(f"Match groups found: {stats['total_groups']:,} "
          f"({stats['matched_images']:,} images involved)")

    if groups:
        _print_section_header("MATCH GROUPS")
        for group in groups:
            print(_format_group_header(group))
            for img in group.images:
                print(f"  {img.path}")
                print(f"         {img.resolution} normalized")

    if result.failures:
        _print_section_header(f"SKIPPED FILES ({stats['skipped']:,})")
        for failure in result.failures:
            print(f"  {failure.path}")
            print(f"         {failure.error}")

    print("\n" + "=" * 70)


__all__ = ['print_match_report']
