"""
Formatting helpers for quadmatch reports and log lines.
"""

from __future__ import annotations


def format_count(count: int, noun: str) -> str:
    """
    Format a count with its noun, pluralized by a trailing 's'.

    Examples:
        >>> format_count(1, 'image')
        '1 image'
        >>> format_count(1234, 'match group')
        '1,234 match groups'
    """
    return f"{count:,} {noun}" if count == 1 else f"{count:,} {noun}s"


def format_duration(seconds: float) -> str:
    """
    Format an elapsed time.

    Examples:
        >>> format_duration(0.042)
        '42ms'
        >>> format_duration(7.25)
        '7.2s'
        >>> format_duration(150)
        '2m 30s'
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes}m {rest}s"


def format_percent(value: float) -> str:
    """
    Format a 0-1 ratio as a percentage.

    Examples:
        >>> format_percent(0.85)
        '85%'
        >>> format_percent(0.125)
        '12.5%'
    """
    return f"{value * 100:g}%"


__all__ = ['format_count', 'format_duration', 'format_percent']
