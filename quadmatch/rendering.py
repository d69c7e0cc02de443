"""
HTML rendering of match results.

Each image is an <img> tag sized on its dominant dimension. Each match
group is an inline-flex <div> of those tags, and groups are separated by
horizontal rules.
"""

from __future__ import annotations

import html
from typing import Callable, Optional

from .config import DEFAULT_MAX_DIMENSION
from .models import ImageRecord, MatchGroup, ScanResult

SourceMapper = Callable[[str], str]


def image_fragment(
    record: ImageRecord,
    size: int = DEFAULT_MAX_DIMENSION,
    src_for: Optional[SourceMapper] = None,
) -> str:
    """
    Render one image tag.

    Args:
        record: Image to render
        size: Pixel size of the dominant dimension
        src_for: Maps a path to the src attribute (default: the path itself)

    Returns:
        e.g. '<img width="250px" src="/photos/a.jpg"></img>'
    """
    src = src_for(record.path) if src_for else record.path
    return f'<img {record.greater_dimension}="{size}px" src="{html.escape(src, quote=True)}"></img>'


def group_block(
    images: list[ImageRecord],
    size: int = DEFAULT_MAX_DIMENSION,
    src_for: Optional[SourceMapper] = None,
) -> str:
    """Render one match group as an inline-flex block."""
    fragments = [image_fragment(img, size, src_for) for img in images]
    return '<div style="display:inline-flex">\n<br>' + '\n<br>\n'.join(fragments) + '\n<br>\n</div>'


def render_groups(
    groups: list[MatchGroup],
    size: int = DEFAULT_MAX_DIMENSION,
    src_for: Optional[SourceMapper] = None,
) -> str:
    """Join group blocks with horizontal rules."""
    return '\n<hr>\n'.join(group_block(g.images, size, src_for) for g in groups)


def render_report_html(
    result: ScanResult,
    size: int = DEFAULT_MAX_DIMENSION,
    src_for: Optional[SourceMapper] = None,
    title: str = "Similar images",
) -> str:
    """
    Render a complete HTML document for a scan.

    Args:
        result: Scan result to render
        size: Pixel size of each image's dominant dimension
        src_for: Maps a path to the src attribute
        title: Document title

    Returns:
        HTML page with the match groups and a list of skipped files
    """
    groups = result.match_groups()
    parts = [
        '<!DOCTYPE html>',
        '<html>',
        '<head>',
        '<meta charset="utf-8">',
        f'<title>{html.escape(title)}</title>',
        '</head>',
        '<body>',
        f'<h1>{html.escape(title)}</h1>',
        f'<p>{len(result.records)} images scanned, {len(groups)} match groups, '
        f'{len(result.failures)} skipped</p>',
        render_groups(groups, size, src_for),
    ]

    if result.failures:
        parts.append('<hr>')
        parts.append('<h2>Skipped files</h2>')
        parts.append('<ul>')
        for failure in result.failures:
            parts.append(f'<li>{html.escape(failure.path)}: {html.escape(failure.error)}</li>')
        parts.append('</ul>')

    parts.extend(['</body>', '</html>'])
    return '\n'.join(parts) + '\n'


__all__ = [
    'image_fragment',
    'group_block',
    'render_groups',
    'render_report_html',
]
