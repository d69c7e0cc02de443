"""
Data models for quadmatch.

Contains dataclasses for fingerprints, per-image records, match groups and
the overall result of a scan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import os

import numpy as np


@dataclass(frozen=True, eq=False)
class Fingerprint:
    """
    Position-binned color sums of one normalized raster.

    Attributes:
        red: Per-cell sum of red intensity
        green: Per-cell sum of green intensity
        blue: Per-cell sum of blue intensity

    All three grids are int64 arrays of identical square shape, indexed
    as [y_cell, x_cell].
    """
    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray

    @property
    def shape(self) -> tuple[int, int]:
        return self.red.shape

    @property
    def channels(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.red, self.green, self.blue

    @property
    def total_intensity(self) -> int:
        """Sum over every cell of every channel."""
        return int(self.red.sum() + self.green.sum() + self.blue.sum())

    def stacked(self) -> np.ndarray:
        """Return the grids as one (3, n, n) array."""
        return np.stack(self.channels)

    def to_dict(self) -> dict:
        return {
            'red': self.red.tolist(),
            'green': self.green.tolist(),
            'blue': self.blue.tolist(),
        }


@dataclass
class PixelTable:
    """
    Every pixel of a raster in column-major order (x outer, y inner).

    Transient: built once per image, consumed by the fingerprint
    extractor and then dropped.

    Attributes:
        xs: x coordinate of each pixel
        ys: y coordinate of each pixel
        rgb: (N, 3) uint8 color of each pixel
        packed: 24-bit packed color (r << 16 | g << 8 | b) of each pixel
    """
    xs: np.ndarray
    ys: np.ndarray
    rgb: np.ndarray
    packed: np.ndarray

    def __len__(self) -> int:
        return len(self.packed)


@dataclass
class ImageRecord:
    """
    Fingerprint and match list of one source image.

    Attributes:
        path: Identifier of the source image
        width: Width of the normalized raster
        height: Height of the normalized raster
        fingerprint: Color sums per grid cell
        matches: Paths of images judged similar, including this one
    """
    path: str
    width: int = 0
    height: int = 0
    fingerprint: Optional[Fingerprint] = None
    matches: list[str] = field(default_factory=list)

    def __hash__(self):
        return hash(str(self.path))

    def __eq__(self, other):
        if not isinstance(other, ImageRecord):
            return False
        return str(self.path) == str(other.path)

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def greater_dimension(self) -> str:
        """Attribute name a renderer should size the image by."""
        return "width" if self.width > self.height else "height"

    @property
    def resolution(self) -> str:
        """Return normalized resolution as 'WxH' string."""
        return f"{self.width}x{self.height}"

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def peers(self) -> list[str]:
        """Matched paths other than this image's own."""
        return [p for p in self.matches if p != self.path]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'filename': self.filename,
            'width': self.width,
            'height': self.height,
            'resolution': self.resolution,
            'greater_dimension': self.greater_dimension,
            'matches': list(self.matches),
        }


@dataclass
class ScanFailure:
    """An image excluded from the corpus and why."""
    path: str
    error: str

    def to_dict(self) -> dict:
        return {'path': self.path, 'error': self.error}


@dataclass
class MatchGroup:
    """
    A set of images recorded in one image's match list.

    Attributes:
        id: Unique identifier for this group
        images: Records in match-list order
    """
    id: int
    images: list = field(default_factory=list)

    @property
    def image_count(self) -> int:
        """Number of images in this group."""
        return len(self.images)

    @property
    def paths(self) -> list[str]:
        return [img.path for img in self.images]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'image_count': self.image_count,
            'images': [img.to_dict() for img in self.images],
        }


@dataclass
class ScanResult:
    """
    Outcome of one batch run.

    Attributes:
        records: Successfully fingerprinted images, sorted by path
        failures: Images that could not be processed
    """
    records: list[ImageRecord] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)

    def record_by_path(self) -> dict[str, ImageRecord]:
        return {record.path: record for record in self.records}

    def match_groups(self) -> list[MatchGroup]:
        """
        Collect reportable groups.

        Records with at least one peer, ordered by match count (largest
        first). Records whose match lists are identical produce a single
        group.
        """
        index = self.record_by_path()
        candidates = sorted(
            (r for r in self.records if r.match_count > 1),
            key=lambda r: -r.match_count,
        )

        groups: list[MatchGroup] = []
        seen: set[tuple[str, ...]] = set()
        for record in candidates:
            key = tuple(record.matches)
            if key in seen:
                continue
            seen.add(key)
            groups.append(MatchGroup(
                id=len(groups) + 1,
                images=[index[path] for path in record.matches if path in index],
            ))
        return groups

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'images': [r.to_dict() for r in self.records],
            'groups': [g.to_dict() for g in self.match_groups()],
            'failures': [f.to_dict() for f in self.failures],
        }
