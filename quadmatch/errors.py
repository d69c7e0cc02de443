"""
Exception types for quadmatch.

DecodeError is recoverable per image (the image is skipped and reported).
ConfigError is fatal before any work starts. FingerprintShapeError marks a
programming error and is never caught by the engine.
"""

from __future__ import annotations


class QuadmatchError(Exception):
    """Base class for all quadmatch errors."""


class ConfigError(QuadmatchError):
    """Invalid configuration value."""


class DecodeError(QuadmatchError):
    """An image file could not be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FingerprintShapeError(QuadmatchError):
    """Two fingerprints with different grid shapes were compared."""


__all__ = [
    'QuadmatchError',
    'ConfigError',
    'DecodeError',
    'FingerprintShapeError',
]
