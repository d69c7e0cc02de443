"""
API package for quadmatch.

Provides the Flask routes of the review server.
"""

from __future__ import annotations

from .routes import api

__all__ = ['api']
