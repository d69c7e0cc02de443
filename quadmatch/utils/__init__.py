"""
Utilities package for quadmatch.

Provides:
- formatters: Counts, durations and ratios for reports and logs
- validators: Up-front checks of directories, export targets and previews
- exporters: Export match results to files
"""

from __future__ import annotations

# Import submodules for convenient access
from . import formatters
from . import exporters
from . import validators

# Export commonly used functions
from .formatters import format_count, format_duration, format_percent
from .validators import validate_scan_directory, validate_export_target, preview_status
from .exporters import export_results, EXPORT_FORMATS

__all__ = [
    # Submodules
    'formatters',
    'validators',
    'exporters',
    # Formatters
    'format_count',
    'format_duration',
    'format_percent',
    # Validators
    'validate_scan_directory',
    'validate_export_target',
    'preview_status',
    # Exporters
    'export_results',
    'EXPORT_FORMATS',
]
