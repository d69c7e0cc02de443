"""
Flask routes for the quadmatch review server.

The scan result is computed before the server starts and stored on the
app (app.config['SCAN_RESULT']); every route only reads it.
"""

from __future__ import annotations

import logging
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request, send_file, url_for

from ..config import MatchConfig
from ..models import ScanResult
from ..rendering import render_report_html
from ..utils import validators

# Create blueprint for routes
api = Blueprint('api', __name__)

# Module logger
_logger = logging.getLogger(__name__)


def _scan_result() -> ScanResult:
    return current_app.config['SCAN_RESULT']


def _match_config() -> MatchConfig:
    return current_app.config['MATCH_CONFIG']


# =============================================================================
# Route Handlers
# =============================================================================

@api.route('/')
def index():
    """Serve the HTML report, with images loaded through /api/image."""
    html = render_report_html(
        _scan_result(),
        size=_match_config().max_dimension,
        src_for=lambda path: url_for('api.api_image', path=path),
        title=current_app.config.get('REPORT_TITLE', 'Similar images'),
    )
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


@api.route('/api/ping')
def api_ping():
    """Simple endpoint for connection monitoring."""
    return jsonify({'status': 'ok', 'time': datetime.now().isoformat()})


@api.route('/api/groups')
def api_groups():
    """Return all match groups."""
    return jsonify([g.to_dict() for g in _scan_result().match_groups()])


@api.route('/api/images')
def api_images():
    """Return every fingerprinted image with its match list."""
    return jsonify([r.to_dict() for r in _scan_result().records])


@api.route('/api/failures')
def api_failures():
    """Return files that were skipped."""
    return jsonify([f.to_dict() for f in _scan_result().failures])


@api.route('/api/config')
def api_config():
    """Return the settings the scan ran with."""
    return jsonify(_match_config().to_dict())


@api.route('/api/image')
def api_image():
    """Serve an image file for preview.

    Security: Only serves files that are part of the scanned corpus.
    """
    path = request.args.get('path', '').strip()

    status, error = validators.preview_status(path, _scan_result().record_by_path())
    if status == 403:
        _logger.warning(f"Blocked access to file outside scanned corpus: {path}")
    if status != 200:
        return jsonify({'error': error}), status

    try:
        return send_file(path)
    except OSError as e:
        _logger.error(f"Error serving file {path}: {e}")
        return jsonify({'error': f'Error serving file: {str(e)}'}), 500
