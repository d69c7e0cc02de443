#!/usr/bin/env python3
"""
quadmatch - Review Server
=========================
Scans a directory once, then serves the match groups as a web page for
human review.

Run with: python -m quadmatch serve /path/to/photos

Options:
    -q, --quiet     Quiet mode - suppress all output except errors
    -v, --verbose   Verbose mode - show all Flask request logs
    -p, --port      Port to run on (default: 5000)
    --no-browser    Don't auto-open browser
"""

import argparse
import sys
import threading
import webbrowser
import logging
from pathlib import Path
from typing import Optional

from flask import Flask

from .api import api
from .config import MatchConfig
from .errors import ConfigError
from .models import ScanResult
from .scanner import scan_directory
from .user_config import get_user_config
from .utils.formatters import format_count
from .utils.validators import validate_scan_directory


# Logging levels
LOG_QUIET = 0    # No output except errors
LOG_MINIMAL = 1  # Startup info only (default)
LOG_VERBOSE = 2  # All Flask request logs


def create_app(
    result: ScanResult,
    config: Optional[MatchConfig] = None,
    log_level: int = LOG_MINIMAL,
    title: str = "Similar images",
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        result: Completed scan to serve
        config: Settings the scan ran with
        log_level: Logging verbosity level
        title: Title of the report page

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)
    app.config['SCAN_RESULT'] = result
    app.config['MATCH_CONFIG'] = config or MatchConfig()
    app.config['REPORT_TITLE'] = title

    # Configure logging based on level
    if log_level < LOG_VERBOSE:
        # Suppress Flask's default request logging
        log = logging.getLogger('werkzeug')
        log.setLevel(logging.ERROR if log_level == LOG_QUIET else logging.WARNING)

    # Register routes
    app.register_blueprint(api)

    return app


def suppress_flask_banner():
    """Suppress Flask's development server banner and startup messages."""
    try:
        import flask.cli
        flask.cli.show_server_banner = lambda *args, **kwargs: None
    except (ImportError, AttributeError):
        pass

    logging.getLogger('werkzeug').setLevel(logging.ERROR)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser of the review server."""
    parser = argparse.ArgumentParser(
        prog='quadmatch serve',
        description='quadmatch - scan a directory and review similar images in the browser',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'directory',
        type=Path,
        help='Directory to scan for similar images'
    )
    parser.add_argument(
        '-r', '--recursive',
        action='store_true',
        help='Also scan subdirectories'
    )
    parser.add_argument(
        '-t', '--threshold',
        type=float,
        default=None,
        help='Similarity threshold (0-1], higher=stricter'
    )
    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help='Number of parallel workers'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Quiet mode - suppress all output except errors'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose mode - show all Flask request logs'
    )
    parser.add_argument(
        '-p', '--port',
        type=int,
        default=5000,
        help='Port to run the server on (default: 5000)'
    )
    parser.add_argument(
        '--no-browser',
        action='store_true',
        help='Do not automatically open browser'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point for the review server."""
    args = create_parser().parse_args(argv)

    # Determine log level
    if args.quiet:
        log_level = LOG_QUIET
    elif args.verbose:
        log_level = LOG_VERBOSE
    else:
        log_level = LOG_MINIMAL

    logging.basicConfig(
        level=logging.ERROR if log_level == LOG_QUIET else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    logger = logging.getLogger(__name__)

    is_valid, error = validate_scan_directory(args.directory)
    if not is_valid:
        logger.error(error)
        return 1

    try:
        config = get_user_config().build_match_config(
            similarity_threshold=args.threshold,
            workers=args.workers,
        ).validate()
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    result = scan_directory(
        args.directory,
        config,
        recursive=args.recursive,
        show_progress=log_level >= LOG_MINIMAL,
        logger=logger,
    )

    port = args.port
    url = f'http://localhost:{port}'

    if log_level >= LOG_MINIMAL:
        print()
        print("  " + "=" * 40)
        print("       QUADMATCH - REVIEW SERVER")
        print("  " + "=" * 40)
        print()
        print(f"  Directory: {args.directory}")
        print(f"     {format_count(len(result.match_groups()), 'match group')}, "
              f"{format_count(len(result.failures), 'skipped file')}")
        print()
        print(f"  Server running at: {url}")
        if not args.no_browser:
            print("     Opening in browser...")
        print()
        print("  Press Ctrl+C to stop")
        print()

    if log_level < LOG_VERBOSE:
        suppress_flask_banner()

    app = create_app(result, config, log_level, title=f"Similar images in {args.directory}")

    # Open browser after short delay (unless disabled)
    if not args.no_browser:
        threading.Timer(1.5, lambda: webbrowser.open(url)).start()

    try:
        app.run(
            host='127.0.0.1',
            port=port,
            debug=False,
            threaded=True,
            use_reloader=False
        )
    except KeyboardInterrupt:
        if log_level >= LOG_MINIMAL:
            print("\n  Server stopped\n")

    return 0


if __name__ == '__main__':
    sys.exit(main())
