"""
CLI workflow orchestration for quadmatch.

Provides the CLIOrchestrator class that coordinates the entire CLI scanning
workflow from argument parsing through final reporting.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Optional

from ..errors import ConfigError
from ..models import ScanResult
from ..scanner import find_image_files, analyze_images_parallel, match_corpus
from ..user_config import get_user_config
from ..utils.exporters import export_results
from ..utils.formatters import format_count, format_duration, format_percent
from ..utils.validators import validate_export_target, validate_scan_directory
from .arg_parser import parse_arguments
from .interactive import prompt_for_directory
from .reporting import print_match_report

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI scanning workflow.

    Manages the complete lifecycle from argument parsing through
    fingerprinting, matching, reporting and export.
    """

    def __init__(self, argv: Optional[list[str]] = None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv)
        """
        self.argv = argv
        self.logger = None
        self.args = None
        self.config = None
        self.image_files = []
        self.result = ScanResult()

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 success, 1 bad directory or no images, 2 bad config)

        Workflow phases:
        1. Setup & argument parsing
        2. Interactive prompts (if needed)
        3. Configuration (fatal on invalid settings)
        4. Validation
        5. File scanning
        6. Fingerprinting
        7. Matching
        8. Reporting & export
        """
        # Phase 1: Setup
        self._setup_phase()

        # Phase 2: Interactive prompts
        self._interactive_phase()

        # Phase 3: Configuration
        exit_code = self._configure_phase()
        if exit_code != EXIT_OK:
            return exit_code

        # Phase 4: Validation
        exit_code = self._validate_phase()
        if exit_code != EXIT_OK:
            return exit_code

        # Phase 5: Scanning
        exit_code = self._scan_phase()
        if exit_code != EXIT_OK:
            return exit_code

        # Phase 6: Fingerprinting
        self._analyze_phase()

        # Phase 7: Matching
        self._match_phase()

        # Phase 8: Reporting
        return self._report_phase()

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)
        self.show_progress = not self.args.no_progress

    def _interactive_phase(self) -> None:
        """Phase 2: Handle interactive directory prompt if needed."""
        if self.args.directory is None:
            self.args.directory = prompt_for_directory()

    def _configure_phase(self) -> int:
        """
        Phase 3: Build and validate the run configuration.

        Returns:
            0 for success, 2 for an invalid configuration
        """
        use_prefilter = None  # Auto-select by default
        if self.args.force_prefilter:
            use_prefilter = True
        elif self.args.no_prefilter:
            use_prefilter = False

        config = get_user_config().build_match_config(
            max_dimension=self.args.max_dimension,
            split_quadrants=self.args.split_quadrants,
            similarity_threshold=self.args.threshold,
            background_removal_fraction=self.args.background_fraction,
            max_images=self.args.max_images,
            workers=self.args.workers,
            use_prefilter=use_prefilter,
        )
        if self.args.no_limit:
            config = dataclasses.replace(config, max_images=None)

        try:
            self.config = config.validate()
        except ConfigError as e:
            self.logger.error(f"Invalid configuration: {e}")
            return EXIT_CONFIG_ERROR

        self.logger.debug(f"Configuration: {self.config.to_dict()}")
        return EXIT_OK

    def _validate_phase(self) -> int:
        """
        Phase 4: Validate the directory and the export destination.

        Returns:
            0 for success, 1 for validation error
        """
        checks = (
            validate_scan_directory(self.args.directory),
            validate_export_target(self.args.export, self.args.export_format),
        )
        for is_valid, error in checks:
            if not is_valid:
                self.logger.error(error)
                return EXIT_FAILURE
        return EXIT_OK

    def _scan_phase(self) -> int:
        """
        Phase 5: Scan for image files.

        Returns:
            0 for success, 1 if no images found
        """
        self.logger.info(f"Scanning {self.args.directory} for images...")

        self.image_files = find_image_files(
            self.args.directory,
            recursive=self.args.recursive,
            extensions=self.args.extensions,
            max_images=self.config.max_images,
        )

        self.logger.info(f"Found {format_count(len(self.image_files), 'image file')}")

        if not self.image_files:
            self.logger.info("No images found. Exiting.")
            return EXIT_FAILURE

        return EXIT_OK

    def _analyze_phase(self) -> None:
        """Phase 6: Fingerprint images in parallel."""
        self.logger.info("Fingerprinting images...")
        started = time.time()
        records, failures = analyze_images_parallel(
            self.image_files,
            self.config,
            show_progress=self.show_progress,
            logger=self.logger,
        )
        if failures:
            self.logger.warning(f"Could not process {format_count(len(failures), 'file')}")
        self.logger.info(
            f"Fingerprinted {format_count(len(records), 'image')} in {format_duration(time.time() - started)}"
        )
        self.result = ScanResult(records=records, failures=failures)

    def _match_phase(self) -> None:
        """Phase 7: Cross-reference every fingerprint."""
        self.logger.info(
            f"Matching at {format_percent(self.config.similarity_threshold)} similarity per cell"
        )
        started = time.time()
        match_corpus(
            self.result.records,
            self.config,
            show_progress=self.show_progress,
            logger=self.logger,
        )
        groups = self.result.match_groups()
        self.logger.info(
            f"Found {format_count(len(groups), 'match group')} in {format_duration(time.time() - started)}"
        )

    def _report_phase(self) -> int:
        """
        Phase 8: Display report, handle exports.

        Returns:
            0 for success, 1 if the export could not be written
        """
        print_match_report(self.result)

        if self.args.export:
            try:
                export_results(
                    self.result,
                    self.args.export,
                    self.args.export_format,
                    image_size=self.config.max_dimension,
                )
            except OSError as e:
                self.logger.error(f"Could not write export file {self.args.export}: {e}")
                return EXIT_FAILURE
            self.logger.info(f"Results exported to: {self.args.export}")

        return EXIT_OK


__all__ = ['CLIOrchestrator', 'setup_logging']
