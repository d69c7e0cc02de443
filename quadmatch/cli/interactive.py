"""
Interactive prompts for the CLI interface.

Asks for a directory when none was given on the command line.
"""

from __future__ import annotations

from pathlib import Path


def prompt_for_directory(input_func=input) -> Path:
    """
    Interactively prompt user for a directory to scan.

    Args:
        input_func: Function used to read a line (replaceable in tests)

    Returns:
        Path object for the validated directory

    Notes:
        - Loops until a valid directory is provided
        - Strips quotes around pasted paths
    """
    print("\n" + "=" * 50)
    print("  QUADMATCH - SIMILAR IMAGE FINDER")
    print("=" * 50)

    while True:
        dir_input = input_func("\nEnter the directory path to scan: ").strip()
        if not dir_input:
            print("Please enter a valid path.")
            continue

        # Handle quotes around path (common when copy-pasting)
        directory = Path(dir_input.strip('"\''))

        if directory.is_dir():
            return directory

        print(f"Directory not found: {directory}")
        print("Please try again.")


__all__ = ['prompt_for_directory']
