"""
Allow running the package with: python -m quadmatch

By default, runs the command-line scan. Use 'serve' for the review server.

Examples:
    python -m quadmatch /path/to/photos          # CLI scan and report
    python -m quadmatch cli /path/to/photos      # CLI (explicit)
    python -m quadmatch serve /path/to/photos    # Scan, then review in browser
    python -m quadmatch config --init            # Create example config file
"""

import sys


def main() -> int:
    if len(sys.argv) > 1 and sys.argv[1] == 'serve':
        from .app import main as serve_main
        return serve_main(sys.argv[2:])
    elif len(sys.argv) > 1 and sys.argv[1] == 'config':
        from .user_config import get_user_config

        config = get_user_config()

        if '--init' in sys.argv or '-i' in sys.argv:
            if config.create_example_config():
                print("Created example configuration file at:")
                print(f"  {config.config_file_path}")
                print("\nEdit this file to customize quadmatch settings.")
            else:
                print("Failed to create configuration file.")
                return 1
        else:
            print(f"Configuration file: {config.config_file_path}")
            if config.config_file_path.exists():
                print("Status: found")
            else:
                print("Status: not found (using defaults)")
                print("\nRun 'python -m quadmatch config --init' to create one.")

            print("\nCurrent settings:")
            print(f"  similarity_threshold: {config.similarity_threshold}")
            print(f"  max_dimension: {config.max_dimension}")
            print(f"  split_quadrants: {config.split_quadrants}")
            print(f"  background_removal_fraction: {config.background_removal_fraction}")
            print(f"  max_images: {config.max_images}")
            print(f"  workers: {config.workers}")
        return 0
    else:
        argv = sys.argv[1:]
        if argv and argv[0] == 'cli':
            argv = argv[1:]
        from .cli import main as cli_main
        return cli_main(argv)


if __name__ == '__main__':
    sys.exit(main())
