"""
Unified CLI entry point for bulk_insert.

Usage:
    python -m bulk_insert.cli <command> [options]

Available commands:
    load    - Load a CSV file into a table with batched INSERT statements

Examples:
    python -m bulk_insert.cli load --table users --file users.csv
    python -m bulk_insert.cli load --table users --file users.csv --update-duplicates email
"""

import argparse
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point with subcommand routing.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="bulk_insert.cli",
        description="bulk_insert CLI - batched INSERT loading",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
        help="Command to execute",
    )

    subparsers.add_parser(
        "load",
        help="Load a CSV file into a table",
        description="Load CSV rows using batched INSERT statements",
        add_help=False,  # Let the delegated module handle help
    )

    args, remaining_args = parser.parse_known_args(argv)

    if args.command == "load":
        from bulk_insert.cli.load import main as load_main

        return load_main(remaining_args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
