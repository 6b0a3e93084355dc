"""Main CLI entry point for valuepack."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.inspect import dump_json, inspect_file
from ..exceptions import ValuepackError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the valuepack CLI.

    Args:
        argv: Command line arguments (defaults to ``sys.argv[1:]``)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="valuepack: MessagePack Value Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  valuepack --inspect data.msgpack      Show an annotated walk of each value
  valuepack --json data.msgpack         Print each value as JSON
  valuepack --version                   Show version
        """,
    )

    parser.add_argument(
        "--inspect",
        metavar="FILE",
        type=str,
        help="Show offset, tag and format of every value in a MessagePack file",
    )

    parser.add_argument(
        "--json",
        metavar="FILE",
        type=str,
        help="Decode every value in a MessagePack file and print it as JSON",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"valuepack {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    if args.inspect or args.json:
        command = inspect_file if args.inspect else dump_json
        file_path = Path(args.inspect or args.json)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            command(file_path)
            return 0
        except (ValuepackError, OSError) as e:
            print(f"Error decoding file: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
