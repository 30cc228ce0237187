"""Command-line interface definition."""
import argparse
import sys
from typing import Optional, Sequence

from mdplay import __version__

DESCRIPTION = "mdplay - Terminal-based markdown presentation tool"

EPILOG = """\
Directory Resolution:
  1. If a path is provided, use it
  2. If .deck/ exists in current directory, use it
  3. Fall back to ./slides

Examples:
  mdplay                           # Auto-detect .deck/ or ./slides
  mdplay ./my-talk                 # Use custom directory
  mdplay presentation.md           # Use a single file with --- separators
  mdplay --start-at=5              # Start at slide 5
  mdplay --presenter               # Enable presenter mode
  mdplay ./presentations -s 3      # Custom dir, start at slide 3
"""


class CliArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\nRun with --help for usage information.\n")


def positive_int(value: str) -> int:
    try:
        number = int(value, 10)
    except ValueError:
        number = 0
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer (got: {value})")
    return number


def build_parser() -> CliArgumentParser:
    parser = CliArgumentParser(
        prog="mdplay",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="slides directory, or a single markdown file with --- separators (default: .deck or ./slides)",
    )
    parser.add_argument(
        "-s", "--start-at",
        type=positive_int,
        default=1,
        metavar="N",
        help="start at slide number N (1-indexed, default: 1)",
    )
    parser.add_argument(
        "-p", "--presenter",
        action="store_true",
        help="enable presenter mode with speaker notes in the browser",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"mdplay v{__version__}",
    )
    parser.add_argument(
        "--wezterm-config",
        action="store_true",
        help="show WezTerm config snippet for presentation mode",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Adds ``start_index``, the 0-based form of ``--start-at``.
    Exits with status 0 for --help/--version and 1 for invalid arguments.
    """
    args = build_parser().parse_args(argv)
    args.start_index = args.start_at - 1
    return args
