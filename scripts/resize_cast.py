#!/usr/bin/env python3
"""
Resize an asciinema recording's terminal dimensions in place.

Usage:
    python scripts/resize_cast.py demo.cast              # Fit the current terminal
    python scripts/resize_cast.py demo.cast 100 30       # Explicit columns and rows
"""

import argparse
import shutil
import sys
from pathlib import Path

from mdplay.core.errors import CastFormatError
from mdplay.services.playback.cast import resize_cast


def main() -> int:
    """CLI entry point."""
    size = shutil.get_terminal_size((120, 40))
    parser = argparse.ArgumentParser(description="Resize a .cast file's terminal dimensions")
    parser.add_argument("file", type=Path, help="Recording to rewrite")
    parser.add_argument("cols", type=int, nargs="?", default=size.columns, help="Columns (default: terminal width)")
    parser.add_argument("rows", type=int, nargs="?", default=size.lines, help="Rows (default: terminal height)")
    args = parser.parse_args()

    try:
        old_cols, old_rows = resize_cast(args.file, args.cols, args.rows)
    except (CastFormatError, OSError) as e:
        print(f"Invalid cast file: {args.file} - {e}", file=sys.stderr)
        return 1

    print(f"Resized {args.file} from {old_cols}x{old_rows} to {args.cols}x{args.rows}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
