#!/usr/bin/env python3
"""
Print the readable text of an asciinema recording.

Usage:
    python scripts/parse_cast.py demo.cast
"""

import argparse
import sys
from pathlib import Path

from mdplay.services.playback.cast import extract_text


def main() -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Extract readable text from a .cast file")
    parser.add_argument("file", type=Path, help="Recording to read")
    args = parser.parse_args()

    try:
        lines = extract_text(args.file)
    except OSError as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
