"""
Helpers for asciinema recordings.

A recording is newline-delimited JSON: a header object on the first line,
then ``[time, type, data]`` events. Only the header is interpreted here,
apart from the text extraction helper.
"""
import json
import logging
import re
import tempfile
import time
from pathlib import Path
from typing import Any, Optional

from mdplay.core.errors import CastFormatError

logger = logging.getLogger(__name__)

ANSI_CSI = re.compile(r"\x1b\[[0-9;?]*[a-zA-Z]")
ANSI_OSC = re.compile(r"\x1b\][^\x07]*\x07")
ANSI_ST = re.compile(r"\x1b\\")
CONTROL_CHARS = re.compile(r"[\x00-\x09\x0b\x0c\x0e-\x1f]")
SPINNER_PREFIX = re.compile(r"^[⣾⣽⣻⢿⡿⣟◎∙●◉✓○]")
RULE_LINE = re.compile(r"^[─│]+$")


def _split(text: str) -> tuple[dict[str, Any], list[str]]:
    lines = text.split("\n")
    if not lines[0].strip():
        raise CastFormatError("missing header")
    try:
        header = json.loads(lines[0])
    except json.JSONDecodeError as e:
        raise CastFormatError(f"unreadable header: {e}") from e
    if not isinstance(header, dict):
        raise CastFormatError("header is not a JSON object")
    return header, lines


def read_header(path: Path) -> dict[str, Any]:
    """Parse the header line of a recording."""
    header, _ = _split(path.read_text(encoding="utf-8"))
    return header


def header_size(header: dict[str, Any]) -> tuple[Optional[int], Optional[int]]:
    """Recorded (cols, rows); version 3 keeps them under ``term``."""
    term = header.get("term")
    if isinstance(term, dict):
        return term.get("cols"), term.get("rows")
    return header.get("width"), header.get("height")


def resize_header(header: dict[str, Any], cols: int, rows: int) -> dict[str, Any]:
    """Return a copy of the header with its terminal size replaced."""
    resized = dict(header)
    term = resized.get("term")
    if isinstance(term, dict):
        resized["term"] = {**term, "cols": cols, "rows": rows}
    else:
        resized["width"] = cols
        resized["height"] = rows
    return resized


def _resized_text(path: Path, cols: int, rows: int) -> str:
    header, lines = _split(path.read_text(encoding="utf-8"))
    lines[0] = json.dumps(resize_header(header, cols, rows))
    return "\n".join(lines)


def resize_cast(path: Path, cols: int, rows: int) -> tuple[Optional[int], Optional[int]]:
    """
    Rewrite a recording's terminal size in place.

    Returns:
        The previous (cols, rows)
    """
    old = header_size(read_header(path))
    path.write_text(_resized_text(path, cols, rows), encoding="utf-8")
    return old


def resized_copy(path: Path, cols: int, rows: int, directory: Optional[Path] = None) -> Path:
    """
    Write a temporary copy of a recording sized to ``cols`` x ``rows``.

    The caller owns the returned file and must delete it.
    """
    text = _resized_text(path, cols, rows)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        prefix=f"mdplay-cast-{int(time.time() * 1000)}-",
        suffix=".cast",
        dir=directory,
        delete=False,
    ) as handle:
        handle.write(text)
    logger.debug(f"Resized {path.name} to {cols}x{rows} in {handle.name}")
    return Path(handle.name)


def extract_text(path: Path) -> list[str]:
    """
    Readable lines printed during a recording.

    Escape sequences and control characters are removed; blank, very short,
    repeated, spinner and box-rule lines are skipped.
    """
    buffer = []
    for line in path.read_text(encoding="utf-8").split("\n"):
        if not line.startswith("["):
            continue
        try:
            _, kind, data = json.loads(line)
        except (json.JSONDecodeError, ValueError):
            continue
        if kind != "o" or not isinstance(data, str):
            continue
        clean = ANSI_CSI.sub("", data)
        clean = ANSI_OSC.sub("", clean)
        clean = ANSI_ST.sub("", clean)
        buffer.append(CONTROL_CHARS.sub("", clean))

    seen: set[str] = set()
    result = []
    for line in re.split(r"[\r\n]+", "".join(buffer)):
        trimmed = line.strip()
        if len(trimmed) <= 3 or trimmed in seen:
            continue
        if SPINNER_PREFIX.match(trimmed) or RULE_LINE.match(trimmed):
            continue
        seen.add(trimmed)
        result.append(trimmed)
    return result
