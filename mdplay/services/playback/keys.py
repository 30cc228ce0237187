"""Blocking single-key reader used between recordings."""
import logging
import os
import select
import sys
import termios
import tty
from enum import Enum
from typing import Optional

from mdplay.ui.keys import decode_keys
from mdplay.ui.terminal import exit_on_termination

logger = logging.getLogger(__name__)

ESCAPE_FOLLOW_UP_SECONDS = 0.05


class PlaybackIntent(str, Enum):
    NEXT = "next"
    PREV = "prev"
    REPLAY = "replay"
    BACK = "back"


PLAYBACK_BINDINGS = {
    "right": PlaybackIntent.NEXT,
    "l": PlaybackIntent.NEXT,
    "left": PlaybackIntent.PREV,
    "h": PlaybackIntent.PREV,
    "r": PlaybackIntent.REPLAY,
}

FOOTER_HINT = "← prev  → next  r replay  q back"


def decode_playback_key(data: bytes) -> PlaybackIntent:
    """Map one key press to an intent; anything unbound means back to the slide."""
    keys = decode_keys(data)
    if not keys:
        return PlaybackIntent.BACK
    return PLAYBACK_BINDINGS.get(keys[0], PlaybackIntent.BACK)


def _read(fd: int) -> bytes:
    data = os.read(fd, 10)
    # An arrow key may arrive split after its ESC byte
    if data == b"\x1b":
        ready, _, _ = select.select([fd], [], [], ESCAPE_FOLLOW_UP_SECONDS)
        if ready:
            data += os.read(fd, 5)
    return data


def read_playback_key(fd: Optional[int] = None) -> PlaybackIntent:
    """
    Block for one key press in raw mode.

    The previous terminal mode is restored before returning, whatever
    happens, including SIGTERM or SIGHUP arriving mid-read. End of input
    and read errors count as "back".
    """
    if fd is None:
        fd = sys.stdin.fileno()

    with exit_on_termination():
        saved = None
        try:
            if os.isatty(fd):
                saved = termios.tcgetattr(fd)
                tty.setraw(fd)
            data = _read(fd)
        except OSError as e:
            logger.warning(f"Key read failed: {e}")
            return PlaybackIntent.BACK
        finally:
            if saved is not None:
                termios.tcsetattr(fd, termios.TCSADRAIN, saved)

    return decode_playback_key(data)
