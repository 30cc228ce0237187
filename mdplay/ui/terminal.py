"""
Terminal ownership for the interactive session.

``Terminal`` switches to the alternate screen with cbreak input and puts
everything back on exit, including after exceptions.
"""
import asyncio
import contextlib
import logging
import os
import shutil
import signal
import sys
import termios
import tty
from typing import Iterator, Optional, TextIO

logger = logging.getLogger(__name__)

ALT_SCREEN_ON = "\x1b[?1049h"
ALT_SCREEN_OFF = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR = "\x1b[2J\x1b[H"
HOME = "\x1b[H"
CLEAR_LINE_END = "\x1b[K"
CLEAR_BELOW = "\x1b[J"

# WezTerm user var watched by the --wezterm-config snippet, plus xterm maximise
PRESENTATION_ON = "\x1b]1337;SetUserVar=mdplay_presentation=MQ==\x07\x1b[9;1t"
PRESENTATION_OFF = "\x1b]1337;SetUserVar=mdplay_presentation=MA==\x07\x1b[9;0t"

WEZTERM_CONFIG = """
Add this to your ~/.wezterm.lua to enable presentation mode (hide tab bar):

-- mdplay presentation mode: hide tab bar when mdplay_presentation user var is set
wezterm.on('user-var-changed', function(window, pane, name, value)
  if name == 'mdplay_presentation' then
    local overrides = window:get_config_overrides() or {}
    if value == '1' then
      overrides.enable_tab_bar = false
      overrides.window_padding = { left = 0, right = 0, top = 0, bottom = 0 }
    else
      overrides.enable_tab_bar = nil
      overrides.window_padding = nil
    end
    window:set_config_overrides(overrides)
  end
end)
"""


TERMINATION_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def _exit_on_signal(signum, frame) -> None:
    raise SystemExit(128 + signum)


@contextlib.contextmanager
def exit_on_termination() -> Iterator[None]:
    """
    Turn SIGTERM and SIGHUP into ``SystemExit`` for the duration of the block.

    Blocking reads in raw or cbreak mode happen outside the session's event
    loop handlers; raising lets the surrounding ``finally`` blocks restore the
    terminal instead of the process dying with it still in raw mode.
    """
    previous = {sig: signal.signal(sig, _exit_on_signal) for sig in TERMINATION_SIGNALS}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)


def enter_presentation_mode(out: TextIO = sys.stdout) -> None:
    out.write(PRESENTATION_ON)
    out.flush()


def exit_presentation_mode(out: TextIO = sys.stdout) -> None:
    out.write(PRESENTATION_OFF)
    out.flush()


def clear_screen(out: TextIO = sys.stdout) -> None:
    out.write(CLEAR)
    out.flush()


class Terminal:
    """Alternate-screen, cbreak-mode terminal used by one session."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.out = stdout or sys.stdout
        self.fd = self.stdin.fileno()
        self._saved: Optional[list] = None

    def __enter__(self) -> "Terminal":
        if os.isatty(self.fd):
            self._saved = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        self.out.write(ALT_SCREEN_ON + HIDE_CURSOR + CLEAR)
        self.out.flush()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        """Leave the alternate screen and restore the saved input mode."""
        try:
            self.out.write(SHOW_CURSOR + ALT_SCREEN_OFF)
            self.out.flush()
        finally:
            if self._saved is not None:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved)
                self._saved = None

    def size(self) -> tuple[int, int]:
        """Current (columns, rows)."""
        size = shutil.get_terminal_size((80, 24))
        return size.columns, size.lines

    def read(self) -> bytes:
        """Bytes waiting on the input; empty on end of input."""
        return os.read(self.fd, 1024)

    def draw(self, lines: list[str]) -> None:
        """Repaint the whole screen from the top-left corner."""
        _, rows = self.size()
        body = "\n".join(line + CLEAR_LINE_END for line in lines[:rows])
        self.out.write(HOME + body + CLEAR_BELOW)
        self.out.flush()


async def wait_for_keypress(stdin: Optional[TextIO] = None) -> bytes:
    """Wait for a single key press without blocking the event loop."""
    stream = stdin or sys.stdin
    fd = stream.fileno()
    loop = asyncio.get_running_loop()
    ready = loop.create_future()

    with exit_on_termination():
        saved = termios.tcgetattr(fd) if os.isatty(fd) else None
        try:
            if saved is not None:
                tty.setcbreak(fd)
            loop.add_reader(fd, lambda: ready.done() or ready.set_result(os.read(fd, 16)))
            try:
                return await ready
            finally:
                loop.remove_reader(fd)
        finally:
            if saved is not None:
                termios.tcsetattr(fd, termios.TCSADRAIN, saved)
