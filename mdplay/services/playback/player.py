"""External recording player."""
import logging
import shutil
import signal
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from mdplay.core.config import Settings
from mdplay.core.errors import CastFormatError, PlayerError

from .cast import resized_copy

logger = logging.getLogger(__name__)

# 130 / -2: the viewer interrupted playback with Ctrl+C
EXPECTED_RETURN_CODES = frozenset({0, 130, -2})


def _ignore_interrupt(signum, frame) -> None:
    pass


class CastPlayer:
    """
    Runs the recording player as a blocking child process.

    The child inherits the real terminal, so the whole process waits until
    playback ends.
    """

    def __init__(self, command: str = "asciinema", args: Sequence[str] = ("play",), padding: int = 4):
        self.command = command
        self.args = list(args)
        self.padding = padding

    @classmethod
    def from_settings(cls, settings: Settings) -> "CastPlayer":
        return cls(settings.player_command, settings.player_args, settings.cast_padding)

    def command_for(self, path: Path) -> list[str]:
        return [self.command, *self.args, str(path)]

    def play(self, path: Path, size: Optional[tuple[int, int]] = None) -> None:
        """
        Play a recording resized to the current terminal.

        Raises:
            PlayerError: if the player cannot be started or exits abnormally
        """
        cols, rows = size or shutil.get_terminal_size((120, 40))
        temp: Optional[Path] = None
        try:
            try:
                temp = resized_copy(path, max(20, cols - self.padding), max(5, rows - self.padding))
                target = temp
            except (CastFormatError, OSError, UnicodeDecodeError) as e:
                logger.warning(f"Playing {path} at its recorded size: {e}")
                target = path

            logger.info(f"▶️ Playing {path.name}")
            # Ctrl+C belongs to the player while it runs
            previous = signal.signal(signal.SIGINT, _ignore_interrupt)
            try:
                completed = subprocess.run(self.command_for(target), check=False)
            except OSError as e:
                raise PlayerError(f"Cannot start '{self.command}': {e}") from e
            finally:
                signal.signal(signal.SIGINT, previous)

            if completed.returncode not in EXPECTED_RETURN_CODES:
                raise PlayerError(
                    f"'{self.command}' exited with status {completed.returncode}",
                    completed.returncode,
                )
        finally:
            if temp is not None:
                try:
                    temp.unlink()
                except OSError as e:
                    logger.debug(f"Could not remove {temp}: {e}")
