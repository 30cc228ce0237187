"""
Outer presentation loop.

Alternates between interactive sessions and recording playback. Playback
blocks the whole process while the player owns the terminal; afterwards a
footer is printed and one key decides where the presentation resumes.
"""
import logging
import shutil
import sys
from typing import Callable, Optional, Sequence, TextIO, Union

from mdplay.core.config import Settings
from mdplay.core.errors import PlayerError
from mdplay.models.navigation import ExitAction, PlayAction, QuitAction
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.slides.source import SlideSource
from mdplay.ui.session import PresentationSession, SlideChangeCallback
from mdplay.ui.terminal import clear_screen

from .keys import FOOTER_HINT, PlaybackIntent, read_playback_key
from .player import CastPlayer

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]

DIM = "\x1b[2m"
RESET = "\x1b[0m"


def next_interactive_index(slides: Sequence[AnySlide], index: int, direction: int) -> int:
    """
    Nearest slide in ``direction`` that is not a recording.

    Returns ``index`` unchanged when there is none.
    """
    candidate = index + direction
    while 0 <= candidate < len(slides) and isinstance(slides[candidate], CastSlide):
        candidate += direction
    if 0 <= candidate < len(slides):
        return candidate
    return index


class PlaybackSupervisor:
    """
    Runs sessions until the user quits.

    Theme, header font and the reload counter carry over from one session
    to the next; so does the slide list, which may have been reloaded.
    """

    def __init__(
        self,
        slides: Sequence[AnySlide],
        source: SlideSource,
        settings: Settings,
        start_index: int = 0,
        on_slide_change: Optional[SlideChangeCallback] = None,
        player: Optional[CastPlayer] = None,
        read_key: Callable[[], PlaybackIntent] = read_playback_key,
        session_factory: Callable[..., PresentationSession] = PresentationSession,
        out: Optional[TextIO] = None,
    ):
        self.slides: list[AnySlide] = list(slides)
        self.source = source
        self.settings = settings
        self.index = start_index
        self.theme_id = settings.default_theme
        self.font_index = 0
        self.reload_count = 0
        self.on_slide_change = on_slide_change
        self.player = player or CastPlayer.from_settings(settings)
        self.read_key = read_key
        self.session_factory = session_factory
        self.out = out or sys.stdout

    async def run(self) -> None:
        while True:
            action = await self.run_session()
            if isinstance(action, QuitAction):
                logger.info("👋 Presentation finished")
                return
            self.index = self.playback(action)

    async def run_session(self) -> ExitAction:
        session = self.session_factory(
            slides=self.slides,
            source=self.source,
            settings=self.settings,
            start_index=self.index,
            theme_id=self.theme_id,
            font_index=self.font_index,
            reload_count=self.reload_count,
            on_slide_change=self.on_slide_change,
        )
        action = await session.run()
        self.slides = list(session.slides)
        self.index = session.state.index
        self.theme_id = session.state.theme_id
        self.font_index = session.state.font_index
        self.reload_count = session.reload_count
        return action

    def playback(self, action: PlayAction) -> int:
        """
        Play a recording until the viewer moves on.

        Returns:
            Index of the slide the next session starts at
        """
        index = action.slide_index
        while True:
            clear_screen(self.out)
            try:
                self.player.play(action.path)
            except PlayerError as e:
                logger.error(f"Playback of {action.path} failed: {e}")
                self.out.write(f"Error playing cast: {e}\nIs '{self.player.command}' installed?\n")
                self.print_footer(index)
                self.read_key()
                return index

            self.print_footer(index)
            intent = self.read_key()
            logger.debug(f"Playback intent: {intent.value}")

            if intent == PlaybackIntent.REPLAY:
                continue
            if intent == PlaybackIntent.NEXT:
                return next_interactive_index(self.slides, index, 1)
            if intent == PlaybackIntent.PREV:
                return next_interactive_index(self.slides, index, -1)
            return index

    def print_footer(self, index: int) -> None:
        width = shutil.get_terminal_size((80, 24)).columns
        rule = "─" * max(0, width - 4)
        counter = f"{index + 1}/{len(self.slides)}"
        gap = " " * max(0, width - 4 - len(FOOTER_HINT) - len(counter))
        self.out.write(f"\n{DIM}  {rule}{RESET}\n")
        self.out.write(f"{DIM}  {FOOTER_HINT}{gap}{counter}  {RESET}\n")
        self.out.flush()
