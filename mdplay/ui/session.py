"""
Interactive presentation session.

One session owns the terminal from start until the navigation machine asks
to leave, either to quit or to hand the terminal to the recording player.
Key input, terminal resizes, file-system reloads and finished renders all
arrive as callbacks on the event loop; each one updates state and repaints.
"""
import asyncio
import logging
import signal
from typing import Callable, Optional, Sequence, Union

from mdplay.core.config import Settings
from mdplay.models.navigation import ExitAction, Mode, NavigationState, QuitAction, Transition
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.navigation.machine import NavigationContext, handle_key, initial_state, reconcile
from mdplay.services.rendering.pipeline import LOADING, ContentGeometry, RenderedFrame, RenderPipeline
from mdplay.services.rendering.themes import THEMES, get_theme, slide_theme, theme_ids
from mdplay.services.slides.source import SlideSource
from mdplay.services.watcher.service import SlideWatcher

from .keys import decode_keys
from .terminal import Terminal
from .views import (
    cast_view,
    empty_view,
    header_lines,
    overview_columns,
    overview_view,
    presentation_view,
    theme_selector_view,
    viewport_height,
)

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]
SlideChangeCallback = Callable[[int, Sequence[AnySlide]], None]

QUIT_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


class PresentationSession:
    """
    Render/navigation loop for one stretch of interactive use.

    Args:
        slides: Slides to present
        source: Where the slides came from (watched for changes)
        settings: Application settings
        start_index: Slide shown first
        theme_id: Session theme
        font_index: Header font position in ``settings.header_fonts``
        reload_count: Reloads that happened in earlier sessions
        on_slide_change: Called with the new index whenever it changes
        terminal: Terminal to draw on
        watch: Enable live reload
    """

    def __init__(
        self,
        slides: Sequence[AnySlide],
        source: SlideSource,
        settings: Settings,
        start_index: int = 0,
        theme_id: str = "default",
        font_index: int = 0,
        reload_count: int = 0,
        on_slide_change: Optional[SlideChangeCallback] = None,
        terminal: Optional[Terminal] = None,
        watch: bool = True,
    ):
        self.slides: list[AnySlide] = list(slides)
        self.source = source
        self.settings = settings
        self.fonts = list(settings.header_fonts)
        self.state: NavigationState = initial_state(start_index, theme_id, font_index % len(self.fonts))
        self.reload_count = reload_count
        self.scroll = 0
        self.terminal = terminal or Terminal()
        self._on_slide_change = on_slide_change
        self._watch = watch
        self._pipeline = RenderPipeline(self._on_frame)
        self._content_version = 0
        self._requested: Optional[tuple] = None
        self._max_scroll = 0
        self._done: Optional[asyncio.Future] = None

    # Event loop plumbing

    async def run(self) -> ExitAction:
        """Present until the user quits or starts a recording."""
        loop = asyncio.get_running_loop()
        self._done = loop.create_future()
        watcher = SlideWatcher(self.source, self.replace_slides, self.settings.reload_debounce_ms)
        watch_task: Optional[asyncio.Task] = None

        with self.terminal:
            loop.add_reader(self.terminal.fd, self._on_input)
            for sig in QUIT_SIGNALS:
                loop.add_signal_handler(sig, self.finish, QuitAction())
            loop.add_signal_handler(signal.SIGWINCH, self.repaint)
            try:
                if self._watch:
                    watch_task = loop.create_task(watcher.run())
                self._notify()
                self.repaint()
                action = await self._done
            finally:
                loop.remove_reader(self.terminal.fd)
                for sig in (*QUIT_SIGNALS, signal.SIGWINCH):
                    loop.remove_signal_handler(sig)
                watcher.stop()
                if watch_task is not None:
                    watch_task.cancel()
                    await asyncio.gather(watch_task, return_exceptions=True)
                self._pipeline.close()

        logger.debug(f"Session finished with {action}")
        return action

    def finish(self, action: ExitAction) -> None:
        if self._done is not None and not self._done.done():
            self._done.set_result(action)

    def _on_input(self) -> None:
        try:
            data = self.terminal.read()
        except OSError as e:
            logger.warning(f"Input read failed: {e}")
            data = b""
        if not data:
            self.finish(QuitAction())
            return
        for key in decode_keys(data):
            self.press(key)
            if self._done is not None and self._done.done():
                break

    def _on_frame(self, frame: RenderedFrame) -> None:
        self.repaint()

    # State changes

    def context(self) -> NavigationContext:
        columns, _ = self.terminal.size()
        return NavigationContext(
            slides=self.slides,
            overview_columns=overview_columns(columns),
            theme_ids=theme_ids(),
            font_count=len(self.fonts),
        )

    def press(self, key: str) -> None:
        """Feed one key name to the navigation machine and apply the result."""
        self.apply(handle_key(self.state, key, self.context()))

    def apply(self, transition: Transition) -> None:
        self.state = transition.state
        if transition.index_changed:
            self.scroll = 0
            self._notify()
        if transition.scroll:
            self.scroll = min(max(0, self.scroll + transition.scroll), self._max_scroll)
        if transition.exit_action is not None:
            self.finish(transition.exit_action)
            return
        self.repaint()

    def replace_slides(self, slides: list[AnySlide]) -> None:
        """Swap in a reloaded slide list and fit the state to it."""
        self.slides = list(slides)
        self.reload_count += 1
        self._content_version += 1
        transition = reconcile(self.state, self.slides)
        self.state = transition.state
        if transition.index_changed:
            self.scroll = 0
        self._notify()
        self.repaint()

    def _notify(self) -> None:
        if self._on_slide_change is None or not self.slides:
            return
        try:
            self._on_slide_change(self.state.index, self.slides)
        except Exception as e:
            logger.warning(f"Slide change notification failed: {e}")

    # Drawing

    @property
    def current_slide(self) -> Optional[AnySlide]:
        if not self.slides:
            return None
        return self.slides[self.state.index]

    def _request_render(self, slide: MarkdownSlide, theme_id: str, geometry: ContentGeometry) -> None:
        key = (slide.id, self.state.step, theme_id, geometry, self._content_version)
        if key == self._requested:
            return
        self._requested = key
        self._pipeline.request(slide, self.state.step, get_theme(theme_id), geometry)

    def screen(self) -> list[str]:
        """Compose the lines of the current screen."""
        columns, rows = self.terminal.size()
        session_theme = get_theme(self.state.theme_id)
        font = self.fonts[self.state.font_index]

        if self.state.mode == Mode.THEME_SELECT:
            return theme_selector_view(list(THEMES.values()), self.state, session_theme, columns, rows)

        slide = self.current_slide
        if slide is None:
            return empty_view(session_theme, str(self.source.path), columns, rows, self.reload_count)

        if self.state.mode == Mode.OVERVIEW:
            return overview_view(self.slides, self.state, session_theme, columns, rows)

        theme = slide_theme(self.state.theme_id, slide)
        header = header_lines(slide, theme, font, columns)
        total = len(self.slides)

        if isinstance(slide, CastSlide):
            return cast_view(slide, self.state, theme, header, columns, rows, total, self.reload_count, font)

        height = viewport_height(rows, len(header))
        geometry = ContentGeometry.for_viewport(columns, height, self.settings)
        self._request_render(slide, theme.id, geometry)

        frame = self._pipeline.frame_for(slide.id)
        content = frame.lines if frame is not None else [LOADING]
        self._max_scroll = max(0, len(content) - height)
        self.scroll = min(self.scroll, self._max_scroll)

        return presentation_view(
            slide,
            self.state,
            theme,
            header,
            content,
            geometry.width,
            self.scroll,
            self._pipeline.loading,
            columns,
            rows,
            total,
            self.reload_count,
            font,
        )

    def repaint(self) -> None:
        self.terminal.draw(self.screen())
