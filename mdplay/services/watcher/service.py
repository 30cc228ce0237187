"""
Live reload.

File-system changes to slide files are collapsed by a quiet-period timer into
a single reload of the whole slide list. Watching is best-effort: failures
disable it and leave the current slides in place.
"""
import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from watchfiles import Change, awatch

from mdplay.core.debug import increment_reload_count
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.slides.loader import load_slides
from mdplay.services.slides.source import SlideSource

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]


class Debouncer:
    """Call ``callback`` once ``delay`` seconds after the last ``trigger``."""

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        self.cancel()
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()


class SlideWatcher:
    """
    Watch a slide source and reload it on change.

    Args:
        source: Directory or document to observe
        on_reload: Receives the new slide list after a successful reload
        debounce_ms: Quiet period before reloading
        loader: Slide loading function (injectable for tests)
    """

    def __init__(
        self,
        source: SlideSource,
        on_reload: Callable[[list[AnySlide]], None],
        debounce_ms: int = 100,
        loader: Callable[[SlideSource], list[AnySlide]] = load_slides,
    ):
        self.source = source
        self.reload_count = 0
        self._on_reload = on_reload
        self._loader = loader
        self._debounce_ms = debounce_ms
        self._debouncer = Debouncer(debounce_ms / 1000, self.reload)
        self._stop = asyncio.Event()

    def watch_filter(self, change: Change, path: str) -> bool:
        """Only slide files of the source qualify (additions, edits and removals alike)."""
        return self.source.is_slide_file(Path(path).name)

    def notify(self, changes: Sequence[tuple[Change, str]]) -> None:
        """Feed a batch of file-system changes to the debouncer."""
        relevant = [(change, path) for change, path in changes if self.watch_filter(change, path)]
        if not relevant:
            return
        logger.debug(f"Slide files changed: {[Path(path).name for _, path in relevant]}")
        self._debouncer.trigger()

    async def run(self) -> None:
        """Watch until :meth:`stop` is called."""
        watch_dir = self.source.watch_dir
        if not watch_dir.is_dir():
            logger.info(f"Live reload disabled: {watch_dir} is not a directory")
            return

        logger.info(f"👀 Watching {watch_dir} for slide changes")
        try:
            async for changes in awatch(
                watch_dir,
                watch_filter=self.watch_filter,
                debounce=self._debounce_ms,
                step=min(50, self._debounce_ms),
                stop_event=self._stop,
                recursive=False,
            ):
                self.notify(list(changes))
        except Exception as e:
            logger.warning(f"Live reload disabled after watcher error: {e}")

    def stop(self) -> None:
        self._stop.set()
        self._debouncer.cancel()

    def reload(self) -> bool:
        """
        Reload the slide list now.

        Returns:
            True if the new list was delivered, False if loading failed and
            the previous slides stay in place
        """
        try:
            slides = self._loader(self.source)
        except Exception as e:
            logger.warning(f"Reload failed, keeping previous slides: {e}")
            return False

        self.reload_count += 1
        increment_reload_count()
        logger.info(f"🔄 Reloaded {len(slides)} slides (reload #{self.reload_count})")
        self._on_reload(slides)
        return True
