"""
Asynchronous content rendering.

Rendering a Markdown slide may involve decoding images, so it runs as a task
on the event loop. Requests are numbered and only the newest one is allowed
to publish its result.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from mdplay.core.config import Settings
from mdplay.models.slide import MarkdownSlide, SlideId
from mdplay.services.slides.parser import parse_image_references, visible_content

from .images import inject_images, render_images, substitute_images
from .markdown import render_markdown
from .themes import Theme

logger = logging.getLogger(__name__)

LOADING = "Loading…"


@dataclass(frozen=True)
class ContentGeometry:
    """Size of the content column and the image box inside it."""
    width: int
    height: int
    image_width: int
    image_height: int

    @classmethod
    def for_viewport(cls, columns: int, viewport_height: int, settings: Settings) -> "ContentGeometry":
        """
        Derive the content column from the terminal width.

        The column is a share of the terminal capped at ``max_content_width``;
        images are bounded by the column and a share of the viewport height.
        """
        container = int(columns * settings.content_width_ratio)
        width = max(10, min(container, settings.max_content_width))
        available = max(20, container - 6)
        image_width = min(available, settings.max_content_width, width)
        image_height = max(1, int(viewport_height * settings.image_height_ratio))
        return cls(width=width, height=max(1, viewport_height), image_width=image_width, image_height=image_height)


@dataclass(frozen=True)
class RenderedFrame:
    slide_id: SlideId
    step: int
    lines: list[str]
    generation: int


async def render_content(slide: MarkdownSlide, step: int, theme: Theme, geometry: ContentGeometry) -> list[str]:
    """
    Render the fragments of a slide visible at ``step``.

    Returns:
        Rendered lines (ANSI styled)
    """
    text = visible_content(slide, step)
    refs = parse_image_references(text)

    if not refs:
        return render_markdown(text, theme, geometry.width).split("\n")

    marked, placeholders = substitute_images(text, refs)
    blocks = await render_images(placeholders, slide.slide_dir, geometry.image_width, geometry.image_height)
    rendered = render_markdown(marked, theme, geometry.width)
    return inject_images(rendered, blocks).split("\n")


class RenderPipeline:
    """
    Last-request-wins wrapper around :func:`render_content`.

    ``on_ready`` is called on the event loop with each frame that is still
    current when it completes. Results of superseded requests are dropped.
    """

    def __init__(self, on_ready: Callable[[RenderedFrame], None]):
        self._on_ready = on_ready
        self._generation = 0
        self._frame: Optional[RenderedFrame] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        """Whether the newest request has not published yet."""
        return self._frame is None or self._frame.generation != self._generation

    def request(self, slide: MarkdownSlide, step: int, theme: Theme, geometry: ContentGeometry) -> int:
        """Start rendering; returns the request number."""
        self._generation += 1
        generation = self._generation
        task = asyncio.get_running_loop().create_task(self._run(generation, slide, step, theme, geometry))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return generation

    async def _run(self, generation: int, slide: MarkdownSlide, step: int, theme: Theme, geometry: ContentGeometry) -> None:
        try:
            lines = await render_content(slide, step, theme, geometry)
        except Exception as e:
            logger.warning(f"Rendering {slide.filename} failed, showing plain text: {e}")
            lines = visible_content(slide, step).split("\n")

        if generation != self._generation:
            logger.debug(f"Dropping stale render #{generation} of {slide.filename}")
            return

        self._frame = RenderedFrame(slide_id=slide.id, step=step, lines=lines, generation=generation)
        self._on_ready(self._frame)

    def frame_for(self, slide_id: SlideId) -> Optional[RenderedFrame]:
        """Latest published frame if it belongs to the given slide."""
        if self._frame is not None and self._frame.slide_id == slide_id:
            return self._frame
        return None

    async def drain(self) -> None:
        """Wait for every in-flight request."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Abandon in-flight requests."""
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
