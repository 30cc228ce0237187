"""
mdplay - Main Application Entry Point

Presents a directory of Markdown and asciinema files (or one Markdown
document) as slides in the terminal.
"""
import asyncio
import logging
import sys
from argparse import Namespace
from pathlib import Path
from typing import Optional, Sequence, Union

from pydantic import ValidationError

from mdplay.cli import parse_args
from mdplay.core import (
    MdplayError,
    Settings,
    SlideSourceError,
    StartIndexError,
    get_settings,
    init_debug_mode,
    is_debug_mode,
    setup_logging,
)
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.slides import SlideSource, read_slides, resolve_source, validate_source, visible_slides
from mdplay.ui.terminal import WEZTERM_CONFIG, clear_screen, enter_presentation_mode, exit_presentation_mode, wait_for_keypress

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]


def prepare(args: Namespace, settings: Settings, cwd: Optional[Path] = None) -> tuple[SlideSource, list[AnySlide]]:
    """
    Resolve, validate and load the slides to present.

    Raises:
        SlideSourceError: if the source cannot be presented
        StartIndexError: if --start-at is beyond the last slide
    """
    source = resolve_source(args.path, settings, cwd)

    if not source.explicit and not source.path.exists():
        if settings.ensure_default_deck(source.path):
            logger.info(f"📁 Created starter deck in {source.path}")

    validate_source(source)
    loaded = read_slides(source)
    if not loaded:
        raise SlideSourceError(
            f"No slides found in: {source.path}",
            source.path,
            ["Please provide a Markdown file with slides separated by '---' lines."],
        )
    slides = visible_slides(loaded)
    if not slides:
        raise SlideSourceError(
            f"All slides are hidden in: {source.path}",
            source.path,
            ["Remove 'hidden: true' from at least one slide's front matter."],
        )
    if args.start_index >= len(slides):
        raise StartIndexError(args.start_index + 1, len(slides))

    logger.info(f"📚 Presenting {len(slides)} slides from {source.path}")
    return source, slides


async def present(args: Namespace, settings: Settings, source: SlideSource, slides: list[AnySlide]) -> int:
    """Run the presentation, with the presenter server when requested."""
    from mdplay.services.playback import PlaybackSupervisor

    hub = None
    server = None
    if args.presenter:
        from mdplay.api import create_app
        from mdplay.services.presenter import get_presenter_hub
        from mdplay.services.presenter.server import PresenterServer

        hub = get_presenter_hub()
        server = PresenterServer(create_app(), settings)
        await server.start()
        hub.start()
        print(f"\x1b[36m[Presenter Mode]\x1b[0m Open in browser: \x1b[33m{settings.presenter_url}\x1b[0m")
        print("\x1b[2mPress any key to start presentation...\x1b[0m", flush=True)
        await wait_for_keypress()

    enter_presentation_mode()
    try:
        supervisor = PlaybackSupervisor(
            slides,
            source,
            settings,
            start_index=args.start_index,
            on_slide_change=hub.broadcast_slide_change if hub else None,
        )
        await supervisor.run()
    finally:
        clear_screen()
        exit_presentation_mode()
        if server is not None:
            await server.stop()
            hub.reset()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point.

    Returns:
        Process exit status
    """
    args = parse_args(argv)

    if args.wezterm_config:
        print(WEZTERM_CONFIG)
        return 0

    init_debug_mode()

    try:
        settings = get_settings()
        level = logging.DEBUG if is_debug_mode() or settings.debug else getattr(logging, settings.log_level)
        setup_logging(level, settings.log_file)

        source, slides = prepare(args, settings)
        return asyncio.run(present(args, settings, source, slides))
    except ValidationError as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1
    except SlideSourceError as e:
        print(e.describe(), file=sys.stderr)
        return 1
    except MdplayError as e:
        logger.error(f"❌ {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
