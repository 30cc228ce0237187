"""
Screen composition.

Every view is a plain function returning the lines of a full screen; the
session draws them. Nothing here reads input or touches the terminal.
"""
import logging
from functools import lru_cache
from typing import Optional, Sequence, Union

import pyfiglet

from mdplay.models.navigation import NavigationState
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.rendering.ansi import center, justify, pad, styled, truncate, visible_width
from mdplay.services.rendering.themes import Theme
from mdplay.services.slides.parser import header_text, total_steps

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]

CARD_WIDTH = 30
CARD_GAP = 2
CARD_HEIGHT = 3

# Rows around the content viewport: scroll indicator, footer rule, footer
CHROME_ROWS = 3

PRESENTATION_HINTS = "←→ navigate  ↑↓ scroll  tab overview  t theme  f font  q quit"
OVERVIEW_HINTS = "←→↑↓ move  enter open  esc close"
THEME_HINTS = "↑↓ choose  enter apply  esc close"
EMPTY_HINTS = "q quit"


def overview_columns(columns: int) -> int:
    """Number of cards per overview row."""
    return max(1, (columns - 4) // (CARD_WIDTH + CARD_GAP))


def frame_box(lines: Sequence[str], width: int, style: str = "") -> list[str]:
    """Draw a rounded box of ``width`` columns around centred lines."""
    inner = max(1, width - 2)
    out = [styled("╭" + "─" * inner + "╮", style)]
    for line in lines:
        out.append(styled("│", style) + center(line, inner) + styled("│", style))
    out.append(styled("╰" + "─" * inner + "╯", style))
    return out


@lru_cache(maxsize=256)
def _figlet(text: str, font: str, width: int) -> Optional[tuple[str, ...]]:
    try:
        art = pyfiglet.Figlet(font=font, width=width).renderText(text)
    except pyfiglet.FontNotFound:
        logger.warning(f"Header font not found: {font}")
        return None
    lines = [line.rstrip() for line in art.split("\n")]
    while lines and not lines[-1].strip():
        lines.pop()
    while lines and not lines[0].strip():
        lines.pop(0)
    return tuple(lines)


def header_lines(slide: AnySlide, theme: Theme, font: str, columns: int) -> list[str]:
    """
    Big title above a slide, followed by the optional subtitle.

    Falls back to a framed plain title when the lettering does not fit.
    """
    text = header_text(slide)
    art = _figlet(text, font, max(20, columns - 4)) if text else None

    if art and max(len(line) for line in art) <= columns - 4:
        width = max(len(line) for line in art)
        lines = [center(styled(line.ljust(width), theme.header), columns) for line in art]
    else:
        title = truncate(text, max(1, columns - 8))
        box = frame_box([styled(title, theme.header)], min(columns - 2, len(title) + 6), theme.ui.border)
        lines = [center(line, columns) for line in box]

    if slide.metadata.subtitle:
        lines.append(center(styled(slide.metadata.subtitle, theme.ui.dim), columns))
    lines.append("")
    return lines


def viewport_height(rows: int, header_height: int) -> int:
    """Rows left for slide content."""
    return max(1, rows - header_height - CHROME_ROWS)


def footer_lines(
    theme: Theme,
    columns: int,
    hints: str,
    reload_count: int = 0,
    font: Optional[str] = None,
    position: Optional[tuple[int, int]] = None,
) -> list[str]:
    """Rule plus a line with key hints on the left and status on the right."""
    status = []
    if reload_count:
        status.append(styled("●", theme.ui.highlight))
    if font:
        status.append(styled(font, theme.ui.dim))
    if position:
        status.append(styled(f"{position[0] + 1}/{position[1]}", theme.ui.text))
    right = "  ".join(status) + " "
    left = " " + styled(hints, theme.ui.dim)
    return [styled("─" * columns, theme.ui.border), justify(left, right, columns)]


def scroll_indicator(theme: Theme, columns: int, scroll: int, max_scroll: int, loading: bool, step: int, steps: int) -> str:
    marks = []
    if scroll > 0:
        marks.append("↑")
    if scroll < max_scroll:
        marks.append("↓")
    if loading:
        marks.append("…")
    if steps > 1:
        marks.append(f"Step {step + 1}/{steps}")
    return pad(" " + styled("  ".join(marks), theme.ui.dim), columns)


def presentation_view(
    slide: MarkdownSlide,
    state: NavigationState,
    theme: Theme,
    header: list[str],
    content: list[str],
    content_width: int,
    scroll: int,
    loading: bool,
    columns: int,
    rows: int,
    total: int,
    reload_count: int,
    font: str,
) -> list[str]:
    """A Markdown slide: header, scrolled content column, indicator and footer."""
    height = viewport_height(rows, len(header))
    max_scroll = max(0, len(content) - height)
    visible = content[scroll: scroll + height]

    if slide.metadata.layout == "center":
        top = max(0, (height - len(visible)) // 2)
        visible = [""] * top + visible

    margin = " " * max(0, (columns - content_width) // 2)
    body = [margin + line for line in visible]
    body.extend([""] * (height - len(body)))

    steps = total_steps(slide)
    return (
        header
        + body
        + [scroll_indicator(theme, columns, scroll, max_scroll, loading, state.step, steps)]
        + footer_lines(theme, columns, PRESENTATION_HINTS, reload_count, font, (state.index, total))
    )


def cast_view(
    slide: CastSlide,
    state: NavigationState,
    theme: Theme,
    header: list[str],
    columns: int,
    rows: int,
    total: int,
    reload_count: int,
    font: str,
) -> list[str]:
    """The placeholder card shown for a recording before it is played."""
    height = viewport_height(rows, len(header))
    card = frame_box(
        [
            styled("DEMO", theme.ui.highlight),
            "",
            styled(slide.title, theme.ui.text),
            "",
            styled("PRESS [SPACE] TO PLAY RECORDING", theme.ui.dim),
        ],
        min(columns - 2, max(40, len(slide.title) + 8)),
        theme.ui.border,
    )
    top = max(0, (height - len(card)) // 2)
    body = [""] * top + [center(line, columns) for line in card]
    body = body[:height] + [""] * (height - len(body))
    return (
        header
        + body
        + [""]
        + footer_lines(theme, columns, PRESENTATION_HINTS, reload_count, font, (state.index, total))
    )


def _card(slide: AnySlide, number: int, theme: Theme, selected: bool, current: bool) -> list[str]:
    tag = " [DEMO]" if isinstance(slide, CastSlide) else ""
    inner = CARD_WIDTH - 4
    title = truncate(slide.title, inner - 3 - len(tag))
    label = f"{number:02d} {title}{tag}"
    text_style = theme.ui.highlight if current else theme.ui.text
    if selected:
        text_style += "\x1b[1m"
    border = theme.ui.highlight if selected else theme.ui.border
    return [
        styled("╭" + "─" * (CARD_WIDTH - 2) + "╮", border),
        styled("│", border) + " " + pad(styled(label, text_style), inner) + " " + styled("│", border),
        styled("╰" + "─" * (CARD_WIDTH - 2) + "╯", border),
    ]


def overview_view(slides: Sequence[AnySlide], state: NavigationState, theme: Theme, columns: int, rows: int) -> list[str]:
    """Grid of slide cards; the selected card is kept in view."""
    per_row = overview_columns(columns)
    grid_rows = (len(slides) + per_row - 1) // per_row
    visible_rows = max(1, (rows - 4) // CARD_HEIGHT)
    selected_row = state.overview_selected_index // per_row
    first_row = max(0, min(selected_row - visible_rows + 1, grid_rows - visible_rows))
    first_row = min(first_row, selected_row)

    lines = [center(styled("Overview", theme.header), columns), ""]
    indent = " " * max(0, (columns - (per_row * (CARD_WIDTH + CARD_GAP) - CARD_GAP)) // 2)

    for row in range(first_row, min(grid_rows, first_row + visible_rows)):
        cards = [
            _card(slides[i], i + 1, theme, i == state.overview_selected_index, i == state.index)
            for i in range(row * per_row, min(len(slides), (row + 1) * per_row))
        ]
        for part in range(CARD_HEIGHT):
            lines.append(indent + (" " * CARD_GAP).join(card[part] for card in cards))

    if grid_rows > visible_rows:
        first = first_row * per_row + 1
        last = min(len(slides), (first_row + visible_rows) * per_row)
        lines.append(center(styled(f"Showing {first}-{last} of {len(slides)}", theme.ui.dim), columns))

    height = rows - 2
    lines = lines[:height] + [""] * (height - len(lines))
    return lines + footer_lines(theme, columns, OVERVIEW_HINTS, position=(state.overview_selected_index, len(slides)))


def theme_selector_view(themes: Sequence[Theme], state: NavigationState, theme: Theme, columns: int, rows: int) -> list[str]:
    """Centred list of themes with the cursor and the active theme marked."""
    entries = [styled("Select theme", theme.header), ""]
    width = max(len(t.name) for t in themes) + 6
    for position, candidate in enumerate(themes):
        cursor = "▸ " if position == state.theme_cursor else "  "
        active = " ✓" if candidate.id == state.theme_id else "  "
        entry = f"{cursor}{candidate.name.ljust(width - 6)}{active}"
        entries.append(styled(entry, theme.ui.highlight if position == state.theme_cursor else theme.ui.text))

    box = frame_box(entries, min(columns - 2, width + 6), theme.ui.border)
    height = rows - 2
    top = max(0, (height - len(box)) // 2)
    lines = [""] * top + [center(line, columns) for line in box]
    lines = lines[:height] + [""] * (height - len(lines))
    return lines + footer_lines(theme, columns, THEME_HINTS)


def empty_view(theme: Theme, source_label: str, columns: int, rows: int, reload_count: int = 0) -> list[str]:
    """Shown when the slide list is empty (for example after a reload)."""
    message = [
        styled("No slides found", theme.header),
        "",
        styled(f"Add .md or .cast files to {source_label}", theme.ui.text),
        styled("The deck reloads automatically.", theme.ui.dim),
    ]
    box = frame_box(message, min(columns - 2, max(visible_width(line) for line in message) + 6), theme.ui.border)
    height = rows - 2
    top = max(0, (height - len(box)) // 2)
    lines = [""] * top + [center(line, columns) for line in box]
    lines = lines[:height] + [""] * (height - len(lines))
    return lines + footer_lines(theme, columns, EMPTY_HINTS, reload_count)
