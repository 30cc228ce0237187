"""Colour themes for the UI chrome and the Markdown renderer."""
from dataclasses import dataclass
from typing import Optional, Union

from mdplay.models.slide import CastSlide, MarkdownSlide

from .ansi import rgb_bg, rgb_fg, sgr

BOLD, ITALIC, UNDERLINE, STRIKE = 1, 3, 4, 9
WHITE, GRAY = 37, 90
YELLOW = 33
RED_B, GREEN_B, YELLOW_B, BLUE_B, MAGENTA_B, CYAN_B, WHITE_B = 91, 92, 93, 94, 95, 96, 97
BG_GRAY = 100


@dataclass(frozen=True)
class UiColors:
    border: str
    highlight: str
    text: str
    dim: str


@dataclass(frozen=True)
class MarkdownStyles:
    code: str
    blockquote: str
    heading: str
    first_heading: str
    strong: str
    em: str
    link: str
    listitem: str
    text: str
    codespan: str
    hr: str
    strikethrough: str
    table: str


@dataclass(frozen=True)
class Theme:
    id: str
    name: str
    ui: UiColors
    header: str
    markdown: MarkdownStyles


THEMES: dict[str, Theme] = {
    "default": Theme(
        id="default",
        name="Default",
        ui=UiColors(border=sgr(WHITE_B), highlight=sgr(CYAN_B), text=sgr(WHITE_B), dim=sgr(GRAY)),
        header=sgr(BOLD, CYAN_B),
        markdown=MarkdownStyles(
            code=sgr(BG_GRAY, WHITE_B),
            blockquote=sgr(GRAY, ITALIC),
            heading=sgr(CYAN_B, BOLD),
            first_heading=sgr(WHITE_B, UNDERLINE, BOLD),
            strong=sgr(BOLD, WHITE_B),
            em=sgr(ITALIC, WHITE),
            link=sgr(CYAN_B, UNDERLINE),
            listitem=sgr(WHITE_B),
            text=sgr(WHITE_B),
            codespan=sgr(YELLOW_B),
            hr=sgr(GRAY),
            strikethrough=sgr(GRAY, STRIKE),
            table=sgr(WHITE_B),
        ),
    ),
    "light": Theme(
        id="light",
        name="High Contrast",
        ui=UiColors(border=sgr(BLUE_B), highlight=sgr(MAGENTA_B), text=sgr(WHITE_B), dim=sgr(BLUE_B)),
        header=sgr(BOLD, BLUE_B),
        markdown=MarkdownStyles(
            code=sgr(BG_GRAY, WHITE_B),
            blockquote=sgr(BLUE_B, ITALIC),
            heading=sgr(BLUE_B, BOLD),
            first_heading=sgr(MAGENTA_B, UNDERLINE, BOLD),
            strong=sgr(BOLD, WHITE_B),
            em=sgr(ITALIC, CYAN_B),
            link=sgr(MAGENTA_B, UNDERLINE),
            listitem=sgr(WHITE_B),
            text=sgr(WHITE_B),
            codespan=sgr(YELLOW_B),
            hr=sgr(BLUE_B),
            strikethrough=sgr(GRAY, STRIKE),
            table=sgr(WHITE_B),
        ),
    ),
    "amber": Theme(
        id="amber",
        name="Retro Amber",
        ui=UiColors(border=sgr(YELLOW_B), highlight=sgr(YELLOW_B), text=sgr(YELLOW_B), dim=rgb_fg(0x66, 0x44, 0x00)),
        header=sgr(BOLD, YELLOW_B),
        markdown=MarkdownStyles(
            code=rgb_bg(0x33, 0x22, 0x00) + sgr(YELLOW_B),
            blockquote=sgr(YELLOW, ITALIC),
            heading=sgr(YELLOW_B, BOLD),
            first_heading=sgr(YELLOW_B, UNDERLINE, BOLD),
            strong=sgr(BOLD, YELLOW_B),
            em=sgr(ITALIC, YELLOW),
            link=sgr(YELLOW_B, UNDERLINE),
            listitem=sgr(YELLOW_B),
            text=sgr(YELLOW_B),
            codespan=sgr(YELLOW_B, BOLD),
            hr=sgr(YELLOW),
            strikethrough=rgb_fg(0x66, 0x44, 0x00) + sgr(STRIKE),
            table=sgr(YELLOW_B),
        ),
    ),
    "neon": Theme(
        id="neon",
        name="Neon",
        ui=UiColors(border=sgr(MAGENTA_B), highlight=sgr(GREEN_B), text=sgr(CYAN_B), dim=sgr(MAGENTA_B)),
        header=sgr(BOLD, MAGENTA_B),
        markdown=MarkdownStyles(
            code=sgr(BG_GRAY, GREEN_B),
            blockquote=sgr(MAGENTA_B, ITALIC),
            heading=sgr(GREEN_B, BOLD),
            first_heading=sgr(MAGENTA_B, UNDERLINE, BOLD),
            strong=sgr(BOLD, CYAN_B),
            em=sgr(ITALIC, MAGENTA_B),
            link=sgr(GREEN_B, UNDERLINE),
            listitem=sgr(CYAN_B),
            text=sgr(CYAN_B),
            codespan=sgr(GREEN_B),
            hr=sgr(MAGENTA_B),
            strikethrough=sgr(RED_B, STRIKE),
            table=sgr(CYAN_B),
        ),
    ),
    "minimal": Theme(
        id="minimal",
        name="Minimal",
        ui=UiColors(border=sgr(WHITE), highlight=sgr(BOLD), text=sgr(WHITE), dim=sgr(GRAY)),
        header=sgr(BOLD),
        markdown=MarkdownStyles(
            code=sgr(WHITE),
            blockquote=sgr(ITALIC),
            heading=sgr(BOLD),
            first_heading=sgr(BOLD, UNDERLINE),
            strong=sgr(BOLD),
            em=sgr(ITALIC),
            link=sgr(UNDERLINE),
            listitem="",
            text="",
            codespan=sgr(BOLD),
            hr=sgr(GRAY),
            strikethrough=sgr(STRIKE),
            table="",
        ),
    ),
}

DEFAULT_THEME_ID = "default"


def theme_ids() -> list[str]:
    return list(THEMES)


def get_theme(theme_id: Optional[str]) -> Theme:
    """Look up a theme, falling back to the default one."""
    return THEMES.get(theme_id or DEFAULT_THEME_ID, THEMES[DEFAULT_THEME_ID])


def slide_theme(session_theme_id: str, slide: Union[MarkdownSlide, CastSlide]) -> Theme:
    """A slide's front-matter theme wins over the session theme."""
    return get_theme(slide.metadata.theme or session_theme_id)
