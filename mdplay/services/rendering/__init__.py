"""Slide content rendering: Markdown, images and themes."""

from .themes import Theme, THEMES, get_theme, theme_ids, slide_theme
from .markdown import TerminalMarkdown, render_markdown
from .images import render_image, resolve_image_path
from .pipeline import ContentGeometry, RenderedFrame, RenderPipeline, render_content, LOADING

__all__ = [
    "Theme",
    "THEMES",
    "get_theme",
    "theme_ids",
    "slide_theme",
    "TerminalMarkdown",
    "render_markdown",
    "render_image",
    "resolve_image_path",
    "ContentGeometry",
    "RenderedFrame",
    "RenderPipeline",
    "render_content",
    "LOADING",
]
