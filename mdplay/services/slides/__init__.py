"""Slide repository: sources, loading and body parsing."""

from .source import SlideSource, SourceKind, SLIDE_EXTENSIONS, resolve_source, validate_source
from .loader import load_slides, load_directory, load_document, read_slides, title_from_filename, visible_slides
from .parser import (
    parse_fragments,
    parse_notes,
    strip_notes,
    parse_image_references,
    total_steps,
    visible_content,
    header_text,
)

__all__ = [
    "SlideSource",
    "SourceKind",
    "SLIDE_EXTENSIONS",
    "resolve_source",
    "validate_source",
    "load_slides",
    "load_directory",
    "load_document",
    "read_slides",
    "visible_slides",
    "title_from_filename",
    "parse_fragments",
    "parse_notes",
    "strip_notes",
    "parse_image_references",
    "total_steps",
    "visible_content",
    "header_text",
]
