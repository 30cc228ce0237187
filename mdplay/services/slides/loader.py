"""
Slide loading.

Turns a slide directory or a single multi-slide document into the ordered
list of visible slides. The list is rebuilt wholesale on every call.
"""
import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from mdplay.core.errors import SlideSourceError
from mdplay.models.slide import CastSlide, MarkdownSlide, SlideMetadata

from .parser import (
    find_header,
    parse_notes,
    split_front_matter,
    split_slides,
    strip_notes,
)
from .source import SlideSource, SourceKind, list_slide_files

logger = logging.getLogger(__name__)

AnySlide = Union[MarkdownSlide, CastSlide]

NUMERIC_PREFIX = re.compile(r"^\d+[_-]")

METADATA_KEYS = frozenset(SlideMetadata.model_fields)

# Document-wide front matter only cascades presentation settings
CASCADING_KEYS = ("layout", "theme")


def title_from_filename(filename: str, extension: str) -> str:
    """``01_my-intro.md`` -> ``my intro``."""
    stem = filename[: -len(extension)] if extension and filename.endswith(extension) else filename
    stem = NUMERIC_PREFIX.sub("", stem)
    return re.sub(r"[_-]", " ", stem)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SlideSourceError(f"Cannot read slide file: {path}", path, [str(e)]) from e


def load_markdown_file(path: Path) -> MarkdownSlide:
    """Parse one Markdown slide file."""
    front_matter, body = split_front_matter(_read_text(path))
    metadata = SlideMetadata.from_front_matter(front_matter)
    
    return MarkdownSlide(
        title=metadata.title or title_from_filename(path.name, path.suffix),
        filename=path.name,
        metadata=metadata,
        notes=parse_notes(body) or metadata.notes or "",
        content=strip_notes(body),
        slide_dir=path.parent.resolve(),
    )


def load_cast_file(path: Path) -> CastSlide:
    """Describe one recording slide (the file itself is opaque)."""
    return CastSlide(
        title=title_from_filename(path.name, path.suffix),
        filename=path.name,
        path=path,
    )


def load_directory(directory: Path) -> list[AnySlide]:
    """Load every slide file of a directory in filename order."""
    slides: list[AnySlide] = []
    for path in list_slide_files(directory):
        if path.suffix == ".cast":
            slides.append(load_cast_file(path))
        else:
            slides.append(load_markdown_file(path))
    return slides


def _local_front_matter(block: str) -> Optional[dict[str, Any]]:
    """
    Recognise a block that only carries metadata for the following slide.
    
    Such a block is a YAML mapping whose keys are all known metadata keys.
    """
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict) or not data:
        return None
    if not all(isinstance(key, str) and key in METADATA_KEYS for key in data):
        return None
    return data


def load_document(path: Path) -> list[AnySlide]:
    """Split a single Markdown document into slides on ``---`` lines."""
    document_front_matter, body = split_front_matter(_read_text(path))
    document_defaults = SlideMetadata.from_front_matter(
        {key: document_front_matter[key] for key in CASCADING_KEYS if key in document_front_matter}
    )
    slide_dir = path.parent.resolve()
    
    slides: list[AnySlide] = []
    pending: Optional[dict[str, Any]] = None
    position = 0
    
    for block in split_slides(body, lambda block: _local_front_matter(block.strip()) is not None):
        text = block.strip()
        if not text:
            continue
        
        local = _local_front_matter(text)
        if local is not None:
            pending = local
            continue
        
        position += 1
        metadata = SlideMetadata.from_front_matter(pending or {}).merged_over(document_defaults)
        pending = None
        
        content = strip_notes(text)
        slides.append(
            MarkdownSlide(
                title=metadata.title or find_header(content) or f"Slide {position}",
                filename=f"{path.name}#{position}",
                metadata=metadata,
                notes=parse_notes(text) or metadata.notes or "",
                content=content,
                slide_dir=slide_dir,
            )
        )
    
    return slides


def read_slides(source: SlideSource) -> list[AnySlide]:
    """Load every slide of a source, hidden ones included."""
    if source.kind == SourceKind.DOCUMENT:
        return load_document(source.path)
    return load_directory(source.path)


def visible_slides(slides: list[AnySlide]) -> list[AnySlide]:
    """Drop slides whose front matter sets ``hidden: true``."""
    return [slide for slide in slides if not slide.metadata.hidden]


def load_slides(source: SlideSource) -> list[AnySlide]:
    """
    Load the visible slides of a source.
    
    Raises:
        SlideSourceError: if a slide file cannot be read
    """
    slides = read_slides(source)
    visible = visible_slides(slides)
    logger.debug(f"Loaded {len(visible)} slides ({len(slides) - len(visible)} hidden) from {source.path}")
    return visible
