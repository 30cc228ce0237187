"""
Fragment, notes, header and image parsing for Markdown slide bodies.

All functions are pure and operate on plain strings so they can be reused by
the loader, the navigation machine and the render pipeline.
"""
import re
from typing import Any, Callable, Optional, Union

import yaml

from mdplay.models.slide import CastSlide, ImageRef, MarkdownSlide

# A line holding only the fragment marker splits the body into reveal steps
FRAGMENT_SEPARATOR = re.compile(r"^[ \t]*<!--\s*fragment\s*-->[ \t]*$", re.IGNORECASE | re.MULTILINE)

NOTES_DIRECTIVE = re.compile(r"<!--\s*notes:\s*(.*?)\s*-->", re.IGNORECASE | re.DOTALL)

IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")

LEADING_HEADER = re.compile(r"\A#[ \t]+.+(?:\r?\n)?")

FRONT_MATTER = re.compile(r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

SLIDE_SEPARATOR = re.compile(r"^-{3,}[ \t]*$")

CODE_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")

# Lines a setext underline cannot attach to
NON_PARAGRAPH_LINE = re.compile(r"^ {0,3}(?:#{1,6}(?:[ \t]|$)|[-*+][ \t]|\d+[.)][ \t]|>|<!--)")

DEFAULT_ALT_TEXT = "Image"


def parse_fragments(body: str) -> list[str]:
    """Split a body on fragment markers; segments are trimmed and empty ones dropped."""
    fragments = (part.strip() for part in FRAGMENT_SEPARATOR.split(body))
    return [fragment for fragment in fragments if fragment]


def parse_notes(raw_body: str) -> str:
    """Return the text of the first notes directive, or an empty string."""
    match = NOTES_DIRECTIVE.search(raw_body)
    return match.group(1).strip() if match else ""


def strip_notes(raw_body: str) -> str:
    """Remove every notes directive from a body."""
    return NOTES_DIRECTIVE.sub("", raw_body).strip()


def parse_image_references(body: str) -> list[ImageRef]:
    """Find Markdown image references in document order."""
    return [
        ImageRef(
            full_match=match.group(0),
            alt_text=match.group(1) or DEFAULT_ALT_TEXT,
            image_path=match.group(2) or "",
        )
        for match in IMAGE_PATTERN.finditer(body)
    ]


def find_header(content: str) -> Optional[str]:
    """First level-1 heading text in the content, if any."""
    for line in content.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    return None


def strip_header(content: str) -> str:
    """Drop a level-1 heading when it is the very first line."""
    return LEADING_HEADER.sub("", content, count=1)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """
    Separate a leading YAML front-matter block from the body.
    
    Invalid YAML is treated as empty metadata and the block is still removed.
    A block that parses to something other than a mapping is not front
    matter at all (a document may open with a slide separator).
    
    Returns:
        Tuple of (front matter mapping, remaining body)
    """
    match = FRONT_MATTER.match(text)
    if not match:
        return {}, text
    
    body = text[match.end():]
    raw = match.group(1) or ""
    if not raw.strip():
        return {}, body
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError:
        return {}, body
    if not isinstance(data, dict):
        return {}, text
    return data, body


def split_slides(body: str, is_metadata: Callable[[str], bool] = lambda block: False) -> list[str]:
    """
    Split a document body into raw slide blocks on ``---`` lines.
    
    A dash line only separates slides where Markdown would read it as a
    thematic break: never inside a fenced code block or an HTML comment, and
    not directly under a paragraph line, where it underlines a heading.
    ``is_metadata`` lets a block made only of front-matter keys end at the
    dash line that closes it.
    
    Blocks are returned untrimmed; empty ones are kept.
    """
    blocks: list[str] = []
    current: list[str] = []
    fence: Optional[str] = None
    in_comment = False
    under_paragraph = False
    
    for line in body.splitlines():
        if fence is not None:
            closing = CODE_FENCE.match(line)
            if closing and not closing.group(2).strip():
                marker = closing.group(1)
                if marker[0] == fence[0] and len(marker) >= len(fence):
                    fence = None
            current.append(line)
            under_paragraph = False
            continue
        
        if in_comment:
            in_comment = "-->" not in line
            current.append(line)
            under_paragraph = False
            continue
        
        if SLIDE_SEPARATOR.match(line) and (not under_paragraph or is_metadata("\n".join(current))):
            blocks.append("\n".join(current))
            current = []
            under_paragraph = False
            continue
        
        current.append(line)
        opening = CODE_FENCE.match(line)
        if opening and not (opening.group(1)[0] == "`" and "`" in opening.group(2)):
            fence = opening.group(1)
            under_paragraph = False
        elif "<!--" in line and "-->" not in line.split("<!--", 1)[1]:
            in_comment = True
            under_paragraph = False
        else:
            under_paragraph = bool(line.strip()) and not NON_PARAGRAPH_LINE.match(line) and not SLIDE_SEPARATOR.match(line)
    
    blocks.append("\n".join(current))
    return blocks


def total_steps(slide: Union[MarkdownSlide, CastSlide]) -> int:
    """Number of reveal steps a slide has (always at least one)."""
    if isinstance(slide, CastSlide):
        return 1
    return max(1, len(parse_fragments(strip_header(slide.content))))


def visible_content(slide: MarkdownSlide, step: int) -> str:
    """Fragments ``0..step`` of the header-stripped body, joined by a blank line."""
    fragments = parse_fragments(strip_header(slide.content))
    return "\n\n".join(fragments[: max(0, step) + 1])


def header_text(slide: Union[MarkdownSlide, CastSlide]) -> str:
    """Title shown in large letters above a slide."""
    if slide.metadata.title:
        return slide.metadata.title
    if isinstance(slide, MarkdownSlide):
        return find_header(slide.content) or slide.title
    return slide.title
