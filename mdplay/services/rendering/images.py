"""
Inline images for Markdown slides.

Local images are decoded with Pillow and drawn with half-block characters
(two pixel rows per terminal row). Remote images are never fetched.
"""
import asyncio
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from PIL import Image

from mdplay.models.slide import ImageRef

logger = logging.getLogger(__name__)

HALF_BLOCK = "▄"
RESET = "\x1b[0m"


def supports_truecolor() -> bool:
    """Advisory check of the terminal colour depth."""
    return os.environ.get("COLORTERM", "").lower() in ("truecolor", "24bit")


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """Map an RGB tuple (0-255) to the nearest 256-color ANSI index."""
    r_ = int(round(r / 255 * 5))
    g_ = int(round(g / 255 * 5))
    b_ = int(round(b / 255 * 5))
    return 16 + 36 * r_ + 6 * g_ + b_


def _cell(top: tuple[int, int, int], bottom: tuple[int, int, int], truecolor: bool) -> str:
    if truecolor:
        return f"\x1b[38;2;{bottom[0]};{bottom[1]};{bottom[2]};48;2;{top[0]};{top[1]};{top[2]}m{HALF_BLOCK}"
    return f"\x1b[38;5;{rgb_to_ansi256(*bottom)};48;5;{rgb_to_ansi256(*top)}m{HALF_BLOCK}"


def resolve_image_path(image_path: str, slide_dir: Path) -> Path:
    """Resolve a local image reference against the slide's directory."""
    path = Path(image_path).expanduser()
    if path.is_absolute():
        return path
    return (slide_dir / path).resolve()


def draw_half_blocks(path: Path, max_width: int, max_height: int, truecolor: bool = False) -> str:
    """
    Decode an image and draw it as coloured half blocks.

    The image keeps its aspect ratio and fits within ``max_width`` columns
    and ``max_height`` rows.
    """
    with Image.open(path) as source:
        img = source.convert("RGB")

    img_w, img_h = img.size
    ratio = min(max_width / img_w, (max_height * 2) / img_h)
    new_w = max(1, int(img_w * ratio))
    new_h = max(2, int(img_h * ratio))
    img = img.resize((new_w, new_h), Image.LANCZOS)

    lines = []
    for y in range(0, new_h, 2):
        cells = []
        for x in range(new_w):
            top = img.getpixel((x, y))
            bottom = img.getpixel((x, y + 1)) if y + 1 < new_h else top
            cells.append(_cell(top, bottom, truecolor))
        lines.append("".join(cells) + RESET)
    return "\n".join(lines)


def render_image(
    ref: ImageRef,
    slide_dir: Path,
    max_width: int,
    max_height: int,
    truecolor: Optional[bool] = None,
) -> str:
    """
    Render one image reference to terminal text.

    Never raises: missing files and decoding problems become textual
    placeholders.
    """
    if ref.is_remote:
        return f"[Image: {ref.alt_text}] ({ref.image_path})"

    resolved = resolve_image_path(ref.image_path, slide_dir)
    if not resolved.is_file():
        return f"[Image not found: {ref.alt_text}] ({resolved})"

    if truecolor is None:
        truecolor = supports_truecolor()
    try:
        return draw_half_blocks(resolved, max(1, max_width), max(1, max_height), truecolor)
    except Exception as e:
        logger.warning(f"Failed to render image {resolved}: {e}")
        return f"[Image: {ref.alt_text}] (failed to render)"


def substitute_images(text: str, refs: list[ImageRef]) -> tuple[str, dict[str, ImageRef]]:
    """
    Swap each image reference for an opaque token.

    The token is alphanumeric and sits in its own paragraph so Markdown
    conversion leaves it untouched.

    Returns:
        Tuple of (text with tokens, token -> reference)
    """
    token = uuid.uuid4().hex[:6]
    placeholders: dict[str, ImageRef] = {}
    for position, ref in enumerate(refs):
        placeholder = f"MDPLAYIMG{position}X{token}"
        placeholders[placeholder] = ref
        text = text.replace(ref.full_match, f"\n\n{placeholder}\n\n", 1)
    return text, placeholders


async def render_images(
    placeholders: dict[str, ImageRef],
    slide_dir: Path,
    max_width: int,
    max_height: int,
) -> dict[str, str]:
    """Render every referenced image off the event loop."""
    loop = asyncio.get_running_loop()
    truecolor = supports_truecolor()
    items = list(placeholders.items())
    blocks = await asyncio.gather(*(
        loop.run_in_executor(None, render_image, ref, slide_dir, max_width, max_height, truecolor)
        for _, ref in items
    ))
    return {placeholder: block for (placeholder, _), block in zip(items, blocks)}


def inject_images(rendered: str, blocks: dict[str, str]) -> str:
    """Replace tokens in converted text with their image blocks."""
    for placeholder, block in blocks.items():
        rendered = rendered.replace(placeholder, block)
    return rendered
