"""Helpers for measuring and fitting ANSI-styled text into a character grid."""
import re

ESCAPE_SEQUENCE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]|\x1b\][^\x07]*\x07")
RESET = "\x1b[0m"


def sgr(*codes: int) -> str:
    """Build a Select Graphic Rendition sequence (``sgr(1, 97)`` -> bold bright white)."""
    if not codes:
        return ""
    return "\x1b[" + ";".join(str(code) for code in codes) + "m"


def rgb_fg(r: int, g: int, b: int) -> str:
    return f"\x1b[38;2;{r};{g};{b}m"


def rgb_bg(r: int, g: int, b: int) -> str:
    return f"\x1b[48;2;{r};{g};{b}m"


def styled(text: str, style: str) -> str:
    """Wrap text in a style and a reset (no-op for an empty style or text)."""
    if not style or not text:
        return text
    return f"{style}{text}{RESET}"


def strip_ansi(text: str) -> str:
    return ESCAPE_SEQUENCE.sub("", text)


def visible_width(text: str) -> int:
    return len(strip_ansi(text))


def truncate(text: str, width: int) -> str:
    """Cut a styled line to ``width`` visible characters, keeping escape sequences intact."""
    if width <= 0:
        return ""
    if visible_width(text) <= width:
        return text
    
    out = []
    seen = 0
    styled_output = False
    pos = 0
    for match in ESCAPE_SEQUENCE.finditer(text):
        chunk = text[pos:match.start()]
        if seen + len(chunk) >= width:
            out.append(chunk[: width - seen])
            seen = width
            break
        out.append(chunk)
        seen += len(chunk)
        out.append(match.group(0))
        styled_output = True
        pos = match.end()
    else:
        out.append(text[pos:][: width - seen])
    
    return "".join(out) + (RESET if styled_output else "")


def pad(text: str, width: int) -> str:
    """Truncate or right-pad a styled line to exactly ``width`` columns."""
    text = truncate(text, width)
    return text + " " * max(0, width - visible_width(text))


def center(text: str, width: int) -> str:
    text = truncate(text, width)
    gap = max(0, width - visible_width(text))
    left = gap // 2
    return " " * left + text + " " * (gap - left)


def justify(left: str, right: str, width: int) -> str:
    """Place ``left`` and ``right`` at both ends of a line."""
    gap = width - visible_width(left) - visible_width(right)
    if gap < 1:
        return truncate(left, width)
    return left + " " * gap + right
