"""
Markdown to ANSI terminal text.

The Markdown source is parsed into an AST with mistune and walked block by
block; inline spans are styled with the active theme and word-wrapped to the
content column.
"""
import logging
import re
from typing import Any, Optional

import mistune

from .ansi import pad, styled, visible_width
from .themes import Theme

logger = logging.getLogger(__name__)

Span = tuple[str, str]
Token = dict[str, Any]

BULLET = "•"
QUOTE_PREFIX = "│ "
HTML_COMMENT = re.compile(r"^\s*<!--.*?-->\s*$", re.DOTALL)

_parse = mistune.create_markdown(renderer="ast", plugins=["strikethrough", "table"])


def _is_comment(raw: str) -> bool:
    return HTML_COMMENT.match(raw) is not None


def wrap_spans(spans: list[Span], width: int) -> list[str]:
    """
    Word-wrap styled spans into lines no wider than ``width``.

    A span containing a newline forces a line break. Words longer than the
    line are cut.
    """
    width = max(1, width)
    lines: list[str] = []
    words: list[list[Span]] = []
    current: list[Span] = []

    def end_word() -> None:
        nonlocal current
        if current:
            words.append(current)
            current = []

    def flush_line() -> None:
        line: list[str] = []
        used = 0
        for word in words:
            size = sum(len(text) for text, _ in word)
            if used and used + 1 + size > width:
                lines.append("".join(line))
                line, used = [], 0
            if used:
                line.append(" ")
                used += 1
            for text, style in word:
                while text:
                    if used >= width:
                        lines.append("".join(line))
                        line, used = [], 0
                    take = min(len(text), width - used)
                    line.append(styled(text[:take], style))
                    used += take
                    text = text[take:]
        lines.append("".join(line))
        words.clear()

    for text, style in spans:
        for piece in re.split(r"(\n|[ \t]+)", text):
            if not piece:
                continue
            if piece == "\n":
                end_word()
                flush_line()
            elif piece.isspace():
                end_word()
            else:
                current.append((piece, style))
    end_word()
    if words or not lines:
        flush_line()
    return lines


class TerminalMarkdown:
    """Render Markdown for a content column of a given width."""

    def __init__(self, theme: Theme, width: int):
        self.theme = theme
        self.styles = theme.markdown
        self.width = max(10, width)

    def render(self, text: str) -> str:
        tokens = _parse(text)
        return "\n".join(self._blocks(tokens, self.width))

    # Blocks

    def _blocks(self, tokens: list[Token], width: int, text_style: Optional[str] = None) -> list[str]:
        out: list[str] = []
        for token in tokens:
            lines = self._block(token, width, self.styles.text if text_style is None else text_style)
            if lines is None:
                continue
            if out:
                out.append("")
            out.extend(lines)
        return out

    def _block(self, token: Token, width: int, text_style: str) -> Optional[list[str]]:
        kind = token["type"]

        if kind in ("paragraph", "block_text"):
            return wrap_spans(self._inline(token.get("children", []), text_style), width)

        if kind == "heading":
            level = token.get("attrs", {}).get("level", 1)
            if level == 1:
                style = self.styles.first_heading
                prefix: list[Span] = []
            else:
                style = self.styles.heading
                prefix = [("#" * level + " ", style)]
            return wrap_spans(prefix + self._inline(token.get("children", []), style), width)

        if kind == "block_code":
            return self._code(token.get("raw", ""), width)

        if kind == "block_quote":
            quote = self.styles.blockquote
            inner = self._blocks(token.get("children", []), width - len(QUOTE_PREFIX), quote)
            return [styled(QUOTE_PREFIX, quote) + line for line in inner]

        if kind == "list":
            return self._list(token, width, text_style)

        if kind == "thematic_break":
            return [styled("─" * width, self.styles.hr)]

        if kind == "table":
            return self._table(token, width)

        if kind == "block_html":
            raw = token.get("raw", "")
            if _is_comment(raw):
                return None
            return wrap_spans([(raw.strip(), text_style)], width)

        if kind == "blank_line":
            return None

        logger.debug(f"Unhandled markdown block: {kind}")
        children = token.get("children")
        if isinstance(children, list):
            return self._blocks(children, width, text_style)
        return None

    def _code(self, raw: str, width: int) -> list[str]:
        source = raw.rstrip("\n").split("\n")
        inner = min(max((len(line) for line in source), default=0), width - 2)
        return [styled(pad(" " + line.replace("\t", "    "), inner + 2), self.styles.code) for line in source]

    def _list(self, token: Token, width: int, text_style: str) -> list[str]:
        attrs = token.get("attrs", {})
        ordered = attrs.get("ordered", False)
        number = attrs.get("start", 1) or 1
        tight = token.get("tight", True)

        out: list[str] = []
        for item in token.get("children", []):
            marker = f"{number}. " if ordered else f"{BULLET} "
            number += 1
            indent = " " * len(marker)
            lines = self._blocks(item.get("children", []), width - len(marker), text_style)
            if not tight and out:
                out.append("")
            for position, line in enumerate(lines or [""]):
                if position == 0:
                    out.append(styled(marker, self.styles.listitem) + line)
                else:
                    out.append(indent + line if line else line)
        return out

    def _table(self, token: Token, width: int) -> list[str]:
        rows: list[list[str]] = []
        header_rows = 0
        for section in token.get("children", []):
            if section["type"] == "table_head":
                rows.append(self._cells(section.get("children", []), self.styles.strong))
                header_rows = 1
            elif section["type"] == "table_body":
                for row in section.get("children", []):
                    rows.append(self._cells(row.get("children", []), self.styles.table))
        if not rows:
            return []

        columns = max(len(row) for row in rows)
        for row in rows:
            row.extend([""] * (columns - len(row)))
        widths = [max(visible_width(row[c]) for row in rows) for c in range(columns)]

        # Borders take 3 columns per cell plus one
        budget = width - (3 * columns + 1)
        while sum(widths) > budget and max(widths) > 1:
            widest = widths.index(max(widths))
            widths[widest] -= 1

        border = self.styles.table

        def rule(left: str, mid: str, right: str) -> str:
            return styled(left + mid.join("─" * (w + 2) for w in widths) + right, border)

        def line(row: list[str]) -> str:
            bar = styled("│", border)
            return bar + bar.join(f" {pad(cell, w)} " for cell, w in zip(row, widths)) + bar

        out = [rule("┌", "┬", "┐")]
        for position, row in enumerate(rows):
            out.append(line(row))
            if header_rows and position == 0 and len(rows) > 1:
                out.append(rule("├", "┼", "┤"))
        out.append(rule("└", "┴", "┘"))
        return out

    def _cells(self, cells: list[Token], style: str) -> list[str]:
        return [
            "".join(styled(text, s) for text, s in self._inline(cell.get("children", []), style)).replace("\n", " ")
            for cell in cells
        ]

    # Inline

    def _inline(self, tokens: list[Token], style: str) -> list[Span]:
        spans: list[Span] = []
        for token in tokens:
            kind = token["type"]
            children = token.get("children", [])

            if kind == "text":
                spans.append((token.get("raw", ""), style))
            elif kind == "strong":
                spans.extend(self._inline(children, style + self.styles.strong))
            elif kind == "emphasis":
                spans.extend(self._inline(children, style + self.styles.em))
            elif kind == "strikethrough":
                spans.extend(self._inline(children, style + self.styles.strikethrough))
            elif kind == "codespan":
                spans.append((token.get("raw", ""), self.styles.codespan))
            elif kind == "link":
                url = token.get("attrs", {}).get("url", "")
                label = self._inline(children, self.styles.link)
                spans.extend(label)
                if url and url != "".join(text for text, _ in label):
                    spans.append((f" ({url})", self.theme.ui.dim))
            elif kind == "image":
                alt = "".join(text for text, _ in self._inline(children, style)) or "Image"
                spans.append((f"[Image: {alt}]", self.theme.ui.dim))
            elif kind == "softbreak":
                spans.append((" ", style))
            elif kind == "linebreak":
                spans.append(("\n", style))
            elif kind == "inline_html":
                raw = token.get("raw", "")
                if not _is_comment(raw):
                    spans.append((raw, style))
            else:
                spans.extend(self._inline(children, style) if children else [(token.get("raw", ""), style)])
        return spans


def render_markdown(text: str, theme: Theme, width: int) -> str:
    """Convenience wrapper around :class:`TerminalMarkdown`."""
    return TerminalMarkdown(theme, width).render(text)

