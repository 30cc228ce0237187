"""
Tests for Markdown conversion, image rendering and the render pipeline.
"""
import asyncio
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from mdplay.models.slide import ImageRef
from mdplay.services.rendering import ansi
from mdplay.services.rendering.images import render_image, substitute_images
from mdplay.services.rendering.markdown import render_markdown, wrap_spans
from mdplay.services.rendering.pipeline import ContentGeometry, RenderPipeline, render_content
from mdplay.services.rendering.themes import get_theme, slide_theme

from conftest import cast_slide, markdown_slide

THEME = get_theme("default")


def plain(text: str) -> list[str]:
    return [ansi.strip_ansi(line) for line in text.split("\n")]


class TestAnsi:
    """Tests for width-aware string helpers."""
    
    def test_visible_width_ignores_escapes(self):
        assert ansi.visible_width(ansi.styled("hello", ansi.sgr(1))) == 5
    
    def test_truncate_keeps_styles_balanced(self):
        text = ansi.styled("hello world", ansi.sgr(31))
        cut = ansi.truncate(text, 5)
        
        assert ansi.strip_ansi(cut) == "hello"
        assert cut.endswith(ansi.RESET)
    
    def test_pad_and_center(self):
        assert ansi.pad("ab", 4) == "ab  "
        assert ansi.center("ab", 6) == "  ab  "
    
    def test_justify(self):
        assert ansi.justify("a", "b", 5) == "a   b"


class TestWrapSpans:
    def test_wraps_on_words(self):
        assert wrap_spans([("one two three", "")], 7) == ["one two", "three"]
    
    def test_cuts_long_words(self):
        assert wrap_spans([("abcdefghij", "")], 4) == ["abcd", "efgh", "ij"]
    
    def test_newline_forces_break(self):
        assert wrap_spans([("a", ""), ("\n", ""), ("b", "")], 20) == ["a", "b"]
    
    def test_empty_input_yields_one_line(self):
        assert wrap_spans([], 10) == [""]


class TestMarkdown:
    """Tests for Markdown to terminal text."""
    
    def test_heading_and_paragraph(self):
        lines = plain(render_markdown("# Title\n\nHello **world**", THEME, 40))
        
        assert lines == ["Title", "", "Hello world"]
    
    def test_subheading_keeps_marker(self):
        assert plain(render_markdown("## Part", THEME, 40)) == ["## Part"]
    
    def test_lists(self):
        assert plain(render_markdown("- a\n- b", THEME, 40)) == ["• a", "• b"]
        assert plain(render_markdown("1. x\n2. y", THEME, 40)) == ["1. x", "2. y"]
    
    def test_blockquote(self):
        assert plain(render_markdown("> quoted", THEME, 40)) == ["│ quoted"]
    
    def test_link_shows_url(self):
        assert plain(render_markdown("[site](https://example.com)", THEME, 60)) == ["site (https://example.com)"]
    
    def test_html_comments_are_hidden(self):
        assert plain(render_markdown("Text\n\n<!-- hidden -->", THEME, 40)) == ["Text"]
    
    def test_code_block(self):
        assert plain(render_markdown("```\ncode\n```", THEME, 40)) == [" code "]
    
    def test_table_is_boxed(self):
        lines = plain(render_markdown("| a | b |\n|---|---|\n| 1 | 2 |", THEME, 40))
        
        assert lines[0].startswith("┌")
        assert lines[-1].startswith("└")
        assert any("a" in line and "b" in line for line in lines)
    
    def test_lines_fit_width(self):
        text = "word " * 50
        assert all(len(line) <= 20 for line in plain(render_markdown(text, THEME, 20)))


class TestThemes:
    def test_unknown_theme_falls_back(self):
        assert get_theme("nope").id == "default"
    
    def test_slide_theme_overrides_session(self):
        slide = markdown_slide("x", metadata={"theme": "neon"})
        
        assert slide_theme("amber", slide).id == "neon"
        assert slide_theme("amber", cast_slide()).id == "amber"


class TestImages:
    """Tests for image placeholders and half-block drawing."""
    
    def test_remote_image_is_not_fetched(self, tmp_path):
        ref = ImageRef(full_match="![Logo](https://x.y/logo.png)", alt_text="Logo", image_path="https://x.y/logo.png")
        
        assert render_image(ref, tmp_path, 40, 10) == "[Image: Logo] (https://x.y/logo.png)"
    
    def test_missing_image(self, tmp_path):
        ref = ImageRef(full_match="![Logo](missing.png)", alt_text="Logo", image_path="missing.png")
        text = render_image(ref, tmp_path, 40, 10)
        
        assert text.startswith("[Image not found: Logo]")
        assert "missing.png" in text
    
    def test_draws_half_blocks(self, tmp_path):
        Image.new("RGB", (4, 4), (255, 0, 0)).save(tmp_path / "red.png")
        ref = ImageRef(full_match="![r](red.png)", alt_text="r", image_path="red.png")
        
        lines = render_image(ref, tmp_path, 4, 2, truecolor=True).split("\n")
        
        assert len(lines) == 2
        assert all(ansi.strip_ansi(line) == "▄▄▄▄" for line in lines)
        assert "38;2;255;0;0" in lines[0]
    
    def test_undecodable_image(self, tmp_path):
        (tmp_path / "bad.png").write_bytes(b"not an image")
        ref = ImageRef(full_match="![Bad](bad.png)", alt_text="Bad", image_path="bad.png")
        
        assert render_image(ref, tmp_path, 40, 10) == "[Image: Bad] (failed to render)"
    
    def test_substitute_images(self):
        ref = ImageRef(full_match="![a](a.png)", alt_text="a", image_path="a.png")
        text, placeholders = substitute_images("before ![a](a.png) after", [ref])
        
        token = next(iter(placeholders))
        assert token.isalnum()
        assert "![a](a.png)" not in text
        assert f"\n\n{token}\n\n" in text


class TestContentGeometry:
    def test_proportional_column(self, settings):
        geometry = ContentGeometry.for_viewport(100, 20, settings)
        
        assert geometry.width == 66
        assert geometry.image_width == 60
        assert geometry.image_height == 12
    
    def test_column_is_capped(self, settings):
        geometry = ContentGeometry.for_viewport(200, 20, settings)
        
        assert geometry.width == 80
        assert geometry.image_width == 80


GEOMETRY = ContentGeometry(width=60, height=20, image_width=40, image_height=10)


class TestRenderContent:
    @pytest.mark.asyncio
    async def test_only_visible_fragments(self):
        slide = markdown_slide("# Head\nOne\n<!-- fragment -->\nTwo")
        
        first = await render_content(slide, 0, THEME, GEOMETRY)
        both = await render_content(slide, 1, THEME, GEOMETRY)
        
        assert [ansi.strip_ansi(line) for line in first] == ["One"]
        assert [ansi.strip_ansi(line) for line in both] == ["One", "", "Two"]
    
    @pytest.mark.asyncio
    async def test_missing_image_placeholder(self, tmp_path):
        """A missing image shows a placeholder and the rest of the slide still renders."""
        slide = markdown_slide("Intro\n\n![Logo](missing.png)\n\nOutro").model_copy(update={"slide_dir": tmp_path})
        
        lines = [ansi.strip_ansi(line) for line in await render_content(slide, 0, THEME, GEOMETRY)]
        
        assert lines[0] == "Intro"
        assert any(line.startswith("[Image not found: Logo]") for line in lines)
        assert lines[-1] == "Outro"


class TestRenderPipeline:
    """Tests for last-request-wins rendering."""
    
    @pytest.mark.asyncio
    async def test_stale_render_is_dropped(self):
        """A slow render for an old slide never replaces a newer one."""
        slow = markdown_slide("slow", filename="a.md")
        fast = markdown_slide("fast", filename="b.md")
        
        async def fake_render(slide, step, theme, geometry):
            await asyncio.sleep(0.05 if slide.filename == "a.md" else 0)
            return [slide.content]
        
        on_ready = MagicMock()
        pipeline = RenderPipeline(on_ready)
        
        with patch("mdplay.services.rendering.pipeline.render_content", side_effect=fake_render):
            pipeline.request(slow, 0, THEME, GEOMETRY)
            pipeline.request(fast, 0, THEME, GEOMETRY)
            await pipeline.drain()
        
        on_ready.assert_called_once()
        assert on_ready.call_args[0][0].lines == ["fast"]
        assert pipeline.frame_for(slow.id) is None
        assert pipeline.frame_for(fast.id).lines == ["fast"]
    
    @pytest.mark.asyncio
    async def test_loading_until_published(self):
        pipeline = RenderPipeline(MagicMock())
        slide = markdown_slide("hello")
        
        pipeline.request(slide, 0, THEME, GEOMETRY)
        assert pipeline.loading
        
        await pipeline.drain()
        assert not pipeline.loading
    
    @pytest.mark.asyncio
    async def test_failure_falls_back_to_plain_text(self):
        on_ready = MagicMock()
        pipeline = RenderPipeline(on_ready)
        slide = markdown_slide("**raw** text")
        
        with patch("mdplay.services.rendering.pipeline.render_content", side_effect=RuntimeError("boom")):
            pipeline.request(slide, 0, THEME, GEOMETRY)
            await pipeline.drain()
        
        assert on_ready.call_args[0][0].lines == ["**raw** text"]
    
    @pytest.mark.asyncio
    async def test_close_discards_pending(self):
        on_ready = MagicMock()
        pipeline = RenderPipeline(on_ready)
        
        pipeline.request(markdown_slide("x"), 0, THEME, GEOMETRY)
        pipeline.close()
        await pipeline.drain()
        
        on_ready.assert_not_called()
