"""
Unit tests for slide source resolution, validation and loading.
"""
from pathlib import Path

import pytest

from mdplay.core.errors import SlideSourceError
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.slides import (
    SlideSource,
    SourceKind,
    load_directory,
    load_document,
    load_slides,
    resolve_source,
    title_from_filename,
    validate_source,
)


class TestTitleFromFilename:
    """Tests for filename-derived titles."""
    
    @pytest.mark.parametrize("filename,extension,expected", [
        ("01_intro.md", ".md", "intro"),
        ("02-my_demo.cast", ".cast", "my demo"),
        ("getting-started.md", ".md", "getting started"),
        ("2024_plan.md", ".md", "plan"),
    ])
    def test_titles(self, filename, extension, expected):
        assert title_from_filename(filename, extension) == expected


class TestLoadDirectory:
    """Tests for directory mode."""
    
    def test_intro_and_demo(self, slides_dir):
        """Test the basic Markdown plus recording deck."""
        slides = load_slides(SlideSource(SourceKind.DIRECTORY, slides_dir))
        
        assert [type(s) for s in slides] == [MarkdownSlide, CastSlide]
        assert [s.title for s in slides] == ["intro", "demo"]
        assert slides[0].notes == "Say hello"
        assert "notes:" not in slides[0].content
        assert slides[0].slide_dir == slides_dir.resolve()
        assert slides[1].path == slides_dir / "02_demo.cast"
        assert slides[1].notes == ""
    
    def test_sorted_and_filtered(self, tmp_path):
        """Test lexicographic order and extension filtering."""
        for name in ["10_b.md", "02_a.md", "ab.cast", ".hidden.md", "notes.txt", "UPPER.MD"]:
            (tmp_path / name).write_text("x", encoding="utf-8")
        
        names = [slide.filename for slide in load_directory(tmp_path)]
        
        assert names == ["02_a.md", "10_b.md", "ab.cast"]
    
    def test_hidden_slides_excluded(self, tmp_path):
        (tmp_path / "01_a.md").write_text("# A", encoding="utf-8")
        (tmp_path / "02_b.md").write_text("---\nhidden: true\n---\n# B", encoding="utf-8")
        
        slides = load_slides(SlideSource(SourceKind.DIRECTORY, tmp_path))
        
        assert [s.filename for s in slides] == ["01_a.md"]
    
    def test_front_matter_title_and_notes_fallback(self, tmp_path):
        (tmp_path / "01_a.md").write_text(
            "---\ntitle: Explicit\nnotes: From front matter\nlayout: sideways\n---\n# Heading\n",
            encoding="utf-8",
        )
        
        slide = load_directory(tmp_path)[0]
        
        assert slide.title == "Explicit"
        assert slide.notes == "From front matter"
        assert slide.metadata.layout is None
    
    def test_notes_directive_wins(self, tmp_path):
        (tmp_path / "01_a.md").write_text(
            "---\nnotes: fallback\n---\nBody\n<!-- notes: directive -->", encoding="utf-8",
        )
        
        assert load_directory(tmp_path)[0].notes == "directive"
    
    def test_unreadable_file(self, tmp_path):
        (tmp_path / "01_bad.md").write_bytes(b"\xff\xfe\x00bad")
        
        with pytest.raises(SlideSourceError):
            load_directory(tmp_path)


DOCUMENT = """---
theme: neon
title: Ignored
---
# First

A

---
title: Custom
layout: center
---
Body two
<!-- notes: two -->
---
hidden: true
---
# Secret
---
## No h1
"""


class TestLoadDocument:
    """Tests for single-document mode."""
    
    def test_split_and_metadata(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_text(DOCUMENT, encoding="utf-8")
        
        slides = load_document(path)
        
        assert [s.filename for s in slides] == ["talk.md#1", "talk.md#2", "talk.md#3", "talk.md#4"]
        assert [s.title for s in slides] == ["First", "Custom", "Secret", "Slide 4"]
        assert all(s.metadata.theme == "neon" for s in slides)
        assert slides[1].metadata.layout == "center"
        assert slides[1].notes == "two"
        assert slides[2].metadata.hidden is True
    
    def test_hidden_filtered_by_load_slides(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_text(DOCUMENT, encoding="utf-8")
        
        slides = load_slides(SlideSource(SourceKind.DOCUMENT, path))
        
        assert [s.title for s in slides] == ["First", "Custom", "Slide 4"]
    
    def test_document_without_front_matter(self, tmp_path):
        path = tmp_path / "plain.md"
        path.write_text("# One\n---\n# Two\n", encoding="utf-8")
        
        assert [s.title for s in load_document(path)] == ["One", "Two"]
    
    def test_dash_lines_in_code_fence_do_not_split(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_text("# One\n\n```yaml\nkey: 1\n---\nkey: 2\n```\n\n---\n\n# Two", encoding="utf-8")
        
        slides = load_document(path)
        
        assert [s.title for s in slides] == ["One", "Two"]
        assert "key: 1\n---\nkey: 2" in slides[0].content
    
    def test_setext_underline_does_not_split(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_text("# One\n\nSection\n-------\n\nBody\n\n---\n\n# Two", encoding="utf-8")
        
        slides = load_document(path)
        
        assert [s.title for s in slides] == ["One", "Two"]
        assert "Section\n-------" in slides[0].content
    
    def test_dash_lines_in_comment_do_not_split(self, tmp_path):
        path = tmp_path / "talk.md"
        path.write_text("# One\n<!-- notes:\nfirst\n---\nsecond\n-->\n---\n# Two\n", encoding="utf-8")
        
        slides = load_document(path)
        
        assert [s.title for s in slides] == ["One", "Two"]
        assert slides[0].notes == "first\n---\nsecond"


class TestResolveSource:
    """Tests for resolve_source."""
    
    def test_explicit_markdown_file_is_document(self, tmp_path, settings):
        (tmp_path / "talk.md").write_text("# A", encoding="utf-8")
        
        source = resolve_source("talk.md", settings, cwd=tmp_path)
        
        assert source.kind == SourceKind.DOCUMENT
        assert source.path == (tmp_path / "talk.md").resolve()
        assert source.watch_dir == tmp_path.resolve()
    
    def test_explicit_directory(self, tmp_path, settings):
        source = resolve_source("deck", settings, cwd=tmp_path)
        
        assert source.kind == SourceKind.DIRECTORY
        assert source.explicit is True
    
    def test_deck_directory_preferred(self, tmp_path, settings):
        (tmp_path / ".deck").mkdir()
        
        source = resolve_source(None, settings, cwd=tmp_path)
        
        assert source.path == (tmp_path / ".deck").resolve()
        assert source.explicit is False
    
    def test_fallback_slides_directory(self, tmp_path, settings):
        source = resolve_source(None, settings, cwd=tmp_path)
        
        assert source.path == (tmp_path / "slides").resolve()


class TestValidateSource:
    """Tests for validate_source."""
    
    def test_missing_directory(self, tmp_path):
        missing = tmp_path / "nope"
        
        with pytest.raises(SlideSourceError) as exc_info:
            validate_source(SlideSource(SourceKind.DIRECTORY, missing))
        
        assert str(missing) in str(exc_info.value)
        assert ".md or .cast" in exc_info.value.describe()
    
    def test_not_a_directory(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        
        with pytest.raises(SlideSourceError, match="not a directory"):
            validate_source(SlideSource(SourceKind.DIRECTORY, target))
    
    def test_empty_directory(self, tmp_path):
        with pytest.raises(SlideSourceError, match="No slides found") as exc_info:
            validate_source(SlideSource(SourceKind.DIRECTORY, tmp_path))
        
        assert "01_intro.md" in exc_info.value.describe()
    
    def test_valid_directory(self, slides_dir):
        validate_source(SlideSource(SourceKind.DIRECTORY, slides_dir))
    
    def test_missing_document(self, tmp_path):
        with pytest.raises(SlideSourceError, match="not found"):
            validate_source(SlideSource(SourceKind.DOCUMENT, tmp_path / "gone.md"))
