"""Resolution and validation of where slides come from."""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from mdplay.core.config import Settings
from mdplay.core.errors import SlideSourceError

SLIDE_EXTENSIONS = (".md", ".cast")


class SourceKind(str, Enum):
    DIRECTORY = "directory"
    DOCUMENT = "document"


@dataclass(frozen=True)
class SlideSource:
    """
    A slide directory or a single multi-slide Markdown document.
    
    ``explicit`` is False when the path came from the fallback convention
    rather than the command line.
    """
    kind: SourceKind
    path: Path
    explicit: bool = True
    
    @property
    def watch_dir(self) -> Path:
        """Directory observed for live reload."""
        return self.path if self.kind == SourceKind.DIRECTORY else self.path.parent
    
    def is_slide_file(self, filename: str) -> bool:
        """Whether a file name inside ``watch_dir`` belongs to this source."""
        if self.kind == SourceKind.DOCUMENT:
            return filename == self.path.name
        return not filename.startswith(".") and filename.endswith(SLIDE_EXTENSIONS)


def resolve_source(explicit_path: Optional[str], settings: Settings, cwd: Optional[Path] = None) -> SlideSource:
    """
    Decide which slides to present.
    
    Priority: 1) explicit path (a ``.md`` file selects document mode),
    2) the conventional deck directory if present, 3) the fallback slides directory.
    """
    base = cwd or Path.cwd()
    
    if explicit_path:
        path = (base / explicit_path).resolve()
        if path.suffix == ".md" and path.is_file():
            return SlideSource(SourceKind.DOCUMENT, path)
        return SlideSource(SourceKind.DIRECTORY, path)
    
    deck_dir = (base / settings.deck_dir).resolve()
    if deck_dir.is_dir():
        return SlideSource(SourceKind.DIRECTORY, deck_dir, explicit=False)
    
    return SlideSource(SourceKind.DIRECTORY, (base / settings.default_slides_dir).resolve(), explicit=False)


def list_slide_files(directory: Path) -> list[Path]:
    """Slide files of a directory in presentation (lexicographic) order."""
    return sorted(
        (
            entry for entry in directory.iterdir()
            if entry.is_file() and not entry.name.startswith(".") and entry.suffix in SLIDE_EXTENSIONS
        ),
        key=lambda entry: entry.name,
    )


def validate_source(source: SlideSource) -> None:
    """
    Check that a source can be presented.
    
    Raises:
        SlideSourceError: if the path is missing, of the wrong kind, or
            (directory mode) holds no slide files
    """
    path = source.path
    
    if source.kind == SourceKind.DOCUMENT:
        if not path.exists():
            raise SlideSourceError(
                f"Slide document not found: {path}",
                path,
                ["Please provide a Markdown file with slides separated by '---' lines."],
            )
        if not path.is_file():
            raise SlideSourceError(f"Path is not a file: {path}", path)
        return
    
    if not path.exists():
        raise SlideSourceError(
            f"Slides directory not found: {path}",
            path,
            ["Please provide a valid path to a directory containing .md or .cast files."],
        )
    if not path.is_dir():
        raise SlideSourceError(
            f"Path is not a directory: {path}",
            path,
            ["Pass a directory of slides, or a single .md document."],
        )
    if not list_slide_files(path):
        raise SlideSourceError(
            f"No slides found in: {path}",
            path,
            [
                "The directory should contain .md (Markdown) or .cast (asciinema) files.",
                "Files are sorted alphabetically, so prefix them with numbers (e.g., 01_intro.md).",
            ],
        )
