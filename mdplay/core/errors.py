"""Exception hierarchy for mdplay."""
from pathlib import Path
from typing import Optional, Sequence


class MdplayError(Exception):
    """Base class for all mdplay errors."""


class SlideSourceError(MdplayError):
    """
    The slide source cannot be presented.
    
    Fatal: reported on stderr and the process exits with status 1.
    """
    
    def __init__(self, message: str, path: Path, hints: Sequence[str] = ()):
        self.path = path
        self.hints = list(hints)
        super().__init__(message)
    
    def describe(self) -> str:
        """Full user-facing message including guidance lines."""
        lines = [f"Error: {self}"]
        if self.hints:
            lines.append("")
            lines.extend(self.hints)
        return "\n".join(lines)


class StartIndexError(MdplayError):
    """The requested start slide is outside the loaded deck."""
    
    def __init__(self, requested: int, total: int):
        self.requested = requested
        self.total = total
        super().__init__(
            f"--start-at value {requested} exceeds total slides ({total})"
        )


class PlayerError(MdplayError):
    """The external recording player could not run the recording."""
    
    def __init__(self, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(message)


class CastFormatError(MdplayError):
    """A recording file has no readable header."""


class PresenterError(MdplayError):
    """The presenter server could not be started."""
