"""Navigation state and session exit actions."""
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class Mode(str, Enum):
    PRESENTATION = "presentation"
    OVERVIEW = "overview"
    PLAYBACK = "playback"
    THEME_SELECT = "theme_select"


@dataclass(frozen=True)
class NavigationState:
    """
    Everything that decides what the interactive session shows.
    
    Immutable; transitions produce a new instance via ``evolve``.
    ``resume_mode`` remembers the mode underneath the theme selector.
    """
    index: int = 0
    step: int = 0
    mode: Mode = Mode.PRESENTATION
    overview_selected_index: int = 0
    resume_mode: Mode = Mode.PRESENTATION
    theme_id: str = "default"
    theme_cursor: int = 0
    font_index: int = 0
    
    def evolve(self, **changes) -> "NavigationState":
        return replace(self, **changes)


@dataclass(frozen=True)
class QuitAction:
    """The presenter asked to leave."""


@dataclass(frozen=True)
class PlayAction:
    """A recording slide was started; the supervisor takes over the terminal."""
    path: Path
    slide_index: int


ExitAction = Union[QuitAction, PlayAction]


@dataclass(frozen=True)
class Transition:
    """Result of feeding one event to the navigation machine."""
    state: NavigationState
    index_changed: bool = False
    scroll: int = 0
    exit_action: Optional[ExitAction] = None
