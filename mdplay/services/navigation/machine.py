"""
Navigation state machine.

``handle_key`` is a pure transition function from (state, key) to a new
state plus the side effects the caller has to carry out (scrolling,
presenter notification, leaving the session). Nothing here touches the
terminal or the filesystem.
"""
from dataclasses import dataclass
from typing import Sequence, Union

from mdplay.models.navigation import Mode, NavigationState, PlayAction, QuitAction, Transition
from mdplay.models.slide import CastSlide, MarkdownSlide
from mdplay.services.slides.parser import total_steps

AnySlide = Union[MarkdownSlide, CastSlide]

SCROLL_LINE = 1
SCROLL_PAGE = 5

OVERVIEW_TOGGLE = ("tab", "g")
QUIT_KEYS = ("escape", "q")


@dataclass(frozen=True)
class NavigationContext:
    """Read-only facts the machine needs besides the state itself."""
    slides: Sequence[AnySlide]
    overview_columns: int = 1
    theme_ids: Sequence[str] = ("default",)
    font_count: int = 1


def initial_state(start_index: int = 0, theme_id: str = "default", font_index: int = 0) -> NavigationState:
    return NavigationState(
        index=start_index,
        overview_selected_index=start_index,
        theme_id=theme_id,
        font_index=font_index,
    )


def advance(state: NavigationState, slides: Sequence[AnySlide]) -> Transition:
    """Next fragment, else first fragment of the next slide, else stay."""
    if not slides:
        return Transition(state)
    if state.step < total_steps(slides[state.index]) - 1:
        return Transition(state.evolve(step=state.step + 1))
    if state.index < len(slides) - 1:
        return Transition(state.evolve(index=state.index + 1, step=0), index_changed=True)
    return Transition(state)


def retreat(state: NavigationState, slides: Sequence[AnySlide]) -> Transition:
    """Previous fragment, else the last fragment of the previous slide, else stay."""
    if not slides:
        return Transition(state)
    if state.step > 0:
        return Transition(state.evolve(step=state.step - 1))
    if state.index > 0:
        index = state.index - 1
        return Transition(state.evolve(index=index, step=total_steps(slides[index]) - 1), index_changed=True)
    return Transition(state)


def jump(state: NavigationState, index: int) -> Transition:
    """Show slide ``index`` from its first fragment."""
    return Transition(
        state.evolve(index=index, step=0, mode=Mode.PRESENTATION),
        index_changed=index != state.index,
    )


def enter_overview(state: NavigationState) -> Transition:
    return Transition(state.evolve(mode=Mode.OVERVIEW, overview_selected_index=state.index))


def move_overview(state: NavigationState, delta: int, slide_count: int) -> Transition:
    """Move the overview cursor, clamped to the slide range."""
    selected = min(max(0, state.overview_selected_index + delta), max(0, slide_count - 1))
    return Transition(state.evolve(overview_selected_index=selected))


def open_theme_selector(state: NavigationState, theme_ids: Sequence[str]) -> Transition:
    cursor = list(theme_ids).index(state.theme_id) if state.theme_id in theme_ids else 0
    return Transition(state.evolve(mode=Mode.THEME_SELECT, resume_mode=state.mode, theme_cursor=cursor))


def reconcile(state: NavigationState, slides: Sequence[AnySlide]) -> Transition:
    """
    Fit the state to a freshly loaded slide list.

    The index is clamped when the list shrank; the step and overview cursor
    are clamped to the slide now under them.
    """
    if not slides:
        changed = state.index != 0
        return Transition(state.evolve(index=0, step=0, overview_selected_index=0), index_changed=changed)

    last = len(slides) - 1
    index = min(state.index, last)
    step = min(state.step, total_steps(slides[index]) - 1)
    selected = min(state.overview_selected_index, last)
    return Transition(
        state.evolve(index=index, step=step, overview_selected_index=selected),
        index_changed=index != state.index,
    )


def _theme_select(state: NavigationState, key: str, ctx: NavigationContext) -> Transition:
    count = max(1, len(ctx.theme_ids))
    if key == "up":
        return Transition(state.evolve(theme_cursor=(state.theme_cursor - 1) % count))
    if key == "down":
        return Transition(state.evolve(theme_cursor=(state.theme_cursor + 1) % count))
    if key == "enter" and ctx.theme_ids:
        return Transition(state.evolve(theme_id=ctx.theme_ids[state.theme_cursor % count], mode=state.resume_mode))
    if key in ("escape", "t"):
        return Transition(state.evolve(mode=state.resume_mode))
    return Transition(state)


def _overview(state: NavigationState, key: str, ctx: NavigationContext) -> Transition:
    columns = max(1, ctx.overview_columns)
    moves = {"left": -1, "right": 1, "up": -columns, "down": columns}
    if key in moves:
        return move_overview(state, moves[key], len(ctx.slides))
    if key == "enter":
        return jump(state, state.overview_selected_index)
    if key == "escape" or key in OVERVIEW_TOGGLE:
        return Transition(state.evolve(mode=Mode.PRESENTATION))
    if key == "t":
        return open_theme_selector(state, ctx.theme_ids)
    return Transition(state)


def _presentation(state: NavigationState, key: str, ctx: NavigationContext) -> Transition:
    slide = ctx.slides[state.index]

    if key == "right":
        return advance(state, ctx.slides)
    if key == "left":
        return retreat(state, ctx.slides)
    if key in ("space", "enter") and isinstance(slide, CastSlide):
        return Transition(
            state.evolve(mode=Mode.PLAYBACK),
            exit_action=PlayAction(path=slide.path, slide_index=state.index),
        )
    if key == "space":
        return Transition(state, scroll=SCROLL_PAGE)
    if key == "up":
        return Transition(state, scroll=-SCROLL_LINE)
    if key == "down":
        return Transition(state, scroll=SCROLL_LINE)
    if key in OVERVIEW_TOGGLE:
        return enter_overview(state)
    if key == "t":
        return open_theme_selector(state, ctx.theme_ids)
    if key == "f":
        return Transition(state.evolve(font_index=(state.font_index + 1) % max(1, ctx.font_count)))
    if key in QUIT_KEYS:
        return Transition(state, exit_action=QuitAction())
    return Transition(state)


def handle_key(state: NavigationState, key: str, ctx: NavigationContext) -> Transition:
    """
    Apply one decoded key press.

    Args:
        state: Current navigation state
        key: Key name from :func:`mdplay.ui.keys.decode_keys`
        ctx: Slides and layout facts

    Returns:
        Transition describing the new state and requested effects
    """
    if state.mode == Mode.THEME_SELECT:
        return _theme_select(state, key, ctx)

    if not ctx.slides:
        if key in QUIT_KEYS:
            return Transition(state, exit_action=QuitAction())
        return Transition(state)

    if state.mode == Mode.OVERVIEW:
        return _overview(state, key, ctx)
    if state.mode == Mode.PRESENTATION:
        return _presentation(state, key, ctx)
    return Transition(state)
