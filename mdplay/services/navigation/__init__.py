"""Keyboard-driven navigation between slides and fragments."""

from .machine import (
    NavigationContext,
    handle_key,
    initial_state,
    advance,
    retreat,
    jump,
    enter_overview,
    move_overview,
    reconcile,
)

__all__ = [
    "NavigationContext",
    "handle_key",
    "initial_state",
    "advance",
    "retreat",
    "jump",
    "enter_overview",
    "move_overview",
    "reconcile",
]
