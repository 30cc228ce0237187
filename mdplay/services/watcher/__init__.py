"""Live reload of slide sources."""

from .service import Debouncer, SlideWatcher

__all__ = ["Debouncer", "SlideWatcher"]
