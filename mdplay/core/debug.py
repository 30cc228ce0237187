"""Debug mode configuration."""

import os
import logging

logger = logging.getLogger(__name__)
_reload_count = 0
_debug_mode_enabled = False

_TRUTHY = ("true", "1", "yes", "on")


def init_debug_mode() -> bool:
    global _debug_mode_enabled
    value = os.environ.get("MDPLAY_DEBUG") or os.environ.get("DEBUG", "")
    _debug_mode_enabled = value.lower() in _TRUTHY
    
    if _debug_mode_enabled:
        logger.info("🐛 Debug mode ENABLED")
    
    return _debug_mode_enabled


def is_debug_mode() -> bool:
    return _debug_mode_enabled


def increment_reload_count(count: int = 1) -> int:
    global _reload_count
    _reload_count += count
    return _reload_count


def get_reload_count() -> int:
    return _reload_count


def get_debug_status() -> dict:
    return {
        "debug_mode": _debug_mode_enabled,
        "reload_count": _reload_count,
        "log_level": logging.getLevelName(logging.getLogger().getEffectiveLevel()),
    }
