"""Recording playback and the outer presentation loop."""

from .cast import read_header, resize_cast, resized_copy, extract_text
from .keys import PlaybackIntent, decode_playback_key, read_playback_key
from .player import CastPlayer
from .supervisor import PlaybackSupervisor, next_interactive_index

__all__ = [
    "read_header",
    "resize_cast",
    "resized_copy",
    "extract_text",
    "PlaybackIntent",
    "decode_playback_key",
    "read_playback_key",
    "CastPlayer",
    "PlaybackSupervisor",
    "next_interactive_index",
]
