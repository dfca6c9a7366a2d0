"""Playback domain - the session a front end drives.

This domain handles:
- Feeding opened files and folders into the queue
- One metadata resolver per current item
- Now-playing text and the play/pause state
"""

from .session import (
    NO_MEDIA_TEXT,
    SEARCHING_TEXT,
    UNTITLED_TEXT,
    NowPlaying,
    PlayerSession,
    creator_text,
    title_text,
)

__all__ = [
    "NO_MEDIA_TEXT",
    "SEARCHING_TEXT",
    "UNTITLED_TEXT",
    "NowPlaying",
    "PlayerSession",
    "creator_text",
    "title_text",
]
