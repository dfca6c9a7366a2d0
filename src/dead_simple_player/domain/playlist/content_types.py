"""
Content types for media files and folders.

A small conformance hierarchy (audio and movies are audiovisual content,
folders are directories) used to decide what may enter a playlist.
"""

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional


class ContentType(Enum):
    """Kinds of things that can be offered to a playlist."""

    DATA = "public.data"
    AUDIOVISUAL_CONTENT = "public.audiovisual-content"
    AUDIO = "public.audio"
    MOVIE = "public.movie"
    DIRECTORY = "public.directory"
    FOLDER = "public.folder"

    @property
    def parent(self) -> Optional["ContentType"]:
        return _PARENTS.get(self)

    def conforms_to(self, other: "ContentType") -> bool:
        """True if this type is `other` or descends from it."""
        current: Optional[ContentType] = self
        while current is not None:
            if current is other:
                return True
            current = current.parent
        return False


_PARENTS: dict[ContentType, ContentType] = {
    ContentType.AUDIOVISUAL_CONTENT: ContentType.DATA,
    ContentType.AUDIO: ContentType.AUDIOVISUAL_CONTENT,
    ContentType.MOVIE: ContentType.AUDIOVISUAL_CONTENT,
    ContentType.FOLDER: ContentType.DIRECTORY,
}

# Container types; stripped from the filter when recursion is off
CONTAINER_TYPES = frozenset({ContentType.DIRECTORY, ContentType.FOLDER})

DEFAULT_ALLOWED_CONTENT_TYPES = frozenset(
    {ContentType.AUDIOVISUAL_CONTENT, ContentType.DIRECTORY, ContentType.FOLDER}
)

# Formats that mimetypes does not know on every platform
_EXTENSION_TYPES: dict[str, ContentType] = {
    ".mp3": ContentType.AUDIO,
    ".m4a": ContentType.AUDIO,
    ".aac": ContentType.AUDIO,
    ".flac": ContentType.AUDIO,
    ".wav": ContentType.AUDIO,
    ".aiff": ContentType.AUDIO,
    ".ogg": ContentType.AUDIO,
    ".oga": ContentType.AUDIO,
    ".opus": ContentType.AUDIO,
    ".wma": ContentType.AUDIO,
    ".mp4": ContentType.MOVIE,
    ".m4v": ContentType.MOVIE,
    ".mov": ContentType.MOVIE,
    ".mkv": ContentType.MOVIE,
    ".webm": ContentType.MOVIE,
    ".avi": ContentType.MOVIE,
}


def content_type_for_path(path: Path) -> ContentType:
    """Guess the content type of a file from its extension.

    Unknown extensions are plain DATA.
    """
    suffix = path.suffix.lower()
    if suffix in _EXTENSION_TYPES:
        return _EXTENSION_TYPES[suffix]

    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type:
        if mime_type.startswith("audio/"):
            return ContentType.AUDIO
        if mime_type.startswith("video/"):
            return ContentType.MOVIE
    return ContentType.DATA


def parse_content_types(names: list[str]) -> frozenset[ContentType]:
    """Turn config names like "audiovisual_content" into ContentType members.

    Raises:
        ValueError: If a name is not a known content type
    """
    content_types = set()
    for name in names:
        try:
            content_types.add(ContentType[name.upper()])
        except KeyError:
            raise ValueError(f"Unknown content type: {name}") from None
    return frozenset(content_types)
