"""Playlist domain - the playback queue and how media gets into it.

This domain handles:
- The ordered playback queue and its cursor
- Content types for media files and folders
- Filesystem access used when ingesting files and folders
"""

# Content types
from .content_types import (
    CONTAINER_TYPES,
    DEFAULT_ALLOWED_CONTENT_TYPES,
    ContentType,
    content_type_for_path,
    parse_content_types,
)

# Filesystem
from .filesystem import FileSystem, LocalFileSystem, PathStatus, local_filesystem

# Queue
from .queue import PlaylistQueue

__all__ = [
    # Content types
    "CONTAINER_TYPES",
    "DEFAULT_ALLOWED_CONTENT_TYPES",
    "ContentType",
    "content_type_for_path",
    "parse_content_types",
    # Filesystem
    "FileSystem",
    "LocalFileSystem",
    "PathStatus",
    "local_filesystem",
    # Queue
    "PlaylistQueue",
]
