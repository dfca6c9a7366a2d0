"""
Playback queue with a movable cursor.

Holds media locations in playback order plus the index of the item that is
currently playing (or paused). Media can be ingested from single files or
whole folders, filtered by content type.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from loguru import logger

from .content_types import (
    CONTAINER_TYPES,
    DEFAULT_ALLOWED_CONTENT_TYPES,
    ContentType,
)
from .filesystem import FileSystem, local_filesystem


@dataclass
class PlaylistQueue:
    """An ordered list of media to play and a cursor pointing at the current one.

    The cursor is never clamped. A cursor left pointing outside `items` means
    there is no current item until media is added or the cursor is moved.
    """

    items: list[Path] = field(default_factory=list)
    current_index: Optional[int] = None

    @classmethod
    def empty(cls) -> "PlaylistQueue":
        return cls()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.items)

    # State inspection

    @property
    def current_item(self) -> Optional[Path]:
        """The item at the cursor, or the first item while the cursor is unset."""
        index = 0 if self.current_index is None else self.current_index
        return self._item_at(index)

    @property
    def peek_next(self) -> Optional[Path]:
        """The item advance() would move to, without moving."""
        next_index = self._peek_next_index()
        if next_index is None:
            return None
        return self._item_at(next_index)

    # Movement

    def advance(self) -> Optional[Path]:
        """Move the cursor to the next item.

        Returns:
            The new current item, or None if there is nothing to move to.
            The cursor is left where it was when there is no next item.
        """
        next_index = self._peek_next_index()
        if next_index is None or self._item_at(next_index) is None:
            logger.debug(f"No next item to advance to (cursor={self.current_index})")
            return None

        self.current_index = next_index
        return self.items[next_index]

    # Modification

    def add(
        self,
        location: Union[str, Path],
        allowed_types: Iterable[ContentType] = DEFAULT_ALLOWED_CONTENT_TYPES,
        allow_cursor_move: bool = True,
        allow_recursion: bool = False,
        filesystem: Optional[FileSystem] = None,
    ) -> None:
        """Add the media at `location` to the queue, or the media inside it if it's a folder.

        Args:
            location: A media file or a folder of media files; a leading ~ is
                expanded
            allowed_types: What may be added. Folders are only opened if a
                directory type is allowed
            allow_cursor_move: If True, adding media can point the cursor at the
                first item added, but only when the cursor is unset or stale
            allow_recursion: If False, only media directly inside the folder is
                added. If True, sub-folders are searched without limit (looping
                symlinks are not detected)
            filesystem: Filesystem to read from (defaults to the local disk)

        Missing locations, unreadable locations and files of other types are
        skipped; nothing is raised.
        """
        filesystem = filesystem or local_filesystem
        location = Path(location).expanduser()
        allowed_types = frozenset(allowed_types)

        try:
            with filesystem.access(location):
                self._add_accessible(
                    location, allowed_types, allow_cursor_move, allow_recursion, filesystem
                )
        except PermissionError:
            logger.error(
                f"Couldn't get the necessary permissions to read from: {location}"
            )

    def extend(self, paths: Iterable[Union[str, Path]], allow_cursor_move: bool = True) -> None:
        """Append media paths without checking the filesystem."""
        for path in paths:
            self._append(Path(path), allow_cursor_move)

    # Internals

    def _add_accessible(
        self,
        location: Path,
        allowed_types: frozenset[ContentType],
        allow_cursor_move: bool,
        allow_recursion: bool,
        filesystem: FileSystem,
    ) -> None:
        status = filesystem.probe(location)
        if not status.exists:
            logger.warning(f"Asked to add media from a path that doesn't exist: {location}")
            return

        if status.is_directory:
            if not any(t.conforms_to(ContentType.DIRECTORY) for t in allowed_types):
                logger.debug(f"Asked to add media from a folder, but folders aren't allowed: {location}")
                return

            try:
                children = filesystem.list_children(location)
            except OSError as e:
                logger.error(f"Couldn't list folder {location}: {e}")
                return

            child_types = allowed_types if allow_recursion else allowed_types - CONTAINER_TYPES
            for child in children:
                self.add(
                    child,
                    allowed_types=child_types,
                    allow_cursor_move=allow_cursor_move,
                    allow_recursion=allow_recursion,
                    filesystem=filesystem,
                )
            return

        leaf_types = allowed_types - {ContentType.DIRECTORY}
        if not any(filesystem.conforms(location, t) for t in leaf_types):
            return

        self._append(location, allow_cursor_move)

    def _append(self, item: Path, allow_cursor_move: bool) -> None:
        move_to_item = allow_cursor_move and not self._cursor_in_range()
        self.items.append(item)
        if move_to_item:
            self.current_index = len(self.items) - 1

    def _cursor_in_range(self) -> bool:
        return self.current_index is not None and self._item_at(self.current_index) is not None

    def _item_at(self, index: int) -> Optional[Path]:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def _peek_next_index(self) -> Optional[int]:
        if self.current_index is None:
            return 0
        if self._cursor_in_range():
            return self.current_index + 1
        return None
