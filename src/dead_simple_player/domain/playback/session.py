"""
Player session: the queue, the current media and its metadata.

The session is what a front end talks to. It feeds opened files and folders
into the queue, builds a fresh MetadataResolver whenever the current item
changes (discarding the previous one) and turns lookup results into the
text shown for the current item.
"""

from pathlib import Path
from typing import Callable, NamedTuple, Optional, Union

from loguru import logger

from dead_simple_player.core.config import Config
from dead_simple_player.domain.metadata import (
    ARTWORK,
    CREATOR,
    STILL_SEARCHING,
    TITLE,
    Found,
    MetadataKey,
    MetadataResolver,
    RawMetadataRecord,
    SearchResult,
    StillSearching,
    UpdateSignal,
    records_from_file,
    result_value,
)
from dead_simple_player.domain.playlist import FileSystem, PlaylistQueue

NO_MEDIA_TEXT = "Pick something to play"
UNTITLED_TEXT = "Untitled"
SEARCHING_TEXT = "..."


class NowPlaying(NamedTuple):
    """What to show for the current item."""

    title: str
    creator: str
    artwork: Optional[bytes] = None


def title_text(result: Optional[SearchResult], media: Optional[Path]) -> str:
    """Display title for a title lookup result.

    No media shows a prompt; a missing title falls back to the file name.
    """
    if result is None:
        return NO_MEDIA_TEXT if media is None else ""
    if isinstance(result, StillSearching):
        return SEARCHING_TEXT
    if isinstance(result, Found):
        return str(result.value)
    if media is not None:
        return media.stem
    return UNTITLED_TEXT


def creator_text(result: Optional[SearchResult]) -> str:
    """Display creator for a creator lookup result (empty when unknown)."""
    if isinstance(result, StillSearching):
        return SEARCHING_TEXT
    if isinstance(result, Found):
        return str(result.value)
    return ""


class PlayerSession:
    """Owns the playback queue and the metadata of the current item.

    Not thread-safe: call it from one thread. Update callbacks may arrive on
    metadata worker threads.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        queue: Optional[PlaylistQueue] = None,
        records_loader: Callable[[Path], list[RawMetadataRecord]] = records_from_file,
        filesystem: Optional[FileSystem] = None,
    ):
        self.config = config or Config()
        self.queue = queue if queue is not None else PlaylistQueue.empty()
        self.current_media: Optional[Path] = None
        self.metadata: Optional[MetadataResolver] = None
        self.is_playing = False

        self._records_loader = records_loader
        self._filesystem = filesystem
        self._updates = UpdateSignal()
        self._unsubscribe_metadata: Optional[Callable[[], None]] = None

        if self.queue.current_item is not None:
            self.prepare_media(self.queue.current_item)

    def on_update(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call `callback` when the current media changes or its metadata resolves."""
        return self._updates.subscribe(callback)

    # Queue

    def open(self, location: Union[str, Path], recursive: Optional[bool] = None) -> int:
        """Add a file or folder to the queue using the configured filters.

        Args:
            location: Media file or folder
            recursive: Override the configured allow_recursion

        Returns:
            Number of items added
        """
        playlist_config = self.config.playlist
        allow_recursion = playlist_config.allow_recursion if recursive is None else recursive

        before = len(self.queue)
        self.queue.add(
            location,
            allowed_types=playlist_config.content_types(),
            allow_cursor_move=playlist_config.allow_cursor_move,
            allow_recursion=allow_recursion,
            filesystem=self._filesystem,
        )
        added = len(self.queue) - before
        logger.info(f"Added {added} item(s) from {location}")

        self._sync_current_media()
        return added

    def next(self) -> Optional[Path]:
        """Move to the next item in the queue and prepare it."""
        item = self.queue.advance()
        if item is not None:
            self._sync_current_media()
        return item

    # Media

    def prepare_media(self, media: Optional[Path]) -> None:
        """Make `media` the current media, replacing the previous metadata resolver.

        Passing None clears the current media and stops playback.
        """
        self._release_metadata()
        self.current_media = media

        if media is None:
            self.is_playing = False
            self._updates.emit()
            return

        records = self._records_loader(media)
        self.metadata = MetadataResolver(records, max_workers=self.config.metadata.max_workers)
        self._unsubscribe_metadata = self.metadata.on_update(self._updates.emit)
        logger.info(f"Prepared {media} ({len(records)} metadata records)")
        self._updates.emit()

    def metadata_result(self, key: MetadataKey) -> Optional[SearchResult]:
        """Current lookup state for `key`, or None when nothing is loaded."""
        if self.current_media is None:
            return None
        if self.metadata is None:
            return STILL_SEARCHING
        return self.metadata.get(key)

    def now_playing(self) -> NowPlaying:
        return NowPlaying(
            title=title_text(self.metadata_result(TITLE), self.current_media),
            creator=creator_text(self.metadata_result(CREATOR)),
            artwork=result_value(self.metadata_result(ARTWORK)),
        )

    # Transport

    def play(self) -> bool:
        """Start playback; fails when there's nothing to play."""
        if self.current_media is None:
            return False
        self.is_playing = True
        return True

    def pause(self) -> bool:
        self.is_playing = False
        return True

    def toggle(self) -> bool:
        return self.pause() if self.is_playing else self.play()

    def close(self) -> None:
        """Drop the current media and all subscribers."""
        self.prepare_media(None)
        self._updates.clear()

    # Internals

    def _sync_current_media(self) -> None:
        current = self.queue.current_item
        if current != self.current_media:
            self.prepare_media(current)

    def _release_metadata(self) -> None:
        if self._unsubscribe_metadata is not None:
            self._unsubscribe_metadata()
            self._unsubscribe_metadata = None
        if self.metadata is not None:
            self.metadata.discard()
            self.metadata = None
