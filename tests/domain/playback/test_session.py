"""Tests for the player session."""

from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import InlineExecutor, ManualExecutor, record
from dead_simple_player.core.config import Config, PlaylistConfig
from dead_simple_player.domain.metadata import (
    NOT_FOUND,
    STILL_SEARCHING,
    TITLE,
    Found,
    shutdown_executor,
)
from dead_simple_player.domain.playback import (
    NO_MEDIA_TEXT,
    SEARCHING_TEXT,
    UNTITLED_TEXT,
    NowPlaying,
    PlayerSession,
    creator_text,
    title_text,
)
from dead_simple_player.domain.playlist import PlaylistQueue


def fake_records(path: Path):
    """Records named after the file: a.mp3 is titled "Title a" by "Artist a"."""
    if path.stem == "untagged":
        return []
    return [
        record("TIT2", f"Title {path.stem}"),
        record("TPE1", f"Artist {path.stem}"),
        record("APIC", b"cover-" + path.stem.encode()),
    ]


@pytest.fixture
def executor():
    """Run metadata lookups inline so results are ready on the second poll."""
    inline = InlineExecutor()
    with patch("dead_simple_player.domain.metadata.resolver.get_executor", return_value=inline):
        yield inline


@pytest.fixture
def session(executor) -> PlayerSession:
    return PlayerSession(records_loader=fake_records)


class TestDisplayText:
    """Test turning lookup results into display text."""

    def test_title_without_media(self):
        assert title_text(None, None) == NO_MEDIA_TEXT

    def test_title_searching(self):
        assert title_text(STILL_SEARCHING, Path("a.mp3")) == SEARCHING_TEXT

    def test_title_found(self):
        assert title_text(Found("Song"), Path("a.mp3")) == "Song"

    def test_title_falls_back_to_file_name(self):
        assert title_text(NOT_FOUND, Path("/music/My Song.mp3")) == "My Song"

    def test_untitled(self):
        assert title_text(NOT_FOUND, None) == UNTITLED_TEXT

    def test_creator(self):
        assert creator_text(Found("Band")) == "Band"
        assert creator_text(STILL_SEARCHING) == SEARCHING_TEXT
        assert creator_text(NOT_FOUND) == ""
        assert creator_text(None) == ""


class TestSessionWithoutMedia:
    def test_now_playing_prompts(self, session: PlayerSession):
        assert session.now_playing() == NowPlaying(title=NO_MEDIA_TEXT, creator="", artwork=None)
        assert session.metadata_result(TITLE) is None

    def test_cannot_play(self, session: PlayerSession):
        assert session.play() is False
        assert session.is_playing is False

    def test_next_on_empty_queue(self, session: PlayerSession):
        assert session.next() is None
        assert session.current_media is None


class TestOpen:
    """Test opening files and folders."""

    def test_open_folder_prepares_first_item(self, session: PlayerSession, media_tree: Path):
        assert session.open(media_tree) == 2
        assert session.current_media == media_tree / "a.mp3"
        assert session.metadata is not None

    def test_open_recursive_override(self, session: PlayerSession, media_tree: Path):
        assert session.open(media_tree, recursive=True) == 4

    def test_open_uses_configured_recursion(self, executor, media_tree: Path):
        config = Config(playlist=PlaylistConfig(allow_recursion=True))
        session = PlayerSession(config, records_loader=fake_records)
        assert session.open(media_tree) == 4

    def test_open_uses_configured_types(self, executor, media_tree: Path):
        config = Config(playlist=PlaylistConfig(allowed_content_types=["movie", "directory"]))
        session = PlayerSession(config, records_loader=fake_records)
        assert session.open(media_tree, recursive=True) == 1
        assert session.current_media == media_tree / "sub" / "deeper" / "d.mp4"

    def test_open_missing_path(self, session: PlayerSession, tmp_path: Path):
        assert session.open(tmp_path / "missing.mp3") == 0
        assert session.current_media is None

    def test_opening_more_keeps_current_media(self, session: PlayerSession, media_tree: Path):
        session.open(media_tree / "b.flac")
        resolver = session.metadata
        session.open(media_tree / "a.mp3")
        assert session.current_media == media_tree / "b.flac"
        assert session.metadata is resolver

    def test_session_from_existing_queue(self, executor):
        queue = PlaylistQueue(items=[Path("x.mp4")])
        session = PlayerSession(queue=queue, records_loader=fake_records)
        assert session.current_media == Path("x.mp4")


class TestNowPlaying:
    """Test the metadata shown for the current item."""

    def test_searching_then_found(self, session: PlayerSession, media_tree: Path):
        session.open(media_tree)
        first = session.now_playing()
        assert first.title == SEARCHING_TEXT
        assert first.creator == SEARCHING_TEXT
        assert first.artwork is None

        assert session.now_playing() == NowPlaying(
            title="Title a", creator="Artist a", artwork=b"cover-a"
        )

    def test_untagged_file_shows_file_name(self, session: PlayerSession, tmp_path: Path):
        media = tmp_path / "untagged.mp3"
        media.write_bytes(b"")
        session.open(media)
        session.now_playing()
        assert session.now_playing() == NowPlaying(title="untagged", creator="", artwork=None)

    def test_updates_forwarded(self, executor, media_tree: Path):
        session = PlayerSession(records_loader=fake_records)
        calls = []
        session.on_update(lambda: calls.append(1))

        session.open(media_tree)
        assert len(calls) == 1  # media changed

        session.now_playing()
        # title, creator and artwork lookups each finished
        assert len(calls) == 4

    def test_lookups_run_in_background(self, media_tree: Path):
        manual = ManualExecutor()
        with patch("dead_simple_player.domain.metadata.resolver.get_executor", return_value=manual):
            session = PlayerSession(records_loader=fake_records)
            session.open(media_tree)
            assert session.now_playing().title == SEARCHING_TEXT
            manual.run_all()
            assert session.now_playing().title == "Title a"


class TestNext:
    """Test moving through the queue."""

    def test_next_replaces_metadata(self, session: PlayerSession, media_tree: Path):
        session.open(media_tree)
        session.now_playing()
        previous = session.metadata

        assert session.next() == media_tree / "b.flac"
        assert previous.is_discarded
        assert session.metadata is not previous
        assert session.metadata_result(TITLE) == STILL_SEARCHING
        assert session.now_playing().title == "Title b"

    def test_next_past_end(self, session: PlayerSession, media_tree: Path):
        session.open(media_tree)
        session.next()
        resolver = session.metadata
        assert session.next() is None
        assert session.current_media == media_tree / "b.flac"
        assert session.metadata is resolver

    def test_discarded_metadata_no_longer_notifies(self, media_tree: Path):
        manual = ManualExecutor()
        with patch("dead_simple_player.domain.metadata.resolver.get_executor", return_value=manual):
            session = PlayerSession(records_loader=fake_records)
            session.open(media_tree)
            session.now_playing()
            calls = []
            session.on_update(lambda: calls.append(1))

            session.next()
            assert calls == [1]
            manual.run_all()
            # Only the lookups started for b.flac would notify; none were started
            assert calls == [1]


class TestTransport:
    def test_play_pause_toggle(self, session: PlayerSession, media_tree: Path):
        session.open(media_tree)
        assert session.play() is True
        assert session.is_playing
        assert session.toggle() is True
        assert not session.is_playing
        session.toggle()
        assert session.is_playing
        session.pause()
        assert not session.is_playing

    def test_close(self, session: PlayerSession, media_tree: Path):
        session.open(media_tree)
        session.play()
        resolver = session.metadata
        session.close()
        assert session.current_media is None
        assert session.metadata is None
        assert resolver.is_discarded
        assert not session.is_playing
        assert session.now_playing().title == NO_MEDIA_TEXT


class TestSharedPool:
    def test_now_playing_after_pool_shutdown(self, media_tree: Path):
        """Test the session keeps resolving metadata after the shared pool is shut down."""
        session = PlayerSession(records_loader=fake_records)
        try:
            session.open(media_tree)
            shutdown_executor()

            assert session.now_playing().title == SEARCHING_TEXT
            assert session.metadata.get_value(TITLE, timeout=5) == "Title a"
            assert session.now_playing().title == "Title a"
        finally:
            session.close()
            shutdown_executor()
