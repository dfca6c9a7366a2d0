"""Shared fixtures and helpers for Dead Simple Player tests."""

from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, Callable

import pytest
from loguru import logger

from dead_simple_player.domain.metadata import RawMetadataRecord


def record(tag: str, value: Any) -> RawMetadataRecord:
    """A raw record whose loader returns `value`."""
    return RawMetadataRecord(tag=tag, loader=lambda: value)


def failing_record(tag: str, error: Exception) -> RawMetadataRecord:
    """A raw record whose loader raises `error`."""

    def loader():
        raise error

    return RawMetadataRecord(tag=tag, loader=loader)


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn: Callable, /, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class ManualExecutor(Executor):
    """Holds submitted work until run_all() is called."""

    def __init__(self):
        self.pending: list[tuple[Future, Callable, tuple, dict]] = []
        self.submitted = 0

    def submit(self, fn: Callable, /, *args, **kwargs) -> Future:
        self.submitted += 1
        future: Future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            try:
                future.set_result(fn(*args, **kwargs))
            except BaseException as e:
                future.set_exception(e)


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def log_messages():
    """Collect loguru messages (WARNING and above) emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def media_tree(tmp_path: Path) -> Path:
    """Create a small library:

    library/
        a.mp3
        b.flac
        notes.txt
        sub/
            c.mp3
            deeper/
                d.mp4
    """
    root = tmp_path / "library"
    (root / "sub" / "deeper").mkdir(parents=True)
    for relative in ["a.mp3", "b.flac", "notes.txt", "sub/c.mp3", "sub/deeper/d.mp4"]:
        (root / relative).write_bytes(b"")
    return root
