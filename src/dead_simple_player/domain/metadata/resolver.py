"""
Asynchronous, memoizing metadata lookups for one media item.

A MetadataResolver is built from the raw records of a single file. Asking it
for a key either returns the remembered result or starts a lookup on a
background thread and reports StillSearching. When a lookup finishes the
result is cached and every update subscriber is called, so hosts can poll
again.

Only one lookup per key runs at a time: the check for an existing entry and
the launch of a new lookup happen under the same lock.
"""

import asyncio
import threading
import weakref
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, Optional, TypeVar, Union

from loguru import logger

from .keys import MetadataKey
from .records import RawMetadataRecord
from .results import (
    NOT_FOUND,
    STILL_SEARCHING,
    Found,
    NotFound,
    SearchResult,
    StillSearching,
    cast_result,
    result_value,
)

T = TypeVar("T")

DEFAULT_MAX_WORKERS = 4

# Shared background pool (created on first use)
_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def get_executor(max_workers: int = DEFAULT_MAX_WORKERS) -> ThreadPoolExecutor:
    """Get or create the shared pool that runs metadata lookups.

    `max_workers` only applies when the pool is first created.
    """
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="metadata-resolver"
            )
        return _executor


def shutdown_executor(wait: bool = True) -> None:
    """Shut down the shared pool; the next lookup creates a fresh one."""
    global _executor
    with _executor_lock:
        executor, _executor = _executor, None
    if executor is not None:
        executor.shutdown(wait=wait)


class UpdateSignal:
    """Payload-free broadcast to any number of subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[Callable[[], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def emit(self) -> None:
        """Call every subscriber. A failing subscriber doesn't stop the others."""
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback()
            except Exception:
                logger.exception("Metadata update subscriber failed")

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)


class _Liveness:
    """Shared with background lookups so they can tell the resolver was discarded."""

    __slots__ = ("alive",)

    def __init__(self) -> None:
        self.alive = True


def find_metadata(
    records: Iterable[RawMetadataRecord], key: MetadataKey[T]
) -> SearchResult:
    """Find the value for `key` among `records`.

    The first identifier in `key.identifiers` that any record carries wins,
    whatever order the records are in. Load failures and values of the wrong
    type are logged and reported as NotFound.
    """
    first_by_tag: dict[str, RawMetadataRecord] = {}
    for record in records:
        first_by_tag.setdefault(record.tag, record)

    record = next(
        (first_by_tag[identifier] for identifier in key.identifiers if identifier in first_by_tag),
        None,
    )
    if record is None:
        return NOT_FOUND

    try:
        value = record.load()
    except Exception as e:
        logger.error(f"Failed to load {record.tag} for '{key.id}': {e}")
        return NOT_FOUND

    if value is None:
        return NOT_FOUND

    if not isinstance(value, key.value_type):
        logger.warning(
            f"Raw value found for '{key.id}' in {record.tag}, but was of type "
            f"{type(value).__name__}, which couldn't be converted to {key.value_type.__name__}"
        )
        return NOT_FOUND

    return Found(value)


def _resolve_in_background(
    resolver_ref: "weakref.ReferenceType[MetadataResolver]",
    liveness: _Liveness,
    records: tuple[RawMetadataRecord, ...],
    key: MetadataKey,
) -> SearchResult:
    result = find_metadata(records, key)

    resolver = resolver_ref()
    if resolver is None or not liveness.alive:
        logger.debug(f"Dropping '{key.id}' lookup result; its resolver is gone")
        return result

    resolver._commit(key, result)
    return result


class MetadataResolver:
    """Looks up metadata keys for one media item and remembers the answers."""

    def __init__(
        self,
        records: Iterable[RawMetadataRecord],
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """
        Args:
            records: Raw records read once from the media item
            executor: Pool for background lookups. Without one, the shared pool
                is fetched for each lookup, so a shut-down pool is replaced
            max_workers: Size of the shared pool if this resolver creates it
        """
        self._records = tuple(records)
        self._executor = executor
        self._max_workers = max_workers
        self._cache: dict[str, SearchResult] = {}
        self._in_flight: dict[str, Future] = {}
        # Reentrant: an executor may run the lookup inline, inside submit()
        self._lock = threading.RLock()
        self._liveness = _Liveness()
        self._updates = UpdateSignal()

    def __repr__(self) -> str:
        return f"<MetadataResolver records={len(self._records)} cached={sorted(self.snapshot())}>"

    @property
    def records(self) -> tuple[RawMetadataRecord, ...]:
        return self._records

    @property
    def is_discarded(self) -> bool:
        return not self._liveness.alive

    # Lookups

    def get(self, key: MetadataKey[T]) -> SearchResult:
        """Return the remembered result for `key`, or start looking it up.

        Never blocks. The first call for a key starts a background lookup and
        returns StillSearching; call again after an update to see the result.
        """
        with self._lock:
            result = self._cache.get(key.id)
            if result is None:
                launched = self._launch_locked(key)
                return STILL_SEARCHING if isinstance(launched, Future) else launched

        return cast_result(result, key.value_type)

    def get_value(self, key: MetadataKey[T], timeout: Optional[float] = None) -> Optional[T]:
        """Return the value for `key`, waiting for the lookup if needed.

        Returns:
            The found value, or None if nothing usable was found

        Raises:
            TimeoutError: If `timeout` seconds pass before the lookup finishes
        """
        pending = self._result_or_future(key)
        if isinstance(pending, Future):
            pending = pending.result(timeout=timeout)
        return result_value(cast_result(pending, key.value_type))

    async def aget(self, key: MetadataKey[T]) -> Optional[T]:
        """Awaitable version of get_value()."""
        pending = self._result_or_future(key)
        if isinstance(pending, Future):
            pending = await asyncio.wrap_future(pending)
        return result_value(cast_result(pending, key.value_type))

    # Updates

    def on_update(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call `callback` whenever a lookup finishes; returns an unsubscribe function.

        Callbacks run on the lookup's background thread.
        """
        return self._updates.subscribe(callback)

    def snapshot(self) -> dict[str, SearchResult]:
        """Copy of the remembered results, keyed by key id."""
        with self._lock:
            return dict(self._cache)

    def discard(self) -> None:
        """Stop accepting lookup results and drop all subscribers.

        Lookups already running finish, but their results are not stored.
        """
        self._liveness.alive = False
        self._updates.clear()

    # Internals

    def _result_or_future(self, key: MetadataKey) -> Any:
        with self._lock:
            result = self._cache.get(key.id)
            if result is None:
                return self._launch_locked(key)
            if isinstance(result, StillSearching):
                future = self._in_flight.get(key.id)
                return future if future is not None else result
            return result

    def _launch_locked(self, key: MetadataKey) -> Union[Future, NotFound]:
        """Start a background lookup. Caller must hold self._lock.

        Returns NOT_FOUND, with nothing cached, when the pool refuses the work
        (e.g. it was shut down); a later request tries again.
        """
        executor = self._executor or get_executor(self._max_workers)
        self._cache[key.id] = STILL_SEARCHING
        try:
            future = executor.submit(
                _resolve_in_background,
                weakref.ref(self),
                self._liveness,
                self._records,
                key,
            )
        except RuntimeError as e:
            del self._cache[key.id]
            logger.error(f"Couldn't start the '{key.id}' lookup: {e}")
            return NOT_FOUND
        if not future.done():
            self._in_flight[key.id] = future
        return future

    def _commit(self, key: MetadataKey, result: SearchResult) -> None:
        with self._lock:
            if not self._liveness.alive:
                return
            self._cache[key.id] = result
            self._in_flight.pop(key.id, None)
        logger.debug(f"Resolved '{key.id}': {result}")
        self._updates.emit()
