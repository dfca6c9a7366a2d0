"""
Outcomes of a metadata lookup.

A lookup is either still running, finished with a value, or finished empty.
"Never asked" and "in flight" are both reported as StillSearching.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class StillSearching:
    """The lookup hasn't finished yet."""

    @property
    def is_complete(self) -> bool:
        return False

    def value_or(self, default: Any = None) -> Any:
        return default


@dataclass(frozen=True)
class Found(Generic[T]):
    """The lookup finished and found a value."""

    value: T

    @property
    def is_complete(self) -> bool:
        return True

    def value_or(self, default: Any = None) -> T:
        return self.value


@dataclass(frozen=True)
class NotFound:
    """The lookup finished without a usable value."""

    @property
    def is_complete(self) -> bool:
        return True

    def value_or(self, default: Any = None) -> Any:
        return default


SearchResult = Union[StillSearching, Found[T], NotFound]

STILL_SEARCHING = StillSearching()
NOT_FOUND = NotFound()


def cast_result(result: SearchResult, value_type: type) -> SearchResult:
    """Re-type a result: a Found whose value isn't a `value_type` becomes NotFound."""
    if isinstance(result, Found) and not isinstance(result.value, value_type):
        return NOT_FOUND
    return result


def result_value(result: Optional[SearchResult]) -> Optional[Any]:
    """The found value, or None for any other (or missing) result."""
    if isinstance(result, Found):
        return result.value
    return None
