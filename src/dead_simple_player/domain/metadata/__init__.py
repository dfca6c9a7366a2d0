"""Metadata domain - reading tags and resolving display metadata.

This domain handles:
- Raw metadata records read from media files (Mutagen)
- Semantic keys (title, creator, album, artwork) and their tag preferences
- The asynchronous, memoizing resolver with update notifications
"""

# Keys
from .keys import ALBUM, ARTWORK, BUILTIN_KEYS, CREATOR, TITLE, MetadataKey

# Raw records
from .records import RawMetadataRecord, raw_value, record_tags, records_from_file, records_from_tags

# Results
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

# Resolver
from .resolver import (
    MetadataResolver,
    UpdateSignal,
    find_metadata,
    get_executor,
    shutdown_executor,
)

__all__ = [
    # Keys
    "ALBUM",
    "ARTWORK",
    "BUILTIN_KEYS",
    "CREATOR",
    "TITLE",
    "MetadataKey",
    # Records
    "RawMetadataRecord",
    "raw_value",
    "record_tags",
    "records_from_file",
    "records_from_tags",
    # Results
    "NOT_FOUND",
    "STILL_SEARCHING",
    "Found",
    "NotFound",
    "SearchResult",
    "StillSearching",
    "cast_result",
    "result_value",
    # Resolver
    "MetadataResolver",
    "UpdateSignal",
    "find_metadata",
    "get_executor",
    "shutdown_executor",
]
