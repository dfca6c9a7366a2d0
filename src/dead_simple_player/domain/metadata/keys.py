"""
Semantic metadata keys.

Each key names a field a player wants to show (title, creator, ...) and lists
the raw tag names that can provide it, most preferred first. Tag names are
the ones mutagen reports for ID3, MP4, Vorbis comment, APEv2 and ASF files.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class MetadataKey(Generic[T]):
    """Identifies a metadata field and where to look for it.

    Keys compare and hash by `id` alone; `value_type` is the type a found
    value must have.
    """

    id: str
    identifiers: tuple[str, ...]
    value_type: type

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MetadataKey):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


TITLE: MetadataKey[str] = MetadataKey(
    id="title",
    identifiers=(
        "TIT2",  # ID3
        "TT2",  # ID3v2.2
        "\xa9nam",  # MP4
        "title",  # Vorbis comments
        "TITLE",
        "Title",  # APEv2 / ASF
    ),
    value_type=str,
)

CREATOR: MetadataKey[str] = MetadataKey(
    id="creator",
    identifiers=(
        # Artist / author
        "TPE1",
        "TP1",
        "\xa9ART",
        "artist",
        "ARTIST",
        "Artist",
        "Author",
        "author",
        "TPE2",
        "aART",
        "albumartist",
        "ALBUMARTIST",
        "Album Artist",
        # Performers
        "performer",
        "PERFORMER",
        "TEXT",
        "lyricist",
        # Composers, arrangers, conductors
        "TCOM",
        "\xa9wrt",
        "composer",
        "COMPOSER",
        "Composer",
        "arranger",
        "TPE3",
        "conductor",
        "CONDUCTOR",
        # Last resort
        "TOPE",
        "TPUB",
        "publisher",
        "PUBLISHER",
    ),
    value_type=str,
)

ALBUM: MetadataKey[str] = MetadataKey(
    id="album",
    identifiers=("TALB", "TAL", "\xa9alb", "album", "ALBUM", "Album"),
    value_type=str,
)

ARTWORK: MetadataKey[bytes] = MetadataKey(
    id="artwork",
    identifiers=(
        "APIC",  # ID3
        "PIC",  # ID3v2.2
        "covr",  # MP4
        "METADATA_BLOCK_PICTURE",  # FLAC / Vorbis
        "Cover Art (Front)",  # APEv2
    ),
    value_type=bytes,
)

BUILTIN_KEYS: tuple[MetadataKey, ...] = (TITLE, CREATOR, ALBUM, ARTWORK)
