"""
Raw metadata records read from media files with Mutagen.

A record is one tag found in a file plus a way to load its value. Records are
read once per file; values are only converted when a lookup asks for them.
"""

from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Any, Callable, Iterable, Union

from loguru import logger
from mutagen import File as MutagenFile

APE_COVER_PREFIX = "Cover Art ("


@dataclass(frozen=True)
class RawMetadataRecord:
    """A single tag from a media file with a lazily loaded value."""

    tag: str
    loader: Callable[[], Any] = field(repr=False, compare=False)

    def load(self) -> Any:
        """Load the raw value. May raise whatever the loader raises."""
        return self.loader()


def raw_value(value: Any) -> Any:
    """Convert a Mutagen tag value into a plain Python value.

    Lists yield their first element, text frames their first text as str,
    pictures and covers their image bytes.
    """
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        value = value[0]

    # MP4Cover / MP4FreeForm are bytes subclasses
    if isinstance(value, bytes):
        return bytes(value)

    # ID3 APIC/PIC frames and FLAC Picture blocks
    data = getattr(value, "data", None)
    if isinstance(data, bytes):
        return data

    # ID3 text frames
    text = getattr(value, "text", None)
    if text is not None:
        if isinstance(text, (list, tuple)):
            return str(text[0]) if text else None
        return str(text)

    # APEv2 / ASF values
    if hasattr(value, "value"):
        return value.value

    return value


def ape_cover_value(value: Any) -> Any:
    """Image bytes of an APEv2 "Cover Art (...)" item.

    The stored value is the original file name, a NUL byte, then the image.
    """
    data = raw_value(value)
    if isinstance(data, bytes) and b"\x00" in data:
        return data.split(b"\x00", 1)[1]
    return data


def records_from_tags(tags: Any) -> list[RawMetadataRecord]:
    """Build records from a Mutagen tags object, in the order Mutagen reports them.

    ID3 keys such as "APIC:Cover" or "COMM::eng" are reduced to the frame id.
    """
    records = []
    for key, value in tags.items():
        tag = getattr(value, "FrameID", None) or str(key)
        convert = ape_cover_value if tag.startswith(APE_COVER_PREFIX) else raw_value
        records.append(RawMetadataRecord(tag=tag, loader=partial(convert, value)))
    return records


def records_from_file(local_path: Union[str, Path]) -> list[RawMetadataRecord]:
    """Read all metadata records from a media file.

    Unreadable or untagged files give an empty list.
    """
    try:
        audio_file = MutagenFile(str(local_path))
    except Exception as e:
        logger.warning(f"Could not read metadata from {local_path}: {e}")
        return []

    if audio_file is None:
        logger.info(f"No metadata reader for {local_path}")
        return []

    records = records_from_tags(audio_file.tags) if audio_file.tags is not None else []

    # FLAC keeps pictures outside the Vorbis comment block
    for picture in getattr(audio_file, "pictures", None) or []:
        records.append(
            RawMetadataRecord(
                tag="METADATA_BLOCK_PICTURE", loader=partial(raw_value, picture)
            )
        )

    logger.debug(f"Read {len(records)} metadata records from {local_path}")
    return records


def record_tags(records: Iterable[RawMetadataRecord]) -> list[str]:
    """Tags of the given records, in order (for display and debugging)."""
    return [record.tag for record in records]
