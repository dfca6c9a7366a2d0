"""
Filesystem access for playlist ingestion.

PlaylistQueue only talks to the filesystem through the FileSystem protocol,
so hosts (and tests) can supply their own view of what exists, what is a
folder and what a file contains.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Iterator, NamedTuple, Protocol

from .content_types import ContentType, content_type_for_path


class PathStatus(NamedTuple):
    """Whether a path exists and whether it is a directory."""

    exists: bool
    is_directory: bool


class FileSystem(Protocol):
    """What PlaylistQueue.add needs from the host's filesystem."""

    def probe(self, path: Path) -> PathStatus: ...

    def list_children(self, path: Path) -> list[Path]: ...

    def conforms(self, path: Path, content_type: ContentType) -> bool: ...

    def access(self, path: Path) -> ContextManager[Path]: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def probe(self, path: Path) -> PathStatus:
        try:
            return PathStatus(exists=path.exists(), is_directory=path.is_dir())
        except OSError:
            return PathStatus(exists=False, is_directory=False)

    def list_children(self, path: Path) -> list[Path]:
        """Direct children of a directory, sorted by name.

        Raises:
            OSError: If the directory can't be listed
        """
        return sorted(path.iterdir(), key=lambda child: child.name)

    def conforms(self, path: Path, content_type: ContentType) -> bool:
        return content_type_for_path(path).conforms_to(content_type)

    @contextmanager
    def access(self, path: Path) -> Iterator[Path]:
        """Hold read access to `path` for the duration of the block.

        Missing paths are let through so the caller can report them as missing.

        Raises:
            PermissionError: If the path exists but can't be read
        """
        if path.exists() and not os.access(path, os.R_OK):
            raise PermissionError(f"No read access to {path}")
        yield path


local_filesystem = LocalFileSystem()
