"""Directory traversal and regular-file discovery."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import BinaryIO
from typing import Protocol

from dups.errors import OpenError
from dups.errors import ReadError
from dups.errors import StatError
from dups.errors import TraversalError
from dups.errors import TruncationError

import logging
import os
import stat

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class FileRecord:
    """One discovered regular file.

    The read handle and the last window are only populated while the
    record's group is being compared.
    """

    path: str
    dev: int
    ino: int
    size: int
    blksize: int = 0
    remaining: int = field(init=False)
    handle: BinaryIO | None = field(default=None, repr=False)
    window: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.remaining = self.size

    @property
    def identity(self) -> tuple[int, int]:
        return (self.dev, self.ino)

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> FileRecord:
        return cls(
            path=path,
            dev=st.st_dev,
            ino=st.st_ino,
            size=st.st_size,
            blksize=getattr(st, "st_blksize", 0),
        )

    def open(self) -> None:
        """Open the file for reading, if not open yet."""
        if self.handle is not None:
            return
        try:
            self.handle = open(self.path, "rb")
        except OSError as e:
            raise OpenError(self.path, e) from e

    def read_window(self, length: int) -> bytes:
        """Read exactly *length* bytes and account for them in ``remaining``."""
        if self.handle is None:
            raise RuntimeError(f"{self.path} is not open")
        try:
            data = self.handle.read(length)
        except OSError as e:
            raise ReadError(self.path, e) from e
        if len(data) < length:
            raise TruncationError(self.path, length, len(data))
        self.remaining -= length
        self.window = data
        return data

    def close(self) -> None:
        """Release the handle and window. Safe to call more than once."""
        if self.handle is not None:
            self.handle.close()
            self.handle = None
        self.window = None


class Sink(Protocol):
    def classify(self, record: FileRecord) -> None: ...


def _list_directory(directory: str) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return list(it)
    except OSError as e:
        raise TraversalError(directory, e) from e


def walk(root: str | os.PathLike, sink: Sink) -> int:
    """Recursively hand every regular file under *root* to *sink*.

    Symbolic links are never followed. Directories that cannot be listed
    are skipped with a warning; a failed stat of a listed entry is fatal.
    Returns the number of regular files found.
    """
    root = os.fspath(root)
    try:
        entries = _list_directory(root)
    except TraversalError as e:
        logger.warning("%s", e)
        return 0

    found = 0
    for entry in entries:
        try:
            st = entry.stat(follow_symlinks=False)
        except OSError as e:
            raise StatError(entry.path, e) from e

        if stat.S_ISDIR(st.st_mode):
            found += walk(entry.path, sink)
        elif stat.S_ISREG(st.st_mode):
            sink.classify(FileRecord.from_stat(entry.path, st))
            found += 1
        else:
            logger.debug(f"skipping {entry.path} (not a regular file)")

    return found
