"""Closed classification of directory entries by file mode."""

from __future__ import annotations

import stat
from enum import Enum


class FileKind(Enum):
    """Entry kind used to pick a listing style."""

    REGULAR_EXECUTABLE = "executable"
    REGULAR_OTHER = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    FIFO = "fifo"
    SOCKET = "socket"
    DEVICE = "device"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> FileKind:
        """Classify an ``st_mode`` value (as returned by ``os.lstat``)."""
        if stat.S_ISREG(mode):
            if mode & 0o111:
                return cls.REGULAR_EXECUTABLE
            return cls.REGULAR_OTHER
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        if stat.S_ISSOCK(mode):
            return cls.SOCKET
        if stat.S_ISCHR(mode) or stat.S_ISBLK(mode):
            return cls.DEVICE
        return cls.OTHER


__all__ = ["FileKind"]
