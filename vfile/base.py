"""Collaborator interfaces and a virtual stat record.

Defines the protocols File relies on (stat objects, real-path resolution,
stream cloning) and ``Stat``, a stat record that can be attached to a File
without touching the disk.
"""

from __future__ import annotations

import os
import stat as stat_mod
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Any, Protocol, runtime_checkable


class DirentType(IntEnum):
    """Directory entry type codes, as reported by readdir."""

    UNKNOWN = 0
    FILE = 1
    DIRECTORY = 2
    SYMLINK = 3
    FIFO = 4
    SOCKET = 5
    CHARACTER_DEVICE = 6
    BLOCK_DEVICE = 7


@dataclass
class Stat:
    """Stat record for a virtual file or directory.

    Attributes:
        size: File size in bytes (0 for directories).
        mode: Full ``st_mode`` value, file type bits included.
        created_at: ISO 8601 timestamp when file was created (UTC).
        modified_at: ISO 8601 timestamp when file was last modified (UTC).
    """

    size: int = 0
    mode: int = 0o100644
    created_at: str = ""
    modified_at: str = ""

    @classmethod
    def directory(cls, **kwargs: Any) -> "Stat":
        """Build a stat record for a directory."""
        kwargs.setdefault("mode", 0o040755)
        return cls(**kwargs)

    @classmethod
    def symlink(cls, **kwargs: Any) -> "Stat":
        """Build a stat record for a symbolic link."""
        kwargs.setdefault("mode", 0o120777)
        return cls(**kwargs)

    # os.stat_result-compatible properties

    @property
    def st_size(self) -> int:
        return self.size

    @property
    def st_mode(self) -> int:
        return self.mode

    @property
    def st_nlink(self) -> int:
        return 1

    @property
    def st_uid(self) -> int:
        return os.getuid() if hasattr(os, "getuid") else 0

    @property
    def st_gid(self) -> int:
        return os.getgid() if hasattr(os, "getgid") else 0

    def _parse_ts(self, iso_str: str) -> float:
        try:
            return datetime.fromisoformat(iso_str).timestamp()
        except ValueError:
            return 0.0

    @property
    def st_atime(self) -> float:
        return self._parse_ts(self.modified_at)

    @property
    def st_mtime(self) -> float:
        return self._parse_ts(self.modified_at)

    @property
    def st_ctime(self) -> float:
        return self._parse_ts(self.created_at)

    # Type checks

    def is_directory(self) -> bool:
        return stat_mod.S_ISDIR(self.mode)

    def is_file(self) -> bool:
        return stat_mod.S_ISREG(self.mode)

    def is_symbolic_link(self) -> bool:
        return stat_mod.S_ISLNK(self.mode)

    def is_block_device(self) -> bool:
        return stat_mod.S_ISBLK(self.mode)

    def is_character_device(self) -> bool:
        return stat_mod.S_ISCHR(self.mode)

    def is_fifo(self) -> bool:
        return stat_mod.S_ISFIFO(self.mode)

    def is_socket(self) -> bool:
        return stat_mod.S_ISSOCK(self.mode)


@runtime_checkable
class StatLike(Protocol):
    """Anything File can consult for type information.

    Every member is optional in practice: File probes for ``is_*`` methods
    first and falls back to decoding ``st_mode``. ``os.stat_result`` and
    ``Stat`` both qualify. Only ``st_mode`` is listed so the runtime check
    stays meaningful.
    """

    @property
    def st_mode(self) -> int: ...


@runtime_checkable
class FileSystem(Protocol):
    """Filesystem operations File may call.

    The only I/O File performs is best-effort real-path resolution.
    """

    def realpath(self, path: str) -> str:
        """Resolve symlinks in path.

        Raises:
            OSError: If the path (or a link target) does not exist.
        """
        ...


@runtime_checkable
class StreamCloner(Protocol):
    """Factory for streams that can be read by several consumers."""

    def is_cloneable(self, stream: Any) -> bool:
        """Return True if stream already supports ``clone()``."""
        ...

    def make_cloneable(self, stream: Any) -> Any:
        """Wrap stream so that the result supports ``clone()``."""
        ...
