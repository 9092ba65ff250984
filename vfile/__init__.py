"""vfile: virtual file objects for build pipelines."""

from . import cloneable
from .base import DirentType, FileSystem, Stat, StatLike, StreamCloner
from .cloneable import CloneableStream
from .config import FileConfig, configure
from .errors import (
    FileError,
    InvalidArgumentError,
    MissingPathError,
    ReadOnlyPropertyError,
)
from .file import File
from .filesystem import LocalFileSystem, MemoryFileSystem

__all__ = [
    "cloneable",
    "CloneableStream",
    "configure",
    "DirentType",
    "File",
    "FileConfig",
    "FileError",
    "FileSystem",
    "InvalidArgumentError",
    "LocalFileSystem",
    "MemoryFileSystem",
    "MissingPathError",
    "ReadOnlyPropertyError",
    "Stat",
    "StatLike",
    "StreamCloner",
]
