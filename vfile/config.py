"""Configuration for File construction.

Provides the FileConfig dataclass and the configure factory used by
``File.create``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .base import FileSystem, StreamCloner
from .errors import InvalidArgumentError
from .filesystem import LocalFileSystem


@dataclass(frozen=True)
class FileConfig:
    """Settings shared by every File of a given class.

    Attributes:
        cwd: Default working directory for new files. None means the
            process working directory at construction time.
        cloneable: Stream cloner used to wrap stream contents so they can
            be cloned. None leaves streams untouched.
        filesystem: Backend used to resolve ``file.realpath``.
    """

    cwd: str | None = None
    cloneable: StreamCloner | None = None
    filesystem: FileSystem = field(default_factory=LocalFileSystem)

    def default_cwd(self) -> str:
        """Return the working directory to give a new File."""
        return self.cwd or os.getcwd()


def configure(base: FileConfig | None = None, **kwargs) -> FileConfig:
    """Build a FileConfig, optionally starting from an existing one.

    Args:
        base: Config to copy unspecified settings from.
        **kwargs: Any of ``cwd``, ``cloneable``, ``filesystem``.

    Returns:
        New FileConfig.

    Raises:
        InvalidArgumentError: On unknown keys or a wrongly typed value.

    Examples:
        >>> configure(cwd="/project").cwd
        '/project'
    """
    base = base if base is not None else FileConfig()
    cwd = kwargs.pop("cwd", base.cwd)
    cloneable = kwargs.pop("cloneable", base.cloneable)
    filesystem = kwargs.pop("filesystem", base.filesystem)

    if kwargs:
        raise InvalidArgumentError(
            f"Unexpected arguments for file config: {list(kwargs.keys())}"
        )

    if cwd is not None and (not isinstance(cwd, str) or not cwd):
        raise InvalidArgumentError("cwd must be a non-empty string or None")
    if cloneable is not None and not isinstance(cloneable, StreamCloner):
        raise InvalidArgumentError(
            "cloneable must provide is_cloneable() and make_cloneable()"
        )
    if not isinstance(filesystem, FileSystem):
        raise InvalidArgumentError("filesystem must provide realpath()")

    return FileConfig(cwd=cwd, cloneable=cloneable, filesystem=filesystem)
