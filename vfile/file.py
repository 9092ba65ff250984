"""Virtual file object for build pipelines.

A File carries a path (with the history of every path it has had), a
working directory and base, an optional stat object and contents that are
``None``, a buffer or a stream. None of it requires the file to exist on
disk.
"""

from __future__ import annotations

import copy
import inspect
import logging
import os
import stat as stat_mod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from . import paths
from .base import DirentType, StatLike, StreamCloner
from .config import FileConfig, configure
from .contents import (
    copy_buffer,
    describe_contents,
    is_buffer,
    is_null,
    is_stream,
    is_valid_contents,
)
from .errors import InvalidArgumentError, MissingPathError, ReadOnlyPropertyError
from .resolver import MISSING, RESERVED_FIELDS, lookup, record_stat, resolve_property

logger = logging.getLogger(__name__)

# Record keys consumed while deriving the path, never copied as custom fields
CONSTRUCTION_FIELDS = frozenset({"name", "basename", "dirname", "symlink"})

# Read-only path properties; a record carrying them is not an error
COMPUTED_FIELDS = frozenset({"absolute", "relative", "realpath"})

# Attributes read from non-mapping records (os.DirEntry, other Files, ...)
OBJECT_RECORD_FIELDS = (
    "path",
    "history",
    "cwd",
    "base",
    "stat",
    "contents",
    "name",
    "symlink",
)

# Method names a stat source may answer with, the st_mode test, and the
# matching directory entry type
_TYPE_CHECKS: dict[str, tuple[tuple[str, ...], Callable[[int], bool], DirentType]] = {
    "directory": (("is_directory", "is_dir"), stat_mod.S_ISDIR, DirentType.DIRECTORY),
    "file": (("is_file",), stat_mod.S_ISREG, DirentType.FILE),
    "symbolic_link": (
        ("is_symbolic_link", "is_symlink"),
        stat_mod.S_ISLNK,
        DirentType.SYMLINK,
    ),
    "block_device": (("is_block_device",), stat_mod.S_ISBLK, DirentType.BLOCK_DEVICE),
    "character_device": (
        ("is_character_device", "is_char_device"),
        stat_mod.S_ISCHR,
        DirentType.CHARACTER_DEVICE,
    ),
    "fifo": (("is_fifo",), stat_mod.S_ISFIFO, DirentType.FIFO),
    "socket": (("is_socket",), stat_mod.S_ISSOCK, DirentType.SOCKET),
}


def _check_type(source: Any, kind: str) -> bool | None:
    """Ask source whether it is of the given kind.

    Returns None when source has no opinion (no matching method, flag or
    ``st_mode``).
    """
    if source is None:
        return None
    names, mode_test, _ = _TYPE_CHECKS[kind]
    for name in names:
        value = lookup(source, name)
        if value is MISSING:
            continue
        if callable(value):
            return bool(value())
        if isinstance(value, bool):
            return value
    mode = lookup(source, "st_mode")
    if isinstance(mode, int) and not isinstance(mode, bool):
        return mode_test(mode)
    return None


def _record_fields(record: Any) -> dict[str, Any]:
    """Flatten a construction record into a dict of fields."""
    if record is None:
        return {}
    if isinstance(record, str):
        return {"path": record}
    if isinstance(record, Mapping):
        return dict(record)

    fields: dict[str, Any] = {}
    for key in OBJECT_RECORD_FIELDS:
        value = lookup(record, key)
        if value is not MISSING and value is not None and not inspect.isroutine(value):
            fields[key] = value
    if isinstance(record, File):
        fields.update({**record._custom, **record._fields})
    else:
        for key, value in getattr(record, "__dict__", {}).items():
            if not key.startswith("_") and not inspect.isroutine(value):
                fields.setdefault(key, value)
    return fields


class File:
    """A file's path, contents and stat, independent of the filesystem.

    Construct from a path string, a mapping of fields, or an object such as
    an ``os.DirEntry``; keyword arguments are merged over the record::

        >>> file = File({"cwd": "/", "base": "/test", "path": "/test/app.coffee"})
        >>> file.relative
        'app.coffee'
        >>> file.extname = ".js"
        >>> file.history
        ['/test/app.coffee', '/test/app.js']

    Any other field given at construction becomes a record field, and
    attributes assigned later become custom fields. Names a File does not
    define resolve through its stat, then its record fields, then custom
    fields, so ``file.mode`` returns ``file.stat.st_mode`` (see
    ``vfile.resolver``).

    Attributes:
        config: Class-wide FileConfig; use ``File.create`` to change it.
    """

    config: ClassVar[FileConfig] = FileConfig()

    def __init__(
        self,
        record: Any = None,
        /,
        dirent_type: DirentType | int = DirentType.UNKNOWN,
        **fields: Any,
    ):
        """Initialize a File.

        Args:
            record: Path string, mapping of fields, or an object to read
                fields from.
            dirent_type: Native entry type used when neither the record
                nor the stat can answer a type check.
            **fields: Fields overriding those of record (``path``,
                ``history``, ``cwd``, ``base``, ``stat``, ``contents``,
                ``name``, ``basename``, ``dirname``, ``symlink`` or custom).

        Raises:
            InvalidArgumentError: If a field has the wrong type.
        """
        object.__setattr__(self, "_fields", {})
        object.__setattr__(self, "_custom", {})
        fields = {**_record_fields(record), **fields}
        self._record = {"path": record} if isinstance(record, str) else record
        self._type = DirentType(dirent_type)
        default_cwd = self.config.default_cwd()

        path = fields.get("path")
        history = list(fields.get("history") or [])
        name = fields.get("name")
        if not name:
            name = fields.get("basename") or ""
            latest = path or (history[-1] if history else None)
            if not name and isinstance(latest, str):
                name = os.path.basename(paths.remove_trailing_separator(latest))
        if not path and not history and name:
            path = paths.join(fields.get("dirname") or fields.get("cwd") or default_cwd, name)
        self._name = name

        self._history: list[str] = []
        if path is not None:
            history.append(path)
        for value in history:
            self.path = value

        self._cwd = ""
        self._base: str | None = None
        self._symlink: str | None = None
        self.cwd = fields.get("cwd") or default_cwd
        self.base = fields.get("base")
        self.stat = fields.get("stat")
        self.contents = fields.get("contents")
        if fields.get("symlink") is not None:
            self.symlink = fields["symlink"]

        for key, value in fields.items():
            if key in RESERVED_FIELDS or key in CONSTRUCTION_FIELDS or key in COMPUTED_FIELDS:
                continue
            if self._is_class_member(key):
                continue
            if hasattr(type(self), key):
                setattr(self, key, value)
            else:
                self._fields[key] = value

    @classmethod
    def create(cls, cloneable: StreamCloner | None = None, **kwargs: Any) -> type["File"]:
        """Return a subclass of cls with an updated config.

        Args:
            cloneable: Stream cloner used to make stream contents clonable.
            **kwargs: Other FileConfig settings (``cwd``, ``filesystem``).

        Examples:
            >>> from vfile import cloneable
            >>> CloneableFile = File.create(cloneable)
            >>> CloneableFile.config.cloneable is cloneable
            True
        """
        if cloneable is not None:
            kwargs["cloneable"] = cloneable
        config = configure(cls.config, **kwargs)
        return type(
            cls.__name__,
            (cls,),
            {"config": config, "__module__": cls.__module__, "__qualname__": cls.__qualname__},
        )

    @classmethod
    def _is_class_member(cls, name: str) -> bool:
        """True for methods, class attributes and getter-only properties."""
        member = inspect.getattr_static(cls, name, MISSING)
        if isinstance(member, property):
            return member.fset is None
        return member is not MISSING

    # -------------------------------------------------------------------------
    # Attribute resolution
    # -------------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        value = resolve_property(self, name)
        if value is MISSING:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            object.__setattr__(self, name, value)
        else:
            self._custom[name] = value

    def __delattr__(self, name: str) -> None:
        if name in self._fields or name in self._custom:
            self._fields.pop(name, None)
            self._custom.pop(name, None)
        else:
            object.__delattr__(self, name)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._fields) | set(self._custom))

    def get(self, name: str, default: Any = None) -> Any:
        """Resolve name like attribute access, returning default if unknown."""
        value = resolve_property(self, name)
        return default if value is MISSING else value

    # -------------------------------------------------------------------------
    # Path and history
    # -------------------------------------------------------------------------

    @property
    def history(self) -> list[str]:
        """Every path this file has had, most recent last."""
        return self._history

    @property
    def path(self) -> str | None:
        return self._history[-1] if self._history else None

    @path.setter
    def path(self, value: str) -> None:
        if not isinstance(value, str):
            raise InvalidArgumentError("path should be a string.")
        value = paths.normalize(value)
        if value and value != self.path:
            self._history.append(value)

    def _require_path(self, prop: str, action: str = "get") -> str:
        path = self.path
        if not path:
            raise MissingPathError(prop, action)
        return path

    @staticmethod
    def _require_str(prop: str, value: Any) -> str:
        if not isinstance(value, str):
            raise InvalidArgumentError(f"file.{prop} should be a string.")
        return value

    @property
    def dirname(self) -> str:
        return os.path.dirname(self._require_path("dirname"))

    @dirname.setter
    def dirname(self, value: str) -> None:
        self._require_path("dirname", "set")
        self.path = os.path.join(self._require_str("dirname", value), self.basename)

    @property
    def basename(self) -> str:
        return os.path.basename(self._require_path("basename"))

    @basename.setter
    def basename(self, value: str) -> None:
        self._require_path("basename", "set")
        self.path = os.path.join(self.dirname, self._require_str("basename", value))

    @property
    def stem(self) -> str:
        self._require_path("stem")
        return os.path.splitext(self.basename)[0]

    @stem.setter
    def stem(self, value: str) -> None:
        self._require_path("stem", "set")
        self.path = os.path.join(self.dirname, self._require_str("stem", value) + self.extname)

    @property
    def extname(self) -> str:
        self._require_path("extname")
        return os.path.splitext(self.basename)[1]

    @extname.setter
    def extname(self, value: str) -> None:
        path = self._require_path("extname", "set")
        self.path = paths.replace_extension(path, self._require_str("extname", value))

    @property
    def name(self) -> str:
        """Directory entry name given or derived at construction."""
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = self._require_str("name", value)

    @property
    def dirent_type(self) -> DirentType:
        return self._type

    # -------------------------------------------------------------------------
    # Computed paths
    # -------------------------------------------------------------------------

    @property
    def absolute(self) -> str:
        """Path joined onto cwd."""
        path = self._require_path("absolute")
        return paths.normalize(os.path.join(self.cwd, path))

    @absolute.setter
    def absolute(self, value: Any) -> None:
        raise ReadOnlyPropertyError("absolute")

    @property
    def relative(self) -> str:
        """Path of the file relative to base."""
        self._require_path("relative")
        base = paths.normalize(os.path.join(self.cwd, self.base))
        return os.path.relpath(self.absolute, base)

    @relative.setter
    def relative(self, value: Any) -> None:
        raise ReadOnlyPropertyError("relative")

    @property
    def realpath(self) -> str | None:
        """Absolute path with symlinks resolved, or None if it can't be."""
        self._require_path("realpath")
        absolute = self.absolute
        try:
            return self.config.filesystem.realpath(absolute)
        except (OSError, ValueError) as exc:
            logger.debug("Could not resolve real path of %s: %s", absolute, exc)
            return None

    @realpath.setter
    def realpath(self, value: Any) -> None:
        raise ReadOnlyPropertyError("realpath")

    # -------------------------------------------------------------------------
    # Working directory, base and symlink
    # -------------------------------------------------------------------------

    @property
    def cwd(self) -> str:
        return self._cwd

    @cwd.setter
    def cwd(self, value: str) -> None:
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError("file.cwd should be a non-empty string")
        self._cwd = paths.normalize(value)

    @property
    def base(self) -> str:
        """Explicit base, or cwd when none is set."""
        return self._base or self._cwd

    @base.setter
    def base(self, value: str | None) -> None:
        if value is None:
            self._base = None
            return
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError(
                "file.base should be a non-empty string, or None"
            )
        value = paths.normalize(value)
        self._base = None if value == self._cwd else value

    @property
    def symlink(self) -> str | None:
        return self._symlink

    @symlink.setter
    def symlink(self, value: str) -> None:
        if not isinstance(value, str) or not value:
            raise InvalidArgumentError('"file.symlink" must be a string.')
        self._symlink = paths.normalize(value)

    # -------------------------------------------------------------------------
    # Stat and contents
    # -------------------------------------------------------------------------

    @property
    def stat(self) -> StatLike | Any:
        return self._stat

    @stat.setter
    def stat(self, value: Any) -> None:
        self._stat = value

    @property
    def contents(self) -> Any:
        return self._contents

    @contents.setter
    def contents(self, value: Any) -> None:
        if not is_valid_contents(value):
            raise InvalidArgumentError(
                "Expected file.contents to be bytes, a stream, or None."
            )
        cloner = self.config.cloneable
        if cloner is not None and is_stream(value) and not cloner.is_cloneable(value):
            value = cloner.make_cloneable(value)
        self._contents = value

    is_valid_contents = staticmethod(is_valid_contents)

    def is_buffer(self) -> bool:
        return is_buffer(self._contents)

    def is_stream(self) -> bool:
        return is_stream(self._contents)

    def is_null(self) -> bool:
        return is_null(self._contents)

    # -------------------------------------------------------------------------
    # Entry type checks
    # -------------------------------------------------------------------------

    def _check_entry(self, kind: str, sources: tuple[Any, ...]) -> bool:
        for source in sources:
            result = _check_type(source, kind)
            if result is not None:
                return result
        return self._type == _TYPE_CHECKS[kind][2]

    def _fallback_sources(self) -> tuple[Any, ...]:
        return (self._stat, self._record, record_stat(self._record))

    def is_directory(self) -> bool:
        """True if contents is None and the record, stat or entry type says directory."""
        if not self.is_null():
            return False
        return self._check_entry("directory", (self._record, self._stat))

    is_dir = is_directory

    def is_file(self) -> bool:
        return self._check_entry("file", self._fallback_sources())

    def is_symbolic_link(self) -> bool:
        return self._check_entry("symbolic_link", self._fallback_sources())

    is_symlink = is_symbolic_link

    def is_symbolic(self) -> bool:
        return self.is_null() and self.is_symbolic_link()

    def is_block_device(self) -> bool:
        return self._check_entry("block_device", self._fallback_sources())

    def is_character_device(self) -> bool:
        return self._check_entry("character_device", self._fallback_sources())

    def is_fifo(self) -> bool:
        return self._check_entry("fifo", self._fallback_sources())

    def is_socket(self) -> bool:
        return self._check_entry("socket", self._fallback_sources())

    # -------------------------------------------------------------------------
    # Cloning
    # -------------------------------------------------------------------------

    def clone(self, deep: bool = True, contents: bool = True) -> "File":
        """Return an independent copy of this file.

        Args:
            deep: Deep-copy custom fields (otherwise they are shared).
            contents: Copy buffer contents and clone clonable streams.
                When False the new file shares the contents object.

        Returns:
            A new instance of the same class. History and stat are never
            shared with the original.
        """
        value = self._contents
        if contents and is_buffer(value):
            value = copy_buffer(value)
        elif contents and is_stream(value):
            cloner = self.config.cloneable
            if cloner is not None and cloner.is_cloneable(value):
                value = value.clone()

        file = type(self)(
            dirent_type=self._type,
            cwd=self.cwd,
            base=self.base,
            stat=copy.copy(self._stat),
            history=list(self._history),
            contents=value,
            name=self._name,
            symlink=self._symlink,
        )
        file._record = self._record
        if deep:
            fields, custom = copy.deepcopy((self._fields, self._custom), {id(self): file})
        else:
            fields, custom = self._fields, self._custom
        file._fields.update(fields)
        file._custom.update(custom)
        return file

    def __copy__(self) -> "File":
        return self.clone(deep=False)

    def __deepcopy__(self, memo: dict[int, Any]) -> "File":
        file = self.clone(deep=False)
        memo[id(self)] = file
        file._fields, file._custom = copy.deepcopy((self._fields, self._custom), memo)
        return file

    def __repr__(self) -> str:
        parts = []
        if self.path:
            relative = self.relative
            upward = relative == os.pardir or relative.startswith(os.pardir + os.sep)
            shown = self.absolute if upward else relative
            parts.append(f'"{shown}"')
        marker = describe_contents(self._contents)
        if marker:
            parts.append(marker)
        return f"<{type(self).__name__} {' '.join(parts)}>"
