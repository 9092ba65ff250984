"""Lookup of attributes a File does not define itself.

A File exposes more than its own properties: fields of its stat object
(``file.mode``, ``file.size``), fields of the record it was built from, and
custom fields assigned later. ``resolve_property`` decides which source
answers for a given name.

Resolution order:

1. Reserved names (``contents``, ``stat``, ``history``, ``path``, ``base``,
   ``cwd``) always come from the File itself.
2. When the File was built from an object (not a mapping) that is not a
   native directory entry or stat result, a method defined on that object's
   class wins.
3. Anything defined on the File class hierarchy (methods and properties).
4. Otherwise the first source containing the name: the File's ``stat``,
   the record's fields (given at construction), the record's ``stat``, and
   last the custom fields assigned after construction. Stat sources also
   answer to the ``st_`` prefixed name, so ``mode`` finds ``st_mode``.

Stat and record fields therefore shadow custom fields of the same name:
assigning ``file.mode`` or reassigning a record field does not change
what ``file.mode`` resolves to.
"""

from __future__ import annotations

import inspect
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .file import File

RESERVED_FIELDS = frozenset(
    {"constructor", "contents", "stat", "history", "path", "base", "cwd"}
)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def lookup(source: Any, name: str) -> Any:
    """Return source's value for name, or MISSING.

    Mappings are searched by key, everything else by attribute.
    """
    if source is None:
        return MISSING
    if isinstance(source, Mapping):
        return source.get(name, MISSING)
    try:
        return getattr(source, name)
    except AttributeError:
        return MISSING


def lookup_stat(stat: Any, name: str) -> Any:
    """Like lookup, also trying the ``st_`` form of name."""
    value = lookup(stat, name)
    if value is MISSING and not name.startswith("st_"):
        value = lookup(stat, "st_" + name)
    return value


def record_stat(record: Any) -> Any:
    """Return the stat attached to a construction record, if any.

    ``os.DirEntry.stat`` is a method that hits the disk, so routines are
    ignored.
    """
    value = lookup(record, "stat")
    if value is MISSING or inspect.isroutine(value):
        return None
    return value


def is_native_entry(record: Any) -> bool:
    """Return True for directory entries and stat results."""
    from .file import File

    return isinstance(record, (os.DirEntry, os.stat_result, File))


def resolve_property(file: "File", name: str) -> Any:
    """Resolve name on file following the module-level order.

    Returns:
        The resolved value, or MISSING if no source has it.
    """
    own = object.__getattribute__
    if name in RESERVED_FIELDS or name.startswith("_"):
        try:
            return own(file, name)
        except AttributeError:
            return MISSING

    record = own(file, "_record")
    if (
        record is not None
        and not isinstance(record, (Mapping, str))
        and not is_native_entry(record)
        and callable(getattr(type(record), name, None))
    ):
        return getattr(record, name)

    if hasattr(type(file), name):
        return own(file, name)

    value = lookup_stat(own(file, "stat"), name)
    if value is not MISSING:
        return value

    value = own(file, "_fields").get(name, MISSING)
    if value is not MISSING:
        return value

    if record is not None and not isinstance(record, (Mapping, str)):
        value = lookup(record, name)
        if value is not MISSING:
            return value

    value = lookup_stat(record_stat(record), name)
    if value is not MISSING:
        return value

    return own(file, "_custom").get(name, MISSING)
