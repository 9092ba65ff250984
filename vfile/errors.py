"""Exceptions raised by File accessors.

Each error also subclasses the builtin exception a caller would expect for
the same misuse, so ``except TypeError`` or ``except ValueError`` keep
working.
"""


class FileError(Exception):
    """Base class for all vfile errors."""


class InvalidArgumentError(FileError, TypeError):
    """A value of the wrong type (or an empty string) was assigned."""


class MissingPathError(FileError, ValueError):
    """A path-derived property was used while ``file.path`` is unset."""

    def __init__(self, prop: str, action: str = "get"):
        self.prop = prop
        self.action = action
        super().__init__(f"No path specified! Can not {action} {prop}.")


class ReadOnlyPropertyError(FileError, AttributeError):
    """Assignment to a computed property such as ``absolute``."""

    def __init__(self, prop: str):
        self.prop = prop
        super().__init__(f'"file.{prop}" is a getter and may not be defined.')
