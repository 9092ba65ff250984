"""Classification of File contents.

Contents are either ``None``, an in-memory buffer or a readable stream.
"""

from __future__ import annotations

from typing import Any

BUFFER_TYPES = (bytes, bytearray, memoryview)

# Matches the summary width used when printing buffers
INSPECT_MAX_BYTES = 50


def is_buffer(value: Any) -> bool:
    """Return True if value is an in-memory byte sequence."""
    return isinstance(value, BUFFER_TYPES)


def is_stream(value: Any) -> bool:
    """Return True if value is a readable, iterable file-like object."""
    if value is None or is_buffer(value) or isinstance(value, str):
        return False
    return callable(getattr(value, "read", None)) and callable(
        getattr(value, "__iter__", None)
    )


def is_null(value: Any) -> bool:
    return value is None


def is_valid_contents(value: Any) -> bool:
    """Return True if value may be assigned to ``file.contents``."""
    return is_null(value) or is_buffer(value) or is_stream(value)


def copy_buffer(value: bytes | bytearray | memoryview) -> bytes | bytearray | memoryview:
    """Copy a buffer into a new object of the same type.

    ``bytes(value)`` would hand back the same object for ``bytes`` input,
    so the data always goes through a fresh ``bytearray``.
    """
    data = bytearray(value)
    if isinstance(value, bytearray):
        return data
    if isinstance(value, memoryview):
        return memoryview(data)
    return bytes(data)


def describe_contents(value: Any) -> str | None:
    """Return a short marker describing contents, or None for null.

    Examples:
        >>> describe_contents(b"test")
        '<Buffer 74 65 73 74>'
        >>> import io
        >>> describe_contents(io.BytesIO())
        '<BytesIOStream>'
    """
    if is_buffer(value):
        data = bytes(value)
        shown = " ".join(f"{b:02x}" for b in data[:INSPECT_MAX_BYTES])
        remaining = len(data) - INSPECT_MAX_BYTES
        if remaining > 0:
            shown += f" ... {remaining} more byte{'s' if remaining > 1 else ''}"
        return f"<Buffer {shown}>" if shown else "<Buffer >"
    if is_stream(value):
        name = type(value).__name__
        suffix = "" if name.endswith("Stream") else "Stream"
        return f"<{name}{suffix}>"
    return None
