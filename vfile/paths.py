"""Path helpers shared by File accessors.

All functions operate on the host platform's path flavour (``os.path``),
so separators are canonicalized on Windows and left alone elsewhere.
"""

from __future__ import annotations

import os
import unicodedata


def normalize(path: str) -> str:
    """Normalize a path string for storage on a File.

    Collapses redundant separators and ``.``/``..`` segments, strips
    trailing separators and applies NFC unicode normalization.

    Args:
        path: Path to normalize. The empty string is returned unchanged.

    Returns:
        Normalized path.
    """
    if not path:
        return ""
    return unicodedata.normalize("NFC", os.path.normpath(path))


def remove_trailing_separator(path: str) -> str:
    """Strip trailing separators, keeping at least one character."""
    seps = os.sep + (os.altsep or "")
    end = len(path)
    while end > 1 and path[end - 1] in seps:
        end -= 1
    return path[:end]


def join(*segments: str) -> str:
    """Join path segments.

    If the last segment is absolute it wins outright and is resolved on
    its own, mirroring ``os.path.join``. With no segments the result is
    the empty string.
    """
    if not segments:
        return ""
    last = segments[-1]
    if os.path.isabs(last):
        return normalize(os.path.abspath(last))
    return normalize(os.path.join(*segments))


def replace_extension(path: str, ext: str) -> str:
    """Swap the extension of ``path`` for ``ext``.

    Args:
        path: Original path (e.g. "./src/app.ts").
        ext: New extension, with or without the leading dot. A dot is
            always prefixed when missing, so "" leaves a bare trailing dot.

    Returns:
        The new path (e.g. "./src/app.js"). A leading "./" is preserved.
    """
    if not isinstance(path, str) or path == "":
        return path

    dirname, basename = os.path.split(path)
    stem, _ = os.path.splitext(basename)
    if not ext.startswith("."):
        ext = "." + ext

    result = normalize(os.path.join(dirname, stem + ext))
    if path.startswith("./"):
        # normpath drops the marker
        return "./" + result
    return result
