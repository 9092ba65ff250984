"""Real-path resolution backends."""

from __future__ import annotations

import errno as _errno
import os
import posixpath

# Same limit the kernel applies before failing with ELOOP
MAX_SYMLINK_DEPTH = 40


class LocalFileSystem:
    """Resolves paths against the host filesystem."""

    def realpath(self, path: str) -> str:
        """Resolve symlinks in path, failing if any component is missing.

        Raises:
            OSError: If the path does not exist or a symlink loop is found.
        """
        return os.path.realpath(path, strict=True)


class MemoryFileSystem:
    """In-memory tree of paths and symlinks.

    Useful for testing and for pipelines whose files never touch disk.
    Paths are POSIX style and absolute; relative paths resolve against "/".

    Example:
        >>> fs = MemoryFileSystem()
        >>> fs.add_file("/src/app.py")
        >>> fs.add_symlink("/app.py", "/src/app.py")
        >>> fs.realpath("/app.py")
        '/src/app.py'
    """

    def __init__(self) -> None:
        self.files: set[str] = set()
        self.dirs: set[str] = {"/"}
        self.links: dict[str, str] = {}

    def add_file(self, path: str) -> None:
        path = self._normalize(path)
        self.files.add(path)
        self._add_parents(path)

    def add_dir(self, path: str) -> None:
        path = self._normalize(path)
        self.dirs.add(path)
        self._add_parents(path)

    def add_symlink(self, path: str, target: str) -> None:
        """Create a link at path pointing to target (absolute or relative)."""
        path = self._normalize(path)
        self.links[path] = target
        self._add_parents(path)

    def exists(self, path: str) -> bool:
        try:
            self.realpath(path)
        except OSError:
            return False
        return True

    def realpath(self, path: str) -> str:
        """Resolve every symlink component of path.

        Raises:
            FileNotFoundError: If a component does not exist.
            OSError: With ``ELOOP`` when links nest too deeply.
        """
        pending = self._normalize(path).strip("/").split("/")
        resolved = "/"
        depth = 0
        while pending:
            part = pending.pop(0)
            if not part:
                continue
            candidate = posixpath.join(resolved, part)
            if candidate in self.links:
                depth += 1
                if depth > MAX_SYMLINK_DEPTH:
                    raise OSError(_errno.ELOOP, "Too many levels of symbolic links", path)
                target = self.links[candidate]
                if target.startswith("/"):
                    resolved = "/"
                pending = [p for p in target.split("/") if p] + pending
                continue
            if part == "..":
                resolved = posixpath.dirname(resolved)
                continue
            if part == ".":
                continue
            if candidate not in self.files and candidate not in self.dirs:
                raise FileNotFoundError(_errno.ENOENT, "No such file or directory", path)
            resolved = candidate
        return resolved

    def _add_parents(self, path: str) -> None:
        parent = posixpath.dirname(path)
        while parent and parent != "/":
            self.dirs.add(parent)
            parent = posixpath.dirname(parent)

    def _normalize(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return posixpath.normpath(path)
