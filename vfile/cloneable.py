"""Streams that can be read independently by several consumers.

The module itself satisfies the ``StreamCloner`` protocol, so it can be
handed straight to ``File.create``::

    from vfile import File, cloneable

    CloneableFile = File.create(cloneable=cloneable)
"""

from __future__ import annotations

import io
import logging
import weakref
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class _SharedSource:
    """Buffer over the wrapped stream shared by all readers.

    Holds the bytes between the slowest open reader and the furthest point
    any reader has pulled from the wrapped stream.

    Readers are held weakly, so a reader dropped without ``close()`` stops
    pinning the buffer once it is collected.
    """

    def __init__(self, stream: Any, chunk_size: int):
        self.stream = stream
        self.chunk_size = chunk_size
        self.buffer = bytearray()
        self.offset = 0  # absolute position of buffer[0]
        self.eof = False
        self.readers: weakref.WeakSet[CloneableStream] = weakref.WeakSet()

    @property
    def end(self) -> int:
        return self.offset + len(self.buffer)

    def _pull(self) -> bool:
        """Read one chunk from the wrapped stream. Returns False if none came."""
        chunk = self.stream.read(self.chunk_size)
        if chunk is None:
            return False
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        if not chunk:
            self.eof = True
            return False
        self.buffer += chunk
        return True

    def read(self, position: int, size: int) -> bytes | None:
        """Return up to size bytes starting at an absolute position.

        A negative size reads to the end of the wrapped stream. Returns
        None if the wrapped stream is non-blocking and has nothing yet.
        """
        if size < 0:
            while not self.eof and self._pull():
                pass
        else:
            while not self.eof and self.end < position + size:
                if not self._pull():
                    break

        start = position - self.offset
        stop = len(self.buffer) if size < 0 else start + size
        data = bytes(self.buffer[start:stop])
        if not data and not self.eof:
            return None
        return data

    def trim(self) -> None:
        """Drop buffered bytes every open reader has already consumed."""
        if not self.readers:
            self.buffer.clear()
            return
        low = min(reader.position for reader in self.readers)
        drop = low - self.offset
        if drop > 0:
            del self.buffer[:drop]
            self.offset = low

    def detach(self, reader: "CloneableStream") -> None:
        self.readers.discard(reader)
        self.trim()
        if not self.readers:
            close = getattr(self.stream, "close", None)
            if callable(close):
                close()


class CloneableStream(io.RawIOBase):
    """Binary reader whose ``clone()`` yields an independent reader.

    Every clone sees the same bytes from the point it was cloned at.
    Nothing is read from the wrapped stream until some reader asks for
    data, so attaching consumers in any order never loses bytes.

    Attributes:
        position: Number of bytes this reader has consumed.
    """

    def __init__(
        self,
        stream: Any = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        _source: _SharedSource | None = None,
        _position: int = 0,
    ):
        """Wrap a readable stream.

        Args:
            stream: Object with a ``read(size)`` method returning bytes
                or str. Ignored when cloning.
            chunk_size: Bytes requested from the wrapped stream at a time.
        """
        super().__init__()
        if _source is None:
            if stream is None:
                raise ValueError("CloneableStream requires a stream to wrap")
            _source = _SharedSource(stream, chunk_size)
        self._source = _source
        self.position = _position
        _source.readers.add(self)

    @property
    def stream(self) -> Any:
        """The wrapped stream."""
        return self._source.stream

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: Any) -> int | None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        view = memoryview(buffer).cast("B")
        data = self._source.read(self.position, len(view))
        if data is None:
            return None
        view[: len(data)] = data
        self.position += len(data)
        self._source.trim()
        return len(data)

    def readall(self) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        data = self._source.read(self.position, -1) or b""
        self.position += len(data)
        self._source.trim()
        return data

    def clone(self) -> "CloneableStream":
        """Return a new reader that starts where this one currently is."""
        if self.closed:
            raise ValueError("Cannot clone a closed stream")
        logger.debug("Cloning stream at position %d", self.position)
        return CloneableStream(_source=self._source, _position=self.position)

    def close(self) -> None:
        """Close this reader. The wrapped stream closes with the last reader."""
        if self.closed:
            return
        source = getattr(self, "_source", None)
        if source is not None:
            source.detach(self)
        super().close()


def is_cloneable(stream: Any) -> bool:
    """Return True if stream already supports independent clones."""
    return isinstance(stream, CloneableStream)


def make_cloneable(stream: Any) -> CloneableStream:
    """Wrap stream in a CloneableStream (no-op if it already is one)."""
    if is_cloneable(stream):
        return stream
    logger.debug("Wrapping %s in CloneableStream", type(stream).__name__)
    return CloneableStream(stream)
