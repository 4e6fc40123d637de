from __future__ import annotations

CRLF = b"\r\n"


class ByteCursor:
    """
    Read position over an immutable byte buffer.

    Every move is clamped to the buffer length, so scans driven by
    untrusted input can never index past the end.
    """

    def __init__(self, data: bytes, pos: int = 0) -> None:
        self._data = bytes(data)
        self._pos = 0
        self.seek(pos)

    @property
    def pos(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def seek(self, pos: int) -> None:
        self._pos = max(0, min(pos, len(self._data)))

    def advance(self, n: int) -> int:
        """Move forward by up to `n` bytes; return how far we actually moved."""
        start = self._pos
        self.seek(self._pos + n)
        return self._pos - start

    def startswith(self, prefix: bytes) -> bool:
        return self._data.startswith(prefix, self._pos)

    def skip(self, prefix: bytes) -> bool:
        if not self.startswith(prefix):
            return False
        self._pos += len(prefix)
        return True

    def skip_while(self, byte: int) -> int:
        start = self._pos
        end = len(self._data)
        while self._pos < end and self._data[self._pos] == byte:
            self._pos += 1
        return self._pos - start

    def find(self, needle: bytes, limit: int) -> int:
        """
        Absolute offset of `needle` starting within `limit` bytes of the
        cursor, or -1. Does not move the cursor.
        """
        # the needle may end past the window, but has to start inside it
        end = min(len(self._data), self._pos + limit + len(needle) - 1)
        return self._data.find(needle, self._pos, end)

    def slice(self, start: int, stop: int) -> bytes:
        start = max(0, min(start, len(self._data)))
        stop = max(start, min(stop, len(self._data)))
        return self._data[start:stop]

    def take(self, n: int) -> bytes:
        """Return up to `n` bytes from the cursor and move past them."""
        start = self._pos
        self.advance(n)
        return self._data[start : self._pos]

    def rest(self) -> bytes:
        return self.take(self.remaining())
