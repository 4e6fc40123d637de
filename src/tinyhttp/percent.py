from __future__ import annotations

from typing import Protocol

from tinyhttp.errors import PercentDecodeError

_HEXDIGITS = frozenset(b"0123456789abcdefABCDEF")


class PercentDecoder(Protocol):
    def decode(self, segment: bytes) -> bytes:
        """
        Decode %XX escapes in one path segment.
        Raise PercentDecodeError on an invalid escape.
        """
        ...


class StrictPercentDecoder:
    def decode(self, segment: bytes) -> bytes:
        return strict_percent_decode(segment)


def strict_percent_decode(segment: bytes) -> bytes:
    """
    Unlike urllib.parse.unquote_to_bytes, a '%' that is not followed by
    two hex digits is an error instead of being passed through.
    """
    if b"%" not in segment:
        return segment

    out = bytearray()
    i = 0
    n = len(segment)
    while i < n:
        b = segment[i]
        if b != 0x25:  # '%'
            out.append(b)
            i += 1
            continue
        if i + 2 >= n:
            raise PercentDecodeError(f"truncated escape at offset {i}")
        hi, lo = segment[i + 1], segment[i + 2]
        if hi not in _HEXDIGITS or lo not in _HEXDIGITS:
            raise PercentDecodeError(f"invalid escape {segment[i:i + 3]!r} at offset {i}")
        out.append(int(segment[i + 1 : i + 3], 16))
        i += 3
    return bytes(out)


DEFAULT_DECODER: PercentDecoder = StrictPercentDecoder()
