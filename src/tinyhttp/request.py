from __future__ import annotations

import logging
import re

from tinyhttp.config import Settings
from tinyhttp.cursor import CRLF, ByteCursor
from tinyhttp.errors import HttpParseError, ParseErrorKind, PercentDecodeError
from tinyhttp.http import HttpHeader, HttpMethod, HttpRequest, HttpVersion, wire_decode
from tinyhttp.percent import DEFAULT_DECODER, PercentDecoder

logger = logging.getLogger(__name__)

CONTENT_LENGTH = "Content-Length"

# Anything this short cannot hold a request line.
MIN_PACKET_LENGTH = 5

_SPACE = 0x20
_DECIMAL_RE = re.compile(r"\s*([+-]?[0-9]+)")


def _error(kind: ParseErrorKind, message: str) -> HttpParseError:
    logger.debug("parse failed (%s): %s", kind.value, message)
    return HttpParseError(kind, message)


def parse_http_request(
    packet: bytes | None,
    settings: Settings,
    decoder: PercentDecoder = DEFAULT_DECODER,
) -> HttpRequest:
    """
    Parse one buffered HTTP/1.0 request: request line, headers, body.

    Raises HttpParseError; the caller branches on its `kind`.
    """
    if packet is None:
        raise _error(ParseErrorKind.NULL_INPUT, "no request buffer")
    if len(packet) <= MIN_PACKET_LENGTH:
        raise _error(ParseErrorKind.NULL_INPUT, "request appears empty")

    cursor = ByteCursor(packet)
    method, path, version = parse_request_line(cursor, settings, decoder)
    headers = parse_headers(cursor, settings)
    body, body_length = parse_body(cursor, headers, settings)

    req = HttpRequest(
        method=method,
        path=path,
        version=version,
        headers=headers,
        body=body,
        body_length=body_length,
    )
    logger.debug(
        "parsed %s %s (%d headers, body=%d bytes)",
        method.value,
        path,
        len(headers),
        body_length,
    )
    return req


# --- request line ---


def parse_request_line(
    cursor: ByteCursor,
    settings: Settings,
    decoder: PercentDecoder = DEFAULT_DECODER,
) -> tuple[HttpMethod, str, HttpVersion | None]:
    method = _parse_method(cursor)

    path_start = cursor.pos
    sp = cursor.find(b" ", settings.max_path_length)
    if sp == -1:
        if cursor.remaining() > settings.max_path_length:
            raise _error(
                ParseErrorKind.MALFORMED_REQUEST_LINE,
                f"path exceeds {settings.max_path_length} bytes",
            )
        # buffer ends inside the path: no version token
        raw_path = cursor.rest()
    else:
        raw_path = cursor.slice(path_start, sp)
        cursor.seek(sp + 1)

    if not raw_path:
        raise _error(ParseErrorKind.MALFORMED_REQUEST_LINE, "empty path")

    path = decode_path(raw_path, decoder)

    if cursor.at_end():
        return method, path, None

    version = _parse_version(cursor)

    if not cursor.at_end() and not cursor.skip(CRLF):
        raise _error(
            ParseErrorKind.MALFORMED_REQUEST_LINE,
            "request line does not end with CRLF",
        )
    return method, path, version


def _parse_method(cursor: ByteCursor) -> HttpMethod:
    for method in HttpMethod:
        if cursor.skip(method.value.encode("ascii") + b" "):
            return method
    raise _error(
        ParseErrorKind.UNSUPPORTED_METHOD,
        "only GET, HEAD and POST are supported",
    )


def _parse_version(cursor: ByteCursor) -> HttpVersion:
    if not cursor.skip(b"HTTP/"):
        raise _error(ParseErrorKind.MALFORMED_REQUEST_LINE, "missing HTTP marker")
    for version in HttpVersion:
        if cursor.skip(version.value.encode("ascii")):
            return version
    raise _error(ParseErrorKind.UNSUPPORTED_VERSION, "only HTTP/1.0 is supported")


def decode_path(raw_path: bytes, decoder: PercentDecoder = DEFAULT_DECODER) -> str:
    """
    Decode each '/'-separated segment on its own and re-join them.
    Empty segments are dropped, so '/a//b' becomes '/a/b'. An encoded
    '%2F' stays inside its segment.
    """
    if raw_path == b"/":
        return "/"

    out = bytearray()
    for segment in raw_path.split(b"/"):
        if not segment:
            continue
        try:
            decoded = decoder.decode(segment)
        except PercentDecodeError as exc:
            raise _error(
                ParseErrorKind.PATH_DECODE_FAILURE,
                f"cannot decode path segment {segment!r}: {exc}",
            ) from exc
        out += b"/"
        out += decoded

    if not out:
        return "/"
    return wire_decode(bytes(out))


# --- headers ---


def parse_headers(cursor: ByteCursor, settings: Settings) -> tuple[HttpHeader, ...]:
    headers: list[HttpHeader] = []
    while cursor.remaining() >= 2 and not cursor.startswith(CRLF):
        try:
            headers.append(_parse_header_line(cursor, settings))
        except MemoryError as exc:
            raise _error(
                ParseErrorKind.HEADER_ALLOCATION_FAILURE,
                "cannot allocate memory for new headers",
            ) from exc
    # blank separator line
    cursor.advance(2)
    return tuple(headers)


def _parse_header_line(cursor: ByteCursor, settings: Settings) -> HttpHeader:
    start = cursor.pos
    sp = cursor.find(b" ", settings.max_header_name_length)
    eol = cursor.find(CRLF, settings.max_header_name_length)
    if sp == -1 or (eol != -1 and eol < sp):
        raise _error(ParseErrorKind.MALFORMED_HEADER, "malformed header: no space after name")
    if sp == start:
        raise _error(ParseErrorKind.MALFORMED_HEADER, "malformed header: empty name")

    # the byte before the space is the ':' separator
    name = wire_decode(cursor.slice(start, sp - 1))
    cursor.seek(sp)
    cursor.skip_while(_SPACE)

    value_start = cursor.pos
    eol = cursor.find(CRLF, settings.max_header_value_length)
    if eol == -1:
        if cursor.remaining() > settings.max_header_value_length:
            raise _error(
                ParseErrorKind.MALFORMED_HEADER,
                f"value of {name!r} exceeds {settings.max_header_value_length} bytes",
            )
        raw_value = cursor.rest()
    else:
        raw_value = cursor.slice(value_start, eol)
        cursor.seek(eol + len(CRLF))

    return HttpHeader(name=name, value=wire_decode(raw_value))


# --- body ---


def content_length(headers: tuple[HttpHeader, ...], settings: Settings) -> int | None:
    """
    Value of the first Content-Length header, or None if there is none.
    Names are compared case-sensitively, for at most max_header_name_length chars.
    """
    limit = settings.max_header_name_length
    for h in headers:
        if h.name[:limit] != CONTENT_LENGTH[:limit]:
            continue
        # leading digits only, like strtol: "5abc" is 5, "abc" is 0
        m = _DECIMAL_RE.match(h.value)
        if m is None:
            logger.debug("Content-Length %r has no digits; using 0", h.value)
            return 0
        return int(m.group(1))
    return None


def parse_body(
    cursor: ByteCursor,
    headers: tuple[HttpHeader, ...],
    settings: Settings,
) -> tuple[bytes | None, int]:
    if cursor.at_end():
        return None, 0

    declared = content_length(headers, settings)
    if declared is not None and declared >= 0:
        length = declared
    else:
        length = cursor.remaining()

    if length > settings.max_body_length:
        raise _error(
            ParseErrorKind.BODY_TOO_LARGE,
            f"body of {length} bytes exceeds {settings.max_body_length}",
        )

    body = cursor.take(length)
    if len(body) < length:
        logger.debug("body incomplete: have %d of %d bytes", len(body), length)
    return body, length
