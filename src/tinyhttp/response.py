from __future__ import annotations

import logging
from dataclasses import dataclass

from tinyhttp.config import Settings
from tinyhttp.errors import HttpParseError, HttpRenderError, ParseErrorKind, RenderErrorKind
from tinyhttp.http import HttpHeader, HttpResponse, HttpVersion, wire_encode

logger = logging.getLogger(__name__)

MAX_REASON_PHRASE_LENGTH = 128
STATUS_LINE_SLACK = 32


@dataclass(frozen=True)
class RenderedResponse:
    buffer: bytearray
    length: int

    @property
    def octets(self) -> bytes:
        return bytes(memoryview(self.buffer)[: self.length])


class _BufferWriter:
    def __init__(self, capacity: int) -> None:
        self.buf = bytearray(capacity)
        self.written = 0

    def write(self, data: bytes) -> None:
        end = self.written + len(data)
        if end > len(self.buf):
            # estimate was short (long reason phrase or oversized header)
            self.buf.extend(bytes(end - len(self.buf)))
        self.buf[self.written : end] = data
        self.written = end


def estimate_response_capacity(response: HttpResponse, settings: Settings) -> int:
    """
    Upper-bound guess sized from the configured ceilings rather than the
    actual content, so the buffer is normally allocated once.
    """
    body_len = len(response.body) if response.body else 0
    per_header = settings.max_header_name_length + settings.max_header_value_length
    return body_len + len(response.headers) * per_header + STATUS_LINE_SLACK


def render_http_response(response: HttpResponse | None, settings: Settings) -> RenderedResponse:
    """
    Serialize a response into one buffer.

    Callers must send `RenderedResponse.octets` (or the first `length`
    bytes of `buffer`), never the whole allocation.
    """
    if response is None:
        raise _error(RenderErrorKind.NULL_RESPONSE, "http_response is null")
    if not 100 <= response.status_code <= 999:
        raise _error(
            RenderErrorKind.INVALID_STATUS_CODE,
            f"status code {response.status_code} is not three digits",
        )

    try:
        w = _BufferWriter(estimate_response_capacity(response, settings))
    except (MemoryError, OverflowError) as exc:
        # OverflowError: ceilings so large the size is not a valid index
        raise _error(
            RenderErrorKind.ALLOCATION_FAILURE,
            "cannot alloc mem for response octets",
        ) from exc

    # Status-Line = "HTTP/" 1*DIGIT "." 1*DIGIT SP 3DIGIT SP Reason-Phrase CRLF
    w.write(b"HTTP/")
    if response.version is not HttpVersion.HTTP_1_0:
        raise _error(
            RenderErrorKind.UNSUPPORTED_VERSION,
            f"unsupported HTTP version: {response.version!r}",
        )
    w.write(response.version.value.encode("ascii"))
    w.write(b" ")
    w.write(b"%d " % response.status_code)
    w.write(wire_encode(response.reason_phrase)[:MAX_REASON_PHRASE_LENGTH])
    w.write(b"\r\n")

    if response.headers:
        for h in response.headers:
            w.write(wire_encode(h.name))
            w.write(b": ")
            w.write(wire_encode(h.value))
            w.write(b"\r\n")
        w.write(b"\r\n")

    if response.body:
        w.write(response.body)

    logger.debug(
        "rendered %d %s (%d of %d bytes used)",
        response.status_code,
        response.reason_phrase,
        w.written,
        len(w.buf),
    )
    return RenderedResponse(buffer=w.buf, length=w.written)


def _error(kind: RenderErrorKind, message: str) -> HttpRenderError:
    logger.debug("render failed (%s): %s", kind.value, message)
    return HttpRenderError(kind, message)


_ERROR_STATUS: dict[ParseErrorKind, tuple[int, str]] = {
    ParseErrorKind.BODY_TOO_LARGE: (413, "Payload Too Large"),
    ParseErrorKind.UNSUPPORTED_METHOD: (501, "Not Implemented"),
    ParseErrorKind.UNSUPPORTED_VERSION: (505, "HTTP Version Not Supported"),
    ParseErrorKind.HEADER_ALLOCATION_FAILURE: (500, "Internal Server Error"),
}


def error_response(error: HttpParseError) -> HttpResponse:
    """
    Plain-text response for a request that failed to parse.
    """
    status, message = _ERROR_STATUS.get(error.kind, (400, "Bad Request"))
    body = (message + "\n").encode("utf-8")
    return HttpResponse(
        status_code=status,
        reason_phrase=message,
        headers=(
            HttpHeader("Content-Type", "text/plain; charset=utf-8"),
            HttpHeader("Content-Length", str(len(body))),
        ),
        body=body,
    )
