from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Header and path text is carried as str. surrogateescape keeps any byte
# that is not valid UTF-8, so rendering a parsed value gives back the same bytes.
WIRE_ENCODING = "utf-8"
WIRE_ERRORS = "surrogateescape"


def wire_decode(raw: bytes) -> str:
    return raw.decode(WIRE_ENCODING, WIRE_ERRORS)


def wire_encode(text: str) -> bytes:
    return text.encode(WIRE_ENCODING, WIRE_ERRORS)


class HttpVersion(Enum):
    HTTP_1_0 = "1.0"


class HttpMethod(Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"


@dataclass(frozen=True)
class HttpHeader:
    name: str
    value: str


@dataclass(frozen=True)
class HttpRequest:
    method: HttpMethod
    path: str
    version: HttpVersion | None
    headers: tuple[HttpHeader, ...] = ()
    body: bytes | None = None
    body_length: int = 0

    def header(self, name: str) -> str | None:
        """
        Value of the first header called exactly `name`, or None.
        Case-sensitive, like the Content-Length lookup.
        """
        for h in self.headers:
            if h.name == name:
                return h.value
        return None

    @property
    def body_complete(self) -> bool:
        if self.body is None:
            return self.body_length == 0
        return len(self.body) == self.body_length


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    reason_phrase: str
    headers: tuple[HttpHeader, ...] = ()
    body: bytes | None = None
    version: HttpVersion = HttpVersion.HTTP_1_0
