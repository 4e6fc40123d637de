from __future__ import annotations

from enum import Enum


class ParseErrorKind(Enum):
    NULL_INPUT = "null_input"
    MALFORMED_HEADER = "malformed_header"
    HEADER_ALLOCATION_FAILURE = "header_allocation_failure"
    UNSUPPORTED_METHOD = "unsupported_method"
    MALFORMED_REQUEST_LINE = "malformed_request_line"
    UNSUPPORTED_VERSION = "unsupported_version"
    BODY_TOO_LARGE = "body_too_large"
    PATH_DECODE_FAILURE = "path_decode_failure"


class RenderErrorKind(Enum):
    NULL_RESPONSE = "null_response"
    ALLOCATION_FAILURE = "allocation_failure"
    UNSUPPORTED_VERSION = "unsupported_version"
    INVALID_STATUS_CODE = "invalid_status_code"


class HttpError(ValueError):
    """
    Base for parse/render failures.
    Callers branch on `kind`; the message is for logs only.
    """

    def __init__(self, kind: Enum, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.args[0]}"


class HttpParseError(HttpError):
    kind: ParseErrorKind

    def __init__(self, kind: ParseErrorKind, message: str) -> None:
        super().__init__(kind, message)


class HttpRenderError(HttpError):
    kind: RenderErrorKind

    def __init__(self, kind: RenderErrorKind, message: str) -> None:
        super().__init__(kind, message)


class PercentDecodeError(ValueError):
    pass
