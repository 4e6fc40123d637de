from __future__ import annotations

from dataclasses import dataclass, fields

MAX_URL_LENGTH = 8000
MAX_HEADER_NAME_LENGTH = 8000
MAX_HEADER_VALUE_LENGTH = 8000
MAX_BODY_LENGTH = 8 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    max_header_name_length: int = MAX_HEADER_NAME_LENGTH
    max_header_value_length: int = MAX_HEADER_VALUE_LENGTH
    max_body_length: int = MAX_BODY_LENGTH
    max_path_length: int = MAX_URL_LENGTH

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            # bool is an int subclass; True is not a length
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{f.name} must be an integer")
            if value <= 0:
                raise ValueError(f"{f.name} must be > 0")
