"""Message header keys, values and kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

MAX_HEADER_LENGTH = 255


class HeaderKind(IntEnum):
    """Type tag of a header value."""

    RAW = 1
    STRING = 2
    BOOL = 3
    INT32 = 6
    INT64 = 7
    INT128 = 8
    UINT32 = 11
    UINT64 = 12
    UINT128 = 13
    FLOAT = 14
    DOUBLE = 15


@dataclass(frozen=True)
class HeaderKey:
    """A header name of 1 to 255 bytes."""

    value: str

    def __post_init__(self) -> None:
        size = len(self.value.encode("utf-8"))
        if size == 0 or size > MAX_HEADER_LENGTH:
            raise ValueError("Value has incorrect size, must be between 1 and 255")


@dataclass(frozen=True)
class HeaderValue:
    """A typed header value carried as raw bytes."""

    kind: HeaderKind
    value: bytes