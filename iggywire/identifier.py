"""Identifiers, consumers and polling strategies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class IdKind(IntEnum):
    """How an identifier is encoded on the wire."""

    NUMERIC = 1
    STRING = 2


@dataclass(frozen=True)
class Identifier:
    """A numeric or string identifier of a stream, topic, user or group."""

    kind: IdKind
    length: int
    value: int | str


def new_identifier(value: int | str) -> Identifier:
    """Build an identifier from an int (numeric) or a str (string)."""
    if isinstance(value, bool):
        raise TypeError("identifier must be an int or a str, not bool")
    if isinstance(value, int):
        return Identifier(IdKind.NUMERIC, 4, value)
    if isinstance(value, str):
        return Identifier(IdKind.STRING, len(value.encode("utf-8")), value)
    raise TypeError(f"identifier must be an int or a str, not {type(value).__name__}")


class ConsumerKind(IntEnum):
    """Whether offsets belong to a single consumer or a consumer group."""

    SINGLE = 1
    GROUP = 2


@dataclass(frozen=True)
class Consumer:
    """The consumer on whose behalf messages are polled or offsets stored."""

    kind: ConsumerKind
    id: Identifier


class MessagePolling(IntEnum):
    """Where polling starts in a partition."""

    OFFSET = 1
    TIMESTAMP = 2
    FIRST = 3
    LAST = 4
    NEXT = 5


@dataclass(frozen=True)
class PollingStrategy:
    """A polling kind with its optional value."""

    kind: MessagePolling
    value: int = 0

    @classmethod
    def offset(cls, value: int) -> PollingStrategy:
        return cls(MessagePolling.OFFSET, value)

    @classmethod
    def timestamp(cls, value: int) -> PollingStrategy:
        return cls(MessagePolling.TIMESTAMP, value)

    @classmethod
    def first(cls) -> PollingStrategy:
        return cls(MessagePolling.FIRST, 0)

    @classmethod
    def last(cls) -> PollingStrategy:
        return cls(MessagePolling.LAST, 0)

    @classmethod
    def next(cls) -> PollingStrategy:
        return cls(MessagePolling.NEXT, 0)