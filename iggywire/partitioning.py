"""Partitioning rules and partition descriptions."""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass
from enum import IntEnum

from iggywire.identifier import Identifier

_MAX_KEY_LENGTH = 255


class PartitioningKind(IntEnum):
    """How the server picks a partition for sent messages."""

    BALANCED = 1
    PARTITION_ID = 2
    MESSAGE_KEY = 3


@dataclass(frozen=True)
class Partitioning:
    """A partitioning kind together with its encoded value."""

    kind: PartitioningKind
    value: bytes = b""

    @property
    def length(self) -> int:
        return len(self.value)

    @classmethod
    def balanced(cls) -> Partitioning:
        return cls(PartitioningKind.BALANCED, b"")

    @classmethod
    def partition_id(cls, value: int) -> Partitioning:
        return cls(PartitioningKind.PARTITION_ID, struct.pack("<I", value & 0xFFFFFFFF))

    @classmethod
    def entity_id_str(cls, value: str) -> Partitioning:
        return cls.entity_id_bytes(value.encode("utf-8"))

    @classmethod
    def entity_id_bytes(cls, value: bytes) -> Partitioning:
        if len(value) == 0 or len(value) > _MAX_KEY_LENGTH:
            raise ValueError("Value has incorrect size, must be between 1 and 255")
        return cls(PartitioningKind.MESSAGE_KEY, bytes(value))

    @classmethod
    def entity_id_int(cls, value: int) -> Partitioning:
        return cls(PartitioningKind.MESSAGE_KEY, struct.pack("<I", value & 0xFFFFFFFF))

    @classmethod
    def entity_id_ulong(cls, value: int) -> Partitioning:
        if not 0 <= value < 2**64:
            raise ValueError("value must fit in an unsigned 64-bit integer")
        return cls(PartitioningKind.MESSAGE_KEY, struct.pack("<Q", value))

    @classmethod
    def entity_id_uuid(cls, value: uuid.UUID) -> Partitioning:
        return cls(PartitioningKind.MESSAGE_KEY, value.bytes)


@dataclass
class PartitionInfo:
    """A partition as reported by the server."""

    id: int
    messages_count: int = 0
    created_at: int = 0
    segments_count: int = 0
    current_offset: int = 0
    size_bytes: int = 0


@dataclass
class CreatePartitionsRequest:
    stream_id: Identifier
    topic_id: Identifier
    partitions_count: int


@dataclass
class DeletePartitionsRequest:
    stream_id: Identifier
    topic_id: Identifier
    partitions_count: int