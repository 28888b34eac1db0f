"""Request and response records exchanged with the server."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from iggywire.headers import HeaderKey, HeaderValue
from iggywire.identifier import Consumer, Identifier, PollingStrategy
from iggywire.partitioning import PartitionInfo, Partitioning

Headers = dict[HeaderKey, HeaderValue]


# Access tokens

@dataclass
class CreateAccessTokenRequest:
    name: str
    expiry: int = 0


@dataclass
class DeleteAccessTokenRequest:
    name: str


@dataclass
class AccessTokenResponse:
    name: str
    expiry: datetime | None = None


@dataclass
class AccessToken:
    token: str


# Clients and consumer groups

@dataclass
class ConsumerGroupInfo:
    stream_id: int
    topic_id: int
    consumer_group_id: int


@dataclass
class ClientResponse:
    id: int
    address: str
    user_id: int
    transport: str
    consumer_groups_count: int = 0
    consumer_groups: list[ConsumerGroupInfo] = field(default_factory=list)


@dataclass
class ConsumerGroupResponse:
    id: int
    name: str
    partitions_count: int = 0
    members_count: int = 0


@dataclass
class CreateConsumerGroupRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer_group_id: int
    name: str


@dataclass
class DeleteConsumerGroupRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer_group_id: Identifier


@dataclass
class JoinConsumerGroupRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer_group_id: Identifier


@dataclass
class LeaveConsumerGroupRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer_group_id: Identifier


# Login

@dataclass
class LogInRequest:
    username: str
    password: str
    version: str = ""
    context: str = ""


@dataclass
class LogInAccessTokenRequest:
    token: str


@dataclass
class LogInResponse:
    user_id: int


# Messages

class MessageState(IntEnum):
    AVAILABLE = 0
    UNAVAILABLE = 1
    POISONED = 2
    MARKED_FOR_DELETION = 3


@dataclass
class Message:
    """A message to be sent."""

    id: uuid.UUID
    payload: bytes
    headers: Headers | None = None

    @classmethod
    def create(cls, payload: bytes, headers: Headers | None = None) -> Message:
        """Make a message with a fresh random id."""
        return cls(uuid.uuid4(), payload, headers)


@dataclass
class MessageResponse:
    offset: int
    timestamp: int
    checksum: int
    id: uuid.UUID
    payload: bytes
    state: MessageState = MessageState.AVAILABLE
    headers: Headers = field(default_factory=dict)


@dataclass
class FetchMessagesRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer: Consumer
    partition_id: int
    polling_strategy: PollingStrategy
    count: int
    auto_commit: bool = False


@dataclass
class FetchMessagesResponse:
    partition_id: int = 0
    current_offset: int = 0
    messages: list[MessageResponse] = field(default_factory=list)
    message_count: int = 0


@dataclass
class SendMessagesRequest:
    stream_id: Identifier
    topic_id: Identifier
    partitioning: Partitioning
    messages: list[Message]


# Offsets

@dataclass
class StoreOffsetRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer: Consumer
    partition_id: int
    offset: int


@dataclass
class GetOffsetRequest:
    stream_id: Identifier
    topic_id: Identifier
    consumer: Consumer
    partition_id: int


@dataclass
class OffsetResponse:
    partition_id: int
    current_offset: int
    stored_offset: int


# Stats

@dataclass
class Stats:
    process_id: int = 0
    cpu_usage: float = 0.0
    memory_usage: int = 0
    total_memory: int = 0
    available_memory: int = 0
    run_time: int = 0
    start_time: int = 0
    read_bytes: int = 0
    written_bytes: int = 0
    messages_size_bytes: int = 0
    streams_count: int = 0
    topics_count: int = 0
    partitions_count: int = 0
    segments_count: int = 0
    messages_count: int = 0
    clients_count: int = 0
    consumer_groups_count: int = 0
    hostname: str = ""
    os_name: str = ""
    os_version: str = ""
    kernel_version: str = ""


# Streams

@dataclass
class CreateStreamRequest:
    stream_id: int
    name: str


@dataclass
class UpdateStreamRequest:
    stream_id: Identifier
    name: str


@dataclass
class GetStreamRequest:
    stream_id: Identifier


# Topics

@dataclass
class CreateTopicRequest:
    stream_id: Identifier
    topic_id: int
    partitions_count: int
    name: str
    compression_algorithm: int = 0
    message_expiry: int = 0
    max_topic_size: int = 0
    replication_factor: int = 0


@dataclass
class UpdateTopicRequest:
    topic_id: Identifier
    stream_id: Identifier
    name: str
    message_expiry: int = 0


@dataclass
class TopicResponse:
    id: int = 0
    created_at: int = 0
    name: str = ""
    size_bytes: int = 0
    message_expiry: int = 0
    messages_count: int = 0
    partitions_count: int = 0
    partitions: list[PartitionInfo] = field(default_factory=list)


@dataclass
class StreamResponse:
    id: int = 0
    name: str = ""
    size_bytes: int = 0
    created_at: int = 0
    messages_count: int = 0
    topics_count: int = 0
    topics: list[TopicResponse] = field(default_factory=list)