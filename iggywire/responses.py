"""Binary decoding of stream, topic, partition, message, offset and group responses."""

from __future__ import annotations

import struct
import uuid

from iggywire import s2
from iggywire.codes import MessageCompression
from iggywire.headers import HeaderKey, HeaderKind, HeaderValue
from iggywire.models import (
    ConsumerGroupResponse,
    FetchMessagesResponse,
    LogInResponse,
    MessageResponse,
    MessageState,
    OffsetResponse,
    StreamResponse,
    TopicResponse,
)
from iggywire.partitioning import PartitionInfo

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")

_MESSAGE_PROPERTIES = 45
_MIN_COMPRESSED = 32
_MAX_HEADER_LENGTH = 255

_STATES = {
    1: MessageState.AVAILABLE,
    10: MessageState.UNAVAILABLE,
    20: MessageState.POISONED,
    30: MessageState.MARKED_FOR_DELETION,
}


def _unpack(fmt: struct.Struct, payload: bytes, position: int) -> int:
    try:
        return fmt.unpack_from(payload, position)[0]
    except struct.error as exc:
        raise ValueError("payload is truncated") from exc


def _u32(payload: bytes, position: int) -> int:
    return _unpack(_U32, payload, position)


def _u64(payload: bytes, position: int) -> int:
    return _unpack(_U64, payload, position)


def _byte(payload: bytes, position: int) -> int:
    if position >= len(payload):
        raise ValueError("payload is truncated")
    return payload[position]


def _text(payload: bytes, start: int, length: int) -> str:
    end = start + length
    if end > len(payload):
        raise ValueError("payload is truncated")
    return payload[start:end].decode("utf-8", errors="replace")


def deserialize_log_in(payload: bytes) -> LogInResponse:
    """Decode the id of the user that logged in."""
    return LogInResponse(user_id=_u32(bytes(payload), 0))


def deserialize_offset(payload: bytes) -> OffsetResponse:
    """Decode a partition's current and stored offsets."""
    payload = bytes(payload)
    return OffsetResponse(
        partition_id=_u32(payload, 0),
        current_offset=_u64(payload, 4),
        stored_offset=_u64(payload, 12),
    )


def _read_stream(payload: bytes, position: int) -> tuple[StreamResponse, int]:
    name_length = _byte(payload, position + 32)
    stream = StreamResponse(
        id=_u32(payload, position),
        created_at=_u64(payload, position + 4),
        topics_count=_u32(payload, position + 12),
        size_bytes=_u64(payload, position + 16),
        messages_count=_u64(payload, position + 24),
        name=_text(payload, position + 33, name_length),
    )
    return stream, 33 + name_length


def deserialize_streams(payload: bytes) -> list[StreamResponse]:
    """Decode a list of streams laid out one after another."""
    payload = bytes(payload)
    streams = []
    position = 0
    while position < len(payload):
        stream, read = _read_stream(payload, position)
        streams.append(stream)
        position += read
    return streams


def _read_topic(payload: bytes, position: int) -> tuple[TopicResponse, int]:
    name_length = _byte(payload, position + 36)
    topic = TopicResponse(
        id=_u32(payload, position),
        created_at=_u64(payload, position + 4),
        partitions_count=_u32(payload, position + 12),
        message_expiry=_u32(payload, position + 16),
        size_bytes=_u64(payload, position + 20),
        messages_count=_u64(payload, position + 28),
    )
    name_end = position + 37 + name_length
    if name_end > len(payload):
        raise ValueError("topic name runs past the end of the payload")
    topic.name = payload[position + 37:name_end].strip(b"\x00").decode("utf-8", errors="replace")
    return topic, 37 + name_length


def deserialize_stream(payload: bytes) -> StreamResponse:
    """Decode one stream followed by its topics."""
    payload = bytes(payload)
    stream, position = _read_stream(payload, 0)
    while position < len(payload):
        topic, read = _read_topic(payload, position)
        stream.topics.append(topic)
        position += read
    return stream


def deserialize_topics(payload: bytes) -> list[TopicResponse]:
    """Decode a list of topics laid out one after another."""
    payload = bytes(payload)
    topics = []
    position = 0
    while position < len(payload):
        topic, read = _read_topic(payload, position)
        topics.append(topic)
        position += read
    return topics


def deserialize_partition(payload: bytes, position: int = 0) -> tuple[PartitionInfo, int]:
    """Decode one partition at position; return it with the number of bytes read."""
    payload = bytes(payload)
    partition = PartitionInfo(
        id=_u32(payload, position),
        created_at=_u64(payload, position + 4),
        segments_count=_u32(payload, position + 12),
        current_offset=_u64(payload, position + 16),
        size_bytes=_u64(payload, position + 24),
        messages_count=_u64(payload, position + 32),
    )
    return partition, 40


def deserialize_topic(payload: bytes) -> TopicResponse:
    """Decode one topic followed by its partitions."""
    payload = bytes(payload)
    topic, position = _read_topic(payload, 0)
    while position < len(payload):
        partition, read = deserialize_partition(payload, position)
        topic.partitions.append(partition)
        position += read
    return topic


def _message_state(value: int) -> MessageState:
    try:
        return _STATES[value]
    except KeyError:
        raise ValueError("Invalid message state") from None


def deserialize_headers(payload: bytes) -> dict[HeaderKey, HeaderValue]:
    """Decode message headers: key length, key, kind, value length, value."""
    payload = bytes(payload)
    headers: dict[HeaderKey, HeaderValue] = {}
    length = len(payload)
    position = 0
    while position < length:
        if length <= position + 4:
            raise ValueError("Invalid header key length")
        key_length = _u32(payload, position)
        position += 4
        if key_length == 0 or key_length > _MAX_HEADER_LENGTH:
            raise ValueError("Key has incorrect size, must be between 1 and 255")
        if length < position + key_length:
            raise ValueError("Invalid header key")
        key = payload[position:position + key_length].decode("utf-8", errors="replace")
        position += key_length

        if position >= length:
            raise ValueError("Invalid header kind position")
        raw_kind = payload[position]
        try:
            kind = HeaderKind(raw_kind)
        except ValueError:
            raise ValueError(f"Invalid header kind: {raw_kind}") from None
        position += 1

        if length <= position + 4:
            raise ValueError("Invalid header value length")
        value_length = _u32(payload, position)
        position += 4
        if value_length == 0 or value_length > _MAX_HEADER_LENGTH:
            raise ValueError("Value has incorrect size, must be between 1 and 255")
        if length < position + value_length:
            raise ValueError("Invalid header value")
        value = payload[position:position + value_length]
        position += value_length

        headers[HeaderKey(key)] = HeaderValue(kind, value)
    return headers


def deserialize_fetch_messages(
    payload: bytes,
    compression: MessageCompression | str = MessageCompression.NONE,
) -> FetchMessagesResponse:
    """Decode polled messages, decompressing S2 payloads of at least 32 bytes."""
    payload = bytes(payload)
    if not payload:
        return FetchMessagesResponse()
    compression = MessageCompression(compression)
    length = len(payload)
    response = FetchMessagesResponse(
        partition_id=_u32(payload, 0),
        current_offset=_u64(payload, 4),
        message_count=_u32(payload, 12),
    )
    position = 16
    while position + _MESSAGE_PROPERTIES <= length:
        offset = _u64(payload, position)
        state = _message_state(payload[position + 8])
        timestamp = _u64(payload, position + 9)
        message_id = uuid.UUID(bytes=payload[position + 17:position + 33])
        checksum = _u32(payload, position + 33)
        headers_length = _u32(payload, position + 37)
        headers_end = position + 41 + headers_length
        if headers_end + 4 > length:
            break
        headers = deserialize_headers(payload[position + 41:headers_end])
        message_length = _u32(payload, headers_end)
        start = headers_end + 4
        end = start + message_length
        if end > length:
            break
        body = payload[start:end]
        if compression.is_s2 and message_length >= _MIN_COMPRESSED:
            body = s2.decode(body)
        response.messages.append(
            MessageResponse(
                offset=offset,
                timestamp=timestamp,
                checksum=checksum,
                id=message_id,
                payload=body,
                state=state,
                headers=headers,
            )
        )
        position = end
    return response


def _read_consumer_group(payload: bytes, position: int) -> tuple[ConsumerGroupResponse, int]:
    name_length = _byte(payload, position + 12)
    group = ConsumerGroupResponse(
        id=_u32(payload, position),
        members_count=_u32(payload, position + 4),
        partitions_count=_u32(payload, position + 8),
        name=_text(payload, position + 13, name_length),
    )
    return group, 13 + name_length


def deserialize_consumer_groups(payload: bytes) -> list[ConsumerGroupResponse]:
    """Decode a list of consumer groups laid out one after another."""
    payload = bytes(payload)
    groups = []
    position = 0
    while position < len(payload):
        group, read = _read_consumer_group(payload, position)
        groups.append(group)
        position += read
    return groups


def deserialize_consumer_group(payload: bytes) -> ConsumerGroupResponse:
    """Decode a single consumer group."""
    group, _ = _read_consumer_group(bytes(payload), 0)
    return group