"""Binary encoding of stream, topic, login and message commands."""

from __future__ import annotations

import struct

from iggywire import s2
from iggywire.codes import MessageCompression
from iggywire.headers import HeaderKey, HeaderValue
from iggywire.models import (
    CreateStreamRequest,
    CreateTopicRequest,
    FetchMessagesRequest,
    LogInRequest,
    SendMessagesRequest,
    UpdateStreamRequest,
    UpdateTopicRequest,
)
from iggywire.requests import serialize_identifier, serialize_identifiers

_MAX_SHORT = 255
_MIN_COMPRESSIBLE = 32


def _u32(value: int) -> bytes:
    return struct.pack("<I", value & 0xFFFFFFFF)


def _u64(value: int) -> bytes:
    return struct.pack("<Q", value & 0xFFFFFFFFFFFFFFFF)


def _byte(value: int) -> bytes:
    return bytes([value & 0xFF])


def _short(text: str | bytes, what: str) -> bytes:
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    if len(raw) > _MAX_SHORT:
        raise ValueError(f"{what} is longer than {_MAX_SHORT} bytes")
    return bytes([len(raw)]) + raw


def _long(text: str) -> bytes:
    raw = text.encode("utf-8")
    return _u32(len(raw)) + raw


def serialize_create_stream(request: CreateStreamRequest) -> bytes:
    return _u32(request.stream_id) + _short(request.name, "stream name")


def serialize_update_stream(request: UpdateStreamRequest) -> bytes:
    return serialize_identifier(request.stream_id) + _short(request.name, "stream name")


def serialize_create_topic(request: CreateTopicRequest) -> bytes:
    return b"".join(
        [
            serialize_identifier(request.stream_id),
            _u32(request.topic_id),
            _u32(request.partitions_count),
            _byte(request.compression_algorithm),
            _u64(request.message_expiry),
            _u64(request.max_topic_size),
            _byte(request.replication_factor),
            _short(request.name, "topic name"),
        ]
    )


def serialize_update_topic(request: UpdateTopicRequest) -> bytes:
    return (
        serialize_identifiers(request.stream_id, request.topic_id)
        + _u32(request.message_expiry)
        + _short(request.name, "topic name")
    )


def serialize_fetch_messages(request: FetchMessagesRequest) -> bytes:
    return b"".join(
        [
            _byte(int(request.consumer.kind)),
            serialize_identifier(request.consumer.id),
            serialize_identifiers(request.stream_id, request.topic_id),
            _u32(request.partition_id),
            _byte(int(request.polling_strategy.kind)),
            _u64(request.polling_strategy.value),
            _u32(request.count),
            b"\x01" if request.auto_commit else b"\x00",
        ]
    )


def serialize_log_in(request: LogInRequest) -> bytes:
    return (
        _short(request.username, "username")
        + _short(request.password, "password")
        + _long(request.version)
        + _long(request.context)
    )


def compress_payload(payload: bytes, compression: MessageCompression | str) -> bytes:
    """Compress a payload with the chosen S2 level; short payloads stay as they are."""
    compression = MessageCompression(compression)
    if compression is MessageCompression.NONE or len(payload) < _MIN_COMPRESSIBLE:
        return bytes(payload)
    encoders = {
        MessageCompression.S2: s2.encode,
        MessageCompression.S2_BETTER: s2.encode_better,
        MessageCompression.S2_BEST: s2.encode_best,
    }
    return encoders[compression](payload)


def _header_bytes(key: HeaderKey, value: HeaderValue) -> bytes:
    name = key.value.encode("utf-8")
    return _u32(len(name)) + name + _byte(int(value.kind)) + _u32(len(value.value)) + bytes(value.value)


def serialize_send_messages(
    request: SendMessagesRequest,
    compression: MessageCompression | str = MessageCompression.NONE,
) -> bytes:
    """Encode a batch of messages, compressing each payload as asked."""
    partitioning = request.partitioning
    if partitioning.length > _MAX_SHORT:
        raise ValueError(f"partitioning value is longer than {_MAX_SHORT} bytes")
    parts = [
        serialize_identifiers(request.stream_id, request.topic_id),
        bytes([int(partitioning.kind), partitioning.length]),
        bytes(partitioning.value),
    ]
    for message in request.messages:
        headers = b"".join(
            _header_bytes(key, value) for key, value in (message.headers or {}).items()
        )
        payload = compress_payload(message.payload, compression)
        parts += [message.id.bytes, _u32(len(headers)), headers, _u32(len(payload)), payload]
    return b"".join(parts)