"""Binary encoding of identifiers and of user, offset, group and token requests."""

from __future__ import annotations

import struct

from iggywire.identifier import Identifier, IdKind
from iggywire.models import (
    CreateAccessTokenRequest,
    CreateConsumerGroupRequest,
    DeleteAccessTokenRequest,
    GetOffsetRequest,
    LogInAccessTokenRequest,
    StoreOffsetRequest,
)
from iggywire.partitioning import CreatePartitionsRequest, DeletePartitionsRequest
from iggywire.users import (
    ChangePasswordRequest,
    CreateUserRequest,
    GlobalPermissions,
    Permissions,
    StreamPermissions,
    TopicPermissions,
    UpdateUserPermissionsRequest,
    UpdateUserRequest,
    UserStatus,
)

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_MAX_SHORT = 255


def _u32(value: int) -> bytes:
    return _U32.pack(value & 0xFFFFFFFF)


def _u64(value: int) -> bytes:
    return _U64.pack(value & 0xFFFFFFFFFFFFFFFF)


def _short(data: bytes | str, what: str) -> bytes:
    """Prefix data with its length as a single byte."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    if len(raw) > _MAX_SHORT:
        raise ValueError(f"{what} is longer than {_MAX_SHORT} bytes")
    return bytes([len(raw)]) + raw


def _flags(*values: bool) -> bytes:
    return bytes(1 if value else 0 for value in values)


def serialize_identifier(identifier: Identifier) -> bytes:
    """Encode an identifier as kind, length and value."""
    if identifier.kind == IdKind.STRING:
        body = str(identifier.value).encode("utf-8")
        if len(body) > _MAX_SHORT:
            raise ValueError("string identifier is longer than 255 bytes")
    elif identifier.kind == IdKind.NUMERIC:
        body = _u32(int(identifier.value))
    else:
        raise ValueError(f"unknown identifier kind: {identifier.kind!r}")
    return bytes([int(identifier.kind), len(body)]) + body


def serialize_identifiers(*identifiers: Identifier) -> bytes:
    """Encode several identifiers one after another."""
    return b"".join(serialize_identifier(identifier) for identifier in identifiers)


def serialize_create_group(request: CreateConsumerGroupRequest) -> bytes:
    return (
        serialize_identifiers(request.stream_id, request.topic_id)
        + _u32(request.consumer_group_id)
        + _short(request.name, "group name")
    )


def serialize_store_offset(request: StoreOffsetRequest) -> bytes:
    return (
        bytes([int(request.consumer.kind)])
        + serialize_identifiers(request.consumer.id, request.stream_id, request.topic_id)
        + _u32(request.partition_id)
        + _u64(request.offset)
    )


def serialize_get_offset(request: GetOffsetRequest) -> bytes:
    return (
        bytes([int(request.consumer.kind)])
        + serialize_identifiers(request.consumer.id, request.stream_id, request.topic_id)
        + _u32(request.partition_id)
    )


def serialize_create_partitions(request: CreatePartitionsRequest) -> bytes:
    return serialize_identifiers(request.stream_id, request.topic_id) + _u32(request.partitions_count)


def serialize_delete_partitions(request: DeletePartitionsRequest) -> bytes:
    return serialize_identifiers(request.stream_id, request.topic_id) + _u32(request.partitions_count)


def _global_bytes(perms: GlobalPermissions) -> bytes:
    return _flags(
        perms.manage_servers,
        perms.read_servers,
        perms.manage_users,
        perms.read_users,
        perms.manage_streams,
        perms.read_streams,
        perms.manage_topics,
        perms.read_topics,
        perms.poll_messages,
        perms.send_messages,
    )


def _topic_bytes(topic_id: int, topic: TopicPermissions) -> bytes:
    return _u32(topic_id) + _flags(
        topic.manage_topic, topic.read_topic, topic.poll_messages, topic.send_messages
    )


def _stream_bytes(stream_id: int, stream: StreamPermissions) -> bytes:
    out = bytearray(_u32(stream_id))
    out += _flags(
        stream.manage_stream,
        stream.read_stream,
        stream.manage_topics,
        stream.read_topics,
        stream.poll_messages,
        stream.send_messages,
    )
    if stream.topics is None:
        out.append(0)
        return bytes(out)
    out.append(1)
    last = len(stream.topics) - 1
    for index, (topic_id, topic) in enumerate(stream.topics.items()):
        out += _topic_bytes(topic_id, topic)
        out.append(1 if index < last else 0)
    return bytes(out)


def permissions_to_bytes(permissions: Permissions) -> bytes:
    """Encode permissions; entries are followed by a byte that is 1 while more follow."""
    out = bytearray(_global_bytes(permissions.global_permissions))
    if permissions.streams is None:
        out.append(0)
        return bytes(out)
    out.append(1)
    last = len(permissions.streams) - 1
    for index, (stream_id, stream) in enumerate(permissions.streams.items()):
        out += _stream_bytes(stream_id, stream)
        out.append(1 if index < last else 0)
    return bytes(out)


def permissions_size(permissions: Permissions) -> int:
    """Number of bytes permissions_to_bytes produces."""
    size = 10 + 1
    for stream in (permissions.streams or {}).values():
        size += 4 + 6 + 1 + 1 + 9 * len(stream.topics or {})
    return size


def _permissions_block(permissions: Permissions | None) -> bytes:
    if permissions is None:
        return b"\x00"
    encoded = permissions_to_bytes(permissions)
    return b"\x01" + _u32(len(encoded)) + encoded


def serialize_create_user(request: CreateUserRequest) -> bytes:
    return (
        _short(request.username, "username")
        + _short(request.password, "password")
        + bytes([UserStatus(request.status).value])
        + _permissions_block(request.permissions)
    )


def serialize_update_user(request: UpdateUserRequest) -> bytes:
    out = bytearray(serialize_identifier(request.user_id))
    if request.username:
        out.append(1)
        out += _short(request.username, "username")
    else:
        out.append(0)
    if request.status is not None:
        out += bytes([1, UserStatus(request.status).value])
    else:
        out.append(0)
    return bytes(out)


def serialize_change_password(request: ChangePasswordRequest) -> bytes:
    return (
        serialize_identifier(request.user_id)
        + _short(request.current_password, "current password")
        + _short(request.new_password, "new password")
    )


def serialize_update_permissions(request: UpdateUserPermissionsRequest) -> bytes:
    return serialize_identifier(request.user_id) + _permissions_block(request.permissions)


def serialize_int(value: int) -> bytes:
    """Encode an integer as four little-endian bytes."""
    return _u32(value)


def serialize_login_with_token(request: LogInAccessTokenRequest) -> bytes:
    return _short(request.token, "token")


def serialize_delete_access_token(request: DeleteAccessTokenRequest) -> bytes:
    return _short(request.name, "token name")


def serialize_create_access_token(request: CreateAccessTokenRequest) -> bytes:
    """Encode the name, then an 8-byte expiry field whose last four bytes hold the value."""
    return _short(request.name, "token name") + b"\x00\x00\x00\x00" + _u32(request.expiry)