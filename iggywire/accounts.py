"""Binary decoding of users, permissions, clients and personal access tokens."""

from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone

from iggywire.codes import Protocol
from iggywire.models import (
    AccessToken,
    AccessTokenResponse,
    ClientResponse,
    ConsumerGroupInfo,
)
from iggywire.users import (
    GlobalPermissions,
    Permissions,
    StreamPermissions,
    TopicPermissions,
    UserResponse,
    UserStatus,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")
_U64 = struct.Struct("<Q")

_USER_HEADER = 14
_TRANSPORTS = {1: Protocol.TCP.value, 2: Protocol.QUIC.value}


class _Cursor:
    """Reads little-endian fields from a payload, moving forward as it goes."""

    def __init__(self, payload: bytes, position: int = 0) -> None:
        self.payload = bytes(payload)
        self.position = position

    @property
    def remaining(self) -> int:
        return len(self.payload) - self.position

    def _unpack(self, fmt: struct.Struct) -> int:
        if self.remaining < fmt.size:
            raise ValueError("payload is truncated")
        value = fmt.unpack_from(self.payload, self.position)[0]
        self.position += fmt.size
        return value

    def u32(self) -> int:
        return self._unpack(_U32)

    def i32(self) -> int:
        return self._unpack(_I32)

    def u64(self) -> int:
        return self._unpack(_U64)

    def byte(self) -> int:
        if self.remaining < 1:
            raise ValueError("payload is truncated")
        value = self.payload[self.position]
        self.position += 1
        return value

    def take(self, length: int) -> bytes:
        if self.remaining < length:
            raise ValueError("payload is truncated")
        chunk = self.payload[self.position:self.position + length]
        self.position += length
        return chunk

    def text(self, length: int) -> str:
        return self.take(length).decode("utf-8", errors="replace")

    def flags(self, count: int) -> list[bool]:
        return [value == 1 for value in self.take(count)]

    def skip(self, length: int) -> None:
        self.position += length


def _read_user(cursor: _Cursor) -> UserResponse:
    if cursor.remaining < _USER_HEADER:
        raise ValueError("not enough data to map UserResponse")
    user_id = cursor.u32()
    created_at = cursor.u64()
    raw_status = cursor.byte()
    try:
        status = UserStatus(raw_status)
    except ValueError:
        raise ValueError(f"invalid user status: {raw_status}") from None
    username_length = cursor.byte()
    if cursor.remaining < username_length:
        raise ValueError("not enough data to map username")
    username = cursor.text(username_length)
    return UserResponse(id=user_id, created_at=created_at, status=status, username=username)


def deserialize_users(payload: bytes) -> list[UserResponse]:
    """Decode a list of users; an empty payload is an error."""
    if not payload:
        raise ValueError("Empty payload")
    cursor = _Cursor(payload)
    users = []
    while cursor.remaining > 0:
        users.append(_read_user(cursor))
    return users


def deserialize_user(payload: bytes) -> UserResponse:
    """Decode one user followed by its optional permissions block."""
    cursor = _Cursor(payload)
    user = _read_user(cursor)
    if cursor.byte() == 1:
        length = cursor.u32()
        user.permissions = deserialize_permissions(cursor.take(length))
    return user


def deserialize_permissions(payload: bytes) -> Permissions:
    """Decode global, per-stream and per-topic permissions."""
    cursor = _Cursor(payload)
    global_permissions = GlobalPermissions(*cursor.flags(10))
    streams: dict[int, StreamPermissions] | None = None
    if cursor.byte() == 1:
        streams = {}
        while True:
            stream_id = cursor.u32()
            stream_flags = cursor.flags(6)
            topics: dict[int, TopicPermissions] | None = None
            if cursor.byte() == 1:
                topics = {}
                while True:
                    topic_id = cursor.u32()
                    topics[topic_id] = TopicPermissions(*cursor.flags(4))
                    if cursor.byte() == 0:
                        break
            streams[stream_id] = StreamPermissions(*stream_flags, topics=topics)
            if cursor.byte() == 0:
                break
    return Permissions(global_permissions=global_permissions, streams=streams)


def _read_client(cursor: _Cursor) -> ClientResponse:
    client_id = cursor.u32()
    user_id = cursor.u32()
    transport = _TRANSPORTS.get(cursor.byte(), "Unknown")
    address = cursor.text(cursor.u32())
    groups_count = cursor.u32()
    return ClientResponse(
        id=client_id,
        address=address,
        user_id=user_id,
        transport=transport,
        consumer_groups_count=groups_count,
    )


def deserialize_clients(payload: bytes) -> list[ClientResponse]:
    """Decode a list of connected clients; an empty payload gives no clients."""
    cursor = _Cursor(payload)
    clients = []
    while cursor.remaining > 0:
        clients.append(_read_client(cursor))
    return clients


def deserialize_client(payload: bytes) -> ClientResponse:
    """Decode one client followed by the consumer groups it belongs to."""
    cursor = _Cursor(payload)
    client = _read_client(cursor)
    client.consumer_groups = [
        ConsumerGroupInfo(
            stream_id=cursor.i32(),
            topic_id=cursor.i32(),
            consumer_group_id=cursor.i32(),
        )
        for _ in range(client.consumer_groups_count)
    ]
    return client


def deserialize_access_token(payload: bytes) -> AccessToken:
    """Decode a freshly created personal access token."""
    cursor = _Cursor(payload)
    return AccessToken(token=cursor.text(cursor.byte()))


def deserialize_access_tokens(payload: bytes) -> list[AccessTokenResponse]:
    """Decode personal access tokens; expiry is a count of nanoseconds since the epoch."""
    if not payload:
        raise ValueError("Empty payload")
    cursor = _Cursor(payload)
    tokens = []
    while cursor.remaining > 0:
        name = cursor.text(cursor.byte())
        expiry = None
        if cursor.remaining >= 8:
            nanoseconds = _U64.unpack_from(cursor.payload, cursor.position)[0]
            expiry = EPOCH + timedelta(microseconds=nanoseconds // 1000)
        cursor.skip(8)
        tokens.append(AccessTokenResponse(name=name, expiry=expiry))
    return tokens