"""User accounts, their status and their permissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from iggywire.identifier import Identifier


class UserStatus(IntEnum):
    """Whether a user may log in; the value is the byte used on the wire."""

    ACTIVE = 1
    INACTIVE = 2


@dataclass
class GlobalPermissions:
    """Server-wide permissions of a user."""

    manage_servers: bool = False
    read_servers: bool = False
    manage_users: bool = False
    read_users: bool = False
    manage_streams: bool = False
    read_streams: bool = False
    manage_topics: bool = False
    read_topics: bool = False
    poll_messages: bool = False
    send_messages: bool = False


@dataclass
class TopicPermissions:
    """Permissions of a user on one topic."""

    manage_topic: bool = False
    read_topic: bool = False
    poll_messages: bool = False
    send_messages: bool = False


@dataclass
class StreamPermissions:
    """Permissions of a user on one stream, with optional per-topic overrides."""

    manage_stream: bool = False
    read_stream: bool = False
    manage_topics: bool = False
    read_topics: bool = False
    poll_messages: bool = False
    send_messages: bool = False
    topics: dict[int, TopicPermissions] | None = None


@dataclass
class Permissions:
    """Global permissions plus optional per-stream permissions keyed by stream id."""

    global_permissions: GlobalPermissions = field(default_factory=GlobalPermissions)
    streams: dict[int, StreamPermissions] | None = None


@dataclass
class CreateUserRequest:
    username: str
    password: str
    status: UserStatus = UserStatus.ACTIVE
    permissions: Permissions | None = None


@dataclass
class UpdateUserRequest:
    """Changes to a user; an empty username or a missing status is left alone."""

    user_id: Identifier
    username: str = ""
    status: UserStatus | None = None


@dataclass
class ChangePasswordRequest:
    user_id: Identifier
    current_password: str
    new_password: str


@dataclass
class UpdateUserPermissionsRequest:
    user_id: Identifier
    permissions: Permissions | None = None


@dataclass
class UserResponse:
    id: int
    created_at: int
    status: UserStatus
    username: str
    permissions: Permissions | None = None