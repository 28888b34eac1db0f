"""Command codes, transport protocols and client configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class CommandCode(IntEnum):
    """Numeric codes identifying each command sent to the server."""

    PING = 1
    GET_STATS = 10
    GET_ME = 20
    GET_CLIENT = 21
    GET_CLIENTS = 22
    GET_USER = 31
    GET_USERS = 32
    CREATE_USER = 33
    DELETE_USER = 34
    UPDATE_USER = 35
    UPDATE_PERMISSIONS = 36
    CHANGE_PASSWORD = 37
    LOGIN_USER = 38
    LOGOUT_USER = 39
    GET_ACCESS_TOKENS = 41
    CREATE_ACCESS_TOKEN = 42
    DELETE_ACCESS_TOKEN = 43
    LOGIN_WITH_ACCESS_TOKEN = 44
    POLL_MESSAGES = 100
    SEND_MESSAGES = 101
    GET_OFFSET = 120
    STORE_OFFSET = 121
    GET_STREAM = 200
    GET_STREAMS = 201
    CREATE_STREAM = 202
    DELETE_STREAM = 203
    UPDATE_STREAM = 204
    GET_TOPIC = 300
    GET_TOPICS = 301
    CREATE_TOPIC = 302
    DELETE_TOPIC = 303
    UPDATE_TOPIC = 304
    CREATE_PARTITIONS = 402
    DELETE_PARTITIONS = 403
    GET_GROUP = 600
    GET_GROUPS = 601
    CREATE_GROUP = 602
    DELETE_GROUP = 603
    JOIN_GROUP = 604
    LEAVE_GROUP = 605


class MessageCompression(str, Enum):
    """Client-side compression applied to message payloads."""

    NONE = "none"
    S2 = "s2"
    S2_BETTER = "s2-better"
    S2_BEST = "s2-best"

    @property
    def is_s2(self) -> bool:
        """True for any of the S2 variants."""
        return self is not MessageCompression.NONE


class Protocol(str, Enum):
    """Transport used to reach the server."""

    HTTP = "Http"
    TCP = "Tcp"
    QUIC = "Quic"


@dataclass
class IggyConfiguration:
    """Connection settings for a client."""

    base_address: str
    protocol: Protocol = Protocol.TCP
    message_compression: MessageCompression = MessageCompression.NONE