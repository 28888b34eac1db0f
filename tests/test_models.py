import uuid

from iggywire.headers import HeaderKey, HeaderKind, HeaderValue
from iggywire.identifier import Consumer, ConsumerKind, PollingStrategy, new_identifier
from iggywire.models import (
    AccessTokenResponse,
    ClientResponse,
    CreateTopicRequest,
    FetchMessagesRequest,
    FetchMessagesResponse,
    LogInRequest,
    Message,
    MessageResponse,
    MessageState,
    SendMessagesRequest,
    Stats,
    StreamResponse,
    TopicResponse,
)
from iggywire.partitioning import Partitioning


def test_message_create_assigns_unique_ids():
    first = Message.create(b"payload")
    second = Message.create(b"payload")
    assert first.id != second.id
    assert first.payload == second.payload == b"payload"
    assert first.headers is None


def test_message_create_keeps_headers():
    headers = {HeaderKey("k"): HeaderValue(HeaderKind.RAW, b"v")}
    message = Message.create(b"data", headers)
    assert message.headers == headers
    assert message.id.version == 4


def test_message_state_order():
    assert MessageState(0) is MessageState.AVAILABLE
    assert MessageState(1) is MessageState.UNAVAILABLE
    assert MessageState(2) is MessageState.POISONED
    assert MessageState(3) is MessageState.MARKED_FOR_DELETION
    assert MessageState(0) < MessageState(3)


def test_message_response_defaults():
    response = MessageResponse(1, 2, 3, uuid.uuid4(), b"p")
    assert response.state is MessageState.AVAILABLE
    assert response.headers == {}


def test_fetch_response_defaults_are_independent():
    a = FetchMessagesResponse()
    b = FetchMessagesResponse()
    a.messages.append(MessageResponse(0, 0, 0, uuid.uuid4(), b""))
    assert b.messages == []
    assert a.partition_id == 0


def test_fetch_request_default_auto_commit():
    request = FetchMessagesRequest(
        stream_id=new_identifier(1),
        topic_id=new_identifier(2),
        consumer=Consumer(ConsumerKind.SINGLE, new_identifier(3)),
        partition_id=1,
        polling_strategy=PollingStrategy.first(),
        count=10,
    )
    assert request.auto_commit is False
    assert request.polling_strategy.value == 0


def test_send_request_holds_messages():
    messages = [Message.create(b"a"), Message.create(b"b")]
    request = SendMessagesRequest(
        new_identifier("s"), new_identifier("t"), Partitioning.balanced(), messages
    )
    assert [m.payload for m in request.messages] == [b"a", b"b"]


def test_login_request_defaults():
    password = "password"
    request = LogInRequest(username="iggy", password=password)
    assert request.version == ""
    assert request.context == ""


def test_create_topic_defaults():
    request = CreateTopicRequest(new_identifier(1), 2, 3, "topic")
    assert request.compression_algorithm == 0
    assert request.message_expiry == 0
    assert request.max_topic_size == 0
    assert request.replication_factor == 0


def test_stream_and_topic_lists_are_independent():
    first = StreamResponse()
    second = StreamResponse()
    first.topics.append(TopicResponse(id=1))
    assert second.topics == []
    assert TopicResponse().partitions == []


def test_stats_defaults():
    stats = Stats()
    assert stats.hostname == ""
    assert stats.cpu_usage == 0.0


def test_client_and_token_defaults():
    client = ClientResponse(id=1, address="127.0.0.1:8090", user_id=1, transport="Tcp")
    assert client.consumer_groups == []
    assert AccessTokenResponse("name").expiry is None