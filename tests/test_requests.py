import pytest
from hypothesis import given
from hypothesis import strategies as st

from iggywire.identifier import Consumer, ConsumerKind, new_identifier
from iggywire.models import (
    CreateAccessTokenRequest,
    CreateConsumerGroupRequest,
    DeleteAccessTokenRequest,
    GetOffsetRequest,
    LogInAccessTokenRequest,
    StoreOffsetRequest,
)
from iggywire.partitioning import CreatePartitionsRequest, DeletePartitionsRequest
from iggywire.requests import (
    permissions_size,
    permissions_to_bytes,
    serialize_change_password,
    serialize_create_access_token,
    serialize_create_group,
    serialize_create_partitions,
    serialize_create_user,
    serialize_delete_access_token,
    serialize_delete_partitions,
    serialize_get_offset,
    serialize_identifier,
    serialize_identifiers,
    serialize_int,
    serialize_login_with_token,
    serialize_store_offset,
    serialize_update_permissions,
    serialize_update_user,
)
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

ID1 = b"\x01\x04\x01\x00\x00\x00"
ID2 = b"\x01\x04\x02\x00\x00\x00"


def test_serialize_identifier_string_id():
    assert serialize_identifier(new_identifier("Hello")) == bytes(
        [0x02, 0x05, 0x48, 0x65, 0x6C, 0x6C, 0x6F]
    )


def test_serialize_identifier_numeric_id():
    assert serialize_identifier(new_identifier(123)) == bytes([0x01, 0x04, 0x7B, 0x00, 0x00, 0x00])


def test_serialize_identifier_empty_string_id():
    assert serialize_identifier(new_identifier("")) == bytes([0x02, 0x00])


def test_serialize_identifiers_concatenates():
    assert serialize_identifiers(new_identifier(1), new_identifier(2)) == ID1 + ID2
    assert serialize_identifiers() == b""


def test_serialize_identifier_rejects_long_string():
    with pytest.raises(ValueError):
        serialize_identifier(new_identifier("x" * 256))


def test_serialize_create_group():
    request = CreateConsumerGroupRequest(new_identifier(1), new_identifier(2), 3, "grp")
    assert serialize_create_group(request) == ID1 + ID2 + b"\x03\x00\x00\x00\x03grp"


def test_serialize_store_offset():
    request = StoreOffsetRequest(
        stream_id=new_identifier(1),
        topic_id=new_identifier(2),
        consumer=Consumer(ConsumerKind.SINGLE, new_identifier(7)),
        partition_id=4,
        offset=5,
    )
    expected = (
        b"\x01"
        + b"\x01\x04\x07\x00\x00\x00"
        + ID1
        + ID2
        + b"\x04\x00\x00\x00"
        + b"\x05\x00\x00\x00\x00\x00\x00\x00"
    )
    assert serialize_store_offset(request) == expected


def test_serialize_get_offset():
    request = GetOffsetRequest(
        stream_id=new_identifier(1),
        topic_id=new_identifier(2),
        consumer=Consumer(ConsumerKind.GROUP, new_identifier(7)),
        partition_id=4,
    )
    expected = b"\x02" + b"\x01\x04\x07\x00\x00\x00" + ID1 + ID2 + b"\x04\x00\x00\x00"
    assert serialize_get_offset(request) == expected


def test_serialize_create_and_delete_partitions():
    create = CreatePartitionsRequest(new_identifier(1), new_identifier(2), 10)
    delete = DeletePartitionsRequest(new_identifier(1), new_identifier(2), 10)
    assert serialize_create_partitions(create) == ID1 + ID2 + b"\x0a\x00\x00\x00"
    assert serialize_delete_partitions(delete) == ID1 + ID2 + b"\x0a\x00\x00\x00"


def test_permissions_without_streams():
    perms = Permissions(GlobalPermissions(manage_servers=True, send_messages=True))
    encoded = permissions_to_bytes(perms)
    assert encoded == b"\x01" + b"\x00" * 8 + b"\x01" + b"\x00"
    assert permissions_size(perms) == 11


def test_permissions_with_one_stream_and_topic():
    perms = Permissions(
        GlobalPermissions(manage_servers=True),
        {5: StreamPermissions(read_stream=True, topics={7: TopicPermissions(poll_messages=True)})},
    )
    expected = (
        b"\x01" + b"\x00" * 9
        + b"\x01"
        + b"\x05\x00\x00\x00"
        + b"\x00\x01\x00\x00\x00\x00"
        + b"\x01"
        + b"\x07\x00\x00\x00"
        + b"\x00\x00\x01\x00"
        + b"\x00"
        + b"\x00"
    )
    assert permissions_to_bytes(perms) == expected
    assert permissions_size(perms) == 32


def test_permissions_stream_continuation_byte():
    perms = Permissions(GlobalPermissions(), {1: StreamPermissions(), 2: StreamPermissions()})
    expected = (
        b"\x00" * 10
        + b"\x01"
        + b"\x01\x00\x00\x00" + b"\x00" * 6 + b"\x00" + b"\x01"
        + b"\x02\x00\x00\x00" + b"\x00" * 6 + b"\x00" + b"\x00"
    )
    assert permissions_to_bytes(perms) == expected


_ids = st.integers(min_value=0, max_value=2**32 - 1)
_topics = st.builds(TopicPermissions, *([st.booleans()] * 4))
_streams = st.builds(
    StreamPermissions,
    *([st.booleans()] * 6),
    topics=st.none() | st.dictionaries(_ids, _topics, max_size=3),
)
_permissions = st.builds(
    Permissions,
    st.builds(GlobalPermissions, *([st.booleans()] * 10)),
    st.none() | st.dictionaries(_ids, _streams, min_size=1, max_size=3),
)


@given(_permissions)
def test_permissions_size_matches_encoding(perms):
    encoded = permissions_to_bytes(perms)
    assert len(encoded) == permissions_size(perms)
    assert encoded[10] == (0 if perms.streams is None else 1)
    assert encoded[-1] == 0


def test_serialize_create_user_without_permissions():
    password = "password"
    request = CreateUserRequest(username="user", password=password)
    assert serialize_create_user(request) == b"\x04user\x08password\x01\x00"


def test_serialize_create_user_rejects_long_username():
    password = "password"
    with pytest.raises(ValueError):
        serialize_create_user(CreateUserRequest("u" * 256, password))


def test_serialize_update_user_with_username_and_status():
    request = UpdateUserRequest(new_identifier(1), "bob", UserStatus.INACTIVE)
    assert serialize_update_user(request) == ID1 + b"\x01\x03bob" + b"\x01\x02"


def test_serialize_update_user_status_only():
    request = UpdateUserRequest(new_identifier(1), status=UserStatus.ACTIVE)
    assert serialize_update_user(request) == ID1 + b"\x00" + b"\x01\x01"


def test_serialize_update_user_nothing_to_change():
    assert serialize_update_user(UpdateUserRequest(new_identifier(1))) == ID1 + b"\x00\x00"


def test_serialize_change_password():
    request = ChangePasswordRequest(new_identifier(2), "password", "secret")
    assert serialize_change_password(request) == ID2 + b"\x08password" + b"\x06secret"


def test_serialize_update_permissions_none():
    request = UpdateUserPermissionsRequest(new_identifier(1))
    assert serialize_update_permissions(request) == ID1 + b"\x00"


def test_serialize_update_permissions_present():
    perms = Permissions()
    request = UpdateUserPermissionsRequest(new_identifier(1), perms)
    assert serialize_update_permissions(request) == (
        ID1 + b"\x01\x0b\x00\x00\x00" + permissions_to_bytes(perms)
    )


def test_serialize_int():
    assert serialize_int(1) == b"\x01\x00\x00\x00"
    assert serialize_int(-1) == b"\xff\xff\xff\xff"


def test_serialize_login_with_token():
    assert serialize_login_with_token(LogInAccessTokenRequest("token")) == b"\x05token"


def test_serialize_delete_access_token():
    assert serialize_delete_access_token(DeleteAccessTokenRequest("ci")) == b"\x02ci"


def test_serialize_create_access_token():
    request = CreateAccessTokenRequest("t", 60)
    assert serialize_create_access_token(request) == b"\x01t" + b"\x00\x00\x00\x00" + b"\x3c\x00\x00\x00"


def test_serialize_create_access_token_rejects_long_name():
    with pytest.raises(ValueError):
        serialize_create_access_token(CreateAccessTokenRequest("n" * 300, 1))