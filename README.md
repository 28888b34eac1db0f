# iggywire

Models and binary codecs for the Iggy message streaming wire protocol.
Pure Python, no runtime dependencies.

The package builds the little-endian payloads an Iggy server expects for
commands and decodes the payloads it sends back.

## Installation

```
pip install iggywire
```

## Modules

- `iggywire.codes`: `CommandCode` (the numeric code of each command),
  `MessageCompression` (`NONE`, `S2`, `S2_BETTER`, `S2_BEST`), `Protocol`
  (`HTTP`, `TCP`, `QUIC`) and the `IggyConfiguration` record.
- `iggywire.identifier`: `Identifier`, `new_identifier` (an `int` gives a
  numeric identifier, a `str` a string one; anything else raises
  `TypeError`), `Consumer`, `ConsumerKind`, and `PollingStrategy` with the
  constructors `offset`, `timestamp`, `first`, `last` and `next`.
- `iggywire.headers`: `HeaderKey` (1 to 255 bytes, otherwise `ValueError`),
  `HeaderValue`, `HeaderKind`.
- `iggywire.partitioning`: `Partitioning` with `balanced`, `partition_id`,
  `entity_id_str`, `entity_id_bytes`, `entity_id_int`, `entity_id_ulong` and
  `entity_id_uuid`; `PartitionInfo`, `CreatePartitionsRequest`,
  `DeletePartitionsRequest`.
- `iggywire.models`: request and response records for streams, topics,
  messages (`Message.create` gives a message a random UUID), offsets,
  consumer groups, clients, login, access tokens and server statistics.
- `iggywire.users`: `UserStatus`, the permission records and the user
  request and response records.
- `iggywire.requests`: `serialize_identifier`, `serialize_identifiers`,
  `serialize_create_group`, `serialize_store_offset`, `serialize_get_offset`,
  `serialize_create_partitions`, `serialize_delete_partitions`,
  `serialize_create_user`, `serialize_update_user`,
  `serialize_change_password`, `serialize_update_permissions`,
  `permissions_to_bytes`, `permissions_size`, `serialize_int`,
  `serialize_login_with_token`, `serialize_create_access_token`,
  `serialize_delete_access_token`.
- `iggywire.commands`: `serialize_create_stream`, `serialize_update_stream`,
  `serialize_create_topic`, `serialize_update_topic`,
  `serialize_fetch_messages`, `serialize_log_in`, `serialize_send_messages`
  and `compress_payload`.
- `iggywire.responses`: `deserialize_log_in`, `deserialize_offset`,
  `deserialize_streams`, `deserialize_stream`, `deserialize_topics`,
  `deserialize_topic`, `deserialize_partition`, `deserialize_fetch_messages`,
  `deserialize_headers`, `deserialize_consumer_groups`,
  `deserialize_consumer_group`.
- `iggywire.accounts`: `deserialize_users`, `deserialize_user`,
  `deserialize_permissions`, `deserialize_clients`, `deserialize_client`,
  `deserialize_access_token`, `deserialize_access_tokens`.
- `iggywire.stats`: `deserialize_stats`.
- `iggywire.s2`: S2 block compression: `encode`, `encode_better`,
  `encode_best`, `decode`, and the `S2Error` exception.

## Examples

Encoding a request:

```python
from iggywire.identifier import new_identifier
from iggywire.models import UpdateTopicRequest
from iggywire.commands import serialize_update_topic

request = UpdateTopicRequest(
    stream_id=new_identifier("stream"),
    topic_id=new_identifier(1),
    name="update_topic",
    message_expiry=100,
)
payload = serialize_update_topic(request)
```

Identifiers are written as kind, length and value:

```python
from iggywire.requests import serialize_identifier

serialize_identifier(new_identifier("Hello"))  # b"\x02\x05Hello"
serialize_identifier(new_identifier(123))      # b"\x01\x04{\x00\x00\x00"
```

Decoding a response:

```python
from iggywire.stats import deserialize_stats

stats = deserialize_stats(payload)  # bytes received for a stats command
print(stats.hostname, stats.streams_count)
```

## Message compression

`serialize_send_messages(request, compression)` compresses each payload of
32 bytes or more with the chosen S2 level; shorter payloads, and every
payload under `MessageCompression.NONE`, are sent as they are.
`deserialize_fetch_messages(payload, compression)` decompresses message
bodies of 32 bytes or more when an S2 level is given.

## Errors

Decoders raise `ValueError` when a payload is truncated or holds an invalid
value (an unknown message state, user status or header kind, or a header
key or value of the wrong size). `deserialize_users` and
`deserialize_access_tokens` raise `ValueError` on an empty payload, while
`deserialize_clients` returns an empty list. Strings that must fit a
one-byte length prefix raise `ValueError` when longer than 255 bytes.
`S2Error`, a subclass of `ValueError`, reports a corrupt S2 block.

## What this package does not do

It only encodes and decodes payloads. It opens no connections, frames no
commands for a transport, holds no client session and has no command-line
tool; pair it with a transport of your own.

## Running the tests

```
pip install -e ".[test]"
pytest
```