"""Binary decoding of server statistics."""

from __future__ import annotations

import struct

from iggywire.models import Stats

_FIXED = struct.Struct("<IfQQQQQQQQIIIIQII")
_U32 = struct.Struct("<I")


def _read_string(payload: bytes, position: int) -> tuple[str, int]:
    if position + _U32.size > len(payload):
        raise ValueError("payload is truncated")
    length = _U32.unpack_from(payload, position)[0]
    start = position + _U32.size
    end = start + length
    if end > len(payload):
        raise ValueError("payload is truncated")
    return payload[start:end].decode("utf-8", errors="replace"), end


def deserialize_stats(payload: bytes) -> Stats:
    """Decode the fixed counters followed by the host and OS descriptions."""
    payload = bytes(payload)
    if len(payload) < _FIXED.size:
        raise ValueError("payload is truncated")
    (
        process_id,
        cpu_usage,
        memory_usage,
        total_memory,
        available_memory,
        run_time,
        start_time,
        read_bytes,
        written_bytes,
        messages_size_bytes,
        streams_count,
        topics_count,
        partitions_count,
        segments_count,
        messages_count,
        clients_count,
        consumer_groups_count,
    ) = _FIXED.unpack_from(payload, 0)
    position = _FIXED.size
    hostname, position = _read_string(payload, position)
    os_name, position = _read_string(payload, position)
    os_version, position = _read_string(payload, position)
    kernel_version, _ = _read_string(payload, position)
    return Stats(
        process_id=process_id,
        cpu_usage=cpu_usage,
        memory_usage=memory_usage,
        total_memory=total_memory,
        available_memory=available_memory,
        run_time=run_time,
        start_time=start_time,
        read_bytes=read_bytes,
        written_bytes=written_bytes,
        messages_size_bytes=messages_size_bytes,
        streams_count=streams_count,
        topics_count=topics_count,
        partitions_count=partitions_count,
        segments_count=segments_count,
        messages_count=messages_count,
        clients_count=clients_count,
        consumer_groups_count=consumer_groups_count,
        hostname=hostname,
        os_name=os_name,
        os_version=os_version,
        kernel_version=kernel_version,
    )