"""S2 block compression, a Snappy-compatible format with repeat-offset codes."""

from __future__ import annotations

_TAG_LITERAL = 0
_TAG_COPY1 = 1
_TAG_COPY2 = 2
_TAG_COPY4 = 3

_MIN_MATCH = 4
_MAX_BLOCK = 0xFFFFFFFF
_MAX_REPEAT = 0xFFFFFF + (1 << 16) + 4


class S2Error(ValueError):
    """Raised when an S2 block is corrupt or cannot be produced."""


def _put_uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _read_uvarint(data: bytes) -> tuple[int, int]:
    result = 0
    shift = 0
    for index, byte in enumerate(data[:10]):
        result |= (byte & 0x7F) << shift
        if byte < 0x80:
            return result, index + 1
        shift += 7
    raise S2Error("invalid length header")


def _emit_literal(out: bytearray, chunk: bytes) -> None:
    n = len(chunk) - 1
    if n < 60:
        out.append(n << 2 | _TAG_LITERAL)
    else:
        width = (n.bit_length() + 7) // 8
        out.append((59 + width) << 2 | _TAG_LITERAL)
        out += n.to_bytes(width, "little")
    out += chunk


def _repeat_code(length: int) -> bytes:
    rest = length - 4
    if rest <= 4:
        return bytes([rest << 2 | _TAG_COPY1, 0])
    if rest < (1 << 8) + 4:
        return bytes([5 << 2 | _TAG_COPY1, 0, rest - 4])
    if rest < (1 << 16) + (1 << 8):
        return bytes([6 << 2 | _TAG_COPY1, 0]) + (rest - (1 << 8)).to_bytes(2, "little")
    return bytes([7 << 2 | _TAG_COPY1, 0]) + (rest - (1 << 16)).to_bytes(3, "little")


def _emit_repeat(out: bytearray, length: int) -> None:
    while length:
        chunk = min(length, _MAX_REPEAT)
        if 0 < length - chunk < _MIN_MATCH:
            chunk -= _MIN_MATCH
        out += _repeat_code(chunk)
        length -= chunk


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length:
        if offset < 2048 and 4 <= length <= 11:
            out += bytes([(offset >> 8) << 5 | (length - 4) << 2 | _TAG_COPY1, offset & 0xFF])
            return
        chunk = min(length, 64)
        if 0 < length - chunk < _MIN_MATCH:
            chunk = length - _MIN_MATCH
        if offset < 65536:
            out += bytes([(chunk - 1) << 2 | _TAG_COPY2]) + offset.to_bytes(2, "little")
        else:
            out += bytes([(chunk - 1) << 2 | _TAG_COPY4]) + offset.to_bytes(4, "little")
        length -= chunk


def _match_length(data: bytes, earlier: int, here: int) -> int:
    limit = len(data)
    n = 0
    while here + n + 32 <= limit and data[earlier + n:earlier + n + 32] == data[here + n:here + n + 32]:
        n += 32
    while here + n < limit and data[earlier + n] == data[here + n]:
        n += 1
    return n


def _remember(table: dict[bytes, list[int]], key: bytes, position: int, depth: int) -> None:
    positions = table.setdefault(key, [])
    positions.append(position)
    if len(positions) > depth:
        del positions[0]


def _compress(data: bytes, depth: int, index_inside_matches: bool) -> bytes:
    data = bytes(data)
    n = len(data)
    if n > _MAX_BLOCK:
        raise S2Error("input is too large for one block")
    out = bytearray(_put_uvarint(n))
    table: dict[bytes, list[int]] = {}
    pos = literal_start = 0
    last_offset = 0

    while pos + _MIN_MATCH <= n:
        key = data[pos:pos + _MIN_MATCH]
        best_len = 0
        best_off = 0
        if last_offset and data[pos - last_offset:pos - last_offset + _MIN_MATCH] == key:
            best_len = _match_length(data, pos - last_offset, pos)
            best_off = last_offset
        for candidate in reversed(table.get(key, ())):
            offset = pos - candidate
            if offset == best_off:
                continue
            length = _match_length(data, candidate, pos)
            if length > best_len:
                best_len, best_off = length, offset
        _remember(table, key, pos, depth)

        if best_len < _MIN_MATCH:
            pos += 1
            continue

        if literal_start < pos:
            _emit_literal(out, data[literal_start:pos])
        if best_off == last_offset:
            _emit_repeat(out, best_len)
        else:
            _emit_copy(out, best_off, best_len)
        last_offset = best_off

        end = pos + best_len
        inside = range(pos + 1, end) if index_inside_matches else (end - 1,)
        for p in inside:
            if p + _MIN_MATCH <= n:
                _remember(table, data[p:p + _MIN_MATCH], p, depth)
        pos = literal_start = end

    if literal_start < n:
        _emit_literal(out, data[literal_start:])
    return bytes(out)


def encode(data: bytes) -> bytes:
    """Compress data into one S2 block, favouring speed."""
    return _compress(data, depth=1, index_inside_matches=False)


def encode_better(data: bytes) -> bytes:
    """Compress data into one S2 block with a deeper match search."""
    return _compress(data, depth=8, index_inside_matches=True)


def encode_best(data: bytes) -> bytes:
    """Compress data into one S2 block with the deepest match search."""
    return _compress(data, depth=64, index_inside_matches=True)


def _need(data: bytes, end: int) -> None:
    if end > len(data):
        raise S2Error("corrupt input: truncated block")


def decode(data: bytes) -> bytes:
    """Decompress one S2 (or Snappy) block."""
    data = bytes(data)
    expected, pos = _read_uvarint(data)
    if expected > _MAX_BLOCK:
        raise S2Error("corrupt input: decoded length too large")
    out = bytearray()
    offset = 0
    n = len(data)

    while pos < n:
        tag = data[pos]
        kind = tag & 3
        if kind == _TAG_LITERAL:
            field = tag >> 2
            if field < 60:
                length = field + 1
                pos += 1
            else:
                width = field - 59
                _need(data, pos + 1 + width)
                length = int.from_bytes(data[pos + 1:pos + 1 + width], "little") + 1
                pos += 1 + width
            _need(data, pos + length)
            if len(out) + length > expected:
                raise S2Error("corrupt input: output overrun")
            out += data[pos:pos + length]
            pos += length
            continue

        if kind == _TAG_COPY1:
            _need(data, pos + 2)
            field = (tag >> 2) & 7
            candidate = (tag & 0xE0) << 3 | data[pos + 1]
            pos += 2
            if candidate == 0:
                if field == 5:
                    _need(data, pos + 1)
                    length = data[pos] + 4
                    pos += 1
                elif field == 6:
                    _need(data, pos + 2)
                    length = int.from_bytes(data[pos:pos + 2], "little") + (1 << 8)
                    pos += 2
                elif field == 7:
                    _need(data, pos + 3)
                    length = int.from_bytes(data[pos:pos + 3], "little") + (1 << 16)
                    pos += 3
                else:
                    length = field
            else:
                offset = candidate
                length = field
            length += 4
        elif kind == _TAG_COPY2:
            _need(data, pos + 3)
            length = (tag >> 2) + 1
            offset = int.from_bytes(data[pos + 1:pos + 3], "little")
            pos += 3
        else:
            _need(data, pos + 5)
            length = (tag >> 2) + 1
            offset = int.from_bytes(data[pos + 1:pos + 5], "little")
            pos += 5

        if offset <= 0 or offset > len(out) or len(out) + length > expected:
            raise S2Error("corrupt input: invalid copy")
        start = len(out) - offset
        if offset >= length:
            out += out[start:start + length]
        else:
            pattern = bytes(out[start:])
            out += (pattern * (length // offset + 1))[:length]

    if len(out) != expected:
        raise S2Error("corrupt input: decoded length mismatch")
    return bytes(out)