"""Key encoding for the embedded database.

Record identifiers are stored as order-preserving variable-length integers so
that a LevelDB iterator yields records in insertion order. The first byte of an
encoding starts with one leading one bit per extra byte, so shorter encodings
always sort before longer ones.
"""

import mmh3

MAX_VARINT = (1 << 63) - 1


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer below 2^63.

    Layout:
    - 0 to 2^7-1: 1 byte - 0xxxxxxx
    - 2^7 to 2^14-1: 2 bytes - 10xxxxxx xxxxxxxx
    - 2^14 to 2^21-1: 3 bytes - 110xxxxx xxxxxxxx xxxxxxxx
    - ... up to 8 bytes for 2^56-1, then 0xFF followed by 8 bytes

    Raises:
        ValueError: value is negative or too large
    """
    if value < 0:
        raise ValueError(f"Cannot encode negative value: {value}")
    if value > MAX_VARINT:
        raise ValueError(f"Value {value} exceeds maximum (2^63-1)")

    length = 1
    while length < 9 and value >= (1 << (7 * length)):
        length += 1

    if length == 9:
        return b'\xff' + value.to_bytes(8, 'big')

    prefix = (0xFF << (9 - length)) & 0xFF
    payload = value.to_bytes(length, 'big')
    return bytes([prefix | payload[0]]) + payload[1:]


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a varint at offset.

    Args:
        data: Buffer holding the encoded value
        offset: Position of the first byte

    Returns:
        Tuple of (value, bytes_consumed)

    Raises:
        ValueError: data is truncated
    """
    if offset >= len(data):
        raise ValueError("Offset exceeds data length")

    first = data[offset]
    length = 1
    while length < 9 and first & (0x80 >> (length - 1)):
        length += 1

    if offset + length > len(data):
        raise ValueError(f"Insufficient data: need {length} bytes, have {len(data) - offset}")

    if length == 9:
        return int.from_bytes(data[offset + 1:offset + 9], 'big'), length

    high_bits = first & (0xFF >> length)
    value = int.from_bytes(bytes([high_bits]) + data[offset + 1:offset + length], 'big')
    return value, length


def index_key_hash(key: str | bytes) -> bytes:
    """128-bit Murmur3 hash of an index key, as 16 big-endian bytes."""
    if isinstance(key, str):
        key = key.encode('utf-8')
    return mmh3.hash128(key, signed=False).to_bytes(16, 'big')


def index_prefix(index_name: str, key: str | bytes) -> bytes:
    """Prefix under which all entries of one index key live."""
    return index_name.encode('utf-8') + b'\0' + index_key_hash(key)
