"""Raw values stored in the database.

Values are msgpack documents. Strings come back as ``str``, binary payloads as
``bytes``, integers as ``int``, arrays as ``list`` and maps as :class:`RawMap`,
which keeps the pairs in stored order, duplicates included.
"""

from typing import Any, Iterator

import msgpack


class RawMap:
    """Map variant of a raw value: an ordered sequence of (key, value) pairs."""

    __slots__ = ('_pairs',)

    def __init__(self, pairs=()):
        self._pairs: list[tuple[Any, Any]] = list(pairs)

    def items(self) -> Iterator[tuple[Any, Any]]:
        return iter(self._pairs)

    def keys(self) -> Iterator[Any]:
        return (key for key, _ in self._pairs)

    def get(self, key, default=None):
        """Value of the last pair with the given key."""
        for k, v in reversed(self._pairs):
            if k == key:
                return v
        return default

    def __contains__(self, key) -> bool:
        return any(k == key for k, _ in self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RawMap):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"RawMap({self._pairs!r})"


def unpack_value(data: bytes) -> Any:
    """Decode one msgpack document into a raw value."""
    return msgpack.unpackb(data, raw=False, object_pairs_hook=RawMap, strict_map_key=False)


def describe_value(value: Any) -> str:
    """Short human-readable rendering of a raw value for inspection output."""
    if isinstance(value, RawMap):
        return '{' + ', '.join(f'{describe_value(k)}: {describe_value(v)}' for k, v in value.items()) + '}'
    if isinstance(value, list):
        return '[' + ', '.join(describe_value(v) for v in value) + ']'
    if isinstance(value, bytes):
        return f"b'{value.hex().upper()}'"
    if isinstance(value, str):
        return repr(value)
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)
