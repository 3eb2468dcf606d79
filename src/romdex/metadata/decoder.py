from typing import Any, Callable

from ..database.values import RawMap
from .record import FIELDS_BY_KEY, FieldKind, MetadataRecord


def bin_to_hex(data: bytes) -> str:
    """Render a binary digest as uppercase hex, two characters per byte.

    An empty payload gives '' rather than None.
    """
    return bytes(data).hex().upper()


_COERCE: dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.TEXT: str,
    FieldKind.UINT: int,
    FieldKind.FLAG: bool,
    FieldKind.DIGEST: bin_to_hex,
}


def decode_record(item: Any) -> MetadataRecord | None:
    """Decode one raw database value into a MetadataRecord.

    Returns None for anything but a map, so callers can skip it. Keys are
    matched exactly against FIELD_SPECS; unknown keys are ignored and a
    repeated key overwrites the earlier value.

    Args:
        item: Value read from a cursor, normally a RawMap
    """
    if not isinstance(item, RawMap):
        return None

    record = MetadataRecord()

    for key, value in item.items():
        spec = FIELDS_BY_KEY.get(key) if isinstance(key, str) else None
        if spec is None:
            continue
        setattr(record, spec.attribute, _COERCE[spec.kind](value))

    return record
