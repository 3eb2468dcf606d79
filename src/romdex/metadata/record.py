"""Typed metadata describing one title in the database."""

from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any, NamedTuple


class FieldKind(StrEnum):
    TEXT = 'text'
    UINT = 'uint'
    FLAG = 'flag'
    DIGEST = 'digest'


class FieldSpec(NamedTuple):
    """Binding of a database map key to a MetadataRecord attribute."""
    key: str
    attribute: str
    kind: FieldKind


FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec('name', 'name', FieldKind.TEXT),
    FieldSpec('description', 'description', FieldKind.TEXT),
    FieldSpec('publisher', 'publisher', FieldKind.TEXT),
    FieldSpec('developer', 'developer', FieldKind.TEXT),
    FieldSpec('origin', 'origin', FieldKind.TEXT),
    FieldSpec('franchise', 'franchise', FieldKind.TEXT),
    FieldSpec('bbfc_rating', 'bbfc_rating', FieldKind.TEXT),
    FieldSpec('elspa_rating', 'elspa_rating', FieldKind.TEXT),
    FieldSpec('esrb_rating', 'esrb_rating', FieldKind.TEXT),
    FieldSpec('pegi_rating', 'pegi_rating', FieldKind.TEXT),
    FieldSpec('cero_rating', 'cero_rating', FieldKind.TEXT),
    FieldSpec('enhancement_hw', 'enhancement_hw', FieldKind.TEXT),
    FieldSpec('edge_review', 'edge_magazine_review', FieldKind.TEXT),
    FieldSpec('edge_rating', 'edge_magazine_rating', FieldKind.UINT),
    FieldSpec('edge_issue', 'edge_magazine_issue', FieldKind.UINT),
    FieldSpec('famitsu_rating', 'famitsu_magazine_rating', FieldKind.UINT),
    FieldSpec('users', 'max_users', FieldKind.UINT),
    FieldSpec('releasemonth', 'release_month', FieldKind.UINT),
    FieldSpec('releaseyear', 'release_year', FieldKind.UINT),
    FieldSpec('rumble', 'rumble_supported', FieldKind.FLAG),
    FieldSpec('analog', 'analog_supported', FieldKind.FLAG),
    FieldSpec('crc', 'crc32', FieldKind.DIGEST),
    FieldSpec('sha1', 'sha1', FieldKind.DIGEST),
    FieldSpec('md5', 'md5', FieldKind.DIGEST),
)

FIELDS_BY_KEY: dict[str, FieldSpec] = {spec.key: spec for spec in FIELD_SPECS}

# Legacy "absent" values; text and digests have none beyond None
SENTINELS: dict[FieldKind, Any] = {
    FieldKind.TEXT: None,
    FieldKind.UINT: 0,
    FieldKind.FLAG: -1,
    FieldKind.DIGEST: None,
}


@dataclass
class MetadataRecord:
    """One title from the metadata database.

    Every attribute is optional and None means the key was never present in
    the source record, which keeps "absent" apart from zero, False and ''.

    Attributes:
        name .. edge_magazine_review: free text
        edge_magazine_rating, edge_magazine_issue, famitsu_magazine_rating:
            magazine review scores and issue number
        max_users: maximum number of simultaneous players
        release_month: 1-12
        release_year: four-digit year
        rumble_supported, analog_supported: controller feature flags
        crc32, sha1, md5: content digests as uppercase hexadecimal
    """
    name: str | None = None
    description: str | None = None
    publisher: str | None = None
    developer: str | None = None
    origin: str | None = None
    franchise: str | None = None
    bbfc_rating: str | None = None
    elspa_rating: str | None = None
    esrb_rating: str | None = None
    pegi_rating: str | None = None
    cero_rating: str | None = None
    enhancement_hw: str | None = None
    edge_magazine_review: str | None = None
    edge_magazine_rating: int | None = None
    edge_magazine_issue: int | None = None
    famitsu_magazine_rating: int | None = None
    max_users: int | None = None
    release_month: int | None = None
    release_year: int | None = None
    rumble_supported: bool | None = None
    analog_supported: bool | None = None
    crc32: str | None = None
    sha1: str | None = None
    md5: str | None = None

    def clear(self):
        """Drop every attribute back to absent."""
        for f in fields(self):
            setattr(self, f.name, None)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self, *, sentinels: bool = False) -> dict[str, Any]:
        """Attributes as a dict.

        With sentinels=True absent numbers become 0 and feature flags are
        reported as -1 (absent), 0 (false) or 1 (true).
        """
        result = {}
        for spec in FIELD_SPECS:
            value = getattr(self, spec.attribute)
            if sentinels:
                if value is None:
                    value = SENTINELS[spec.kind]
                elif spec.kind is FieldKind.FLAG:
                    value = 1 if value else 0
            result[spec.attribute] = value
        return result
