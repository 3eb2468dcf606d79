"""Content fingerprints for candidate files.

The scanner identifies content by CRC32. The database also stores SHA-1 and
MD5 digests, so those can be produced in the same uppercase hex form the
record decoder emits.
"""

import hashlib
import zlib
from typing import NamedTuple


def fingerprint_of(data: bytes) -> int:
    """CRC32 of data as an unsigned 32-bit integer; 0 for empty input."""
    return zlib.crc32(data) & 0xFFFFFFFF


def format_crc32(crc32: int) -> str:
    """Hex form of a CRC32 as stored in the database, e.g. '0000ABCD'."""
    return f'{crc32:08X}'


class Fingerprint(NamedTuple):
    """All digests of one piece of content, digests as uppercase hex."""
    crc32: int
    sha1: str
    md5: str

    @property
    def crc32_hex(self) -> str:
        return format_crc32(self.crc32)


def identify(data: bytes) -> Fingerprint:
    return Fingerprint(
        fingerprint_of(data),
        hashlib.sha1(data).hexdigest().upper(),
        hashlib.md5(data).hexdigest().upper(),
    )
