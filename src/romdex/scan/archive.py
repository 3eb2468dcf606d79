"""Archive container enumeration.

The scanner never decompresses anything itself: it hands a visitor to
for_each_member(), which calls it once per member with the member's header
information and its decompressed bytes.
"""

import logging
import os
import zipfile
from pathlib import Path
from typing import Callable, NamedTuple

logger = logging.getLogger(__name__)

ARCHIVE_EXTENSIONS = frozenset({'zip'})


class ArchiveMember(NamedTuple):
    name: str
    compressed_size: int
    size: int
    compress_type: int
    # CRC32 recorded in the archive header
    header_crc32: int


MemberVisitor = Callable[[ArchiveMember, bytes], bool]
ArchiveReader = Callable[[str | os.PathLike, MemberVisitor], int]


def is_archive(path: str | os.PathLike) -> bool:
    return Path(path).suffix[1:].lower() in ARCHIVE_EXTENSIONS


def for_each_member(archive_path: str | os.PathLike, visitor: MemberVisitor) -> int:
    """Feed each file member of a zip archive to visitor.

    Directory entries are skipped. Enumeration stops early when visitor
    returns False.

    Args:
        archive_path: Path of the zip archive
        visitor: Called with each member and its decompressed bytes

    Returns:
        Number of members visited

    Raises:
        zipfile.BadZipFile: not a zip archive, or a member fails its CRC check
        OSError: the archive cannot be read
        RuntimeError: a member is encrypted or uses an unsupported compression
        EOFError, zlib.error, lzma.LZMAError: member data is truncated or corrupt
    """
    visited = 0
    with zipfile.ZipFile(archive_path) as archive:
        for info in archive.infolist():
            if info.is_dir():
                continue

            member = ArchiveMember(info.filename, info.compress_size, info.file_size, info.compress_type, info.CRC)
            data = archive.read(info)
            visited += 1
            if not visitor(member, data):
                logger.debug(f"Stopped enumerating {archive_path} at {info.filename}")
                break

    return visited
