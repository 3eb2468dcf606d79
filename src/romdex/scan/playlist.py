import logging
import os
from pathlib import Path
from typing import Iterable

from ..metadata.listing import MetadataList
from .session import ScanEntry

logger = logging.getLogger(__name__)

DETECT = 'DETECT'


def playlist_path_of(entry: ScanEntry) -> str:
    """Path written to the playlist; archive members use 'archive#member'."""
    if entry.member is None:
        return str(entry.path)
    return f'{entry.path}#{entry.member}'


def label_of(entry: ScanEntry, metadata: MetadataList | None) -> str:
    """Title name from the database when the CRC32 matches, else the file stem."""
    if metadata is not None:
        record = metadata.find_by_crc32(entry.crc32)
        if record is not None and record.name:
            return record.name

    if entry.member is not None:
        return Path(entry.member).stem
    return entry.path.stem


def write_playlist(entries: Iterable[ScanEntry], playlist_path: str | os.PathLike,
                   metadata: MetadataList | None = None, database_name: str = '') -> int:
    """Write scan results as a playlist of six-line blocks.

    Each block is: content path, label, core path, core name,
    '<CRC32>|crc', database name. Core path and name are left as DETECT for
    the frontend to resolve.

    Args:
        entries: Scan results in the order they should appear
        playlist_path: File to create or overwrite
        metadata: Records used to label matched entries; None labels every entry by file stem
        database_name: Written as the last line of every block

    Returns:
        Number of entries written
    """
    written = 0
    with open(playlist_path, 'w', encoding='utf-8') as f:
        for entry in entries:
            f.write(f'{playlist_path_of(entry)}\n')
            f.write(f'{label_of(entry, metadata)}\n')
            f.write(f'{DETECT}\n')
            f.write(f'{DETECT}\n')
            f.write(f'{entry.crc32_hex}|crc\n')
            f.write(f'{database_name}\n')
            written += 1

    logger.info(f"Wrote {written} entries to playlist {playlist_path}")
    return written
