import logging
import os
from pathlib import Path
from typing import Iterator

from ..database.store import DatabaseStore, END
from .decoder import decode_record
from .record import MetadataRecord

logger = logging.getLogger(__name__)


class MetadataList:
    """Owned, growable sequence of decoded metadata records.

    count always equals the number of records appended. release() clears
    every record's attributes and drops the records, after which the list is
    empty.
    """

    def __init__(self):
        self._records: list[MetadataRecord] = []

    @property
    def count(self) -> int:
        return len(self._records)

    @property
    def records(self) -> list[MetadataRecord]:
        return self._records

    def append(self, record: MetadataRecord):
        self._records.append(record)

    def release(self):
        for record in self._records:
            record.clear()
        self._records = []

    def find_by_crc32(self, crc32: int | str) -> MetadataRecord | None:
        """First record whose crc digest equals crc32.

        Args:
            crc32: Checksum as an integer or a hex string in either case
        """
        if isinstance(crc32, int):
            crc32 = f'{crc32:08X}'
        else:
            crc32 = crc32.upper()

        for record in self._records:
            if record.crc32 == crc32:
                return record
        return None

    def find_by_fingerprint(self, fingerprint) -> MetadataRecord | None:
        """First record whose stored digests all agree with fingerprint.

        Records carrying none of crc32, sha1 and md5 never match.

        Args:
            fingerprint: Object with crc32 (int), sha1 and md5 (uppercase hex) attributes,
                such as romdex.scan.identifier.Fingerprint

        Returns:
            The matching record, or None
        """
        digests = {
            'crc32': f'{fingerprint.crc32:08X}',
            'sha1': fingerprint.sha1.upper(),
            'md5': fingerprint.md5.upper(),
        }

        for record in self._records:
            present = {attribute: getattr(record, attribute) for attribute in digests if getattr(record, attribute)}
            if present and all(digests[attribute] == value.upper() for attribute, value in present.items()):
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MetadataRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> MetadataRecord:
        return self._records[index]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


def build_metadata_list(database_path: str | os.PathLike, query: str | None = None) -> MetadataList:
    """Decode every record of a database, optionally filtered by a query.

    The database and cursor are owned by this call and closed before it
    returns. Raw values that are not maps are skipped. If anything fails after
    decoding started, the records decoded so far are released and the error
    propagates; a partial list is never returned.

    Args:
        database_path: Database directory
        query: Filter expression; None or blank text decodes every record

    Returns:
        The decoded records, owned by the caller

    Raises:
        DatabaseNotFound: database_path does not exist
        DatabaseError: the database cannot be opened
        QueryError: query does not compile
        MemoryError: the list could not grow
    """
    database = DatabaseStore(Path(database_path))
    cursor = None
    metadata_list = None

    try:
        cursor = database.open_cursor(query)
        metadata_list = MetadataList()
        skipped = 0

        while (item := cursor.read_next()) is not END:
            record = decode_record(item)
            if record is None:
                skipped += 1
                continue
            metadata_list.append(record)

        if skipped:
            logger.info(f"Skipped {skipped} non-map records in {database_path}")
        logger.info(f"Decoded {metadata_list.count} records from {database_path}")
    except BaseException:
        logger.error(f"Failed to build metadata list from {database_path}")
        if metadata_list is not None:
            metadata_list.release()
        raise
    finally:
        if cursor is not None:
            cursor.close()
        database.close()

    return metadata_list
