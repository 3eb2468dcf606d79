import logging
from pathlib import Path
from typing import Any, Iterator

import plyvel

from .keys import decode_varint, index_prefix
from .query import Query, compile_query
from .values import RawMap, unpack_value, describe_value

logger = logging.getLogger(__name__)


class DatabaseNotFound(FileNotFoundError):
    pass


class DatabaseError(RuntimeError):
    """The database exists but cannot be opened or read."""


class _End:
    def __repr__(self):
        return 'END'

    def __bool__(self):
        return False


END = _End()
"""Returned by Cursor.read_next() once the cursor is exhausted."""


class Cursor:
    """Pull-based iterator over the records of a database.

    Records are yielded in key order. When a query is bound, only records it
    matches are yielded. Once END has been returned the cursor stays exhausted.
    """

    def __init__(self, iterator, query: Query | None = None):
        self._iterator = iterator
        self._query = query
        self._exhausted = False

    @property
    def query(self) -> Query | None:
        return self._query

    def read_next(self) -> Any:
        """Return the next raw value, or END."""
        if self._exhausted:
            return END

        for key, data in self._iterator:
            value = unpack_value(data)
            if self._query is not None and not self._query.matches(value):
                continue
            return value

        self.close()
        return END

    def close(self):
        if self._exhausted:
            return
        self._exhausted = True
        self._iterator.close()
        self._iterator = None

    def __iter__(self) -> Iterator[Any]:
        while (value := self.read_next()) is not END:
            yield value

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class DatabaseStore:
    """Read access to a metadata database stored in LevelDB.

    Layout:
    - 'p' prefix: manifest properties, utf-8 name -> utf-8 value
    - 'r' prefix: records, varint record id -> msgpack value
    - 'i' prefix: secondary indexes,
      <index name>\\0<16-byte murmur3 of key><varint seq> -> record key

    The store never writes; databases are produced by external tooling.
    """
    MANIFEST_PREFIX = b'p'
    RECORD_PREFIX = b'r'
    INDEX_PREFIX = b'i'

    MANIFEST_NAME = 'name'

    def __init__(self, database_path: str | Path):
        """Open the database directory.

        Raises:
            DatabaseNotFound: the directory does not exist
            NotADirectoryError: the path is not a directory
            DatabaseError: LevelDB refused to open it (corrupt, locked, not a database)
        """
        database_path = Path(database_path)

        if not database_path.exists():
            raise DatabaseNotFound(f"Database {database_path} does not exist")

        if not database_path.is_dir():
            raise NotADirectoryError(f"Database {database_path} is not a directory")

        try:
            database = plyvel.DB(str(database_path), create_if_missing=False)
        except (plyvel.Error, OSError) as e:
            # lock contention surfaces as OSError, everything else as plyvel.Error
            raise DatabaseError(f"Cannot open database {database_path}: {e}") from e

        self._database_path = database_path
        self._alive = True
        self._database = database
        self._manifest_database = database.prefixed_db(DatabaseStore.MANIFEST_PREFIX)
        self._record_database = database.prefixed_db(DatabaseStore.RECORD_PREFIX)
        self._index_database = database.prefixed_db(DatabaseStore.INDEX_PREFIX)
        logger.debug(f"Opened database {database_path}")

    def __del__(self):
        self.close()

    def __enter__(self):
        if not self._alive:
            raise BrokenPipeError("Database was closed")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        if not getattr(self, '_alive', False):
            return

        self._alive = False
        self._manifest_database = None
        self._record_database = None
        self._index_database = None
        self._database.close()
        self._database = None
        logger.debug(f"Closed database {self._database_path}")

    @property
    def database_path(self) -> Path:
        return self._database_path

    @property
    def name(self) -> str:
        """Database name from the manifest, or the directory stem."""
        return self.read_manifest(DatabaseStore.MANIFEST_NAME) or self._database_path.stem

    def read_manifest(self, entry: str) -> str | None:
        value = self._manifest_database.get(entry.encode())
        if value is not None:
            value = value.decode()
        return value

    def open_cursor(self, query: str | Query | None = None) -> Cursor:
        """Open a cursor over all records, filtered by query when given.

        Empty or missing query text means no filter.

        Args:
            query: Query text, an already compiled Query, or None

        Raises:
            QueryError: the query text does not compile; no cursor is opened
        """
        if isinstance(query, str):
            query = compile_query(query) if query.strip() else None

        if not self._alive:
            raise BrokenPipeError("Database was closed")

        return Cursor(self._record_database.iterator(), query)

    def find_entry(self, index_name: str, key: str | bytes) -> Any:
        """Look up a record through a secondary index.

        Index entries are bucketed by a Murmur3 hash of the key, so the
        candidate record's field is compared against key before it is
        returned.

        Args:
            index_name: Indexed field, e.g. 'crc'
            key: Field value; checksums are bytes

        Returns:
            The raw record, or None if no record has that key
        """
        bucket = self._index_database.prefixed_db(index_prefix(index_name, key))

        for _, record_key in bucket.iterator():
            data = self._record_database.get(record_key)
            if data is None:
                logger.warning(f"Index {index_name} points to missing record {record_key.hex()}")
                continue

            record = unpack_value(data)
            if isinstance(record, RawMap) and record.get(index_name) == key:
                return record

        return None

    def inspect(self) -> Iterator[str]:
        """Human-readable dump of every entry, for debugging."""
        for key, value in self._database.iterator():
            key: bytes
            if key.startswith(DatabaseStore.MANIFEST_PREFIX):
                entry = key[len(DatabaseStore.MANIFEST_PREFIX):].decode()
                yield f'manifest-property {entry} {value.decode()}'
            elif key.startswith(DatabaseStore.RECORD_PREFIX):
                record_key = key[len(DatabaseStore.RECORD_PREFIX):]
                try:
                    record_id, _ = decode_varint(record_key)
                except ValueError:
                    yield f'record *{record_key.hex()} {value.hex()}'
                    continue
                yield f'record {record_id} {describe_value(unpack_value(value))}'
            elif key.startswith(DatabaseStore.INDEX_PREFIX):
                rest = key[len(DatabaseStore.INDEX_PREFIX):]
                index_name, _, tail = rest.partition(b'\0')
                if len(tail) > 16:
                    seq_num, _ = decode_varint(tail, 16)
                    record_id, _ = decode_varint(value)
                    yield f'index {index_name.decode()} hash:0x{tail[:16].hex()} seq:{seq_num} record:{record_id}'
                else:
                    yield f'index *{rest.hex()} {value.hex()}'
            else:
                yield f'OTHER {key} {value}'
