from .query import Query, QueryError, compile_query
from .store import DatabaseStore, DatabaseNotFound, DatabaseError, Cursor, END
from .values import RawMap, unpack_value
