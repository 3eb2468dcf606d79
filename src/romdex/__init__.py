from .database import DatabaseStore, DatabaseNotFound, DatabaseError, Cursor, END, Query, QueryError, compile_query
from .metadata import MetadataRecord, MetadataList, build_metadata_list, decode_record
from .scan import ScanHandle, ScanStatus, ScanMode, ScanEntry, AdvanceResult, advance, fingerprint_of
from .settings import Settings
from .utils.messages import MessageQueue
