from .record import MetadataRecord, FieldKind, FieldSpec, FIELD_SPECS
from .decoder import decode_record, bin_to_hex
from .listing import MetadataList, build_metadata_list
