from .identifier import fingerprint_of, format_crc32, identify, Fingerprint
from .archive import ArchiveMember, for_each_member, is_archive
from .session import ScanHandle, ScanStatus, ScanMode, ScanEntry, AdvanceResult, advance
from .playlist import write_playlist
