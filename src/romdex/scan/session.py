import logging
import lzma
import os
import zipfile
import zlib
from enum import StrEnum
from pathlib import Path
from typing import Callable, Iterable, NamedTuple, Sequence

from ..utils.messages import DEFAULT_DURATION, MessageSink, MessageQueue
from ..utils.walker import list_entries, normalize_extensions
from .archive import ARCHIVE_EXTENSIONS, ArchiveMember, ArchiveReader, for_each_member, is_archive
from .identifier import fingerprint_of, format_crc32

logger = logging.getLogger(__name__)

FINISHED_MESSAGE = "Scanning of directory finished."


class ScanStatus(StrEnum):
    ITERATING = 'iterating'
    FINISHED = 'finished'


class ScanMode(StrEnum):
    NONE = 'none'
    WRITE_PLAYLIST = 'write-playlist'


class AdvanceResult(StrEnum):
    CONTINUE = 'continue'
    FINISHED = 'finished'
    ERROR = 'error'


class ScanEntry(NamedTuple):
    """A fingerprinted file, or one member of an archive."""
    path: Path
    member: str | None
    crc32: int

    @property
    def crc32_hex(self) -> str:
        return format_crc32(self.crc32)


ScanVisitor = Callable[[ScanEntry], None]


def log_scan_entry(entry: ScanEntry):
    if entry.member is None:
        logger.info(f"CRC32: 0x{entry.crc32:08x} {entry.path}")
    else:
        logger.info(f"CRC32: 0x{entry.crc32:08x} {entry.path}#{entry.member}")


def read_whole_file(path: Path) -> bytes:
    return path.read_bytes()


class ScanHandle:
    """Resumable scan over a fixed list of candidate files.

    Each advance() call handles at most one candidate so a frontend can drive
    the scan from its main loop without stalling. The handle owns its
    candidate list; release() drops it, after which advance() reports ERROR.

    In WRITE_PLAYLIST mode every fingerprint is passed to the visitor and kept
    in entries; in NONE mode candidates are stepped over untouched.

    A plain file that cannot be read, or reads as empty, is retried on the
    next call instead of being skipped, unless skip_unreadable is set.
    """

    def __init__(self,
                 candidates: Sequence[str | os.PathLike],
                 mode: ScanMode = ScanMode.WRITE_PLAYLIST,
                 *,
                 messages: MessageSink | None = None,
                 visitor: ScanVisitor | None = None,
                 skip_unreadable: bool = False,
                 message_duration: int = DEFAULT_DURATION,
                 read_file: Callable[[Path], bytes] = read_whole_file,
                 archive_reader: ArchiveReader = for_each_member):
        self._candidates: list[Path] | None = [Path(c) for c in candidates]
        self._cursor_index = 0
        self._status = ScanStatus.ITERATING
        self._mode = ScanMode(mode)
        self._messages = messages if messages is not None else MessageQueue()
        self._visitor = visitor if visitor is not None else log_scan_entry
        self._skip_unreadable = skip_unreadable
        self._message_duration = message_duration
        self._read_file = read_file
        self._archive_reader = archive_reader
        self._entries: list[ScanEntry] = []

    @classmethod
    def create(cls, directory: str | os.PathLike, mode: ScanMode = ScanMode.WRITE_PLAYLIST,
               extensions: str | Iterable[str] | None = None, recursive: bool = False,
               excluded: Iterable[str] = (), **kwargs) -> 'ScanHandle':
        """Create a scan over the files of directory.

        Archives are always candidates when an extension filter is given.

        Args:
            directory: Directory whose files become candidates
            mode: Per-file action
            extensions: 'sfc|smc' style filter, or None for every file
            recursive: Whether to descend into subdirectories
            excluded: File and directory names skipped at every level
            **kwargs: Passed on to the ScanHandle constructor

        Raises:
            FileNotFoundError: directory does not exist
            NotADirectoryError: directory is not a directory
        """
        extensions = normalize_extensions(extensions)
        if extensions is not None:
            extensions = extensions | ARCHIVE_EXTENSIONS

        candidates = list_entries(directory, extensions, recursive, excluded)
        logger.info(f"Scan of {directory} created with {len(candidates)} candidates")
        return cls(candidates, mode, **kwargs)

    @property
    def candidates(self) -> list[Path] | None:
        return self._candidates

    @property
    def cursor_index(self) -> int:
        return self._cursor_index

    @property
    def status(self) -> ScanStatus:
        return self._status

    @property
    def mode(self) -> ScanMode:
        return self._mode

    @property
    def messages(self) -> MessageSink:
        return self._messages

    @property
    def entries(self) -> list[ScanEntry]:
        """Fingerprints collected so far, in scan order."""
        return self._entries

    def release(self):
        """Drop the candidate list. Collected entries stay available."""
        self._candidates = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def advance(self) -> AdvanceResult:
        """Process the candidate under the cursor.

        Returns:
            CONTINUE while candidates remain, FINISHED once the list is
            exhausted (on this and every later call), ERROR when the handle
            has been released.
        """
        if self._candidates is None:
            return AdvanceResult.ERROR

        if self._cursor_index >= len(self._candidates):
            if self._status is not ScanStatus.FINISHED:
                self._messages.post_message(FINISHED_MESSAGE, 1, self._message_duration, True)
                self._status = ScanStatus.FINISHED
                logger.info(f"Scan finished after {len(self._candidates)} candidates")
            return AdvanceResult.FINISHED

        path = self._candidates[self._cursor_index]

        if self._mode is ScanMode.WRITE_PLAYLIST:
            if is_archive(path):
                self._scan_archive(path)
            elif not self._scan_file(path) and not self._skip_unreadable:
                return AdvanceResult.CONTINUE

        self._cursor_index += 1
        return AdvanceResult.CONTINUE

    def skip(self) -> Path | None:
        """Move the cursor past the current candidate without processing it.

        Drivers use this to give up on a file that advance() keeps retrying.

        Returns:
            The skipped path, or None when the handle is released or exhausted
        """
        if self._candidates is None or self._cursor_index >= len(self._candidates):
            return None

        path = self._candidates[self._cursor_index]
        logger.warning(f"Skipping {path}")
        self._cursor_index += 1
        return path

    def _scan_archive(self, path: Path):
        logger.info(f"[ZIP]: name: {path}")

        def visit(member: ArchiveMember, data: bytes) -> bool:
            self._record(ScanEntry(path, member.name, fingerprint_of(data)))
            return True

        try:
            self._archive_reader(path, visit)
        except (OSError, EOFError, RuntimeError, zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error,
                lzma.LZMAError) as e:
            # unsupported compression and encrypted members surface as RuntimeError,
            # truncated member data as EOFError
            logger.warning(f"Could not process archive {path}: {e}")

    def _scan_file(self, path: Path) -> bool:
        try:
            data = self._read_file(path)
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            return False

        if not data:
            logger.warning(f"Empty file {path}")
            return False

        progress = f"{self._cursor_index + 1}/{len(self._candidates)}: Scanning {path.name}..."
        self._messages.post_message(progress, 1, self._message_duration, True)
        self._record(ScanEntry(path, None, fingerprint_of(data)))
        return True

    def _record(self, entry: ScanEntry):
        self._entries.append(entry)
        self._visitor(entry)


def advance(handle: ScanHandle | None) -> AdvanceResult:
    """Advance a scan by one step; a missing handle is an error."""
    if handle is None:
        return AdvanceResult.ERROR
    return handle.advance()
