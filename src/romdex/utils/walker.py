import logging
import os
import stat
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple

logger = logging.getLogger(__name__)


class WalkPolicy(NamedTuple):
    """Policy controlling which directory entries become scan candidates.

    Attributes:
        extensions: Lower-case extensions without the dot; None accepts every file
        recursive: Whether to descend into subdirectories
        excluded_names: Entry names skipped at every level (files and directories)
    """
    extensions: frozenset[str] | None = None
    recursive: bool = False
    excluded_names: frozenset[str] = frozenset()

    def accepts(self, path: Path) -> bool:
        if self.extensions is None:
            return True
        return path.suffix[1:].lower() in self.extensions


def normalize_extensions(extensions: str | Iterable[str] | None) -> frozenset[str] | None:
    """Turn 'nes|sfc', ['.NES', 'sfc'] and similar into {'nes', 'sfc'}."""
    if extensions is None:
        return None
    if isinstance(extensions, str):
        extensions = extensions.split('|')
    return frozenset(ext.strip().lstrip('.').lower() for ext in extensions if ext.strip())


def walk_with_policy(directory: Path, policy: WalkPolicy) -> Iterator[Path]:
    """Yield regular files under directory accepted by policy.

    Entries are visited in name order so the result is stable across runs.
    Symlinks are followed for files; unreadable subdirectories are logged and
    skipped.

    Args:
        directory: Directory to walk
        policy: Extension filter, recursion and excluded names
    """
    children = sorted(directory.iterdir(), key=lambda p: p.name)
    for child in children:
        if child.name in policy.excluded_names:
            continue

        try:
            st = child.stat()
        except OSError as e:
            logger.warning(f"Cannot stat {child}: {e}")
            continue

        if stat.S_ISDIR(st.st_mode):
            if policy.recursive:
                try:
                    yield from walk_with_policy(child, policy)
                except OSError as e:
                    logger.warning(f"Cannot list {child}: {e}")
        elif stat.S_ISREG(st.st_mode) and policy.accepts(child):
            yield child


def list_entries(directory: str | os.PathLike,
                 extensions: str | Iterable[str] | None = None,
                 recursive: bool = False,
                 excluded: Iterable[str] = ()) -> list[Path]:
    """List candidate files of directory, filtered by extension.

    Args:
        directory: Directory to list
        extensions: 'nes|sfc' style filter or iterable of extensions; None accepts every file
        recursive: Whether to descend into subdirectories
        excluded: File and directory names skipped at every level, e.g. 'media'

    Returns:
        Regular files in name order

    Raises:
        FileNotFoundError: directory does not exist
        NotADirectoryError: directory is not a directory
    """
    directory = Path(directory)

    if not directory.exists():
        raise FileNotFoundError(f"Directory {directory} does not exist")

    if not directory.is_dir():
        raise NotADirectoryError(f"{directory} is not a directory")

    policy = WalkPolicy(normalize_extensions(extensions), recursive, frozenset(excluded))
    return list(walk_with_policy(directory, policy))
