# CCSync Comparator
# Classify an item pair into added/modified/removed/unchanged entries

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Optional

from ccsync.sync.fileio import FileIO
from ccsync.sync.item import ABSENT, DirectoryPresence, FilePresence, ItemPair


class EntryStatus(str, Enum):
    """Status of one file inside a compared item."""

    ADDED = "added"  # Only in source
    MODIFIED = "modified"  # In both, bytes differ
    REMOVED = "removed"  # Only in destination
    UNCHANGED = "unchanged"  # In both, bytes equal


class Classification(str, Enum):
    """Overall classification of a compared item."""

    NEW = "new"
    DELETED = "deleted"
    IDENTICAL = "identical"
    CONFLICT = "conflict"
    # Directory on both sides that only gained or only lost files
    MERGEABLE = "mergeable"


@dataclass(frozen=True)
class EntryDiff:
    """One leaf file of a compared item."""

    path: str
    status: EntryStatus
    source_mtime: Optional[float] = None
    dest_mtime: Optional[float] = None


@dataclass
class DiffResult:
    """
    Flat comparison result for one item pair.

    ``entries`` maps each relative sub-path to its EntryDiff. A file item has
    exactly one entry, keyed by the file name.
    """

    category: str
    relative_path: str
    is_directory: bool
    source_path: object
    dest_path: object
    source_present: bool
    dest_present: bool
    entries: dict[str, EntryDiff] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """Display name, e.g. ``agents/reviewer.md``."""
        return f"{self.category}/{self.relative_path}"

    def _paths(self, status: EntryStatus) -> list[str]:
        return sorted(path for path, entry in self.entries.items() if entry.status == status)

    @property
    def added(self) -> list[str]:
        return self._paths(EntryStatus.ADDED)

    @property
    def modified(self) -> list[str]:
        return self._paths(EntryStatus.MODIFIED)

    @property
    def removed(self) -> list[str]:
        return self._paths(EntryStatus.REMOVED)

    @property
    def unchanged(self) -> list[str]:
        return self._paths(EntryStatus.UNCHANGED)

    @property
    def changed(self) -> list[EntryDiff]:
        """Differing entries in path order."""
        return [self.entries[p] for p in sorted(self.entries) if self.entries[p].status != EntryStatus.UNCHANGED]

    @property
    def change_count(self) -> int:
        return len(self.changed)

    @property
    def source_newest(self) -> Optional[float]:
        """Latest source mtime among differing entries."""
        mtimes = [e.source_mtime for e in self.changed if e.source_mtime is not None]
        return max(mtimes) if mtimes else None

    @property
    def dest_newest(self) -> Optional[float]:
        """Latest destination mtime among differing entries."""
        mtimes = [e.dest_mtime for e in self.changed if e.dest_mtime is not None]
        return max(mtimes) if mtimes else None

    @property
    def classification(self) -> Classification:
        if not self.dest_present:
            return Classification.NEW
        if not self.source_present:
            return Classification.DELETED
        if not self.changed:
            return Classification.IDENTICAL
        if self.modified or (self.added and self.removed):
            return Classification.CONFLICT
        return Classification.MERGEABLE

    @property
    def is_conflict(self) -> bool:
        return self.classification == Classification.CONFLICT

    def source_file(self, entry: str):
        """Source-side path of an entry."""
        return self.source_path / entry if self.is_directory else self.source_path

    def dest_file(self, entry: str):
        """Destination-side path of an entry."""
        return self.dest_path / entry if self.is_directory else self.dest_path


def _compare_leaf(io: FileIO, path: str, source_file, dest_file, source_mtime, dest_mtime) -> EntryDiff:
    if dest_mtime is None:
        return EntryDiff(path, EntryStatus.ADDED, source_mtime=source_mtime)
    if source_mtime is None:
        return EntryDiff(path, EntryStatus.REMOVED, dest_mtime=dest_mtime)
    # Content decides; metadata never does
    same = io.read(source_file) == io.read(dest_file)
    status = EntryStatus.UNCHANGED if same else EntryStatus.MODIFIED
    return EntryDiff(path, status, source_mtime=source_mtime, dest_mtime=dest_mtime)


def compare(pair: ItemPair, io: FileIO) -> DiffResult:
    """
    Compare the two sides of an item pair.

    Args:
        pair: Paired presences from the scanner.
        io: Filesystem boundary used for byte comparison.

    Returns:
        DiffResult covering every file of either side exactly once.
    """
    result = DiffResult(
        category=pair.category,
        relative_path=pair.relative_path,
        is_directory=pair.is_directory,
        source_path=pair.source_path,
        dest_path=pair.dest_path,
        source_present=pair.source is not ABSENT,
        dest_present=pair.dest is not ABSENT,
    )

    if pair.is_directory:
        source_entries = pair.source.entries if isinstance(pair.source, DirectoryPresence) else {}
        dest_entries = pair.dest.entries if isinstance(pair.dest, DirectoryPresence) else {}
        for path in sorted(set(source_entries) | set(dest_entries)):
            result.entries[path] = _compare_leaf(
                io,
                path,
                pair.source_path / path,
                pair.dest_path / path,
                source_entries.get(path),
                dest_entries.get(path),
            )
        return result

    name = PurePosixPath(pair.relative_path).name
    source_mtime = pair.source.mtime if isinstance(pair.source, FilePresence) else None
    dest_mtime = pair.dest.mtime if isinstance(pair.dest, FilePresence) else None
    result.entries[name] = _compare_leaf(io, name, pair.source_path, pair.dest_path, source_mtime, dest_mtime)
    return result
