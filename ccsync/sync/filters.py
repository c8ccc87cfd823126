# CCSync File Filters
# Ignore/include patterns plus direction and file-type rules

from dataclasses import dataclass
from typing import Optional

from ccsync.config.schema import FileType, SyncDirection, SyncRule
from ccsync.sync.fileio import FileIO, FileMetadata
from ccsync.utils.paths import is_excluded, matches_path


def is_binary(data: bytes) -> bool:
    """Treat content with NUL bytes or invalid UTF-8 as binary."""
    if b"\0" in data:
        return True
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


@dataclass(frozen=True)
class FileFilter:
    """
    Decides which root-relative paths take part in a sync.

    The ignore list drops a path when its full path or any component
    matches, and the include list rescues it. Rules then run in order; each
    rule that applies sets the outcome, so the last one wins. A rule applies
    when its direction is unset or equals the run direction, one of its
    patterns matches, and its file type matches.
    """

    ignore: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    rules: tuple[SyncRule, ...] = ()
    direction: Optional[SyncDirection] = None

    def _type_matches(self, file_type: FileType, io: FileIO, path, metadata: FileMetadata) -> bool:
        if file_type == FileType.ANY:
            return True
        if file_type == FileType.SYMLINK:
            return metadata.is_symlink
        if metadata.is_dir:
            return False
        binary = is_binary(io.read(path))
        return binary if file_type == FileType.BINARY else not binary

    def excludes(self, rel_path: str, io: FileIO, path, metadata: FileMetadata) -> bool:
        """
        Check one path.

        Args:
            rel_path: Slash-separated path relative to the sync root.
            io: Filesystem boundary, used to read content for text/binary rules.
            path: Full path of the file or directory.
            metadata: Its metadata.

        Returns:
            True if the path must be skipped.
        """
        excluded = is_excluded(rel_path, self.ignore, self.include)
        for rule in self.rules:
            if rule.direction is not None and rule.direction != self.direction:
                continue
            if not matches_path(rel_path, rule.patterns):
                continue
            if not self._type_matches(rule.file_type, io, path, metadata):
                continue
            excluded = not rule.include
        return excluded
