# CCSync File I/O
# Filesystem boundary used by the scanner, comparator and executor

import os
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Iterable
from typing import Protocol

from ccsync.errors import SyncIOError
from ccsync.utils.paths import atomic_write, safe_copy, safe_delete


@dataclass(frozen=True)
class FileMetadata:
    """Stat result for one path."""

    is_dir: bool
    mtime: float
    size: int = 0
    is_symlink: bool = False


class FileIO(Protocol):
    """
    Everything the sync core does to a filesystem.

    Every method raises SyncIOError on failure. Paths are ``pathlib`` paths;
    the core only joins them with ``/`` so pure paths work for doubles.
    """

    def read(self, path) -> bytes: ...

    def write(self, path, data: bytes) -> None: ...

    def copy_file(self, source, dest) -> None: ...

    def copy_tree(self, source, dest, entries: Iterable[str]) -> None: ...

    def delete(self, path) -> None: ...

    def metadata(self, path) -> FileMetadata: ...

    def exists(self, path) -> bool: ...

    def list_dir(self, path) -> list[str]: ...

    def resolve(self, path): ...


class LocalFileIO:
    """
    FileIO backed by the local filesystem.

    By default symlinks are followed: a linked file syncs as its content and
    a linked directory is walked. With ``preserve_symlinks`` a symlink is an
    opaque leaf whose content is its target, and it is copied as a symlink.
    """

    def __init__(self, *, preserve_symlinks: bool = False):
        self.preserve_symlinks = preserve_symlinks

    def _is_preserved_link(self, path: Path) -> bool:
        return self.preserve_symlinks and path.is_symlink()

    def read(self, path: Path) -> bytes:
        path = Path(path)
        try:
            if self._is_preserved_link(path):
                return os.fsencode(os.readlink(path))
            return path.read_bytes()
        except OSError as e:
            raise SyncIOError(f"Cannot read {path}: {e.strerror or e}", path) from e

    def write(self, path: Path, data: bytes) -> None:
        try:
            atomic_write(Path(path), data)
        except OSError as e:
            raise SyncIOError(f"Cannot write {path}: {e.strerror or e}", path) from e

    def copy_file(self, source: Path, dest: Path) -> None:
        """Copy one file into place, keeping its permission bits."""
        try:
            safe_copy(Path(source), Path(dest), follow_symlinks=not self.preserve_symlinks)
        except OSError as e:
            raise SyncIOError(f"Cannot copy {source} to {dest}: {e.strerror or e}", dest) from e

    def copy_tree(self, source: Path, dest: Path, entries: Iterable[str]) -> None:
        """
        Copy the given files of a directory tree, merging into ``dest``.

        Only ``entries`` (slash-separated paths relative to ``source``) are
        copied, so files the scanner filtered out never reach ``dest``.
        """
        for entry in entries:
            self.copy_file(Path(source) / entry, Path(dest) / entry)

    def delete(self, path: Path) -> None:
        try:
            safe_delete(Path(path))
        except OSError as e:
            raise SyncIOError(f"Cannot delete {path}: {e.strerror or e}", path) from e

    def metadata(self, path: Path) -> FileMetadata:
        path = Path(path)
        try:
            is_symlink = path.is_symlink()
            if is_symlink and self.preserve_symlinks:
                st = path.lstat()
                return FileMetadata(is_dir=False, mtime=st.st_mtime, size=st.st_size, is_symlink=True)
            st = path.stat()
        except OSError as e:
            raise SyncIOError(f"Cannot stat {path}: {e.strerror or e}", path) from e
        return FileMetadata(is_dir=path.is_dir(), mtime=st.st_mtime, size=st.st_size, is_symlink=is_symlink)

    def exists(self, path: Path) -> bool:
        # Dangling symlinks count as missing unless they are preserved
        if self.preserve_symlinks:
            return os.path.lexists(path)
        return Path(path).exists()

    def list_dir(self, path: Path) -> list[str]:
        try:
            return sorted(child.name for child in Path(path).iterdir())
        except OSError as e:
            raise SyncIOError(f"Cannot list {path}: {e.strerror or e}", path) from e

    def resolve(self, path: Path) -> Path:
        try:
            return Path(path).resolve()
        except (OSError, RuntimeError) as e:
            raise SyncIOError(f"Cannot resolve {path}: {e}", path) from e
