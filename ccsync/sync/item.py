# CCSync Sync Item
# Item and presence types, category scanning and source/destination pairing

import fnmatch
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from ccsync.config.schema import CategoryConfig, ItemKind, SyncDirection, SyncRule
from ccsync.errors import SyncIOError
from ccsync.sync.fileio import FileIO
from ccsync.sync.filters import FileFilter


@dataclass(frozen=True)
class FileItem:
    """A single file under a category root (agents, commands)."""

    category: str
    relative_path: str


@dataclass(frozen=True)
class DirectoryItem:
    """A marker-qualified directory under a category root (skills)."""

    category: str
    relative_path: str
    marker_present: bool = True


Item = Union[FileItem, DirectoryItem]


class _Absent:
    """Presence of an item that does not exist on one side."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class FilePresence:
    """A file item that exists on one side."""

    path: object
    mtime: float


@dataclass(frozen=True)
class DirectoryPresence:
    """A directory item that exists on one side, with every file beneath it."""

    path: object
    entries: dict[str, float] = field(default_factory=dict)


Presence = Union[_Absent, FilePresence, DirectoryPresence]


@dataclass(frozen=True)
class ItemPair:
    """
    The same item looked up on both sides of a sync.

    ``source_path`` and ``dest_path`` are always set, even when the item is
    absent on that side, so the executor knows where to write.
    """

    category: str
    relative_path: str
    is_directory: bool
    source_path: object
    dest_path: object
    source: Presence = ABSENT
    dest: Presence = ABSENT

    @property
    def name(self) -> str:
        """Display name, e.g. ``skills/rust-dev``."""
        return f"{self.category}/{self.relative_path}"


def _walk_files(
    io: FileIO,
    directory,
    prefix: str,
    *,
    recursive: bool,
    visited: set,
    match_prefix: str,
    file_filter: FileFilter,
) -> Iterator[tuple[str, object]]:
    """
    Yield (relative path, path) for every file under ``directory``.

    Symlinked directories are followed once; a directory whose resolved path
    was already visited is skipped to break loops.
    """
    for name in io.list_dir(directory):
        child = directory / name
        rel = f"{prefix}{name}"
        if not io.exists(child):
            continue
        meta = io.metadata(child)
        if file_filter.excludes(f"{match_prefix}{rel}", io, child, meta):
            continue
        if meta.is_dir:
            if not recursive:
                continue
            real = io.resolve(child)
            if real in visited:
                continue
            visited.add(real)
            yield from _walk_files(
                io,
                child,
                f"{rel}/",
                recursive=True,
                visited=visited,
                match_prefix=match_prefix,
                file_filter=file_filter,
            )
        else:
            yield rel, child


def _category_root(io: FileIO, root, category: CategoryConfig):
    """Resolve the category root, or return None if it does not exist."""
    cat_root = root / category.path
    if not io.exists(cat_root):
        return None
    resolved = io.resolve(cat_root)
    if not io.metadata(resolved).is_dir:
        raise SyncIOError(f"Not a directory: {cat_root}", cat_root)
    return resolved


def _make_filter(ignore, include, rules, direction) -> FileFilter:
    return FileFilter(ignore=tuple(ignore), include=tuple(include), rules=tuple(rules), direction=direction)


def scan(
    root,
    category_name: str,
    category: CategoryConfig,
    io: FileIO,
    *,
    ignore: tuple[str, ...] = (),
    include: tuple[str, ...] = (),
    rules: tuple[SyncRule, ...] = (),
    direction: Optional[SyncDirection] = None,
) -> Iterator[Item]:
    """
    Discover the items of one category under a sync root.

    Lazy and side-effect free; calling it again rescans from scratch. Items
    come out sorted by relative path.

    Args:
        root: Global or local root (e.g. ``~/.claude``).
        category_name: Category name stored on each item.
        category: Category configuration (path, kind, pattern, marker).
        io: Filesystem boundary.
        ignore: Ignore patterns, matched against ``<category path>/<item>``
            and each path component.
        include: Patterns that override ``ignore``.
        rules: Direction and file-type rules, applied after the patterns.
        direction: Run direction that directional rules are matched against.

    Yields:
        FileItem or DirectoryItem instances.

    Raises:
        SyncIOError: If the category root exists but cannot be listed.
    """
    cat_root = _category_root(io, root, category)
    if cat_root is None:
        return

    file_filter = _make_filter(ignore, include, rules, direction)
    match_prefix = f"{category.path}/"

    if category.item_kind == ItemKind.DIRECTORY:
        for name in io.list_dir(cat_root):
            child = cat_root / name
            if not io.exists(child):
                continue
            meta = io.metadata(child)
            if not meta.is_dir or file_filter.excludes(f"{match_prefix}{name}", io, child, meta):
                continue
            # Unmarked directories are not items
            if category.item_marker and not io.exists(child / category.item_marker):
                continue
            yield DirectoryItem(category=category_name, relative_path=name)
        return

    pattern = category.item_pattern or "*"
    files = _walk_files(
        io,
        cat_root,
        "",
        recursive=category.recursive,
        visited={cat_root},
        match_prefix=match_prefix,
        file_filter=file_filter,
    )
    for rel, _path in sorted(files):
        if fnmatch.fnmatchcase(rel.rsplit("/", 1)[-1], pattern):
            yield FileItem(category=category_name, relative_path=rel)


def directory_entries(
    io: FileIO,
    path,
    *,
    match_prefix: str = "",
    ignore: tuple[str, ...] = (),
    include: tuple[str, ...] = (),
    rules: tuple[SyncRule, ...] = (),
    direction: Optional[SyncDirection] = None,
) -> dict[str, float]:
    """
    Map every file below a directory item to its mtime.

    Empty sub-directories contribute nothing.

    Args:
        io: Filesystem boundary.
        path: Directory item path.
        match_prefix: Root-relative prefix used for filter matching.
        ignore: Ignore patterns.
        include: Include patterns.
        rules: Direction and file-type rules.
        direction: Run direction.

    Returns:
        Relative sub-path (``/``-separated) to modification time.
    """
    entries: dict[str, float] = {}
    walker = _walk_files(
        io,
        path,
        "",
        recursive=True,
        visited={io.resolve(path)},
        match_prefix=match_prefix,
        file_filter=_make_filter(ignore, include, rules, direction),
    )
    for rel, file_path in walker:
        entries[rel] = io.metadata(file_path).mtime
    return dict(sorted(entries.items()))


def _presence(io: FileIO, item: Optional[Item], path, match_prefix: str, filters: dict) -> Presence:
    if item is None:
        return ABSENT
    if isinstance(item, DirectoryItem):
        return DirectoryPresence(path=path, entries=directory_entries(io, path, match_prefix=match_prefix, **filters))
    return FilePresence(path=path, mtime=io.metadata(path).mtime)


def scan_pairs(
    source_root,
    dest_root,
    category_name: str,
    category: CategoryConfig,
    io: FileIO,
    *,
    ignore: tuple[str, ...] = (),
    include: tuple[str, ...] = (),
    rules: tuple[SyncRule, ...] = (),
    direction: Optional[SyncDirection] = None,
) -> list[ItemPair]:
    """
    Scan both roots and pair items by relative path.

    Both sides are filtered with the same patterns and rules.

    Args:
        source_root: Root items are copied from.
        dest_root: Root items are copied to.
        category_name: Category name.
        category: Category configuration.
        io: Filesystem boundary.
        ignore: Ignore patterns.
        include: Include patterns.
        rules: Direction and file-type rules.
        direction: Run direction.

    Returns:
        Sorted union of both sides, one ItemPair per relative path.
    """
    filters = {"ignore": ignore, "include": include, "rules": rules, "direction": direction}
    source_items = {item.relative_path: item for item in scan(source_root, category_name, category, io, **filters)}
    dest_items = {item.relative_path: item for item in scan(dest_root, category_name, category, io, **filters)}

    source_base = _category_root(io, source_root, category) or source_root / category.path
    dest_base = _category_root(io, dest_root, category) or dest_root / category.path
    is_directory = category.item_kind == ItemKind.DIRECTORY

    pairs: list[ItemPair] = []
    for rel in sorted(set(source_items) | set(dest_items)):
        source_path = source_base / rel
        dest_path = dest_base / rel
        match_prefix = f"{category.path}/{rel}/"
        pairs.append(
            ItemPair(
                category=category_name,
                relative_path=rel,
                is_directory=is_directory,
                source_path=source_path,
                dest_path=dest_path,
                source=_presence(io, source_items.get(rel), source_path, match_prefix, filters),
                dest=_presence(io, dest_items.get(rel), dest_path, match_prefix, filters),
            )
        )
    return pairs
