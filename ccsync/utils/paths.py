# CCSync Path Utilities
# Safe file operations with atomic writes and pattern matching

import fnmatch
import os
import shutil
import tempfile
from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded, absolute Path object.
    """
    path_str = str(path)
    # Expand ~ first, then environment variables
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(path_str).absolute()


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Safely delete file or directory.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
    """
    if not path.exists() and not path.is_symlink():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True


def safe_copy(source: Path, dest: Path, *, follow_symlinks: bool = True) -> None:
    """
    Atomically copy a single file, preserving its mode and timestamps.

    Copies to a temporary file next to ``dest`` and renames it into place.

    Args:
        source: Source file.
        dest: Destination file, replaced if it exists.
        follow_symlinks: Copy the link target's content (default). If False,
            a symlink is recreated as a symlink.

    Raises:
        FileNotFoundError: If source doesn't exist.
    """
    if not os.path.lexists(source):
        raise FileNotFoundError(f"Source does not exist: {source}")

    ensure_dir(dest.parent)

    temp_dest = dest.with_name(f"{dest.name}.tmp.{os.getpid()}")
    try:
        if os.path.lexists(temp_dest):
            temp_dest.unlink()
        shutil.copy2(source, temp_dest, follow_symlinks=follow_symlinks)
        os.replace(temp_dest, dest)
    except OSError:
        if os.path.lexists(temp_dest):
            temp_dest.unlink()
        raise


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file in the target directory and an atomic rename, so a
    reader never observes a half-written file.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).
    """
    ensure_dir(path.parent)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        os.replace(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def matches_pattern(path: str | Path, pattern: str) -> bool:
    """
    Check if path matches a glob pattern.

    Supports:
    - * for any characters within path component
    - ** for any path components
    - ? for single character

    Args:
        path: Path to check.
        pattern: Glob pattern.

    Returns:
        True if path matches pattern.
    """
    path_str = str(path)

    if "**" in pattern:
        parts = pattern.split("**")
        if len(parts) == 2:
            prefix, suffix = parts
            if prefix and not fnmatch.fnmatchcase(path_str, f"{prefix}*"):
                return False
            if suffix:
                suffix = suffix.lstrip("/")
                if not fnmatch.fnmatchcase(path_str, f"*{suffix}"):
                    return False
            return True

    return fnmatch.fnmatchcase(path_str, pattern)


def matches_any_pattern(path: str | Path, patterns: list[str] | tuple[str, ...]) -> bool:
    """
    Check if path matches any of the given patterns.

    Args:
        path: Path to check.
        patterns: List of glob patterns.

    Returns:
        True if path matches any pattern.
    """
    return any(matches_pattern(path, p) for p in patterns)


def matches_path(rel_path: str, patterns: list[str] | tuple[str, ...]) -> bool:
    """
    Check a slash-separated path and each of its components against patterns.

    Args:
        rel_path: Path relative to the sync root.
        patterns: Glob patterns.

    Returns:
        True if the full path or any single component matches.
    """
    if matches_any_pattern(rel_path, patterns):
        return True
    return any(matches_any_pattern(part, patterns) for part in rel_path.split("/"))


def is_excluded(
    rel_path: str,
    ignore: list[str] | tuple[str, ...],
    include: list[str] | tuple[str, ...] = (),
) -> bool:
    """
    Decide whether a root-relative path is filtered out.

    A path is excluded when its full relative path or any of its components
    matches an ignore pattern, unless the full path matches an include pattern.

    Args:
        rel_path: Slash-separated path relative to the sync root
            (e.g. ``agents/reviewer.md``).
        ignore: Ignore patterns.
        include: Patterns that override ignores.

    Returns:
        True if the path must be skipped.
    """
    if not ignore:
        return False
    if include and matches_any_pattern(rel_path, include):
        return False
    return matches_path(rel_path, ignore)
