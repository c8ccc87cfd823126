# CCSync Diff Display
# Summary and unified-diff rendering for compared items

import difflib
from typing import Optional

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.syntax import Syntax

from ccsync.sync.compare import DiffResult, EntryDiff, EntryStatus
from ccsync.sync.fileio import FileIO
from ccsync.sync.filters import is_binary

CONTEXT_LINES = 3


def _decode(data: bytes) -> Optional[str]:
    """Decode text content, or None for binary data."""
    if is_binary(data):
        return None
    return data.decode("utf-8")


def _entry_texts(diff: DiffResult, entry: EntryDiff, io: FileIO) -> tuple[Optional[str], Optional[str]]:
    """Return (destination text, source text); None means binary."""
    source = io.read(diff.source_file(entry.path)) if entry.source_mtime is not None else b""
    dest = io.read(diff.dest_file(entry.path)) if entry.dest_mtime is not None else b""
    return _decode(dest), _decode(source)


def count_changed_lines(old: str, new: str) -> tuple[int, int]:
    """
    Count lines added and removed between two texts.

    Args:
        old: Destination text.
        new: Source text.

    Returns:
        Tuple of (added, removed).
    """
    matcher = difflib.SequenceMatcher(None, old.splitlines(), new.splitlines(), autojunk=False)
    added = removed = 0
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag in ("replace", "delete"):
            removed += i2 - i1
        if tag in ("replace", "insert"):
            added += j2 - j1
    return added, removed


def _summary(diff: DiffResult, io: FileIO) -> str:
    lines = [
        f"{diff.name} [{diff.classification.value}]",
        f"{len(diff.added)} added, {len(diff.modified)} modified, "
        f"{len(diff.removed)} removed, {len(diff.unchanged)} unchanged",
    ]
    for entry in diff.changed:
        if entry.status == EntryStatus.ADDED:
            lines.append(f"+ {entry.path}")
        elif entry.status == EntryStatus.REMOVED:
            lines.append(f"- {entry.path}")
        else:
            old, new = _entry_texts(diff, entry, io)
            if old is None or new is None:
                lines.append(f"~ {entry.path} (binary)")
            else:
                added, removed = count_changed_lines(old, new)
                lines.append(f"~ {entry.path} (+{added} -{removed} lines)")
    return "\n".join(lines)


def _content(diff: DiffResult, io: FileIO, entry: Optional[str]) -> str:
    if entry is not None:
        if entry not in diff.entries:
            return f"No entry named {entry!r} in {diff.name}"
        chosen = diff.entries[entry]
    elif not diff.is_directory:
        chosen = next(iter(diff.entries.values()))
    else:
        modified = diff.modified
        if not modified:
            return f"No modified files in {diff.name}"
        chosen = diff.entries[modified[0]]

    if chosen.status == EntryStatus.UNCHANGED:
        return f"No differences: {chosen.path}"

    old, new = _entry_texts(diff, chosen, io)
    if old is None or new is None:
        return f"Binary files differ: {chosen.path}"

    label = chosen.path if diff.is_directory else diff.relative_path
    lines = difflib.unified_diff(
        old.splitlines(),
        new.splitlines(),
        fromfile=f"destination/{label}",
        tofile=f"source/{label}",
        lineterm="",
        n=CONTEXT_LINES,
    )
    return "\n".join(lines)


def render(
    diff: DiffResult,
    detail: str = "summary",
    *,
    io: FileIO,
    entry: Optional[str] = None,
) -> str:
    """
    Render a comparison result as text.

    Pure: only reads through ``io`` and can be called any number of times.

    Args:
        diff: Comparison result.
        detail: ``summary`` for counts and one line per changed entry,
            ``content`` for a unified diff of one file.
        io: Filesystem boundary used to read contents.
        entry: File to show in ``content`` mode (default: the file item, or
            the first modified entry of a directory).

    Returns:
        Rendered text. Unknown entries and binary files give an explanatory
        line instead of an error.
    """
    if detail == "summary":
        return _summary(diff, io)
    if detail == "content":
        return _content(diff, io, entry)
    raise ValueError(f"Unknown detail level: {detail!r}")


def show_diff(
    diff: DiffResult,
    *,
    io: FileIO,
    console: Optional[RichConsole] = None,
) -> None:
    """
    Print the summary and content diffs of one item.

    Args:
        diff: Comparison result.
        io: Filesystem boundary.
        console: Optional Rich console for output.
    """
    if console is None:
        console = RichConsole()

    console.print(Panel(render(diff, "summary", io=io), title=f"Diff: {diff.name}", border_style="yellow"))

    entries = diff.modified if diff.is_directory else list(diff.entries)
    for path in entries:
        text = render(diff, "content", io=io, entry=path)
        if text.startswith("---"):
            console.print(Syntax(text, "diff", theme="monokai", line_numbers=True))
        else:
            console.print(f"[dim]{text}[/dim]")
