# CCSync Sync Actions
# Apply a Decision to the destination through the FileIO boundary

from ccsync.sync.compare import DiffResult
from ccsync.sync.fileio import FileIO
from ccsync.sync.resolver import Decision, DecisionKind


def _apply_entry(diff: DiffResult, entry: str, kind: DecisionKind, io: FileIO) -> None:
    if kind in (DecisionKind.CREATE, DecisionKind.UPDATE):
        io.copy_file(diff.source_file(entry), diff.dest_file(entry))
    elif kind == DecisionKind.DELETE:
        io.delete(diff.dest_file(entry))


def _prune_empty_dirs(diff: DiffResult, deleted: list[str], io: FileIO) -> None:
    """
    Remove directories left empty by deletions inside a directory item.

    Walks from the deepest emptied directory up to the item itself. A
    directory that still holds anything (e.g. ignored files) is kept.
    """
    candidates: set[str] = set()
    for entry in deleted:
        parts = entry.split("/")[:-1]
        for depth in range(len(parts), 0, -1):
            candidates.add("/".join(parts[:depth]))

    for rel in sorted(candidates, key=lambda p: (-p.count("/"), p)):
        path = diff.dest_path / rel
        if io.exists(path) and not io.list_dir(path):
            io.delete(path)

    if io.exists(diff.dest_path) and not io.list_dir(diff.dest_path):
        io.delete(diff.dest_path)


def apply_decision(diff: DiffResult, decision: Decision, io: FileIO) -> None:
    """
    Make the destination reflect a decision.

    Directory items are always applied file by file from ``diff.entries``,
    so ignored files are never copied and never deleted. No rollback: a
    failure leaves earlier changes in place.

    Args:
        diff: Comparison result the decision was made for.
        decision: What to do.
        io: Filesystem boundary.

    Raises:
        SyncIOError: If any read, copy or delete fails.
    """
    kind = decision.kind

    if kind == DecisionKind.SKIP:
        return

    if not diff.is_directory:
        if kind in (DecisionKind.CREATE, DecisionKind.UPDATE):
            io.copy_file(diff.source_path, diff.dest_path)
        elif kind == DecisionKind.DELETE:
            io.delete(diff.dest_path)
        return

    if kind == DecisionKind.CREATE:
        io.copy_tree(diff.source_path, diff.dest_path, diff.added)
        return

    if kind == DecisionKind.DELETE:
        entries = {path: DecisionKind.DELETE for path in diff.removed}
    else:
        entries = dict(decision.entries)

    deleted: list[str] = []
    for entry, entry_kind in sorted(entries.items()):
        _apply_entry(diff, entry, entry_kind, io)
        if entry_kind == DecisionKind.DELETE:
            deleted.append(entry)

    if deleted:
        _prune_empty_dirs(diff, deleted, io)
