# CCSync Sync Module
# Core synchronization engine and components

from ccsync.sync.actions import apply_decision
from ccsync.sync.compare import Classification, DiffResult, EntryDiff, EntryStatus, compare
from ccsync.sync.engine import SyncEngine
from ccsync.sync.fileio import FileIO, FileMetadata, LocalFileIO
from ccsync.sync.filters import FileFilter, is_binary
from ccsync.sync.item import (
    ABSENT,
    DirectoryItem,
    DirectoryPresence,
    FileItem,
    FilePresence,
    ItemPair,
    scan,
    scan_pairs,
)
from ccsync.sync.report import ItemOutcome, RunOutcome, SyncReport
from ccsync.sync.resolver import (
    Decision,
    DecisionKind,
    NeedsInput,
    SessionMode,
    natural_decision,
    resolve,
)
from ccsync.sync.session import InteractiveSession, PromptProvider, SessionState, prompt_item

__all__ = [
    # Items and scanning
    "ABSENT",
    "FileItem",
    "DirectoryItem",
    "FilePresence",
    "DirectoryPresence",
    "ItemPair",
    "scan",
    "scan_pairs",
    # File I/O
    "FileIO",
    "FileMetadata",
    "LocalFileIO",
    # Filtering
    "FileFilter",
    "is_binary",
    # Comparison
    "Classification",
    "DiffResult",
    "EntryDiff",
    "EntryStatus",
    "compare",
    # Resolution
    "Decision",
    "DecisionKind",
    "NeedsInput",
    "SessionMode",
    "natural_decision",
    "resolve",
    # Session
    "InteractiveSession",
    "PromptProvider",
    "SessionState",
    "prompt_item",
    # Actions
    "apply_decision",
    # Report
    "ItemOutcome",
    "RunOutcome",
    "SyncReport",
    # Engine
    "SyncEngine",
]
