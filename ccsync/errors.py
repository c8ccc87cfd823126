# CCSync Errors
# Exception hierarchy for sync runs

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ccsync.sync.report import SyncReport


class CcsyncError(Exception):
    """Base exception for ccsync errors.

    Fatal errors raised out of a sync run carry the finalized partial
    report in ``report`` so the caller can show what was already applied.
    """

    def __init__(self, message: str):
        self.message = message
        self.report: SyncReport | None = None
        super().__init__(message)


class ConfigError(CcsyncError):
    """Configuration could not be loaded or is invalid."""


class SyncIOError(CcsyncError):
    """Read, write, list or delete failure. Always fatal."""

    def __init__(self, message: str, path: object = None):
        self.path = path
        super().__init__(message)


class ConflictError(CcsyncError):
    """Conflict under the ``fail`` strategy. Names the offending item."""

    def __init__(self, item: str):
        self.item = item
        super().__init__(f"Conflict: {item} differs on both sides (use --conflict to resolve)")


class InvalidInput(CcsyncError):
    """Unrecognized prompt key. Recovered by re-prompting."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Invalid choice: {key!r}")


class Cancelled(CcsyncError):
    """Run stopped by the user, either by quitting or by an interrupt signal."""

    def __init__(self, *, interrupted: bool = False):
        self.interrupted = interrupted
        message = "Sync interrupted" if interrupted else "Sync cancelled by user"
        super().__init__(message)
