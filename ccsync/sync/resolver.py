# CCSync Conflict Resolver
# Turn a DiffResult into a Decision according to the conflict strategy

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ccsync.config.schema import ConflictStrategy
from ccsync.errors import ConflictError
from ccsync.sync.compare import Classification, DiffResult, EntryStatus

REASON_IDENTICAL = "identical content"
REASON_CONFLICT = "conflict"
REASON_NOT_OLDER = "destination not older"
REASON_USER_SKIPPED = "user skipped"
REASON_CANCELLED = "cancelled"


class SessionMode(str, Enum):
    """Interactive approval mode. Only ever moves away from NORMAL."""

    NORMAL = "normal"
    APPROVE_ALL = "approve_all"
    SKIP_ALL = "skip_all"


class DecisionKind(str, Enum):
    """What the executor does with an item."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SKIP = "skip"
    OVERWRITE_DIRECTORY = "overwrite_directory"
    MERGE_DIRECTORY = "merge_directory"


@dataclass(frozen=True)
class Decision:
    """
    Outcome of conflict resolution for one item.

    Directory decisions carry per-entry decisions in ``entries``.
    """

    kind: DecisionKind
    reason: str = ""
    entries: dict[str, DecisionKind] = field(default_factory=dict)

    @classmethod
    def create(cls) -> "Decision":
        return cls(DecisionKind.CREATE)

    @classmethod
    def update(cls) -> "Decision":
        return cls(DecisionKind.UPDATE)

    @classmethod
    def delete(cls) -> "Decision":
        return cls(DecisionKind.DELETE)

    @classmethod
    def skip(cls, reason: str) -> "Decision":
        return cls(DecisionKind.SKIP, reason=reason)

    @classmethod
    def overwrite_directory(cls, entries: dict[str, DecisionKind]) -> "Decision":
        return cls(DecisionKind.OVERWRITE_DIRECTORY, entries=dict(entries))

    @classmethod
    def merge_directory(cls, entries: dict[str, DecisionKind]) -> "Decision":
        return cls(DecisionKind.MERGE_DIRECTORY, entries=dict(entries))

    @property
    def is_skip(self) -> bool:
        return self.kind == DecisionKind.SKIP

    @property
    def is_directory_update(self) -> bool:
        return self.kind in (DecisionKind.OVERWRITE_DIRECTORY, DecisionKind.MERGE_DIRECTORY)


@dataclass(frozen=True)
class NeedsInput:
    """The resolver cannot decide; the interactive session must."""

    reason: str


Resolution = Union[Decision, NeedsInput]

_ENTRY_DECISIONS = {
    EntryStatus.ADDED: DecisionKind.CREATE,
    EntryStatus.MODIFIED: DecisionKind.UPDATE,
    EntryStatus.REMOVED: DecisionKind.DELETE,
    EntryStatus.UNCHANGED: DecisionKind.SKIP,
}


def entry_decisions(diff: DiffResult) -> dict[str, DecisionKind]:
    """Per-entry decisions that make the destination match the source."""
    return {path: _ENTRY_DECISIONS[entry.status] for path, entry in sorted(diff.entries.items())}


def natural_decision(diff: DiffResult) -> Decision:
    """
    The decision that makes the destination match the source.

    Args:
        diff: Comparison result.

    Returns:
        CREATE for new items, DELETE for deleted ones, a directory decision
        for directories present on both sides, UPDATE for changed files and
        SKIP for identical items.
    """
    classification = diff.classification
    if classification == Classification.IDENTICAL:
        return Decision.skip(REASON_IDENTICAL)
    if classification == Classification.NEW:
        return Decision.create()
    if classification == Classification.DELETED:
        return Decision.delete()
    if classification == Classification.MERGEABLE:
        return Decision.merge_directory(entry_decisions(diff))
    # CONFLICT
    if diff.is_directory:
        return Decision.overwrite_directory(entry_decisions(diff))
    return Decision.update()


def resolve(
    diff: DiffResult,
    strategy: ConflictStrategy,
    mode: SessionMode = SessionMode.NORMAL,
) -> Resolution:
    """
    Decide what to do with one compared item.

    Args:
        diff: Comparison result.
        strategy: Conflict strategy for the run.
        mode: Current interactive session mode, consulted by ``ask`` only.

    Returns:
        A Decision, or NeedsInput when a human must choose.

    Raises:
        ConflictError: On a conflict under the ``fail`` strategy.
    """
    classification = diff.classification

    if classification == Classification.IDENTICAL:
        return Decision.skip(REASON_IDENTICAL)

    is_conflict = classification == Classification.CONFLICT

    if strategy == ConflictStrategy.FAIL:
        if is_conflict:
            raise ConflictError(diff.name)
        return natural_decision(diff)

    if strategy == ConflictStrategy.OVERWRITE:
        return natural_decision(diff)

    if strategy == ConflictStrategy.SKIP:
        if is_conflict:
            return Decision.skip(REASON_CONFLICT)
        return natural_decision(diff)

    if strategy == ConflictStrategy.NEWER:
        if not is_conflict:
            return natural_decision(diff)
        source_newest = diff.source_newest
        dest_newest = diff.dest_newest
        # Ties keep the destination
        if source_newest is not None and (dest_newest is None or source_newest > dest_newest):
            return natural_decision(diff)
        return Decision.skip(REASON_NOT_OLDER)

    if strategy == ConflictStrategy.ASK:
        if is_conflict:
            return NeedsInput(f"{diff.name} differs on both sides")
        if mode == SessionMode.APPROVE_ALL:
            return natural_decision(diff)
        if mode == SessionMode.SKIP_ALL:
            return Decision.skip(REASON_USER_SKIPPED)
        return NeedsInput(f"{diff.name} is {classification.value}")

    raise ValueError(f"Unknown conflict strategy: {strategy!r}")
