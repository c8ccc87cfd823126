# CCSync Sync Report
# Counters and per-item outcomes of one sync run

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ccsync.sync.compare import Classification, DiffResult
from ccsync.sync.resolver import REASON_CANCELLED, REASON_IDENTICAL, Decision, DecisionKind


class RunOutcome(str, Enum):
    """How a run ended."""

    COMPLETED = "completed"
    QUIT = "quit"
    INTERRUPTED = "interrupted"
    FAILED = "failed"


EXIT_CODES = {
    RunOutcome.COMPLETED: 0,
    RunOutcome.QUIT: 0,
    RunOutcome.INTERRUPTED: 130,
    RunOutcome.FAILED: 1,
}


@dataclass(frozen=True)
class ItemOutcome:
    """What happened to one item."""

    category: str
    relative_path: str
    decision: Decision
    classification: Optional[Classification] = None

    @property
    def name(self) -> str:
        return f"{self.category}/{self.relative_path}"


@dataclass
class SyncReport:
    """
    Result of a sync run, built item by item.

    File decisions count once. Directory updates count each entry, with
    unchanged entries counted as skipped "identical content". Directory
    creates and deletes count once for the whole directory.
    """

    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    conflicts: int = 0
    skip_reasons: dict[str, int] = field(default_factory=dict)
    outcomes: list[ItemOutcome] = field(default_factory=list)
    outcome: RunOutcome = RunOutcome.COMPLETED
    error: Optional[str] = None
    finalized: bool = False

    def _check_open(self) -> None:
        if self.finalized:
            raise RuntimeError("Sync report is finalized")

    def _count(self, kind: DecisionKind, reason: str = "") -> None:
        if kind == DecisionKind.CREATE:
            self.created += 1
        elif kind == DecisionKind.UPDATE:
            self.updated += 1
        elif kind == DecisionKind.DELETE:
            self.deleted += 1
        elif kind == DecisionKind.SKIP:
            self.skipped += 1
            self.skip_reasons[reason] = self.skip_reasons.get(reason, 0) + 1

    def record(self, diff: DiffResult, decision: Decision) -> None:
        """
        Record the decision taken for one compared item.

        Args:
            diff: Comparison result.
            decision: Decision that was applied (or would be, in dry-run).
        """
        self._check_open()
        classification = diff.classification

        if classification == Classification.CONFLICT:
            self.conflicts += 1

        if decision.is_directory_update:
            for _entry, kind in sorted(decision.entries.items()):
                self._count(kind, REASON_IDENTICAL)
        else:
            self._count(decision.kind, decision.reason)

        self.outcomes.append(
            ItemOutcome(
                category=diff.category,
                relative_path=diff.relative_path,
                decision=decision,
                classification=classification,
            )
        )

    def record_cancelled(self, category: str, relative_path: str) -> None:
        """Record an item left untouched because the run was stopped."""
        self._check_open()
        decision = Decision.skip(REASON_CANCELLED)
        self._count(decision.kind, decision.reason)
        self.outcomes.append(ItemOutcome(category=category, relative_path=relative_path, decision=decision))

    def finalize(self, outcome: RunOutcome = RunOutcome.COMPLETED, error: Optional[str] = None) -> "SyncReport":
        """Mark the report complete. Later records raise RuntimeError."""
        self._check_open()
        self.outcome = outcome
        self.error = error
        self.finalized = True
        return self

    @property
    def total_operations(self) -> int:
        return self.created + self.updated + self.deleted

    @property
    def is_success(self) -> bool:
        return self.outcome == RunOutcome.COMPLETED

    @property
    def partial(self) -> bool:
        """True if the run stopped before every item was processed."""
        return self.outcome != RunOutcome.COMPLETED

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.outcome]

    def summary_lines(self) -> list[str]:
        """
        Human-readable summary.

        Returns:
            Lines such as ``Created:  2`` and ``Status: ✓ Success``.
        """
        skipped = f"Skipped:  {self.skipped}"
        if self.skip_reasons:
            tally = sorted(self.skip_reasons.items(), key=lambda kv: (-kv[1], kv[0]))
            skipped += " (" + ", ".join(f"{reason}: {count}" for reason, count in tally) + ")"

        lines = [
            f"Created:  {self.created}",
            f"Updated:  {self.updated}",
            f"Deleted:  {self.deleted}",
            skipped,
            f"Conflicts: {self.conflicts}",
            "",
            f"Total operations: {self.total_operations}",
        ]

        if self.outcome == RunOutcome.COMPLETED:
            lines.append("Status: ✓ Success")
        elif self.outcome == RunOutcome.QUIT:
            lines.append("Status: ⚠ Cancelled by user (partial)")
        elif self.outcome == RunOutcome.INTERRUPTED:
            lines.append("Status: ⚠ Interrupted (partial)")
        else:
            lines.append(f"Status: ✗ Failed: {self.error} (partial)" if self.error else "Status: ✗ Failed (partial)")
        return lines
