# CCSync Sync Engine
# Orchestrates scan, compare, resolve, prompt, apply and record per item

from collections.abc import Callable
from typing import Optional

from ccsync.config.schema import CategoryConfig, CcsyncConfig, RunOptions
from ccsync.errors import Cancelled, ConflictError, SyncIOError
from ccsync.sync.actions import apply_decision
from ccsync.sync.compare import DiffResult, compare
from ccsync.sync.fileio import FileIO
from ccsync.sync.item import ItemPair, scan_pairs
from ccsync.sync.report import ItemOutcome, RunOutcome, SyncReport
from ccsync.sync.resolver import Decision, NeedsInput, SessionMode, resolve
from ccsync.sync.session import InteractiveSession


class SyncEngine:
    """
    Main synchronization engine.

    Items are processed one at a time, ordered by category name and then by
    relative path. Dry-run computes and records every decision but never
    applies one, so its report equals a real run's.
    """

    def __init__(
        self,
        config: CcsyncConfig,
        options: RunOptions,
        io: FileIO,
        session: Optional[InteractiveSession] = None,
        *,
        on_item: Optional[Callable[[ItemOutcome], None]] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: Merged configuration (categories and filters).
            options: Frozen run options.
            io: Filesystem boundary.
            session: Interactive session, required for the ``ask`` strategy.
            on_item: Called with each recorded outcome.
        """
        self.config = config
        self.options = options
        self.io = io
        self.session = session
        self.on_item = on_item

    def get_categories(self) -> dict[str, CategoryConfig]:
        """Enabled categories selected by the run options, in name order."""
        enabled = self.config.get_enabled_categories()
        names = self.options.types or tuple(enabled)
        return {name: enabled[name] for name in sorted(names) if name in enabled}

    def plan(self, source_root, dest_root) -> list[ItemPair]:
        """
        Scan every selected category on both sides.

        Raises:
            SyncIOError: If a category root cannot be listed.
        """
        pairs: list[ItemPair] = []
        for name, category in self.get_categories().items():
            pairs.extend(
                scan_pairs(
                    source_root,
                    dest_root,
                    name,
                    category,
                    self.io,
                    ignore=tuple(self.config.ignore),
                    include=tuple(self.config.include),
                    rules=tuple(self.config.rules),
                    direction=self.options.direction,
                )
            )
        return pairs

    def compare_all(self, source_root, dest_root) -> list[DiffResult]:
        """Compare every item without resolving or applying anything."""
        return [compare(pair, self.io) for pair in self.plan(source_root, dest_root)]

    def _decide(self, diff: DiffResult) -> Decision:
        mode = self.session.mode if self.session is not None else SessionMode.NORMAL
        resolution = resolve(diff, self.options.strategy, mode)
        if isinstance(resolution, NeedsInput):
            if self.session is None:
                raise RuntimeError(f"Interactive input required for {diff.name}")
            return self.session.decide(diff)
        return resolution

    def _cancel(self, report: SyncReport, remaining: list[ItemPair], *, interrupted: bool) -> SyncReport:
        for pair in remaining:
            report.record_cancelled(pair.category, pair.relative_path)
        return report.finalize(RunOutcome.INTERRUPTED if interrupted else RunOutcome.QUIT)

    def run(self, source_root, dest_root) -> SyncReport:
        """
        Synchronize ``dest_root`` from ``source_root``.

        Args:
            source_root: Root to copy from.
            dest_root: Root to copy to.

        Returns:
            Finalized report. Quit and interrupt return a partial report with
            the untouched items recorded as skipped "cancelled". An interrupt
            while scanning returns an empty interrupted report.

        Raises:
            ConflictError: Conflict under the ``fail`` strategy.
            SyncIOError: Unreadable root or failed apply.
            Both carry the finalized partial report in ``report``.
        """
        report = SyncReport()

        try:
            pairs = self.plan(source_root, dest_root)
        except KeyboardInterrupt:
            return report.finalize(RunOutcome.INTERRUPTED)
        except SyncIOError as exc:
            exc.report = report.finalize(RunOutcome.FAILED, exc.message)
            raise

        for index, pair in enumerate(pairs):
            try:
                diff = compare(pair, self.io)
                decision = self._decide(diff)
                if not self.options.dry_run:
                    apply_decision(diff, decision, self.io)
            except Cancelled as exc:
                return self._cancel(report, pairs[index:], interrupted=exc.interrupted)
            except KeyboardInterrupt:
                return self._cancel(report, pairs[index:], interrupted=True)
            except ConflictError as exc:
                report.conflicts += 1
                exc.report = report.finalize(RunOutcome.FAILED, exc.message)
                raise
            except SyncIOError as exc:
                exc.report = report.finalize(RunOutcome.FAILED, exc.message)
                raise

            report.record(diff, decision)
            if self.on_item is not None:
                self.on_item(report.outcomes[-1])

        return report.finalize(RunOutcome.COMPLETED)
