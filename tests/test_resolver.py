# CCSync Resolver Tests
# Tests for conflict strategies and session-mode handling

from pathlib import PurePosixPath

import pytest

from ccsync.config.schema import ConflictStrategy
from ccsync.errors import ConflictError
from ccsync.sync.compare import DiffResult, EntryDiff, EntryStatus
from ccsync.sync.resolver import (
    Decision,
    DecisionKind,
    NeedsInput,
    SessionMode,
    natural_decision,
    resolve,
)


def _make_diff(
    statuses: dict,
    *,
    is_directory: bool = False,
    source_present: bool = True,
    dest_present: bool = True,
    source_mtime: float = 100.0,
    dest_mtime: float = 100.0,
) -> DiffResult:
    """Build a DiffResult directly from entry statuses."""
    entries = {}
    for path, status in statuses.items():
        entries[path] = EntryDiff(
            path=path,
            status=status,
            source_mtime=None if status == EntryStatus.REMOVED else source_mtime,
            dest_mtime=None if status == EntryStatus.ADDED else dest_mtime,
        )
    relative_path = "s" if is_directory else next(iter(statuses))
    return DiffResult(
        category="skills" if is_directory else "agents",
        relative_path=relative_path,
        is_directory=is_directory,
        source_path=PurePosixPath("/src") / relative_path,
        dest_path=PurePosixPath("/dst") / relative_path,
        source_present=source_present,
        dest_present=dest_present,
        entries=entries,
    )


def _identical():
    return _make_diff({"a.md": EntryStatus.UNCHANGED})


def _new_file():
    return _make_diff({"a.md": EntryStatus.ADDED}, dest_present=False)


def _deleted_file():
    return _make_diff({"a.md": EntryStatus.REMOVED}, source_present=False)


def _conflict_file(source_mtime=100.0, dest_mtime=100.0):
    return _make_diff({"a.md": EntryStatus.MODIFIED}, source_mtime=source_mtime, dest_mtime=dest_mtime)


def _mergeable_dir():
    return _make_diff(
        {"SKILL.md": EntryStatus.UNCHANGED, "scripts/check.sh": EntryStatus.ADDED},
        is_directory=True,
    )


def _conflict_dir():
    return _make_diff(
        {"SKILL.md": EntryStatus.MODIFIED, "old.md": EntryStatus.REMOVED},
        is_directory=True,
    )


CONFLICT_SHAPES = [
    _conflict_file,
    _conflict_dir,
    lambda: _make_diff({"new.md": EntryStatus.ADDED, "old.md": EntryStatus.REMOVED}, is_directory=True),
]


class TestIdentical:
    """Identical items are skipped whatever the strategy."""

    @pytest.mark.parametrize("strategy", list(ConflictStrategy))
    @pytest.mark.parametrize("mode", list(SessionMode))
    def test_always_skipped(self, strategy, mode):
        decision = resolve(_identical(), strategy, mode)

        assert decision == Decision.skip("identical content")


class TestFail:
    """The fail strategy."""

    @pytest.mark.parametrize("make", CONFLICT_SHAPES)
    def test_conflict_never_yields_a_decision(self, make):
        diff = make()

        with pytest.raises(ConflictError) as exc_info:
            resolve(diff, ConflictStrategy.FAIL)

        assert diff.name in exc_info.value.message

    def test_new_item_is_not_fatal(self):
        assert resolve(_new_file(), ConflictStrategy.FAIL) == Decision.create()

    def test_deleted_item_is_not_fatal(self):
        assert resolve(_deleted_file(), ConflictStrategy.FAIL) == Decision.delete()

    def test_mergeable_directory_is_not_fatal(self):
        decision = resolve(_mergeable_dir(), ConflictStrategy.FAIL)

        assert decision.kind == DecisionKind.MERGE_DIRECTORY


class TestOverwrite:
    """The overwrite strategy."""

    def test_file_conflict_updates(self):
        assert resolve(_conflict_file(), ConflictStrategy.OVERWRITE) == Decision.update()

    def test_directory_conflict_overwrites_per_entry(self):
        decision = resolve(_conflict_dir(), ConflictStrategy.OVERWRITE)

        assert decision.kind == DecisionKind.OVERWRITE_DIRECTORY
        assert decision.entries == {"SKILL.md": DecisionKind.UPDATE, "old.md": DecisionKind.DELETE}

    def test_mergeable_directory(self):
        decision = resolve(_mergeable_dir(), ConflictStrategy.OVERWRITE)

        assert decision == Decision.merge_directory(
            {"SKILL.md": DecisionKind.SKIP, "scripts/check.sh": DecisionKind.CREATE}
        )
        assert decision.is_directory_update


class TestSkip:
    """The skip strategy."""

    @pytest.mark.parametrize("make", CONFLICT_SHAPES)
    def test_conflicts_are_skipped(self, make):
        assert resolve(make(), ConflictStrategy.SKIP) == Decision.skip("conflict")

    def test_new_item_is_created(self):
        assert resolve(_new_file(), ConflictStrategy.SKIP) == Decision.create()


class TestNewer:
    """The newer strategy."""

    def test_newer_source_wins(self):
        decision = resolve(_conflict_file(source_mtime=200.0, dest_mtime=100.0), ConflictStrategy.NEWER)

        assert decision == Decision.update()

    def test_equal_mtime_keeps_destination(self):
        decision = resolve(_conflict_file(source_mtime=100.0, dest_mtime=100.0), ConflictStrategy.NEWER)

        assert decision == Decision.skip("destination not older")

    def test_newer_destination_is_kept(self):
        decision = resolve(_conflict_file(source_mtime=100.0, dest_mtime=200.0), ConflictStrategy.NEWER)

        assert decision.is_skip

    def test_directory_uses_latest_differing_entry(self):
        diff = _conflict_dir()
        diff.entries["SKILL.md"] = EntryDiff("SKILL.md", EntryStatus.MODIFIED, source_mtime=300.0, dest_mtime=100.0)

        decision = resolve(diff, ConflictStrategy.NEWER)

        assert decision.kind == DecisionKind.OVERWRITE_DIRECTORY


class TestAsk:
    """The ask strategy and session modes."""

    @pytest.mark.parametrize("mode", list(SessionMode))
    def test_conflict_always_needs_input(self, mode):
        assert isinstance(resolve(_conflict_file(), ConflictStrategy.ASK, mode), NeedsInput)

    def test_new_item_needs_input_in_normal_mode(self):
        assert isinstance(resolve(_new_file(), ConflictStrategy.ASK), NeedsInput)

    def test_approve_all_takes_natural_decision(self):
        decision = resolve(_new_file(), ConflictStrategy.ASK, SessionMode.APPROVE_ALL)

        assert decision == Decision.create()

    def test_skip_all_skips(self):
        decision = resolve(_deleted_file(), ConflictStrategy.ASK, SessionMode.SKIP_ALL)

        assert decision == Decision.skip("user skipped")


class TestNaturalDecision:
    """Decision that makes the destination match the source."""

    def test_mapping(self):
        assert natural_decision(_new_file()).kind == DecisionKind.CREATE
        assert natural_decision(_deleted_file()).kind == DecisionKind.DELETE
        assert natural_decision(_conflict_file()).kind == DecisionKind.UPDATE
        assert natural_decision(_conflict_dir()).kind == DecisionKind.OVERWRITE_DIRECTORY
        assert natural_decision(_mergeable_dir()).kind == DecisionKind.MERGE_DIRECTORY
        assert natural_decision(_identical()).is_skip
