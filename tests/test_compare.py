# CCSync Comparator Tests
# Tests for entry classification and overall item classification

from pathlib import PurePosixPath

from ccsync.sync.compare import Classification, EntryStatus, compare
from ccsync.sync.item import scan_pairs

GLOBAL_ROOT = PurePosixPath("/home/user/.claude")
LOCAL_ROOT = PurePosixPath("/work/project/.claude")


def _diff(io, categories, category: str, rel: str):
    pairs = scan_pairs(GLOBAL_ROOT, LOCAL_ROOT, category, categories[category], io)
    (pair,) = [p for p in pairs if p.relative_path == rel]
    return compare(pair, io)


class TestFileItems:
    """Single-file items."""

    def test_identical_content_with_different_mtime(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "agents" / "a.md", "same", mtime=1.0)
        memory_io.add(LOCAL_ROOT / "agents" / "a.md", "same", mtime=99.0)

        diff = _diff(memory_io, categories, "agents", "a.md")

        assert diff.classification == Classification.IDENTICAL
        assert diff.unchanged == ["a.md"]

    def test_modified_file_is_conflict(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "commands" / "git" / "commit.md", "new")
        memory_io.add(LOCAL_ROOT / "commands" / "git" / "commit.md", "old")

        diff = _diff(memory_io, categories, "commands", "git/commit.md")

        assert diff.classification == Classification.CONFLICT
        # A file item has one synthetic entry keyed by the file name
        assert list(diff.entries) == ["commit.md"]
        assert diff.modified == ["commit.md"]

    def test_destination_absent_is_new(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "agents" / "a.md", "x", mtime=5.0)

        diff = _diff(memory_io, categories, "agents", "a.md")

        assert diff.classification == Classification.NEW
        assert diff.added == ["a.md"]
        assert diff.source_newest == 5.0
        assert diff.dest_newest is None

    def test_source_absent_is_deleted(self, memory_io, categories):
        memory_io.add(LOCAL_ROOT / "agents" / "gone.md", "x")

        diff = _diff(memory_io, categories, "agents", "gone.md")

        assert diff.classification == Classification.DELETED
        assert diff.removed == ["gone.md"]


class TestDirectoryItems:
    """Marker-qualified directory items."""

    def test_added_entry_only_is_mergeable(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "skills" / "rust-dev" / "SKILL.md", "skill")
        memory_io.add(GLOBAL_ROOT / "skills" / "rust-dev" / "scripts" / "check.sh", "cargo check")
        memory_io.add(LOCAL_ROOT / "skills" / "rust-dev" / "SKILL.md", "skill")

        diff = _diff(memory_io, categories, "skills", "rust-dev")

        assert diff.added == ["scripts/check.sh"]
        assert diff.unchanged == ["SKILL.md"]
        assert diff.modified == []
        assert diff.removed == []
        assert diff.classification == Classification.MERGEABLE
        assert not diff.is_conflict

    def test_added_and_removed_is_conflict(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "skills" / "s" / "SKILL.md", "skill")
        memory_io.add(GLOBAL_ROOT / "skills" / "s" / "new.md", "n")
        memory_io.add(LOCAL_ROOT / "skills" / "s" / "SKILL.md", "skill")
        memory_io.add(LOCAL_ROOT / "skills" / "s" / "old.md", "o")

        diff = _diff(memory_io, categories, "skills", "s")

        assert diff.classification == Classification.CONFLICT

    def test_every_path_appears_exactly_once(self, memory_io, categories):
        for name in ("SKILL.md", "a.md", "b/c.md"):
            memory_io.add(GLOBAL_ROOT / "skills" / "s" / name, name)
        for name in ("SKILL.md", "b/c.md", "d.md"):
            memory_io.add(LOCAL_ROOT / "skills" / "s" / name, name + "!")

        diff = _diff(memory_io, categories, "skills", "s")

        assert sorted(diff.entries) == ["SKILL.md", "a.md", "b/c.md", "d.md"]
        statuses = {path: entry.status for path, entry in diff.entries.items()}
        assert statuses == {
            "SKILL.md": EntryStatus.MODIFIED,
            "a.md": EntryStatus.ADDED,
            "b/c.md": EntryStatus.MODIFIED,
            "d.md": EntryStatus.REMOVED,
        }

    def test_newest_uses_differing_entries_only(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "skills" / "s" / "SKILL.md", "same", mtime=500.0)
        memory_io.add(GLOBAL_ROOT / "skills" / "s" / "x.md", "source", mtime=10.0)
        memory_io.add(LOCAL_ROOT / "skills" / "s" / "SKILL.md", "same", mtime=900.0)
        memory_io.add(LOCAL_ROOT / "skills" / "s" / "x.md", "dest", mtime=20.0)

        diff = _diff(memory_io, categories, "skills", "s")

        assert diff.source_newest == 10.0
        assert diff.dest_newest == 20.0

    def test_new_directory(self, memory_io, categories):
        memory_io.add(GLOBAL_ROOT / "skills" / "s" / "SKILL.md", "skill")

        diff = _diff(memory_io, categories, "skills", "s")

        assert diff.classification == Classification.NEW
        assert diff.is_directory
        assert diff.dest_file("SKILL.md") == LOCAL_ROOT / "skills" / "s" / "SKILL.md"
