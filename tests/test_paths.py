# CCSync Path Tests
# Tests for pattern matching, atomic writes and the local filesystem boundary

import os
import stat
from pathlib import Path

import pytest

from ccsync.errors import SyncIOError
from ccsync.sync.fileio import LocalFileIO
from ccsync.utils.paths import atomic_write, is_excluded, matches_path, matches_pattern, safe_copy, safe_delete


class TestMatchesPattern:
    """Glob matching."""

    @pytest.mark.parametrize(
        "path,pattern,expected",
        [
            ("agents/a.md", "*.md", True),
            ("agents/a.md", "agents/*", True),
            ("commands/git/commit.md", "commands/**/*.md", True),
            ("commands/git/commit.md", "skills/**", False),
            ("notes.txt", "*.md", False),
            ("A.MD", "*.md", False),
        ],
    )
    def test_patterns(self, path, pattern, expected):
        assert matches_pattern(path, pattern) is expected


class TestIsExcluded:
    """Ignore and include filtering."""

    def test_no_ignore_patterns(self):
        assert is_excluded("agents/.env", []) is False

    def test_component_match(self):
        assert is_excluded("skills/s/__pycache__/x.pyc", ["__pycache__"]) is True

    def test_full_path_match(self):
        assert is_excluded("agents/draft.md", ["agents/draft.md"]) is True

    def test_include_wins(self):
        assert is_excluded("agents/secret-keeper.md", ["*secret*"], ["agents/secret-keeper.md"]) is False

    def test_matches_path_components(self):
        assert matches_path("skills/s/.git/HEAD", [".git"]) is True
        assert matches_path("skills/s/SKILL.md", [".git"]) is False


class TestAtomicWrite:
    """Atomic file writes."""

    def test_creates_parents(self, temp_dir: Path):
        target = temp_dir / "a" / "b" / "file.md"

        atomic_write(target, b"data")

        assert target.read_bytes() == b"data"
        assert [p.name for p in target.parent.iterdir()] == ["file.md"]

    def test_replaces_existing(self, temp_dir: Path):
        target = temp_dir / "file.md"
        target.write_text("old", encoding="utf-8")

        atomic_write(target, "new")

        assert target.read_text(encoding="utf-8") == "new"

    def test_safe_delete_missing(self, temp_dir: Path):
        assert safe_delete(temp_dir / "missing", missing_ok=True) is False
        with pytest.raises(FileNotFoundError):
            safe_delete(temp_dir / "missing")


class TestLocalFileIO:
    """Errors become SyncIOError with the failing path."""

    def test_read_missing(self, temp_dir: Path):
        with pytest.raises(SyncIOError) as exc_info:
            LocalFileIO().read(temp_dir / "missing.md")

        assert exc_info.value.path == temp_dir / "missing.md"

    def test_list_missing(self, temp_dir: Path):
        with pytest.raises(SyncIOError):
            LocalFileIO().list_dir(temp_dir / "missing")

    def test_copy_file_keeps_mode(self, temp_dir: Path):
        source = temp_dir / "src" / "check.sh"
        source.parent.mkdir()
        source.write_text("#!/bin/sh\n", encoding="utf-8")
        source.chmod(0o755)
        dest = temp_dir / "dst" / "scripts" / "check.sh"

        LocalFileIO().copy_file(source, dest)

        assert dest.read_text(encoding="utf-8") == "#!/bin/sh\n"
        assert stat.S_IMODE(dest.stat().st_mode) == 0o755

    def test_copy_file_replaces_existing(self, temp_dir: Path):
        source = temp_dir / "new.md"
        source.write_text("new", encoding="utf-8")
        source.chmod(0o644)
        dest = temp_dir / "old.md"
        dest.write_text("old", encoding="utf-8")
        dest.chmod(0o600)

        LocalFileIO().copy_file(source, dest)

        assert dest.read_text(encoding="utf-8") == "new"
        assert stat.S_IMODE(dest.stat().st_mode) == 0o644
        assert sorted(p.name for p in temp_dir.iterdir()) == ["new.md", "old.md"]

    def test_copy_tree_copies_only_listed_entries(self, temp_dir: Path):
        source = temp_dir / "src"
        (source / "scripts").mkdir(parents=True)
        (source / "SKILL.md").write_text("skill", encoding="utf-8")
        (source / "scripts" / "check.sh").write_text("check", encoding="utf-8")
        (source / ".env").write_text("TOKEN=abc", encoding="utf-8")
        dest = temp_dir / "dst" / "skill"

        LocalFileIO().copy_tree(source, dest, ["SKILL.md", "scripts/check.sh"])

        assert (dest / "scripts" / "check.sh").read_text(encoding="utf-8") == "check"
        assert sorted(p.name for p in dest.iterdir()) == ["SKILL.md", "scripts"]

    def test_write_is_atomic(self, temp_dir: Path):
        target = temp_dir / "out" / "a.md"

        LocalFileIO().write(target, b"data")

        assert target.read_bytes() == b"data"
        assert [p.name for p in target.parent.iterdir()] == ["a.md"]

    def test_copy_file_missing_source(self, temp_dir: Path):
        with pytest.raises(SyncIOError) as exc_info:
            LocalFileIO().copy_file(temp_dir / "missing.md", temp_dir / "out.md")

        assert exc_info.value.path == temp_dir / "out.md"

    def test_delete_directory(self, temp_dir: Path):
        target = temp_dir / "skill"
        (target / "scripts").mkdir(parents=True)
        (target / "scripts" / "x.sh").write_text("x", encoding="utf-8")
        io = LocalFileIO()

        io.delete(target)

        assert not io.exists(target)

    def test_metadata(self, temp_dir: Path):
        target = temp_dir / "a.md"
        target.write_text("abc", encoding="utf-8")

        meta = LocalFileIO().metadata(target)

        assert meta.is_dir is False
        assert meta.size == 3


class TestSafeCopy:
    """Single-file atomic copies."""

    def test_no_temp_file_left(self, temp_dir: Path):
        source = temp_dir / "a.md"
        source.write_text("a", encoding="utf-8")
        dest = temp_dir / "out" / "a.md"

        safe_copy(source, dest)

        assert [p.name for p in dest.parent.iterdir()] == ["a.md"]

    def test_symlink_recreated_when_not_followed(self, temp_dir: Path):
        target = temp_dir / "real.md"
        target.write_text("real", encoding="utf-8")
        link = temp_dir / "link.md"
        link.symlink_to(target)
        dest = temp_dir / "out" / "link.md"

        safe_copy(link, dest, follow_symlinks=False)

        assert dest.is_symlink()
        assert os.readlink(dest) == str(target)


class TestSymlinkModes:
    """Following versus preserving symlinks."""

    @pytest.fixture
    def link(self, temp_dir: Path) -> Path:
        target = temp_dir / "shared" / "agent.md"
        target.parent.mkdir()
        target.write_text("# Shared\n", encoding="utf-8")
        link = temp_dir / "agent.md"
        link.symlink_to(target)
        return link

    def test_followed_by_default(self, link: Path, temp_dir: Path):
        io = LocalFileIO()

        assert io.read(link) == b"# Shared\n"
        assert io.metadata(link).is_symlink is True

        io.copy_file(link, temp_dir / "copy.md")
        assert not (temp_dir / "copy.md").is_symlink()
        assert (temp_dir / "copy.md").read_text(encoding="utf-8") == "# Shared\n"

    def test_preserved(self, link: Path, temp_dir: Path):
        io = LocalFileIO(preserve_symlinks=True)

        assert io.read(link) == os.fsencode(str(temp_dir / "shared" / "agent.md"))
        assert io.metadata(link).is_symlink is True

        io.copy_file(link, temp_dir / "copy.md")
        assert (temp_dir / "copy.md").is_symlink()

    def test_preserved_directory_link_is_a_leaf(self, temp_dir: Path):
        (temp_dir / "real").mkdir()
        (temp_dir / "dirlink").symlink_to(temp_dir / "real")

        assert LocalFileIO().metadata(temp_dir / "dirlink").is_dir is True
        assert LocalFileIO(preserve_symlinks=True).metadata(temp_dir / "dirlink").is_dir is False

    def test_dangling_link(self, temp_dir: Path):
        (temp_dir / "gone").symlink_to(temp_dir / "missing")

        assert LocalFileIO().exists(temp_dir / "gone") is False
        assert LocalFileIO(preserve_symlinks=True).exists(temp_dir / "gone") is True
