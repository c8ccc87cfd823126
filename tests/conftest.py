# CCSync Test Fixtures
# Pytest fixtures for ccsync tests

import copy
import tempfile
from collections.abc import Generator
from pathlib import Path, PurePosixPath

import pytest

from ccsync.config.defaults import DEFAULT_CONFIG
from ccsync.config.schema import CcsyncConfig
from ccsync.errors import SyncIOError
from ccsync.sync.fileio import FileMetadata


class MemoryFileIO:
    """
    In-memory FileIO double.

    Files map to (bytes, mtime). Every copy without an explicit mtime gets
    a fresh, increasing timestamp.
    """

    def __init__(self):
        self.files: dict[PurePosixPath, tuple[bytes, float]] = {}
        self.dirs: set[PurePosixPath] = {PurePosixPath("/")}
        self.fail_paths: set[PurePosixPath] = set()
        self.writes: list[PurePosixPath] = []
        self.deletes: list[PurePosixPath] = []
        self.symlinks: set[PurePosixPath] = set()
        self._clock = 1000.0

    # Test helpers

    def add(self, path, content: str | bytes = "", mtime: float | None = None) -> PurePosixPath:
        path = PurePosixPath(path)
        data = content.encode("utf-8") if isinstance(content, str) else content
        if mtime is None:
            self._clock += 1
            mtime = self._clock
        self.files[path] = (data, mtime)
        self.dirs.update(path.parents)
        return path

    def mkdir(self, path) -> None:
        path = PurePosixPath(path)
        self.dirs.add(path)
        self.dirs.update(path.parents)

    def text(self, path) -> str:
        return self.files[PurePosixPath(path)][0].decode("utf-8")

    def snapshot(self) -> dict:
        return {"files": dict(self.files), "dirs": set(self.dirs)}

    # FileIO

    def read(self, path) -> bytes:
        path = PurePosixPath(path)
        if path in self.fail_paths or path not in self.files:
            raise SyncIOError(f"Cannot read {path}", path)
        return self.files[path][0]

    def write(self, path, data: bytes) -> None:
        path = PurePosixPath(path)
        if path in self.fail_paths:
            raise SyncIOError(f"Cannot write {path}", path)
        self.writes.append(path)
        self.add(path, data)

    def copy_file(self, source, dest) -> None:
        source = PurePosixPath(source)
        dest = PurePosixPath(dest)
        if dest in self.fail_paths:
            raise SyncIOError(f"Cannot copy {source} to {dest}", dest)
        data = self.read(source)
        self.writes.append(dest)
        self.add(dest, data)

    def copy_tree(self, source, dest, entries) -> None:
        for entry in entries:
            self.copy_file(PurePosixPath(source) / entry, PurePosixPath(dest) / entry)

    def delete(self, path) -> None:
        path = PurePosixPath(path)
        if path in self.fail_paths or not self.exists(path):
            raise SyncIOError(f"Cannot delete {path}", path)
        self.deletes.append(path)
        self.files.pop(path, None)
        for f in [f for f in self.files if path in f.parents]:
            del self.files[f]
        self.dirs = {d for d in self.dirs if d != path and path not in d.parents}

    def metadata(self, path) -> FileMetadata:
        path = PurePosixPath(path)
        if path in self.files:
            data, mtime = self.files[path]
            return FileMetadata(is_dir=False, mtime=mtime, size=len(data), is_symlink=path in self.symlinks)
        if path in self.dirs:
            return FileMetadata(is_dir=True, mtime=0.0)
        raise SyncIOError(f"Cannot stat {path}", path)

    def exists(self, path) -> bool:
        path = PurePosixPath(path)
        return path in self.files or path in self.dirs

    def list_dir(self, path) -> list[str]:
        path = PurePosixPath(path)
        if path in self.fail_paths or path not in self.dirs:
            raise SyncIOError(f"Cannot list {path}", path)
        children = {p.name for p in self.files if p.parent == path}
        children |= {d.name for d in self.dirs if d.parent == path and d != path}
        return sorted(children)

    def resolve(self, path) -> PurePosixPath:
        return PurePosixPath(path)


class ScriptedPrompt:
    """
    PromptProvider double fed from a list of keys.

    An exception class or instance in the list is raised instead of returned.
    Running out of keys raises EOFError.
    """

    def __init__(self, keys=()):
        self.keys = list(keys)
        self.displayed: list[str] = []
        self.reads = 0

    def read_key(self) -> str:
        self.reads += 1
        if not self.keys:
            raise EOFError
        key = self.keys.pop(0)
        if isinstance(key, BaseException) or (isinstance(key, type) and issubclass(key, BaseException)):
            raise key
        return key

    def display(self, text: str) -> None:
        self.displayed.append(text)

    @property
    def output(self) -> str:
        return "\n".join(self.displayed)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory with no ccsync configuration."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CCSYNC_CONFIG", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    return home


@pytest.fixture
def memory_io() -> MemoryFileIO:
    """Empty in-memory filesystem."""
    return MemoryFileIO()


@pytest.fixture
def make_io():
    """Factory for independent in-memory filesystems."""
    return MemoryFileIO


@pytest.fixture
def make_prompt():
    """Factory for scripted prompts: ``make_prompt(["y", "q"])``."""
    return ScriptedPrompt


@pytest.fixture
def default_config() -> CcsyncConfig:
    """Built-in configuration without any files."""
    return CcsyncConfig.model_validate(copy.deepcopy(DEFAULT_CONFIG))


@pytest.fixture
def categories(default_config: CcsyncConfig) -> dict:
    """Built-in category configurations by name."""
    return default_config.categories


@pytest.fixture
def claude_roots(temp_dir: Path) -> tuple[Path, Path]:
    """On-disk global and local roots with sample items in the global one."""
    global_root = temp_dir / "global" / ".claude"
    local_root = temp_dir / "project" / ".claude"

    (global_root / "agents").mkdir(parents=True)
    (global_root / "agents" / "reviewer.md").write_text("# Reviewer\n\nReview code.\n", encoding="utf-8")

    skill = global_root / "skills" / "rust-dev"
    (skill / "scripts").mkdir(parents=True)
    (skill / "SKILL.md").write_text("---\nname: rust-dev\n---\n\n# Rust\n", encoding="utf-8")
    (skill / "scripts" / "check.sh").write_text("#!/bin/sh\ncargo check\n", encoding="utf-8")

    (global_root / "commands" / "git").mkdir(parents=True)
    (global_root / "commands" / "git" / "commit.md").write_text("# Commit\n", encoding="utf-8")

    local_root.mkdir(parents=True)
    return global_root, local_root
