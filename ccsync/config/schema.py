# CCSync Configuration Schema
# Pydantic models for YAML configuration validation

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ConflictStrategy(str, Enum):
    """How conflicting items are resolved without human input."""

    FAIL = "fail"
    OVERWRITE = "overwrite"
    SKIP = "skip"
    NEWER = "newer"
    ASK = "ask"


class SyncDirection(str, Enum):
    """Direction of a sync run."""

    TO_LOCAL = "to-local"
    TO_GLOBAL = "to-global"


class ItemKind(str, Enum):
    """Shape of the items in a category."""

    FILE = "file"
    DIRECTORY = "directory"


class FileType(str, Enum):
    """File type a sync rule applies to."""

    TEXT = "text"
    BINARY = "binary"
    SYMLINK = "symlink"
    ANY = "any"


class CategoryConfig(BaseModel):
    """Configuration for a single sync category."""

    enabled: bool = Field(default=True, description="Whether this category is synced")
    description: str = Field(default="", description="Human-readable description")
    path: str = Field(description="Category directory, relative to the global/local root")
    item_kind: ItemKind = Field(default=ItemKind.FILE, description="Type of items")
    item_pattern: str | None = Field(default=None, description="Glob pattern for file items (e.g., *.md)")
    item_marker: str | None = Field(
        default=None, description="File that marks a valid directory item (e.g., SKILL.md)"
    )
    recursive: bool = Field(default=False, description="Descend into sub-directories for file items")

    @field_validator("path")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        """Category paths are relative and never empty."""
        v = v.strip("/")
        if not v:
            raise ValueError("category path cannot be empty")
        return v


class SyncRule(BaseModel):
    """
    Per-path include or exclude rule, optionally limited by direction and file type.

    Rules are checked after the ignore and include lists, in order, and the
    last matching rule wins.
    """

    patterns: list[str] = Field(default_factory=list, description="Glob patterns the rule applies to")
    direction: SyncDirection | None = Field(default=None, description="Only apply in this direction")
    file_type: FileType = Field(default=FileType.ANY, description="Only apply to this kind of file")
    include: bool = Field(default=True, description="Sync matching files (true) or skip them (false)")


class CcsyncConfig(BaseModel):
    """Root configuration model for ccsync."""

    categories: dict[str, CategoryConfig] = Field(default_factory=dict, description="Sync category definitions")
    ignore: list[str] = Field(default_factory=list, description="Patterns to exclude from sync")
    include: list[str] = Field(default_factory=list, description="Patterns that override ignores")
    conflict_strategy: ConflictStrategy | None = Field(default=None, description="Default conflict strategy")
    dry_run: bool = Field(default=False, description="Preview changes without applying")
    non_interactive: bool = Field(default=False, description="Approve every pending item without prompting")
    verbose: bool = Field(default=False, description="Enable verbose output")
    follow_symlinks: bool = Field(default=False, description="Sync symlinks as the files they point to")
    preserve_symlinks: bool = Field(default=False, description="Sync symlinks as symlinks")
    rules: list[SyncRule] = Field(default_factory=list, description="Direction and file-type rules")
    global_path: str = Field(default="~/.claude", description="Global root directory")
    local_path: str = Field(default=".claude", description="Project-local root directory")

    @field_validator("ignore", "include")
    @classmethod
    def reject_empty_patterns(cls, v: list[str]) -> list[str]:
        """Empty patterns would match nothing useful."""
        for pattern in v:
            if not pattern.strip():
                raise ValueError("pattern cannot be empty")
        return v

    @field_validator("global_path", "local_path")
    @classmethod
    def expand_paths(cls, v: str) -> str:
        """Expand ~ in paths."""
        return str(Path(v).expanduser())

    @model_validator(mode="after")
    def check_consistency(self) -> "CcsyncConfig":
        """Reject symlink settings that contradict each other and empty rules."""
        if self.follow_symlinks and self.preserve_symlinks:
            raise ValueError("Conflicting configuration: both follow_symlinks and preserve_symlinks are enabled")
        for idx, rule in enumerate(self.rules, start=1):
            if not rule.patterns:
                raise ValueError(f"Rule #{idx} has no patterns")
            if any(not pattern.strip() for pattern in rule.patterns):
                raise ValueError(f"Rule #{idx} has empty pattern")
        return self

    def get_enabled_categories(self) -> dict[str, CategoryConfig]:
        """Return only enabled categories."""
        return {name: cat for name, cat in self.categories.items() if cat.enabled}

    def get_category(self, name: str) -> CategoryConfig | None:
        """Get a category by name."""
        return self.categories.get(name)


class RunOptions(BaseModel):
    """Resolved, immutable settings for one sync run."""

    model_config = ConfigDict(frozen=True)

    types: tuple[str, ...] = Field(default=(), description="Category filter; empty means all enabled")
    strategy: ConflictStrategy = Field(default=ConflictStrategy.ASK, description="Conflict strategy")
    dry_run: bool = Field(default=False, description="Compute and report, never apply")
    yes_all: bool = Field(default=False, description="Start the session in approve-all mode")
    verbose: bool = Field(default=False, description="Report every item outcome")
    direction: SyncDirection | None = Field(default=None, description="Run direction, used by directional rules")
    preserve_symlinks: bool = Field(default=False, description="Copy symlinks as symlinks")
