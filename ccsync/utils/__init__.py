# CCSync Utilities Module
# Helper functions for path handling and pattern matching

from ccsync.utils.paths import (
    atomic_write,
    ensure_dir,
    expand_path,
    is_excluded,
    matches_any_pattern,
    matches_path,
    matches_pattern,
    safe_copy,
    safe_delete,
)

__all__ = [
    "expand_path",
    "safe_copy",
    "safe_delete",
    "ensure_dir",
    "atomic_write",
    "matches_pattern",
    "matches_any_pattern",
    "matches_path",
    "is_excluded",
]
