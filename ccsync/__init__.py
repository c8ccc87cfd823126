"""ccsync - sync Claude Code agents, skills and commands.

Copies configuration artifacts between the global root (~/.claude/) and a
project-local root (./.claude/), with per-item approval and conflict
strategies.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncReport",
    "LocalFileIO",
    "InteractiveSession",
    "CcsyncConfig",
    "load_config",
    "compare",
    "resolve",
    "render",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "SyncReport", "LocalFileIO", "InteractiveSession", "compare", "resolve"):
        from ccsync import sync

        return getattr(sync, name)
    if name in ("CcsyncConfig", "load_config"):
        from ccsync import config

        return getattr(config, name)
    if name == "render":
        from ccsync.output.diff import render

        return render
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
