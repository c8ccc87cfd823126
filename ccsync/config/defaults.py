# CCSync Default Configuration
# Built-in categories and the YAML generator for `ccsync config init`

from typing import Any

import yaml

DEFAULT_CATEGORIES: dict[str, dict[str, Any]] = {
    # Agents - flat *.md files
    "agents": {
        "enabled": True,
        "description": "Claude Code agents - single .md files",
        "path": "agents",
        "item_kind": "file",
        "item_pattern": "*.md",
        "recursive": False,
    },
    # Skills - directories with SKILL.md
    "skills": {
        "enabled": True,
        "description": "Claude Code skills - directories with SKILL.md",
        "path": "skills",
        "item_kind": "directory",
        "item_marker": "SKILL.md",
    },
    # Commands - *.md files, sub-directories organise
    "commands": {
        "enabled": True,
        "description": "Claude Code commands - .md files, nested folders allowed",
        "path": "commands",
        "item_kind": "file",
        "item_pattern": "*.md",
        "recursive": True,
    },
}

DEFAULT_IGNORE: list[str] = [
    # System files
    ".DS_Store",
    "*.swp",
    "*.swo",
    "*~",
    ".git",
    "__pycache__",
    "*.pyc",
    # SECURITY: never sync secrets
    ".env",
    "*.pem",
    "*.key",
    "*secret*",
    "*credential*",
]

DEFAULT_CONFIG: dict[str, Any] = {
    "categories": DEFAULT_CATEGORIES,
    "ignore": DEFAULT_IGNORE,
    "include": [],
    "conflict_strategy": "ask",
    "dry_run": False,
    "non_interactive": False,
    "verbose": False,
    "follow_symlinks": False,
    "preserve_symlinks": False,
    "rules": [],
    "global_path": "~/.claude",
    "local_path": ".claude",
}


def generate_default_config() -> str:
    """
    Generate the default configuration as commented YAML.

    Returns:
        YAML text suitable for ~/.config/ccsync/config.yaml.
    """
    header = (
        "# ccsync configuration\n"
        "#\n"
        "# Precedence (highest first): --config, .ccsync.local, .ccsync, this file.\n"
        "# Lists are additive across files, booleans are OR-ed, scalars take\n"
        "# the highest-precedence value.\n"
        "#\n"
        "# conflict_strategy: fail | overwrite | skip | newer | ask\n"
        "#\n"
        "# rules: later rules win, e.g.\n"
        "#   - patterns: [\"skills/*/assets/**\"]\n"
        "#     direction: to-global   # to-local | to-global, omit for both\n"
        "#     file_type: binary      # text | binary | symlink | any\n"
        "#     include: false\n\n"
    )
    body = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return header + body
