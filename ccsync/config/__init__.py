# CCSync Configuration Module
# Handles YAML-based configuration discovery, merging, validation, and defaults

from ccsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from ccsync.config.loader import (
    build_run_options,
    discover_config_files,
    ensure_config_exists,
    get_config_path,
    load_config,
    merge_config_data,
    resolve_roots,
    validate_config_file,
)
from ccsync.config.schema import (
    CategoryConfig,
    CcsyncConfig,
    ConflictStrategy,
    FileType,
    ItemKind,
    RunOptions,
    SyncDirection,
    SyncRule,
)

__all__ = [
    # Schema
    "CcsyncConfig",
    "CategoryConfig",
    "ConflictStrategy",
    "FileType",
    "ItemKind",
    "RunOptions",
    "SyncDirection",
    "SyncRule",
    # Loader
    "load_config",
    "discover_config_files",
    "merge_config_data",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    "build_run_options",
    "resolve_roots",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
