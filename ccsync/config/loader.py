# CCSync Configuration Loader
# Discover, merge and validate YAML configuration files

import copy
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ccsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from ccsync.config.schema import CcsyncConfig, ConflictStrategy, RunOptions, SyncDirection
from ccsync.errors import ConfigError
from ccsync.utils.paths import atomic_write, expand_path

PROJECT_CONFIG_NAME = ".ccsync"
PROJECT_LOCAL_CONFIG_NAME = ".ccsync.local"


def get_config_dir() -> Path:
    """Get the ccsync configuration directory."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / "ccsync"


def get_config_path() -> Path:
    """Get the path to the global configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("CCSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def ensure_config_exists(*, force: bool = False) -> tuple[Path, bool]:
    """
    Ensure the global configuration file exists, creating the default if needed.

    Args:
        force: Overwrite an existing file.

    Returns:
        Tuple of (config_path, was_created).
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write(config_path, generate_default_config())
    return config_path, True


def _find_upwards(name: str, start: Path) -> Optional[Path]:
    """Return the nearest file called ``name`` in ``start`` or its parents."""
    for directory in (start, *start.parents):
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def discover_config_files(
    cli_path: Optional[Path] = None,
    *,
    no_config: bool = False,
    cwd: Optional[Path] = None,
) -> list[Path]:
    """
    Find configuration files, lowest precedence first.

    Order: global file, ``.ccsync``, ``.ccsync.local``, then the file given
    with ``--config``. Project files are searched from ``cwd`` upwards.

    Args:
        cli_path: Explicit file from the command line.
        no_config: Ignore every configuration file.
        cwd: Starting directory for project files (default: current directory).

    Returns:
        Existing configuration files in merge order.

    Raises:
        ConfigError: If ``cli_path`` does not exist.
    """
    if no_config:
        return []

    start = (cwd or Path.cwd()).absolute()
    files: list[Path] = []

    global_path = get_config_path()
    if global_path.is_file():
        files.append(global_path)

    for name in (PROJECT_CONFIG_NAME, PROJECT_LOCAL_CONFIG_NAME):
        found = _find_upwards(name, start)
        if found is not None and found not in files:
            files.append(found)

    if cli_path is not None:
        cli_path = Path(cli_path).expanduser()
        if not cli_path.is_file():
            raise ConfigError(f"Configuration file not found: {cli_path}")
        files.append(cli_path)

    return files


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML file into a mapping."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


def merge_config_data(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Merge a higher-precedence configuration mapping into ``base``.

    Lists are additive (duplicates dropped), booleans are OR-ed, categories are
    merged by name and every other scalar is replaced by the overlay value.

    Args:
        base: Lower-precedence data.
        overlay: Higher-precedence data.

    Returns:
        New merged mapping.
    """
    result = copy.deepcopy(base)

    for key, value in overlay.items():
        current = result.get(key)
        if key == "categories" and isinstance(value, dict):
            categories = dict(current or {})
            for name, cat_data in value.items():
                if name in categories and isinstance(cat_data, dict):
                    categories[name] = {**categories[name], **cat_data}
                else:
                    categories[name] = cat_data
            result[key] = categories
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = current + [v for v in value if v not in current]
        elif isinstance(current, bool) and isinstance(value, bool):
            result[key] = current or value
        else:
            result[key] = copy.deepcopy(value)

    return result


def load_config(
    cli_path: Optional[Path] = None,
    *,
    no_config: bool = False,
    cwd: Optional[Path] = None,
) -> tuple[CcsyncConfig, list[Path]]:
    """
    Load and merge every applicable configuration file over the defaults.

    Args:
        cli_path: Explicit file from ``--config``.
        no_config: Use built-in defaults only.
        cwd: Starting directory for project file discovery.

    Returns:
        Tuple of (validated config, files that were merged).

    Raises:
        ConfigError: If a file is missing, unreadable or invalid.
    """
    files = discover_config_files(cli_path, no_config=no_config, cwd=cwd)

    data = copy.deepcopy(DEFAULT_CONFIG)
    for path in files:
        data = merge_config_data(data, _read_yaml(path))

    try:
        config = CcsyncConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(e)) from e

    return config, files


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file on its own.

    Args:
        config_path: Path to config file to validate (default: global file).

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]
    if not isinstance(data, dict):
        return False, ["Configuration file must contain a mapping"]

    errors: list[str] = []
    try:
        CcsyncConfig.model_validate(merge_config_data(DEFAULT_CONFIG, data))
    except ValidationError as e:
        for error in e.errors():
            errors.append(_format_error_item(error))
        return False, errors

    for name, cat in (data.get("categories") or {}).items():
        if isinstance(cat, dict) and cat.get("item_kind") == "directory" and not cat.get("item_marker"):
            errors.append(f"categories -> {name}: directory categories need an item_marker")

    return len(errors) == 0, errors


def _format_error_item(item) -> str:
    loc = " -> ".join(str(part) for part in item["loc"])
    # Whole-model checks carry no location
    return f"{loc}: {item['msg']}" if loc else item["msg"]


def _format_validation_error(error: ValidationError) -> str:
    lines = ["Invalid configuration:"]
    for item in error.errors():
        lines.append(f"  {_format_error_item(item)}")
    return "\n".join(lines)


def build_run_options(
    config: CcsyncConfig,
    *,
    types: tuple[str, ...] = (),
    strategy: Optional[str] = None,
    dry_run: bool = False,
    yes_all: bool = False,
    verbose: bool = False,
    direction: Optional[SyncDirection] = None,
    preserve_symlinks: bool = False,
) -> RunOptions:
    """
    Combine command-line flags with the merged configuration.

    Args:
        config: Merged configuration.
        types: Category names from ``--type``; ``all`` or empty selects every
            enabled category.
        strategy: Strategy from ``--conflict``; falls back to the configured
            one, then ``ask``.
        dry_run: ``--dry-run`` flag.
        yes_all: ``--yes-all`` flag.
        verbose: ``--verbose`` flag.
        direction: Direction of the run, matched against directional rules.
        preserve_symlinks: ``--preserve-symlinks`` flag.

    Returns:
        Frozen options snapshot for one run.

    Raises:
        ConfigError: If a requested category is unknown or disabled, or if
            ``--preserve-symlinks`` contradicts ``follow_symlinks``.
    """
    enabled = config.get_enabled_categories()
    selected: list[str] = []
    if types and "all" not in types:
        for name in types:
            if name not in enabled:
                available = ", ".join(sorted(enabled)) or "none"
                raise ConfigError(f"Unknown or disabled category: {name} (available: {available})")
            if name not in selected:
                selected.append(name)

    if strategy is not None:
        chosen = ConflictStrategy(strategy)
    else:
        chosen = config.conflict_strategy or ConflictStrategy.ASK

    if preserve_symlinks and config.follow_symlinks:
        raise ConfigError(
            "Conflicting configuration: both follow_symlinks and preserve_symlinks are enabled"
        )

    return RunOptions(
        types=tuple(sorted(selected)),
        strategy=chosen,
        dry_run=dry_run or config.dry_run,
        yes_all=yes_all or config.non_interactive,
        verbose=verbose or config.verbose,
        direction=direction,
        preserve_symlinks=preserve_symlinks or config.preserve_symlinks,
    )


def resolve_roots(
    config: CcsyncConfig,
    *,
    global_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> tuple[Path, Path]:
    """
    Determine the global and local roots.

    Args:
        config: Merged configuration.
        global_path: ``--global-path`` override.
        local_path: ``--local-path`` override.

    Returns:
        Tuple of (global_root, local_root).
    """
    return (
        expand_path(global_path or config.global_path),
        expand_path(local_path or config.local_path),
    )
