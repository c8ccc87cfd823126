"""Click-based CLI for ccsync - sync Claude Code agents, skills and commands."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click

from ccsync import __version__
from ccsync.config import (
    CcsyncConfig,
    SyncDirection,
    build_run_options,
    ensure_config_exists,
    get_config_path,
    load_config,
    resolve_roots,
    validate_config_file,
)
from ccsync.errors import CcsyncError, ConfigError
from ccsync.output.console import Console, ConsolePrompt
from ccsync.output.diff import show_diff
from ccsync.sync import InteractiveSession, LocalFileIO, RunOutcome, SyncEngine

TYPE_HELP = "Category to sync: agents, skills, commands or all (repeatable)"
CONFLICT_CHOICES = ["fail", "overwrite", "skip", "newer", "ask"]


@dataclass
class CliContext:
    """Global options shared by every command."""

    console: Console
    verbose: bool = False
    yes_all: bool = False
    dry_run: bool = False
    global_path: Optional[Path] = None
    local_path: Optional[Path] = None
    config_file: Optional[Path] = None
    no_config: bool = False
    preserve_symlinks: bool = False


def _load(ctx: click.Context) -> tuple[CliContext, CcsyncConfig, list[Path]]:
    """Load the merged configuration or exit with status 1."""
    obj: CliContext = ctx.obj
    try:
        config, files = load_config(obj.config_file, no_config=obj.no_config)
    except ConfigError as e:
        obj.console.print_error(e.message)
        ctx.exit(1)
    return obj, config, files


def _roots(obj: CliContext, config: CcsyncConfig, direction: SyncDirection) -> tuple[Path, Path]:
    """Return (source, destination) for a direction."""
    global_root, local_root = resolve_roots(
        config,
        global_path=str(obj.global_path) if obj.global_path else None,
        local_path=str(obj.local_path) if obj.local_path else None,
    )
    if direction == SyncDirection.TO_LOCAL:
        return global_root, local_root
    return local_root, global_root


def _labels(direction: SyncDirection) -> tuple[str, str]:
    return ("global", "local") if direction == SyncDirection.TO_LOCAL else ("local", "global")


def _run_sync(ctx: click.Context, direction: SyncDirection, types: tuple[str, ...], conflict: Optional[str]) -> None:
    obj, config, _files = _load(ctx)
    console = obj.console

    try:
        options = build_run_options(
            config,
            types=types,
            strategy=conflict,
            dry_run=obj.dry_run,
            yes_all=obj.yes_all,
            verbose=obj.verbose,
            direction=direction,
            preserve_symlinks=obj.preserve_symlinks,
        )
    except ConfigError as e:
        console.print_error(e.message)
        ctx.exit(1)

    console.verbose = options.verbose
    source, dest = _roots(obj, config, direction)
    source_label, dest_label = _labels(direction)

    io = LocalFileIO(preserve_symlinks=options.preserve_symlinks)
    session = InteractiveSession(ConsolePrompt(console), io, yes_all=options.yes_all)
    engine = SyncEngine(
        config,
        options,
        io,
        session,
        on_item=lambda outcome: console.print_item_outcome(outcome, dry_run=options.dry_run),
    )

    if options.dry_run:
        console.print_info("Dry run - no changes will be applied")
    console.print_info(f"Syncing {source_label} ({source}) → {dest_label} ({dest})")

    try:
        report = engine.run(source, dest)
    except CcsyncError as e:
        console.print_error(e.message)
        if e.report is not None:
            console.print_report(e.report, dry_run=options.dry_run)
        ctx.exit(1)

    console.print_report(report, dry_run=options.dry_run)
    if report.outcome == RunOutcome.QUIT:
        console.print_warning("Sync cancelled by user")
    elif report.outcome == RunOutcome.INTERRUPTED:
        console.print_warning("Sync interrupted")
    ctx.exit(report.exit_code)


@click.group()
@click.version_option(version=__version__, prog_name="ccsync")
@click.option("--verbose", "-v", is_flag=True, help="Show every item, including identical ones")
@click.option("--yes-all", "-y", is_flag=True, help="Approve every pending item without prompting")
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--global-path", type=click.Path(path_type=Path), help="Override global root (default: ~/.claude)")
@click.option("--local-path", type=click.Path(path_type=Path), help="Override local root (default: ./.claude)")
@click.option("--config", "config_file", type=click.Path(path_type=Path), help="Use this configuration file")
@click.option("--no-config", is_flag=True, help="Ignore all configuration files")
@click.option("--preserve-symlinks", is_flag=True, help="Copy symlinks as symlinks instead of following them")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    yes_all: bool,
    dry_run: bool,
    global_path: Optional[Path],
    local_path: Optional[Path],
    config_file: Optional[Path],
    no_config: bool,
    preserve_symlinks: bool,
    no_color: bool,
) -> None:
    """ccsync - sync Claude Code agents, skills and commands.

    Copies items between the global root and the project-local root.

    \b
    Agents:   ~/.claude/agents/*.md    <-> .claude/agents/
    Skills:   ~/.claude/skills/<name>/ <-> .claude/skills/
    Commands: ~/.claude/commands/**.md <-> .claude/commands/

    \b
    Interactive keys:
      y = yes, n = no, a = yes to all, s = skip all, d = show diff, q = quit
    """
    colored = not no_color and sys.stdout.isatty()
    ctx.obj = CliContext(
        console=Console(verbose=verbose, colored=colored),
        verbose=verbose,
        yes_all=yes_all,
        dry_run=dry_run,
        global_path=global_path,
        local_path=local_path,
        config_file=config_file,
        no_config=no_config,
        preserve_symlinks=preserve_symlinks,
    )


@cli.command("to-local")
@click.option("--type", "-t", "types", multiple=True, help=TYPE_HELP)
@click.option(
    "--conflict",
    type=click.Choice(CONFLICT_CHOICES),
    default=None,
    help="Conflict strategy (default: from config, else ask)",
)
@click.pass_context
def to_local(ctx: click.Context, types: tuple[str, ...], conflict: Optional[str]) -> None:
    """Sync from the global root into the project-local root."""
    _run_sync(ctx, SyncDirection.TO_LOCAL, types, conflict)


@cli.command("to-global")
@click.option("--type", "-t", "types", multiple=True, help=TYPE_HELP)
@click.option(
    "--conflict",
    type=click.Choice(CONFLICT_CHOICES),
    default=None,
    help="Conflict strategy (default: from config, else ask)",
)
@click.pass_context
def to_global(ctx: click.Context, types: tuple[str, ...], conflict: Optional[str]) -> None:
    """Sync from the project-local root into the global root."""
    _run_sync(ctx, SyncDirection.TO_GLOBAL, types, conflict)


def _compare(ctx: click.Context, direction: str, types: tuple[str, ...]):
    obj, config, _files = _load(ctx)
    sync_direction = SyncDirection(direction)
    try:
        options = build_run_options(
            config,
            types=types,
            verbose=obj.verbose,
            direction=sync_direction,
            preserve_symlinks=obj.preserve_symlinks,
        )
    except ConfigError as e:
        obj.console.print_error(e.message)
        ctx.exit(1)

    obj.console.verbose = options.verbose
    source, dest = _roots(obj, config, sync_direction)
    io = LocalFileIO(preserve_symlinks=options.preserve_symlinks)
    engine = SyncEngine(config, options, io)
    try:
        diffs = engine.compare_all(source, dest)
    except CcsyncError as e:
        obj.console.print_error(e.message)
        ctx.exit(1)
    return obj, io, diffs, _labels(sync_direction)


@cli.command()
@click.option("--type", "-t", "types", multiple=True, help=TYPE_HELP)
@click.option(
    "--direction",
    "-d",
    type=click.Choice([d.value for d in SyncDirection]),
    default=SyncDirection.TO_LOCAL.value,
    help="Which side is the source (default: to-local)",
)
@click.pass_context
def status(ctx: click.Context, types: tuple[str, ...], direction: str) -> None:
    """Show how each item differs between the roots."""
    obj, _io, diffs, (source_label, dest_label) = _compare(ctx, direction, types)
    obj.console.print_status(diffs, source_label=source_label, dest_label=dest_label)


@cli.command("diff")
@click.argument("name", required=False)
@click.option("--type", "-t", "types", multiple=True, help=TYPE_HELP)
@click.option(
    "--direction",
    "-d",
    type=click.Choice([d.value for d in SyncDirection]),
    default=SyncDirection.TO_LOCAL.value,
    help="Which side is the source (default: to-local)",
)
@click.pass_context
def diff_command(ctx: click.Context, name: Optional[str], types: tuple[str, ...], direction: str) -> None:
    """Show differences for items that are not identical.

    NAME limits output to one item, e.g. skills/rust-dev.
    """
    obj, io, diffs, _ = _compare(ctx, direction, types)
    console = obj.console

    shown = [d for d in diffs if d.change_count > 0 and (name is None or d.name == name)]
    if not shown:
        if name is not None and not any(d.name == name for d in diffs):
            console.print_warning(f"No item named {name}")
        else:
            console.print_success("No differences")
        return

    for diff in shown:
        show_diff(diff, io=io, console=console.rich)


@cli.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show the active configuration.

    \b
    Precedence (highest first):
      --config FILE, .ccsync.local, .ccsync, ~/.config/ccsync/config.yaml
    """
    if ctx.invoked_subcommand is not None:
        return
    obj, cfg, files = _load(ctx)
    obj.console.print_config_summary(cfg, files)


@config.command("init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write the default global configuration file."""
    console: Console = ctx.obj.console
    path, created = ensure_config_exists(force=force)
    if created:
        console.print_success(f"Created configuration: {path}")
    else:
        console.print_info(f"Configuration already exists: {path} (use --force to overwrite)")


@config.command("validate")
@click.argument("file", type=click.Path(path_type=Path), required=False)
@click.pass_context
def config_validate(ctx: click.Context, file: Optional[Path]) -> None:
    """Validate a configuration file (default: the global file)."""
    console: Console = ctx.obj.console
    path = file or get_config_path()
    ok, errors = validate_config_file(path)
    if ok:
        console.print_success(f"Configuration is valid: {path}")
        return
    console.print_error(f"Invalid configuration: {path}")
    for error in errors:
        console.print(f"  • {error}", markup=False)
    ctx.exit(1)
