# CCSync Console Output
# Rich-based console output and the keypress prompt for interactive runs

from pathlib import Path
from typing import Optional

import click
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ccsync.config.schema import CcsyncConfig
from ccsync.sync.compare import Classification, DiffResult
from ccsync.sync.report import ItemOutcome, RunOutcome, SyncReport
from ccsync.sync.resolver import DecisionKind

_CLASSIFICATION_STYLES = {
    Classification.NEW: ("[green]+[/green]", "green"),
    Classification.DELETED: ("[red]×[/red]", "red"),
    Classification.IDENTICAL: ("[green]✓[/green]", "dim"),
    Classification.CONFLICT: ("[red]![/red]", "red"),
    Classification.MERGEABLE: ("[yellow]~[/yellow]", "yellow"),
}

_DECISION_ICONS = {
    DecisionKind.CREATE: "[green]+[/green]",
    DecisionKind.UPDATE: "[yellow]↑[/yellow]",
    DecisionKind.DELETE: "[red]×[/red]",
    DecisionKind.SKIP: "[dim]○[/dim]",
    DecisionKind.OVERWRITE_DIRECTORY: "[yellow]↑[/yellow]",
    DecisionKind.MERGE_DIRECTORY: "[yellow]~[/yellow]",
}


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(force_terminal=colored, no_color=not colored)

    @property
    def rich(self) -> RichConsole:
        """Underlying Rich console."""
        return self._console

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_status(self, diffs: list[DiffResult], *, source_label: str, dest_label: str) -> None:
        """
        Print a classification table for compared items.

        Identical items are listed only in verbose mode.

        Args:
            diffs: Comparison results in run order.
            source_label: Name of the source side (e.g. "global").
            dest_label: Name of the destination side.
        """
        if not diffs:
            self._console.print("[dim]No items found[/dim]")
            return

        table = Table(show_header=True, header_style="bold", title=f"{source_label} → {dest_label}")
        table.add_column("", width=1)
        table.add_column("Item")
        table.add_column("Status")
        table.add_column("Changes", style="dim")

        shown = 0
        for diff in diffs:
            classification = diff.classification
            if classification == Classification.IDENTICAL and not self.verbose:
                continue
            icon, style = _CLASSIFICATION_STYLES[classification]
            changes = ""
            if diff.is_directory and classification != Classification.IDENTICAL:
                changes = f"+{len(diff.added)} ~{len(diff.modified)} -{len(diff.removed)}"
            table.add_row(icon, escape(diff.name), f"[{style}]{classification.value}[/{style}]", changes)
            shown += 1

        if shown == 0:
            self._console.print("[green]Everything is in sync![/green]")
            return

        self._console.print(table)

        counts: dict[Classification, int] = {}
        for diff in diffs:
            counts[diff.classification] = counts.get(diff.classification, 0) + 1
        parts = [f"{count} {kind.value}" for kind, count in sorted(counts.items(), key=lambda kv: kv[0].value)]
        self._console.print(f"[dim]{len(diffs)} items: {', '.join(parts)}[/dim]")

    def print_item_outcome(self, outcome: ItemOutcome, *, dry_run: bool = False) -> None:
        """
        Print one item outcome. Identical items only show in verbose mode.

        Args:
            outcome: Recorded outcome.
            dry_run: Whether changes were applied.
        """
        decision = outcome.decision
        if decision.is_skip and outcome.classification == Classification.IDENTICAL and not self.verbose:
            return

        icon = _DECISION_ICONS[decision.kind]
        verb = decision.kind.value.replace("_", " ")
        if dry_run and not decision.is_skip:
            verb = f"would {verb}"
        detail = f" ({decision.reason})" if decision.reason else ""
        self._console.print(f"  {icon} {escape(outcome.name)} [dim]{verb}{escape(detail)}[/dim]")

    def print_report(self, report: SyncReport, *, dry_run: bool = False) -> None:
        """
        Print the run summary panel.

        Args:
            report: Finalized report.
            dry_run: Whether this was a dry run (changes wording).
        """
        if report.outcome == RunOutcome.COMPLETED:
            border = "green" if report.conflicts == 0 else "yellow"
        elif report.outcome == RunOutcome.FAILED:
            border = "red"
        else:
            border = "yellow"

        title = "Dry Run Summary" if dry_run else "Sync Summary"
        body = "\n".join(escape(line) for line in report.summary_lines())
        if dry_run:
            body += "\n[dim]Dry run - no changes applied[/dim]"

        self._console.print()
        self._console.print(Panel(body, title=title, border_style=border))

    def print_config_summary(self, config: CcsyncConfig, files: list[Path]) -> None:
        """Print the active configuration and the files it came from."""
        sources = "\n".join(f"  {f}" for f in files) if files else "  (built-in defaults)"
        strategy = config.conflict_strategy.value if config.conflict_strategy else "ask"
        symlinks = "preserve" if config.preserve_symlinks else "follow"
        self._console.print(
            Panel(
                f"Files:\n{escape(sources)}\n"
                f"Global root: {escape(config.global_path)}\n"
                f"Local root: {escape(config.local_path)}\n"
                f"Conflict strategy: {strategy}\n"
                f"Symlinks: {symlinks}\n"
                f"Ignore patterns: {len(config.ignore)}, include patterns: {len(config.include)}, "
                f"rules: {len(config.rules)}",
                title="ccsync Configuration",
                border_style="blue",
            )
        )

        table = Table(show_header=True, header_style="bold")
        table.add_column("Category")
        table.add_column("Status")
        table.add_column("Path")
        table.add_column("Items", style="dim")

        for name, cat in sorted(config.categories.items()):
            status = "[green]enabled[/green]" if cat.enabled else "[dim]disabled[/dim]"
            if cat.item_kind.value == "directory":
                items = f"directories with {cat.item_marker}" if cat.item_marker else "directories"
            else:
                items = cat.item_pattern or "*"
                if cat.recursive:
                    items += " (recursive)"
            table.add_row(name, status, cat.path, escape(items))

        self._console.print(table)


class ConsolePrompt:
    """
    Keypress prompt for interactive runs.

    Reads a single key without waiting for Enter.
    """

    def __init__(self, console: Console):
        self.console = console

    def display(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)

    def read_key(self) -> str:
        """
        Read one key.

        Raises:
            KeyboardInterrupt: On Ctrl-C.
            EOFError: On Ctrl-D or closed input.
        """
        key = click.getchar()
        # Exhausted non-terminal input reads as an empty string
        if key == "":
            raise EOFError
        self.console.print(key if key.isprintable() else "", markup=False, highlight=False)
        return key


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
