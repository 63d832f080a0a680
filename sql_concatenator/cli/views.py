"""
Rich rendering and user feedback shared by the CLI commands.
"""

from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..application.concatenate_scripts import ConcatenateScriptsUseCase
from ..domain.entities import ConcatenationOptions
from ..domain.errors import ConcatenationError, EmptyInputWarning


# Global console for rich output
console = Console()

OPTION_LABELS = {
    "emit_deployment_preamble": "Turn on ANSI_NULLS and QUOTED_IDENTIFIER",
    "separator_between_files": "Add GO between files",
    "trailing_separator": "Add GO at end of script",
    "emit_comments": "Add informational comments",
}


def save_with_feedback(
    use_case: ConcatenateScriptsUseCase,
    destination: Path,
    verbose: bool = False
) -> bool:
    """Save the script and report the outcome. Returns False on failure."""
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True
        ) as progress:
            progress.add_task(f"Concatenating {len(use_case.files)} files...", total=None)
            result = use_case.save(destination)

    except EmptyInputWarning as e:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(e))} Nothing to concatenate.")
        return True

    except ConcatenationError as e:
        console.print(f"[red]Error while saving:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        return False

    console.print("[green]✓[/green] Concatenated script saved:")
    console.print(f"Output: {escape(str(result.destination))}")
    if verbose:
        console.print(result.get_summary())
    return True


def display_files_table(files: Iterable[str]) -> None:
    """Display the ordered file list with 1-based positions."""
    table = Table(title="Files", show_header=True, header_style="bold magenta")

    table.add_column("#", style="cyan", justify="right")
    table.add_column("Name", style="green")
    table.add_column("Path", style="yellow")

    for index, path in enumerate(files, start=1):
        table.add_row(str(index), escape(Path(path).name), escape(path))

    console.print(table)


def display_options_table(options: ConcatenationOptions) -> None:
    """Display which formatting options are enabled."""
    table = Table(title="Options", show_header=True, header_style="bold magenta")

    table.add_column("Option", style="cyan")
    table.add_column("Enabled", justify="center")

    for name, label in OPTION_LABELS.items():
        enabled = getattr(options, name)
        table.add_row(label, "[green]yes[/green]" if enabled else "[red]no[/red]")

    console.print(table)
