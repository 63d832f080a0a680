"""
Command line interface for the SQL script concatenator.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler
from rich.markup import escape

from ..application.concatenate_scripts import ConcatenateScriptsUseCase
from ..domain.entities import AppConfiguration
from ..infrastructure.config_loader import ConfigurationError, load_app_configuration
from .session import InteractiveSession
from .views import (
    console,
    display_files_table,
    display_options_table,
    save_with_feedback,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def safe_load_or_exit(
    config_path: Optional[Path] = None,
    require_output_directory: bool = True
) -> AppConfiguration:
    """Load configuration or exit with clean error."""
    try:
        return load_app_configuration(config_path, require_output_directory)
    except ConfigurationError as e:
        console.print("[red]❌ Configuration Error:[/red]")
        # Clean up the error message - remove "Configuration validation failed:"
        console.print(escape(str(e).replace("Configuration validation failed:\n", "")))
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--config', '-c',
              type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to configuration file (default: config/sqlconcat.yml)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
@click.pass_context
def cli(ctx, config: Optional[Path], verbose: bool):
    """
    SQL File Concatenator - merge .sql scripts into one deployable script.

    Files are kept in the order given, duplicates are dropped, line endings
    are normalized to CRLF and GO separators are inserted between files.
    """
    ctx.ensure_object(dict)

    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose
    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command('concat')
@click.argument('files', nargs=-1, type=click.Path(path_type=Path))
@click.option('--output', '-o',
              type=click.Path(dir_okay=False, path_type=Path),
              help='Output script path (default: <YYYYMMDD>_concatenated.sql)')
@click.option('--preamble/--no-preamble', default=None,
              help='Emit SET ANSI_NULLS ON / SET QUOTED_IDENTIFIER ON')
@click.option('--go-between/--no-go-between', default=None,
              help='Emit GO between files')
@click.option('--final-go/--no-final-go', default=None,
              help='Emit GO after the last file')
@click.option('--comments/--no-comments', default=None,
              help='Emit informational comments')
@click.option('--force', '-f', is_flag=True,
              help='Overwrite the output file without asking')
@click.option('--dry-run', is_flag=True,
              help='Show what would be concatenated without writing')
@click.pass_context
def concatenate_scripts(
    ctx,
    files: tuple,
    output: Optional[Path],
    preamble: Optional[bool],
    go_between: Optional[bool],
    final_go: Optional[bool],
    comments: Optional[bool],
    force: bool,
    dry_run: bool
):
    """Concatenate FILES, in the given order, into one script."""
    verbose = ctx.obj.get('verbose', False)
    config = safe_load_or_exit(ctx.obj.get('config_path'), output is None)

    use_case = ConcatenateScriptsUseCase(config)
    overrides = {
        "emit_deployment_preamble": preamble,
        "separator_between_files": go_between,
        "trailing_separator": final_go,
        "emit_comments": comments,
    }
    for name, value in overrides.items():
        if value is not None:
            use_case.set_option(name, value)

    use_case.add_files(files)
    destination = output or use_case.default_output_path()

    if dry_run:
        console.print(f"[yellow]DRY RUN:[/yellow] Would write {escape(str(destination))}")
        display_files_table(use_case.files)
        display_options_table(use_case.options)
        return

    if not use_case.files:
        console.print("[yellow]Warning:[/yellow] No files selected. Nothing to concatenate.")
        return

    if destination.exists() and not force:
        if not click.confirm(f"{destination} already exists. Overwrite?", default=False):
            console.print("[yellow]Cancelled.[/yellow]")
            return

    if not save_with_feedback(use_case, destination, verbose):
        sys.exit(1)


@cli.command('session')
@click.argument('files', nargs=-1, type=click.Path(path_type=Path))
@click.pass_context
def interactive_session(ctx, files: tuple):
    """Build a script interactively: add, reorder, remove and save files."""
    config = safe_load_or_exit(ctx.obj.get('config_path'), require_output_directory=False)
    use_case = ConcatenateScriptsUseCase(config)
    use_case.add_files(files)

    InteractiveSession(use_case, verbose=ctx.obj.get('verbose', False)).run()


@cli.command('validate')
@click.pass_context
def validate_config(ctx):
    """Validate the configuration file and show the resolved defaults."""
    config = safe_load_or_exit(ctx.obj.get('config_path'))
    console.print("[green]✓[/green] Configuration is valid!")

    display_options_table(config.options)
    console.print(f"Output directory: {escape(config.output.directory)}")
    console.print(f"Output suffix: {config.output.suffix}")
    console.print(
        f"Reader: {config.reader.default_encoding} "
        f"(decode errors: {config.reader.decode_errors})"
    )


# Entry point for the CLI
def main():
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)


if __name__ == '__main__':
    main()
