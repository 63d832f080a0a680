"""
Interactive prompt for assembling a script step by step.
"""

import shlex
from pathlib import Path
from typing import Callable, Dict, List

import click
from rich.markup import escape

from ..application.concatenate_scripts import ConcatenateScriptsUseCase
from .views import console, display_files_table, display_options_table, save_with_feedback


# Session option name -> ConcatenationOptions field
SESSION_OPTIONS = {
    "preamble": "emit_deployment_preamble",
    "go-between": "separator_between_files",
    "final-go": "trailing_separator",
    "comments": "emit_comments",
}

SWITCH_VALUES = {"on": True, "yes": True, "true": True, "off": False, "no": False, "false": False}

HELP_TEXT = """\
Commands (file numbers are shown by 'list'):
  add PATH...              append files, skipping duplicates
  remove N...              remove files by number
  up N / down N            move a file one position
  clear                    remove all files
  list                     show the current order
  options                  show formatting options
  set OPTION on|off        preamble, go-between, final-go, comments
  save [PATH]              write the script (default: dated file name)
  help                     show this text
  quit                     leave the session"""


class InteractiveSession:
    """Read-eval loop over a ConcatenateScriptsUseCase."""

    def __init__(self, use_case: ConcatenateScriptsUseCase, verbose: bool = False):
        self.use_case = use_case
        self.verbose = verbose
        self._commands: Dict[str, Callable[[List[str]], bool]] = {
            "add": self._add,
            "remove": self._remove,
            "rm": self._remove,
            "up": lambda args: self._move(args, -1),
            "down": lambda args: self._move(args, 1),
            "clear": self._clear,
            "list": self._list,
            "ls": self._list,
            "options": self._options,
            "set": self._set,
            "save": self._save,
            "help": self._help,
            "quit": self._quit,
            "exit": self._quit,
        }

    def run(self) -> None:
        console.print("SQL File Concatenator session. Type 'help' for commands.")
        if self.use_case.files:
            display_files_table(self.use_case.files)

        while True:
            try:
                line = click.prompt("sqlconcat", default="", show_default=False, prompt_suffix="> ")
            except click.Abort:
                console.print()
                return

            if not self.execute(line):
                return

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            return True

        if not tokens:
            return True

        command, args = tokens[0].lower(), tokens[1:]
        handler = self._commands.get(command)
        if handler is None:
            console.print(f"[red]Unknown command:[/red] {escape(command)}. Type 'help' for commands.")
            return True
        return handler(args)

    def _parse_positions(self, args: List[str]) -> List[int]:
        """Convert 1-based file numbers to valid 0-based indices."""
        positions = []
        for arg in args:
            try:
                number = int(arg)
            except ValueError:
                console.print(f"[yellow]Ignoring '{escape(arg)}': not a file number[/yellow]")
                continue
            if not 1 <= number <= len(self.use_case.files):
                console.print(f"[yellow]Ignoring {number}: no such file[/yellow]")
                continue
            positions.append(number - 1)
        return positions

    def _add(self, args: List[str]) -> bool:
        if not args:
            console.print("Usage: add PATH...")
            return True
        self.use_case.add_files(args)
        display_files_table(self.use_case.files)
        return True

    def _remove(self, args: List[str]) -> bool:
        files = self.use_case.files
        doomed = [files[index] for index in self._parse_positions(args)]
        if doomed:
            self.use_case.remove_files(doomed)
        display_files_table(self.use_case.files)
        return True

    def _move(self, args: List[str], delta: int) -> bool:
        if len(args) != 1:
            console.print("Usage: up N / down N")
            return True
        for index in self._parse_positions(args):
            self.use_case.move_file(index, delta)
        display_files_table(self.use_case.files)
        return True

    def _clear(self, args: List[str]) -> bool:
        self.use_case.clear()
        console.print("File list cleared.")
        return True

    def _list(self, args: List[str]) -> bool:
        display_files_table(self.use_case.files)
        return True

    def _options(self, args: List[str]) -> bool:
        display_options_table(self.use_case.options)
        return True

    def _set(self, args: List[str]) -> bool:
        if len(args) != 2 or args[0] not in SESSION_OPTIONS or args[1].lower() not in SWITCH_VALUES:
            console.print(f"Usage: set {{{','.join(SESSION_OPTIONS)}}} on|off")
            return True
        self.use_case.set_option(SESSION_OPTIONS[args[0]], SWITCH_VALUES[args[1].lower()])
        display_options_table(self.use_case.options)
        return True

    def _save(self, args: List[str]) -> bool:
        if len(args) > 1:
            console.print("Usage: save [PATH]")
            return True

        if not self.use_case.files:
            console.print("[yellow]Warning:[/yellow] No files selected. Nothing to concatenate.")
            return True

        destination = Path(args[0]) if args else self.use_case.default_output_path()
        if destination.exists():
            if not click.confirm(f"{destination} already exists. Overwrite?", default=False):
                console.print("[yellow]Cancelled.[/yellow]")
                return True

        save_with_feedback(self.use_case, destination, self.verbose)
        return True

    def _help(self, args: List[str]) -> bool:
        console.print(HELP_TEXT, markup=False)
        return True

    def _quit(self, args: List[str]) -> bool:
        return False
