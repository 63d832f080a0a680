"""
Application use case: a work session that assembles and saves a merged script.
"""

import logging
import os
import time
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..domain.entities import (
    AppConfiguration,
    ConcatenationOptions,
    ConcatenationResult,
    SaveResult,
)
from ..domain.file_set import OrderedFileSet
from ..infrastructure.file_io import ScriptWriter, SourceFileReader
from .concatenation_engine import ConcatenationEngine


logger = logging.getLogger(__name__)


class ConcatenateScriptsUseCase:
    """Holds the working file list and options for one session."""

    def __init__(
        self,
        config: Optional[AppConfiguration] = None,
        file_set: Optional[OrderedFileSet] = None,
        reader: Optional[SourceFileReader] = None,
        engine: Optional[ConcatenationEngine] = None,
        writer: Optional[ScriptWriter] = None,
    ):
        """Initialize with optional dependencies for testing."""
        self.config = config or AppConfiguration()
        self.file_set = file_set if file_set is not None else OrderedFileSet()
        self.reader = reader or SourceFileReader(
            default_encoding=self.config.reader.default_encoding,
            errors=self.config.reader.decode_errors,
        )
        self.engine = engine or ConcatenationEngine(self.reader)
        self.writer = writer or ScriptWriter()
        self.options = self.config.options.model_copy()
        self.last_result: Optional[ConcatenationResult] = None

    @property
    def files(self) -> Tuple[str, ...]:
        return self.file_set.snapshot()

    def add_files(self, paths: Iterable[Union[str, Path]]) -> None:
        """Add readable files as absolute paths, in the given order."""
        accepted = []
        for path in paths:
            absolute = os.path.abspath(os.path.expanduser(str(path)))
            if not self.reader.is_readable_file(absolute):
                logger.warning("Skipping %s: not a readable file", absolute)
                continue
            accepted.append(absolute)

        before = len(self.file_set)
        self.file_set.add(accepted)
        logger.debug("Added %d of %d files", len(self.file_set) - before, len(accepted))

    def remove_files(self, paths: Iterable[str]) -> None:
        self.file_set.remove(paths)

    def move_file(self, index: int, delta: int) -> int:
        return self.file_set.move(index, delta)

    def clear(self) -> None:
        self.file_set.clear()

    def set_option(self, name: str, value: bool) -> None:
        """Toggle one of the ConcatenationOptions fields for this session."""
        if name not in ConcatenationOptions.model_fields:
            raise ValueError(
                f"Unknown option '{name}'. "
                f"Available options: {', '.join(ConcatenationOptions.model_fields)}"
            )
        self.options = self.options.model_copy(update={name: value})

    def default_output_path(self, today: Optional[date] = None) -> Path:
        """Suggested destination, e.g. ``./20240131_concatenated.sql``."""
        return self.config.output.default_path(today or date.today())

    def build_script(self, timestamp: Optional[datetime] = None) -> ConcatenationResult:
        """Concatenate the current file list with the session options."""
        self.last_result = None
        result = self.engine.concatenate(
            self.files, self.options, timestamp or datetime.now()
        )
        self.last_result = result
        return result

    def save(
        self, destination: Union[str, Path], timestamp: Optional[datetime] = None
    ) -> SaveResult:
        """Build the script and write it to ``destination``."""
        start_time = time.time()
        destination = Path(destination)

        result = self.build_script(timestamp)
        bytes_written = self.writer.write(destination, result.text)

        logger.debug("Saved %d files to %s", len(self.file_set), destination)
        return SaveResult(
            destination=destination,
            total_files=len(self.file_set),
            bytes_written=bytes_written,
            execution_time_seconds=time.time() - start_time,
        )
