"""
Assembles the merged SQL script from an ordered list of source files.
"""

import os
from datetime import datetime
from typing import List, Optional, Sequence

from ..domain.entities import ConcatenationOptions, ConcatenationResult
from ..domain.errors import EmptyInputWarning
from ..infrastructure.file_io import SourceFileReader


CRLF = "\r\n"
BATCH_SEPARATOR = "GO"
DEPLOYMENT_PREAMBLE = ("SET ANSI_NULLS ON", "SET QUOTED_IDENTIFIER ON")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def normalize_line_endings(content: str) -> str:
    """Convert every line break to CRLF and make sure the text ends with one.

    All variants are first collapsed to LF so an existing CRLF is never
    expanded twice.
    """
    collapsed = content.replace("\r\n", "\n").replace("\r", "\n")
    normalized = collapsed.replace("\n", CRLF)
    if not normalized.endswith(CRLF):
        normalized += CRLF
    return normalized


class ConcatenationEngine:
    """Reads each source in order and interleaves separators and comments."""

    def __init__(self, reader: Optional[SourceFileReader] = None):
        self.reader = reader or SourceFileReader()

    def concatenate(
        self,
        paths: Sequence[str],
        options: ConcatenationOptions,
        timestamp: datetime,
    ) -> ConcatenationResult:
        """Build the script text; raises before returning anything partial."""
        if not paths:
            raise EmptyInputWarning()

        parts: List[str] = []
        total = len(paths)

        if options.emit_comments:
            self._write_line(parts, f"-- Concatenated on {timestamp.strftime(TIMESTAMP_FORMAT)}")
            self._write_line(parts, f"-- Files: {total}")
            self._write_line(parts)

        if options.emit_deployment_preamble:
            for statement in DEPLOYMENT_PREAMBLE:
                self._write_line(parts, statement)
                self._write_line(parts, BATCH_SEPARATOR)
                self._write_line(parts)

        for position, path in enumerate(paths, start=1):
            self._write_file_section(parts, path, position, total, options)

        if options.trailing_separator:
            self._write_line(parts, BATCH_SEPARATOR)

        self._write_line(parts)
        return ConcatenationResult(text="".join(parts))

    def _write_file_section(
        self,
        parts: List[str],
        path: str,
        position: int,
        total: int,
        options: ConcatenationOptions,
    ) -> None:
        name = os.path.basename(path)

        if options.emit_comments:
            self._write_line(parts, f"-- BEGIN FILE: {name}")
            self._write_line(parts, f"-- PATH: {path}")
            self._write_line(parts, f"-- INDEX: {position}/{total}")

        parts.append(normalize_line_endings(self.reader.read_text(path)))

        if options.emit_comments:
            self._write_line(parts, f"-- END FILE: {name}")

        if options.separator_between_files and position < total:
            self._write_line(parts, BATCH_SEPARATOR)

        self._write_line(parts)

    @staticmethod
    def _write_line(parts: List[str], text: str = "") -> None:
        parts.append(text + CRLF)
