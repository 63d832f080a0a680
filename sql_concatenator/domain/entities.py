"""
Domain entities for the SQL script concatenator.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field


class ConcatenationOptions(BaseModel):
    """Formatting switches applied when the merged script is assembled."""

    emit_deployment_preamble: bool = Field(
        default=True, description="Emit SET ANSI_NULLS / QUOTED_IDENTIFIER ON"
    )
    separator_between_files: bool = Field(
        default=True, description="Emit GO between consecutive files"
    )
    trailing_separator: bool = Field(
        default=True, description="Emit GO after the last file"
    )
    emit_comments: bool = Field(
        default=False, description="Emit run header and per-file markers"
    )


@dataclass(frozen=True)
class ConcatenationResult:
    """The assembled script text."""

    text: str


class OutputConfig(BaseModel):
    """Where the merged script is suggested to be saved."""

    directory: str = Field(default=".")
    suffix: str = Field(default="_concatenated.sql")

    def default_filename(self, today: date) -> str:
        """Build the suggested file name for the given day."""
        return f"{today:%Y%m%d}{self.suffix}"

    def default_path(self, today: date) -> Path:
        return Path(self.directory).expanduser() / self.default_filename(today)


class ReaderConfig(BaseModel):
    """How source files are decoded when they carry no byte-order mark."""

    default_encoding: str = Field(default="utf-8")
    decode_errors: str = Field(default="replace")


class AppConfiguration(BaseModel):
    """Complete configuration: option defaults plus output and reader settings."""

    options: ConcatenationOptions = Field(default_factory=ConcatenationOptions)
    output: OutputConfig = Field(default_factory=OutputConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)


class SaveResult(BaseModel):
    """Result of writing a merged script to disk."""

    destination: Path
    total_files: int
    bytes_written: int
    execution_time_seconds: float

    def get_summary(self) -> str:
        """Get a human-readable summary of the save."""
        return (
            f"Concatenated {self.total_files} files "
            f"({self.bytes_written / 1024:.1f} KB) "
            f"in {self.execution_time_seconds:.2f}s"
        )
