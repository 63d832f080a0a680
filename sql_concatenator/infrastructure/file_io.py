"""
File infrastructure.
Reads source scripts with byte-order-mark detection and writes the merged
script atomically as UTF-8 with a BOM.
"""

import codecs
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

from ..domain.errors import FileReadError, WriteError


logger = logging.getLogger(__name__)

# UTF-32 LE must be tested before UTF-16 LE: FF FE 00 00 starts with FF FE.
BOM_ENCODINGS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

OUTPUT_ENCODING = "utf-8-sig"


def detect_encoding(raw: bytes, default: str = "utf-8") -> str:
    """Pick the codec announced by a leading BOM, or ``default``."""
    for bom, encoding in BOM_ENCODINGS:
        if raw.startswith(bom):
            return encoding
    return default


class SourceFileReader:
    """Reads whole source files as text."""

    def __init__(self, default_encoding: str = "utf-8", errors: str = "replace"):
        """Initialize with the fallback encoding and decode error policy."""
        self.default_encoding = default_encoding
        self.errors = errors

    def read_text(self, path: Union[str, Path]) -> str:
        """Read and decode a file; any failure becomes FileReadError."""
        try:
            with open(path, "rb") as handle:
                raw = handle.read()
        except OSError as e:
            raise FileReadError(path, e) from e

        encoding = detect_encoding(raw, self.default_encoding)
        try:
            return raw.decode(encoding, errors=self.errors)
        except (UnicodeDecodeError, LookupError) as e:
            raise FileReadError(path, e) from e

    @staticmethod
    def is_readable_file(path: Union[str, Path]) -> bool:
        """Check that a path is an existing regular file we may read."""
        return os.path.isfile(path) and os.access(path, os.R_OK)


class ScriptWriter:
    """Persists the merged script without ever leaving a partial file."""

    def write(self, destination: Union[str, Path], text: str) -> int:
        """Write ``text`` to ``destination`` and return the number of bytes."""
        destination = Path(destination)
        # Write through a symlink so the link itself survives the replace.
        target = Path(os.path.realpath(destination)) if destination.is_symlink() else destination
        data = text.encode(OUTPUT_ENCODING)
        temp_path = None

        try:
            fd, temp_path = tempfile.mkstemp(
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            self._apply_mode(temp_path, target)
            os.replace(temp_path, target)
        except OSError as e:
            if temp_path is not None and os.path.exists(temp_path):
                os.remove(temp_path)
            raise WriteError(destination, e) from e

        logger.debug("Wrote %d bytes to %s", len(data), destination)
        return len(data)

    @staticmethod
    def _apply_mode(temp_path: str, target: Path) -> None:
        """Give the temporary file the mode the destination should end up with.

        mkstemp creates 0600 files; an overwrite keeps the old file's mode and a
        new file gets the usual 0666 minus umask.
        """
        if target.exists():
            shutil.copymode(target, temp_path)
            return

        umask = os.umask(0)
        os.umask(umask)
        os.chmod(temp_path, 0o666 & ~umask)
