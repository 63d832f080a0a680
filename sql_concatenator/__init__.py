"""
SQL File Concatenator

Merges an ordered set of .sql scripts into one deployable script with
normalized CRLF line endings, optional GO batch separators, deployment
preamble and informational comments.
"""

__version__ = "1.0.0"
__description__ = (
    "Ordered, deduplicated concatenation of SQL scripts into a single deployable script"
)

# Public API exports
from .application.concatenate_scripts import ConcatenateScriptsUseCase
from .application.concatenation_engine import ConcatenationEngine, normalize_line_endings
from .domain.entities import (
    AppConfiguration,
    ConcatenationOptions,
    ConcatenationResult,
    SaveResult,
)
from .domain.errors import (
    ConcatenationError,
    EmptyInputWarning,
    FileReadError,
    WriteError,
)
from .domain.file_set import OrderedFileSet
from .infrastructure.config_loader import (
    ConfigurationError,
    YamlConfigLoader,
    load_app_configuration,
)

__all__ = [
    "ConcatenateScriptsUseCase",
    "ConcatenationEngine",
    "normalize_line_endings",
    "OrderedFileSet",
    "AppConfiguration",
    "ConcatenationOptions",
    "ConcatenationResult",
    "SaveResult",
    "ConcatenationError",
    "EmptyInputWarning",
    "FileReadError",
    "WriteError",
    "load_app_configuration",
    "YamlConfigLoader",
    "ConfigurationError",
]
