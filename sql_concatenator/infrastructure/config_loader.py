"""
Configuration loading infrastructure.
Reads option defaults, output and reader settings from a YAML file.
"""

import codecs
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from ..domain.entities import (
    AppConfiguration,
    ConcatenationOptions,
    OutputConfig,
    ReaderConfig,
)


DEFAULT_CONFIG_PATH = Path("config/sqlconcat.yml")

DECODE_ERROR_POLICIES = ("strict", "replace", "ignore", "backslashreplace")

# YAML key -> ConcatenationOptions field
OPTION_KEYS = {
    "deployment-preamble": "emit_deployment_preamble",
    "go-between-files": "separator_between_files",
    "final-go": "trailing_separator",
    "comments": "emit_comments",
}


class ConfigurationError(Exception):
    """Raised when there's an error loading or parsing configuration."""
    pass


class YamlConfigLoader:
    """Loads the application configuration from a YAML file."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize with optional custom config path."""
        self.config_path = config_path or DEFAULT_CONFIG_PATH

    def load_configuration(self) -> AppConfiguration:
        """Load and parse the complete configuration."""
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}"
            )

        try:
            with open(self.config_path, "r", encoding="utf-8") as file:
                raw_config = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration root must be a mapping")

        try:
            return self._parse_configuration(raw_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration values: {e}")

    def _parse_configuration(self, raw_config: dict) -> AppConfiguration:
        """Parse raw configuration dictionary into domain objects."""
        return AppConfiguration(
            options=self._parse_options(self._section(raw_config, "options")),
            output=self._parse_output(self._section(raw_config, "output")),
            reader=self._parse_reader(self._section(raw_config, "reader")),
        )

    @staticmethod
    def _section(raw_config: dict, name: str) -> dict:
        """Get a top-level section, which must be a mapping when present."""
        section = raw_config.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"'{name}' must be a mapping")
        return section

    def _parse_options(self, options_data: dict) -> ConcatenationOptions:
        """Parse option defaults, rejecting unknown keys."""
        unknown = sorted(set(options_data) - set(OPTION_KEYS))
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s): {', '.join(unknown)}. "
                f"Known options: {', '.join(OPTION_KEYS)}"
            )

        return ConcatenationOptions(
            **{OPTION_KEYS[key]: value for key, value in options_data.items()}
        )

    def _parse_output(self, output_data: dict) -> OutputConfig:
        defaults = OutputConfig()
        return OutputConfig(
            directory=output_data.get("directory", defaults.directory),
            suffix=output_data.get("suffix", defaults.suffix),
        )

    def _parse_reader(self, reader_data: dict) -> ReaderConfig:
        defaults = ReaderConfig()
        return ReaderConfig(
            default_encoding=reader_data.get("default-encoding", defaults.default_encoding),
            decode_errors=reader_data.get("decode-errors", defaults.decode_errors),
        )


class ConfigurationValidator:
    """Validates configuration for common issues."""

    def validate_configuration(
        self, config: AppConfiguration, require_output_directory: bool = True
    ) -> List[str]:
        """Validate configuration and return list of issues found.

        The output directory only matters when the default destination is used.
        """
        issues = []
        issues.extend(self._validate_output_config(config.output, require_output_directory))
        issues.extend(self._validate_reader_config(config.reader))
        return issues

    def _validate_output_config(
        self, output: OutputConfig, require_output_directory: bool
    ) -> List[str]:
        """Validate output configuration."""
        issues = []

        if require_output_directory:
            output_dir = Path(output.directory).expanduser()
            if not output_dir.exists():
                issues.append(f"Output directory does not exist: {output_dir}")
            elif not output_dir.is_dir():
                issues.append(f"Output directory is not a directory: {output_dir}")

        if not output.suffix:
            issues.append("Output suffix must not be empty")

        return issues

    def _validate_reader_config(self, reader: ReaderConfig) -> List[str]:
        """Validate reader configuration."""
        issues = []

        try:
            codecs.lookup(reader.default_encoding)
        except LookupError:
            issues.append(f"Unknown default encoding: {reader.default_encoding}")

        if reader.decode_errors not in DECODE_ERROR_POLICIES:
            issues.append(
                f"Unsupported decode-errors value '{reader.decode_errors}'. "
                f"Use one of: {', '.join(DECODE_ERROR_POLICIES)}"
            )

        return issues


def load_app_configuration(
    config_path: Optional[Path] = None,
    require_output_directory: bool = True,
) -> AppConfiguration:
    """Load and validate configuration.

    Without an explicit path a missing default file yields built-in defaults.
    Pass ``require_output_directory=False`` when the caller names its own
    destination.
    """
    if config_path is None and not DEFAULT_CONFIG_PATH.exists():
        config = AppConfiguration()
    else:
        config = YamlConfigLoader(config_path).load_configuration()

    validator = ConfigurationValidator()
    issues = validator.validate_configuration(config, require_output_directory)

    if issues:
        raise ConfigurationError(
            "Configuration validation failed:\n" + "\n".join(f"- {issue}" for issue in issues)
        )

    return config
