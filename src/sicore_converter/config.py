"""
Configuration - Handles conversion configuration.

This module handles:
- Configuration dataclass with all options
- JSON configuration file support
- Command-line overrides
- Configuration validation
"""

import json
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .columns import FIELD_NAMES, ColumnMapping, column_index, get_column_mapping
from .exceptions import ConfigError
from .logging_config import LOG_LEVELS
from .reader import is_supported_file
from .record import CERTIFICATE_BASE
from .writer import (
    DEFAULT_ENCODING,
    DEFAULT_OUTPUT_NAME,
    DEFAULT_PREVIEW_LINES,
    resolve_output_path,
)

PATH_FIELDS = ("input_file", "output_file", "log_file", "warnings_file")


@dataclass
class Config:
    """
    Configuration for a SICORE conversion run.

    Attributes:
        input_file: Excel workbook to convert
        output_file: Destination text file, or a directory to hold it
        sheet_name: Worksheet to read (None for the first one)
        encoding: Output file encoding
        start_number: Certificate number of the first data row
        columns: Per-field column overrides (0-based index or letter)
        preview_lines: Lines shown by the preview
        dry_run: Convert without writing the output file
        overwrite: Overwrite an existing output file
        verbose: Enable verbose output
        quiet: Suppress normal output
        log_level: Logging level
        log_file: Optional log file
        warnings_file: Optional file listing the skipped rows
    """

    input_file: Optional[Path] = None
    output_file: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_NAME))
    sheet_name: Optional[str] = None
    encoding: str = DEFAULT_ENCODING
    start_number: int = CERTIFICATE_BASE
    columns: dict[str, Union[int, str]] = field(default_factory=dict)
    preview_lines: int = DEFAULT_PREVIEW_LINES

    # Run modes
    dry_run: bool = False
    overwrite: bool = True

    # Output options
    verbose: bool = False
    quiet: bool = False
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    warnings_file: Optional[Path] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        data = {}
        for key, value in asdict(self).items():
            if isinstance(value, Path):
                data[key] = str(value)
            else:
                data[key] = value
        return data

    def save_to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load_from_file(cls, path: Path) -> "Config":
        """Load configuration from JSON file."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration file {path}: expected a JSON object")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """
        Create config from dictionary.

        Unknown keys are ignored. Null or empty paths and a null column
        table fall back to their defaults.

        Raises:
            ConfigError: If a path value is not a string
        """
        known_fields = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known_fields}

        for key in PATH_FIELDS:
            if key not in values:
                continue
            value = values[key]
            if value is None or value == "":
                del values[key]
            elif isinstance(value, (str, Path)):
                values[key] = Path(value)
            else:
                raise ConfigError(f"'{key}' must be a path, got {value!r}")

        if values.get("columns") is None:
            values.pop("columns", None)

        return cls(**values)

    def column_mapping(self) -> ColumnMapping:
        """Build the column mapping for this run."""
        return get_column_mapping(self.columns)

    def resolved_output_file(self) -> Path:
        """The file the converted text is written to."""
        return resolve_output_path(self.output_file)

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.input_file is None:
            errors.append("No input file given")
        elif not self.input_file.exists():
            errors.append(f"Input file does not exist: {self.input_file}")
        elif not is_supported_file(self.input_file):
            errors.append(f"Input file is not an Excel workbook: {self.input_file}")

        if not isinstance(self.output_file, Path):
            errors.append(f"Output file must be a path: {self.output_file!r}")
        elif not self.dry_run and not self.overwrite:
            output = self.resolved_output_file()
            if output.exists():
                errors.append(f"Output file already exists: {output}")

        if not _is_int(self.start_number):
            errors.append(f"Start number must be an integer: {self.start_number!r}")
        elif self.start_number < 0:
            errors.append(f"Start number must not be negative: {self.start_number}")

        if not isinstance(self.columns, dict):
            errors.append(f"Columns must be a mapping of field to column: {self.columns!r}")
        else:
            for name, ref in self.columns.items():
                if name not in FIELD_NAMES:
                    errors.append(f"Unknown column field: {name}")
                    continue
                try:
                    column_index(ref)
                except ConfigError as e:
                    errors.append(str(e))

        if not _is_int(self.preview_lines):
            errors.append(f"Preview lines must be an integer: {self.preview_lines!r}")
        elif self.preview_lines < 0:
            errors.append(f"Preview lines must not be negative: {self.preview_lines}")

        if not isinstance(self.encoding, str) or not self.encoding:
            errors.append(f"Invalid encoding: {self.encoding!r}")

        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level!r}")

        return errors

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def create_default_config() -> Config:
    """Create a configuration with default values."""
    return Config()


def merge_configs(base: Config, overrides: Mapping[str, Any]) -> Config:
    """
    Apply explicitly given settings on top of a configuration.

    Every key present in overrides wins, even when its value equals the
    default. Column overrides are merged per field.

    Args:
        base: Configuration to start from (defaults or a loaded file)
        overrides: Settings given explicitly, e.g. on the command line

    Returns:
        A new configuration; base is left unchanged

    Raises:
        ConfigError: If overrides names an unknown setting
    """
    known_fields = {f.name for f in fields(Config)}
    unknown = sorted(set(overrides) - known_fields)
    if unknown:
        raise ConfigError(f"Unknown configuration setting(s): {', '.join(unknown)}")

    changes = dict(overrides)
    if "columns" in changes:
        base_columns = base.columns if isinstance(base.columns, dict) else {}
        changes["columns"] = {**base_columns, **changes["columns"]}
    return replace(base, **changes)
