"""SICORE Converter.

Convert withholding records kept in an Excel workbook into the
fixed-width SICORE text format, one 145-character line per record.

Basic Usage:
    >>> from sicore_converter import convert, encode_row
    >>>
    >>> dataset = [
    ...     ["Fecha", "", "", "", "Numero", "Neto", "IVA", "CUIT"],
    ...     [44562, None, None, None, "00045", 100.5, 21.1, "20-12345678-9"],
    ... ]
    >>> text = convert(dataset)
    >>> len(text)
    145
    >>> text[:12]
    '0501/01/2022'

Command-Line Usage:
    sicore-convert --input retenciones.xlsx --output sicore_retenciones.txt
"""

__version__ = "1.0.0"

from .columns import DEFAULT_COLUMN_MAPPING, ColumnMapping, get_column_mapping
from .config import Config, create_default_config
from .converter import convert, convert_rows
from .exceptions import (
    ConfigError,
    InvalidDatasetError,
    InvalidDateError,
    OutputError,
    RowEncodingError,
    SicoreError,
    SpreadsheetReadError,
)
from .formatters import format_date, format_number, place_field
from .main import ConversionPipeline, PipelineResult, convert_file
from .models import ConversionResult, RowResult
from .reader import read_workbook, read_workbook_bytes
from .record import LINE_LENGTH, describe_line, encode_row
from .warnings_log import RowWarning, WarningsLog
from .writer import DEFAULT_OUTPUT_NAME, preview, write_output

__all__ = [
    # Version
    "__version__",
    # Main API
    "convert",
    "convert_rows",
    "encode_row",
    "convert_file",
    "ConversionPipeline",
    # Field formatting
    "place_field",
    "format_date",
    "format_number",
    # Columns
    "ColumnMapping",
    "DEFAULT_COLUMN_MAPPING",
    "get_column_mapping",
    # I/O
    "read_workbook",
    "read_workbook_bytes",
    "write_output",
    "preview",
    "DEFAULT_OUTPUT_NAME",
    # Results
    "ConversionResult",
    "RowResult",
    "PipelineResult",
    "describe_line",
    "LINE_LENGTH",
    # Configuration
    "Config",
    "create_default_config",
    # Helpers
    "RowWarning",
    "WarningsLog",
    # Exceptions
    "SicoreError",
    "InvalidDatasetError",
    "InvalidDateError",
    "RowEncodingError",
    "ConfigError",
    "SpreadsheetReadError",
    "OutputError",
]
