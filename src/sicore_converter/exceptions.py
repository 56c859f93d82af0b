"""
Exception classes for the SICORE converter.

This module defines all custom exceptions used throughout the converter,
organized in a hierarchy for easy handling.
"""

from pathlib import Path
from typing import Any, Optional, Union


class SicoreError(Exception):
    """Base exception for all converter errors."""

    pass


class InvalidDatasetError(SicoreError):
    """The spreadsheet holds no usable data.

    Raised when the dataset has fewer than two rows (a header row
    plus at least one data row). Fails the whole conversion.

    Attributes:
        row_count: Number of rows found in the dataset
    """

    def __init__(self, row_count: int, message: Optional[str] = None):
        self.row_count = row_count
        if message is None:
            message = (
                "The spreadsheet is empty or has no data rows "
                f"({row_count} row(s) found, at least 2 required)"
            )
        super().__init__(message)


class InvalidDateError(SicoreError):
    """A cell value cannot be rendered as a DD/MM/YYYY date.

    Attributes:
        value: The offending cell value
        reason: Why it was rejected
    """

    def __init__(self, value: Any, reason: str = "Invalid date"):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class RowEncodingError(SicoreError):
    """A data row could not be encoded into a record line.

    The row is skipped; the rest of the batch continues.

    Attributes:
        row_index: Zero-based position of the row among the data rows
        sequence_number: Certificate number the row would have received
        cause: The underlying exception
    """

    def __init__(
        self,
        row_index: int,
        sequence_number: int,
        cause: Exception,
    ):
        self.row_index = row_index
        self.sequence_number = sequence_number
        self.cause = cause
        super().__init__(f"Error formatting row {row_index + 2}: {cause}")

    @property
    def sheet_row(self) -> int:
        """1-based spreadsheet row number, counting the header row."""
        return self.row_index + 2


class ConfigError(SicoreError):
    """Configuration error.

    Raised when there's an issue with the configuration,
    such as an unknown column field or an invalid column reference.
    """

    pass


class SpreadsheetReadError(SicoreError):
    """The input workbook could not be read.

    Attributes:
        path: The workbook path
        message: Description of the error
    """

    def __init__(self, path: Union[str, Path], message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")


class OutputError(SicoreError):
    """The converted text could not be written.

    Attributes:
        path: The output path
        message: Description of the error
    """

    def __init__(self, path: Union[str, Path], message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")
