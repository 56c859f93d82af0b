"""Result models for SICORE conversion runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .warnings_log import WarningsLog

LINE_SEPARATOR = "\n"


@dataclass
class RowResult:
    """Outcome of encoding a single data row.

    Exactly one of line and error is set.
    """

    row_index: int  # Zero-based among data rows (header excluded)
    sequence_number: int
    line: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True if the row produced a line."""
        return self.line is not None

    @property
    def sheet_row(self) -> int:
        """1-based spreadsheet row number, counting the header row."""
        return self.row_index + 2

    def __str__(self) -> str:
        if self.ok:
            return f"Row {self.sheet_row}: certificate {self.sequence_number}"
        return f"Row {self.sheet_row}: {self.error}"


@dataclass
class ConversionResult:
    """Outcome of converting a whole dataset.

    Attributes:
        headers: The header row, as read
        results: One RowResult per non-empty data row, in source order
        skipped_rows: Zero-based indices of empty data rows
        warnings_log: Row warnings recorded for failed rows
    """

    headers: list[Any] = field(default_factory=list)
    results: list[RowResult] = field(default_factory=list)
    skipped_rows: list[int] = field(default_factory=list)
    warnings_log: WarningsLog = field(default_factory=WarningsLog)

    @property
    def warnings(self) -> list[str]:
        """Row warnings rendered as "Row N: message"."""
        return self.warnings_log.messages

    @property
    def lines(self) -> list[str]:
        """Encoded lines, in source order."""
        return [r.line for r in self.results if r.line is not None]

    @property
    def failures(self) -> list[RowResult]:
        """Rows that could not be encoded."""
        return [r for r in self.results if not r.ok]

    @property
    def text(self) -> str:
        """Output document: encoded lines joined by newlines."""
        return LINE_SEPARATOR.join(self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def has_failures(self) -> bool:
        """Return True if any row was skipped because of an error."""
        return any(not r.ok for r in self.results)
