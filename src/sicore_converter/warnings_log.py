"""Row warnings raised while converting a spreadsheet.

Each warning keeps the sheet row and certificate number of the row it
belongs to, so a report can point the user at the exact cell range to
fix. The log can be saved as a plain text file next to the output.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import OutputError
from .logging_config import get_logger, row_logger

if TYPE_CHECKING:
    from .models import RowResult

logger = get_logger("rows")


@dataclass(frozen=True)
class RowWarning:
    """A problem found in one data row.

    Attributes:
        sheet_row: 1-based spreadsheet row, counting the header row
        sequence_number: Certificate number assigned to the row
        message: What went wrong
    """

    sheet_row: int
    sequence_number: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.sheet_row}: {self.message}"


class WarningsLog:
    """Collects row warnings in source order."""

    def __init__(self) -> None:
        self._entries: list[RowWarning] = []

    def record(self, result: RowResult) -> RowWarning:
        """Record a row that failed to encode.

        Args:
            result: The failed row; its error becomes the message

        Returns:
            The warning that was added
        """
        return self.add(result.sheet_row, result.sequence_number, f"Skipped: {result.error}")

    def add(self, sheet_row: int, sequence_number: int, message: str) -> RowWarning:
        warning = RowWarning(sheet_row, sequence_number, message)
        self._entries.append(warning)
        row_logger(logger, sheet_row, sequence_number).warning(message)
        return warning

    @property
    def entries(self) -> list[RowWarning]:
        return list(self._entries)

    @property
    def messages(self) -> list[str]:
        """Warnings rendered as "Row N: message"."""
        return [str(w) for w in self._entries]

    @property
    def sheet_rows(self) -> list[int]:
        return [w.sheet_row for w in self._entries]

    def has_warnings(self) -> bool:
        return bool(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def save(self, path: Path, encoding: str = "utf-8") -> Path:
        """Write one warning per line, with its certificate number.

        Raises:
            OutputError: If the file cannot be written
        """
        lines = [
            f"{w.sheet_row}\t{w.sequence_number}\t{w.message}\n" for w in self._entries
        ]
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding=encoding) as f:
                f.write("row\tcertificate\tmessage\n")
                f.writelines(lines)
        except (OSError, UnicodeEncodeError, LookupError) as e:
            raise OutputError(path, f"Cannot write warnings: {e}") from e
        logger.info("Wrote %d warning(s) to %s", len(lines), path)
        return path

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RowWarning]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"WarningsLog({len(self._entries)} warnings)"
