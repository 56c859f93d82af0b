"""Batch conversion of spreadsheet rows into SICORE record text.

This module walks the data rows of a decoded spreadsheet, encodes
each one and collects the resulting lines. A row that fails to
encode is recorded and skipped; it never aborts the batch.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .columns import DEFAULT_COLUMN_MAPPING, ColumnMapping, log_headers
from .exceptions import InvalidDatasetError, RowEncodingError
from .logging_config import get_logger, row_logger
from .models import ConversionResult, RowResult
from .record import CERTIFICATE_BASE, encode_row, explain_line
from .warnings_log import WarningsLog

logger = get_logger("converter")

MIN_DATASET_ROWS = 2


def is_empty_row(row: Sequence[Any] | None) -> bool:
    """Return True for missing rows and rows without any cell content."""
    if not row:
        return True
    for value in row:
        if value is None or value == "":
            continue
        return False
    return True


def convert_rows(
    dataset: Sequence[Sequence[Any] | None],
    mapping: ColumnMapping = DEFAULT_COLUMN_MAPPING,
    start_number: int = CERTIFICATE_BASE,
    warnings_log: WarningsLog | None = None,
) -> ConversionResult:
    """Encode every data row of a dataset.

    Args:
        dataset: Rows of cells; row 0 holds the headers
        mapping: Field to column association
        start_number: Certificate number of the first data row
        warnings_log: Optional WarningsLog receiving row failures

    Returns:
        ConversionResult with one RowResult per non-empty data row

    Raises:
        InvalidDatasetError: If the dataset has fewer than 2 rows
    """
    if dataset is None or len(dataset) < MIN_DATASET_ROWS:
        raise InvalidDatasetError(0 if dataset is None else len(dataset))

    headers = list(dataset[0] or [])
    log_headers(headers, mapping)

    result = ConversionResult(
        headers=headers,
        warnings_log=warnings_log if warnings_log is not None else WarningsLog(),
    )
    first_logged = False

    for index, row in enumerate(dataset[1:]):
        if is_empty_row(row):
            result.skipped_rows.append(index)
            continue

        sequence_number = start_number + index
        try:
            line = encode_row(row, mapping, sequence_number, row_index=index)
        except RowEncodingError as e:
            failed = RowResult(index, sequence_number, error=str(e.cause))
            result.results.append(failed)
            result.warnings_log.record(failed)
            continue

        if not first_logged:
            first_row = row_logger(logger, index + 2, sequence_number)
            first_row.debug("first data row %s", list(row))
            first_row.debug(explain_line(line))
            first_logged = True

        result.results.append(RowResult(index, sequence_number, line=line))

    logger.info(
        "Converted %d row(s), %d failed, %d empty",
        result.line_count,
        result.failure_count,
        len(result.skipped_rows),
    )
    return result


def convert(
    dataset: Sequence[Sequence[Any] | None],
    mapping: ColumnMapping = DEFAULT_COLUMN_MAPPING,
    start_number: int = CERTIFICATE_BASE,
) -> str:
    """Convert a dataset into SICORE record text.

    Args:
        dataset: Rows of cells; row 0 holds the headers
        mapping: Field to column association
        start_number: Certificate number of the first data row

    Returns:
        Encoded lines joined by newlines, in source order

    Raises:
        InvalidDatasetError: If the dataset has fewer than 2 rows
    """
    return convert_rows(dataset, mapping, start_number).text
