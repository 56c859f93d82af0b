"""
Spreadsheet Reader - Decodes an Excel workbook into rows of cells.

This module handles:
- Validating the workbook file type
- Loading .xlsx/.xlsm workbooks with openpyxl (cached values, not formulas)
- Loading legacy .xls workbooks with xlrd
- Selecting the first worksheet, or a named one
- Returning every row as a list of cell values
"""

from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Union
from zipfile import BadZipFile

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from xlrd.compdoc import CompDocError

from .exceptions import SpreadsheetReadError
from .logging_config import get_logger

logger = get_logger("reader")

OPENXML_EXTENSIONS = (".xlsx", ".xlsm", ".xltx", ".xltm")
LEGACY_EXTENSIONS = (".xls",)
SUPPORTED_EXTENSIONS = OPENXML_EXTENSIONS + LEGACY_EXTENSIONS

# Compound document header of BIFF (.xls) workbooks
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

# Days between the 1900 and 1904 date systems
DATE_1904_OFFSET = 1462

Row = List[Any]


def is_supported_file(path: Union[str, Path]) -> bool:
    """Check whether a file name has a supported workbook extension."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def is_legacy_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in LEGACY_EXTENSIONS


def trim_row(values: Any) -> Row:
    """Drop trailing empty cells from a row."""
    row = list(values)
    while row and row[-1] is None:
        row.pop()
    return row


def trim_trailing_rows(rows: List[Row]) -> List[Row]:
    """Drop trailing rows that have no cells left."""
    while rows and not rows[-1]:
        rows.pop()
    return rows


def _missing_sheet(label: Union[str, Path], sheet_name: str, available: List[str]):
    return SpreadsheetReadError(
        label,
        f"Worksheet '{sheet_name}' not found (available: {', '.join(available)})",
    )


def _read_openxml_rows(
    source: Union[Path, BinaryIO],
    label: Union[str, Path],
    sheet_name: Optional[str],
) -> List[Row]:
    try:
        workbook = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError) as e:
        raise SpreadsheetReadError(label, f"Error reading the Excel file: {e}") from e

    try:
        if sheet_name is None:
            if not workbook.worksheets:
                raise SpreadsheetReadError(label, "Workbook has no worksheets")
            worksheet = workbook.worksheets[0]
        elif sheet_name in workbook.sheetnames:
            worksheet = workbook[sheet_name]
        else:
            raise _missing_sheet(label, sheet_name, workbook.sheetnames)

        title = worksheet.title
        rows = [trim_row(values) for values in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    logger.info("Read %d row(s) from %s [%s]", len(rows), label, title)
    return rows


def xls_cell_value(cell: Any, datemode: int = 0) -> Any:
    """
    Convert an xlrd cell into the value openpyxl would give.

    Date cells stay numeric serials in the 1900 date system, so they
    are formatted the same way as serial numbers from any other source.
    """
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_DATE and datemode == 1:
        return cell.value + DATE_1904_OFFSET
    return cell.value


def _read_legacy_rows(
    source: Union[Path, bytes],
    label: Union[str, Path],
    sheet_name: Optional[str],
) -> List[Row]:
    try:
        if isinstance(source, bytes):
            book = xlrd.open_workbook(file_contents=source)
        else:
            book = xlrd.open_workbook(filename=str(source))
    except (xlrd.XLRDError, CompDocError, OSError) as e:
        raise SpreadsheetReadError(label, f"Error reading the Excel file: {e}") from e

    try:
        names = book.sheet_names()
        if sheet_name is None:
            if not names:
                raise SpreadsheetReadError(label, "Workbook has no worksheets")
            sheet = book.sheet_by_index(0)
        elif sheet_name in names:
            sheet = book.sheet_by_name(sheet_name)
        else:
            raise _missing_sheet(label, sheet_name, names)

        rows = [
            trim_row(xls_cell_value(cell, book.datemode) for cell in sheet.row(index))
            for index in range(sheet.nrows)
        ]
    finally:
        book.release_resources()

    logger.info("Read %d row(s) from %s [%s] (legacy format)", len(rows), label, sheet.name)
    return rows


def read_workbook(
    path: Union[str, Path],
    sheet_name: Optional[str] = None,
) -> List[Row]:
    """
    Read a worksheet into a 2-D list of cell values.

    Args:
        path: Path to an .xlsx/.xlsm or legacy .xls workbook
        sheet_name: Worksheet to read (default: the first one)

    Returns:
        List of rows; row 0 is the header row

    Raises:
        SpreadsheetReadError: If the file is missing, of the wrong type,
            or cannot be decoded
    """
    path = Path(path)
    if not is_supported_file(path):
        raise SpreadsheetReadError(
            path,
            "Please select a valid Excel file ("
            + ", ".join(SUPPORTED_EXTENSIONS)
            + ")",
        )
    if not path.is_file():
        raise SpreadsheetReadError(path, "File does not exist")

    if is_legacy_file(path):
        rows = _read_legacy_rows(path, path, sheet_name)
    else:
        rows = _read_openxml_rows(path, path, sheet_name)
    return trim_trailing_rows(rows)


def read_workbook_bytes(
    data: bytes,
    sheet_name: Optional[str] = None,
    name: str = "<upload>",
) -> List[Row]:
    """
    Read a worksheet from an in-memory workbook.

    The format is detected from the content, not from the name.

    Args:
        data: Raw workbook bytes
        sheet_name: Worksheet to read (default: the first one)
        name: Label used in log and error messages

    Returns:
        List of rows; row 0 is the header row
    """
    if data[: len(OLE2_SIGNATURE)] == OLE2_SIGNATURE:
        rows = _read_legacy_rows(data, name, sheet_name)
    else:
        rows = _read_openxml_rows(BytesIO(data), name, sheet_name)
    return trim_trailing_rows(rows)
