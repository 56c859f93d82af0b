"""
Record Encoder - Builds one fixed-width SICORE withholding line per row.

SICORE record layout (1-based, inclusive):
- 1-2:     Voucher code, always "05"
- 3-12:    Voucher issue date (DD/MM/YYYY)
- 13-28:   Voucher number, leading zeros removed
- 29-44:   Voucher amount (net + VAT)
- 45-48:   Tax code "0217"
- 49-52:   Regime code "0311"
- 53-66:   Calculation base (net only)
- 67-76:   Withholding date (DD/MM/YYYY)
- 77-78:   Condition code "01"
- 79:      Withholding on suspended subjects "0"
- 80-93:   Withholding amount
- 94-99:   Exclusion percentage "  0,00"
- 100-109: Publication date (blank)
- 110-111: Withheld party document type "80" (CUIT)
- 112-131: Withheld party document number (digits only)
- 132-145: Original certificate number, zero padded
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .columns import DEFAULT_COLUMN_MAPPING, ColumnMapping, cell
from .exceptions import RowEncodingError
from .formatters import (
    coerce_number,
    format_date,
    format_number,
    is_present,
    parse_float,
    place_field,
    to_text,
)

LINE_LENGTH = 145
CERTIFICATE_BASE = 191
CERTIFICATE_WIDTH = 14

ABSENT = "0"


@dataclass(frozen=True)
class FieldPosition:
    """A named position range in the record line."""

    name: str
    start: int
    end: int
    description: str

    @property
    def width(self) -> int:
        return self.end - self.start + 1

    def slice(self, line: str) -> str:
        """Return this field's characters from a line."""
        return line[self.start - 1 : self.end]


VOUCHER_CODE = FieldPosition("voucher_code", 1, 2, "Voucher code")
ISSUE_DATE = FieldPosition("issue_date", 3, 12, "Issue date")
VOUCHER_NUMBER = FieldPosition("voucher_number", 13, 28, "Voucher number")
VOUCHER_AMOUNT = FieldPosition("voucher_amount", 29, 44, "Voucher amount (net + VAT)")
TAX_CODE = FieldPosition("tax_code", 45, 48, "Tax code")
REGIME_CODE = FieldPosition("regime_code", 49, 52, "Regime code")
CALCULATION_BASE = FieldPosition("calculation_base", 53, 66, "Calculation base (net)")
WITHHOLDING_DATE = FieldPosition("withholding_date", 67, 76, "Withholding date")
CONDITION_CODE = FieldPosition("condition_code", 77, 78, "Condition code")
SUSPENDED_SUBJECT = FieldPosition("suspended_subject", 79, 79, "Suspended subject withholding")
WITHHOLDING_AMOUNT = FieldPosition("withholding_amount", 80, 93, "Withholding amount")
EXCLUSION_PERCENTAGE = FieldPosition("exclusion_percentage", 94, 99, "Exclusion percentage")
PUBLICATION_DATE = FieldPosition("publication_date", 100, 109, "Publication date")
DOCUMENT_TYPE = FieldPosition("document_type", 110, 111, "Document type")
DOCUMENT_NUMBER = FieldPosition("document_number", 112, 131, "Document number (CUIT)")
CERTIFICATE_NUMBER = FieldPosition("certificate_number", 132, 145, "Certificate number")

RECORD_LAYOUT: tuple[FieldPosition, ...] = (
    VOUCHER_CODE,
    ISSUE_DATE,
    VOUCHER_NUMBER,
    VOUCHER_AMOUNT,
    TAX_CODE,
    REGIME_CODE,
    CALCULATION_BASE,
    WITHHOLDING_DATE,
    CONDITION_CODE,
    SUSPENDED_SUBJECT,
    WITHHOLDING_AMOUNT,
    EXCLUSION_PERCENTAGE,
    PUBLICATION_DATE,
    DOCUMENT_TYPE,
    DOCUMENT_NUMBER,
    CERTIFICATE_NUMBER,
)

# Constant content of the literal fields
LITERAL_FIELDS: dict[FieldPosition, str] = {
    VOUCHER_CODE: "05",
    TAX_CODE: "0217",
    REGIME_CODE: "0311",
    CONDITION_CODE: "01",
    SUSPENDED_SUBJECT: "0",
    EXCLUSION_PERCENTAGE: "  0,00",
    PUBLICATION_DATE: " " * 10,
    DOCUMENT_TYPE: "80",
}


class LineBuffer:
    """Fixed-length character buffer for one record line.

    Starts as all spaces; fields overwrite their own range only.
    """

    def __init__(self, length: int = LINE_LENGTH) -> None:
        self._chars = [" "] * length

    def place(
        self,
        value: Any,
        position: FieldPosition,
        right_align: bool = False,
    ) -> None:
        """Write a value into a field position."""
        place_field(self._chars, value, position.start, position.end, right_align)

    def to_string(self) -> str:
        """Freeze the buffer into the final line."""
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)


def strip_leading_zeros(value: Any) -> str:
    """Render a document number without leading zeros ("000" gives "0")."""
    return to_text(value).lstrip("0") or "0"


def digits_only(value: Any) -> str:
    """Keep only the ASCII digits of a value."""
    return "".join(ch for ch in to_text(value) if "0" <= ch <= "9")


def _amount(value: Any) -> str:
    number = coerce_number(value)
    return format_number(abs(number) if number is not None else None)


def _build_line(
    row: Sequence[Any],
    mapping: ColumnMapping,
    sequence_number: int,
) -> str:
    fecha = cell(row, mapping.fecha)
    numero = cell(row, mapping.numero)
    neto = cell(row, mapping.neto)
    iva = cell(row, mapping.iva)
    cuit = cell(row, mapping.cuit)
    retencion = cell(row, mapping.retencion)

    line = LineBuffer()

    for position, literal in LITERAL_FIELDS.items():
        line.place(literal, position)

    date_text = format_date(fecha) if is_present(fecha) else ABSENT
    line.place(date_text, ISSUE_DATE)
    line.place(date_text, WITHHOLDING_DATE)

    if is_present(numero):
        line.place(strip_leading_zeros(numero), VOUCHER_NUMBER)
    else:
        line.place(ABSENT, VOUCHER_NUMBER)

    total = 0.0
    for value in (neto, iva):
        if is_present(value):
            total += parse_float(value) or 0.0
    if total != 0:
        line.place(format_number(abs(total)), VOUCHER_AMOUNT, right_align=True)
    else:
        line.place(ABSENT, VOUCHER_AMOUNT)

    if is_present(neto):
        line.place(_amount(neto), CALCULATION_BASE, right_align=True)
    else:
        line.place(ABSENT, CALCULATION_BASE)

    if is_present(retencion):
        line.place(_amount(retencion), WITHHOLDING_AMOUNT, right_align=True)
    else:
        line.place(ABSENT, WITHHOLDING_AMOUNT)

    if is_present(cuit):
        line.place(digits_only(cuit), DOCUMENT_NUMBER)
    else:
        line.place(ABSENT, DOCUMENT_NUMBER)

    certificate = str(sequence_number).zfill(CERTIFICATE_WIDTH)
    line.place(certificate, CERTIFICATE_NUMBER, right_align=True)

    return line.to_string()


def encode_row(
    row: Sequence[Any],
    mapping: ColumnMapping = DEFAULT_COLUMN_MAPPING,
    sequence_number: int = CERTIFICATE_BASE,
    row_index: int | None = None,
) -> str:
    """Encode a source row into a 145-character SICORE line.

    Args:
        row: Cell values of one data row (may be shorter than the mapping)
        mapping: Field to column association
        sequence_number: Certificate number for this row
        row_index: Zero-based data row position, for error context.
            Defaults to the offset of sequence_number from CERTIFICATE_BASE.

    Returns:
        The encoded line

    Raises:
        RowEncodingError: If any field cannot be derived; no partial
            line is ever returned
    """
    if row_index is None:
        row_index = sequence_number - CERTIFICATE_BASE
    try:
        return _build_line(row, mapping, sequence_number)
    except Exception as e:
        raise RowEncodingError(row_index, sequence_number, e) from e


def describe_line(line: str) -> dict[str, str]:
    """Split a record line into its named fields."""
    return {position.name: position.slice(line) for position in RECORD_LAYOUT}


def explain_line(line: str) -> str:
    """Render a line field by field, one position range per row."""
    rows = [f"Line ({len(line)} characters):", f'"{line}"']
    for position in RECORD_LAYOUT:
        if position.start == position.end:
            span = f"{position.start}"
        else:
            span = f"{position.start}-{position.end}"
        rows.append(f'Pos. {span} ({position.description}): "{position.slice(line)}"')
    return "\n".join(rows)
