"""
Column Mapper - Static association of record fields to spreadsheet columns.

The source spreadsheet has a fixed layout:
- Column A: fecha      (issue date)
- Column E: numero     (document number)
- Column F: neto       (net amount)
- Column G: iva        (VAT amount)
- Column H: cuit       (tax ID of the withheld party)
- Column L: retencion  (withholding amount)

Header text is never used to locate columns; it is only logged.
"""

from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping, Optional, Sequence, Union

from openpyxl.utils import column_index_from_string, get_column_letter

from .exceptions import ConfigError
from .logging_config import get_logger

logger = get_logger("columns")

FIELD_NAMES = ("fecha", "numero", "neto", "iva", "cuit", "retencion")

ColumnRef = Union[int, str]


@dataclass(frozen=True)
class ColumnMapping:
    """
    Zero-based column index for each source field.

    Attributes:
        fecha: Issue date column
        numero: Document number column
        neto: Net amount column
        iva: VAT amount column
        cuit: Tax ID column
        retencion: Withholding amount column
    """

    fecha: int = 0
    numero: int = 4
    neto: int = 5
    iva: int = 6
    cuit: int = 7
    retencion: int = 11

    def get(self, field: str) -> int:
        """Return the column index for a field name."""
        if field not in FIELD_NAMES:
            raise KeyError(f"Unknown field: {field}")
        return getattr(self, field)

    def to_dict(self) -> dict[str, int]:
        """Convert mapping to dictionary."""
        return asdict(self)

    def letters(self) -> dict[str, str]:
        """Return the spreadsheet column letter of each field."""
        return {name: get_column_letter(index + 1) for name, index in self.to_dict().items()}

    def with_overrides(self, overrides: Mapping[str, ColumnRef]) -> "ColumnMapping":
        """Return a copy with some columns replaced.

        Args:
            overrides: Field name to column index (0-based) or letter

        Raises:
            ConfigError: On unknown fields or invalid column references
        """
        changes = {}
        for name, ref in overrides.items():
            if name not in FIELD_NAMES:
                raise ConfigError(
                    f"Unknown column field '{name}' (expected one of: {', '.join(FIELD_NAMES)})"
                )
            changes[name] = column_index(ref)
        return replace(self, **changes)


DEFAULT_COLUMN_MAPPING = ColumnMapping()


def column_index(ref: ColumnRef) -> int:
    """
    Resolve a column reference to a zero-based index.

    Args:
        ref: Zero-based index, or a column letter such as "L"

    Returns:
        Zero-based column index

    Raises:
        ConfigError: If the reference is not a valid column
    """
    if isinstance(ref, bool):
        raise ConfigError(f"Invalid column reference: {ref!r}")
    if isinstance(ref, int):
        if ref < 0:
            raise ConfigError(f"Column index must not be negative: {ref}")
        return ref
    if isinstance(ref, str):
        text = ref.strip()
        if text.isdigit():
            return int(text)
        try:
            return column_index_from_string(text.upper()) - 1
        except ValueError:
            raise ConfigError(f"Invalid column reference: {ref!r}") from None
    raise ConfigError(f"Invalid column reference: {ref!r}")


def get_column_mapping(
    overrides: Optional[Mapping[str, ColumnRef]] = None,
) -> ColumnMapping:
    """
    Return the field to column association used for a conversion run.

    Args:
        overrides: Optional per-field replacements

    Returns:
        The column mapping
    """
    if not overrides:
        return DEFAULT_COLUMN_MAPPING
    return DEFAULT_COLUMN_MAPPING.with_overrides(overrides)


def cell(row: Sequence[Any], index: int) -> Any:
    """Return the cell at index, or None when the row is too short."""
    if 0 <= index < len(row):
        return row[index]
    return None


def log_headers(headers: Sequence[Any], mapping: ColumnMapping) -> dict[str, Any]:
    """
    Log the header text found under each mapped column.

    Args:
        headers: The header row
        mapping: The column mapping in use

    Returns:
        Field name to header value
    """
    found = {name: cell(headers, mapping.get(name)) for name in FIELD_NAMES}
    letters = mapping.letters()

    logger.debug("Headers found: %s", list(headers))
    for name in FIELD_NAMES:
        logger.debug("Column %s (%s): %r", letters[name], name, found[name])

    return found
