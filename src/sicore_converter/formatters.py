"""Field formatting utilities for SICORE record encoding.

This module provides the primitive renderers used to build a
fixed-width record line: placing text into a position range,
formatting dates as DD/MM/YYYY and amounts with a comma decimal
separator. It also holds the lenient value coercions used when
reading spreadsheet cells.
"""

from __future__ import annotations

import math
import re
from collections.abc import MutableSequence
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

from .exceptions import InvalidDateError

# Day 0 of the spreadsheet (1900 date system) serial numbering
EXCEL_EPOCH = datetime(1899, 12, 30)

ZERO_AMOUNT = "0,00"
DECIMAL_SEPARATOR = ","

_CENTS = Decimal("0.01")
# Wide enough for any finite float quantized to cents
_AMOUNT_CONTEXT = Context(prec=400)

# Leading float literal, as accepted by a lenient float parse
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_FLOAT_FULL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Text date layouts accepted besides ISO 8601. Slashed dates are read
# day first ("05/03/2022" is 5 March), unlike a US-style parse that
# would give 3 May; month first is only tried when that reading fails.
TEXT_DATE_FORMATS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
)


def to_text(value: Any) -> str:
    """Render a cell value as text.

    Integral floats lose their decimal part so that a numeric cell
    holding 45 renders as "45", not "45.0".
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_present(value: Any) -> bool:
    """Return True if a cell holds a usable value.

    Empty cells, empty text and numeric zero (or NaN) count as absent.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (bool, int, Decimal)):
        return value != 0
    if isinstance(value, float):
        return value != 0 and not math.isnan(value)
    return True


def parse_float(value: Any) -> float | None:
    """Parse a leading float from a value.

    Numbers pass through; text is parsed up to the first character
    that cannot continue a float literal ("12abc" gives 12.0).

    Returns:
        The parsed float, or None if nothing numeric was found
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if match:
            return float(match.group(1))
    return None


def coerce_number(value: Any) -> float | None:
    """Coerce a whole value to a number.

    Unlike parse_float the entire text must be numeric, though
    surrounding whitespace is allowed and blank text counts as zero.

    Returns:
        The number, or None when the value is malformed
    """
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    if value is None:
        return 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _FLOAT_FULL.fullmatch(text):
            return float(text)
    return None


def place_field(
    buffer: MutableSequence[str],
    value: Any,
    start_pos: int,
    end_pos: int,
    right_align: bool = False,
) -> None:
    """Write a value into a fixed-width position range.

    The value is stringified, cut from the right when longer than the
    field, and padded with spaces on the left (right_align) or on the
    right. Characters that fall outside the buffer are dropped.

    Args:
        buffer: Mutable character sequence holding the line
        value: Value to place
        start_pos: 1-based first position of the field
        end_pos: 1-based last position of the field (inclusive)
        right_align: Pad on the left instead of the right
    """
    width = end_pos - start_pos + 1
    if width <= 0:
        return

    text = to_text(value)[:width]
    text = text.rjust(width) if right_align else text.ljust(width)

    offset = start_pos - 1
    for i, char in enumerate(text):
        index = offset + i
        if 0 <= index < len(buffer):
            buffer[index] = char


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet date serial to a calendar date.

    The fractional part (time of day) is discarded.

    Raises:
        InvalidDateError: If the serial is not finite or out of range
    """
    if not math.isfinite(serial):
        raise InvalidDateError(serial, "Invalid date")
    try:
        return (EXCEL_EPOCH + timedelta(days=math.floor(serial))).date()
    except OverflowError:
        raise InvalidDateError(serial, "Date out of range") from None


def parse_text_date(text: str) -> date:
    """Parse a date written as text.

    ISO 8601 is tried first, then the layouts in TEXT_DATE_FORMATS.

    Raises:
        InvalidDateError: If no layout matches
    """
    cleaned = text.strip()
    if not cleaned:
        raise InvalidDateError(text, "Invalid date")

    try:
        return datetime.fromisoformat(cleaned).date()
    except ValueError:
        pass

    for fmt in TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue

    raise InvalidDateError(text, "Invalid date")


def format_date(value: Any) -> str:
    """Format a date cell as DD/MM/YYYY.

    Args:
        value: A date/datetime, a spreadsheet serial number, or date text

    Returns:
        The formatted date

    Raises:
        InvalidDateError: If the value is not a usable date
    """
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        day = serial_to_date(value)
    elif isinstance(value, str):
        day = parse_text_date(value)
    else:
        raise InvalidDateError(value, "Invalid date format")

    return f"{day.day:02d}/{day.month:02d}/{day.year:04d}"


def format_number(value: Any) -> str:
    """Format an amount with two decimals and a comma separator.

    Empty, malformed or non-finite input formats as "0,00". No
    thousands separator is ever emitted.

    Args:
        value: Number or numeric text

    Returns:
        The formatted amount, e.g. "121,60"
    """
    if value is None or value == "":
        return ZERO_AMOUNT

    number = parse_float(value)
    if number is None or not math.isfinite(number):
        return ZERO_AMOUNT

    amount = Decimal(number).quantize(
        _CENTS, rounding=ROUND_HALF_UP, context=_AMOUNT_CONTEXT
    )
    if amount.is_zero():
        amount = abs(amount)
    return f"{amount:f}".replace(".", DECIMAL_SEPARATOR)
