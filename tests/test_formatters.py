"""Tests for the field formatting module."""

import math
from datetime import date, datetime

import pytest

from sicore_converter import InvalidDateError
from sicore_converter.formatters import (
    coerce_number,
    format_date,
    format_number,
    is_present,
    parse_float,
    parse_text_date,
    place_field,
    serial_to_date,
    to_text,
)


def blank(length: int = 20) -> list:
    return [" "] * length


class TestPlaceField:
    """Tests for positional field placement."""

    def test_left_aligned_padding(self) -> None:
        """Short text is padded on the right."""
        buffer = blank(10)
        place_field(buffer, "AB", 3, 8)
        assert "".join(buffer) == "  AB      "

    def test_right_aligned_padding(self) -> None:
        """Right alignment pads on the left."""
        buffer = blank(10)
        place_field(buffer, "AB", 3, 8, right_align=True)
        assert "".join(buffer) == "      AB  "

    def test_truncates_from_the_right(self) -> None:
        """Long text keeps only its first field-width characters."""
        buffer = blank(10)
        place_field(buffer, "ABCDEFGHIJ", 1, 4)
        assert "".join(buffer) == "ABCD      "

    def test_truncation_applies_before_right_alignment(self) -> None:
        """Right-aligned values are cut on the right as well."""
        buffer = blank(6)
        place_field(buffer, "123456789", 1, 6, right_align=True)
        assert "".join(buffer) == "123456"

    def test_exact_width(self) -> None:
        """A value of exactly the field width fills it."""
        buffer = blank(4)
        place_field(buffer, "0217", 1, 4)
        assert "".join(buffer) == "0217"

    def test_single_position(self) -> None:
        """A one-character field."""
        buffer = blank(3)
        place_field(buffer, "0", 2, 2)
        assert "".join(buffer) == " 0 "

    def test_overwrites_previous_content(self) -> None:
        """Placing a field clears whatever was in its range."""
        buffer = list("XXXXXXXX")
        place_field(buffer, "A", 2, 5)
        assert "".join(buffer) == "XA   XXX"

    def test_stringifies_numbers(self) -> None:
        """Non-text values are converted to text."""
        buffer = blank(5)
        place_field(buffer, 42, 1, 5, right_align=True)
        assert "".join(buffer) == "   42"

    def test_none_becomes_spaces(self) -> None:
        """None renders as an empty field."""
        buffer = list("XXXX")
        place_field(buffer, None, 1, 4)
        assert "".join(buffer) == "    "

    def test_never_grows_the_buffer(self) -> None:
        """Ranges past the end are clipped, not appended."""
        buffer = blank(5)
        place_field(buffer, "ABCDEF", 4, 9)
        assert len(buffer) == 5
        assert "".join(buffer) == "   AB"


class TestToText:
    """Tests for cell-to-text rendering."""

    def test_integral_float(self) -> None:
        assert to_text(45.0) == "45"

    def test_fractional_float(self) -> None:
        assert to_text(1.5) == "1.5"

    def test_none(self) -> None:
        assert to_text(None) == ""

    def test_text_unchanged(self) -> None:
        assert to_text("00045") == "00045"


class TestIsPresent:
    """Tests for cell presence rules."""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False, float("nan")])
    def test_absent_values(self, value) -> None:
        """Empty and zero-like cells are absent."""
        assert is_present(value) is False

    @pytest.mark.parametrize("value", ["0", " ", 1, -3.5, datetime(2022, 1, 1)])
    def test_present_values(self, value) -> None:
        """Any other content is present."""
        assert is_present(value) is True


class TestNumberParsing:
    """Tests for lenient numeric coercion."""

    def test_parse_float_prefix(self) -> None:
        """parse_float stops at the first non-numeric character."""
        assert parse_float("12abc") == 12.0
        assert parse_float(" 3.5e2x") == 350.0
        assert parse_float("100,5") == 100.0

    def test_parse_float_numbers(self) -> None:
        assert parse_float(21.1) == 21.1
        assert parse_float(7) == 7.0

    def test_parse_float_nothing_numeric(self) -> None:
        assert parse_float("abc") is None
        assert parse_float(True) is None
        assert parse_float(None) is None

    def test_coerce_number_whole_text(self) -> None:
        """coerce_number requires the whole text to be numeric."""
        assert coerce_number("100.5") == 100.5
        assert coerce_number(" 12 ") == 12.0
        assert coerce_number("-4") == -4.0

    def test_coerce_number_blank_is_zero(self) -> None:
        assert coerce_number("") == 0.0
        assert coerce_number("   ") == 0.0

    def test_coerce_number_malformed(self) -> None:
        assert coerce_number("100,5") is None
        assert coerce_number("12abc") is None
        assert coerce_number("1_000") is None


class TestFormatDate:
    """Tests for DD/MM/YYYY date formatting."""

    def test_spreadsheet_serial(self) -> None:
        """Serial 44562 is 2022-01-01."""
        assert format_date(44562) == "01/01/2022"

    def test_serial_epoch(self) -> None:
        """Serial 25569 is the Unix epoch."""
        assert format_date(25569) == "01/01/1970"

    def test_fractional_serial_keeps_the_day(self) -> None:
        """The time-of-day part never moves the date."""
        assert format_date(44562.75) == "01/01/2022"
        assert format_date(44562.0001) == "01/01/2022"

    def test_datetime(self) -> None:
        assert format_date(datetime(2022, 3, 5, 23, 59)) == "05/03/2022"

    def test_date(self) -> None:
        assert format_date(date(1999, 12, 31)) == "31/12/1999"

    def test_iso_text(self) -> None:
        assert format_date("2022-03-05") == "05/03/2022"
        assert format_date("2022-03-05T10:00:00") == "05/03/2022"

    def test_day_first_text(self) -> None:
        """Slashed dates are read day first."""
        assert format_date("05/03/2022") == "05/03/2022"

    def test_ambiguous_slash_date_is_not_month_first(self) -> None:
        """05/03/2022 is 5 March, never 3 May."""
        assert parse_text_date("05/03/2022") == date(2022, 3, 5)
        assert format_date("05/03/2022") != "03/05/2022"

    def test_month_first_fallback(self) -> None:
        """Month-first is used when day-first is impossible."""
        assert format_date("12/31/2022") == "31/12/2022"

    def test_surrounding_whitespace(self) -> None:
        assert format_date("  2022-03-05 ") == "05/03/2022"

    @pytest.mark.parametrize("value", ["not a date", "31/31/2022", "   "])
    def test_unparseable_text(self, value) -> None:
        with pytest.raises(InvalidDateError):
            format_date(value)

    @pytest.mark.parametrize("value", [True, [44562], {"d": 1}, object()])
    def test_unsupported_types(self, value) -> None:
        """Only dates, numbers and text are accepted."""
        with pytest.raises(InvalidDateError, match="Invalid date format"):
            format_date(value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), 1e12])
    def test_unrepresentable_serials(self, value) -> None:
        with pytest.raises(InvalidDateError):
            format_date(value)

    def test_serial_to_date(self) -> None:
        assert serial_to_date(44562) == date(2022, 1, 1)


class TestFormatNumber:
    """Tests for amount formatting."""

    def test_two_decimals_with_comma(self) -> None:
        assert format_number(121.6) == "121,60"
        assert format_number(5) == "5,00"

    def test_no_thousands_separator(self) -> None:
        assert format_number(1234567.891) == "1234567,89"

    def test_empty_values(self) -> None:
        """Missing values format as zero."""
        assert format_number(None) == "0,00"
        assert format_number("") == "0,00"

    def test_malformed_text_is_zero(self) -> None:
        """Unparseable text silently formats as zero."""
        assert format_number("abc") == "0,00"

    def test_numeric_text(self) -> None:
        assert format_number("350.75") == "350,75"
        assert format_number("12abc") == "12,00"

    def test_half_up_rounding(self) -> None:
        """Exact halves round up."""
        assert format_number(0.125) == "0,13"
        assert format_number(2.675) == "2,67"  # binary value is below the half

    def test_non_finite_is_zero(self) -> None:
        assert format_number(float("inf")) == "0,00"
        assert format_number(math.nan) == "0,00"

    def test_negative_zero(self) -> None:
        assert format_number(-0.0) == "0,00"

    def test_huge_values_do_not_fail(self) -> None:
        formatted = format_number(1e30)
        assert formatted.endswith(",00")
        assert "." not in formatted
