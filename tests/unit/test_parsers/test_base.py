"""Tests for shared cell helpers."""

from datetime import date, datetime

from cardbook.parsers.base import (
    SheetLayout,
    format_cell,
    is_blank_row,
    make_transaction_key,
    parse_amount,
)


class TestFormatCell:
    def test_none_is_empty(self):
        assert format_cell(None) == ""

    def test_integral_float_drops_fraction(self):
        assert format_cell(5000.0) == "5000"
        assert format_cell(12.5) == "12.5"

    def test_datetime_and_date(self):
        assert format_cell(datetime(2024, 2, 14, 9, 5, 3)) == "2024.02.14 09:05:03"
        assert format_cell(date(2024, 2, 14)) == "2024.02.14"

    def test_bool(self):
        assert format_cell(True) == "TRUE"


class TestParseAmount:
    def test_thousands_separators(self):
        assert parse_amount("1,234,500") == 1234500

    def test_surrounding_whitespace(self):
        assert parse_amount(" 5 000 ") == 5000

    def test_unparsable(self):
        assert parse_amount("") is None
        assert parse_amount("abc") is None
        assert parse_amount("12.50") is None


class TestTransactionKey:
    def test_whitespace_removed_everywhere(self):
        key = make_transaction_key("2024.02.14 12:00:00", 5000, " 스타벅스\t동백점 ")
        assert key == "2024.02.1412:00:00_5000_스타벅스동백점"

    def test_same_fields_same_key(self):
        assert make_transaction_key("2024.02.14", 5000, "스타벅스 동백점") == make_transaction_key(
            "2024.02.14", 5000, "스타벅스동백점"
        )


class TestSheetLayout:
    def test_required_width_and_rows(self):
        layout = SheetLayout(header_rows=2, trailer_rows=1, date_col=0, merchant_col=3, amount_col=1, payment_method_col=2)

        assert layout.required_width == 4
        assert list(layout.data_rows([[1]] * 6)) == [2, 3, 4]

    def test_blank_row(self):
        assert is_blank_row([None, "", "  "])
        assert not is_blank_row([None, "x"])
