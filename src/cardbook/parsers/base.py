"""Parser capability interface and shared cell helpers."""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol, Sequence, runtime_checkable

from cardbook.schemas.internal import ParsedTransaction

# A sheet is the first worksheet of an export: a list of rows, each a list of
# raw cell values (str, int, float, datetime or None).
Sheet = Sequence[Sequence[Any]]

_WHITESPACE = re.compile(r"\s+")


@runtime_checkable
class StatementParser(Protocol):
    """Converts one bank export sheet into candidate transactions."""

    format_id: str

    def parse(self, sheet: Sheet) -> list[ParsedTransaction]:
        ...


@dataclass(frozen=True)
class SheetLayout:
    """Fixed row range and column positions of a bank export."""

    header_rows: int
    trailer_rows: int
    date_col: int
    merchant_col: int
    amount_col: int
    payment_method_col: int
    date_format: str = "%Y.%m.%d %H:%M:%S"

    @property
    def required_width(self) -> int:
        return max(self.date_col, self.merchant_col, self.amount_col, self.payment_method_col) + 1

    def data_rows(self, sheet: Sheet) -> range:
        """Indices of the rows between the header block and the trailer."""
        return range(self.header_rows, len(sheet) - self.trailer_rows)


def format_cell(value: Any, date_format: str = "%Y.%m.%d %H:%M:%S") -> str:
    """Render a raw cell value the way it is displayed in the spreadsheet."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.strftime(date_format)
    if isinstance(value, date):
        return value.strftime(date_format.split(" ")[0])
    return str(value)


def parse_amount(text: str) -> int | None:
    """Parse an amount such as "5,000" into an integer; None when unparsable."""
    cleaned = _WHITESPACE.sub("", text or "").replace(",", "")
    if not cleaned:
        return None
    try:
        return int(cleaned)
    except ValueError:
        return None


def is_blank_row(row: Sequence[Any]) -> bool:
    return all(format_cell(cell).strip() == "" for cell in row)


def make_transaction_key(date_text: str, amount: int, merchant: str) -> str:
    """Build the dedup key ``{date}_{amount}_{merchant}`` with all whitespace removed."""
    return _WHITESPACE.sub("", f"{date_text}_{amount}_{merchant}")
