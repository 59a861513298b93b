"""Parser for KB Kookmin Bank card/account transaction exports.

Layout of the first worksheet:
- rows 0-4: title and column headers
- last row: totals line
- column 0: transaction date (kept verbatim)
- column 2: merchant
- column 4: withdrawal amount, with thousands separators
- column 7: payment method
"""

import logging

from cardbook.core.exceptions import ParseError
from cardbook.parsers.base import (
    Sheet,
    SheetLayout,
    format_cell,
    is_blank_row,
    make_transaction_key,
    parse_amount,
)
from cardbook.schemas.enums import TransactionStatus
from cardbook.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)

KOOKMIN_LAYOUT = SheetLayout(
    header_rows=5,
    trailer_rows=1,
    date_col=0,
    merchant_col=2,
    amount_col=4,
    payment_method_col=7,
)


class KookminStatementParser:
    """Statement parser for the Kookmin export layout.

    Rows whose withdrawal amount is zero, empty or not a number are deposits
    or cancellations and are skipped. A data row without a date or merchant
    aborts the whole batch with ParseError.
    """

    format_id = "kookmin"

    def __init__(self, layout: SheetLayout = KOOKMIN_LAYOUT):
        self.layout = layout

    def parse(self, sheet: Sheet) -> list[ParsedTransaction]:
        layout = self.layout
        if len(sheet) < layout.header_rows + layout.trailer_rows:
            raise ParseError(
                "PARSE_003",
                {"rows": len(sheet), "expected_at_least": layout.header_rows + layout.trailer_rows},
            )

        transactions: list[ParsedTransaction] = []
        skipped = 0
        for index in layout.data_rows(sheet):
            row = sheet[index]
            if row is None or is_blank_row(row):
                continue
            if len(row) < layout.required_width:
                raise ParseError(
                    "PARSE_002",
                    {"row_index": index, "reason": "missing_columns", "width": len(row)},
                )

            amount = parse_amount(format_cell(row[layout.amount_col]))
            if not amount:
                skipped += 1
                continue

            date_text = format_cell(row[layout.date_col], layout.date_format)
            merchant = format_cell(row[layout.merchant_col])
            if not date_text.strip():
                raise ParseError("PARSE_002", {"row_index": index, "reason": "missing_date"})
            if not merchant.strip():
                raise ParseError("PARSE_002", {"row_index": index, "reason": "missing_merchant"})

            transactions.append(
                ParsedTransaction(
                    row_index=index,
                    date=date_text,
                    merchant=merchant,
                    amount=amount,
                    payment_method=format_cell(row[layout.payment_method_col]),
                    status=TransactionStatus.completed,
                    transaction_key=make_transaction_key(date_text, amount, merchant),
                )
            )

        logger.info(
            "Parsed statement sheet",
            extra={
                "statement_format": self.format_id,
                "rows": len(sheet),
                "candidates": len(transactions),
                "skipped_rows": skipped,
            },
        )
        return transactions
