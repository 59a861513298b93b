"""Load the first worksheet of an uploaded .xls/.xlsx export into rows."""

import logging
from io import BytesIO
from typing import Any

import xlrd
from openpyxl import load_workbook

from cardbook.core.exceptions import ParseError

logger = logging.getLogger(__name__)

XLS_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"
XLSX_MAGIC = b"PK\x03\x04"


def _load_xls(content: bytes) -> list[list[Any]]:
    book = xlrd.open_workbook(file_contents=content)
    sheet = book.sheet_by_index(0)
    rows: list[list[Any]] = []
    for row_idx in range(sheet.nrows):
        values: list[Any] = []
        for cell in sheet.row(row_idx):
            if cell.ctype == xlrd.XL_CELL_DATE:
                values.append(xlrd.xldate.xldate_as_datetime(cell.value, book.datemode))
            elif cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
                values.append(None)
            else:
                values.append(cell.value)
        rows.append(values)
    return rows


def _load_xlsx(content: bytes) -> list[list[Any]]:
    workbook = load_workbook(filename=BytesIO(content), data_only=True, read_only=True)
    try:
        sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def load_sheet(content: bytes, filename: str | None = None) -> list[list[Any]]:
    """Read the first worksheet of a workbook.

    The format is detected from the file signature; the filename is only
    used as a fallback hint and for log context.

    Raises:
        ParseError: If the content is not a readable .xls or .xlsx workbook
    """
    name = (filename or "").lower()
    try:
        if content.startswith(XLS_MAGIC):
            rows = _load_xls(content)
        elif content.startswith(XLSX_MAGIC):
            rows = _load_xlsx(content)
        elif name.endswith(".xls"):
            rows = _load_xls(content)
        elif name.endswith((".xlsx", ".xlsm")):
            rows = _load_xlsx(content)
        else:
            raise ParseError("PARSE_001", {"reason": "unknown_signature"})
    except ParseError:
        raise
    except Exception as e:
        # Damaged files surface as many library-specific types
        # (XLRDError, CompDocError, BadZipFile, KeyError, struct.error).
        logger.warning("Workbook could not be opened", extra={"error_type": type(e).__name__})
        raise ParseError("PARSE_001", {"error_type": type(e).__name__}) from e

    logger.info("Loaded workbook", extra={"rows": len(rows)})
    return rows
