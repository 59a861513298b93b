"""Bank statement export parsing.

Each supported bank export layout has one parser registered in the
ParserFactory under a format identifier (e.g. "kookmin"). Parsers take a
sheet (rows of cell values) and return candidate transactions with their
dedup keys already computed.
"""

from cardbook.parsers.base import Sheet, StatementParser
from cardbook.parsers.factory import ParserFactory, get_parser_factory
from cardbook.parsers.kookmin import KookminStatementParser
from cardbook.parsers.workbook import load_sheet

__all__ = [
    "Sheet",
    "StatementParser",
    "ParserFactory",
    "get_parser_factory",
    "KookminStatementParser",
    "load_sheet",
]
