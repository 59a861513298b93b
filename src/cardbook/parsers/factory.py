"""Parser factory routing uploads to the parser for their export format.

Parsers are registered under an explicit format identifier. Adding a bank
means registering one more StatementParser; there is no base class to
extend.
"""

import logging

from cardbook.core.exceptions import ValidationError
from cardbook.parsers.base import StatementParser
from cardbook.parsers.kookmin import KookminStatementParser
from cardbook.parsers.workbook import load_sheet
from cardbook.schemas.internal import ParsedTransaction

logger = logging.getLogger(__name__)


class ParserFactory:
    """Registry of statement parsers keyed by format identifier.

    Example:
        >>> factory = get_parser_factory()
        >>> candidates = factory.parse(xls_bytes, "statement.xls", "kookmin")
    """

    def __init__(self):
        self._parsers: dict[str, StatementParser] = {}

    def register(self, parser: StatementParser) -> None:
        """Register a parser under its ``format_id``."""
        if not isinstance(parser, StatementParser):
            raise TypeError(f"{parser!r} does not implement StatementParser")
        self._parsers[parser.format_id] = parser

    def unregister(self, format_id: str) -> None:
        self._parsers.pop(format_id, None)

    def get_registered_formats(self) -> list[str]:
        return sorted(self._parsers)

    def get_parser(self, format_id: str) -> StatementParser:
        """Get the parser for a format.

        Raises:
            ValidationError: If no parser is registered for the format
        """
        parser = self._parsers.get((format_id or "").strip().lower())
        if parser is None:
            raise ValidationError(
                "VAL_004",
                {"statement_format": format_id, "supported": self.get_registered_formats()},
            )
        return parser

    def parse(
        self, content: bytes, filename: str | None, format_id: str
    ) -> list[ParsedTransaction]:
        """Load the workbook and parse its first sheet with the selected parser."""
        parser = self.get_parser(format_id)
        sheet = load_sheet(content, filename)
        return parser.parse(sheet)


_factory_instance: ParserFactory | None = None


def get_parser_factory() -> ParserFactory:
    """Get or create the global ParserFactory with the built-in formats."""
    global _factory_instance
    if _factory_instance is None:
        _factory_instance = ParserFactory()
        _factory_instance.register(KookminStatementParser())
    return _factory_instance
