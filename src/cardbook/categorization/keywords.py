"""Immutable merchant keyword table and its process-wide holder."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.repositories.keyword import KeywordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordTable:
    """Snapshot of {keyword fragment: category}.

    Fragments are kept ordered longest first so the first fragment found in
    a merchant name is also the longest match.
    """

    _ordered: tuple[tuple[str, str], ...] = ()
    mapping: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, keywords: Mapping[str, str]) -> KeywordTable:
        usable = {k: v for k, v in keywords.items() if k}
        ordered = tuple(sorted(usable.items(), key=lambda item: len(item[0]), reverse=True))
        return cls(_ordered=ordered, mapping=MappingProxyType(dict(usable)))

    def __len__(self) -> int:
        return len(self._ordered)

    def match(self, merchant: str) -> str | None:
        """Category of the longest fragment contained in ``merchant``, if any."""
        if not merchant:
            return None
        for fragment, category in self._ordered:
            if fragment in merchant:
                return category
        return None


class KeywordTableProvider:
    """Holds the current KeywordTable for the process.

    The table is loaded once at startup. ``reload`` builds a complete new
    snapshot and swaps the reference; readers never see a half-built table.
    """

    def __init__(self, table: KeywordTable | None = None):
        self._table = table
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._table is not None

    @property
    def table(self) -> KeywordTable:
        if self._table is None:
            logger.warning("Keyword table requested before load; using an empty table")
            return KeywordTable()
        return self._table

    async def load(self, db: AsyncSession) -> KeywordTable:
        """Load the table if it has not been loaded yet."""
        if self._table is not None:
            return self._table
        return await self.reload(db)

    async def reload(self, db: AsyncSession) -> KeywordTable:
        """Replace the current snapshot with a fresh one from the store."""
        async with self._lock:
            mapping = await KeywordRepository(db).get_mapping()
            table = KeywordTable.from_mapping(mapping)
            self._table = table
        logger.info("Keyword table loaded", extra={"rows": len(table)})
        return table


_provider: KeywordTableProvider | None = None


def get_keyword_provider() -> KeywordTableProvider:
    """Get or create the process-wide KeywordTableProvider."""
    global _provider
    if _provider is None:
        _provider = KeywordTableProvider()
    return _provider
