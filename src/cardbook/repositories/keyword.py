"""Keyword repository feeding the categorization keyword table."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.models.keyword import Keyword


class KeywordRepository:
    """Read access to the merchant keyword dictionary."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[Keyword]:
        result = await self.db.execute(select(Keyword).order_by(Keyword.name))
        return list(result.scalars().all())

    async def get_mapping(self) -> dict[str, str]:
        """Return {fragment: category} for every stored keyword."""
        return {kw.name: kw.category for kw in await self.get_all()}
