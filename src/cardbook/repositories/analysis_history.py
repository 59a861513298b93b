"""Analysis history repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.models.analysis_history import AnalysisHistory
from cardbook.repositories.base import BaseRepository


class AnalysisHistoryRepository(BaseRepository[AnalysisHistory]):
    """Repository for AnalysisHistory model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, AnalysisHistory)

    async def get_by_user(self, user_id: UUID) -> list[AnalysisHistory]:
        """Get all analyses of one owner, newest month first."""
        result = await self.db.execute(
            select(AnalysisHistory)
            .where(AnalysisHistory.user_id == user_id)
            .order_by(AnalysisHistory.month.desc())
        )
        return list(result.scalars().all())

    async def get_by_user_and_month(
        self, user_id: UUID, month: str
    ) -> AnalysisHistory | None:
        result = await self.db.execute(
            select(AnalysisHistory).where(
                AnalysisHistory.user_id == user_id, AnalysisHistory.month == month
            )
        )
        return result.scalar_one_or_none()
