"""User repository for owner lookups."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.models.user import User
from cardbook.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """Find user by email address."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
