"""Base repository shared by the model repositories."""
from typing import Generic, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Generic repository bound to one model.

    Write helpers flush but do not commit; the calling service owns the
    unit of work and commits once per request.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def create(self, obj: T) -> T:
        """Add a new record and flush it so generated fields are populated."""
        self.db.add(obj)
        await self.db.flush()
        return obj
