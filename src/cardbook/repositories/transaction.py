"""Transaction repository with dedup and merchant-history queries."""
from typing import Iterable
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.models.transaction import Transaction
from cardbook.repositories.base import BaseRepository
from cardbook.schemas.enums import RecordState


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_active_by_user(self, user_id: UUID) -> list[Transaction]:
        """Get the owner's non-deleted transactions, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id, Transaction.state == RecordState.active)
            .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_active_for_user(
        self, user_id: UUID, transaction_id: UUID
    ) -> Transaction | None:
        """Get one of the owner's non-deleted transactions by ID."""
        result = await self.db.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
                Transaction.state == RecordState.active,
            )
        )
        return result.scalar_one_or_none()

    async def get_latest_categories(
        self, merchants: Iterable[str], user_id: UUID | None = None
    ) -> dict[str, str]:
        """
        Most recently dated category recorded for each merchant.

        Dates are compared as exported strings, which sort chronologically for
        the supported formats. Pass user_id to restrict the lookup to one owner.
        Returns dict of {merchant: category}.
        """
        names = sorted(set(merchants))
        if not names:
            return {}

        ranked = select(
            Transaction.merchant,
            Transaction.category,
            func.row_number()
            .over(
                partition_by=Transaction.merchant,
                order_by=(Transaction.date.desc(), Transaction.created_at.desc()),
            )
            .label("recency"),
        ).where(Transaction.merchant.in_(names))
        if user_id is not None:
            ranked = ranked.where(Transaction.user_id == user_id)

        latest = ranked.subquery()
        result = await self.db.execute(
            select(latest.c.merchant, latest.c.category).where(latest.c.recency == 1)
        )
        return {merchant: category for merchant, category in result.all()}

    async def get_existing_keys(self, keys: Iterable[str]) -> set[str]:
        """Return the subset of dedup keys already stored (any owner, any state)."""
        wanted = sorted(set(keys))
        if not wanted:
            return set()
        result = await self.db.execute(
            select(Transaction.transaction_key).where(
                Transaction.transaction_key.in_(wanted)
            )
        )
        return set(result.scalars().all())

    async def add_all(self, transactions: list[Transaction]) -> list[Transaction]:
        """Insert new rows and flush so unique violations surface here."""
        self.db.add_all(transactions)
        await self.db.flush()
        return transactions

    async def soft_delete(self, transaction: Transaction) -> Transaction:
        """Mark a transaction deleted without removing the row."""
        transaction.state = RecordState.deleted
        await self.db.flush()
        return transaction

    async def delete_by_user(self, user_id: UUID) -> int:
        """Physically delete every transaction of one owner."""
        result = await self.db.execute(
            delete(Transaction).where(Transaction.user_id == user_id)
        )
        return int(result.rowcount or 0)
