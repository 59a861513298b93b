"""Transaction model representing one imported card statement row."""
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cardbook.models.base import BaseModel
from cardbook.schemas.enums import RecordState, TransactionStatus


class Transaction(BaseModel):
    """Card transaction owned by a single user."""

    __tablename__ = "transactions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Dedup key; unique across all owners.
    transaction_key: Mapped[str] = mapped_column(String(512), unique=True, nullable=False)
    # Kept exactly as exported by the bank (e.g. "2024.02.14 12:00:00").
    date: Mapped[str] = mapped_column(String(64), nullable=False)
    merchant: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TransactionStatus] = mapped_column(
        Enum(TransactionStatus, name="transaction_status", native_enum=False),
        default=TransactionStatus.completed,
        nullable=False,
    )
    payment_method: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    state: Mapped[RecordState] = mapped_column(
        Enum(RecordState, name="record_state", native_enum=False),
        default=RecordState.active,
        nullable=False,
    )

    __table_args__ = (
        Index("ix_transactions_merchant_date", "merchant", "date"),
        Index("ix_transactions_user_id_state", "user_id", "state"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.state == RecordState.deleted

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, merchant={self.merchant}, "
            f"amount={self.amount}, state={self.state})>"
        )
