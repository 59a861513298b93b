"""User model for data ownership.

Authentication lives outside this service; a user row only anchors
ownership of transactions and analysis history.
"""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cardbook.models.base import BaseModel


class User(BaseModel):
    """User owning transactions and monthly analyses."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
