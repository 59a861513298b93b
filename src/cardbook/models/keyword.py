"""Merchant keyword -> category dictionary used for categorization."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from cardbook.models.base import Base


class Keyword(Base):
    """A merchant-name fragment and the category it implies."""

    __tablename__ = "keywords"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Keyword(name={self.name}, category={self.category})>"
