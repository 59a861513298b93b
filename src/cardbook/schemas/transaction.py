"""Transaction request/response schemas."""

from uuid import UUID

from pydantic import Field, field_validator

from cardbook.schemas.enums import TransactionStatus
from cardbook.schemas.common import CamelModel


class TransactionResponse(CamelModel):
    """Transaction as returned to the client."""

    id: UUID
    date: str
    merchant: str
    amount: int
    category: str
    description: str | None = None
    status: TransactionStatus
    payment_method: str


class TransactionPayload(CamelModel):
    """Transaction as submitted by the client for analysis."""

    id: str | None = None
    date: str
    merchant: str
    amount: int
    category: str
    description: str | None = None
    status: TransactionStatus = TransactionStatus.completed
    payment_method: str = ""


class CategoryUpdateRequest(CamelModel):
    category: str = Field(min_length=1, max_length=100)

    @field_validator("category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class AmountUpdateRequest(CamelModel):
    amount: int = Field(ge=0, description="New amount in minor units")


class ClearResult(CamelModel):
    deleted_count: int
