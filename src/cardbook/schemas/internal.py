"""Internal data schemas for parsed statement rows.

These models represent candidate transactions between parsing and
persistence: they carry the dedup key but no owner yet.
"""

from pydantic import BaseModel, Field, field_validator

from cardbook.schemas.enums import TransactionStatus


class ParsedTransaction(BaseModel):
    """A single candidate transaction extracted from a statement sheet.

    Amounts are in the smallest currency unit (won for KRW).
    """

    row_index: int = Field(..., description="0-based row index in the source sheet")
    date: str = Field(..., description="Transaction date exactly as exported")
    merchant: str = Field(..., description="Merchant display name")
    amount: int = Field(..., description="Withdrawal amount (minor units)")
    payment_method: str = Field(default="", description="Payment method column")
    status: TransactionStatus = Field(default=TransactionStatus.completed)
    transaction_key: str = Field(..., description="Whitespace-free dedup key")
    category: str | None = Field(None, description="Resolved category (set after parsing)")
    description: str | None = None

    @field_validator("merchant", "date")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v
