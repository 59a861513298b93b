"""Monthly spending analysis schemas.

These mirror the JSON contract of the external analysis engine:
``summary``, ``trends``, ``recommendations`` and ``budgetHealth``.
"""

from pydantic import Field

from cardbook.schemas.common import CamelModel
from cardbook.schemas.transaction import TransactionPayload

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class Trend(CamelModel):
    type: str = Field(description="increase, decrease or stable")
    category: str
    change: str = Field(description="Relative change, e.g. '+45%'")
    description: str


class Recommendation(CamelModel):
    title: str
    description: str
    priority: str = Field(description="high, medium or low")


class BudgetHealth(CamelModel):
    score: int = Field(ge=0, le=100)
    status: str
    description: str


class AnalysisResult(CamelModel):
    """Structured result produced by the analysis engine."""

    summary: str
    trends: list[Trend]
    recommendations: list[Recommendation]
    budget_health: BudgetHealth


class AnalysisResponse(AnalysisResult):
    """Analysis result stamped with the month it covers."""

    month: str


class AnalysisRequest(CamelModel):
    month: str = Field(pattern=MONTH_PATTERN, description="Month in YYYY-MM form")
    transactions: list[TransactionPayload] = Field(default_factory=list)
