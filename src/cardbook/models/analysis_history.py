"""Monthly spending analysis history, one row per (user, month)."""
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cardbook.models.base import BaseModel
from cardbook.models.json_columns import (
    dump_recommendations,
    dump_trends,
    load_recommendations,
    load_trends,
)
from cardbook.schemas.analysis import (
    AnalysisResponse,
    BudgetHealth,
    Recommendation,
    Trend,
)


class AnalysisHistory(BaseModel):
    """Persisted analysis for one month of a user's spending."""

    __tablename__ = "analysis_history"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Budget health
    total_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    health_status: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    health_description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    trends_json: Mapped[str] = mapped_column("trends", Text, nullable=False, default="[]")
    recommendations_json: Mapped[str] = mapped_column(
        "recommendations", Text, nullable=False, default="[]"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "month", name="uq_analysis_history_user_month"),
    )

    @property
    def trends(self) -> list[Trend]:
        return load_trends(self.trends_json)

    @trends.setter
    def trends(self, value: list[Trend]) -> None:
        self.trends_json = dump_trends(value)

    @property
    def recommendations(self) -> list[Recommendation]:
        return load_recommendations(self.recommendations_json)

    @recommendations.setter
    def recommendations(self, value: list[Recommendation]) -> None:
        self.recommendations_json = dump_recommendations(value)

    @classmethod
    def from_response(cls, user_id: UUID, response: AnalysisResponse) -> "AnalysisHistory":
        history = cls(user_id=user_id, month=response.month)
        history.apply(response)
        return history

    def apply(self, response: AnalysisResponse) -> None:
        """Overwrite the mutable analysis fields in place."""
        self.summary = response.summary
        self.total_score = response.budget_health.score
        self.health_status = response.budget_health.status
        self.health_description = response.budget_health.description
        self.trends = response.trends
        self.recommendations = response.recommendations

    def to_response(self) -> AnalysisResponse:
        return AnalysisResponse(
            month=self.month,
            summary=self.summary,
            trends=self.trends,
            recommendations=self.recommendations,
            budget_health=BudgetHealth(
                score=self.total_score,
                status=self.health_status,
                description=self.health_description,
            ),
        )

    def __repr__(self) -> str:
        return f"<AnalysisHistory(id={self.id}, user_id={self.user_id}, month={self.month})>"
