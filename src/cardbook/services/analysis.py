"""Monthly spending analysis service.

Calls the external analysis engine and keeps exactly one analysis history
row per (user, month): the first request creates it, later requests for the
same month overwrite it in place.
"""

import logging
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.analysis.engine import AnalysisEngine
from cardbook.core.exceptions import NotFoundError, PersistenceConflict, ValidationError
from cardbook.models.analysis_history import AnalysisHistory
from cardbook.models.user import User
from cardbook.repositories.analysis_history import AnalysisHistoryRepository
from cardbook.repositories.user import UserRepository
from cardbook.schemas.analysis import AnalysisResponse
from cardbook.schemas.transaction import TransactionPayload

logger = logging.getLogger(__name__)


class AnalysisService:
    """Service orchestrating the analysis engine and history upserts."""

    def __init__(self, db: AsyncSession, engine: AnalysisEngine):
        self.db = db
        self.engine = engine
        self.user_repo = UserRepository(db)
        self.history_repo = AnalysisHistoryRepository(db)

    async def _get_user(self, email: str) -> User:
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("NF_001")
        return user

    async def analyze_month(
        self, email: str, month: str, transactions: Sequence[TransactionPayload] | None
    ) -> AnalysisResponse:
        """Analyze one month of spending and record it in the history.

        Args:
            email: Owner's email address
            month: Month in YYYY-MM form
            transactions: Transactions to analyze (client-supplied)

        Returns:
            The engine's analysis stamped with ``month``

        Raises:
            ValidationError: If no transactions were supplied (engine not called)
            NotFoundError: If the owner does not exist
            AnalysisEngineError: If the engine fails; nothing is written
            PersistenceConflict: If the history upsert keeps colliding
        """
        if not transactions:
            raise ValidationError("VAL_003", {"month": month})

        user = await self._get_user(email)
        response = await self.engine.analyze(list(transactions), month)
        response.month = month

        try:
            created = await self._upsert(user, response)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Analysis stored",
            extra={"user_id": user.id, "month": month, "created": created},
        )
        return response

    async def _upsert(self, user: User, response: AnalysisResponse) -> bool:
        """Create or overwrite the (user, month) row; True when created.

        Two concurrent requests can both see no row and both insert. The
        insert runs in a savepoint; the loser re-reads the winner's row and
        updates it instead.
        """
        for attempt in range(2):
            existing = await self.history_repo.get_by_user_and_month(user.id, response.month)
            if existing is not None:
                existing.apply(response)
                await self.db.flush()
                return False
            try:
                async with self.db.begin_nested():
                    await self.history_repo.create(AnalysisHistory.from_response(user.id, response))
                return True
            except IntegrityError:
                logger.warning(
                    "Analysis history conflict",
                    extra={"user_id": user.id, "month": response.month, "attempt": attempt + 1},
                )
        raise PersistenceConflict("DB_002", {"entity": "analysis_history", "month": response.month})

    async def list_analyses(self, email: str) -> list[AnalysisResponse]:
        """All stored analyses of the owner, newest month first.

        An empty list is a valid result; an unknown owner is NotFoundError.
        """
        user = await self._get_user(email)
        histories = await self.history_repo.get_by_user(user.id)
        return [history.to_response() for history in histories]
