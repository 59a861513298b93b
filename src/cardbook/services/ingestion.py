"""Statement ingestion service.

This module orchestrates the import workflow:
1. Validate the upload and resolve the owner
2. Parse the workbook with the parser for its export format
3. Resolve a category for every candidate
4. Drop candidates whose dedup key is already stored
5. Persist the survivors for the owner

It also hosts the single-record transaction operations (amount/category
edits, soft delete) and the owner-wide clear.
"""

import logging
from typing import NamedTuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.categorization.keywords import KeywordTable
from cardbook.categorization.resolver import CategoryResolver, is_ambiguous_merchant
from cardbook.config import settings
from cardbook.core.exceptions import NotFoundError, PersistenceConflict, ValidationError
from cardbook.models.transaction import Transaction
from cardbook.models.user import User
from cardbook.parsers.factory import ParserFactory, get_parser_factory
from cardbook.repositories.transaction import TransactionRepository
from cardbook.repositories.user import UserRepository
from cardbook.schemas.internal import ParsedTransaction
from cardbook.schemas.transaction import TransactionResponse

logger = logging.getLogger(__name__)


class DedupResult(NamedTuple):
    fresh: list[ParsedTransaction]
    existing: int
    duplicates: int


class DeduplicationGate:
    """Filters candidates whose dedup key already exists.

    Keys repeated inside the same batch keep their first occurrence only,
    since the store allows each key once.
    """

    def __init__(self, transaction_repo: TransactionRepository):
        self.transaction_repo = transaction_repo

    async def filter_new(
        self, candidates: list[ParsedTransaction]
    ) -> DedupResult:
        """Drop stored keys and in-batch repeats, counting each kind separately."""
        unique: dict[str, ParsedTransaction] = {}
        for candidate in candidates:
            unique.setdefault(candidate.transaction_key, candidate)

        existing = await self.transaction_repo.get_existing_keys(unique)
        fresh = [c for key, c in unique.items() if key not in existing]
        return DedupResult(
            fresh=fresh,
            existing=len(unique) - len(fresh),
            duplicates=len(candidates) - len(unique),
        )


class IngestionService:
    """Service for importing statement exports and editing transactions."""

    def __init__(
        self,
        db: AsyncSession,
        keywords: KeywordTable,
        parser_factory: ParserFactory | None = None,
    ):
        """Initialize the service.

        Args:
            db: Database session for persistence
            keywords: Keyword table snapshot used for this request
            parser_factory: Parser registry (default: global factory)
        """
        self.db = db
        self.parser_factory = parser_factory or get_parser_factory()
        self.resolver = CategoryResolver(keywords, default_category=settings.default_category)
        self.user_repo = UserRepository(db)
        self.transaction_repo = TransactionRepository(db)
        self.dedup_gate = DeduplicationGate(self.transaction_repo)

    async def _get_user(self, email: str) -> User:
        user = await self.user_repo.get_by_email(email)
        if user is None:
            raise NotFoundError("NF_001")
        return user

    async def _get_transaction(self, user: User, transaction_id: UUID) -> Transaction:
        transaction = await self.transaction_repo.get_active_for_user(user.id, transaction_id)
        if transaction is None:
            raise NotFoundError("NF_002", {"transaction_id": str(transaction_id)})
        return transaction

    async def import_sheet(
        self,
        email: str,
        content: bytes | None,
        filename: str | None = None,
        statement_format: str | None = None,
    ) -> list[TransactionResponse]:
        """Import a statement export for a user.

        Args:
            email: Owner's email address
            content: Raw workbook bytes
            filename: Original filename (format hint)
            statement_format: Export format identifier (default from settings)

        Returns:
            The owner's full list of non-deleted transactions

        Raises:
            ValidationError: If the file is empty or the format is unsupported
            NotFoundError: If the owner does not exist
            ParseError: If the workbook or one of its rows is malformed
            PersistenceConflict: If a concurrent import keeps colliding on keys
        """
        if not content:
            raise ValidationError("VAL_002")

        user = await self._get_user(email)
        format_id = statement_format or settings.statement_format

        try:
            candidates = self.parser_factory.parse(content, filename, format_id)
            self.categorize(candidates, await self._history_for(candidates, user))
            inserted, dedup = await self._persist_new(user, candidates)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Statement imported",
            extra={
                "user_id": user.id,
                "statement_format": format_id,
                "candidates": len(candidates),
                "inserted": inserted,
                "skipped_existing": dedup.existing,
                "duplicates_in_batch": dedup.duplicates,
            },
        )
        return await self.list_for_user(user)

    async def _history_for(
        self, candidates: list[ParsedTransaction], user: User
    ) -> dict[str, str]:
        merchants = {c.merchant for c in candidates if not is_ambiguous_merchant(c.merchant)}
        owner_scope = user.id if settings.category_history_scope == "owner" else None
        return await self.transaction_repo.get_latest_categories(merchants, user_id=owner_scope)

    def categorize(
        self, candidates: list[ParsedTransaction], history: dict[str, str]
    ) -> list[ParsedTransaction]:
        """Set the resolved category on every candidate in place."""
        for candidate in candidates:
            candidate.category = self.resolver.resolve(
                candidate.merchant, history.get(candidate.merchant)
            )
        return candidates

    async def _persist_new(
        self, user: User, candidates: list[ParsedTransaction]
    ) -> tuple[int, DedupResult]:
        """Insert candidates whose keys are not stored yet.

        A concurrent import can insert the same key between our existence
        check and our flush. The insert runs in a savepoint; on a unique
        violation the check is repeated once and the losing duplicates are
        dropped before the second attempt.
        """
        for attempt in range(2):
            dedup = await self.dedup_gate.filter_new(candidates)
            fresh = dedup.fresh
            if not fresh:
                return 0, dedup
            try:
                async with self.db.begin_nested():
                    await self.transaction_repo.add_all(
                        [self._to_model(user, c) for c in fresh]
                    )
                return len(fresh), dedup
            except IntegrityError:
                logger.warning(
                    "Dedup key conflict during import",
                    extra={"user_id": user.id, "attempt": attempt + 1},
                )
        raise PersistenceConflict("DB_002", {"entity": "transaction"})

    @staticmethod
    def _to_model(user: User, candidate: ParsedTransaction) -> Transaction:
        return Transaction(
            user_id=user.id,
            transaction_key=candidate.transaction_key,
            date=candidate.date,
            merchant=candidate.merchant,
            amount=candidate.amount,
            category=candidate.category or settings.default_category,
            description=candidate.description,
            status=candidate.status,
            payment_method=candidate.payment_method,
        )

    async def list_for_user(self, user: User) -> list[TransactionResponse]:
        transactions = await self.transaction_repo.get_active_by_user(user.id)
        return [TransactionResponse.model_validate(t) for t in transactions]

    async def list_transactions(self, email: str) -> list[TransactionResponse]:
        """List the owner's non-deleted transactions."""
        return await self.list_for_user(await self._get_user(email))

    async def update_amount(
        self, email: str, transaction_id: UUID, amount: int
    ) -> TransactionResponse:
        user = await self._get_user(email)
        transaction = await self._get_transaction(user, transaction_id)
        transaction.amount = amount
        await self.db.commit()
        return TransactionResponse.model_validate(transaction)

    async def update_category(
        self, email: str, transaction_id: UUID, category: str
    ) -> TransactionResponse:
        """Change one transaction's category.

        The new category becomes merchant history for future imports.
        """
        category = (category or "").strip()
        if not category:
            raise ValidationError("VAL_001", {"field": "category"})
        user = await self._get_user(email)
        transaction = await self._get_transaction(user, transaction_id)
        transaction.category = category
        await self.db.commit()
        return TransactionResponse.model_validate(transaction)

    async def delete_transaction(self, email: str, transaction_id: UUID) -> None:
        """Soft delete: the row stays in the store but leaves every listing."""
        user = await self._get_user(email)
        transaction = await self._get_transaction(user, transaction_id)
        await self.transaction_repo.soft_delete(transaction)
        await self.db.commit()

    async def clear_transactions(self, email: str) -> int:
        """Physically remove every transaction of the owner."""
        user = await self._get_user(email)
        deleted = await self.transaction_repo.delete_by_user(user.id)
        await self.db.commit()
        logger.info("Transactions cleared", extra={"user_id": user.id, "deleted": deleted})
        return deleted
