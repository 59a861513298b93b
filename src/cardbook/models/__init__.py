"""Database models."""
from cardbook.models.user import User
from cardbook.models.keyword import Keyword
from cardbook.models.transaction import RecordState, Transaction, TransactionStatus
from cardbook.models.analysis_history import AnalysisHistory

__all__ = [
    "User",
    "Keyword",
    "Transaction",
    "TransactionStatus",
    "RecordState",
    "AnalysisHistory",
]
