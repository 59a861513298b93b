"""Enumerations shared by schemas and database models."""

import enum


class TransactionStatus(str, enum.Enum):
    """Payment status reported by the bank export."""

    completed = "completed"
    pending = "pending"
    cancelled = "cancelled"


class RecordState(str, enum.Enum):
    """Lifecycle state of a stored transaction.

    Soft delete moves a record to ``deleted``; only a bulk clear by owner
    removes rows physically.
    """

    active = "active"
    deleted = "deleted"
