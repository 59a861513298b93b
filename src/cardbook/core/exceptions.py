"""Custom exception classes for the ingestion and analysis pipeline.

Every exception carries an error_code that maps to the catalog in
errors.py. The API layer turns them into a consistent JSON body; the
services raise them without knowing anything about HTTP beyond the
suggested status code.
"""

from typing import Any


class CardbookError(Exception):
    """Base exception for all pipeline errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "PARSE_002")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    default_status: int = 500

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context (not shown to users)
            http_status: HTTP status code (default: the class default)
        """
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status or self.default_status
        super().__init__(error_code)


class ValidationError(CardbookError):
    """Raised when a request is well-formed but unusable.

    Covers an empty upload, an empty transaction list for analysis and an
    unknown statement format.
    """

    default_status = 400


class NotFoundError(CardbookError):
    """Raised when the owner, a transaction or a history collection is missing."""

    default_status = 404


class ParseError(CardbookError):
    """Raised when an uploaded workbook cannot be read or a row is malformed.

    Parsing is all-or-nothing: a single bad row aborts the whole import
    and nothing is persisted.
    """

    default_status = 400


class AnalysisEngineError(CardbookError):
    """Raised when the external analysis engine fails.

    Common causes:
    - Transport failure or missing credentials (AI_001)
    - Timeout (AI_002)
    - Response that does not match the expected JSON shape (AI_003)
    """

    default_status = 502


class PersistenceConflict(CardbookError):
    """Raised when a unique-constraint race survives one transparent retry."""

    default_status = 409
