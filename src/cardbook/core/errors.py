"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request payload failed validation",
        "user_message": "Invalid input data.",
        "suggestion": "Please check your input and try again.",
        "retry_allowed": True,
    },
    "VAL_002": {
        "code": "VAL_002",
        "message": "Uploaded statement file is empty or missing",
        "user_message": "The uploaded file is empty.",
        "suggestion": "Export the statement from your bank again and upload the file.",
        "retry_allowed": True,
    },
    "VAL_003": {
        "code": "VAL_003",
        "message": "Analysis requested with an empty transaction list",
        "user_message": "There are no transactions to analyze.",
        "suggestion": "Upload a statement for this month first.",
        "retry_allowed": False,
    },
    "VAL_004": {
        "code": "VAL_004",
        "message": "Unsupported statement format identifier",
        "user_message": "We don't support this bank export format yet.",
        "suggestion": "Please upload a supported bank export (e.g., Kookmin).",
        "retry_allowed": False,
    },
    "VAL_005": {
        "code": "VAL_005",
        "message": "Uploaded file exceeds maximum size",
        "user_message": "The file is too large.",
        "suggestion": "Please upload a smaller statement export.",
        "retry_allowed": False,
    },
    "NF_001": {
        "code": "NF_001",
        "message": "User not found",
        "user_message": "We couldn't find your account.",
        "suggestion": "Please sign in again.",
        "retry_allowed": False,
    },
    "NF_002": {
        "code": "NF_002",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "PARSE_001": {
        "code": "PARSE_001",
        "message": "Workbook could not be opened",
        "user_message": "This file doesn't look like a bank statement export.",
        "suggestion": "Upload the .xls or .xlsx file downloaded from your bank.",
        "retry_allowed": False,
    },
    "PARSE_002": {
        "code": "PARSE_002",
        "message": "Statement row is missing a required cell",
        "user_message": "Some rows in this statement are incomplete.",
        "suggestion": "Export the statement again without editing it.",
        "retry_allowed": False,
    },
    "PARSE_003": {
        "code": "PARSE_003",
        "message": "Statement has fewer rows than the format's header and trailer",
        "user_message": "This statement doesn't contain any transaction rows.",
        "suggestion": "Check the selected period and export again.",
        "retry_allowed": False,
    },
    "AI_001": {
        "code": "AI_001",
        "message": "Analysis engine request failed",
        "user_message": "The spending analysis service is unavailable.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "AI_002": {
        "code": "AI_002",
        "message": "Analysis engine request timed out",
        "user_message": "The spending analysis took too long.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "AI_003": {
        "code": "AI_003",
        "message": "Analysis engine returned an unparsable response",
        "user_message": "We couldn't understand the analysis result.",
        "suggestion": "Please try again. Contact support if the problem persists.",
        "retry_allowed": True,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "A database error occurred.",
        "suggestion": "Please try again later.",
        "retry_allowed": True,
    },
    "DB_002": {
        "code": "DB_002",
        "message": "Unique constraint conflict persisted after retry",
        "user_message": "This record was changed by another request.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred.",
        "suggestion": "Please try again later or contact support.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic entry for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
