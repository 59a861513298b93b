"""Unit tests for error handling middleware and PII filtering."""

import json
import logging
from unittest.mock import Mock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from cardbook.api.middleware.error_handler import (
    handle_cardbook_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from cardbook.api.middleware.logging import JSONLogFormatter, filter_pii
from cardbook.core.errors import ERROR_CATALOG, get_error, is_retryable
from cardbook.core.exceptions import (
    AnalysisEngineError,
    NotFoundError,
    ParseError,
    PersistenceConflict,
    ValidationError,
)
from cardbook.schemas.transaction import CategoryUpdateRequest


@pytest.fixture
def request_mock():
    request = Mock(spec=Request)
    request.url.path = "/api/v1/transactions/upload"
    request.method = "POST"
    return request


def body(response: JSONResponse) -> dict:
    return json.loads(response.body.decode())


class TestCardbookErrorHandler:
    """Test domain exception handling."""

    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (ValidationError("VAL_002"), 400),
            (NotFoundError("NF_002"), 404),
            (ParseError("PARSE_002", {"row_index": 7}), 400),
            (AnalysisEngineError("AI_001"), 502),
            (AnalysisEngineError("AI_002", http_status=504), 504),
            (PersistenceConflict("DB_002"), 409),
        ],
    )
    async def test_status_follows_exception(self, request_mock, exc, status_code):
        response = await handle_cardbook_error(request_mock, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == status_code
        assert body(response)["error_code"] == exc.error_code

    async def test_body_comes_from_catalog(self, request_mock):
        response = await handle_cardbook_error(request_mock, ParseError("PARSE_001"))

        content = body(response)
        entry = ERROR_CATALOG["PARSE_001"]
        assert content == {
            "error_code": "PARSE_001",
            "message": entry["message"],
            "user_message": entry["user_message"],
            "suggestion": entry["suggestion"],
            "retry_allowed": entry["retry_allowed"],
        }

    async def test_details_are_not_returned(self, request_mock):
        exc = ParseError("PARSE_002", {"row_index": 7, "merchant": "스타벅스"})

        response = await handle_cardbook_error(request_mock, exc)

        assert "스타벅스" not in response.body.decode()


class TestOtherHandlers:
    async def test_validation_error(self, request_mock):
        exc = RequestValidationError(
            [{"loc": ("body", "month"), "msg": "String should match pattern", "type": "string_pattern_mismatch"}]
        )

        response = await handle_validation_error(request_mock, exc)

        content = body(response)
        assert response.status_code == 400
        assert content["error_code"] == "VAL_001"
        assert "body.month" in content["message"]

    async def test_unique_violation_is_conflict(self, request_mock):
        exc = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed: transactions.transaction_key"))

        response = await handle_integrity_error(request_mock, exc)

        assert response.status_code == 409
        assert body(response)["error_code"] == "DB_002"

    async def test_other_integrity_error(self, request_mock):
        exc = IntegrityError("INSERT ...", {}, Exception("NOT NULL constraint failed"))

        response = await handle_integrity_error(request_mock, exc)

        assert response.status_code == 500
        assert body(response)["error_code"] == "DB_001"

    async def test_generic_error_hides_internals(self, request_mock):
        response = await handle_generic_error(request_mock, RuntimeError("secret stack detail"))

        assert response.status_code == 500
        assert body(response)["error_code"] == "SYS_001"
        assert "secret" not in response.body.decode()


class TestErrorCatalog:
    def test_every_entry_has_required_fields(self):
        for code, entry in ERROR_CATALOG.items():
            assert entry["code"] == code
            assert {"message", "user_message", "suggestion", "retry_allowed"} <= entry.keys()

    def test_unknown_code(self):
        assert get_error("NOPE_999")["code"] == "UNKNOWN"

    def test_retryable(self):
        assert is_retryable("AI_002")
        assert not is_retryable("PARSE_002")


class TestPIIFiltering:
    """Test PII filtering in logs."""

    def test_card_number(self):
        assert "[CARD]" in filter_pii("card 1234-5678-9012-3456 declined")

    def test_email(self):
        assert filter_pii("user testuser@example.com uploaded") == "user [EMAIL] uploaded"

    def test_resident_registration_number(self):
        assert "[RRN]" in filter_pii("주민번호 900101-1234567")

    def test_mobile_number(self):
        assert "[PHONE]" in filter_pii("연락처 010-1234-5678")

    def test_plain_text_untouched(self):
        assert filter_pii("Statement imported") == "Statement imported"
        assert filter_pii("") == ""

    def test_json_formatter_filters_message_and_keeps_extras(self):
        record = logging.LogRecord(
            "cardbook", logging.INFO, __file__, 1, "caller testuser@example.com", None, None
        )
        record.inserted = 3
        record.month = "2024-02"

        data = json.loads(JSONLogFormatter().format(record))

        assert data["message"] == "caller [EMAIL]"
        assert data["inserted"] == 3
        assert data["month"] == "2024-02"


class TestCategoryUpdateRequest:
    def test_category_is_stripped(self):
        assert CategoryUpdateRequest(category="  Travel ").category == "Travel"

    @pytest.mark.parametrize("category", ["", "   ", "\t"])
    def test_blank_category_rejected(self, category):
        with pytest.raises(PydanticValidationError):
            CategoryUpdateRequest(category=category)
