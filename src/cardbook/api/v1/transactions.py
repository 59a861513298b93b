"""Transaction endpoints: upload, list, edit, delete."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Request, status

from cardbook.api.deps import CurrentEmail, get_ingestion_service
from cardbook.config import settings
from cardbook.core.exceptions import ValidationError
from cardbook.schemas.transaction import (
    AmountUpdateRequest,
    CategoryUpdateRequest,
    ClearResult,
    TransactionResponse,
)
from cardbook.services.ingestion import IngestionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


async def _read_body(request: Request) -> bytes:
    """Read the raw request body in memory with a strict size cap."""
    max_bytes = settings.upload_max_size_mb * 1024 * 1024
    buf = bytearray()
    async for chunk in request.stream():
        if not chunk:
            continue
        if len(buf) + len(chunk) > max_bytes:
            raise ValidationError("VAL_005", {"max_bytes": max_bytes})
        buf.extend(chunk)
    return bytes(buf)


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List transactions",
)
async def list_transactions(
    email: CurrentEmail,
    service: IngestionService = Depends(get_ingestion_service),
) -> list[TransactionResponse]:
    """List the caller's non-deleted transactions, newest first."""
    return await service.list_transactions(email)


@router.post(
    "/upload",
    response_model=list[TransactionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Upload a bank statement export",
    description="""
    Upload a bank export (.xls or .xlsx) as the raw request body.

    - **X-Statement-Format**: export layout identifier (default: `kookmin`)
    - **X-Filename**: original filename, used as a format hint

    Rows already imported (same date, amount and merchant) are skipped, so
    uploading the same export twice is harmless. Returns the caller's full
    transaction list after the import.
    """,
)
async def upload_statement(
    request: Request,
    email: CurrentEmail,
    statement_format: Annotated[
        str | None, Header(alias="X-Statement-Format", description="Export format identifier")
    ] = None,
    filename: Annotated[
        str | None, Header(alias="X-Filename", description="Original filename")
    ] = None,
    service: IngestionService = Depends(get_ingestion_service),
) -> list[TransactionResponse]:
    content = await _read_body(request)
    return await service.import_sheet(email, content, filename, statement_format)


@router.patch(
    "/{transaction_id}/category",
    response_model=TransactionResponse,
    summary="Change a transaction's category",
)
async def update_category(
    transaction_id: UUID,
    payload: CategoryUpdateRequest,
    email: CurrentEmail,
    service: IngestionService = Depends(get_ingestion_service),
) -> TransactionResponse:
    return await service.update_category(email, transaction_id, payload.category)


@router.patch(
    "/{transaction_id}/amount",
    response_model=TransactionResponse,
    summary="Correct a transaction's amount",
)
async def update_amount(
    transaction_id: UUID,
    payload: AmountUpdateRequest,
    email: CurrentEmail,
    service: IngestionService = Depends(get_ingestion_service),
) -> TransactionResponse:
    return await service.update_amount(email, transaction_id, payload.amount)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
)
async def delete_transaction(
    transaction_id: UUID,
    email: CurrentEmail,
    service: IngestionService = Depends(get_ingestion_service),
) -> None:
    """Soft delete: the transaction disappears from listings but its dedup key
    stays reserved, so re-uploading the same export does not bring it back."""
    await service.delete_transaction(email, transaction_id)


@router.delete(
    "",
    response_model=ClearResult,
    summary="Delete all transactions",
)
async def clear_transactions(
    email: CurrentEmail,
    service: IngestionService = Depends(get_ingestion_service),
) -> ClearResult:
    deleted = await service.clear_transactions(email)
    return ClearResult(deleted_count=deleted)
