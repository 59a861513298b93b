from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.categorization.keywords import KeywordTableProvider, get_keyword_provider
from cardbook.db.session import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(
    db: AsyncSession = Depends(get_db),
    keywords: KeywordTableProvider = Depends(get_keyword_provider),
):
    """Readiness check with database connection and keyword table state."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "database": "disconnected", "error": type(e).__name__},
        )
    return {
        "status": "ready",
        "database": "connected",
        "keywords_loaded": keywords.loaded,
    }
