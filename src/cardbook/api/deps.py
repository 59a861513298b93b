"""FastAPI dependency injection for caller identity, services and collaborators."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.analysis.engine import AnalysisEngine, get_analysis_engine
from cardbook.categorization.keywords import KeywordTableProvider, get_keyword_provider
from cardbook.db.session import get_db
from cardbook.services.analysis import AnalysisService
from cardbook.services.ingestion import IngestionService


async def get_current_email(
    x_user_email: Annotated[
        str | None,
        Header(description="Caller email, set by the upstream authentication layer"),
    ] = None,
) -> str:
    """
    Resolve the caller's identity.

    Authentication happens before requests reach this service; the gateway
    forwards the verified email in ``X-User-Email``.

    Raises:
        HTTPException: If no identity was forwarded
    """
    email = (x_user_email or "").strip()
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    return email


async def get_ingestion_service(
    db: AsyncSession = Depends(get_db),
    keywords: KeywordTableProvider = Depends(get_keyword_provider),
) -> IngestionService:
    """
    Get ingestion service bound to the current keyword table snapshot.

    The table is loaded on first use if startup did not load it.
    """
    table = await keywords.load(db)
    return IngestionService(db, table)


async def get_analysis_service(
    db: AsyncSession = Depends(get_db),
    engine: AnalysisEngine = Depends(get_analysis_engine),
) -> AnalysisService:
    return AnalysisService(db, engine)


CurrentEmail = Annotated[str, Depends(get_current_email)]
