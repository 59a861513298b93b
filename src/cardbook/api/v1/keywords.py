"""Keyword table administration."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cardbook.api.deps import CurrentEmail
from cardbook.categorization.keywords import KeywordTableProvider, get_keyword_provider
from cardbook.db.session import get_db

router = APIRouter(prefix="/keywords", tags=["keywords"])


@router.post("/reload", summary="Reload the keyword table")
async def reload_keywords(
    _: CurrentEmail,
    db: AsyncSession = Depends(get_db),
    keywords: KeywordTableProvider = Depends(get_keyword_provider),
) -> dict:
    """Build a fresh keyword snapshot from the store and swap it in."""
    table = await keywords.reload(db)
    return {"keywords": len(table)}
