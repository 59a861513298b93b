"""API version 1 routes."""

from fastapi import APIRouter

from cardbook.api.v1 import analysis, keywords, transactions

router = APIRouter(prefix="/api/v1")

router.include_router(transactions.router)
router.include_router(analysis.router)
router.include_router(keywords.router)
