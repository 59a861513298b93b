"""Monthly spending analysis endpoints."""

from fastapi import APIRouter, Depends

from cardbook.api.deps import CurrentEmail, get_analysis_service
from cardbook.schemas.analysis import AnalysisRequest, AnalysisResponse
from cardbook.services.analysis import AnalysisService

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post(
    "",
    response_model=AnalysisResponse,
    summary="Analyze a month of spending",
    description="""
    Send the month's transactions to the analysis engine and store the
    result. Analyzing the same month again replaces the stored analysis.
    """,
)
async def analyze_month(
    payload: AnalysisRequest,
    email: CurrentEmail,
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisResponse:
    return await service.analyze_month(email, payload.month, payload.transactions)


@router.get(
    "",
    response_model=list[AnalysisResponse],
    summary="List stored monthly analyses",
)
async def list_analyses(
    email: CurrentEmail,
    service: AnalysisService = Depends(get_analysis_service),
) -> list[AnalysisResponse]:
    return await service.list_analyses(email)
