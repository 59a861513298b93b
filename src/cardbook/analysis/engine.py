"""
LLM-backed monthly spending analysis.

The engine receives a month of transactions and returns a structured
analysis: summary, trends, recommendations and budget health. Output that
does not match that shape is a hard failure, never silently defaulted.
Calls are not retried and are bounded by a timeout.
"""

import json
import logging
from functools import lru_cache
from typing import Protocol, Sequence

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError as PydanticValidationError

from cardbook.config import settings
from cardbook.core.exceptions import AnalysisEngineError
from cardbook.schemas.analysis import AnalysisResponse, AnalysisResult
from cardbook.schemas.transaction import TransactionPayload

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a blunt personal finance consultant.
Analyze the user's card transactions for the given month and answer with a
single JSON object, no prose around it.

Rules:
- Name concrete merchants and patterns instead of generic advice.
- Payment aggregators (토스, 카카오페이, 네이버페이, ...) are payment channels,
  not spending purposes; call out heavy or untraceable use of them.

JSON shape:
{
  "summary": "three sentence overview",
  "trends": [
    {"type": "increase|decrease|stable", "category": "...", "change": "+45%", "description": "..."}
  ],
  "recommendations": [
    {"title": "...", "description": "...", "priority": "high|medium|low"}
  ],
  "budgetHealth": {"score": 0-100, "status": "Critical|Warning|Good|Excellent", "description": "..."}
}
Give exactly three trends and three recommendations."""


class AnalysisEngine(Protocol):
    """Produces a structured spending analysis for one month."""

    async def analyze(
        self, transactions: Sequence[TransactionPayload], month: str
    ) -> AnalysisResponse:
        ...


def build_user_prompt(transactions: Sequence[TransactionPayload], month: str) -> str:
    payload = [t.model_dump(by_alias=True, mode="json", exclude={"id"}) for t in transactions]
    return (
        f"Month: {month}\nCurrency: {settings.currency} (amounts in minor units)\n"
        f"Transactions:\n{json.dumps(payload, ensure_ascii=False)}"
    )


def parse_engine_content(content: str | None, month: str) -> AnalysisResponse:
    """Validate the engine's JSON text and stamp it with the month.

    Raises:
        AnalysisEngineError: If the content is empty, not JSON or not the expected shape
    """
    if not content or not content.strip():
        raise AnalysisEngineError("AI_003", {"reason": "empty_content"})
    try:
        result = AnalysisResult.model_validate_json(content)
    except PydanticValidationError as e:
        raise AnalysisEngineError(
            "AI_003", {"reason": "invalid_shape", "errors": e.error_count()}
        ) from e
    return AnalysisResponse(month=month, **result.model_dump())


class GroqAnalysisEngine:
    """Analysis engine backed by an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        temperature: float | None = None,
    ):
        self.model = model or settings.analysis_model
        self.temperature = settings.analysis_temperature if temperature is None else temperature
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.analysis_api_key:
                raise AnalysisEngineError("AI_001", {"reason": "missing_api_key"})
            self._client = AsyncOpenAI(
                api_key=settings.analysis_api_key,
                base_url=settings.analysis_base_url,
                timeout=settings.analysis_timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def analyze(
        self, transactions: Sequence[TransactionPayload], month: str
    ) -> AnalysisResponse:
        client = self._get_client()
        logger.info(
            "Requesting spending analysis",
            extra={"month": month, "candidates": len(transactions)},
        )
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(transactions, month)},
                ],
            )
        except openai.APITimeoutError as e:
            logger.error("Analysis engine timed out", extra={"month": month})
            raise AnalysisEngineError("AI_002", {"month": month}, http_status=504) from e
        except openai.APIError as e:
            logger.error(
                "Analysis engine request failed",
                extra={"month": month, "error_type": type(e).__name__},
            )
            raise AnalysisEngineError("AI_001", {"error_type": type(e).__name__}) from e

        if not completion.choices:
            raise AnalysisEngineError("AI_003", {"reason": "no_choices"})
        return parse_engine_content(completion.choices[0].message.content, month)


@lru_cache
def get_analysis_engine() -> AnalysisEngine:
    """Get the process-wide analysis engine."""
    return GroqAnalysisEngine()
