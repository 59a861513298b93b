"""JSON text columns for analysis trends and recommendations.

The analysis history stores its ordered trend and recommendation lists as
JSON text. Writing is strict; reading is lossy: stored text that is not a
JSON list of well-formed items comes back as an empty list so one corrupt
row never breaks a whole history read.
"""

import json
import logging
from typing import Sequence, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from cardbook.schemas.analysis import Recommendation, Trend

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=BaseModel)


def dump_items(items: Sequence[BaseModel] | None) -> str:
    """Serialize a sequence of schema items to JSON text (camelCase keys)."""
    if not items:
        return "[]"
    return json.dumps(
        [item.model_dump(by_alias=True) for item in items], ensure_ascii=False
    )


def load_items(raw: str | None, item_type: type[ItemT]) -> list[ItemT]:
    """Deserialize JSON text into typed items, falling back to an empty list."""
    if not raw:
        return []
    try:
        return TypeAdapter(list[item_type]).validate_json(raw)
    except PydanticValidationError:
        logger.warning(
            "Discarding unreadable JSON column",
            extra={"error_type": item_type.__name__},
        )
        return []


def dump_trends(trends: Sequence[Trend] | None) -> str:
    return dump_items(trends)


def load_trends(raw: str | None) -> list[Trend]:
    return load_items(raw, Trend)


def dump_recommendations(recommendations: Sequence[Recommendation] | None) -> str:
    return dump_items(recommendations)


def load_recommendations(raw: str | None) -> list[Recommendation]:
    return load_items(raw, Recommendation)
