"""Transaction categorization.

Categories are resolved deterministically, in priority order:
1. the merchant's most recent category in transaction history (skipped for
   payment aggregators, which name a payment channel rather than a purpose)
2. the longest keyword fragment contained in the merchant name
3. the default category
"""

from cardbook.categorization.keywords import KeywordTable, KeywordTableProvider, get_keyword_provider
from cardbook.categorization.resolver import (
    AMBIGUOUS_MERCHANTS,
    DEFAULT_CATEGORY,
    CategoryResolver,
    is_ambiguous_merchant,
)

__all__ = [
    "AMBIGUOUS_MERCHANTS",
    "DEFAULT_CATEGORY",
    "CategoryResolver",
    "KeywordTable",
    "KeywordTableProvider",
    "get_keyword_provider",
    "is_ambiguous_merchant",
]
