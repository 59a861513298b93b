"""Category resolution for parsed transactions."""

from cardbook.categorization.keywords import KeywordTable

DEFAULT_CATEGORY = "Other"

# Payment aggregators and gateways: they identify how a purchase was paid,
# not what it was for, so their history says nothing about the next purchase.
AMBIGUOUS_MERCHANTS: frozenset[str] = frozenset(
    {
        "네이버페이",
        "카카오페이",
        "토스",
        "PAYCO",
        "KG이니시스",
        "다날",
        "NICE페이",
        "KCP",
    }
)


def is_ambiguous_merchant(merchant: str | None) -> bool:
    return merchant in AMBIGUOUS_MERCHANTS


class CategoryResolver:
    """Assigns exactly one category to a merchant.

    Pure: the result depends only on the merchant, the historical category
    passed in and the keyword table given at construction.
    """

    def __init__(self, keywords: KeywordTable, default_category: str = DEFAULT_CATEGORY):
        self.keywords = keywords
        self.default_category = default_category

    def resolve(self, merchant: str, historical_category: str | None = None) -> str:
        if historical_category and not is_ambiguous_merchant(merchant):
            return historical_category

        category = self.keywords.match(merchant)
        if category:
            return category

        return self.default_category
