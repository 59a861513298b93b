"""Tests for category resolution priority."""

import pytest

from cardbook.categorization.keywords import KeywordTable
from cardbook.categorization.resolver import (
    AMBIGUOUS_MERCHANTS,
    DEFAULT_CATEGORY,
    CategoryResolver,
    is_ambiguous_merchant,
)


@pytest.fixture
def resolver(keyword_table) -> CategoryResolver:
    return CategoryResolver(keyword_table)


class TestCategoryResolver:
    """Test history > keyword > default ordering."""

    def test_longest_keyword_wins(self, resolver):
        assert resolver.resolve("스타벅스 강남점") == "Date"
        assert resolver.resolve("스타벅스 역삼점") == "Food"

    def test_historical_category_overrides_keywords(self, resolver):
        assert resolver.resolve("스타벅스 역삼점", historical_category="Coffee") == "Coffee"

    def test_ambiguous_merchant_ignores_history(self):
        resolver = CategoryResolver(KeywordTable.from_mapping({"토스": "Transfer"}))

        assert resolver.resolve("토스", historical_category="Food") == "Transfer"

    def test_ambiguous_merchant_without_keyword_falls_back(self, resolver):
        assert resolver.resolve("토스", historical_category="Food") == DEFAULT_CATEGORY

    def test_fallback_is_other(self, resolver):
        assert resolver.resolve("알 수 없는 가맹점") == "Other"

    def test_empty_history_is_ignored(self, resolver):
        assert resolver.resolve("GS25 역삼점", historical_category="") == "Convenience"

    def test_custom_default(self, keyword_table):
        resolver = CategoryResolver(keyword_table, default_category="Misc")

        assert resolver.resolve("unknown") == "Misc"


class TestAmbiguousMerchants:
    @pytest.mark.parametrize("merchant", sorted(AMBIGUOUS_MERCHANTS))
    def test_known_aggregators(self, merchant):
        assert is_ambiguous_merchant(merchant)

    def test_exact_case_sensitive_match(self):
        assert not is_ambiguous_merchant("payco")
        assert not is_ambiguous_merchant("토스 페이먼츠")
        assert not is_ambiguous_merchant(None)
