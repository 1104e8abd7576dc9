"""
Unit tests for offer deduplication and variant merging.

Tests:
- Catalog stores keep their lowest price
- Marketplace stores keep up to the cap
- Variant offers never override primary prices
"""
from decimal import Decimal

import pytest

from pricelens.services.offer_merge import DEFAULT_MARKETPLACE_CAP, OfferDeduplicator


@pytest.fixture
def deduplicator():
    return OfferDeduplicator()


class TestCatalogStores:
    """Tests for one-offer-per-store collapsing."""

    def test_lowest_price_wins(self, deduplicator, validated_offer):
        """Should keep the cheapest of several offers from one store."""
        offers = [
            validated_offer("walmart", "1099.00", "Walmart"),
            validated_offer("walmart", "1049.00", "Walmart"),
            validated_offer("walmart", "1129.00", "Walmart"),
        ]
        result = deduplicator.dedupe(offers)
        assert len(result) == 1
        assert result[0].price == Decimal("1049.00")

    def test_equal_price_keeps_first(self, deduplicator, validated_offer):
        """Should only replace an offer on a strictly lower price."""
        first = validated_offer("target", "999.00", url="https://target.example/first")
        second = validated_offer("target", "999.00", url="https://target.example/second")
        assert deduplicator.dedupe([first, second]) == [first]

    def test_first_arrival_order(self, deduplicator, validated_offer):
        """Should keep stores in the order they first appeared."""
        offers = [
            validated_offer("target", "10"),
            validated_offer("walmart", "12"),
            validated_offer("target", "9"),
        ]
        assert [o.store.store_id for o in deduplicator.dedupe(offers)] == ["target", "walmart"]

    def test_input_not_modified(self, deduplicator, validated_offer):
        """Should return a new list."""
        offers = [validated_offer("walmart", "10"), validated_offer("walmart", "9")]
        deduplicator.dedupe(offers)
        assert len(offers) == 2

    def test_empty_input(self, deduplicator):
        """Should return an empty list for no offers."""
        assert deduplicator.dedupe([]) == []


class TestMarketplaceStores:
    """Tests for marketplace listing caps."""

    def test_ebay_keeps_distinct_listings(self, deduplicator, validated_offer):
        """Should keep three eBay listings plus one Walmart offer."""
        offers = [
            validated_offer("ebay", "1000.00", "eBay"),
            validated_offer("ebay", "1020.00", "eBay"),
            validated_offer("ebay", "980.00", "eBay"),
            validated_offer("walmart", "1099.00", "Walmart"),
        ]
        result = deduplicator.dedupe(offers)
        assert [o.store.store_id for o in result] == ["ebay", "ebay", "ebay", "walmart"]

    def test_cap_applies_in_arrival_order(self, deduplicator, validated_offer):
        """Should drop marketplace listings past the cap."""
        offers = [validated_offer("ebay", str(100 + i), "eBay") for i in range(20)]
        result = deduplicator.dedupe(offers)
        assert len(result) == DEFAULT_MARKETPLACE_CAP
        assert result[-1].price == Decimal(str(100 + DEFAULT_MARKETPLACE_CAP - 1))

    def test_custom_cap_and_marketplaces(self, validated_offer):
        """Should honor injected marketplace settings."""
        deduplicator = OfferDeduplicator(marketplace_stores={"swappa"}, marketplace_cap=2)
        offers = [validated_offer("swappa", str(p)) for p in (500, 510, 520)]
        offers += [validated_offer("ebay", "600"), validated_offer("ebay", "590")]
        result = deduplicator.dedupe(offers)
        assert [o.store.store_id for o in result] == ["swappa", "swappa", "ebay"]
        assert result[-1].price == Decimal("590")

    def test_is_marketplace(self, deduplicator):
        """Should recognize the default marketplaces."""
        assert deduplicator.is_marketplace("ebay")
        assert deduplicator.is_marketplace("amazon")
        assert not deduplicator.is_marketplace("walmart")


class TestMergeVariant:
    """Tests for merging variant-query offers."""

    def test_primary_price_kept(self, deduplicator, validated_offer):
        """Should keep the primary price even when the variant is cheaper."""
        primary = [validated_offer("walmart", "1099.00", "Walmart")]
        variant = [
            validated_offer("walmart", "899.00", "Walmart"),
            validated_offer("target", "1089.00", "Target"),
        ]
        merged = deduplicator.merge_variant(primary, variant)

        prices = {o.store.store_id: o.price for o in merged.offers}
        assert prices == {"walmart": Decimal("1099.00"), "target": Decimal("1089.00")}
        assert merged.added_from_variant == 1
        assert merged.skipped_existing == 1

    def test_variant_only_adds_new_stores(self, deduplicator, validated_offer):
        """Should not add variant marketplace listings for a store already found."""
        primary = [validated_offer("ebay", "1000.00", "eBay")]
        variant = [validated_offer("ebay", "950.00", "eBay"), validated_offer("ebay", "960.00", "eBay")]
        merged = deduplicator.merge_variant(primary, variant)
        assert [o.price for o in merged.offers] == [Decimal("1000.00")]

    def test_merge_notes(self, deduplicator, validated_offer):
        """Should record a summary note."""
        merged = deduplicator.merge_variant([validated_offer("walmart", "1")], [])
        assert merged.notes and "1 primary" in merged.notes[0]
