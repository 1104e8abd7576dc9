"""
Unit tests for the domestic store allowlist.

Tests:
- Non-domestic markers reject before anything else
- Allowlist patterns and name prefixes accept
- Unknown stores are rejected (closed world)
- Every identity resolved from a domestic label is itself domestic
"""
import pytest

from pricelens.services.geo_filter import DOMESTIC_STORE_PATTERNS, DomesticStoreFilter
from pricelens.services.store_identity import DEFAULT_STORE_PATTERNS, StoreIdentityResolver


class TestDenylist:
    """Tests for non-domestic rejection."""

    @pytest.fixture
    def geo(self):
        return DomesticStoreFilter()

    @pytest.mark.parametrize("label", [
        "Amazon.co.uk",
        "amazon.de",
        "Amazon.ca - Seller",
        "eBay.co.uk",
        "AliExpress",
        "Alibaba.com",
        "Wish.com",
        "walmart.ca",
        "bestbuy.ca",
        "https://www.target.com.mx/p/123",
    ])
    def test_rejects_international_variants(self, geo, label):
        """Should reject international domains even for allowlisted names."""
        assert not geo.is_domestic(label)

    def test_suffix_only_matches_at_domain_end(self, geo):
        """Should not treat '.in'/'.de' inside a longer name as a ccTLD."""
        assert geo.is_domestic("Walmart.com")
        assert geo.is_domestic("Best Buy.com - Marketplace")

    def test_foreign_link_host(self, geo):
        """Should flag links whose host is non-domestic."""
        assert geo.is_foreign_link("https://www.amazon.co.uk/dp/B0")
        assert not geo.is_foreign_link("https://www.walmart.com/ip/1")
        assert not geo.is_foreign_link("")


class TestAllowlist:
    """Tests for domestic acceptance."""

    @pytest.fixture
    def geo(self):
        return DomesticStoreFilter()

    @pytest.mark.parametrize("label", [
        "Walmart",
        "Walmart - SUSR",
        "Best Buy",
        "Target",
        "Sam's Club",
        "Kohl's",
        "Kohls",
        "Trader Joe's",
        "Stop & Shop",
        "Melissa's Produce",
        "Sweetwater",
        "REI Co-op",
        "B&H Photo",
    ])
    def test_accepts_known_us_retailers(self, geo, label):
        """Should accept labels on the domestic allowlist."""
        assert geo.is_domestic(label)

    def test_accepts_name_prefix_without_domain(self, geo):
        """Should accept well-known retailer prefixes glued to other text."""
        assert geo.is_domestic("AmazonFresh")
        assert geo.is_domestic("Walmartseller")

    def test_normalized_label_matches_punctuated_pattern(self, geo):
        """Should accept punctuation-stripped forms of allowlisted names."""
        assert geo.is_domestic("stop shop")
        assert geo.is_domestic("pure good")
        assert geo.is_domestic("monikas organics")

    @pytest.mark.parametrize("label", ["Reitmans", "Ultamatic Supply", "Crossroads Trading"])
    def test_short_patterns_need_word_boundaries(self, geo, label):
        """Should not accept short store names embedded in other words."""
        assert not geo.is_domestic(label)


class TestClosedWorld:
    """Tests for the unknown => excluded policy."""

    @pytest.fixture
    def geo(self):
        return DomesticStoreFilter()

    @pytest.mark.parametrize("label", ["Joe's Gadget Hut", "Some Random Seller", "", None])
    def test_unknown_stores_rejected(self, geo, label):
        """Should reject stores on neither list."""
        assert not geo.is_domestic(label)

    def test_injected_allowlist(self):
        """Should only accept stores on an injected allowlist."""
        geo = DomesticStoreFilter(allowlist=("acme",), name_prefixes=())
        assert geo.is_domestic("ACME Outlet")
        assert not geo.is_domestic("Walmart")


class TestAllowlistClosure:
    """Resolved identities must stay on the allowlist."""

    @pytest.fixture(scope="class")
    def geo(self):
        return DomesticStoreFilter()

    @pytest.fixture(scope="class")
    def resolver(self):
        return StoreIdentityResolver()

    @pytest.mark.parametrize("label", DOMESTIC_STORE_PATTERNS)
    def test_allowlist_entries_resolve_to_domestic_names(self, geo, resolver, label):
        """Should keep the display name of an allowlisted label domestic."""
        identity = resolver.resolve(label)
        assert geo.is_domestic(identity.display_name), f"{label!r} -> {identity.display_name!r}"

    @pytest.mark.parametrize("display_name", [row.display_name for row in DEFAULT_STORE_PATTERNS])
    def test_canonical_names_are_domestic(self, geo, display_name):
        """Should accept every canonical store name."""
        assert geo.is_domestic(display_name)

    @pytest.mark.parametrize("label", ["Swappa", "Poshmark - closet", "Mercari"])
    def test_resale_marketplaces_accepted(self, geo, label):
        assert geo.is_domestic(label)
