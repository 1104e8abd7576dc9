"""
Unit tests for product relevance classification.

Tests:
- Accessory rejection (with query-based exemptions)
- Electronics policy: core words, model numbers, Pro/Pro Max variants
- Office supply accessories
- General keyword overlap and produce exclusions
"""
import pytest

from pricelens.keywords import ADJACENT_MODELS, OFFICE_TYPE_NOUNS
from pricelens.models import ProductQuery, RawOffer
from pricelens.services.relevance import RelevanceClassifier, RelevanceRules


def offer(title):
    return RawOffer(title=title, source_label="Walmart", price_text="$1.00")


@pytest.fixture
def classifier():
    return RelevanceClassifier()


class TestAccessories:
    """Tests for accessory rejection."""

    def test_phone_case_is_dropped(self, classifier, iphone_pro_max_query):
        """Should drop a case listing for a phone query."""
        assert not classifier.is_relevant(offer("iPhone 17 Pro Max case"), iphone_pro_max_query)

    @pytest.mark.parametrize("title", [
        "iPhone 17 Pro Max Screen Protector 3-Pack",
        "iPhone 17 Pro Max Tempered Glass",
        "Replacement Battery for iPhone 17 Pro Max",
        "iPhone 17 Pro Max Wallet Folio",
    ])
    def test_common_accessories_dropped(self, classifier, iphone_pro_max_query, title):
        """Should drop protectors, parts and wallets."""
        assert not classifier.is_relevant(offer(title), iphone_pro_max_query)

    def test_charging_gear_dropped_for_device_query(self, classifier, iphone_pro_max_query):
        """Should treat chargers and cables as accessories for a phone query."""
        assert not classifier.is_relevant(offer("iPhone 17 Pro Max USB-C Charger Cable"), iphone_pro_max_query)

    def test_charging_gear_kept_for_charger_query(self, classifier):
        """Should keep chargers when the query asks for a charger."""
        query = ProductQuery.from_text("iPhone 17 charger")
        assert classifier.is_relevant(offer("Apple 20W USB-C Charger for iPhone 17"), query)

    def test_accessory_class_query_keeps_its_own_titles(self, classifier):
        """Should not drop cases when the query is for a case."""
        query = ProductQuery.from_text("iphone case")
        assert classifier.is_relevant(offer("iPhone 17 Pro Max Clear Case"), query)

    def test_accessory_words_match_whole_words_only(self, classifier):
        """Should not treat 'bag' inside 'bagels' as an accessory."""
        query = ProductQuery.from_text("everything bagels")
        assert classifier.is_relevant(offer("Everything Bagels, 6 count"), query)

    def test_empty_title_is_irrelevant(self, classifier, iphone_pro_max_query):
        """Should reject offers with no title."""
        assert not classifier.is_relevant(offer(""), iphone_pro_max_query)


class TestElectronicsPolicy:
    """Tests for the strict electronics checks."""

    def test_genuine_listing_kept(self, classifier, iphone_pro_max_query):
        """Should keep the exact product."""
        assert classifier.is_relevant(offer("Apple iPhone 17 Pro Max 256GB"), iphone_pro_max_query)

    def test_adjacent_model_kept(self, classifier, iphone_pro_max_query):
        """Should accept an adjacent generation."""
        assert classifier.is_relevant(offer("Apple iPhone 16 Pro Max 256GB"), iphone_pro_max_query)

    def test_distant_model_rejected(self, classifier, iphone_pro_max_query):
        """Should reject a generation outside the adjacency table."""
        assert not classifier.is_relevant(offer("Apple iPhone 13 Pro Max 128GB"), iphone_pro_max_query)

    def test_storage_number_is_not_a_model(self, classifier, iphone_pro_max_query):
        """Should not match '17' inside '170' or similar."""
        assert not classifier.is_relevant(offer("iPhone Pro Max 170 edition"), iphone_pro_max_query)

    def test_pro_max_query_rejects_plain_pro(self, classifier, iphone_pro_max_query):
        """Should reject a Pro listing for a Pro Max query."""
        assert not classifier.is_relevant(offer("iPhone 17 Pro 256GB"), iphone_pro_max_query)

    def test_pro_max_accepts_promax_spelling(self, classifier, iphone_pro_max_query):
        """Should accept 'ProMax' written as one word."""
        assert classifier.is_relevant(offer("iPhone 17 ProMax 512GB"), iphone_pro_max_query)

    def test_pro_query_rejects_max(self, classifier):
        """Should reject Pro Max listings for a Pro query."""
        query = ProductQuery.from_text("iPhone 17 Pro")
        assert not classifier.is_relevant(offer("iPhone 17 Pro Max 256GB"), query)
        assert classifier.is_relevant(offer("iPhone 17 Pro 128GB"), query)

    def test_pro_query_rejects_base_model(self, classifier):
        """Should reject listings without 'Pro' for a Pro query."""
        query = ProductQuery.from_text("iPhone 17 Pro")
        assert not classifier.is_relevant(offer("iPhone 17 128GB Black"), query)

    def test_core_word_required(self, classifier):
        """Should require one non-generic query word in the title."""
        query = ProductQuery.from_text("Samsung Galaxy S24 Ultra")
        assert classifier.is_relevant(offer("Samsung Galaxy S24 Ultra 512GB"), query)
        assert not classifier.is_relevant(offer("Google Pixel 9 Pro XL"), query)


class TestOfficeSupplies:
    """Tests for office supply accessory rules."""

    def test_printer_query_drops_ink(self, classifier):
        """Should drop ink cartridges for a printer query."""
        query = ProductQuery.from_text("HP printer")
        assert not classifier.is_relevant(offer("HP 67 Black Ink Cartridge"), query)

    def test_printer_query_keeps_printers(self, classifier):
        """Should keep printers for a printer query."""
        query = ProductQuery.from_text("HP printer")
        assert classifier.is_relevant(offer("HP DeskJet 4155e All-in-One Printer"), query)

    def test_scanner_query_drops_photo_paper(self, classifier):
        """Should drop paper for a scanner query."""
        query = ProductQuery.from_text("photo scanner")
        assert not classifier.is_relevant(offer("Glossy photo paper, 100 sheets"), query)

    def test_pen_query_drops_refills(self, classifier):
        """Should drop refills for a pen query."""
        query = ProductQuery.from_text("gel pen")
        assert not classifier.is_relevant(offer("Gel pen refills, 12 pack"), query)
        assert classifier.is_relevant(offer("Pilot G2 gel pen, 12 pack"), query)

    def test_office_type_noun_accepted(self, classifier):
        """Should accept a desk for a desk query without other overlap."""
        query = ProductQuery.from_text("standing desk")
        assert classifier.is_relevant(offer("FlexiSpot electric height adjustable desk 55in"), query)


class TestGeneralPolicy:
    """Tests for the non-electronics keyword overlap policy."""

    def test_keyword_overlap_required(self, classifier):
        """Should need one query word longer than three letters."""
        query = ProductQuery.from_text("coffee maker")
        assert classifier.is_relevant(offer("Keurig K-Classic Coffee Maker"), query)
        assert not classifier.is_relevant(offer("Porcelain espresso cups set"), query)

    def test_short_queries_are_vacuous(self, classifier):
        """Should accept any non-accessory title when no long keyword exists."""
        query = ProductQuery.from_text("tea")
        assert classifier.is_relevant(offer("Assorted herbal infusion box"), query)

    def test_produce_excludes_prepared_food(self, classifier):
        """Should drop smoothie and shake titles for a produce query."""
        query = ProductQuery.from_text("banana")
        assert not classifier.is_relevant(offer("Banana smoothie recipe book"), query)
        assert not classifier.is_relevant(offer("Banana protein shake mix"), query)
        assert classifier.is_relevant(offer("Fresh bananas, 3 lb"), query)


class TestHelpers:
    """Tests for public helper methods."""

    def test_is_electronics_query(self, classifier):
        """Should classify device queries as electronics, printers not."""
        assert classifier.is_electronics_query("samsung tv")
        assert classifier.is_electronics_query("iPhone 17")
        assert not classifier.is_electronics_query("hp printer")
        assert not classifier.is_electronics_query("coffee maker")

    def test_query_keywords_drop_stop_words(self, classifier):
        """Should drop stop words and keep query order."""
        assert classifier.query_keywords("the best laptop for students") == ["best", "laptop", "students"]

    def test_injected_rules(self):
        """Should use injected accessory keywords."""
        rules = RelevanceRules(accessory_keywords=("refurbished",))
        classifier = RelevanceClassifier(rules)
        query = ProductQuery.from_text("iPhone 17 Pro Max")
        assert not classifier.is_relevant(offer("iPhone 17 Pro Max refurbished"), query)
        assert classifier.is_relevant(offer("iPhone 17 Pro Max case"), query)

    def test_default_rule_tables(self):
        """Should build default rules backed by the shared read-only mappings."""
        rules = RelevanceRules()
        assert rules.office_type_nouns is OFFICE_TYPE_NOUNS
        assert rules.adjacent_models is ADJACENT_MODELS
        assert rules.adjacent_models["17"] == ("16", "18", "15")
        with pytest.raises(TypeError):
            rules.adjacent_models["14"] = ("13",)
