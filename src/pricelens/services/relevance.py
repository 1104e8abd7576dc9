"""
Product relevance classification.

Decides whether a raw offer's title describes the queried product rather
than an accessory, an unrelated item or the wrong model. Two policies:
- electronics queries: strict core-keyword, model-number and variant checks
- everything else: looser keyword overlap with category adjustments

Irrelevance is an expected outcome; nothing here raises.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from ..categories import ProductCategory, is_pro, is_pro_max
from ..keywords import (
    ACCESSORY_KEYWORDS,
    ADJACENT_MODELS,
    CHARGING_ACCESSORY_KEYWORDS,
    CHARGING_QUERY_PATTERN,
    ELECTRONICS_MARKERS,
    GENERIC_ELECTRONICS_WORDS,
    OFFICE_SUPPLY_MARKERS,
    OFFICE_TYPE_NOUNS,
    PRINTER_SUPPLY_TERMS,
    PRODUCE_EXCLUSIONS,
    PRODUCE_WORDS,
    STOP_WORDS,
)
from ..models import ProductQuery, RawOffer
from ..utils.text_cleaning import contains_any, contains_term, tokenize
from ..logger import get_logger

logger = get_logger(__name__)

_MODEL_NUMBER_RE = re.compile(r"\b(\d+)\b")
_TITLE_NUMBER_RE = re.compile(r"(?<!\d)(\d+)(?!\d)")


@dataclass(frozen=True)
class RelevanceRules:
    """Keyword tables backing the classifier."""
    stop_words: frozenset = STOP_WORDS
    generic_words: frozenset = GENERIC_ELECTRONICS_WORDS
    electronics_markers: Tuple[str, ...] = ELECTRONICS_MARKERS
    office_markers: Tuple[str, ...] = OFFICE_SUPPLY_MARKERS
    office_type_nouns: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: OFFICE_TYPE_NOUNS)
    accessory_keywords: Tuple[str, ...] = ACCESSORY_KEYWORDS
    charging_keywords: Tuple[str, ...] = CHARGING_ACCESSORY_KEYWORDS
    charging_query_pattern: str = CHARGING_QUERY_PATTERN
    printer_supply_terms: Tuple[str, ...] = PRINTER_SUPPLY_TERMS
    produce_words: Tuple[str, ...] = PRODUCE_WORDS
    produce_exclusions: Tuple[str, ...] = PRODUCE_EXCLUSIONS
    adjacent_models: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: ADJACENT_MODELS)


class RelevanceClassifier:
    """
    Decide whether an offer title matches the queried product.

    Checks run cheapest-first: accessory rejection applies to every query,
    then either the electronics or the general keyword policy.
    """

    def __init__(self, rules: Optional[RelevanceRules] = None):
        self.rules = rules or RelevanceRules()
        self._charging_query_re = re.compile(self.rules.charging_query_pattern, re.IGNORECASE)

    # =========================================================================
    # Public API
    # =========================================================================

    def is_relevant(self, raw: RawOffer, query: ProductQuery) -> bool:
        """
        Check whether `raw` describes the product in `query`.

        Args:
            raw: Unvalidated provider row
            query: The query being aggregated

        Returns:
            False when the title is an accessory, unrelated, or the wrong
            model/variant; True otherwise
        """
        title = (raw.title or "").lower()
        if not title:
            return False

        q = query.lowered

        if self._is_accessory(title, q):
            logger.debug(f"Skipping accessory: '{raw.title}'")
            return False

        if self._is_office_supply_accessory(title, q):
            logger.debug(f"Skipping office supply accessory: '{raw.title}'")
            return False

        if self.is_electronics_query(q):
            return self._matches_electronics(raw.title, title, q)
        return self._matches_general(raw.title, title, q, query.inferred_category)

    def is_electronics_query(self, q: str) -> bool:
        """Electronics-like queries get strict model and variant matching."""
        q = q.lower()
        return (
            contains_any(q, self.rules.electronics_markers)
            and not contains_any(q, ("printer", "scanner", "stapler"))
        )

    def query_keywords(self, q: str) -> List[str]:
        """Tokens of the query without stop words, in query order."""
        return [w for w in tokenize(q) if w not in self.rules.stop_words]

    # =========================================================================
    # Accessories
    # =========================================================================

    def _is_accessory(self, title: str, q: str) -> bool:
        keywords = self.rules.accessory_keywords
        if not self._charging_query_re.search(q):
            keywords = keywords + self.rules.charging_keywords

        # A query for the accessory class itself ("iphone case") keeps those titles
        keywords = tuple(k for k in keywords if not contains_term(q, k))
        return contains_any(title, keywords)

    def _is_office_supply_accessory(self, title: str, q: str) -> bool:
        if "printer" in q and "ink" not in q and "toner" not in q:
            if "printer" in title or "all-in-one" in title or "inkjet" in title:
                return False
            if any(term in title for term in self.rules.printer_supply_terms):
                return True
            if contains_term(title, "paper"):
                return True
            return False

        if "scanner" in q and "document" not in q:
            return "paper" in title and "scanner" not in title

        if contains_term(q, "pen") and "refill" not in q:
            if "refill" in title:
                return True
            return "ink" in title and "cartridge" in title and not contains_term(title, "pen")

        return False

    # =========================================================================
    # Electronics policy
    # =========================================================================

    def _matches_electronics(self, raw_title: str, title: str, q: str) -> bool:
        core_words = [
            w for w in self.query_keywords(q)
            if len(w) > 3 and w not in self.rules.generic_words
        ]

        if core_words:
            if not any(w in title for w in core_words):
                logger.debug(f"Skipping unrelated product: '{raw_title}' (needs one of {core_words})")
                return False
        elif "iphone" in q and "iphone" not in title:
            logger.debug(f"Skipping unrelated product: '{raw_title}' (no iPhone in title)")
            return False

        model = self._model_number(q)
        if model is not None and not self._matches_model(title, model):
            logger.debug(f"Skipping wrong model: '{raw_title}' (searching for {model})")
            return False

        if is_pro_max(q):
            if not is_pro_max(title):
                logger.debug(f"Skipping wrong variant: '{raw_title}' (searching for Pro Max)")
                return False
        elif is_pro(q):
            if not contains_term(title, "pro"):
                logger.debug(f"Skipping wrong variant: '{raw_title}' (searching for Pro)")
                return False
            if contains_term(title, "max") or is_pro_max(title):
                logger.debug(f"Skipping wrong variant: '{raw_title}' (searching for Pro, got Max)")
                return False

        return True

    def _model_number(self, q: str) -> Optional[str]:
        match = _MODEL_NUMBER_RE.search(q)
        return match.group(1) if match else None

    def _matches_model(self, title: str, model: str) -> bool:
        """Title must name the queried model or an adjacent generation."""
        numbers = set(_TITLE_NUMBER_RE.findall(title))
        if model in numbers:
            return True
        return any(n in numbers for n in self.rules.adjacent_models.get(model, ()))

    # =========================================================================
    # General policy
    # =========================================================================

    def _matches_general(
        self,
        raw_title: str,
        title: str,
        q: str,
        category: ProductCategory,
    ) -> bool:
        keywords = [w for w in self.query_keywords(q) if len(w) > 3]

        if category == ProductCategory.GROCERY and contains_any(q, self.rules.produce_words):
            if contains_any(title, self.rules.produce_exclusions):
                logger.debug(f"Skipping prepared food/drink: '{raw_title}'")
                return False

        if contains_any(q, self.rules.office_markers) and self._has_office_type_noun(title, q):
            return True

        if keywords and not any(k in title for k in keywords):
            logger.debug(f"Skipping unrelated product: '{raw_title}' (needs one of {keywords[:3]})")
            return False

        return True

    def _has_office_type_noun(self, title: str, q: str) -> bool:
        for query_noun, title_nouns in self.rules.office_type_nouns.items():
            if query_noun in q and any(noun in title for noun in title_nouns):
                return True
        return False
