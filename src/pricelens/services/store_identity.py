"""
Store identity resolution.

Maps free-text source labels from the shopping feed ("Walmart - SUSR",
"BestBuy.com", "Kohl's") to one canonical (store_id, display_name) pair.
Labels that match no known pattern become their own identity so unknown
stores are still deduplicated against themselves.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Tuple

from ..models import StoreIdentity
from ..utils.text_cleaning import normalize_label
from ..logger import get_logger

logger = get_logger(__name__)

UNKNOWN_STORE = StoreIdentity(store_id="unknown", display_name="unknown")


@dataclass(frozen=True, slots=True)
class StorePattern:
    """One row of the identity table: regex -> canonical store."""
    pattern: str
    store_id: str
    display_name: str


# Ordered: more specific patterns sit before ones they overlap with
# ("nordstrom rack" before "nordstrom", "lowes foods" before "lowes").
DEFAULT_STORE_PATTERNS: Tuple[StorePattern, ...] = (
    StorePattern(r"\bamazon\b", "amazon", "Amazon"),
    StorePattern(r"\bwalmart\b", "walmart", "Walmart"),
    StorePattern(r"\btarget\b", "target", "Target"),
    StorePattern(r"\bbest\s*buy\b", "bestbuy", "Best Buy"),
    StorePattern(r"\bcostco\b", "costco", "Costco"),
    StorePattern(r"\bsam'?s\s*club\b", "samsclub", "Sam's Club"),
    StorePattern(r"\bebay\b", "ebay", "eBay"),
    StorePattern(r"\bswappa\b", "swappa", "Swappa"),
    StorePattern(r"\bposhmark\b", "poshmark", "Poshmark"),
    StorePattern(r"\bmercari\b", "mercari", "Mercari"),
    StorePattern(r"\bnewegg\b", "newegg", "Newegg"),
    StorePattern(r"\bb\s*&\s*h\b|\bbh\s*photo\b", "bh", "B&H Photo"),
    StorePattern(r"\bmicro\s*center\b", "microcenter", "Micro Center"),
    StorePattern(r"\bgamestop\b", "gamestop", "GameStop"),
    StorePattern(r"\bhome\s*depot\b", "homedepot", "Home Depot"),
    StorePattern(r"\blowes\s*foods\b", "lowesfoods", "Lowes Foods"),
    StorePattern(r"\blowe'?s\b", "lowes", "Lowe's"),
    StorePattern(r"\boffice\s*depot\b", "officedepot", "Office Depot"),
    StorePattern(r"\bofficemax\b", "officemax", "OfficeMax"),
    StorePattern(r"\bstaples\b", "staples", "Staples"),
    StorePattern(r"\bquill\b", "quill", "Quill"),
    StorePattern(r"\buline\b", "uline", "Uline"),
    StorePattern(r"\bfedex\s*office\b", "fedexoffice", "FedEx Office"),
    StorePattern(r"\bcontainer\s*store\b", "containerstore", "The Container Store"),
    StorePattern(r"\bkroger\b", "kroger", "Kroger"),
    StorePattern(r"\bsafeway\b", "safeway", "Safeway"),
    StorePattern(r"\bwhole\s*foods\b", "wholefoods", "Whole Foods"),
    StorePattern(r"\baldi\b", "aldi", "Aldi"),
    StorePattern(r"\btrader\s*joe'?s?\b", "traderjoes", "Trader Joe's"),
    StorePattern(r"\binstacart\b", "instacart", "Instacart"),
    StorePattern(r"\bpublix\b", "publix", "Publix"),
    StorePattern(r"\bwegmans\b", "wegmans", "Wegmans"),
    StorePattern(r"\bsprouts\b", "sprouts", "Sprouts"),
    StorePattern(r"\bkohl'?s\b", "kohls", "Kohl's"),
    StorePattern(r"\bmacy'?s\b", "macys", "Macy's"),
    StorePattern(r"\bnordstrom\s*rack\b", "nordstromrack", "Nordstrom Rack"),
    StorePattern(r"\bnordstrom\b", "nordstrom", "Nordstrom"),
    StorePattern(r"\bj\.?\s*c\.?\s*penney\b", "jcpenney", "JCPenney"),
    StorePattern(r"\bbed\s*bath\b", "bedbath", "Bed Bath & Beyond"),
    StorePattern(r"\bwayfair\b", "wayfair", "Wayfair"),
    StorePattern(r"\boverstock\b", "overstock", "Overstock"),
    StorePattern(r"\bpetco\b", "petco", "Petco"),
    StorePattern(r"\bpetsmart\b", "petsmart", "PetSmart"),
    StorePattern(r"\bdick'?s(\s*sporting\s*goods)?\b", "dicks", "DICK'S Sporting Goods"),
    StorePattern(r"\brei\b", "rei", "REI"),
    StorePattern(r"\bbass\s*pro\b", "basspro", "Bass Pro Shops"),
    StorePattern(r"\bcabela'?s\b", "cabelas", "Cabela's"),
    StorePattern(r"\bulta\b", "ulta", "Ulta Beauty"),
    StorePattern(r"\bnike\b", "nike", "Nike"),
    StorePattern(r"\bfoot\s*locker\b", "footlocker", "Foot Locker"),
)


class StoreIdentityResolver:
    """
    Resolve source labels to canonical store identities.

    The pattern table is matched case-insensitively in order; the first
    match wins. No error conditions: every label resolves to something.
    """

    def __init__(self, patterns: Optional[Iterable[StorePattern]] = None):
        """
        Initialize the resolver.

        Args:
            patterns: Ordered identity table (defaults to DEFAULT_STORE_PATTERNS)
        """
        table = tuple(patterns) if patterns is not None else DEFAULT_STORE_PATTERNS
        self._compiled: Tuple[Tuple[Pattern[str], StoreIdentity], ...] = tuple(
            (re.compile(row.pattern, re.IGNORECASE), StoreIdentity(row.store_id, row.display_name))
            for row in table
        )

    def resolve(self, source_label: str) -> StoreIdentity:
        """
        Resolve a source label.

        Args:
            source_label: Free-text store label from the provider

        Returns:
            The matching canonical identity, or a singleton identity built
            from the normalized label for unknown stores
        """
        label = (source_label or "").strip()
        if not label:
            return UNKNOWN_STORE

        for pattern, identity in self._compiled:
            if pattern.search(label):
                return identity

        normalized = normalize_label(label)
        if not normalized:
            return UNKNOWN_STORE

        logger.debug(f"Unmapped store label '{label}' -> '{normalized}'")
        return StoreIdentity(store_id=normalized, display_name=normalized)

    def is_known(self, source_label: str) -> bool:
        """Check whether a label matches a row of the identity table."""
        label = source_label or ""
        return any(pattern.search(label) for pattern, _ in self._compiled)
