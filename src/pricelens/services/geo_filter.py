"""
Domestic (USA) store allowlist.

Two-stage check on a store label or URL:
- reject on any non-domestic marker (ccTLD suffixes, international
  marketplace variants)
- accept on the domestic allowlist or a well-known retailer prefix

Anything matching neither list is rejected: the allowlist is a closed world.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern, Tuple
from urllib.parse import urlparse

from ..utils.text_cleaning import normalize_label, term_pattern
from ..logger import get_logger

logger = get_logger(__name__)


# Country-code domain suffixes; only match at the end of a host or before a path
NON_DOMESTIC_DOMAIN_SUFFIXES: Tuple[str, ...] = (
    ".co.uk", ".de", ".fr", ".it", ".es", ".ca", ".com.br", ".com.mx",
    ".in", ".co.jp",
)

# International marketplace variants and cross-border marketplaces (substring)
NON_DOMESTIC_MARKERS: Tuple[str, ...] = (
    "amazon.co.", "amazon.de", "amazon.fr", "amazon.it", "amazon.es",
    "amazon.ca", "ebay.co.uk", "ebay.de", "ebay.fr", "aliexpress",
    "alibaba", "wish.com",
)

DOMESTIC_STORE_PATTERNS: Tuple[str, ...] = (
    # Mass retailers and warehouse clubs
    "amazon.com", "amazon", "walmart", "target", "best buy", "bestbuy",
    "costco", "sam's club", "sams club", "samsclub",
    # Grocery chains
    "albertsons", "giant food", "giant eagle", "meijer", "instacart",
    "jewel osco", "tom thumb", "lowes foods", "food lion", "harris teeter",
    "stop & shop", "stop and shop", "wegmans", "publix", "whole foods",
    "wholefoods", "trader joe", "trader joes", "traderjoe", "aldi", "sprouts", "weee",
    "good eggs", "fresh direct", "freshcentral", "county market",
    "azure standard", "kroger", "safeway",
    # Home, department and specialty
    "home depot", "homedepot", "lowes", "lowe's", "ebay", "macy's", "macys",
    "nordstrom", "jcpenney", "j.c. penney", "kohl", "kohls", "bed bath", "bedbath",
    "wayfair", "overstock", "newegg", "micro center", "microcenter",
    "office depot", "officedepot", "staples", "officemax", "petco",
    "petsmart", "dick's", "dicks", "rei", "bass pro", "basspro", "cabelas",
    "cabela's", "gamestop", "ulta", "quill", "uline", "fedex office",
    "container store", "bh photo", "b&h", "nike", "foot locker",
    # Pharmacy, dollar, auto and discount
    "walgreens", "cvs", "rite aid", "dollar general", "dollargeneral",
    "dollar tree", "dollartree", "family dollar", "ace hardware",
    "true value", "napa auto", "autozone", "o'reilly", "oreilly",
    "advance auto", "pep boys", "nordstrom rack", "tj maxx", "marshalls",
    "homegoods", "ross", "burlington", "big lots", "five below", "at home",
    "ikea", "crate and barrel", "williams-sonoma", "pottery barn",
    "west elm", "anthropologie", "urban outfitters",
    # Electronics and audio
    "sweetwater", "jlab", "soundcore", "bose", "monoprice", "wyze",
    "redragon", "audio advisor", "tozo", "focus camera", "stones ace",
    "ugreen",
    # Resale marketplaces
    "swappa", "poshmark", "mercari",
    # Grocery and produce delivery
    "melissa's", "melissas", "miami fruit", "miamifruit", "bevmo",
    "locavore", "cooklist", "schnuck", "schnucks", "thrive market", "central market",
    "hannaford", "brookshires", "gopuff", "food depot", "the orchard",
    "wilson farm", "lambs fresh", "fresh central", "nude foods",
    "iheartfruit", "fresh by 4roots", "kesar grocery", "monika's organics",
    "farm to people", "pure & good", "suji fresh", "concord market",
    "super1foods", "golden door", "foodservicedirect", "tootyfruity",
    "round eye", "officecrave",
)

# Retailer names accepted as a label prefix even without a domain
DOMESTIC_NAME_PREFIXES: Tuple[str, ...] = (
    "amazon", "walmart", "target", "ebay", "costco", "best buy", "bestbuy",
    "home depot", "homedepot", "lowes", "kroger", "newegg", "albertsons",
    "meijer", "instacart",
)


class DomesticStoreFilter:
    """
    Accept or reject stores by a fixed USA allowlist.

    Every table can be replaced at construction; the defaults above are
    the production tables.
    """

    def __init__(
        self,
        allowlist: Optional[Iterable[str]] = None,
        denylist_markers: Optional[Iterable[str]] = None,
        denylist_suffixes: Optional[Iterable[str]] = None,
        name_prefixes: Optional[Iterable[str]] = None,
    ):
        self.allowlist: Tuple[str, ...] = tuple(
            allowlist if allowlist is not None else DOMESTIC_STORE_PATTERNS
        )
        self.denylist_markers: Tuple[str, ...] = tuple(
            denylist_markers if denylist_markers is not None else NON_DOMESTIC_MARKERS
        )
        self.denylist_suffixes: Tuple[str, ...] = tuple(
            denylist_suffixes if denylist_suffixes is not None else NON_DOMESTIC_DOMAIN_SUFFIXES
        )
        self.name_prefixes: Tuple[str, ...] = tuple(
            name_prefixes if name_prefixes is not None else DOMESTIC_NAME_PREFIXES
        )

        self._suffix_re: Optional[Pattern[str]] = None
        if self.denylist_suffixes:
            alternation = "|".join(re.escape(s) for s in sorted(self.denylist_suffixes, key=len, reverse=True))
            self._suffix_re = re.compile(r"(?:" + alternation + r")(?=$|[/:?#\s])", re.IGNORECASE)

        # Normalized twins so "Stop & Shop" and "stop shop" agree
        self._normalized_allowlist: Tuple[str, ...] = tuple(
            {normalize_label(p) for p in self.allowlist if normalize_label(p)}
        )

    def is_domestic(self, source_label_or_url: str) -> bool:
        """
        Check whether a store label or URL belongs to a USA retailer.

        Args:
            source_label_or_url: Store label ("Walmart - Seller") or URL

        Returns:
            True only when no non-domestic marker matches and an allowlist
            pattern or known name prefix does
        """
        text = (source_label_or_url or "").strip().lower()
        if not text:
            return False

        if self.is_foreign(text):
            return False

        if any(term_pattern(p).search(text) for p in self.allowlist):
            return True

        normalized = normalize_label(text)
        if any(term_pattern(p).search(normalized) for p in self._normalized_allowlist):
            return True

        if text.startswith(self.name_prefixes):
            return True

        logger.debug(f"Store not on domestic allowlist: '{source_label_or_url}'")
        return False

    def is_foreign(self, text: str) -> bool:
        """Check only the denylist stage (non-domestic markers)."""
        lowered = (text or "").lower()
        if any(marker in lowered for marker in self.denylist_markers):
            return True
        return bool(self._suffix_re and self._suffix_re.search(lowered))

    def is_foreign_link(self, url: str) -> bool:
        """
        Check a listing URL's host against the denylist.

        URLs without a parseable host are not considered foreign.
        """
        if not url:
            return False
        host = urlparse(url).hostname or ""
        return bool(host) and self.is_foreign(host)
