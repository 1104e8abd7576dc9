"""
Product category inference from free-text queries.

The category drives the price plausibility rules. It is inferred once per
aggregation call from the query text alone.
"""
from __future__ import annotations

import re
from enum import Enum

from .keywords import (
    ACCESSORY_KEYWORDS,
    APPLE_DEVICE_TERMS,
    CHARGING_QUERY_PATTERN,
    EXPENSIVE_PRODUCT_MARKERS,
    FLAGSHIP_APPLE_PHRASES,
    GROCERY_MARKERS,
    OFFICE_SUPPLY_MARKERS,
)
from .utils.text_cleaning import contains_any, contains_term, normalize_query


class ProductCategory(str, Enum):
    """Price-relevant product categories, most specific first."""

    IPHONE_PRO_MAX = "iphone_pro_max"
    IPHONE_PRO = "iphone_pro"
    IPHONE = "iphone"
    FLAGSHIP_APPLE = "flagship_apple"
    ELECTRONICS = "electronics"
    PRINTER = "printer"
    SCANNER = "scanner"
    OFFICE_CHAIR = "office_chair"
    FILE_CABINET = "file_cabinet"
    DESK = "desk"
    MATTRESS = "mattress"
    OFFICE_SUPPLY = "office_supply"
    GROCERY = "grocery"
    ACCESSORY = "accessory"
    GENERAL = "general"


# Categories where a monthly installment figure is never the sale price
HIGH_TICKET_CATEGORIES = frozenset({
    ProductCategory.IPHONE_PRO_MAX,
    ProductCategory.IPHONE_PRO,
    ProductCategory.IPHONE,
    ProductCategory.FLAGSHIP_APPLE,
    ProductCategory.ELECTRONICS,
})

_CHARGING_QUERY_RE = re.compile(CHARGING_QUERY_PATTERN, re.IGNORECASE)


def is_pro_max(text: str) -> bool:
    lowered = text.lower()
    return "pro max" in lowered or "promax" in lowered


def is_pro(text: str) -> bool:
    """A "Pro" variant that is not a "Pro Max"."""
    return contains_term(text, "pro") and not is_pro_max(text)


def is_accessory_query(text: str) -> bool:
    """A query for an accessory or charging product rather than the device."""
    return contains_any(text, ACCESSORY_KEYWORDS) or bool(_CHARGING_QUERY_RE.search(text))


def infer_category(text: str) -> ProductCategory:
    """
    Infer the price category for a query.

    Args:
        text: Raw query text (e.g. "iPhone 17 Pro Max 256GB")

    Returns:
        The most specific matching ProductCategory, GENERAL if none match
    """
    q = normalize_query(text)

    # "iPhone 15 case" must not inherit the phone floor
    if is_accessory_query(q):
        return ProductCategory.ACCESSORY

    if "iphone" in q:
        if is_pro_max(q):
            return ProductCategory.IPHONE_PRO_MAX
        if is_pro(q):
            return ProductCategory.IPHONE_PRO
        return ProductCategory.IPHONE

    if contains_any(q, FLAGSHIP_APPLE_PHRASES):
        return ProductCategory.FLAGSHIP_APPLE

    if _is_expensive_electronics(q):
        return ProductCategory.ELECTRONICS

    if contains_term(q, "printer") and not contains_any(q, ("ink", "toner", "cartridge")):
        return ProductCategory.PRINTER
    if contains_term(q, "scanner") and not contains_any(q, ("document", "sheet")):
        return ProductCategory.SCANNER
    if contains_term(q, "office chair"):
        return ProductCategory.OFFICE_CHAIR
    if contains_any(q, ("file cabinet", "filing cabinet")):
        return ProductCategory.FILE_CABINET
    if contains_term(q, "desk") and not contains_any(q, ("organizer", "pad")):
        return ProductCategory.DESK
    if contains_term(q, "mattress") and not contains_any(q, ("topper", "pad", "protector", "cover")):
        return ProductCategory.MATTRESS
    if contains_any(q, OFFICE_SUPPLY_MARKERS):
        return ProductCategory.OFFICE_SUPPLY

    if contains_any(q, GROCERY_MARKERS) and not contains_any(q, APPLE_DEVICE_TERMS):
        return ProductCategory.GROCERY

    return ProductCategory.GENERAL


def _is_expensive_electronics(q: str) -> bool:
    if contains_any(q, EXPENSIVE_PRODUCT_MARKERS):
        return True
    # Watches, TVs and cameras only count with a premium qualifier
    if contains_term(q, "watch") and contains_any(q, ("apple", "series")):
        return True
    if contains_any(q, ("tv", "television")) and contains_any(q, ("oled", "4k", "8k")):
        return True
    if contains_term(q, "camera") and contains_any(q, ("canon", "nikon", "sony")):
        return True
    return False
