"""
Keyword tables shared by the relevance classifier, the price validator and
the variant-query builder.

Every table is an immutable tuple or frozenset so that components can take
them as constructor defaults without risk of cross-call mutation.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

# =============================================================================
# Query tokenization
# =============================================================================

STOP_WORDS = frozenset({"for", "the", "and", "or", "with", "in", "on", "at"})

# Words too generic to identify an electronics product on their own
GENERIC_ELECTRONICS_WORDS = frozenset({
    "inch", "gb", "tb", "pro", "max", "mini", "plus", "ultra",
})

# =============================================================================
# Product families
# =============================================================================

ELECTRONICS_MARKERS: Tuple[str, ...] = (
    "iphone", "samsung", "galaxy", "laptop", "tablet", "tv", "television",
)

# Office items that share words with electronics ("scanner" apps, "tv" printers)
OFFICE_SUPPLY_MARKERS: Tuple[str, ...] = (
    "printer", "scanner", "stapler", "desk", "chair", "cabinet",
)

# Nouns accepted on their own for office supply queries: query noun -> title nouns
OFFICE_TYPE_NOUNS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "printer": ("printer", "inkjet", "laser"),
    "scanner": ("scanner",),
    "desk": ("desk",),
    "chair": ("chair",),
    "cabinet": ("cabinet",),
})

PRODUCE_WORDS: Tuple[str, ...] = (
    "banana", "apple", "orange", "grape", "strawberry", "mango",
    "pineapple", "avocado", "tomato", "potato", "onion", "lettuce",
)

# Titles that share a produce noun but describe a prepared food or drink
PRODUCE_EXCLUSIONS: Tuple[str, ...] = (
    "smoothie recipe", "drink recipe", "protein shake", "milkshake",
    "smoothie", "shake", "beverage", "recipe",
)

GROCERY_MARKERS: Tuple[str, ...] = PRODUCE_WORDS + (
    "milk", "eggs", "bread", "butter", "cheese", "yogurt", "cereal",
    "coffee", "flour", "sugar", "rice", "pasta", "chicken", "beef",
    "grocery", "groceries", "snack", "juice",
)

# Device words that make "apple" a brand rather than fruit
APPLE_DEVICE_TERMS: Tuple[str, ...] = (
    "iphone", "ipad", "macbook", "imac", "mac", "airpods", "airpod",
    "watch", "pencil", "homepod", "tv", "vision pro",
)

# =============================================================================
# Accessories
# =============================================================================

ACCESSORY_KEYWORDS: Tuple[str, ...] = (
    "case", "cover", "screen protector", "protector", "tempered glass",
    "skin", "sticker", "stand", "holder", "mount", "grip", "ring",
    "pop socket", "wallet", "holster", "bumper", "frame", "shell",
    "sleeve", "pouch", "bag", "strap", "lanyard", "accessory",
    "accessories", "parts", "repair", "replacement",
)

# Treated as accessories unless the query itself is for a charging product
CHARGING_ACCESSORY_KEYWORDS: Tuple[str, ...] = ("charger", "cable", "adapter", "dock")

CHARGING_QUERY_PATTERN = (
    r"\b(charger|charging|cable|adapter|power adapter|wall charger|"
    r"usb-c charger|gan charger|dock)\b"
)

PRINTER_SUPPLY_TERMS: Tuple[str, ...] = (
    "ink cartridge", "toner cartridge", "printer paper",
    "paper refill", "ink refill", "toner refill",
)

# =============================================================================
# Model numbers
# =============================================================================

# Generations close enough to count as the same product line in listings
ADJACENT_MODELS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "17": ("16", "18", "15"),
    "16": ("17", "15", "18"),
    "15": ("16", "14", "17"),
})

# =============================================================================
# Price categories
# =============================================================================

# Apple flagships whose non-phone variants still cost hundreds
FLAGSHIP_APPLE_PHRASES: Tuple[str, ...] = ("macbook pro", "ipad pro")

EXPENSIVE_PRODUCT_MARKERS: Tuple[str, ...] = (
    "ipad", "macbook", "mac pro", "airpods pro", "laptop",
    "gaming console", "ps5", "playstation 5", "xbox",
)

INSTALLMENT_MARKERS: Tuple[str, ...] = ("/mo", "/month", "monthly")

# =============================================================================
# Variant query building
# =============================================================================

VARIANT_BRANDS: Tuple[str, ...] = (
    "lenovo", "dell", "hp", "asus", "acer", "apple", "samsung",
    "microsoft", "sony", "lg", "tcl", "hisense", "jbl", "bose",
    "anker", "logitech", "razer", "msi",
)

# (product type, query terms that imply it); first match wins
VARIANT_PRODUCT_TYPES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("laptop", ("laptop", "notebook", "ideapad", "thinkpad", "inspiron", "pavilion")),
    ("TV", ("tv", "television", "oled", "qled")),
    ("headphones", ("headphone", "earbud", "earphone", "airpod")),
    ("monitor", ("monitor", "display")),
    ("tablet", ("tablet", "ipad")),
    ("phone", ("phone", "iphone", "galaxy", "pixel")),
    ("keyboard", ("keyboard", "mouse")),
)
