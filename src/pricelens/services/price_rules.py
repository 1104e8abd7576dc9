"""
Price parsing and plausibility rules.

A heuristic safety net, not a pricing oracle: the floor table is hand-tuned
configuration for the categories that produced wrong-product matches in
practice (phones first). False negatives are acceptable; accepting an
accessory or payment-plan price as the product price is what these rules
exist to prevent.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional, Tuple

from ..categories import HIGH_TICKET_CATEGORIES, ProductCategory
from ..keywords import INSTALLMENT_MARKERS
from ..models import ProductQuery
from ..logger import get_logger

logger = get_logger(__name__)

_PRICE_RE = re.compile(r"\d[\d,]*(?:\.\d+)?")

# (category, minimum plausible price); ordered most to least specific
DEFAULT_PRICE_FLOORS: Tuple[Tuple[ProductCategory, Decimal], ...] = (
    (ProductCategory.IPHONE_PRO_MAX, Decimal("600")),
    (ProductCategory.IPHONE_PRO, Decimal("500")),
    (ProductCategory.IPHONE, Decimal("300")),
    (ProductCategory.FLAGSHIP_APPLE, Decimal("300")),
    (ProductCategory.ELECTRONICS, Decimal("50")),
    (ProductCategory.PRINTER, Decimal("50")),
    (ProductCategory.SCANNER, Decimal("50")),
    (ProductCategory.OFFICE_CHAIR, Decimal("30")),
    (ProductCategory.FILE_CABINET, Decimal("40")),
    (ProductCategory.DESK, Decimal("50")),
    (ProductCategory.MATTRESS, Decimal("50")),
)

DEFAULT_GENERAL_CEILING = Decimal("50000")

DEFAULT_PRICE_CEILINGS: Tuple[Tuple[ProductCategory, Decimal], ...] = (
    (ProductCategory.GROCERY, Decimal("200")),
)


def parse_price(text: Optional[str]) -> Optional[Decimal]:
    """
    Extract the first amount from displayed price text.

    Examples:
        >>> parse_price("$1,099.00")
        Decimal('1099.00')
        >>> parse_price("$28.00/mo")
        Decimal('28.00')
        >>> parse_price("See price in cart") is None
        True
    """
    if not text:
        return None
    match = _PRICE_RE.search(text)
    if not match:
        return None
    try:
        return Decimal(match.group(0).replace(",", ""))
    except InvalidOperation:
        return None


def is_installment_text(price_text: Optional[str]) -> bool:
    """Check for monthly payment-plan wording ("$28/mo", "monthly")."""
    lowered = (price_text or "").lower()
    return any(marker in lowered for marker in INSTALLMENT_MARKERS)


class PriceValidator:
    """
    Reject prices that are implausible for the query's category.

    Floors and ceilings are injected so a deployment can extend them
    without touching the classifier.
    """

    def __init__(
        self,
        floors: Optional[Iterable[Tuple[ProductCategory, Decimal]]] = None,
        ceilings: Optional[Iterable[Tuple[ProductCategory, Decimal]]] = None,
        general_ceiling: Decimal = DEFAULT_GENERAL_CEILING,
        high_ticket: Iterable[ProductCategory] = HIGH_TICKET_CATEGORIES,
    ):
        self.floors: Mapping[ProductCategory, Decimal] = MappingProxyType(dict(
            floors if floors is not None else DEFAULT_PRICE_FLOORS
        ))
        self.ceilings: Mapping[ProductCategory, Decimal] = MappingProxyType(dict(
            ceilings if ceilings is not None else DEFAULT_PRICE_CEILINGS
        ))
        self.general_ceiling = general_ceiling
        self.high_ticket = frozenset(high_ticket)

    def is_plausible(self, price: Decimal, query: ProductQuery, price_text: str = "") -> bool:
        """
        Check a parsed price against the category rules.

        Args:
            price: Parsed sale price
            query: The query being aggregated
            price_text: Price as displayed, used for installment detection

        Returns:
            True if the price could be the real sale price of the product
        """
        if price is None or not price.is_finite() or price <= 0:
            return False

        category = query.inferred_category

        if category in self.high_ticket and is_installment_text(price_text):
            logger.debug(f"Rejecting installment price '{price_text}' for '{query.text}'")
            return False

        floor = self.floor_for(category)
        if floor is not None and price < floor:
            logger.debug(f"Rejecting ${price} for '{query.text}': below {category.value} floor ${floor}")
            return False

        ceiling = self.ceilings.get(category, self.general_ceiling)
        if price > ceiling:
            logger.debug(f"Rejecting ${price} for '{query.text}': above ceiling ${ceiling}")
            return False

        return True

    def floor_for(self, category: ProductCategory) -> Optional[Decimal]:
        """Minimum plausible price for a category, None when unrestricted."""
        return self.floors.get(category)
