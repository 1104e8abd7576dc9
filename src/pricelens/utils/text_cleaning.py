"""
Text cleaning and normalization utilities.
"""
import re
from functools import lru_cache
from typing import Iterable, List, Pattern


def normalize_whitespace(text: str) -> str:
    """
    Normalize whitespace in text.

    Args:
        text: Text to normalize

    Returns:
        Text with normalized whitespace

    Examples:
        >>> normalize_whitespace("hello    world\\n\\ntest")
        'hello world test'
    """
    if not text:
        return ""

    return re.sub(r'\s+', ' ', text).strip()


def normalize_query(text: str) -> str:
    """
    Normalize query text for cache keys and comparisons.

    Examples:
        >>> normalize_query("  iPhone 17   Pro Max ")
        'iphone 17 pro max'
    """
    return normalize_whitespace(text).lower()


def normalize_label(text: str) -> str:
    """
    Lower-case a store label and strip its punctuation.

    Apostrophes are dropped so "Kohl's" and "Kohls" agree; any other
    punctuation becomes a space.

    Examples:
        >>> normalize_label("Melissa's Produce, Inc.")
        'melissas produce inc'
        >>> normalize_label("Stop & Shop")
        'stop shop'
    """
    if not text:
        return ""

    lowered = text.lower().replace("'", "").replace("’", "")
    lowered = re.sub(r'[^a-z0-9]+', ' ', lowered)
    return normalize_whitespace(lowered)


@lru_cache(maxsize=2048)
def term_pattern(term: str) -> Pattern[str]:
    """
    Compile a case-insensitive pattern that matches `term` as a whole word.

    Boundaries are alphanumeric lookarounds rather than \\b so that terms
    starting or ending with punctuation ("b&h", "/mo") still anchor.
    """
    return re.compile(
        r'(?<![a-z0-9])' + re.escape(term.strip().lower()) + r'(?![a-z0-9])',
        re.IGNORECASE,
    )


def contains_term(text: str, term: str) -> bool:
    """Check whether `term` appears in `text` as a whole word or phrase."""
    if not text or not term.strip():
        return False
    return term_pattern(term).search(text) is not None


def contains_any(text: str, terms: Iterable[str]) -> bool:
    """Check whether any of `terms` appears in `text` as a whole word."""
    return any(contains_term(text, term) for term in terms)


def tokenize(text: str) -> List[str]:
    """
    Split text into lower-case word tokens.

    Examples:
        >>> tokenize("iPhone 17 Pro-Max, 256GB")
        ['iphone', '17', 'pro', 'max', '256gb']
    """
    return re.findall(r'[a-z0-9]+', (text or "").lower())
