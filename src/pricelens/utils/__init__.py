"""
Utility modules for Pricelens.
"""
from .text_cleaning import (
    contains_any,
    contains_term,
    normalize_label,
    normalize_query,
    normalize_whitespace,
    tokenize,
)

__all__ = [
    "contains_any",
    "contains_term",
    "normalize_label",
    "normalize_query",
    "normalize_whitespace",
    "tokenize",
]
