"""
Common utility helper functions.

This module provides reusable utility functions for text matching,
rounding, formatting, and list manipulation used throughout the engine.
"""

import math
import logging
from typing import Iterable, List, Optional

# Configure logging
logger = logging.getLogger(__name__)


def normalize_ingredient_text(ingredient: Optional[str]) -> str:
    """
    Standardize ingredient text for lexicon matching.

    Only lowercases and trims. Quantities and preparation words are left
    in place because lexicon keywords are matched as substrings.

    Args:
        ingredient: Raw ingredient string

    Returns:
        str: Normalized ingredient text ("" for None/empty input)

    Example:
        >>> normalize_ingredient_text("  Peanut Sauce ")
        "peanut sauce"
    """
    if not ingredient:
        return ""

    return ingredient.lower().strip()


def keyword_matches(keyword: str, text: str, reverse_min_length: int = 3) -> bool:
    """
    Check bidirectional substring containment between a keyword and text.

    Matches when the keyword appears inside the text ("peanut" in
    "peanut sauce") or when the text appears inside the keyword ("oil"
    in "peanut oil"). The second direction only applies when the text
    is at least ``reverse_min_length`` characters long, so that
    one-letter fragments do not match every keyword.

    Both arguments are expected to be normalized already.

    Args:
        keyword: Lexicon keyword (lowercase)
        text: Normalized ingredient text
        reverse_min_length: Minimum text length for text-in-keyword matches

    Returns:
        bool: True if either containment holds
    """
    if not keyword or not text:
        return False

    if keyword in text:
        return True

    return len(text) >= reverse_min_length and text in keyword


def round_half_up(value: float, decimals: int = 0) -> float:
    """
    Round a number with halves going up (2.5 -> 3), unlike round().

    Args:
        value: Number to round
        decimals: Number of decimal places to keep

    Returns:
        float: Rounded value
    """
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def format_nutrition_value(value: float, unit: str, decimals: int = 1) -> str:
    """
    Format nutrition value for display.

    Args:
        value: Numeric nutrition value
        unit: Unit suffix (g, mg, IU, %, or "")
        decimals: 0 for whole numbers, otherwise fixed decimal places

    Returns:
        str: Formatted string (e.g., "25.5g", "450.0mg", "12%")
    """
    rounded = round_half_up(value, decimals)

    if decimals == 0:
        return f"{int(rounded)}{unit}"

    return f"{rounded:.{decimals}f}{unit}"


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safely divide two numbers, returning default if denominator is zero.

    Args:
        numerator: Numerator value
        denominator: Denominator value
        default: Default value to return if division by zero (default: 0.0)

    Returns:
        float: Result of division or default value
    """
    if denominator == 0:
        return default
    return numerator / denominator


def dedupe_preserving_order(items: Iterable[str]) -> List[str]:
    """Remove duplicates while keeping first-seen order."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique
