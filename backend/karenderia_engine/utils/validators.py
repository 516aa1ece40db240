"""
Input validation utilities.

The engine tolerates missing or unknown *data* (unknown ingredients,
unknown allergen names, empty lists) but fails fast on caller bugs such
as passing None where a list of ingredients is expected.
"""

import math
import logging
from typing import Any, List, Optional

from karenderia_engine.config import settings

# Configure logging
logger = logging.getLogger(__name__)


def validate_ingredient_list(ingredients: Any) -> List[str]:
    """
    Validate an ingredient list passed by a caller.

    An empty list is valid. None, non-list containers, and non-string
    items are programming errors.

    Args:
        ingredients: Candidate list of ingredient strings

    Returns:
        List[str]: The same ingredients as a list

    Raises:
        TypeError: If the argument is not a list/tuple of strings
    """
    if ingredients is None:
        raise TypeError("Ingredient list is required, got None")

    if isinstance(ingredients, (str, bytes)) or not isinstance(ingredients, (list, tuple)):
        raise TypeError(
            f"Ingredient list must be a list of strings, "
            f"got {type(ingredients).__name__}"
        )

    for i, ingredient in enumerate(ingredients):
        if not isinstance(ingredient, str):
            raise TypeError(
                f"Ingredient at index {i} must be a string, "
                f"got {type(ingredient).__name__}"
            )

    return list(ingredients)


def validate_ingredient_text(ingredient: Any) -> str:
    """
    Validate a single ingredient string.

    Raises:
        TypeError: If the ingredient is not a string
    """
    if not isinstance(ingredient, str):
        raise TypeError(
            f"Ingredient must be a string, got {type(ingredient).__name__}"
        )
    return ingredient


def clamp_portion_weight(portion_weight: Optional[float]) -> float:
    """
    Clamp a portion weight into [MIN_PORTION_WEIGHT, MAX_PORTION_WEIGHT].

    Negative, zero, non-finite, or missing weights would otherwise scale
    nutrition to zero, below zero, or out of float range. They are
    replaced by ``settings.MIN_PORTION_WEIGHT`` and a warning is logged.
    Weights above ``settings.MAX_PORTION_WEIGHT`` are clamped down to it.

    Args:
        portion_weight: Portion weight in grams

    Returns:
        float: A strictly positive, finite portion weight

    Raises:
        TypeError: If the weight is not numeric
    """
    minimum = settings.MIN_PORTION_WEIGHT
    maximum = settings.MAX_PORTION_WEIGHT

    if portion_weight is None:
        logger.warning(f"Missing portion weight, using {minimum}g")
        return minimum

    if isinstance(portion_weight, bool) or not isinstance(portion_weight, (int, float)):
        raise TypeError(
            f"Portion weight must be a number, got {type(portion_weight).__name__}"
        )

    try:
        weight = float(portion_weight)
    except OverflowError:
        logger.warning(f"Portion weight out of float range, clamping to {minimum}g")
        return minimum

    if not math.isfinite(weight) or weight <= 0:
        logger.warning(f"Invalid portion weight {weight}, clamping to {minimum}g")
        return minimum

    if weight > maximum:
        logger.warning(f"Portion weight {weight}g exceeds {maximum}g, clamping")
        return maximum

    return weight


def validate_servings(servings: Any) -> float:
    """
    Validate a servings count used to split a dish.

    Raises:
        ValueError: If servings is not a positive number
    """
    if isinstance(servings, bool) or not isinstance(servings, (int, float)):
        raise ValueError(f"Servings must be a number, got {type(servings).__name__}")

    try:
        value = float(servings)
    except OverflowError:
        raise ValueError("Servings is out of float range")

    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Servings must be a finite number greater than zero, got {servings}")

    return value
