"""
Ingredient analysis service.

This module turns one free-text ingredient into an IngredientAnalysis:
the allergens it may trigger, its best-effort per-100g nutrition, a
coarse category, and dietary tags.

Categories are assigned by a fixed-priority keyword test:

    protein > carbohydrate > vegetable > fat > seasoning > other

The first group with a matching keyword wins, so "peanut butter" is a
protein (not a fat) and "fish sauce" is a protein (not a seasoning).

Analysis is a pure function of the ingredient string and the lexicon.
"""

import logging
from typing import List, Optional

from karenderia_engine.models.allergen import AllergenDefinition, Severity
from karenderia_engine.models.ingredient import IngredientAnalysis
from karenderia_engine.services.lexicon_store import LexiconStore
from karenderia_engine.utils.constants import (
    ANIMAL_DERIVED_ALLERGENS,
    GLUTEN_ALLERGENS,
    INGREDIENT_CATEGORY_KEYWORDS,
    MEAT_KEYWORDS,
)
from karenderia_engine.utils.helpers import normalize_ingredient_text
from karenderia_engine.utils.validators import (
    validate_ingredient_list,
    validate_ingredient_text,
)

# Configure logging
logger = logging.getLogger(__name__)


def categorize_ingredient(ingredient: str) -> str:
    """
    Determine ingredient category based on name.

    Args:
        ingredient: Ingredient name (normalized or raw)

    Returns:
        str: protein / carbohydrate / vegetable / fat / seasoning / other

    Example:
        >>> categorize_ingredient("peanut butter")
        "protein"
        >>> categorize_ingredient("kangkong")
        "vegetable"
    """
    ingredient_lower = normalize_ingredient_text(ingredient)

    for category, keywords in INGREDIENT_CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            if keyword in ingredient_lower:
                logger.debug(
                    f"Categorized '{ingredient}' as '{category}' "
                    f"(matched keyword: '{keyword}')"
                )
                return category

    logger.debug(f"Categorized '{ingredient}' as 'other' (no keyword match)")
    return "other"


def generate_tags(
    ingredient: str,
    allergens: List[AllergenDefinition],
    category: str
) -> List[str]:
    """
    Derive dietary labels for an analyzed ingredient.

    Tag order: category, allergen-free, high-allergen-risk, vegetarian,
    vegan-friendly, gluten-free.

    Args:
        ingredient: Normalized ingredient text
        allergens: Allergens matched for the ingredient
        category: Category from categorize_ingredient()

    Returns:
        List[str]: Tags without duplicates
    """
    names = {a.canonical_name for a in allergens}
    tags = [category]

    if not allergens:
        tags.append("allergen-free")
    if any(a.severity_default == Severity.SEVERE for a in allergens):
        tags.append("high-allergen-risk")
    if not any(meat in ingredient for meat in MEAT_KEYWORDS):
        tags.append("vegetarian")
    if not names.intersection(ANIMAL_DERIVED_ALLERGENS):
        tags.append("vegan-friendly")
    if not names.intersection(GLUTEN_ALLERGENS):
        tags.append("gluten-free")

    return tags


class IngredientAnalyzer:
    """
    Service class producing per-ingredient analyses.

    Attributes:
        lexicon: Shared read-only LexiconStore
    """

    def __init__(self, lexicon: Optional[LexiconStore] = None):
        """Initialize the analyzer with a lexicon (embedded lexicon by default)."""
        self.lexicon = lexicon or LexiconStore()

        logger.info("IngredientAnalyzer initialized")

    def analyze_ingredient(self, raw: str) -> IngredientAnalysis:
        """
        Analyze one ingredient string.

        Algorithm:
        1. Normalize (lowercase, trim)
        2. Look up allergens (bidirectional keyword match)
        3. Look up nutrition (exact, partial, or default)
        4. Categorize by fixed keyword priority
        5. Derive tags

        Args:
            raw: Ingredient string as written by the caller

        Returns:
            IngredientAnalysis: The original string with derived fields

        Raises:
            TypeError: If raw is not a string

        Example:
            analysis = analyzer.analyze_ingredient("Peanut Sauce")
            analysis.allergen_names  # ["Peanuts"]
        """
        validate_ingredient_text(raw)
        normalized = normalize_ingredient_text(raw)

        allergens = self.lexicon.lookup_allergens(normalized)
        nutrition = self.lexicon.lookup_nutrition(normalized)
        category = categorize_ingredient(normalized)
        tags = generate_tags(normalized, allergens, category)

        return IngredientAnalysis(
            ingredient=raw,
            matched_allergens=allergens,
            nutrition=nutrition,
            category=category,
            tags=tags
        )

    def analyze_ingredients(self, ingredients: List[str]) -> List[IngredientAnalysis]:
        """
        Analyze every ingredient in a list, preserving order.

        Raises:
            TypeError: If ingredients is not a list of strings
        """
        ingredients = validate_ingredient_list(ingredients)
        return [self.analyze_ingredient(ingredient) for ingredient in ingredients]
