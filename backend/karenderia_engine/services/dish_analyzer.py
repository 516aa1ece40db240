"""
Dish nutrition analysis service.

This module aggregates per-ingredient nutrition into dish totals and
attaches a health score, recommendations, and warnings.

Aggregation is an approximation, not a recipe-weight calculation: each
listed ingredient is treated as a roughly equal-weight component and
contributes its per-100g record scaled by

    portion_weight * PORTION_SCALE_FACTOR   (0.1 by default)

so a 300g portion adds 30x each ingredient's per-100g values. The
factor is kept for compatibility with existing menu data and should not
be read as a nutritional derivation.
"""

import logging
from typing import Dict, List, Optional

from karenderia_engine.config import settings
from karenderia_engine.models.allergen import AllergenDefinition
from karenderia_engine.models.health_score import (
    DailyValuePercentages,
    DishNutritionAnalysis,
)
from karenderia_engine.models.nutrition import NutritionRecord
from karenderia_engine.services.health_scorer import HealthScorer
from karenderia_engine.services.ingredient_analyzer import IngredientAnalyzer
from karenderia_engine.services.lexicon_store import LexiconStore
from karenderia_engine.utils.constants import (
    DAILY_VALUES,
    NUTRITION_FIELDS,
    NUTRITION_LABEL_FORMAT,
)
from karenderia_engine.utils.helpers import format_nutrition_value, round_half_up
from karenderia_engine.utils.validators import clamp_portion_weight, validate_servings

# Configure logging
logger = logging.getLogger(__name__)


class DishAnalyzer:
    """
    Service class for dish-level nutrition analysis.

    Attributes:
        ingredient_analyzer: Per-ingredient matcher
        health_scorer: Rule-based scorer for the aggregate
        portion_scale_factor: Multiplier applied to the portion weight
    """

    def __init__(
        self,
        lexicon: Optional[LexiconStore] = None,
        ingredient_analyzer: Optional[IngredientAnalyzer] = None,
        health_scorer: Optional[HealthScorer] = None
    ):
        """Initialize the dish analyzer and its collaborators."""
        self.ingredient_analyzer = ingredient_analyzer or IngredientAnalyzer(lexicon)
        self.health_scorer = health_scorer or HealthScorer()
        self.portion_scale_factor = settings.PORTION_SCALE_FACTOR

        logger.info(
            f"DishAnalyzer initialized (portion scale factor "
            f"{self.portion_scale_factor})"
        )

    def analyze_dish(
        self,
        ingredients: List[str],
        portion_weight: float = 1
    ) -> DishNutritionAnalysis:
        """
        Aggregate nutrition and assess a whole dish.

        Algorithm:
        1. Analyze every ingredient
        2. Sum the 11 nutrition fields, scaled by portion_weight * 0.1
        3. Collect distinct allergens (by canonical name)
        4. Score, recommend, and warn from the totals

        An empty ingredient list is valid: totals are zero, the score is
        the base score, and the generic recommendations fire.

        Args:
            ingredients: Ingredient strings
            portion_weight: Portion size in grams; values <= 0 are clamped
                to settings.MIN_PORTION_WEIGHT

        Returns:
            DishNutritionAnalysis: Totals, score, recommendations, warnings

        Raises:
            TypeError: If ingredients is not a list of strings

        Example:
            analyzer = DishAnalyzer()
            result = analyzer.analyze_dish(["pork", "tamarind", "kangkong"], 300)
            print(result.total_calories, result.health_score)
        """
        analyses = self.ingredient_analyzer.analyze_ingredients(ingredients)
        portion_factor = clamp_portion_weight(portion_weight) * self.portion_scale_factor

        logger.info(
            f"Analyzing dish with {len(analyses)} ingredient(s), "
            f"portion factor {portion_factor:.2f}"
        )

        total_nutrition = NutritionRecord()
        allergens: List[AllergenDefinition] = []
        seen_allergens = set()

        for analysis in analyses:
            total_nutrition = total_nutrition + analysis.nutrition.scaled(portion_factor)

            for allergen in analysis.matched_allergens:
                if allergen.canonical_name not in seen_allergens:
                    seen_allergens.add(allergen.canonical_name)
                    allergens.append(allergen)

        health_score = self.health_scorer.calculate_health_score(
            total_nutrition, allergens, analyses
        )
        recommendations = self.health_scorer.generate_recommendations(
            total_nutrition, analyses
        )
        warnings = self.health_scorer.generate_warnings(allergens, total_nutrition)

        return DishNutritionAnalysis(
            total_calories=int(round_half_up(total_nutrition.calories)),
            total_nutrition=total_nutrition,
            health_score=health_score,
            recommendations=recommendations,
            warnings=warnings,
            allergens=allergens,
            ingredient_analyses=analyses
        )

    def calculate_nutrition_per_serving(
        self,
        analysis: DishNutritionAnalysis,
        servings: float
    ) -> NutritionRecord:
        """
        Split a dish's totals into equal servings.

        Args:
            analysis: Result of analyze_dish()
            servings: Number of servings (must be > 0)

        Returns:
            NutritionRecord: Per-serving values rounded to 2 decimals

        Raises:
            ValueError: If servings is not a positive number
        """
        servings = validate_servings(servings)
        totals = analysis.total_nutrition

        return NutritionRecord(**{
            field: round_half_up(getattr(totals, field) / servings, 2)
            for field in NUTRITION_FIELDS
        })

    def calculate_daily_values(self, analysis: DishNutritionAnalysis) -> DailyValuePercentages:
        """
        Express dish totals as a percentage of reference daily intake.

        Returns:
            DailyValuePercentages: Unrounded percentages
        """
        totals = analysis.total_nutrition

        return DailyValuePercentages(
            calories=analysis.total_calories / DAILY_VALUES["calories"] * 100,
            protein=totals.protein / DAILY_VALUES["protein"] * 100,
            carbs=totals.carbohydrates / DAILY_VALUES["carbs"] * 100,
            fat=totals.fat / DAILY_VALUES["fat"] * 100,
            fiber=totals.fiber / DAILY_VALUES["fiber"] * 100,
            sodium=totals.sodium / DAILY_VALUES["sodium"] * 100,
            sugar=totals.sugar / DAILY_VALUES["sugar"] * 100
        )


def get_nutrition_label(record: NutritionRecord) -> Dict[str, str]:
    """
    Format a nutrition record as a display label.

    Calories are whole numbers without a unit; every other field keeps
    one decimal with its unit (g, mg, or IU).

    Args:
        record: Per-100g or aggregate nutrition

    Returns:
        Dict[str, str]: Label name -> formatted value, in label order

    Example:
        >>> get_nutrition_label(record)["Protein"]
        "31.0g"
    """
    return {
        label: format_nutrition_value(getattr(record, field), unit, decimals)
        for label, field, unit, decimals in NUTRITION_LABEL_FORMAT
    }


def get_daily_value_label(percentages: DailyValuePercentages) -> Dict[str, str]:
    """Format daily value percentages as whole-number "%" strings."""
    return {
        field: format_nutrition_value(value, "%", 0)
        for field, value in percentages.model_dump().items()
    }
