"""
Rule-based health scoring engine.

This module scores an aggregated dish using fixed nutrient thresholds
instead of a trained model. Every rule is explicit, so the breakdown
shows exactly why a dish got its score.

Score (clamped to 0-100):
- Base: 50 points
- Bonuses: protein, fiber, vitamin C, calcium, iron above thresholds
- Penalties: sodium, sugar, fat above thresholds; more than 2 allergens
- Diversity: +2 per distinct ingredient category

It also produces the rule-based recommendations and warnings that
accompany the score.
"""

import logging
from typing import Dict, List

from karenderia_engine.models.allergen import AllergenDefinition, Severity
from karenderia_engine.models.ingredient import IngredientAnalysis
from karenderia_engine.models.nutrition import NutritionRecord
from karenderia_engine.utils.constants import (
    CATEGORY_DIVERSITY_BONUS,
    DISH_WARNING_THRESHOLDS,
    HEALTH_SCORE_BASE,
    HEALTH_SCORE_BONUSES,
    HEALTH_SCORE_PENALTIES,
    MULTI_ALLERGEN_PENALTY,
    MULTI_ALLERGEN_THRESHOLD,
    RECOMMENDATION_THRESHOLDS,
)

# Configure logging
logger = logging.getLogger(__name__)


class HealthScorer:
    """
    Rule-based health scorer for dishes.

    Attributes:
        base_score: Starting score before bonuses and penalties
        bonuses: Nutrient -> (threshold, points) added when exceeded
        penalties: Nutrient -> (threshold, points) subtracted when exceeded
    """

    def __init__(self):
        """Initialize the health scorer with the default rule tables."""
        self.base_score = HEALTH_SCORE_BASE
        self.bonuses = HEALTH_SCORE_BONUSES
        self.penalties = HEALTH_SCORE_PENALTIES

        logger.info(
            f"HealthScorer initialized with base={self.base_score}, "
            f"{len(self.bonuses)} bonus rules, {len(self.penalties)} penalty rules"
        )

    def calculate_health_score(
        self,
        nutrition: NutritionRecord,
        allergens: List[AllergenDefinition],
        ingredients: List[IngredientAnalysis]
    ) -> int:
        """
        Calculate the health score for an aggregated dish.

        Args:
            nutrition: Aggregate dish nutrition
            allergens: Distinct allergens found across the dish
            ingredients: Per-ingredient analyses (for category diversity)

        Returns:
            int: Score clamped to [0, 100]

        Example:
            scorer = HealthScorer()
            score = scorer.calculate_health_score(totals, allergens, analyses)
        """
        breakdown = self.score_breakdown(nutrition, allergens, ingredients)
        raw_score = sum(breakdown.values())
        final_score = max(0, min(100, raw_score))

        logger.debug(f"Health score breakdown: {breakdown}")
        logger.info(f"Final health score: {final_score} (raw {raw_score})")

        return final_score

    def score_breakdown(
        self,
        nutrition: NutritionRecord,
        allergens: List[AllergenDefinition],
        ingredients: List[IngredientAnalysis]
    ) -> Dict[str, int]:
        """
        Itemize every rule that contributed to the score.

        Returns:
            Dict[str, int]: Rule name -> points (base included, unclamped)
        """
        breakdown = {"base": self.base_score}

        for nutrient, (threshold, points) in self.bonuses.items():
            if getattr(nutrition, nutrient) > threshold:
                breakdown[f"{nutrient}_bonus"] = points

        for nutrient, (threshold, points) in self.penalties.items():
            if getattr(nutrition, nutrient) > threshold:
                breakdown[f"{nutrient}_penalty"] = -points

        if len(allergens) > MULTI_ALLERGEN_THRESHOLD:
            breakdown["multi_allergen_penalty"] = -MULTI_ALLERGEN_PENALTY

        categories = {analysis.category for analysis in ingredients}
        if categories:
            breakdown["category_diversity"] = len(categories) * CATEGORY_DIVERSITY_BONUS

        return breakdown

    def generate_recommendations(
        self,
        nutrition: NutritionRecord,
        ingredients: List[IngredientAnalysis]
    ) -> List[str]:
        """
        Suggest improvements from fixed nutrient rules.

        An empty dish triggers the protein, fiber, vitamin C, and
        vegetable suggestions since every total is zero.

        Returns:
            List[str]: Recommendations in rule order
        """
        recommendations = []

        if nutrition.protein < RECOMMENDATION_THRESHOLDS["protein_min"]:
            recommendations.append(
                "Consider adding more protein sources like chicken, tofu, or eggs"
            )
        if nutrition.fiber < RECOMMENDATION_THRESHOLDS["fiber_min"]:
            recommendations.append("Add more vegetables or whole grains for fiber")
        if nutrition.sodium > RECOMMENDATION_THRESHOLDS["sodium_max"]:
            recommendations.append("Reduce salt or soy sauce to lower sodium content")
        if nutrition.vitamin_c < RECOMMENDATION_THRESHOLDS["vitamin_c_min"]:
            recommendations.append(
                "Add vitamin C-rich vegetables like tomatoes or bell peppers"
            )

        if not any(analysis.category == "vegetable" for analysis in ingredients):
            recommendations.append("Add vegetables for better nutritional balance")

        return recommendations

    def generate_warnings(
        self,
        allergens: List[AllergenDefinition],
        nutrition: NutritionRecord
    ) -> List[str]:
        """
        Build dish-level warnings.

        One warning per severe allergen, then high-sodium and
        high-calorie warnings.

        Returns:
            List[str]: Warning messages
        """
        warnings = []

        for allergen in allergens:
            if allergen.severity_default == Severity.SEVERE:
                warnings.append(
                    f"Contains {allergen.canonical_name} - severe allergen risk"
                )

        if nutrition.sodium > DISH_WARNING_THRESHOLDS["sodium"]:
            warnings.append(
                "High sodium content - may not be suitable for people "
                "with high blood pressure"
            )
        if nutrition.calories > DISH_WARNING_THRESHOLDS["calories"]:
            warnings.append("High calorie content - consider portion size")

        return warnings
