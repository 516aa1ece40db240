"""
Pydantic models for dish health analysis.

This module defines the dish-level nutrition analysis and the daily
value percentages derived from it.
"""

from pydantic import BaseModel, Field
from typing import List

from karenderia_engine.models.allergen import AllergenDefinition
from karenderia_engine.models.ingredient import IngredientAnalysis
from karenderia_engine.models.nutrition import NutritionRecord


class DishNutritionAnalysis(BaseModel):
    """
    Aggregate nutrition and health assessment for a dish.

    Attributes:
        total_calories: Rounded total energy (kcal)
        total_nutrition: Aggregate of all 11 nutrition fields
        health_score: Heuristic quality index (0-100)
        recommendations: Rule-based improvement suggestions
        warnings: Severe-allergen, sodium, and calorie warnings
        allergens: Distinct allergens across all ingredients
        ingredient_analyses: Per-ingredient analyses, in input order
    """
    total_calories: int = Field(..., ge=0, description="Rounded total kcal")
    total_nutrition: NutritionRecord = Field(..., description="Aggregate nutrition")
    health_score: int = Field(..., ge=0, le=100, description="Health score (0-100)")
    recommendations: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    allergens: List[AllergenDefinition] = Field(default_factory=list)
    ingredient_analyses: List[IngredientAnalysis] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_calories": 420,
                "total_nutrition": {"calories": 420.0, "protein": 22.0},
                "health_score": 68,
                "recommendations": ["Add more vegetables or whole grains for fiber"],
                "warnings": ["Contains Peanuts - severe allergen risk"]
            }
        }
    }


class DailyValuePercentages(BaseModel):
    """
    Dish totals as a percentage of reference daily intake.

    Reference values: 2000 kcal, 50g protein, 300g carbs, 65g fat,
    25g fiber, 2300mg sodium, 50g sugar.
    """
    calories: float = Field(0.0, ge=0)
    protein: float = Field(0.0, ge=0)
    carbs: float = Field(0.0, ge=0)
    fat: float = Field(0.0, ge=0)
    fiber: float = Field(0.0, ge=0)
    sodium: float = Field(0.0, ge=0)
    sugar: float = Field(0.0, ge=0)
