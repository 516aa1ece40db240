"""
Pydantic models for nutrition data.

This module defines the per-100g nutrition record used by the lexicon
and the aggregate totals produced by the dish analyzer.
"""

from pydantic import BaseModel, Field
from typing import Dict

from karenderia_engine.utils.constants import NUTRITION_FIELDS


class NutritionRecord(BaseModel):
    """
    Nutrition data model (per 100g reference, or aggregated for a dish).

    Attributes:
        calories: Energy in kcal
        protein: Protein in grams
        carbohydrates: Carbohydrates in grams
        fat: Total fat in grams
        fiber: Dietary fiber in grams
        sugar: Sugar in grams
        sodium: Sodium in milligrams
        calcium: Calcium in milligrams
        iron: Iron in milligrams
        vitamin_c: Vitamin C in milligrams
        vitamin_a: Vitamin A in IU
    """
    calories: float = Field(0.0, ge=0, description="Energy in kcal")
    protein: float = Field(0.0, ge=0, description="Protein in grams")
    carbohydrates: float = Field(0.0, ge=0, description="Carbohydrates in grams")
    fat: float = Field(0.0, ge=0, description="Total fat in grams")
    fiber: float = Field(0.0, ge=0, description="Dietary fiber in grams")
    sugar: float = Field(0.0, ge=0, description="Sugar in grams")
    sodium: float = Field(0.0, ge=0, description="Sodium in milligrams")
    calcium: float = Field(0.0, ge=0, description="Calcium in milligrams")
    iron: float = Field(0.0, ge=0, description="Iron in milligrams")
    vitamin_c: float = Field(0.0, ge=0, description="Vitamin C in milligrams")
    vitamin_a: float = Field(0.0, ge=0, description="Vitamin A in IU")

    def scaled(self, factor: float) -> "NutritionRecord":
        """Return a copy with every field multiplied by ``factor``."""
        return NutritionRecord(**{
            field: getattr(self, field) * factor for field in NUTRITION_FIELDS
        })

    def __add__(self, other: "NutritionRecord") -> "NutritionRecord":
        return NutritionRecord(**{
            field: getattr(self, field) + getattr(other, field)
            for field in NUTRITION_FIELDS
        })

    def to_dict(self) -> Dict[str, float]:
        """Field name to value, in canonical field order."""
        return {field: getattr(self, field) for field in NUTRITION_FIELDS}

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "calories": 165.0,
                "protein": 31.0,
                "carbohydrates": 0.0,
                "fat": 3.6,
                "fiber": 0.0,
                "sugar": 0.0,
                "sodium": 74.0,
                "calcium": 11.0,
                "iron": 0.9,
                "vitamin_c": 0.0,
                "vitamin_a": 41.0
            }
        }
    }
