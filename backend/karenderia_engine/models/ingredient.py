"""
Pydantic model for single-ingredient analysis results.
"""

from typing import List

from pydantic import BaseModel, Field

from karenderia_engine.models.allergen import AllergenDefinition
from karenderia_engine.models.nutrition import NutritionRecord


class IngredientAnalysis(BaseModel):
    """
    Derived analysis of one ingredient string.

    Attributes:
        ingredient: Original ingredient string as supplied
        matched_allergens: Lexicon allergens the ingredient may trigger
        nutrition: Per-100g record (default estimate when unknown)
        category: protein / carbohydrate / vegetable / fat / seasoning / other
        tags: Derived labels such as "vegan-friendly" or "gluten-free"
    """
    ingredient: str = Field(..., description="Original ingredient string")
    matched_allergens: List[AllergenDefinition] = Field(default_factory=list)
    nutrition: NutritionRecord = Field(..., description="Per-100g nutrition")
    category: str = Field("other", description="Ingredient category")
    tags: List[str] = Field(default_factory=list, description="Derived labels")

    @property
    def allergen_names(self) -> List[str]:
        return [a.canonical_name for a in self.matched_allergens]

    model_config = {"frozen": True}
