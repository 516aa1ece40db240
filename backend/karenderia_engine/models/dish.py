"""
Pydantic models for menu dishes and dish filtering.

This module defines the dish record supplied by the menu catalog, the
filter criteria used by the meal filter, and the summary
statistics computed over a filter result.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional

from karenderia_engine.models.allergen import DishSafetyAnalysis


class Dish(BaseModel):
    """
    Menu dish with ingredients and commerce metadata.

    Fields missing from weaker catalog sources fall back to the defaults
    below; in particular ``available`` defaults to True.

    Attributes:
        name: Dish name
        ingredients: Ingredient strings (None -> the dish name is scanned)
        price: Price in pesos
        calories: Calories per serving
        category: Menu category (e.g., "main", "soup")
        available: Whether the dish can currently be ordered
        description: Free-text description
        karenderia_name: Name of the eatery serving the dish
        spicy_level: e.g. "mild", "medium", "spicy"
        is_vegetarian: Vegetarian flag from the catalog
        is_vegan: Vegan flag from the catalog
        allergens: Allergen labels declared by the eatery
        average_rating: Mean customer rating
        total_reviews: Number of reviews (popularity)
        karenderia_distance: Distance to the eatery in km
    """
    name: str = Field(..., description="Dish name")
    ingredients: Optional[List[str]] = Field(None, description="Ingredient strings")
    price: Optional[float] = Field(None, ge=0, description="Price")
    calories: Optional[float] = Field(None, ge=0, description="Calories per serving")
    category: Optional[str] = Field(None, description="Menu category")
    available: bool = Field(True, description="Orderable right now")
    description: Optional[str] = None
    karenderia_name: Optional[str] = None
    spicy_level: Optional[str] = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    allergens: List[str] = Field(default_factory=list, description="Declared allergen labels")
    average_rating: Optional[float] = Field(None, ge=0)
    total_reviews: Optional[int] = Field(None, ge=0)
    karenderia_distance: Optional[float] = Field(None, ge=0)

    @field_validator('available', mode='before')
    @classmethod
    def default_available(cls, v) -> bool:
        """Treat an explicit None as available."""
        return True if v is None else v

    @property
    def scan_ingredients(self) -> List[str]:
        """Ingredients used for allergen scans (the name if none are listed)."""
        return self.ingredients if self.ingredients is not None else [self.name]

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Kare-Kare",
                "ingredients": ["oxtail", "peanut sauce", "eggplant", "string beans"],
                "price": 180.0,
                "calories": 420.0,
                "category": "main",
                "available": True,
                "karenderia_name": "Aling Nena's",
                "average_rating": 4.6,
                "total_reviews": 120,
                "karenderia_distance": 1.2
            }
        }
    }


class FilterSpec(BaseModel):
    """
    Dish filter criteria.

    Every field is optional; an unset (None) field makes its filter stage a
    pass-through. Zero is a real bound, not "unset".
    Unknown keys are rejected so a misspelled bound cannot be dropped.
    """
    search_query: Optional[str] = None
    min_calories: Optional[float] = None
    max_calories: Optional[float] = None
    min_budget: Optional[float] = None
    max_budget: Optional[float] = None
    category: Optional[str] = None
    spicy_level: Optional[str] = None
    is_vegetarian: Optional[bool] = None
    is_vegan: Optional[bool] = None
    allergen_safe: Optional[bool] = None
    specific_allergens: Optional[List[str]] = None
    max_distance: Optional[float] = None
    sort_by: Optional[Literal["price", "calories", "rating", "distance", "popularity", "name"]] = None
    sort_order: Literal["asc", "desc"] = "asc"

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "example": {
                "max_budget": 150,
                "allergen_safe": True,
                "sort_by": "price",
                "sort_order": "asc"
            }
        }
    }


class FilterStats(BaseModel):
    """
    Summary of a filter result.

    Attributes:
        total_meals: Size of the unfiltered list
        filtered_meals: Size of the filtered list
        average_calories: Rounded mean calories of the filtered list
        average_price: Mean price of the filtered list (2 decimals)
        safe_for_user: Filtered dishes that are safe for the given profile
    """
    total_meals: int = Field(0, ge=0)
    filtered_meals: int = Field(0, ge=0)
    average_calories: int = Field(0, ge=0)
    average_price: float = Field(0.0, ge=0)
    safe_for_user: int = Field(0, ge=0)


class DishSafetyResult(BaseModel):
    """One entry of a batch safety evaluation."""
    name: str
    analysis: DishSafetyAnalysis
