"""
Pytest configuration and shared fixtures for the engine tests.
"""
import sys
from pathlib import Path

import pytest

# Add backend to path for imports
backend_root = Path(__file__).parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from karenderia_engine.models.allergen import UserAllergenEntry
from karenderia_engine.models.dish import Dish
from karenderia_engine.services.allergen_detector import AllergenSafetyEvaluator
from karenderia_engine.services.dish_analyzer import DishAnalyzer
from karenderia_engine.services.health_scorer import HealthScorer
from karenderia_engine.services.ingredient_analyzer import IngredientAnalyzer
from karenderia_engine.services.lexicon_store import LexiconStore
from karenderia_engine.services.meal_filter import MealFilter
from karenderia_engine.services.nutrition_engine import NutritionEngine


@pytest.fixture(scope="session")
def lexicon():
    return LexiconStore()


@pytest.fixture
def ingredient_analyzer(lexicon):
    return IngredientAnalyzer(lexicon)


@pytest.fixture
def health_scorer():
    return HealthScorer()


@pytest.fixture
def dish_analyzer(ingredient_analyzer, health_scorer):
    return DishAnalyzer(ingredient_analyzer=ingredient_analyzer, health_scorer=health_scorer)


@pytest.fixture
def evaluator(lexicon, ingredient_analyzer):
    return AllergenSafetyEvaluator(lexicon, ingredient_analyzer)


@pytest.fixture
def meal_filter(evaluator):
    return MealFilter(evaluator)


@pytest.fixture
def engine(lexicon):
    return NutritionEngine(lexicon)


@pytest.fixture
def peanut_profile():
    return [UserAllergenEntry(name="Peanuts", severity="severe")]


@pytest.fixture
def sample_dishes():
    """A small karenderia menu covering every filterable attribute."""
    return [
        Dish(
            name="Adobong Manok",
            ingredients=["chicken", "soy sauce", "vinegar", "garlic", "bay leaves"],
            price=90, calories=450, category="main", spicy_level="mild",
            karenderia_name="Aling Nena's", average_rating=4.5, total_reviews=80,
            karenderia_distance=1.0
        ),
        Dish(
            name="Kare-Kare",
            ingredients=["oxtail", "peanut sauce", "eggplant", "string beans"],
            price=180, calories=520, category="main",
            karenderia_name="Kusina ni Lola", average_rating=4.8, total_reviews=120,
            karenderia_distance=2.5
        ),
        Dish(
            name="Sinigang na Baboy",
            ingredients=["pork", "tamarind", "tomatoes", "kangkong", "fish sauce"],
            price=150, calories=380, category="soup", description="Sour tamarind broth",
            karenderia_name="Aling Nena's", average_rating=4.6, total_reviews=95,
            karenderia_distance=0.8
        ),
        Dish(
            name="Ginisang Pechay",
            ingredients=["pechay", "garlic", "onion", "tomato"],
            price=60, calories=150, category="vegetable",
            is_vegetarian=True, is_vegan=True,
            average_rating=4.0, total_reviews=30, karenderia_distance=3.0
        ),
        Dish(
            name="Tortang Talong",
            ingredients=["eggs", "eggplant", "onion"],
            price=70, calories=250, category="main", available=False,
            is_vegetarian=True, average_rating=4.3, total_reviews=40,
            karenderia_distance=1.5
        ),
        Dish(
            name="Pancit Canton",
            ingredients=["noodles", "cabbage", "carrots", "shrimp", "soy sauce"],
            price=100, calories=400, category="noodles"
        ),
    ]
