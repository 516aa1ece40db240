"""
Karenderia nutrition engine.

Top-level composition of the engine's services. All components share a
single read-only LexiconStore:

- IngredientAnalyzer: per-ingredient allergens, nutrition, category, tags
- DishAnalyzer: dish totals, health score, recommendations, warnings
- AllergenSafetyEvaluator: dish vs. user allergen profile
- MealFilter: dish filtering and sorting

The engine also keeps an optional "current user" allergen snapshot,
pushed by the caller through update_user_allergens(). Only this layer
reads it: when a call omits user_allergens, the cached snapshot is used.
The underlying services always receive the profile explicitly.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from karenderia_engine.models.allergen import (
    DishSafetyAnalysis,
    MenuItemAllergenCheck,
    UserAllergenEntry,
)
from karenderia_engine.models.dish import Dish, DishSafetyResult, FilterSpec, FilterStats
from karenderia_engine.models.health_score import DishNutritionAnalysis
from karenderia_engine.models.ingredient import IngredientAnalysis
from karenderia_engine.models.nutrition import NutritionRecord
from karenderia_engine.services.allergen_detector import (
    AllergenSafetyEvaluator,
    coerce_user_allergens,
)
from karenderia_engine.services.dish_analyzer import DishAnalyzer, get_nutrition_label
from karenderia_engine.services.health_scorer import HealthScorer
from karenderia_engine.services.ingredient_analyzer import IngredientAnalyzer
from karenderia_engine.services.lexicon_store import LexiconStore
from karenderia_engine.services.meal_filter import (
    MealFilter,
    coerce_dishes,
    get_filter_preset,
)

# Configure logging
logger = logging.getLogger(__name__)


class NutritionEngine:
    """
    Entry point wiring every engine service together.

    Attributes:
        lexicon: Shared LexiconStore
        ingredient_analyzer: IngredientAnalyzer instance
        dish_analyzer: DishAnalyzer instance
        evaluator: AllergenSafetyEvaluator instance
        meal_filter: MealFilter instance
    """

    def __init__(self, lexicon: Optional[LexiconStore] = None):
        """
        Initialize all services around one lexicon.

        Args:
            lexicon: Optional custom lexicon (embedded lexicon by default)
        """
        self.lexicon = lexicon or LexiconStore()
        self.ingredient_analyzer = IngredientAnalyzer(self.lexicon)
        self.dish_analyzer = DishAnalyzer(
            ingredient_analyzer=self.ingredient_analyzer,
            health_scorer=HealthScorer()
        )
        self.evaluator = AllergenSafetyEvaluator(self.lexicon, self.ingredient_analyzer)
        self.meal_filter = MealFilter(self.evaluator)

        self._user_allergens: Tuple[UserAllergenEntry, ...] = ()
        self._lock = threading.Lock()

        logger.info("NutritionEngine initialized")

    # Current user profile cache

    def update_user_allergens(self, allergens: Optional[Iterable[Any]]) -> None:
        """
        Replace the cached user allergen snapshot (last write wins).

        Args:
            allergens: UserAllergenEntry objects or dicts; None clears the cache
        """
        snapshot = tuple(coerce_user_allergens(allergens))
        with self._lock:
            self._user_allergens = snapshot

        logger.info(f"User allergen profile updated ({len(snapshot)} allergen(s))")

    def current_user_allergens(self) -> List[UserAllergenEntry]:
        """Return a copy of the cached snapshot."""
        with self._lock:
            return list(self._user_allergens)

    def has_allergen(self, name: str) -> bool:
        """Check whether the cached profile declares an allergen (case-insensitive)."""
        return self._find_cached(name) is not None

    def get_allergen_severity(self, name: str) -> Optional[str]:
        """Return the cached profile's severity for an allergen, or None."""
        entry = self._find_cached(name)
        return entry.severity if entry is not None else None

    def _find_cached(self, name: str) -> Optional[UserAllergenEntry]:
        if not name:
            return None
        needle = name.strip().lower()
        for entry in self.current_user_allergens():
            if entry.name.strip().lower() == needle:
                return entry
        return None

    def _resolve_profile(self, user_allergens: Optional[Iterable[Any]]) -> List[UserAllergenEntry]:
        if user_allergens is None:
            return self.current_user_allergens()
        return coerce_user_allergens(user_allergens)

    # Analysis

    def analyze_ingredient(self, ingredient: str) -> IngredientAnalysis:
        """Analyze one ingredient string."""
        return self.ingredient_analyzer.analyze_ingredient(ingredient)

    def analyze_dish(self, ingredients: List[str], portion_weight: float = 1) -> DishNutritionAnalysis:
        """Aggregate nutrition and health score for a dish."""
        return self.dish_analyzer.analyze_dish(ingredients, portion_weight)

    def get_nutrition_label(self, record: NutritionRecord) -> Dict[str, str]:
        """Format a nutrition record for display."""
        return get_nutrition_label(record)

    # Safety

    def evaluate_safety(
        self,
        ingredients: List[str],
        user_allergens: Optional[Iterable[Any]] = None,
        dish_name: Optional[str] = None
    ) -> DishSafetyAnalysis:
        """
        Evaluate a dish against a profile (the cached one when omitted).

        Example:
            engine.update_user_allergens([{"name": "Peanuts", "severity": "severe"}])
            engine.evaluate_safety(["chicken", "peanut sauce"]).risk_level
            # "high"
        """
        profile = self._resolve_profile(user_allergens)
        return self.evaluator.evaluate_safety(ingredients, profile, dish_name)

    def batch_evaluate(
        self,
        dishes: Iterable[Union[Dish, Dict]],
        user_allergens: Optional[Iterable[Any]] = None
    ) -> List[DishSafetyResult]:
        """Evaluate several dishes against a profile (the cached one when omitted)."""
        profile = self._resolve_profile(user_allergens)
        return self.evaluator.batch_evaluate(dishes, profile)

    def get_allergen_alternatives(self, ingredients: List[str]) -> Dict[str, List[str]]:
        """Map each allergen found in the ingredients to substitute suggestions."""
        return self.evaluator.get_allergen_alternatives(ingredients)

    def check_menu_item(
        self,
        dish: Union[Dish, Dict],
        user_allergens: Optional[Iterable[Any]] = None
    ) -> MenuItemAllergenCheck:
        """Badge-style allergen check for one menu item."""
        dish = coerce_dishes([dish])[0]
        profile = self._resolve_profile(user_allergens)
        return self.evaluator.check_menu_item_for_allergens(dish, profile)

    # Filtering

    def filter_dishes(
        self,
        dishes: Iterable[Union[Dish, Dict]],
        spec: Union[FilterSpec, Dict, None],
        user_allergens: Optional[Iterable[Any]] = None
    ) -> List[Dish]:
        """Filter and sort dishes (allergen stages use the cached profile when omitted)."""
        profile = self._resolve_profile(user_allergens)
        return self.meal_filter.filter_dishes(dishes, spec, profile)

    def apply_preset(
        self,
        dishes: Iterable[Union[Dish, Dict]],
        preset_name: str,
        user_allergens: Optional[Iterable[Any]] = None
    ) -> List[Dish]:
        """
        Filter dishes with a named preset.

        Raises:
            KeyError: If the preset name is unknown
        """
        spec = get_filter_preset(preset_name)
        logger.info(f"Applying filter preset '{preset_name}'")
        return self.filter_dishes(dishes, spec, user_allergens)

    def get_filter_stats(
        self,
        original: Iterable[Union[Dish, Dict]],
        filtered: Iterable[Union[Dish, Dict]],
        user_allergens: Optional[Iterable[Any]] = None
    ) -> FilterStats:
        """Summarize a filter result against a profile (the cached one when omitted)."""
        profile = self._resolve_profile(user_allergens)
        return self.meal_filter.get_filter_stats(original, filtered, profile)
