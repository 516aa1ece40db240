"""
Meal filter service.

This module filters and sorts menu dishes by a FilterSpec. Filters run as
a sequential AND-chain in a fixed order:

    search -> calories -> budget -> category -> spicy level ->
    availability -> vegetarian -> vegan -> allergen-safe ->
    specific allergens -> distance

then an optional stable sort. A stage whose FilterSpec field is None
passes every dish through; availability is always applied.

Presets are static FilterSpec data (see FILTER_PRESETS in constants).
"""

import copy
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from karenderia_engine.models.dish import Dish, FilterSpec, FilterStats
from karenderia_engine.services.allergen_detector import (
    AllergenSafetyEvaluator,
    coerce_user_allergens,
)
from karenderia_engine.utils.constants import (
    DEFAULT_FILTERS,
    FILTER_PRESETS,
    SORT_FIELDS,
)
from karenderia_engine.utils.helpers import normalize_ingredient_text, round_half_up, safe_divide

# Configure logging
logger = logging.getLogger(__name__)


def coerce_dishes(dishes: Iterable[Union[Dish, Dict]]) -> List[Dish]:
    """
    Accept dishes as Dish models or plain catalog dicts.

    Raises:
        TypeError: If dishes is None or an entry is neither a Dish nor a dict
    """
    if dishes is None:
        raise TypeError("Dishes must be a list, got None")

    coerced = []
    for i, dish in enumerate(dishes):
        if isinstance(dish, Dish):
            coerced.append(dish)
        elif isinstance(dish, dict):
            coerced.append(Dish.model_validate(dish))
        else:
            raise TypeError(
                f"Dish at index {i} must be a Dish or dict, got {type(dish).__name__}"
            )
    return coerced


def coerce_filter_spec(spec: Union[FilterSpec, Dict, None]) -> FilterSpec:
    """Accept a FilterSpec, a dict of FilterSpec fields, or None (no filters)."""
    if spec is None:
        return FilterSpec()
    if isinstance(spec, FilterSpec):
        return spec
    if isinstance(spec, dict):
        return FilterSpec.model_validate(spec)
    raise TypeError(f"Filter spec must be a FilterSpec or dict, got {type(spec).__name__}")


def _contains(value: Optional[str], query: str) -> bool:
    return bool(value) and query in value.lower()


class MealFilter:
    """
    Service class for filtering and sorting dishes.

    Attributes:
        evaluator: Allergen safety evaluator used by the allergen stages
        lexicon: The evaluator's LexiconStore
    """

    def __init__(self, evaluator: Optional[AllergenSafetyEvaluator] = None):
        """Initialize the filter with an allergen evaluator."""
        self.evaluator = evaluator or AllergenSafetyEvaluator()
        self.lexicon = self.evaluator.lexicon

        logger.info("MealFilter initialized")

    def filter_dishes(
        self,
        dishes: Iterable[Union[Dish, Dict]],
        spec: Union[FilterSpec, Dict, None],
        user_allergens: Optional[Iterable[Any]] = None
    ) -> List[Dish]:
        """
        Filter and sort dishes.

        The input list is never mutated; a new list is returned.

        Args:
            dishes: Dish models or catalog dicts
            spec: FilterSpec or dict of its fields (None or {} applies no filters
                beyond availability)
            user_allergens: Profile snapshot for the allergen_safe stage

        Returns:
            List[Dish]: Matching dishes, sorted if spec.sort_by is set

        Example:
            meal_filter.filter_dishes(dishes, {"max_budget": 150, "sort_by": "price"})
        """
        dishes = coerce_dishes(dishes)
        spec = coerce_filter_spec(spec)
        entries = coerce_user_allergens(user_allergens)

        stages: List[Callable[[List[Dish]], List[Dish]]] = [
            lambda d: self._filter_search(d, spec.search_query),
            lambda d: self._filter_range(d, "calories", spec.min_calories, spec.max_calories),
            lambda d: self._filter_range(d, "price", spec.min_budget, spec.max_budget),
            lambda d: self._filter_exact(d, "category", spec.category),
            lambda d: self._filter_exact(d, "spicy_level", spec.spicy_level),
            self._filter_available,
            lambda d: self._filter_flag(d, "is_vegetarian", spec.is_vegetarian),
            lambda d: self._filter_flag(d, "is_vegan", spec.is_vegan),
            lambda d: self._filter_allergen_safe(d, spec.allergen_safe, entries),
            lambda d: self._filter_specific_allergens(d, spec.specific_allergens),
            lambda d: self._filter_distance(d, spec.max_distance),
        ]

        filtered = list(dishes)
        for stage in stages:
            filtered = stage(filtered)

        if spec.sort_by:
            filtered = self.sort_dishes(filtered, spec.sort_by, spec.sort_order)

        logger.info(f"Filtered {len(dishes)} dish(es) down to {len(filtered)} result(s)")
        return filtered

    def _filter_search(self, dishes: List[Dish], query: Optional[str]) -> List[Dish]:
        query = normalize_ingredient_text(query)
        if not query:
            return dishes

        return [
            dish for dish in dishes
            if _contains(dish.name, query)
            or _contains(dish.description, query)
            or _contains(dish.category, query)
            or _contains(dish.karenderia_name, query)
        ]

    def _filter_range(
        self,
        dishes: List[Dish],
        field: str,
        minimum: Optional[float],
        maximum: Optional[float]
    ) -> List[Dish]:
        # Missing values count as 0
        if maximum is not None:
            dishes = [d for d in dishes if (getattr(d, field) or 0) <= maximum]
        if minimum is not None:
            dishes = [d for d in dishes if (getattr(d, field) or 0) >= minimum]
        return dishes

    def _filter_exact(self, dishes: List[Dish], field: str, value: Optional[str]) -> List[Dish]:
        value = normalize_ingredient_text(value)
        if not value or value == "all":
            return dishes

        return [
            dish for dish in dishes
            if normalize_ingredient_text(getattr(dish, field)) == value
        ]

    def _filter_available(self, dishes: List[Dish]) -> List[Dish]:
        return [dish for dish in dishes if dish.available]

    def _filter_flag(self, dishes: List[Dish], field: str, required: Optional[bool]) -> List[Dish]:
        if not required:
            return dishes
        return [dish for dish in dishes if getattr(dish, field)]

    def _filter_allergen_safe(
        self,
        dishes: List[Dish],
        allergen_safe: Optional[bool],
        entries: List
    ) -> List[Dish]:
        # An empty profile has nothing to be unsafe against
        if not allergen_safe or not entries:
            return dishes

        return [
            dish for dish in dishes
            if self.evaluator.evaluate_safety(dish.scan_ingredients, entries, dish.name).is_safe
        ]

    def _filter_specific_allergens(
        self,
        dishes: List[Dish],
        allergens: Optional[List[str]]
    ) -> List[Dish]:
        if not allergens:
            return dishes

        return [
            dish for dish in dishes
            if not any(
                self.contains_allergen(allergen, dish.scan_ingredients)
                for allergen in allergens
            )
        ]

    def _filter_distance(self, dishes: List[Dish], max_distance: Optional[float]) -> List[Dish]:
        if max_distance is None:
            return dishes
        return [d for d in dishes if (d.karenderia_distance or 0) <= max_distance]

    def contains_allergen(self, allergen: str, ingredients: List[str]) -> bool:
        """
        Check whether any ingredient contains a free-text allergen.

        The allergen matches when its name appears in an ingredient, or
        when an ingredient matches the keywords of a lexicon allergen the
        name resolves to (by canonical name or alias, e.g. "nuts").
        """
        needle = normalize_ingredient_text(allergen)
        if not needle:
            return False

        definitions = self.lexicon.resolve_allergen_name(needle)

        for ingredient in ingredients:
            normalized = normalize_ingredient_text(ingredient)
            if needle in normalized:
                return True
            if any(self.lexicon.definition_matches(d, normalized) for d in definitions):
                return True

        return False

    def sort_dishes(self, dishes: List[Dish], sort_by: str, sort_order: str = "asc") -> List[Dish]:
        """
        Stable sort by a FilterSpec sort key.

        Missing numeric values sort as 0; names compare case-insensitively.

        Raises:
            ValueError: If sort_by is not a known sort key
        """
        if sort_by not in SORT_FIELDS:
            raise ValueError(
                f"Unknown sort key '{sort_by}'. Expected one of: {', '.join(SORT_FIELDS)}"
            )

        field = SORT_FIELDS[sort_by]
        if field == "name":
            key = lambda dish: dish.name.lower()
        else:
            key = lambda dish: getattr(dish, field) or 0

        return sorted(dishes, key=key, reverse=(sort_order == "desc"))

    def get_filter_stats(
        self,
        original: Iterable[Union[Dish, Dict]],
        filtered: Iterable[Union[Dish, Dict]],
        user_allergens: Optional[Iterable[Any]] = None
    ) -> FilterStats:
        """
        Summarize a filter result.

        Args:
            original: The unfiltered dish list
            filtered: The filtered dish list
            user_allergens: Optional profile; when given, safe_for_user counts
                the filtered dishes that are safe for it

        Returns:
            FilterStats: Counts, rounded average calories, average price
        """
        original = coerce_dishes(original)
        filtered = coerce_dishes(filtered)
        entries = coerce_user_allergens(user_allergens)

        count = len(filtered)
        average_calories = safe_divide(sum(d.calories or 0 for d in filtered), count)
        average_price = safe_divide(sum(d.price or 0 for d in filtered), count)

        if entries:
            safe_count = len(self.evaluator.get_safe_dish_recommendations(filtered, entries))
        else:
            safe_count = count

        return FilterStats(
            total_meals=len(original),
            filtered_meals=count,
            average_calories=int(round_half_up(average_calories)),
            average_price=round_half_up(average_price, 2),
            safe_for_user=safe_count
        )


def get_filter_presets() -> Dict[str, FilterSpec]:
    """Named FilterSpec presets (fresh copies on every call)."""
    return {
        name: FilterSpec.model_validate(copy.deepcopy(values))
        for name, values in FILTER_PRESETS.items()
    }


def get_filter_preset(name: str) -> FilterSpec:
    """
    Look up one preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    if name not in FILTER_PRESETS:
        raise KeyError(
            f"Unknown filter preset '{name}'. Available: {', '.join(FILTER_PRESETS)}"
        )
    return FilterSpec.model_validate(copy.deepcopy(FILTER_PRESETS[name]))


def get_default_filters() -> FilterSpec:
    """The filter applied when the user resets all filters."""
    return FilterSpec.model_validate(copy.deepcopy(DEFAULT_FILTERS))
