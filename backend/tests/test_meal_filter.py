"""
Test dish filtering, sorting, presets, and filter statistics.
"""
import pytest

from karenderia_engine.models.dish import FilterSpec
from karenderia_engine.services.meal_filter import (
    get_default_filters,
    get_filter_preset,
    get_filter_presets,
)


def names(dishes):
    return [dish.name for dish in dishes]


AVAILABLE = [
    "Adobong Manok", "Kare-Kare", "Sinigang na Baboy", "Ginisang Pechay", "Pancit Canton"
]


class TestFilterStages:
    """Each stage filters only when its field is set."""

    def test_empty_spec_keeps_available_dishes_in_order(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {})) == AVAILABLE
        assert names(meal_filter.filter_dishes(sample_dishes, None)) == AVAILABLE
        assert names(meal_filter.filter_dishes(sample_dishes, FilterSpec())) == AVAILABLE

    def test_input_is_not_mutated(self, meal_filter, sample_dishes):
        before = list(sample_dishes)
        meal_filter.filter_dishes(sample_dishes, {"sort_by": "price"})
        assert sample_dishes == before

    def test_search_matches_name_description_category_and_eatery(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {"search_query": "manok"})) == [
            "Adobong Manok"
        ]
        assert names(meal_filter.filter_dishes(sample_dishes, {"search_query": " SOUP "})) == [
            "Sinigang na Baboy"
        ]
        assert names(meal_filter.filter_dishes(sample_dishes, {"search_query": "broth"})) == [
            "Sinigang na Baboy"
        ]
        assert names(meal_filter.filter_dishes(sample_dishes, {"search_query": "aling nena"})) == [
            "Adobong Manok", "Sinigang na Baboy"
        ]

    def test_blank_search_is_a_no_op(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {"search_query": "   "})) == AVAILABLE

    def test_calorie_bounds(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(
            sample_dishes, {"min_calories": 380, "max_calories": 450}
        )
        assert names(result) == ["Adobong Manok", "Sinigang na Baboy", "Pancit Canton"]

    def test_budget_bound(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"max_budget": 150})
        assert names(result) == [
            "Adobong Manok", "Sinigang na Baboy", "Ginisang Pechay", "Pancit Canton"
        ]

    def test_zero_bound_is_honoured(self, meal_filter, sample_dishes):
        assert meal_filter.filter_dishes(sample_dishes, {"max_budget": 0}) == []

    def test_category(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {"category": "Soup"})) == [
            "Sinigang na Baboy"
        ]
        assert names(meal_filter.filter_dishes(sample_dishes, {"category": "all"})) == AVAILABLE

    def test_spicy_level(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {"spicy_level": "mild"})) == [
            "Adobong Manok"
        ]

    def test_unavailable_dishes_are_always_dropped(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"is_vegetarian": True})
        assert names(result) == ["Ginisang Pechay"]

    def test_available_defaults_to_true(self, meal_filter):
        result = meal_filter.filter_dishes(
            [{"name": "Lugaw"}, {"name": "Arroz Caldo", "available": None}], {}
        )
        assert names(result) == ["Lugaw", "Arroz Caldo"]

    def test_false_flags_are_pass_through(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(
            sample_dishes, {"is_vegetarian": False, "is_vegan": False, "allergen_safe": False}
        )
        assert names(result) == AVAILABLE

    def test_vegan(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {"is_vegan": True})) == [
            "Ginisang Pechay"
        ]

    def test_allergen_safe_uses_profile(self, meal_filter, sample_dishes, peanut_profile):
        result = meal_filter.filter_dishes(sample_dishes, {"allergen_safe": True}, peanut_profile)
        assert "Kare-Kare" not in names(result)
        assert len(result) == len(AVAILABLE) - 1

    def test_allergen_safe_without_profile_is_a_no_op(self, meal_filter, sample_dishes):
        assert names(meal_filter.filter_dishes(sample_dishes, {"allergen_safe": True})) == AVAILABLE
        assert names(meal_filter.filter_dishes(sample_dishes, {"allergen_safe": True}, [])) == AVAILABLE

    def test_specific_allergens(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"specific_allergens": ["Shellfish"]})
        assert "Pancit Canton" not in names(result)

        result = meal_filter.filter_dishes(sample_dishes, {"specific_allergens": ["fish"]})
        assert "Sinigang na Baboy" not in names(result)

    def test_specific_allergen_alias(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"specific_allergens": ["nuts"]})
        assert names(result) == [
            "Adobong Manok", "Sinigang na Baboy", "Ginisang Pechay", "Pancit Canton"
        ]

    def test_specific_allergen_free_text(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"specific_allergens": ["kangkong"]})
        assert "Sinigang na Baboy" not in names(result)

    def test_distance_treats_missing_as_zero(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"max_distance": 1.0})
        assert names(result) == ["Adobong Manok", "Sinigang na Baboy", "Pancit Canton"]

    def test_stages_combine(self, meal_filter, sample_dishes, peanut_profile):
        result = meal_filter.filter_dishes(
            sample_dishes,
            {"category": "main", "allergen_safe": True, "max_budget": 200},
            peanut_profile
        )
        assert names(result) == ["Adobong Manok"]

    def test_rejects_bad_input(self, meal_filter, sample_dishes):
        with pytest.raises(TypeError):
            meal_filter.filter_dishes(None, {})
        with pytest.raises(TypeError):
            meal_filter.filter_dishes(["Adobo"], {})
        with pytest.raises(TypeError):
            meal_filter.filter_dishes(sample_dishes, "cheap")

    @pytest.mark.parametrize("spec", [{"max_budjet": 50}, {"maxBudget": 50}])
    def test_unknown_filter_keys_are_rejected(self, meal_filter, sample_dishes, spec):
        """A misspelled key must not silently widen the result."""
        with pytest.raises(ValueError):
            meal_filter.filter_dishes(sample_dishes, spec)


class TestSorting:
    """Stable sort with missing values as 0."""

    def test_price_ascending(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, {"sort_by": "price"})
        assert names(result) == [
            "Ginisang Pechay", "Adobong Manok", "Pancit Canton", "Sinigang na Baboy", "Kare-Kare"
        ]

    def test_rating_descending_with_missing_rating_last(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(
            sample_dishes, {"sort_by": "rating", "sort_order": "desc"}
        )
        assert names(result) == [
            "Kare-Kare", "Sinigang na Baboy", "Adobong Manok", "Ginisang Pechay", "Pancit Canton"
        ]

    def test_name_sort_is_case_insensitive(self, meal_filter):
        result = meal_filter.filter_dishes(
            [{"name": "lugaw"}, {"name": "Arroz Caldo"}, {"name": "Bulalo"}], {"sort_by": "name"}
        )
        assert names(result) == ["Arroz Caldo", "Bulalo", "lugaw"]

    @pytest.mark.parametrize("order", ["asc", "desc"])
    def test_ties_keep_input_order(self, meal_filter, order):
        dishes = [
            {"name": "Tapsilog", "price": 80},
            {"name": "Longsilog", "price": 80},
            {"name": "Tocilog", "price": 80},
        ]
        result = meal_filter.filter_dishes(dishes, {"sort_by": "price", "sort_order": order})
        assert names(result) == ["Tapsilog", "Longsilog", "Tocilog"]

    def test_unknown_sort_key(self, meal_filter, sample_dishes):
        with pytest.raises(ValueError):
            meal_filter.sort_dishes(sample_dishes, "spiciness")
        with pytest.raises(ValueError):
            meal_filter.filter_dishes(sample_dishes, {"sort_by": "spiciness"})


class TestPresetsAndStats:
    """Static presets and result summaries."""

    def test_preset_names(self):
        assert set(get_filter_presets()) == {
            "budget-friendly", "low-calorie", "high-protein",
            "allergen-safe", "vegetarian", "nearby",
        }

    def test_allergen_safe_preset(self):
        preset = get_filter_preset("allergen-safe")
        assert preset.allergen_safe is True
        assert preset.sort_by == "rating"
        assert preset.sort_order == "desc"

    def test_presets_are_fresh_copies(self):
        presets = get_filter_presets()
        presets["budget-friendly"].max_budget = 1
        assert get_filter_presets()["budget-friendly"].max_budget == 150

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            get_filter_preset("keto")

    def test_default_filters(self):
        defaults = get_default_filters()
        assert defaults.sort_by == "popularity"
        assert defaults.sort_order == "desc"
        assert defaults.max_budget is None

    def test_budget_preset(self, meal_filter, sample_dishes):
        result = meal_filter.filter_dishes(sample_dishes, get_filter_preset("budget-friendly"))
        assert names(result) == [
            "Ginisang Pechay", "Adobong Manok", "Pancit Canton", "Sinigang na Baboy"
        ]

    def test_filter_stats(self, meal_filter, sample_dishes):
        filtered = meal_filter.filter_dishes(sample_dishes, {"max_budget": 150})
        stats = meal_filter.get_filter_stats(sample_dishes, filtered)
        assert stats.total_meals == 6
        assert stats.filtered_meals == 4
        assert stats.average_calories == 345
        assert stats.average_price == pytest.approx(100.0)
        assert stats.safe_for_user == 4

    def test_filter_stats_counts_safe_dishes(self, meal_filter, sample_dishes):
        filtered = meal_filter.filter_dishes(sample_dishes, {"max_budget": 150})
        stats = meal_filter.get_filter_stats(
            sample_dishes, filtered, [{"name": "Shellfish", "severity": "severe"}]
        )
        assert stats.safe_for_user == 3

    def test_filter_stats_of_empty_result(self, meal_filter, sample_dishes):
        stats = meal_filter.get_filter_stats(sample_dishes, [])
        assert stats.filtered_meals == 0
        assert stats.average_calories == 0
        assert stats.average_price == 0
