"""
Test the top-level engine: service wiring and the cached user profile.
"""
import threading

import pytest

from karenderia_engine.models.allergen import RiskLevel, UserAllergenEntry


def names(dishes):
    return [dish.name for dish in dishes]


class TestProfileCache:
    """update_user_allergens and the calls that fall back to it."""

    def test_cache_starts_empty(self, engine):
        assert engine.current_user_allergens() == []
        assert engine.evaluate_safety(["peanut sauce"]).is_safe is True

    def test_cached_profile_is_used_when_omitted(self, engine):
        engine.update_user_allergens([{"name": "Peanuts", "severity": "severe"}])
        result = engine.evaluate_safety(["chicken", "peanut sauce"])
        assert result.is_safe is False
        assert result.risk_level == RiskLevel.HIGH

    def test_explicit_profile_overrides_cache(self, engine):
        engine.update_user_allergens([{"name": "Peanuts", "severity": "severe"}])
        assert engine.evaluate_safety(["peanut sauce"], []).is_safe is True

    def test_update_replaces_snapshot(self, engine):
        engine.update_user_allergens([{"name": "Peanuts"}])
        engine.update_user_allergens([{"name": "Fish", "severity": "mild"}])
        assert [e.name for e in engine.current_user_allergens()] == ["Fish"]
        engine.update_user_allergens(None)
        assert engine.current_user_allergens() == []

    def test_returned_profile_is_a_copy(self, engine):
        engine.update_user_allergens([{"name": "Peanuts"}])
        engine.current_user_allergens().clear()
        assert len(engine.current_user_allergens()) == 1

    def test_has_allergen_and_severity(self, engine):
        engine.update_user_allergens([UserAllergenEntry(name="Shellfish", severity="severe")])
        assert engine.has_allergen("shellfish")
        assert not engine.has_allergen("Peanuts")
        assert engine.get_allergen_severity("Shellfish") == "severe"
        assert engine.get_allergen_severity("Peanuts") is None

    def test_missing_severity_uses_default(self, engine):
        engine.update_user_allergens([{"name": "Fish"}])
        assert engine.get_allergen_severity("Fish") == "moderate"

    def test_from_catalog_pick_uses_lexicon_severity(self, engine, lexicon):
        engine.update_user_allergens([UserAllergenEntry.from_definition(lexicon.get_definition("Wheat"))])
        assert engine.get_allergen_severity("Wheat") == "severe"

    def test_concurrent_updates_leave_a_complete_snapshot(self, engine):
        profiles = [
            [{"name": "Peanuts"}, {"name": "Fish"}],
            [{"name": "Dairy"}, {"name": "Eggs"}],
        ]
        threads = [
            threading.Thread(target=engine.update_user_allergens, args=(profiles[i % 2],))
            for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        cached = [e.name for e in engine.current_user_allergens()]
        assert cached in (["Peanuts", "Fish"], ["Dairy", "Eggs"])


class TestEngineOperations:
    """The entry points delegate to the shared-lexicon services."""

    def test_analyze_ingredient_is_idempotent(self, engine):
        assert engine.analyze_ingredient("peanut sauce") == engine.analyze_ingredient("peanut sauce")

    def test_analyze_dish_and_label(self, engine):
        result = engine.analyze_dish(["chicken"], 100)
        label = engine.get_nutrition_label(result.total_nutrition)
        assert label["Calories"] == "1650"
        assert label["Protein"] == "310.0g"

    def test_batch_evaluate_uses_cache(self, engine):
        engine.update_user_allergens([{"name": "Fish", "severity": "moderate"}])
        results = engine.batch_evaluate([
            {"name": "Sinigang na Baboy", "ingredients": ["pork", "kangkong", "fish sauce"]},
            {"name": "Adobong Manok", "ingredients": ["chicken", "vinegar"]},
        ])
        assert [r.analysis.risk_level for r in results] == [RiskLevel.MEDIUM, RiskLevel.LOW]

    def test_get_allergen_alternatives(self, engine):
        assert "Wheat" in engine.get_allergen_alternatives(["pandesal"])

    def test_check_menu_item_accepts_dict(self, engine):
        engine.update_user_allergens([{"name": "Peanuts", "severity": "severe"}])
        check = engine.check_menu_item({"name": "Kare-Kare", "ingredients": ["peanut sauce"]})
        assert check.safety_level == "danger"

    def test_allergen_safe_preset_matches_evaluate_safety(self, engine, sample_dishes):
        engine.update_user_allergens([
            {"name": "Peanuts", "severity": "severe"},
            {"name": "Shellfish", "severity": "moderate"},
        ])
        result = engine.apply_preset(sample_dishes, "allergen-safe")

        expected = {
            dish.name for dish in sample_dishes
            if dish.available and engine.evaluate_safety(dish.scan_ingredients).is_safe
        }
        assert set(names(result)) == expected
        assert expected == {"Adobong Manok", "Sinigang na Baboy", "Ginisang Pechay"}

    def test_filter_dishes_with_cache(self, engine, sample_dishes):
        engine.update_user_allergens([{"name": "Peanuts", "severity": "severe"}])
        result = engine.filter_dishes(sample_dishes, {"allergen_safe": True, "sort_by": "price"})
        assert names(result) == [
            "Ginisang Pechay", "Adobong Manok", "Pancit Canton", "Sinigang na Baboy"
        ]

    def test_unknown_preset(self, engine, sample_dishes):
        with pytest.raises(KeyError):
            engine.apply_preset(sample_dishes, "keto")

    def test_filter_stats_use_cache(self, engine, sample_dishes):
        engine.update_user_allergens([{"name": "Peanuts", "severity": "severe"}])
        stats = engine.get_filter_stats(sample_dishes, sample_dishes)
        assert stats.safe_for_user == 5
