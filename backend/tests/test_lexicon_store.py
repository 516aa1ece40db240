"""
Test the lexicon store: allergen keyword lookup and nutrition lookup.
"""
import pytest

from karenderia_engine.models.allergen import AllergenDefinition, Severity
from karenderia_engine.models.nutrition import NutritionRecord
from karenderia_engine.services.lexicon_store import LexiconStore
from karenderia_engine.utils.helpers import keyword_matches


class TestAllergenLookup:
    """Keyword matching between ingredient text and allergen definitions."""

    def test_english_keyword_matches(self, lexicon):
        matches = lexicon.lookup_allergens("Peanut Sauce")
        assert [m.canonical_name for m in matches] == ["Peanuts"]

    def test_filipino_keyword_matches(self, lexicon):
        """Filipino terms live in the same keyword set as English ones."""
        assert [m.canonical_name for m in lexicon.lookup_allergens("bagoong")] == ["Fish"]
        assert [m.canonical_name for m in lexicon.lookup_allergens("itlog")] == ["Eggs"]
        assert [m.canonical_name for m in lexicon.lookup_allergens("toyo")] == ["Soy"]

    def test_one_ingredient_can_match_several_allergens(self, lexicon):
        names = [m.canonical_name for m in lexicon.lookup_allergens("lecithin")]
        assert names == ["Eggs", "Soy"], "lecithin should trigger both Eggs and Soy, in lexicon order"

    def test_text_contained_in_keyword_matches(self, lexicon):
        """'brazil' is contained in the keyword 'brazil nut'."""
        names = [m.canonical_name for m in lexicon.lookup_allergens("brazil")]
        assert names == ["Tree Nuts"]

    def test_short_text_does_not_match_inside_keywords(self, lexicon):
        assert lexicon.lookup_allergens("nu") == []

    def test_canonical_name_matches(self, lexicon):
        names = [m.canonical_name for m in lexicon.lookup_allergens("mustard")]
        assert "Mustard" in names

    def test_unknown_and_empty_text_match_nothing(self, lexicon):
        assert lexicon.lookup_allergens("chicken") == []
        assert lexicon.lookup_allergens("") == []
        assert lexicon.lookup_allergens("   ") == []

    def test_keyword_matches_respects_reverse_min_length(self):
        assert keyword_matches("peanut", "peanut sauce")
        assert keyword_matches("brazil nut", "brazil")
        assert not keyword_matches("peanut", "pe")
        assert keyword_matches("peanut", "pe", reverse_min_length=2)
        assert not keyword_matches("", "peanut")


class TestNutritionLookup:
    """Exact, partial, and default nutrition lookups."""

    def test_exact_match(self, lexicon):
        record = lexicon.lookup_nutrition("Chicken")
        assert record.calories == 165
        assert record.protein == 31

    def test_partial_match(self, lexicon):
        assert lexicon.lookup_nutrition("chicken breast").calories == 165

    def test_more_specific_key_wins(self, lexicon):
        assert lexicon.lookup_nutrition("peanut butter").calories == 588

    def test_unknown_ingredient_gets_default(self, lexicon):
        record = lexicon.lookup_nutrition("quinoa")
        assert record == lexicon.default_nutrition
        assert record.calories == 20, "unknown ingredients must not be reported as calorie-free"

    def test_empty_text_gets_default(self, lexicon):
        assert lexicon.lookup_nutrition("") == lexicon.default_nutrition


class TestDefinitions:
    """Name resolution and store statistics."""

    def test_get_definition_is_case_insensitive(self, lexicon):
        definition = lexicon.get_definition("  peanuts ")
        assert definition is not None
        assert definition.canonical_name == "Peanuts"
        assert definition.severity_default == Severity.SEVERE

    def test_get_definition_unknown(self, lexicon):
        assert lexicon.get_definition("Kiwi") is None
        assert lexicon.get_definition("") is None

    def test_canonical_name_is_a_keyword(self, lexicon):
        assert "fish" in lexicon.get_definition("Fish").keywords

    def test_resolve_alias_to_several_allergens(self, lexicon):
        resolved = [d.canonical_name for d in lexicon.resolve_allergen_name("nuts")]
        assert resolved == ["Peanuts", "Tree Nuts"]

    def test_resolve_prefers_canonical_name(self, lexicon):
        resolved = [d.canonical_name for d in lexicon.resolve_allergen_name("Shellfish")]
        assert resolved == ["Shellfish"]

    def test_statistics(self, lexicon):
        stats = lexicon.get_statistics()
        assert stats["total_allergen_categories"] == 10
        assert stats["categories"][0] == "Peanuts"
        assert sum(stats["severity_distribution"].values()) == 10
        assert stats["total_nutrition_records"] == len(lexicon.nutrition_table)

    def test_custom_tables(self):
        """A store can be built from custom tables (e.g. a new lexicon version)."""
        store = LexiconStore(
            allergen_table=[AllergenDefinition(
                canonical_name="Kiwi",
                severity_default="mild",
                keywords=["Kiwi", "kiwifruit"]
            )],
            nutrition_table={"kiwi": NutritionRecord(calories=61)},
        )
        assert [d.canonical_name for d in store.lookup_allergens("sliced kiwifruit")] == ["Kiwi"]
        assert store.lookup_nutrition("kiwi").calories == 61
        assert store.lookup_allergens("peanut") == []

    def test_definition_terms_are_normalized(self):
        definition = AllergenDefinition(
            canonical_name="Kiwi",
            severity_default="mild",
            keywords=[" Kiwi", "kiwi", "KIWIFRUIT", ""]
        )
        assert definition.keywords == ["kiwi", "kiwifruit"]

    def test_definition_rejects_unknown_severity(self):
        with pytest.raises(ValueError):
            AllergenDefinition(canonical_name="Kiwi", severity_default="extreme")
