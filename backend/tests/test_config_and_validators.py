"""
Test settings validation and input validators.
"""
import math

import pytest
from pydantic import ValidationError

from karenderia_engine.config import Settings, settings
from karenderia_engine.models.allergen import UserAllergenEntry
from karenderia_engine.models.nutrition import NutritionRecord
from karenderia_engine.utils.helpers import format_nutrition_value, round_half_up
from karenderia_engine.utils.validators import (
    clamp_portion_weight,
    validate_ingredient_list,
    validate_servings,
)


class TestSettings:
    """Environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        for key in ("PORTION_SCALE_FACTOR", "MIN_PORTION_WEIGHT", "MAX_PORTION_WEIGHT", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)
        fresh = Settings()
        assert fresh.PORTION_SCALE_FACTOR == pytest.approx(0.1)
        assert fresh.MIN_PORTION_WEIGHT == pytest.approx(1.0)
        assert fresh.MAX_PORTION_WEIGHT == pytest.approx(10000.0)
        assert fresh.LOG_LEVEL == "INFO"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("REVERSE_MATCH_MIN_LENGTH", "5")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("DEFAULT_USER_SEVERITY", " Severe ")
        fresh = Settings()
        assert fresh.REVERSE_MATCH_MIN_LENGTH == 5
        assert fresh.LOG_LEVEL == "DEBUG"
        assert fresh.DEFAULT_USER_SEVERITY == "severe"

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="verbose")
        with pytest.raises(ValidationError):
            Settings(DEFAULT_USER_SEVERITY="extreme")
        with pytest.raises(ValidationError):
            Settings(PORTION_SCALE_FACTOR=0)


class TestValidators:
    """Contract checks raise; bad data is tolerated."""

    def test_ingredient_list(self):
        assert validate_ingredient_list([]) == []
        assert validate_ingredient_list(("rice", "egg")) == ["rice", "egg"]
        for bad in (None, "rice", {"rice"}, ["rice", None]):
            with pytest.raises(TypeError):
                validate_ingredient_list(bad)

    def test_clamp_portion_weight(self):
        assert clamp_portion_weight(250) == 250.0
        assert clamp_portion_weight(0) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(-3.5) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(None) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(math.nan) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(math.inf) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(-math.inf) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(10 ** 400) == settings.MIN_PORTION_WEIGHT
        assert clamp_portion_weight(1e308) == settings.MAX_PORTION_WEIGHT
        assert clamp_portion_weight(settings.MAX_PORTION_WEIGHT) == settings.MAX_PORTION_WEIGHT
        with pytest.raises(TypeError):
            clamp_portion_weight("300g")
        with pytest.raises(TypeError):
            clamp_portion_weight(True)

    def test_servings(self):
        assert validate_servings(4) == 4.0
        for bad in (0, -1, math.nan, math.inf, 10 ** 400, "4", False):
            with pytest.raises(ValueError):
                validate_servings(bad)


class TestModelsAndHelpers:
    """Model constraints and numeric helpers."""

    def test_negative_nutrition_is_rejected(self):
        with pytest.raises(ValidationError):
            NutritionRecord(calories=-1)

    def test_nutrition_arithmetic(self):
        total = NutritionRecord(calories=100, protein=10) + NutritionRecord(calories=50).scaled(2)
        assert total.calories == 200
        assert total.protein == 10
        assert list(total.to_dict())[0] == "calories"

    def test_user_entry_severity_normalization(self):
        assert UserAllergenEntry(name="Soy", severity="MILD").severity == "mild"
        assert UserAllergenEntry(name="Soy", severity=None).severity == settings.DEFAULT_USER_SEVERITY
        assert UserAllergenEntry(name="Soy").severity == settings.DEFAULT_USER_SEVERITY

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(7) == 7

    def test_format_nutrition_value(self):
        assert format_nutrition_value(25.55, "g") == "25.6g"
        assert format_nutrition_value(12.4, "%", 0) == "12%"
