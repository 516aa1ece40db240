"""
Pydantic models for allergen data.

This module defines the allergen lexicon entry, the user's declared
allergen profile entries, and the safety verdicts produced by the
allergen safety evaluator.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator

from karenderia_engine.config import settings


class Severity(str, Enum):
    """Ordinal risk ranking for an allergen."""
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class RiskLevel(str, Enum):
    """Aggregate risk for a dish evaluated against one user profile."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AllergenDefinition(BaseModel):
    """
    Lexicon entry for one allergen.

    Attributes:
        canonical_name: Unique allergen name (e.g., "Peanuts")
        severity_default: Severity used when building a profile entry from
            a catalog pick
        keywords: Lowercase keywords, English and Filipino, matched as substrings
        alternatives: Suggested substitute ingredients, in preference order
        description: Human-readable description
        aliases: Free-text names that also refer to this allergen
    """
    canonical_name: str = Field(..., min_length=1, description="Unique allergen name")
    severity_default: Severity = Field(..., description="Default severity")
    keywords: List[str] = Field(default_factory=list, description="Matching keywords")
    alternatives: List[str] = Field(default_factory=list, description="Substitute suggestions")
    description: str = Field("", description="Allergen description")
    aliases: List[str] = Field(default_factory=list, description="Alternative names")

    @field_validator('keywords', 'aliases')
    @classmethod
    def normalize_terms(cls, v: List[str]) -> List[str]:
        """Lowercase, trim, and dedupe terms, keeping their order."""
        seen = set()
        terms = []
        for term in v:
            term = term.strip().lower()
            if term and term not in seen:
                seen.add(term)
                terms.append(term)
        return terms

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "canonical_name": "Peanuts",
                "severity_default": "severe",
                "keywords": ["peanut", "peanut butter", "mani", "kare-kare"],
                "alternatives": ["sunflower seeds", "pumpkin seeds"],
                "description": "High risk allergen, can cause anaphylaxis",
                "aliases": ["nuts"]
            }
        }
    }


class UserAllergenEntry(BaseModel):
    """
    One allergen declared in a user's profile.

    Severity is kept as a plain lowercase string: unrecognized values are
    accepted here and reported with generic wording at evaluation time.

    Attributes:
        name: Allergen name, matched case-insensitively to a canonical name
        severity: mild, moderate, or severe (user-specific)
    """
    name: str = Field(..., description="Declared allergen name")
    severity: str = Field(
        default_factory=lambda: settings.DEFAULT_USER_SEVERITY,
        description="User-declared severity"
    )

    @field_validator('severity', mode='before')
    @classmethod
    def normalize_severity(cls, v) -> str:
        """Lowercase the severity; a blank value falls back to the default."""
        if isinstance(v, Severity):
            return v.value
        if v is None or not str(v).strip():
            return settings.DEFAULT_USER_SEVERITY
        return str(v).strip().lower()

    @classmethod
    def from_definition(cls, definition: AllergenDefinition) -> "UserAllergenEntry":
        """Build an entry from a catalog pick, using the lexicon's default severity."""
        return cls(
            name=definition.canonical_name,
            severity=definition.severity_default.value
        )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {"name": "Peanuts", "severity": "severe"}
        }
    }


class AllergenWarning(BaseModel):
    """
    Warning raised when a dish contains one of the user's allergens.

    Attributes:
        allergen: Canonical allergen name
        severity: The user's declared severity
        found_in: Dish ingredients that matched, in dish order
        message: Display message worded by severity tier
    """
    allergen: str = Field(..., description="Canonical allergen name")
    severity: str = Field(..., description="User-declared severity")
    found_in: List[str] = Field(default_factory=list, description="Matching ingredients")
    message: str = Field(..., description="Display message")


class DishSafetyAnalysis(BaseModel):
    """
    Safety verdict for a dish evaluated against one user profile.

    Attributes:
        is_safe: True when no warning was raised
        warnings: One warning per triggered allergen, in profile order
        risk_level: Highest severity seen (severe -> high, moderate -> medium)
        safe_alternatives: Deduped suggestions for the triggered allergens
    """
    is_safe: bool = Field(..., description="No allergen warnings")
    warnings: List[AllergenWarning] = Field(default_factory=list)
    risk_level: RiskLevel = Field(RiskLevel.LOW, description="Aggregate risk level")
    safe_alternatives: List[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "example": {
                "is_safe": False,
                "warnings": [{
                    "allergen": "Peanuts",
                    "severity": "severe",
                    "found_in": ["peanut sauce"],
                    "message": "DANGER: Peanuts detected in \"Kare-Kare\"! ..."
                }],
                "risk_level": "high",
                "safe_alternatives": [
                    "Ask for nut-free preparation and separate cooking surfaces"
                ]
            }
        }
    }


class MenuItemAllergenCheck(BaseModel):
    """
    Compact allergen check for a single menu item, used for menu badges.

    Attributes:
        has_allergens: True when any warning was raised
        warnings: Warnings from declared labels and ingredient scan
        safety_level: safe, caution, or danger
        conflicting_ingredients: Deduped ingredients that matched
    """
    has_allergens: bool = False
    warnings: List[AllergenWarning] = Field(default_factory=list)
    safety_level: str = Field("safe", description="safe / caution / danger")
    conflicting_ingredients: List[str] = Field(default_factory=list)
