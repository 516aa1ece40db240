"""
Lexicon store.

This module holds the two read-only lookup tables the engine matches
against:

1. Allergen table - one AllergenDefinition per allergen, whose keyword
   set merges English and Filipino terms (e.g. "Fish" covers both
   "fish sauce" and "bagoong").
2. Nutrition table - per-100g NutritionRecord keyed by ingredient name.

Tables are built once from the embedded constants and never mutated, so
a single store can be shared by every service (and every thread).

Lookups never fail: unknown text yields an empty allergen list or the
default "trace food" nutrition record.
"""

import logging
from typing import Dict, List, Optional

from karenderia_engine.config import settings
from karenderia_engine.models.allergen import AllergenDefinition, Severity
from karenderia_engine.models.nutrition import NutritionRecord
from karenderia_engine.utils.constants import (
    ALLERGEN_LEXICON,
    DEFAULT_NUTRITION,
    NUTRITION_DATABASE,
)
from karenderia_engine.utils.helpers import keyword_matches, normalize_ingredient_text

# Configure logging
logger = logging.getLogger(__name__)


def build_allergen_table(lexicon: Dict[str, Dict] = ALLERGEN_LEXICON) -> List[AllergenDefinition]:
    """
    Build AllergenDefinitions from the raw lexicon constants.

    The canonical name itself is always added to the keyword set.
    """
    table = []
    for canonical_name, entry in lexicon.items():
        table.append(AllergenDefinition(
            canonical_name=canonical_name,
            severity_default=Severity(entry["severity"]),
            keywords=[canonical_name] + list(entry.get("keywords", [])),
            alternatives=list(entry.get("alternatives", [])),
            description=entry.get("description", ""),
            aliases=list(entry.get("aliases", [])),
        ))
    return table


def build_nutrition_table(
    database: Dict[str, Dict[str, float]] = NUTRITION_DATABASE
) -> Dict[str, NutritionRecord]:
    """Build NutritionRecords keyed by lowercase ingredient name."""
    return {
        key.strip().lower(): NutritionRecord(**values)
        for key, values in database.items()
    }


class LexiconStore:
    """
    Read-only allergen and nutrition lexicon.

    Attributes:
        allergen_table: AllergenDefinitions in lexicon order
        nutrition_table: Ingredient key -> per-100g NutritionRecord
        default_nutrition: Record returned for unknown ingredients
        reverse_min_length: Minimum text length for text-in-keyword matches
    """

    def __init__(
        self,
        allergen_table: Optional[List[AllergenDefinition]] = None,
        nutrition_table: Optional[Dict[str, NutritionRecord]] = None,
        default_nutrition: Optional[NutritionRecord] = None,
        reverse_min_length: Optional[int] = None
    ):
        """
        Initialize the store, defaulting to the embedded lexicon.

        Args:
            allergen_table: Custom allergen definitions (tests, new lexicon versions)
            nutrition_table: Custom nutrition table
            default_nutrition: Custom fallback record
            reverse_min_length: Override for settings.REVERSE_MATCH_MIN_LENGTH
        """
        self.allergen_table = tuple(
            allergen_table if allergen_table is not None else build_allergen_table()
        )
        self.nutrition_table = dict(
            nutrition_table if nutrition_table is not None else build_nutrition_table()
        )
        self.default_nutrition = default_nutrition or NutritionRecord(**DEFAULT_NUTRITION)
        self.reverse_min_length = (
            reverse_min_length
            if reverse_min_length is not None
            else settings.REVERSE_MATCH_MIN_LENGTH
        )

        self._by_name = {
            definition.canonical_name.lower(): definition
            for definition in self.allergen_table
        }

        logger.info(
            f"LexiconStore initialized with {len(self.allergen_table)} allergen "
            f"categories and {len(self.nutrition_table)} nutrition records"
        )

    def lookup_allergens(self, ingredient_text: str) -> List[AllergenDefinition]:
        """
        Find every allergen an ingredient may trigger.

        A definition matches when any of its keywords is contained in the
        text, when the text is contained in one of its keywords, or when
        its canonical name appears in the text. One ingredient can match
        several allergens (e.g. "lecithin" -> Eggs and Soy).

        Args:
            ingredient_text: Raw or normalized ingredient string

        Returns:
            List[AllergenDefinition]: Matches in lexicon order (may be empty)

        Example:
            store.lookup_allergens("Peanut Sauce")
            # Returns: [<Peanuts>]
        """
        normalized = normalize_ingredient_text(ingredient_text)
        if not normalized:
            return []

        matches = []
        for definition in self.allergen_table:
            if self.definition_matches(definition, normalized):
                matches.append(definition)
                logger.debug(
                    f"'{normalized}' matched allergen {definition.canonical_name}"
                )

        return matches

    def definition_matches(self, definition: AllergenDefinition, normalized_text: str) -> bool:
        """Check one normalized ingredient against one allergen definition."""
        if definition.canonical_name.lower() in normalized_text:
            return True

        return any(
            keyword_matches(keyword, normalized_text, self.reverse_min_length)
            for keyword in definition.keywords
        )

    def lookup_nutrition(self, ingredient_text: str) -> NutritionRecord:
        """
        Find the per-100g nutrition record for an ingredient.

        Tries an exact key match, then the first bidirectional partial
        match in table order, then falls back to the default estimate.

        Args:
            ingredient_text: Raw or normalized ingredient string

        Returns:
            NutritionRecord: Matching or default record (never None)
        """
        normalized = normalize_ingredient_text(ingredient_text)

        if normalized in self.nutrition_table:
            return self.nutrition_table[normalized]

        if normalized:
            for key, record in self.nutrition_table.items():
                if keyword_matches(key, normalized, self.reverse_min_length):
                    logger.debug(f"Nutrition for '{normalized}' taken from '{key}'")
                    return record

        logger.debug(f"No nutrition data for '{normalized}', using default estimate")
        return self.default_nutrition

    def get_definition(self, name: str) -> Optional[AllergenDefinition]:
        """
        Look up an allergen by canonical name (case-insensitive).

        Returns:
            Optional[AllergenDefinition]: The definition, or None if unknown
        """
        if not name:
            return None
        return self._by_name.get(name.strip().lower())

    def resolve_allergen_name(self, name: str) -> List[AllergenDefinition]:
        """
        Resolve a free-text allergen name to definitions.

        Matches canonical names first, then aliases. An alias such as
        "nuts" can resolve to more than one allergen.

        Returns:
            List[AllergenDefinition]: Matching definitions (may be empty)
        """
        definition = self.get_definition(name)
        if definition is not None:
            return [definition]

        needle = normalize_ingredient_text(name)
        if not needle:
            return []

        return [
            definition for definition in self.allergen_table
            if needle in definition.aliases
        ]

    def allergen_names(self) -> List[str]:
        """Canonical allergen names in lexicon order."""
        return [definition.canonical_name for definition in self.allergen_table]

    def get_statistics(self) -> Dict:
        """
        Get statistics about the lexicon.

        Returns:
            Dict: Allergen category count, keyword count, severity
                  distribution, and nutrition table size
        """
        severity_counts = {severity.value: 0 for severity in Severity}
        for definition in self.allergen_table:
            severity_counts[definition.severity_default.value] += 1

        return {
            "total_allergen_categories": len(self.allergen_table),
            "total_keywords": sum(len(d.keywords) for d in self.allergen_table),
            "severity_distribution": severity_counts,
            "categories": self.allergen_names(),
            "total_nutrition_records": len(self.nutrition_table)
        }
