"""
Allergen safety evaluation service.

This module cross-references a dish's ingredients against one user's
declared allergens (name + severity) and produces a safety verdict:
per-allergen warnings, an overall risk level, and alternative
suggestions.

Matching rules:
- Each profile entry is resolved to a lexicon allergen by canonical
  name (case-insensitive). Its keyword set already merges English and
  Filipino terms, so "bagoong" triggers Fish and "mani" triggers Peanuts.
- An ingredient matches when a keyword is contained in it or it is
  contained in a keyword (case-insensitive).
- The user's declared severity always wins over the lexicon default.
- Entries with no lexicon allergen are skipped: they never warn and
  never raise.

Note: keyword matching is a simplified substring approach. It can over-
match (e.g. "eggplant" contains "egg"), which errs on the side of
warning the user.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from karenderia_engine.models.allergen import (
    AllergenWarning,
    DishSafetyAnalysis,
    MenuItemAllergenCheck,
    RiskLevel,
    Severity,
    UserAllergenEntry,
)
from karenderia_engine.models.dish import Dish, DishSafetyResult
from karenderia_engine.services.ingredient_analyzer import IngredientAnalyzer
from karenderia_engine.services.lexicon_store import LexiconStore
from karenderia_engine.utils.constants import SAFE_ALTERNATIVE_RULES
from karenderia_engine.utils.helpers import (
    dedupe_preserving_order,
    keyword_matches,
    normalize_ingredient_text,
)
from karenderia_engine.utils.validators import validate_ingredient_list

# Configure logging
logger = logging.getLogger(__name__)


def coerce_user_allergens(user_allergens: Optional[Iterable[Any]]) -> List[UserAllergenEntry]:
    """
    Accept profile snapshots as UserAllergenEntry objects or plain dicts.

    None is treated as an empty profile.

    Raises:
        TypeError: If an entry is neither a UserAllergenEntry nor a dict
    """
    if user_allergens is None:
        return []

    entries = []
    for i, entry in enumerate(user_allergens):
        if isinstance(entry, UserAllergenEntry):
            entries.append(entry)
        elif isinstance(entry, dict):
            entries.append(UserAllergenEntry.model_validate(entry))
        else:
            raise TypeError(
                f"User allergen at index {i} must be a UserAllergenEntry or dict, "
                f"got {type(entry).__name__}"
            )
    return entries


def build_warning_message(
    allergen: str,
    severity: str,
    found_in: List[str],
    dish_name: Optional[str] = None
) -> str:
    """
    Word a warning by severity tier.

    severe -> DANGER, moderate -> WARNING, mild -> NOTICE, anything else
    gets a neutral "detected" message.

    Example:
        >>> build_warning_message("Peanuts", "severe", ["peanut sauce"], "Kare-Kare")
        'DANGER: Peanuts detected in "Kare-Kare"! Found in: peanut sauce. ...'
    """
    dish_text = f' in "{dish_name}"' if dish_name else ""
    ingredient_list = ", ".join(found_in)

    if severity == Severity.SEVERE.value:
        return (
            f"DANGER: {allergen} detected{dish_text}! Found in: {ingredient_list}. "
            f"This could cause a severe allergic reaction."
        )
    if severity == Severity.MODERATE.value:
        return (
            f"WARNING: {allergen} detected{dish_text}. Found in: {ingredient_list}. "
            f"Please avoid if you have allergies."
        )
    if severity == Severity.MILD.value:
        return (
            f"NOTICE: {allergen} detected{dish_text}. Found in: {ingredient_list}. "
            f"Monitor for mild reactions."
        )
    return f"{allergen} detected{dish_text}. Found in: {ingredient_list}."


def get_safe_alternatives(allergen_names: Iterable[str]) -> List[str]:
    """
    Suggest alternatives for the triggered allergen groups.

    Suggestions are keyed by allergen group, not by ingredient, and come
    back in the fixed rule order without duplicates.
    """
    triggered = set(allergen_names)
    suggestions = [
        suggestion for allergens, suggestion in SAFE_ALTERNATIVE_RULES
        if triggered.intersection(allergens)
    ]
    return dedupe_preserving_order(suggestions)


class AllergenSafetyEvaluator:
    """
    Service class evaluating dishes against a user's allergen profile.

    Holds no user state: every call receives the profile snapshot
    explicitly.

    Attributes:
        lexicon: Shared read-only LexiconStore
        ingredient_analyzer: Used for per-ingredient alternative lookups
    """

    def __init__(
        self,
        lexicon: Optional[LexiconStore] = None,
        ingredient_analyzer: Optional[IngredientAnalyzer] = None
    ):
        """Initialize the evaluator with a lexicon (embedded lexicon by default)."""
        self.lexicon = lexicon or LexiconStore()
        self.ingredient_analyzer = ingredient_analyzer or IngredientAnalyzer(self.lexicon)

        logger.info("AllergenSafetyEvaluator initialized")

    def evaluate_safety(
        self,
        ingredients: List[str],
        user_allergens: Optional[Iterable[Any]],
        dish_name: Optional[str] = None
    ) -> DishSafetyAnalysis:
        """
        Evaluate one dish against a user's declared allergens.

        Warnings follow the profile's order. Risk level is the highest
        declared severity among triggered allergens: any severe -> high,
        otherwise any moderate -> medium, otherwise low. Mild-only or
        unrecognized severities leave the risk low but still mark the
        dish unsafe.

        Args:
            ingredients: Dish ingredient strings
            user_allergens: Profile snapshot (UserAllergenEntry or dicts)
            dish_name: Optional name used in warning messages

        Returns:
            DishSafetyAnalysis: Verdict, warnings, risk level, alternatives

        Raises:
            TypeError: If ingredients is not a list of strings

        Example:
            evaluator.evaluate_safety(
                ["oxtail", "peanut sauce", "eggplant", "string beans"],
                [UserAllergenEntry(name="Peanuts", severity="severe")],
                "Kare-Kare"
            )
            # is_safe=False, risk_level="high", found_in=["peanut sauce"]
        """
        ingredients = validate_ingredient_list(ingredients)
        entries = coerce_user_allergens(user_allergens)

        warnings: List[AllergenWarning] = []
        risk_level = RiskLevel.LOW

        for entry in entries:
            definition = self.lexicon.get_definition(entry.name)
            if definition is None:
                logger.debug(
                    f"Allergen '{entry.name}' has no lexicon entry, skipping"
                )
                continue

            found_in = self.find_allergen_in_ingredients(definition.keywords, ingredients)
            if not found_in:
                continue

            warnings.append(AllergenWarning(
                allergen=definition.canonical_name,
                severity=entry.severity,
                found_in=found_in,
                message=build_warning_message(
                    definition.canonical_name, entry.severity, found_in, dish_name
                )
            ))

            if entry.severity == Severity.SEVERE.value:
                risk_level = RiskLevel.HIGH
            elif entry.severity == Severity.MODERATE.value and risk_level != RiskLevel.HIGH:
                risk_level = RiskLevel.MEDIUM

            logger.debug(
                f"{definition.canonical_name} ({entry.severity}) found in {found_in}"
            )

        return DishSafetyAnalysis(
            is_safe=not warnings,
            warnings=warnings,
            risk_level=risk_level,
            safe_alternatives=get_safe_alternatives(w.allergen for w in warnings)
        )

    def find_allergen_in_ingredients(
        self,
        keywords: Iterable[str],
        ingredients: List[str]
    ) -> List[str]:
        """
        Return the ingredients that match any keyword, in dish order.

        Each ingredient appears at most once even if several keywords match.
        """
        keywords = list(keywords)
        found = []

        for ingredient in ingredients:
            normalized = normalize_ingredient_text(ingredient)
            if any(
                keyword_matches(keyword, normalized, self.lexicon.reverse_min_length)
                for keyword in keywords
            ):
                found.append(ingredient)

        return found

    def batch_evaluate(
        self,
        dishes: Iterable[Any],
        user_allergens: Optional[Iterable[Any]]
    ) -> List[DishSafetyResult]:
        """
        Evaluate several dishes against the same profile.

        Args:
            dishes: Dish models or dicts with "name" and "ingredients"
            user_allergens: Profile snapshot

        Returns:
            List[DishSafetyResult]: One result per dish, in input order
        """
        entries = coerce_user_allergens(user_allergens)
        results = []

        for dish in dishes:
            name, ingredients = _dish_name_and_ingredients(dish)
            results.append(DishSafetyResult(
                name=name,
                analysis=self.evaluate_safety(ingredients, entries, name)
            ))

        logger.info(f"Batch evaluated {len(results)} dish(es)")
        return results

    def get_safe_dish_recommendations(
        self,
        dishes: Iterable[Any],
        user_allergens: Optional[Iterable[Any]]
    ) -> List[Any]:
        """Return the dishes (unchanged objects) that are safe for the profile."""
        entries = coerce_user_allergens(user_allergens)
        safe = []

        for dish in dishes:
            name, ingredients = _dish_name_and_ingredients(dish)
            if self.evaluate_safety(ingredients, entries, name).is_safe:
                safe.append(dish)

        return safe

    def get_allergen_alternatives(self, ingredients: List[str]) -> Dict[str, List[str]]:
        """
        Collect substitute suggestions for every allergen in a dish.

        Args:
            ingredients: Dish ingredient strings

        Returns:
            Dict[str, List[str]]: Canonical allergen name -> deduped
                alternatives, in order of first appearance
        """
        alternatives: Dict[str, List[str]] = {}

        for analysis in self.ingredient_analyzer.analyze_ingredients(ingredients):
            for allergen in analysis.matched_allergens:
                if allergen.alternatives:
                    alternatives.setdefault(allergen.canonical_name, []).extend(
                        allergen.alternatives
                    )

        return {
            name: dedupe_preserving_order(items)
            for name, items in alternatives.items()
        }

    def check_menu_item_for_allergens(
        self,
        dish: Dish,
        user_allergens: Optional[Iterable[Any]]
    ) -> MenuItemAllergenCheck:
        """
        Check a menu item's declared labels and ingredients against a profile.

        Two passes:
        1. Declared allergen labels on the dish, matched to profile names
           by containment in either direction ("Nuts" vs "Tree Nuts").
        2. Ingredient scan using the lexicon keywords of each profile
           allergen; warnings for the same allergen are merged.

        Safety level is "danger" if any matched entry is severe, otherwise
        "caution" if anything matched, otherwise "safe".

        Returns:
            MenuItemAllergenCheck: Warnings, safety level, conflicting ingredients
        """
        entries = coerce_user_allergens(user_allergens)
        if not entries:
            return MenuItemAllergenCheck()

        warnings: List[AllergenWarning] = []
        conflicting: List[str] = []
        any_severe = False

        # A blank name is contained in every label, so it never matches one
        named_entries = [
            (normalize_ingredient_text(e.name), e) for e in entries
            if normalize_ingredient_text(e.name)
        ]

        for label in dish.allergens:
            label_lower = normalize_ingredient_text(label)
            if not label_lower:
                continue

            entry = next(
                (
                    e for name, e in named_entries
                    if label_lower in name or name in label_lower
                ),
                None
            )
            if entry is None:
                continue

            warnings.append(AllergenWarning(
                allergen=label,
                severity=entry.severity,
                found_in=[label],
                message=f"Contains {label} - listed as allergen"
            ))
            any_severe = any_severe or entry.severity == Severity.SEVERE.value

        for ingredient in dish.ingredients or []:
            for entry in entries:
                definition = self.lexicon.get_definition(entry.name)
                if definition is None:
                    continue
                if not self.find_allergen_in_ingredients(definition.keywords, [ingredient]):
                    continue

                conflicting.append(ingredient)
                existing = next(
                    (w for w in warnings if w.allergen == definition.canonical_name),
                    None
                )
                if existing is not None:
                    existing.found_in.append(ingredient)
                else:
                    warnings.append(AllergenWarning(
                        allergen=definition.canonical_name,
                        severity=entry.severity,
                        found_in=[ingredient],
                        message=(
                            f"May contain {definition.canonical_name.lower()} "
                            f"- found in {ingredient}"
                        )
                    ))
                any_severe = any_severe or entry.severity == Severity.SEVERE.value

        if not warnings:
            safety_level = "safe"
        elif any_severe:
            safety_level = "danger"
        else:
            safety_level = "caution"

        return MenuItemAllergenCheck(
            has_allergens=bool(warnings),
            warnings=warnings,
            safety_level=safety_level,
            conflicting_ingredients=dedupe_preserving_order(conflicting)
        )


def _dish_name_and_ingredients(dish: Any):
    """Extract (name, ingredients) from a Dish model or a plain dict."""
    if isinstance(dish, Dish):
        return dish.name, dish.scan_ingredients

    if isinstance(dish, dict):
        name = dish.get("name", "")
        ingredients = dish.get("ingredients")
        return name, ingredients if ingredients is not None else [name]

    raise TypeError(
        f"Dish must be a Dish or dict, got {type(dish).__name__}"
    )
