"""Portion scaling for saved meal templates."""

import re

from macro_estimator.domain.nutrition import MacroTotal
from macro_estimator.domain.templates import MealTemplate, ParsedQuantity
from macro_estimator.services.calories import calories_from_macros

_QUANTITY_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*([a-zA-Z]+)?\s+(.*)$")
_KNOWN_UNITS = frozenset(
    {
        "g",
        "gram",
        "grams",
        "oz",
        "ounce",
        "ounces",
        "lb",
        "lbs",
        "cup",
        "cups",
        "ml",
        "l",
        "tbsp",
        "tsp",
    }
)


def scale_template(
    template: MealTemplate, portion: float, unit: str
) -> MacroTotal | None:
    """Scale a template linearly to a requested portion.

    Returns None when the units differ or either portion is not positive;
    there is no unit conversion.
    """
    if unit != template.unit:
        return None
    if portion <= 0 or template.portion_size <= 0:
        return None
    ratio = portion / template.portion_size
    protein = template.protein * ratio
    carbs = template.carbs * ratio
    fat = template.fat * ratio
    return MacroTotal(
        protein=protein,
        carbs=carbs,
        fat=fat,
        kcal=calories_from_macros(fat=fat, carbs=carbs, protein=protein),
    )


def template_key(name: str) -> str:
    """Case-insensitive lookup key for a template name."""
    return name.strip().casefold()


def parse_quantity(text: str) -> ParsedQuantity | None:
    """Parse entries like "200 g rice" or "2 eggs" without a model call."""
    trimmed = text.strip().lower()
    if trimmed.startswith(("a ", "an ")):
        return None
    match = _QUANTITY_PATTERN.match(trimmed)
    if match is None:
        return None
    quantity = float(match.group(1))
    unit = match.group(2)
    if unit is not None and unit not in _KNOWN_UNITS:
        return None
    return ParsedQuantity(quantity=quantity, unit=unit, food_name=match.group(3))
