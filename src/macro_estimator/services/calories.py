"""Energy derivation from macronutrients."""

import math

FAT_KCAL_PER_G = 9.0
CARBS_KCAL_PER_G = 4.0
PROTEIN_KCAL_PER_G = 4.0


def calories_from_macros(fat: float, carbs: float, protein: float) -> float:
    """Return kcal using Atwater factors."""
    return fat * FAT_KCAL_PER_G + carbs * CARBS_KCAL_PER_G + protein * PROTEIN_KCAL_PER_G


def sanitize_macro(value: object) -> float:
    """Coerce a user-entered macro value to a finite, non-negative float."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", "."))
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number
