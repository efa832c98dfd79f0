"""Domain models for saved meal templates."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MealTemplate:
    """A named, reusable macro profile for a base portion."""

    name: str
    protein: float
    fat: float
    carbs: float
    portion_size: float
    unit: str
    last_used_at: datetime | None = None


@dataclass(frozen=True)
class ParsedQuantity:
    """Quantity, unit and food name read from a short entry like "200 g rice"."""

    quantity: float
    unit: str | None
    food_name: str
