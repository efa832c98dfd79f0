"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date, datetime

from macro_estimator.services.calories import calories_from_macros


@dataclass(frozen=True)
class LoggedMeal:
    """A logged meal as supplied by the storage layer."""

    logged_at: datetime
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class DailyMacroTotal:
    """Macros summed over one calendar day."""

    day: date
    protein: float
    carbs: float
    fat: float

    @property
    def calories(self) -> float:
        return calories_from_macros(fat=self.fat, carbs=self.carbs, protein=self.protein)


@dataclass(frozen=True)
class MacroAverage:
    """Average daily macros over the days that had at least one meal."""

    protein: float
    carbs: float
    fat: float
    day_count: int

    @property
    def calories(self) -> float:
        return calories_from_macros(fat=self.fat, carbs=self.carbs, protein=self.protein)
