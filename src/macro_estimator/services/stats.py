"""Statistics over logged meals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from macro_estimator.domain.stats import DailyMacroTotal, LoggedMeal, MacroAverage


class MealLogRepository(Protocol):
    """Read-only access to logged meals, provided by the storage layer."""

    def list_meals(self, start: datetime, end: datetime) -> list[LoggedMeal]:
        """Return meals logged within [start, end)."""


@dataclass
class StatsService:
    """Aggregates logged meals into per-day totals and averages."""

    repository: MealLogRepository
    timezone_name: str = "UTC"

    def daily_totals(self, start: datetime, end: datetime) -> dict[date, DailyMacroTotal]:
        """Group meals in [start, end) by local calendar day."""
        tz = ZoneInfo(self.timezone_name)
        grouped: dict[date, tuple[float, float, float]] = {}
        for meal in self.repository.list_meals(start, end):
            logged_at = meal.logged_at
            if logged_at.tzinfo is None:
                logged_at = logged_at.replace(tzinfo=UTC)
            day = logged_at.astimezone(tz).date()
            protein, carbs, fat = grouped.get(day, (0.0, 0.0, 0.0))
            grouped[day] = (protein + meal.protein, carbs + meal.carbs, fat + meal.fat)
        return {
            day: DailyMacroTotal(day=day, protein=protein, carbs=carbs, fat=fat)
            for day, (protein, carbs, fat) in sorted(grouped.items())
        }

    def averages(self, start: datetime, end: datetime) -> MacroAverage:
        """Average macros over the days in range that had at least one meal."""
        totals = self.daily_totals(start, end)
        count = len(totals)
        if count == 0:
            return MacroAverage(protein=0.0, carbs=0.0, fat=0.0, day_count=0)
        return MacroAverage(
            protein=sum(day.protein for day in totals.values()) / count,
            carbs=sum(day.carbs for day in totals.values()) / count,
            fat=sum(day.fat for day in totals.values()) / count,
            day_count=count,
        )
