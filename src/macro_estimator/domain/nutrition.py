"""Nutrition domain models."""

from dataclasses import dataclass, field

from macro_estimator.services.calories import calories_from_macros

PER_100G = 100.0


@dataclass(frozen=True)
class NutrientProfile:
    """Macronutrients per 100 g of a food, as reported by the nutrition database."""

    protein_g_per_100g: float
    fat_g_per_100g: float
    carbs_g_per_100g: float
    kcal_per_100g: float
    fdc_id: int | None = None
    description: str | None = None

    def scaled(self, weight_grams: float) -> "MacroTotal":
        """Return the macros for a portion of the given weight."""
        ratio = weight_grams / PER_100G
        return MacroTotal(
            protein=self.protein_g_per_100g * ratio,
            carbs=self.carbs_g_per_100g * ratio,
            fat=self.fat_g_per_100g * ratio,
            kcal=self.kcal_per_100g * ratio,
        )


@dataclass(frozen=True)
class MacroTotal:
    """Additive macro totals in grams, plus energy in kcal."""

    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    kcal: float = 0.0

    def __add__(self, other: "MacroTotal") -> "MacroTotal":
        return MacroTotal(
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            kcal=self.kcal + other.kcal,
        )

    @property
    def atwater_kcal(self) -> float:
        """Energy derived from the macros rather than reported by a source."""
        return calories_from_macros(fat=self.fat, carbs=self.carbs, protein=self.protein)


@dataclass(frozen=True)
class EstimatedItem:
    """A parsed item that was resolved against the nutrition database."""

    search_term: str
    weight_grams: float
    macros: MacroTotal
    fdc_id: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class MacroEstimate:
    """Result of a text estimate, with terms that could not be resolved."""

    total: MacroTotal
    items: list[EstimatedItem] = field(default_factory=list)
    unresolved_terms: tuple[str, ...] = ()

    @property
    def is_partial(self) -> bool:
        """True when some items were dropped from the total."""
        return bool(self.unresolved_terms)
