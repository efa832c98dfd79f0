"""Models for language-model meal parsing output."""

from pydantic import BaseModel, Field, field_validator

DEFAULT_WEIGHT_GRAMS = 100.0


class FoodSearchItem(BaseModel):
    """A database-searchable food with the model's weight estimate."""

    search_term: str
    estimated_weight_grams: float = 0.0

    @field_validator("estimated_weight_grams", mode="before")
    @classmethod
    def _missing_weight_is_zero(cls, value: object) -> object:
        return 0.0 if value is None else value

    @property
    def effective_weight_grams(self) -> float:
        """Weight used for scaling; non-positive estimates fall back to 100 g."""
        if self.estimated_weight_grams > 0:
            return self.estimated_weight_grams
        return DEFAULT_WEIGHT_GRAMS


class ParsedFoodIntent(BaseModel):
    """Structured output for intent parsing."""

    items: list[FoodSearchItem] = Field(default_factory=list)


class AnalyzedFood(BaseModel):
    """Per-item breakdown of a one-shot meal analysis."""

    name: str
    estimated_calories: float = 0.0


class MealAnalysis(BaseModel):
    """Macros estimated directly by the model in one round trip."""

    summary: str
    total_calories: float = Field(ge=0.0)
    total_protein: float = Field(ge=0.0)
    total_carbs: float = Field(ge=0.0)
    total_fat: float = Field(ge=0.0)
    items: list[AnalyzedFood] = Field(default_factory=list)
