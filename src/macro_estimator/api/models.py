"""Pydantic models for the HTTP API."""

from pydantic import BaseModel, Field

from macro_estimator.domain.nutrition import EstimatedItem, MacroEstimate, MacroTotal


class DescriptionRequest(BaseModel):
    """A free-text meal description."""

    description: str = Field(min_length=1)


class MacrosBody(BaseModel):
    """Macro totals returned to clients."""

    protein: float
    carbs: float
    fat: float
    kcal: float
    atwater_kcal: float

    @classmethod
    def from_total(cls, total: MacroTotal) -> "MacrosBody":
        return cls(
            protein=total.protein,
            carbs=total.carbs,
            fat=total.fat,
            kcal=total.kcal,
            atwater_kcal=total.atwater_kcal,
        )


class EstimatedItemBody(BaseModel):
    """One resolved food item."""

    search_term: str
    weight_grams: float
    fdc_id: int | None = None
    description: str | None = None
    macros: MacrosBody

    @classmethod
    def from_item(cls, item: EstimatedItem) -> "EstimatedItemBody":
        return cls(
            search_term=item.search_term,
            weight_grams=item.weight_grams,
            fdc_id=item.fdc_id,
            description=item.description,
            macros=MacrosBody.from_total(item.macros),
        )


class EstimateResponse(BaseModel):
    """Aggregate estimate, with a warning list for unresolved items."""

    total: MacrosBody
    items: list[EstimatedItemBody]
    unresolved_terms: list[str]
    partial: bool

    @classmethod
    def from_estimate(cls, estimate: MacroEstimate) -> "EstimateResponse":
        return cls(
            total=MacrosBody.from_total(estimate.total),
            items=[EstimatedItemBody.from_item(item) for item in estimate.items],
            unresolved_terms=list(estimate.unresolved_terms),
            partial=estimate.is_partial,
        )


class CaloriesRequest(BaseModel):
    """Macros to convert to energy; values are sanitized before use."""

    fat: float | str | None = 0.0
    carbs: float | str | None = 0.0
    protein: float | str | None = 0.0


class TemplateBody(BaseModel):
    """A saved meal template supplied by the client."""

    name: str
    protein: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    portion_size: float
    unit: str


class ScaleTemplateRequest(BaseModel):
    """Requested portion for a template, as numbers or as an entry like "200 g"."""

    template: TemplateBody
    portion: float | None = None
    unit: str | None = None
    entry: str | None = None
