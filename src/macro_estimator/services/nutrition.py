"""Nutrient lookup against USDA FoodData Central."""

import logging
from dataclasses import dataclass

from macro_estimator.adapters.fdc_client import FdcClient
from macro_estimator.domain.nutrition import NutrientProfile

_NUTRIENT_IDS = {
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "calories": 1008,
}

_logger = logging.getLogger(__name__)


@dataclass
class NutrientLookupService:
    """Resolves a search term to the top match's per-100 g macros."""

    fdc_client: FdcClient
    debug: bool = False

    async def lookup_nutrients(self, query: str) -> NutrientProfile | None:
        """Return the best match's nutrient profile, or None when nothing matched."""
        payload = await self.fdc_client.search_foods(query, page_size=1)
        foods = payload.get("foods") or []
        if not isinstance(foods, list) or not foods:
            _logger.warning("No FDC results for %r", query)
            return None
        food = foods[0]
        if not isinstance(food, dict):
            return None
        profile = _extract_profile(food)
        if self.debug:
            _logger.info(
                "FDC match: query=%r fdc_id=%s F/C/P=%s/%s/%s",
                query,
                profile.fdc_id,
                profile.fat_g_per_100g,
                profile.carbs_g_per_100g,
                profile.protein_g_per_100g,
            )
        return profile


def _extract_profile(food: dict[str, object]) -> NutrientProfile:
    """Pick protein, fat, carbs and kcal from a search result."""
    nutrients = food.get("foodNutrients") or []
    values = {
        name: _first_value(nutrients, nutrient_id)
        for name, nutrient_id in _NUTRIENT_IDS.items()
    }

    fdc_id = food.get("fdcId")
    description = food.get("description")
    return NutrientProfile(
        protein_g_per_100g=values["protein"],
        fat_g_per_100g=values["fat"],
        carbs_g_per_100g=values["carbs"],
        kcal_per_100g=values["calories"],
        fdc_id=fdc_id if isinstance(fdc_id, int) else None,
        description=description if isinstance(description, str) else None,
    )


def _first_value(nutrients: object, nutrient_id: int) -> float:
    if not isinstance(nutrients, list):
        return 0.0
    for nutrient in nutrients:
        if not isinstance(nutrient, dict) or nutrient.get("nutrientId") != nutrient_id:
            continue
        value = nutrient.get("value")
        if isinstance(value, int | float) and not isinstance(value, bool):
            return max(float(value), 0.0)
        return 0.0
    return 0.0
