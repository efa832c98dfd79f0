"""Free-text meal parsing using a language model."""

import logging
from dataclasses import dataclass

from macro_estimator.domain.intent import FoodSearchItem, MealAnalysis, ParsedFoodIntent
from macro_estimator.errors import RateLimitedError
from macro_estimator.services.model_output import LanguageModelClient, decode_model_json

_logger = logging.getLogger(__name__)

INTENT_PROMPT = """\
Analyze this food description for searching the USDA database for macronutrients: "{text}".
Complex foods should be broken down into a list of ingredients.
Return ONLY valid JSON. Do not use Markdown formatting.
Schema:
{{ "items": [ {{ "search_term": "string (USDA database optimized)", \
"estimated_weight_grams": number }} ] }}
"""

ANALYSIS_PROMPT = """\
Estimate the nutrition of this meal: "{text}".
Use typical portion sizes when amounts are not given.
Return ONLY valid JSON. Do not use Markdown formatting.
Schema:
{{ "summary": "short meal name", "total_calories": number, "total_protein": number, \
"total_carbs": number, "total_fat": number, \
"items": [ {{ "name": "string", "estimated_calories": number }} ] }}
"""


@dataclass
class IntentParser:
    """Turns meal descriptions into searchable items or direct estimates."""

    client: LanguageModelClient
    debug: bool = False

    async def parse_intent(self, text: str) -> list[FoodSearchItem]:
        """Return searchable items with weights; empty when rate limited."""
        try:
            raw = await self.client.generate(INTENT_PROMPT.format(text=text))
        except RateLimitedError:
            _logger.warning("Intent parsing rate limited; returning no items")
            return []
        intent = decode_model_json(raw, ParsedFoodIntent)
        items = [item for item in intent.items if item.search_term.strip()]
        if len(items) != len(intent.items):
            _logger.warning(
                "Dropped %s parsed items with blank search terms",
                len(intent.items) - len(items),
            )
        if self.debug:
            _logger.info("Parsed intent: text=%r items=%s", text, items)
        return items

    async def analyze_meal(self, text: str) -> MealAnalysis:
        """Ask the model for meal totals in a single call."""
        raw = await self.client.generate(ANALYSIS_PROMPT.format(text=text))
        analysis = decode_model_json(raw, MealAnalysis)
        if self.debug:
            _logger.info("Meal analysis: text=%r summary=%s", text, analysis.summary)
        return analysis
