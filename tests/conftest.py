"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import datetime

import pytest

from macro_estimator.adapters.fdc_client import FdcClient
from macro_estimator.adapters.open_food_facts_client import OpenFoodFactsClient
from macro_estimator.config import Settings
from macro_estimator.containers import AppContainer
from macro_estimator.domain.stats import LoggedMeal
from macro_estimator.domain.vision import InlineImage
from macro_estimator.errors import EstimationError
from macro_estimator.services.barcode import BarcodeService
from macro_estimator.services.estimator import MacroEstimator
from macro_estimator.services.intent import IntentParser
from macro_estimator.services.model_output import LanguageModelClient
from macro_estimator.services.nutrition import NutrientLookupService
from macro_estimator.services.stats import MealLogRepository
from macro_estimator.services.vision import LabelVisionService

BACON_NUTRIENTS = [
    {"nutrientId": 1003, "value": 37},
    {"nutrientId": 1004, "value": 42},
    {"nutrientId": 1005, "value": 1.4},
    {"nutrientId": 1008, "value": 541},
]


def intent_payload(*items: tuple[str, float]) -> str:
    """Model text for an intent response with the given items."""
    return json.dumps(
        {
            "items": [
                {"search_term": term, "estimated_weight_grams": grams}
                for term, grams in items
            ]
        }
    )


@dataclass
class FakeLanguageModelClient(LanguageModelClient):
    """Fake language model returning a fixed text or raising an error."""

    text: str = field(default_factory=lambda: intent_payload(("bacon", 20)))
    error: EstimationError | None = None
    prompts: list[str] = field(default_factory=list)
    images: list[InlineImage | None] = field(default_factory=list)

    async def generate(self, prompt: str, image: InlineImage | None = None) -> str:
        self.prompts.append(prompt)
        self.images.append(image)
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client answering searches from an in-memory table."""

    foods: dict[str, list[dict[str, object]]] = field(
        default_factory=lambda: {
            "bacon": [
                {
                    "fdcId": 168277,
                    "description": "Pork, cured, bacon, cooked",
                    "foodNutrients": BACON_NUTRIENTS,
                }
            ]
        }
    )
    errors: dict[str, EstimationError] = field(default_factory=dict)
    queries: list[str] = field(default_factory=list)

    async def search_foods(self, query: str, page_size: int = 1) -> dict[str, object]:
        self.queries.append(query)
        if query in self.errors:
            raise self.errors[query]
        return {"foods": self.foods.get(query, [])[:page_size]}


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake product database keyed by barcode."""

    products: dict[str, dict[str, object]] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        self.requested.append(barcode)
        product = self.products.get(barcode)
        if product is None:
            return {"status": 0, "status_verbose": "product not found"}
        return {"status": 1, "product": product}


@dataclass
class InMemoryMealLogRepository(MealLogRepository):
    """In-memory meal log for tests."""

    meals: list[LoggedMeal] = field(default_factory=list)

    def list_meals(self, start: datetime, end: datetime) -> list[LoggedMeal]:
        return [meal for meal in self.meals if start <= meal.logged_at < end]


def build_estimator(
    llm: FakeLanguageModelClient, fdc: FakeFdcClient
) -> MacroEstimator:
    return MacroEstimator(
        intent_parser=IntentParser(client=llm),
        nutrient_lookup=NutrientLookupService(fdc_client=fdc),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        google_api_key="google-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def language_model() -> FakeLanguageModelClient:
    return FakeLanguageModelClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def off_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def container(
    settings: Settings,
    language_model: FakeLanguageModelClient,
    fdc_client: FakeFdcClient,
    off_client: FakeOpenFoodFactsClient,
) -> AppContainer:
    intent_parser = IntentParser(client=language_model)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        intent_parser=intent_parser,
        estimator=MacroEstimator(
            intent_parser=intent_parser,
            nutrient_lookup=NutrientLookupService(fdc_client=fdc_client),
        ),
        vision_service=LabelVisionService(client=language_model),
        barcode_service=BarcodeService(client=off_client),
        close_resources=close_resources,
    )
