"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from macro_estimator.adapters.fdc_client import HttpxFdcClient
from macro_estimator.adapters.gemini_client import HttpxGeminiClient
from macro_estimator.adapters.open_food_facts_client import HttpxOpenFoodFactsClient
from macro_estimator.adapters.openai_client import OpenAILanguageModelClient
from macro_estimator.config import Settings
from macro_estimator.services.barcode import BarcodeService
from macro_estimator.services.estimator import MacroEstimator
from macro_estimator.services.intent import IntentParser
from macro_estimator.services.nutrition import NutrientLookupService
from macro_estimator.services.vision import LabelVisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    intent_parser: IntentParser | None
    estimator: MacroEstimator
    vision_service: LabelVisionService
    barcode_service: BarcodeService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Collaborators whose API key is empty are left unset so that calls
    needing them fail with MissingCredentialsError.
    """
    resolved_settings = settings or Settings()
    closers: list[Callable[[], Awaitable[None]]] = []

    language_model: HttpxGeminiClient | OpenAILanguageModelClient | None = None
    llm_key = resolved_settings.language_model_key
    if llm_key and resolved_settings.llm_provider == "openai":
        language_model = OpenAILanguageModelClient.create(
            api_key=llm_key, model=resolved_settings.openai_model
        )
    elif llm_key:
        language_model = HttpxGeminiClient.create(
            api_key=llm_key,
            model=resolved_settings.gemini_model,
            base_url=resolved_settings.gemini_base_url,
            timeout_seconds=resolved_settings.llm_timeout_seconds,
        )
    if language_model is not None:
        closers.append(language_model.close)

    intent_parser = (
        IntentParser(client=language_model, debug=resolved_settings.debug)
        if language_model is not None
        else None
    )

    nutrient_lookup: NutrientLookupService | None = None
    fdc_key = resolved_settings.fdc_api_key.strip()
    if fdc_key:
        fdc_client = HttpxFdcClient.create(
            api_key=fdc_key,
            base_url=resolved_settings.fdc_base_url,
            timeout_seconds=resolved_settings.http_timeout_seconds,
        )
        closers.append(fdc_client.close)
        nutrient_lookup = NutrientLookupService(
            fdc_client=fdc_client, debug=resolved_settings.debug
        )

    off_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.open_food_facts_base_url,
        user_agent=resolved_settings.open_food_facts_user_agent,
        timeout_seconds=resolved_settings.http_timeout_seconds,
    )
    closers.append(off_client.close)

    estimator = MacroEstimator(
        intent_parser=intent_parser,
        nutrient_lookup=nutrient_lookup,
        max_concurrent_lookups=resolved_settings.max_concurrent_lookups,
    )
    vision_service = LabelVisionService(
        client=language_model,
        default_servings=resolved_settings.default_recipe_servings,
    )
    barcode_service = BarcodeService(client=off_client)

    async def close_resources() -> None:
        for close in closers:
            await close()

    return AppContainer(
        settings=resolved_settings,
        intent_parser=intent_parser,
        estimator=estimator,
        vision_service=vision_service,
        barcode_service=barcode_service,
        close_resources=close_resources,
    )
