"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    API keys may be left empty; the affected operations then fail with
    MissingCredentialsError instead of the app refusing to start.
    """

    llm_provider: str = "gemini"
    google_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    openai_api_key: str = ""
    openai_model: str = "gpt-4.1-mini"
    fdc_api_key: str = ""
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    open_food_facts_base_url: str = "https://world.openfoodfacts.org/api/v0"
    open_food_facts_user_agent: str = "MacroEstimator/0.1 (macro-estimator)"
    http_timeout_seconds: float = 15.0
    llm_timeout_seconds: float = 60.0
    max_concurrent_lookups: int = 5
    default_recipe_servings: int = 4
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def language_model_key(self) -> str:
        """API key for the selected language model provider."""
        if self.llm_provider == "openai":
            return self.openai_api_key.strip()
        return self.google_api_key.strip()
