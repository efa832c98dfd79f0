"""Language model seam and decoding of its JSON output."""

from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from macro_estimator.domain.vision import InlineImage
from macro_estimator.errors import MalformedResponseError

ModelT = TypeVar("ModelT", bound=BaseModel)


class LanguageModelClient(Protocol):
    """Interface for a JSON-mode completion endpoint."""

    async def generate(self, prompt: str, image: InlineImage | None = None) -> str:
        """Return the model's raw text for the prompt."""


def strip_code_fences(text: str) -> str:
    """Remove markdown fences that models wrap around JSON despite instructions."""
    return text.replace("```json", "").replace("```", "").strip()


def decode_model_json(text: str, model: type[ModelT]) -> ModelT:
    """Strip fences and validate the text against a pydantic model."""
    cleaned = strip_code_fences(text)
    try:
        return model.model_validate_json(cleaned)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Model output does not match the {model.__name__} schema"
        ) from exc
