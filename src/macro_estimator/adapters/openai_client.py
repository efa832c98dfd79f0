"""OpenAI Responses API client used as an alternative language model."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from macro_estimator.domain.vision import InlineImage
from macro_estimator.errors import (
    InvalidCredentialsError,
    MalformedResponseError,
    RateLimitedError,
    UpstreamError,
)
from macro_estimator.services.model_output import LanguageModelClient

_SERVICE = "OpenAI"


@dataclass
class OpenAILanguageModelClient(LanguageModelClient):
    """Language model backed by the OpenAI Responses API."""

    client: AsyncOpenAI
    model: str

    @classmethod
    def create(cls, api_key: str, model: str) -> "OpenAILanguageModelClient":
        """Create an OpenAI language model client."""
        return cls(client=AsyncOpenAI(api_key=api_key), model=model)

    async def generate(self, prompt: str, image: InlineImage | None = None) -> str:
        """Call the Responses API in JSON mode and return the output text."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image is not None:
            content.append({"type": "input_image", "image_url": image.data_url})
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=[{"role": "user", "content": content}],
                text={"format": {"type": "json_object"}},
                store=False,
            )
        except openai.RateLimitError as exc:
            raise RateLimitedError(
                exc.message, status_code=exc.status_code, service=_SERVICE
            ) from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise InvalidCredentialsError(
                exc.message, status_code=exc.status_code, service=_SERVICE
            ) from exc
        except openai.APIStatusError as exc:
            raise UpstreamError(
                exc.message, status_code=exc.status_code, service=_SERVICE
            ) from exc
        except openai.APIConnectionError as exc:
            raise UpstreamError(f"{_SERVICE} is unreachable", service=_SERVICE) from exc

        output_text = response.output_text
        if not output_text:
            raise MalformedResponseError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying SDK client."""
        await self.client.close()
