"""Google Gemini generateContent client."""

from dataclasses import dataclass

import httpx

from macro_estimator.adapters.http_errors import raise_for_upstream_status, transport_error
from macro_estimator.domain.vision import InlineImage
from macro_estimator.errors import MalformedResponseError
from macro_estimator.services.model_output import LanguageModelClient

_SERVICE = "Gemini"


@dataclass
class HttpxGeminiClient(LanguageModelClient):
    """HTTPX-backed Gemini client requesting JSON output."""

    api_key: str
    model: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 30

    @classmethod
    def create(
        cls, api_key: str, model: str, base_url: str, timeout_seconds: float = 30
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            model=model,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def generate(self, prompt: str, image: InlineImage | None = None) -> str:
        """Send the prompt (and optional image) and return the first candidate text."""
        parts: list[dict[str, object]] = [{"text": prompt}]
        if image is not None:
            parts.append(
                {"inlineData": {"mimeType": image.mime_type, "data": image.data}}
            )
        payload = {
            "contents": [{"parts": parts}],
            "generationConfig": {"response_mime_type": "application/json"},
        }
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            response = await self.http_client.post(
                url,
                headers={"x-goog-api-key": self.api_key},
                json=payload,
                timeout=self.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise transport_error(exc, service=_SERVICE) from exc
        raise_for_upstream_status(response, service=_SERVICE)
        return _first_candidate_text(response)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _first_candidate_text(response: httpx.Response) -> str:
    try:
        envelope = response.json()
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError("Gemini response has no candidate text") from exc
    if not isinstance(text, str):
        raise MalformedResponseError("Gemini candidate text is not a string")
    return text
