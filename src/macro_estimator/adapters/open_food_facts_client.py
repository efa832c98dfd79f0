"""Open Food Facts product client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from macro_estimator.adapters.http_errors import raise_for_upstream_status, transport_error
from macro_estimator.errors import MalformedResponseError

_SERVICE = "Open Food Facts"
_NOT_FOUND = 404


class OpenFoodFactsClient(Protocol):
    """Interface for product lookups by barcode."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product payload, or None for an unknown barcode."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """Open Food Facts client using httpx."""

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 15
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/product/{barcode}.json"
        try:
            response = await self.http_client.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise transport_error(exc, service=_SERVICE) from exc
        if response.status_code == _NOT_FOUND:
            return None
        raise_for_upstream_status(response, service=_SERVICE)
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Open Food Facts returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError("Open Food Facts returned an unexpected payload")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
