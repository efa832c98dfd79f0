"""USDA FoodData Central API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from macro_estimator.adapters.http_errors import raise_for_upstream_status, transport_error
from macro_estimator.errors import MalformedResponseError

_SERVICE = "FoodData Central"
# Foundation foods plus the legacy Standard Reference set: lab-analysed, per 100 g.
DATA_TYPES = "Foundation,SR Legacy"


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 1) -> dict[str, object]:
        """Search foods by query and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, api_key: str, base_url: str, timeout_seconds: float = 15
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_foods(self, query: str, page_size: int = 1) -> dict[str, object]:
        """Search the Foundation and SR Legacy data types."""
        url = f"{self.base_url}/foods/search"
        try:
            response = await self.http_client.get(
                url,
                params={
                    "query": query,
                    "dataType": DATA_TYPES,
                    "pageSize": page_size,
                    "api_key": self.api_key,
                },
                timeout=self.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise transport_error(exc, service=_SERVICE) from exc
        raise_for_upstream_status(response, service=_SERVICE)
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError("FDC search returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError("FDC search returned an unexpected payload")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
