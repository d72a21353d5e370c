"""Nutritionix natural-language nutrients API client."""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Protocol

import httpx

from byte_buddy.domain.errors import SearchError


class NutritionixClient(Protocol):
    """Interface for Nutritionix API interactions."""

    async def search_foods(self, query: str) -> dict[str, object]:
        """Look up foods for a free-text query and return raw API data."""


@dataclass
class HttpxNutritionixClient(NutritionixClient):
    """HTTPX-backed Nutritionix client."""

    app_id: str
    app_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(
        cls, app_id: str, app_key: str, base_url: str, timeout_seconds: float = 15.0
    ) -> "HttpxNutritionixClient":
        """Create a Nutritionix client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_key=app_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def search_foods(self, query: str) -> dict[str, object]:
        """POST a query to the natural nutrients endpoint."""
        url = f"{self.base_url}/natural/nutrients"
        try:
            response = await self.http_client.post(
                url,
                headers={"x-app-id": self.app_id, "x-app-key": self.app_key},
                json={"query": query},
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise SearchError(str(exc) or type(exc).__name__) from exc
        if response.status_code != HTTPStatus.OK:
            raise SearchError(
                f"Nutritionix returned {response.status_code}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchError("Response was not valid JSON") from exc
        if not isinstance(payload, dict):
            raise SearchError("Response was not a JSON object")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
