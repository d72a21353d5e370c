"""External food lookup backed by Nutritionix."""

import logging
from dataclasses import dataclass, field

from pydantic import ValidationError as PydanticValidationError

from byte_buddy.adapters.nutritionix_client import NutritionixClient
from byte_buddy.domain.errors import SearchError
from byte_buddy.domain.lookup import LookupFood, LookupResponse

SEARCH_FAILED = "Search failed. Please try again."

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """Searches the nutrition API and keeps the latest results."""

    client: NutritionixClient
    results: list[LookupFood] = field(default_factory=list)
    is_loading: bool = False
    error_message: str | None = None
    _generation: int = field(default=0, repr=False)

    async def search(self, query: str) -> list[LookupFood]:
        """Run one search; only the newest search may update the results."""
        cleaned = query.strip()
        if not cleaned:
            return []
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error_message = None
        self.results = []
        try:
            foods = await self._fetch(cleaned)
        except SearchError as exc:
            if generation != self._generation:
                _logger.info("Discarding stale failed search: query=%s", cleaned)
                return []
            _logger.warning("Food search failed: query=%s error=%s", cleaned, exc)
            self.error_message = (
                SEARCH_FAILED if exc.status_code is not None else f"Search error: {exc}"
            )
            self.is_loading = False
            return []
        if generation != self._generation:
            _logger.info("Discarding stale search results: query=%s", cleaned)
            return foods
        self.results = foods
        self.is_loading = False
        _logger.info("Food search: query=%s results=%s", cleaned, len(foods))
        return foods

    async def _fetch(self, query: str) -> list[LookupFood]:
        payload = await self.client.search_foods(query)
        try:
            return LookupResponse.model_validate(payload).foods
        except PydanticValidationError as exc:
            raise SearchError(f"Unexpected response: {exc.error_count()} errors") from exc
