"""Shared test fixtures."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from fruit_planner.adapters.api_client import ApiClient, ApiError
from fruit_planner.config import Settings
from fruit_planner.domain.fruits import Fruit, PersonalizedFruit, RecommendationLevel
from fruit_planner.services.storage import InMemoryStore


@dataclass
class FakeApiClient(ApiClient):
    """API client returning canned data keyed by (method, endpoint)."""

    responses: dict[tuple[str, str], Any] = field(default_factory=dict)
    calls: list[tuple[str, str, object | None]] = field(default_factory=list)

    async def get(self, endpoint: str) -> Any:
        return self._respond("GET", endpoint, None)

    async def post(self, endpoint: str, json: object | None = None) -> Any:
        return self._respond("POST", endpoint, json)

    async def put(self, endpoint: str, json: object | None = None) -> Any:
        return self._respond("PUT", endpoint, json)

    async def delete(self, endpoint: str, json: object | None = None) -> Any:
        return self._respond("DELETE", endpoint, json)

    def _respond(self, method: str, endpoint: str, body: object | None) -> Any:
        self.calls.append((method, endpoint, body))
        response = self.responses.get((method, endpoint))
        if isinstance(response, ApiError):
            raise response
        return response


def make_fruit(fruit_id: int, name: str = "", **nutrition: float) -> Fruit:
    """Build a fruit with optional nutrition overrides."""
    return Fruit(id=fruit_id, name=name or f"Fruit {fruit_id}", **nutrition)


def make_personalized(
    fruit_id: int, level: RecommendationLevel, *reasons: str
) -> PersonalizedFruit:
    return PersonalizedFruit(
        fruit=make_fruit(fruit_id),
        recommendation_level=level,
        reasons=reasons,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="https://api.test/api", environment="test")


@pytest.fixture
def api_client() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
