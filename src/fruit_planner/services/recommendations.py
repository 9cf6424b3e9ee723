"""Recommendation views over fruits fetched from the backend."""

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import ValidationError

from fruit_planner.adapters.api_client import ApiClient, ApiError
from fruit_planner.api.models import FruitPayload, PersonalizedFruitPayload
from fruit_planner.domain.fruits import (
    Fruit,
    NutritionTotals,
    PersonalizedFruit,
    PersonalizedFruits,
    RecommendationLevel,
)

_logger = logging.getLogger(__name__)

_BADGES: dict[str, str] = {
    RecommendationLevel.RECOMMENDED: "✓ Recommended",
    RecommendationLevel.MODERATE: "⚠ Moderate",
    RecommendationLevel.LIMIT: "⚠ Limit",
    RecommendationLevel.AVOID: "✕ Avoid",
}

_FRUIT_EMOJIS = {
    "apple": "🍎",
    "banana": "🍌",
    "orange": "🍊",
    "grape": "🍇",
    "strawberry": "🍓",
    "blueberry": "🫐",
    "berry": "🫐",
    "mixed berry": "🫐",
    "kiwi": "🥝",
    "mango": "🥭",
    "pineapple": "🍍",
    "watermelon": "🍉",
    "avocado": "🥑",
    "cherry": "🍒",
    "peach": "🍑",
    "coconut": "🥥",
    "lemon": "🍋",
    "honeydew": "🍈",
    "cantaloupe": "🍈",
    "pear": "🍐",
    "dragon fruit": "🐉",
    "star fruit": "⭐",
}
_DEFAULT_EMOJI = "🍎"


class HasNutrition(Protocol):
    """Anything carrying the four summed nutrition fields."""

    @property
    def calories(self) -> float: ...

    @property
    def fiber(self) -> float: ...

    @property
    def vitamin_c(self) -> float: ...

    @property
    def potassium(self) -> float: ...


class HasId(Protocol):
    @property
    def id(self) -> int: ...


FruitT = TypeVar("FruitT", bound=HasId)


def bucket(
    fruits: Iterable[PersonalizedFruit],
) -> dict[RecommendationLevel, list[PersonalizedFruit]]:
    """Partition fruits by recommendation level.

    Every level has a key, so absent levels map to an empty list.
    """
    buckets: dict[RecommendationLevel, list[PersonalizedFruit]] = {
        level: [] for level in RecommendationLevel
    }
    for fruit in fruits:
        buckets[fruit.recommendation_level].append(fruit)
    return buckets


def aggregate_nutrition(fruits: Iterable[HasNutrition]) -> NutritionTotals:
    """Sum calories, fiber, vitamin C and potassium."""
    calories = fiber = vitamin_c = potassium = 0.0
    for fruit in fruits:
        calories += fruit.calories
        fiber += fruit.fiber
        vitamin_c += fruit.vitamin_c
        potassium += fruit.potassium
    return NutritionTotals(
        calories=calories, fiber=fiber, vitamin_c=vitamin_c, potassium=potassium
    )


def selected_subset(
    all_fruits: Sequence[FruitT], selected_ids: Iterable[int]
) -> list[FruitT]:
    """Return the selected fruits in catalogue order, ignoring unknown ids."""
    wanted = set(selected_ids)
    return [fruit for fruit in all_fruits if fruit.id in wanted]


def search_fruits(fruits: Sequence[Fruit], query: str | None) -> list[Fruit]:
    """Case-insensitive match on name or benefits."""
    if not query:
        return list(fruits)
    needle = query.lower()
    return [
        fruit
        for fruit in fruits
        if needle in fruit.name.lower() or needle in fruit.benefits.lower()
    ]


def recommendation_badge(level: RecommendationLevel | str) -> str:
    """Badge text for a level; empty for neutral or unknown levels."""
    return _BADGES.get(level, "")


def fruit_emoji(name: str) -> str:
    """Pick an emoji for a fruit name, tolerating plurals and qualifiers."""
    raw = name.lower().strip()
    key = re.sub(r"\s*\([^)]*\)", "", raw)
    key = key.replace("berries", "berry")
    key = re.sub(r"s$", "", key)
    return _FRUIT_EMOJIS.get(key) or _FRUIT_EMOJIS.get(raw) or _DEFAULT_EMOJI


@dataclass
class RecommendationService:
    """Fetches the fruit catalogue and personalized recommendations."""

    api_client: ApiClient

    async def list_fruits(self) -> list[Fruit]:
        """Return all reference fruits, or an empty list on failure."""
        try:
            payload = await self.api_client.get("/fruits")
        except ApiError:
            _logger.exception("Failed to load fruits")
            return []
        items = payload.get("fruits", []) if isinstance(payload, dict) else payload
        fruits: list[Fruit] = []
        for item in items if isinstance(items, list) else []:
            try:
                fruits.append(FruitPayload.model_validate(item).to_domain())
            except ValidationError:
                _logger.warning("Skipping malformed fruit record: %s", item)
        return fruits

    async def personalized(self, user_id: int | str) -> PersonalizedFruits:
        """Return personalized fruits for a user, or an empty result on failure."""
        try:
            payload = await self.api_client.get(f"/fruits/personalized/{user_id}")
        except ApiError:
            _logger.exception("Failed to load personalized fruits for %s", user_id)
            return PersonalizedFruits()

        if isinstance(payload, dict):
            items = payload.get("fruits") or payload.get("personalizedFruits") or []
            raw_counts = payload.get("summary") or payload.get("counts") or {}
        else:
            items, raw_counts = payload, {}

        fruits: list[PersonalizedFruit] = []
        for item in items if isinstance(items, list) else []:
            try:
                parsed = PersonalizedFruitPayload.model_validate(item)
            except ValidationError:
                _logger.warning("Skipping malformed personalized fruit: %s", item)
                continue
            fruits.append(parsed.to_personalized())

        return PersonalizedFruits(fruits=fruits, counts=_counts(fruits, raw_counts))


def _counts(
    fruits: list[PersonalizedFruit], raw_counts: object
) -> dict[RecommendationLevel, int]:
    """Prefer server-provided counts, falling back to counting buckets."""
    counts = {level: len(items) for level, items in bucket(fruits).items()}
    if not isinstance(raw_counts, dict):
        return counts
    for level in RecommendationLevel:
        value = raw_counts.get(level.value, raw_counts.get(f"{level.value}Count"))
        if isinstance(value, int):
            counts[level] = value
    return counts
