"""Fruit domain models."""

from dataclasses import dataclass, field
from enum import StrEnum


class RecommendationLevel(StrEnum):
    """Server-assigned suitability of a fruit for the user's conditions."""

    RECOMMENDED = "recommended"
    MODERATE = "moderate"
    NEUTRAL = "neutral"
    LIMIT = "limit"
    AVOID = "avoid"


@dataclass(frozen=True)
class Fruit:
    """Reference fruit record with nutrition facts."""

    id: int
    name: str
    benefits: str = ""
    calories: float = 0
    fiber: float = 0
    vitamin_c: float = 0
    potassium: float = 0
    sugar_content: float = 0
    glycemic_index: float = 0
    image: str | None = None


@dataclass(frozen=True)
class PersonalizedFruit:
    """A fruit annotated by the recommendation engine."""

    fruit: Fruit
    recommendation_level: RecommendationLevel = RecommendationLevel.NEUTRAL
    reasons: tuple[str, ...] = ()

    @property
    def id(self) -> int:
        return self.fruit.id

    @property
    def name(self) -> str:
        return self.fruit.name

    @property
    def calories(self) -> float:
        return self.fruit.calories

    @property
    def fiber(self) -> float:
        return self.fruit.fiber

    @property
    def vitamin_c(self) -> float:
        return self.fruit.vitamin_c

    @property
    def potassium(self) -> float:
        return self.fruit.potassium


@dataclass(frozen=True)
class NutritionTotals:
    """Summed nutrition facts for a group of fruits."""

    calories: float = 0
    fiber: float = 0
    vitamin_c: float = 0
    potassium: float = 0


@dataclass(frozen=True)
class PersonalizedFruits:
    """Personalized recommendations plus per-level counts."""

    fruits: list[PersonalizedFruit] = field(default_factory=list)
    counts: dict[RecommendationLevel, int] = field(default_factory=dict)
