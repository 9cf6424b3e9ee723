"""Pydantic models for backend API payloads."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from fruit_planner.domain.fruits import Fruit, PersonalizedFruit, RecommendationLevel
from fruit_planner.domain.plans import (
    DailyFruitScheduleEntry,
    NutritionalSummary,
    TimeOfDay,
    WeeklyPlan,
)
from fruit_planner.domain.users import UserProfile


class ApiModel(BaseModel):
    """Base model accepting the backend's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class FruitPayload(ApiModel):
    """Fruit record payload."""

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

    @field_validator(
        "calories",
        "fiber",
        "vitamin_c",
        "potassium",
        "sugar_content",
        "glycemic_index",
        mode="before",
    )
    @classmethod
    def _null_is_zero(cls, value: object) -> object:
        return 0 if value is None else value

    @field_validator("benefits", mode="before")
    @classmethod
    def _null_is_empty(cls, value: object) -> object:
        return "" if value is None else value

    def to_domain(self) -> Fruit:
        return Fruit(
            id=self.id,
            name=self.name,
            benefits=self.benefits,
            calories=self.calories,
            fiber=self.fiber,
            vitamin_c=self.vitamin_c,
            potassium=self.potassium,
            sugar_content=self.sugar_content,
            glycemic_index=self.glycemic_index,
            image=self.image,
        )


class PersonalizedFruitPayload(FruitPayload):
    """Fruit payload annotated with a recommendation level."""

    recommendation_level: RecommendationLevel = RecommendationLevel.NEUTRAL
    reasons: list[str] = Field(default_factory=list)

    @field_validator("recommendation_level", mode="before")
    @classmethod
    def _unknown_level_is_neutral(cls, value: object) -> object:
        if isinstance(value, str) and value.lower() in set(RecommendationLevel):
            return value.lower()
        return RecommendationLevel.NEUTRAL

    @field_validator("reasons", mode="before")
    @classmethod
    def _reasons_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    def to_personalized(self) -> PersonalizedFruit:
        return PersonalizedFruit(
            fruit=self.to_domain(),
            recommendation_level=self.recommendation_level,
            reasons=tuple(self.reasons),
        )


class PlanFruitPayload(ApiModel):
    """One fruit serving inside a day of the plan."""

    fruit_name: str
    quantity: int = 1
    time_of_day: TimeOfDay
    benefits: str = ""

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _lower_slot(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value


class DailyPlanPayload(ApiModel):
    """One day of the plan."""

    day: int
    day_name: str | None = None
    fruits: list[PlanFruitPayload] = Field(default_factory=list)


class NutritionalSummaryPayload(ApiModel):
    """Plan-level nutrition summary."""

    total_fruits: int = 0
    variety_count: int = 0
    key_nutrients: list[str] = Field(default_factory=list)
    weekly_benefits: str | None = None

    def to_domain(self) -> NutritionalSummary:
        return NutritionalSummary(
            total_fruits=self.total_fruits,
            variety_count=self.variety_count,
            key_nutrients=tuple(self.key_nutrients),
            weekly_benefits=self.weekly_benefits,
        )


class WeeklyPlanPayload(ApiModel):
    """Weekly plan payload with nested per-day data."""

    id: int
    user_id: int | str
    week: int = 0
    year: int = 0
    plan_data: list[DailyPlanPayload] = Field(default_factory=list)
    explanation: str = ""
    nutritional_summary: NutritionalSummaryPayload | None = None

    def to_domain(self) -> WeeklyPlan:
        entries = tuple(
            DailyFruitScheduleEntry(
                day=day.day,
                time_of_day=fruit.time_of_day,
                fruit_name=fruit.fruit_name,
                quantity=fruit.quantity,
                benefits=fruit.benefits,
            )
            for day in self.plan_data
            for fruit in day.fruits
        )
        summary = (
            self.nutritional_summary.to_domain()
            if self.nutritional_summary is not None
            else None
        )
        return WeeklyPlan(
            id=self.id,
            user_id=str(self.user_id),
            week=self.week,
            year=self.year,
            entries=entries,
            explanation=self.explanation or "",
            nutritional_summary=summary,
        )


class UserPayload(ApiModel):
    """User payload returned by auth and profile endpoints."""

    id: int | str
    email: str
    name: str | None = None
    conditions: list[str] = Field(default_factory=list)

    @field_validator("conditions", mode="before")
    @classmethod
    def _null_conditions(cls, value: object) -> object:
        return [] if value is None else value

    def to_domain(self, name: str | None = None) -> UserProfile:
        return UserProfile(
            id=str(self.id),
            email=self.email,
            name=name or self.name or "",
            conditions=tuple(self.conditions),
        )


class AuthPayload(ApiModel):
    """Login/register response data."""

    user: UserPayload
    token: str
