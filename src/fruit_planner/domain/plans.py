"""Weekly plan domain models."""

from dataclasses import dataclass
from enum import StrEnum


class TimeOfDay(StrEnum):
    """Slot of the day a serving is planned for."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


@dataclass(frozen=True)
class DailyFruitScheduleEntry:
    """One planned serving."""

    day: int
    time_of_day: TimeOfDay
    fruit_name: str
    quantity: int = 1
    benefits: str = ""


@dataclass(frozen=True)
class NutritionalSummary:
    """Aggregate figures reported for a weekly plan."""

    total_fruits: int
    variety_count: int
    key_nutrients: tuple[str, ...] = ()
    weekly_benefits: str | None = None


@dataclass(frozen=True)
class WeeklyPlan:
    """A generated seven-day plan."""

    id: int
    user_id: str
    week: int
    year: int
    entries: tuple[DailyFruitScheduleEntry, ...]
    explanation: str = ""
    nutritional_summary: NutritionalSummary | None = None


@dataclass(frozen=True)
class PlanPreferences:
    """Generation knobs forwarded to the plan generator."""

    meals_per_day: int = 3
    servings_per_meal: int = 1
    variety: bool = True
