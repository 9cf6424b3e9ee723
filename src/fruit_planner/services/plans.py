"""Weekly plan generation and display shaping."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import ValidationError

from fruit_planner.adapters.api_client import ApiClient, ApiError
from fruit_planner.api.models import WeeklyPlanPayload
from fruit_planner.domain.plans import (
    DailyFruitScheduleEntry,
    NutritionalSummary,
    PlanPreferences,
    TimeOfDay,
    WeeklyPlan,
)

NO_SUMMARY_TEXT = "No nutritional data available"
_SLOT_ORDER = {slot: index for index, slot in enumerate(TimeOfDay)}
_SLOT_LABELS: dict[str, str] = {
    TimeOfDay.MORNING: "Morning",
    TimeOfDay.AFTERNOON: "Afternoon",
    TimeOfDay.EVENING: "Evening",
}
_DAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_logger = logging.getLogger(__name__)


def group_by_day(
    entries: Iterable[DailyFruitScheduleEntry],
) -> list[tuple[int, list[DailyFruitScheduleEntry]]]:
    """Group entries by day, each day ordered morning to evening."""
    days: dict[int, list[DailyFruitScheduleEntry]] = {}
    for entry in entries:
        days.setdefault(entry.day, []).append(entry)
    return [
        (day, sorted(days[day], key=lambda e: _SLOT_ORDER[e.time_of_day]))
        for day in sorted(days)
    ]


def time_of_day_label(slot: TimeOfDay | str) -> str:
    """Capitalized label for a slot; anything else is returned as given."""
    return _SLOT_LABELS.get(slot, slot)


def day_name(day: int) -> str:
    """Weekday name for a 1-based day index (1 is Monday)."""
    if 1 <= day <= len(_DAY_NAMES):
        return _DAY_NAMES[day - 1]
    return f"Day {day}"


def summarize(summary: NutritionalSummary | None) -> str:
    """Render the weekly nutrition paragraph."""
    if summary is None:
        return NO_SUMMARY_TEXT
    nutrients = ", ".join(summary.key_nutrients) or "Various nutrients"
    benefits = summary.weekly_benefits or "General health benefits"
    return (
        f"This week includes {summary.total_fruits} fruits across "
        f"{summary.variety_count} varieties.\n"
        f"Key nutrients: {nutrients}.\n"
        f"Benefits: {benefits}"
    )


@dataclass
class PlanService:
    """Client for the plan generation endpoints."""

    api_client: ApiClient

    async def generate(
        self,
        user_id: int | str,
        selected_fruit_ids: Iterable[int],
        preferences: PlanPreferences | None = None,
    ) -> WeeklyPlan:
        """Generate a new plan; raises ApiError on failure."""
        prefs = preferences or PlanPreferences()
        fruit_ids = list(selected_fruit_ids)
        request = {
            "userId": user_id,
            "selectedFruits": fruit_ids,
            "preferences": {
                "mealsPerDay": prefs.meals_per_day,
                "servingsPerMeal": prefs.servings_per_meal,
                "variety": prefs.variety,
            },
        }
        _logger.info(
            "Generating weekly plan: user=%s fruits=%s",
            user_id,
            len(fruit_ids),
        )
        payload = await self.api_client.post("/plans/generate", json=request)
        plan = _plan_from_payload(payload)
        if plan is None:
            raise ApiError("Malformed plan response", endpoint="/plans/generate")
        return plan

    async def current(self, user_id: int | str) -> WeeklyPlan | None:
        """Return this week's plan, or None if there is none or it can't load."""
        try:
            payload = await self.api_client.get(f"/plans/current/{user_id}")
        except ApiError as exc:
            if "No plan found" not in exc.message and exc.status_code != 404:
                _logger.exception("Failed to load current plan for user %s", user_id)
            return None
        return _plan_from_payload(payload)

    async def list_for_user(self, user_id: int | str) -> list[WeeklyPlan]:
        """Return all of a user's plans, or an empty list on failure."""
        try:
            payload = await self.api_client.get(f"/plans/user/{user_id}")
        except ApiError:
            _logger.exception("Failed to load plans for user %s", user_id)
            return []
        items = payload.get("plans", []) if isinstance(payload, dict) else []
        plans = [_plan_from_payload({"plan": item}) for item in items]
        return [plan for plan in plans if plan is not None]

    async def delete(self, plan_id: int) -> None:
        """Delete a plan; raises ApiError on failure."""
        await self.api_client.delete(f"/plans/{plan_id}")
        _logger.info("Deleted plan %s", plan_id)


def _plan_from_payload(payload: object) -> WeeklyPlan | None:
    """Parse a `{plan: {...}}` payload into a WeeklyPlan."""
    raw = payload.get("plan") if isinstance(payload, dict) else None
    if not isinstance(raw, dict):
        return None
    if raw.get("nutritionalSummary") is None and payload.get("nutritionalSummary"):
        raw = {**raw, "nutritionalSummary": payload["nutritionalSummary"]}
    try:
        return WeeklyPlanPayload.model_validate(raw).to_domain()
    except ValidationError:
        _logger.warning("Discarding malformed plan payload: %s", raw)
        return None

