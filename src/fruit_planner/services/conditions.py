"""Medical condition normalization and persistence."""

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError

from fruit_planner.adapters.api_client import ApiClient, ApiError
from fruit_planner.api.models import UserPayload
from fruit_planner.domain.conditions import COMMON_CONDITIONS
from fruit_planner.domain.users import UserProfile

_WHITESPACE = re.compile(r"\s+")
_MIN_KEYWORD_LENGTH = 3

_logger = logging.getLogger(__name__)


def to_display(stored: str) -> str:
    """Turn `high_blood_pressure` into `High Blood Pressure`."""
    return " ".join(word[:1].upper() + word[1:] for word in stored.split("_"))


def to_storage(display: str) -> str:
    """Turn `High Blood Pressure` into `high_blood_pressure`."""
    return _WHITESPACE.sub("_", display.strip().lower())


def dedupe(conditions: Iterable[str]) -> list[str]:
    """Collapse entries sharing a storage form, keeping the first one seen."""
    seen: dict[str, str] = {}
    for condition in conditions:
        seen.setdefault(to_storage(condition), condition)
    return list(seen.values())


def search_conditions(
    query: str,
    candidates: Sequence[str] = COMMON_CONDITIONS,
    limit: int = 10,
) -> list[str]:
    """Substring matches first, then matches on any keyword of the query."""
    if not query:
        return list(candidates)
    needle = query.lower()
    exact = [c for c in candidates if needle in c.lower()]
    keywords = [k for k in needle.split(" ") if len(k) >= _MIN_KEYWORD_LENGTH]
    related = [
        c
        for c in candidates
        if c not in exact and any(k in c.lower() for k in keywords)
    ]
    return (exact + related)[:limit]


@dataclass
class ConditionService:
    """Saves the user's conditions and tells listeners about the change."""

    api_client: ApiClient
    listeners: list[Callable[[UserProfile], None]] = field(default_factory=list)

    def subscribe(
        self, listener: Callable[[UserProfile], None]
    ) -> Callable[[], None]:
        """Register a callback fired after conditions are saved."""
        self.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    async def update_conditions(self, conditions: Iterable[str]) -> UserProfile:
        """Store conditions given in either form; raises ApiError on failure."""
        stored = [to_storage(c) for c in dedupe(conditions) if c.strip()]
        payload = await self.api_client.put(
            "/users/conditions", json={"conditions": stored}
        )
        user = payload.get("user") if isinstance(payload, dict) else None
        try:
            profile = UserPayload.model_validate(user).to_domain()
        except ValidationError as exc:
            _logger.error("Unexpected response to condition update: %s", payload)
            raise ApiError(
                "Malformed condition update response", endpoint="/users/conditions"
            ) from exc
        _logger.info("Saved %s conditions for user %s", len(stored), profile.id)
        for listener in list(self.listeners):
            listener(profile)
        return profile
