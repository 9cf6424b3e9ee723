"""Dependency container wiring for the client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fruit_planner.adapters.api_client import ApiClient, HttpxApiClient
from fruit_planner.config import Settings
from fruit_planner.services.auth import AuthService
from fruit_planner.services.conditions import ConditionService
from fruit_planner.services.plans import PlanService
from fruit_planner.services.recommendations import RecommendationService
from fruit_planner.services.selection import (
    BackgroundTasks,
    SelectionStore,
    SelectionSyncService,
    call_refresh,
    refresh_on_clear,
)
from fruit_planner.services.storage import InMemoryStore, KeyValueStore


@dataclass
class AppContainer:
    """Holds the session's services and owned state."""

    settings: Settings
    store: KeyValueStore
    api_client: ApiClient
    auth_service: AuthService
    recommendation_service: RecommendationService
    condition_service: ConditionService
    plan_service: PlanService
    selection: SelectionStore
    selection_sync: SelectionSyncService
    background: BackgroundTasks
    close_resources: Callable[[], Awaitable[None]]

    def attach_user(
        self, user_id: int | str, refresh: Callable[[], object] | None = None
    ) -> Callable[[], None]:
        """Persist selection changes for a user and optionally refresh on demand.

        `refresh` is called when the selection is cleared or the user's
        conditions are saved. It may be a coroutine function; its coroutine
        runs on `background` and is awaited by `background.drain()`.
        Returns a callable that detaches everything.
        """
        detach = [self.selection.subscribe(self.selection_sync.listener(user_id))]
        if refresh is not None:
            on_clear = refresh_on_clear(refresh, self.background)
            detach.append(self.selection.subscribe(on_clear))
            detach.append(
                self.condition_service.subscribe(
                    lambda _user: call_refresh(refresh, self.background)
                )
            )

        def detach_all() -> None:
            for undo in detach:
                undo()

        return detach_all


def build_container(
    settings: Settings | None = None, store: KeyValueStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_store = store if store is not None else InMemoryStore()
    api_client = HttpxApiClient.create(
        base_url=resolved_settings.resolved_api_base_url(),
        store=resolved_store,
        timeout=resolved_settings.api_timeout_seconds,
    )
    background = BackgroundTasks()

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=resolved_store,
        api_client=api_client,
        auth_service=AuthService(api_client, resolved_store),
        recommendation_service=RecommendationService(api_client),
        condition_service=ConditionService(api_client),
        plan_service=PlanService(api_client),
        selection=SelectionStore(),
        selection_sync=SelectionSyncService(api_client, tasks=background),
        background=background,
        close_resources=close_resources,
    )
