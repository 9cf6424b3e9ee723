"""Tests for container wiring."""

import asyncio

from fruit_planner.containers import build_container
from fruit_planner.domain.users import UserProfile
from tests.conftest import FakeApiClient


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.plan_service.api_client is container.api_client
    assert container.selection.all() == []
    asyncio.run(container.close_resources())


def test_attach_user_wires_sync_and_refresh(settings) -> None:
    container = build_container(settings)
    fake = FakeApiClient()
    container.selection_sync.api_client = fake
    refreshes: list[str] = []

    async def scenario() -> None:
        detach = container.attach_user(7, refresh=lambda: refreshes.append("r"))
        container.selection.add(2)
        container.selection.clear()
        for listener in container.condition_service.listeners:
            listener(UserProfile(id="7", email="a@b.c", name="A"))
        await container.selection_sync.drain()
        detach()
        container.selection.add(3)

    asyncio.run(scenario())
    asyncio.run(container.close_resources())

    assert refreshes == ["r", "r"]
    assert fake.calls == [
        ("POST", "/user-fruits/save", {"userId": 7, "fruitIds": []})
    ]
    assert container.condition_service.listeners == []


def test_selection_changes_outside_a_loop_still_refresh(settings) -> None:
    container = build_container(settings)
    fake = FakeApiClient()
    container.selection_sync.api_client = fake
    refreshes: list[str] = []
    container.attach_user(7, refresh=lambda: refreshes.append("r"))

    container.selection.add(4)
    container.selection.clear()

    assert container.selection.all() == []
    assert refreshes == ["r"]

    asyncio.run(container.background.drain())
    asyncio.run(container.close_resources())

    assert fake.calls == [
        ("POST", "/user-fruits/save", {"userId": 7, "fruitIds": []})
    ]


def test_attach_user_awaits_async_refresh(settings) -> None:
    container = build_container(settings)
    container.selection_sync.api_client = FakeApiClient()
    refreshes: list[str] = []

    async def refresh() -> None:
        refreshes.append("r")

    container.attach_user(7, refresh=refresh)
    container.selection.clear()

    async def scenario() -> None:
        for listener in container.condition_service.listeners:
            listener(UserProfile(id="7", email="a@b.c", name="A"))
        await container.background.drain()

    asyncio.run(scenario())
    asyncio.run(container.close_resources())

    assert refreshes == ["r", "r"]
