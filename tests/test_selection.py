"""Tests for the selection store and its backend sync."""

import asyncio
from dataclasses import dataclass
from typing import Any

from fruit_planner.adapters.api_client import ApiError
from fruit_planner.services.selection import (
    BackgroundTasks,
    SelectionChange,
    SelectionChangeKind,
    SelectionStore,
    SelectionSyncService,
    refresh_on_clear,
)
from tests.conftest import FakeApiClient


def test_add_is_idempotent_and_remove_clears_membership() -> None:
    store = SelectionStore()

    store.add(5)
    store.add(5)
    store.remove(5)

    assert not store.contains(5)
    assert store.all() == []


def test_all_returns_members_in_insertion_order() -> None:
    store = SelectionStore()

    store.add(6)
    store.add(5)

    assert set(store.all()) == {5, 6}
    assert store.all() == [6, 5]
    assert len(store) == 2
    assert 6 in store


def test_remove_absent_id_is_silent_noop() -> None:
    store = SelectionStore([1])
    seen: list[SelectionChange] = []
    store.subscribe(seen.append)

    store.remove(99)
    store.add(1)

    assert store.all() == [1]
    assert seen == []
    assert store.version == 0


def test_listeners_receive_snapshots_with_increasing_versions() -> None:
    store = SelectionStore()
    seen: list[SelectionChange] = []
    store.subscribe(seen.append)

    store.add(1)
    store.add_many([2, 3, 2])
    store.remove_many([1, 42])
    store.replace([7, 7, 8])

    assert [change.kind for change in seen] == [
        SelectionChangeKind.ADDED,
        SelectionChangeKind.ADDED,
        SelectionChangeKind.REMOVED,
        SelectionChangeKind.REPLACED,
    ]
    assert [change.version for change in seen] == [1, 2, 3, 4]
    assert seen[1].fruit_ids == (1, 2, 3)
    assert seen[-1].fruit_ids == (7, 8)


def test_clear_always_notifies_and_triggers_refresh() -> None:
    store = SelectionStore()
    refreshes: list[str] = []
    store.subscribe(
        refresh_on_clear(lambda: refreshes.append("refresh"), BackgroundTasks())
    )

    store.add(1)
    store.clear()
    store.clear()

    assert store.all() == []
    assert refreshes == ["refresh", "refresh"]


def test_failing_listener_does_not_block_the_others() -> None:
    store = SelectionStore()
    seen: list[SelectionChange] = []

    def broken(_change: SelectionChange) -> None:
        raise RuntimeError("listener down")

    store.subscribe(broken)
    store.subscribe(seen.append)

    store.add(1)

    assert store.all() == [1]
    assert [change.fruit_ids for change in seen] == [(1,)]


def test_async_refresh_runs_when_drained() -> None:
    tasks = BackgroundTasks()
    refreshes: list[str] = []

    async def refresh() -> None:
        refreshes.append("refresh")

    async def scenario() -> None:
        store = SelectionStore([1])
        store.subscribe(refresh_on_clear(refresh, tasks))
        store.clear()
        await tasks.drain()

    asyncio.run(scenario())

    assert refreshes == ["refresh"]
    assert len(tasks) == 0


def test_unsubscribe_stops_notifications() -> None:
    store = SelectionStore()
    seen: list[SelectionChange] = []
    unsubscribe = store.subscribe(seen.append)

    store.add(1)
    unsubscribe()
    store.add(2)

    assert len(seen) == 1


def test_load_parses_saved_fruits() -> None:
    client = FakeApiClient(
        responses={
            ("GET", "/user-fruits/7"): [
                {"fruitId": 3},
                {"fruitId": 1},
                {"fruitId": 3},
            ]
        }
    )
    sync = SelectionSyncService(client)

    assert asyncio.run(sync.load(7)) == [3, 1]


def test_load_failure_returns_empty_list() -> None:
    client = FakeApiClient(
        responses={("GET", "/user-fruits/7"): ApiError("offline")}
    )
    sync = SelectionSyncService(client)

    assert asyncio.run(sync.load(7)) == []


def test_save_posts_snapshot_and_skips_older_versions() -> None:
    client = FakeApiClient()
    sync = SelectionSyncService(client)
    newer = SelectionChange(SelectionChangeKind.ADDED, (1, 2), version=2)
    older = SelectionChange(SelectionChangeKind.ADDED, (1,), version=1)

    async def scenario() -> tuple[bool, bool]:
        return await sync.save(7, newer), await sync.save(7, older)

    saved_newer, saved_older = asyncio.run(scenario())

    assert saved_newer is True
    assert saved_older is False
    assert client.calls == [
        ("POST", "/user-fruits/save", {"userId": 7, "fruitIds": [1, 2]})
    ]


def test_listener_persists_only_latest_snapshot_of_a_burst() -> None:
    client = FakeApiClient()
    sync = SelectionSyncService(client)

    async def scenario() -> None:
        store = SelectionStore()
        store.subscribe(sync.listener(7))
        store.add(1)
        store.add(2)
        store.add(3)
        await sync.drain()

    asyncio.run(scenario())

    assert client.calls == [
        ("POST", "/user-fruits/save", {"userId": 7, "fruitIds": [1, 2, 3]})
    ]


def test_save_failure_is_reported_not_raised() -> None:
    client = FakeApiClient(
        responses={("POST", "/user-fruits/save"): ApiError("boom", status_code=500)}
    )
    sync = SelectionSyncService(client)
    change = SelectionChange(SelectionChangeKind.CLEARED, (), version=1)

    assert asyncio.run(sync.save(7, change)) is False


def test_changes_made_outside_a_loop_are_saved_on_drain() -> None:
    client = FakeApiClient()
    sync = SelectionSyncService(client)
    store = SelectionStore()
    store.subscribe(sync.listener(7))

    store.add(1)
    store.add(2)

    assert store.all() == [1, 2]
    assert client.calls == []
    assert len(sync.tasks) == 2

    asyncio.run(sync.drain())

    assert client.calls == [
        ("POST", "/user-fruits/save", {"userId": 7, "fruitIds": [1, 2]})
    ]
    assert len(sync.tasks) == 0


@dataclass
class YieldingApiClient(FakeApiClient):
    """Fake client that gives up the loop before answering a POST."""

    async def post(self, endpoint: str, json: object | None = None) -> Any:
        await asyncio.sleep(0)
        return await super().post(endpoint, json=json)


def test_sync_service_survives_successive_event_loops() -> None:
    client = YieldingApiClient()
    sync = SelectionSyncService(client)

    async def burst(first: int) -> None:
        changes = [
            SelectionChange(SelectionChangeKind.ADDED, (first,), version=first),
            SelectionChange(
                SelectionChangeKind.ADDED, (first, first + 1), version=first + 1
            ),
        ]
        await asyncio.gather(*(sync.save(7, change) for change in changes))

    asyncio.run(burst(1))
    asyncio.run(burst(3))

    saved = [call[2]["fruitIds"] for call in client.calls]
    assert saved == [[1], [1, 2], [3], [3, 4]]
