"""User fruit selection state and its persistence."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from fruit_planner.adapters.api_client import ApiClient, ApiError

_logger = logging.getLogger(__name__)


class SelectionChangeKind(StrEnum):
    """What happened to the selection."""

    ADDED = "added"
    REMOVED = "removed"
    CLEARED = "cleared"
    REPLACED = "replaced"


@dataclass(frozen=True)
class SelectionChange:
    """Snapshot of the selection after a mutation."""

    kind: SelectionChangeKind
    fruit_ids: tuple[int, ...]
    version: int


SelectionListener = Callable[[SelectionChange], None]


class SelectionStore:
    """Ordered set of the fruit ids on the user's list.

    Listeners are notified after every effective mutation. `clear()` always
    notifies, even on an empty list, because it doubles as the signal that
    recommendations should be refreshed.
    """

    def __init__(self, initial: Iterable[int] = ()) -> None:
        self._ids: dict[int, None] = dict.fromkeys(initial)
        self._listeners: list[SelectionListener] = []
        self._version = 0

    @property
    def version(self) -> int:
        """Monotonic counter bumped by every notified mutation."""
        return self._version

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, fruit_id: int) -> None:
        """Add a fruit id; no-op if already present."""
        self.add_many([fruit_id])

    def add_many(self, fruit_ids: Iterable[int]) -> None:
        """Add every id not already present."""
        added = False
        for fruit_id in fruit_ids:
            if fruit_id not in self._ids:
                self._ids[fruit_id] = None
                added = True
        if added:
            self._notify(SelectionChangeKind.ADDED)

    def remove(self, fruit_id: int) -> None:
        """Remove a fruit id; no-op if absent."""
        self.remove_many([fruit_id])

    def remove_many(self, fruit_ids: Iterable[int]) -> None:
        """Remove every listed id that is present."""
        removed = False
        for fruit_id in fruit_ids:
            if fruit_id in self._ids:
                del self._ids[fruit_id]
                removed = True
        if removed:
            self._notify(SelectionChangeKind.REMOVED)

    def clear(self) -> None:
        """Empty the selection."""
        self._ids.clear()
        self._notify(SelectionChangeKind.CLEARED)

    def replace(self, fruit_ids: Iterable[int]) -> None:
        """Swap in a selection loaded from elsewhere, dropping duplicates."""
        self._ids = dict.fromkeys(fruit_ids)
        self._notify(SelectionChangeKind.REPLACED)

    def contains(self, fruit_id: int) -> bool:
        """Return True if the id is selected."""
        return fruit_id in self._ids

    def all(self) -> list[int]:
        """Return selected ids in insertion order."""
        return list(self._ids)

    def __contains__(self, fruit_id: object) -> bool:
        return fruit_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def _notify(self, kind: SelectionChangeKind) -> None:
        self._version += 1
        change = SelectionChange(
            kind=kind, fruit_ids=tuple(self._ids), version=self._version
        )
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.exception("Selection listener failed on %s", kind)


class BackgroundTasks:
    """Tracks coroutines started by selection and condition listeners.

    Work submitted while an event loop is running starts immediately. Work
    submitted outside a loop is queued and started by the next `drain()`.
    """

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[object]] = set()
        self._deferred: list[Callable[[], Awaitable[object]]] = []

    def submit(self, work: Callable[[], Awaitable[object]]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deferred.append(work)
            return
        task = loop.create_task(_run(work))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def __len__(self) -> int:
        return len(self._pending) + len(self._deferred)

    async def drain(self) -> None:
        """Start deferred work and wait until nothing is pending."""
        while self._deferred or self._pending:
            deferred, self._deferred = self._deferred, []
            for work in deferred:
                self.submit(work)
            await asyncio.gather(*list(self._pending))


async def _run(work: Callable[[], Awaitable[object]]) -> object:
    try:
        return await work()
    except Exception:
        _logger.exception("Background selection task failed")
        return None


def call_refresh(refresh: Callable[[], object], tasks: BackgroundTasks) -> None:
    """Call `refresh`, handing an awaitable result to `tasks`."""
    result = refresh()
    if inspect.isawaitable(result):
        awaitable = result
        tasks.submit(lambda: awaitable)


def refresh_on_clear(
    refresh: Callable[[], object], tasks: BackgroundTasks
) -> SelectionListener:
    """Build a listener that calls `refresh` whenever the selection is cleared."""

    def listener(change: SelectionChange) -> None:
        if change.kind is SelectionChangeKind.CLEARED:
            call_refresh(refresh, tasks)

    return listener


@dataclass
class SelectionSyncService:
    """Loads and saves the selection on the backend.

    Saves run one at a time in version order. A save is skipped when a newer
    snapshot is already queued or stored, so a slow earlier request can never
    overwrite a later one.
    """

    api_client: ApiClient
    tasks: BackgroundTasks = field(default_factory=BackgroundTasks)
    _lock: asyncio.Lock | None = field(default=None, init=False)
    _lock_loop: asyncio.AbstractEventLoop | None = field(default=None, init=False)
    _latest_requested: int = field(default=0, init=False)
    _latest_saved: int = field(default=0, init=False)

    async def load(self, user_id: int | str) -> list[int]:
        """Return the stored selection, or an empty list if it can't be read."""
        try:
            payload = await self.api_client.get(f"/user-fruits/{user_id}")
        except ApiError:
            _logger.exception("Failed to load saved fruits for user %s", user_id)
            return []
        return _parse_fruit_ids(payload)

    async def save(self, user_id: int | str, change: SelectionChange) -> bool:
        """Persist a snapshot; return True if it was written."""
        self._latest_requested = max(self._latest_requested, change.version)
        async with self._loop_lock():
            if change.version < self._latest_requested:
                _logger.debug(
                    "Skipping superseded selection save v%s (latest v%s)",
                    change.version,
                    self._latest_requested,
                )
                return False
            if change.version <= self._latest_saved:
                return False
            try:
                await self.api_client.post(
                    "/user-fruits/save",
                    json={"userId": user_id, "fruitIds": list(change.fruit_ids)},
                )
            except ApiError:
                _logger.exception("Failed to save fruits for user %s", user_id)
                return False
            self._latest_saved = change.version
            return True

    def listener(self, user_id: int | str) -> SelectionListener:
        """Build a store listener that queues a save of every snapshot."""

        def on_change(change: SelectionChange) -> None:
            self._latest_requested = max(self._latest_requested, change.version)
            self.tasks.submit(lambda: self.save(user_id, change))

        return on_change

    async def drain(self) -> None:
        """Wait for queued saves to finish."""
        await self.tasks.drain()

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio.Lock binds to the loop that first contends it
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock


def _parse_fruit_ids(payload: object) -> list[int]:
    """Extract fruit ids from the saved-fruits payload."""
    if isinstance(payload, dict):
        payload = payload.get("fruitIds", payload.get("fruits", []))
    if not isinstance(payload, list):
        return []
    ids: list[int] = []
    for item in payload:
        value = item
        if isinstance(item, dict):
            value = item.get("fruitId", item.get("id"))
        if isinstance(value, int) and value not in ids:
            ids.append(value)
    return ids
