"""View-State Runtime - Drives the pure reducers with asyncio.

A Store owns one view state. Actions are reduced one at a time on the
event loop; the effects a reducer returns are run as asyncio tasks by an
EffectRunner, and the actions they produce are sent back into the same
store. List and map each get their own Store and never share state.

Blocking work (HTTP via requests, cache file I/O) runs in worker threads
so the event loop stays responsive.
"""

import asyncio
import logging
import webbrowser
from collections.abc import AsyncIterator, Callable
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from src.core.actions import (
    DetailAction,
    EarthquakesFailed,
    EarthquakesLoaded,
    FetchEarthquakes,
    OnlineStatusResponse,
    OpenUrl,
    UrlOpeningComplete,
)
from src.core.list_state import ListViewState, reduce_list
from src.core.map_state import MapViewState, reduce_map
from src.coordinator import FetchCoordinator


logger = logging.getLogger(__name__)


S = TypeVar("S")

Reducer = Callable[[S, Any], tuple[S, list[Any]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EffectRunner:
    """Performs effects emitted by the reducers.

    FetchEarthquakes probes reachability first and only then fetches, so
    the online flag is always reduced before the fetch result.
    """

    def __init__(
        self,
        coordinator: FetchCoordinator,
        open_url: Callable[[str], Any] = webbrowser.open,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize effect runner.

        Args:
            coordinator: Fetch-cache coordinator
            open_url: Opens an external link (blocking call)
            clock: Stamps fetch results with their arrival time
        """
        self.coordinator = coordinator
        self.open_url = open_url
        self.clock = clock

    async def run(self, effect: Any) -> AsyncIterator[Any]:
        """Perform an effect, yielding the resulting actions in order."""
        if isinstance(effect, FetchEarthquakes):
            is_online = await asyncio.to_thread(self.coordinator.is_online)
            yield OnlineStatusResponse(is_online=is_online)

            try:
                result = await asyncio.to_thread(self.coordinator.fetch)
            except Exception as e:
                logger.error("Failed to fetch earthquakes: %s", str(e))
                yield EarthquakesFailed(message=str(e))
                return

            yield EarthquakesLoaded(
                earthquakes=tuple(result.earthquakes),
                source=result.source,
                received_at=self.clock(),
            )

        elif isinstance(effect, OpenUrl):
            try:
                await asyncio.to_thread(self.open_url, effect.url)
            except Exception as e:
                logger.error("Failed to open %s: %s", effect.url, str(e))
            yield DetailAction(UrlOpeningComplete())

        else:
            logger.warning("Ignoring unknown effect %r", effect)


class Store(Generic[S]):
    """Single-consumer action loop around a reducer.

    Reduction is synchronous and happens on the event loop thread, so
    actions are applied strictly one at a time. Effects run concurrently
    as tasks; settle() waits until none are left.
    """

    def __init__(self, state: S, reducer: Reducer, runner: EffectRunner) -> None:
        self.state = state
        self._reducer = reducer
        self._runner = runner
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Callable[[S], None]] = []

    def subscribe(self, listener: Callable[[S], None]) -> Callable[[], None]:
        """Call listener with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def send(self, action: Any) -> None:
        """Reduce an action and start its effects."""
        self.state, effects = self._reducer(self.state, action)

        for listener in list(self._listeners):
            listener(self.state)

        for effect in effects:
            task = asyncio.create_task(self._run_effect(effect))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run_effect(self, effect: Any) -> None:
        async for action in self._runner.run(effect):
            await self.send(action)

    @property
    def is_busy(self) -> bool:
        """True while any effect is still running."""
        return bool(self._tasks)

    async def settle(self) -> None:
        """Wait until all effects, including ones they trigger, have finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


def create_list_store(
    runner: EffectRunner,
    state: ListViewState | None = None,
) -> Store[ListViewState]:
    """Store for the earthquake list."""
    return Store(state or ListViewState(), reduce_list, runner)


def create_map_store(
    runner: EffectRunner,
    state: MapViewState | None = None,
) -> Store[MapViewState]:
    """Store for the earthquake map."""
    return Store(state or MapViewState(), reduce_map, runner)
