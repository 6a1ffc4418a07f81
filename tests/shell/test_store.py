"""Tests for the asyncio view-state runtime.

Each test builds a Store over in-memory components and drives it with
asyncio.run(), asserting on the state and on the order of reduced actions.
"""

import asyncio
from datetime import timedelta

import pytest

from src.coordinator import FetchCoordinator
from src.core.actions import (
    DataSource,
    DetailAction,
    EarthquakeSelected,
    EarthquakesFailed,
    EarthquakesLoaded,
    FetchEarthquakes,
    OnAppear,
    OnlineStatusResponse,
    OpenLink,
    OpenUrl,
    Refresh,
    UrlOpeningComplete,
)
from src.core.errors import TransportError
from src.core.geo import DEFAULT_MAP_REGION
from src.core.list_state import ListViewState, reduce_list
from src.shell.cache_store import InMemoryCacheStore
from src.shell.usgs_client import StaticEarthquakeSource
from src.store import EffectRunner, Store, create_list_store, create_map_store


def _coordinator(now, earthquakes=None, error=None, online=True, cached=None, saved_at=None):
    source = StaticEarthquakeSource(earthquakes, error=error, online=online)
    cache = InMemoryCacheStore(cached, saved_at=saved_at, clock=lambda: now)
    return FetchCoordinator(source, cache)


def _runner(coordinator, now, opened=None):
    def open_url(url):
        if opened is not None:
            opened.append(url)
        return True

    return EffectRunner(coordinator, open_url=open_url, clock=lambda: now)


def _recording_reducer(reducer, log):
    def _reduce(state, action):
        log.append(action)
        return reducer(state, action)
    return _reduce


async def _collect(runner, effect):
    return [action async for action in runner.run(effect)]


class TestEffectRunner:
    """Tests for EffectRunner.run()."""

    def test_fetch_probes_before_loading(self, make_earthquake, now):
        quakes = [make_earthquake()]
        runner = _runner(_coordinator(now, quakes), now)

        actions = asyncio.run(_collect(runner, FetchEarthquakes()))

        assert actions == [
            OnlineStatusResponse(is_online=True),
            EarthquakesLoaded(
                earthquakes=tuple(quakes),
                source=DataSource.NETWORK,
                received_at=now,
            ),
        ]

    def test_fetch_failure_becomes_failed_action(self, now):
        runner = _runner(
            _coordinator(now, error=TransportError("Connection refused"), online=False),
            now,
        )

        actions = asyncio.run(_collect(runner, FetchEarthquakes()))

        assert actions == [
            OnlineStatusResponse(is_online=False),
            EarthquakesFailed(message="Connection refused"),
        ]

    def test_open_url_completes(self, now):
        opened = []
        runner = _runner(_coordinator(now), now, opened)

        actions = asyncio.run(_collect(runner, OpenUrl(url="https://example.com/e")))

        assert opened == ["https://example.com/e"]
        assert actions == [DetailAction(UrlOpeningComplete())]

    def test_open_url_failure_still_completes(self, now):
        def broken(url):
            raise RuntimeError("no browser")

        runner = EffectRunner(_coordinator(now), open_url=broken)

        actions = asyncio.run(_collect(runner, OpenUrl(url="https://example.com/e")))

        assert actions == [DetailAction(UrlOpeningComplete())]


class TestListStore:
    """End-to-end refresh cycles on the list store."""

    def test_on_appear_loads_earthquakes(self, make_earthquake, now):
        quakes = [
            make_earthquake(id="old", time=now - timedelta(hours=1)),
            make_earthquake(id="new", time=now),
        ]
        store = create_list_store(_runner(_coordinator(now, quakes), now))

        async def scenario():
            await store.send(OnAppear())
            assert store.state.is_loading is True
            assert store.is_busy is True
            await store.settle()

        asyncio.run(scenario())

        assert store.is_busy is False
        assert store.state.is_loading is False
        assert [e.id for e in store.state.earthquakes] == ["new", "old"]
        assert store.state.last_updated == now
        assert store.state.data_source is DataSource.NETWORK
        assert store.state.is_using_cached_data is False

    def test_online_status_is_reduced_before_result(self, make_earthquake, now):
        log = []
        store = Store(
            ListViewState(),
            _recording_reducer(reduce_list, log),
            _runner(_coordinator(now, [make_earthquake()]), now),
        )

        async def scenario():
            await store.send(Refresh())
            await store.settle()

        asyncio.run(scenario())

        assert [type(a) for a in log] == [Refresh, OnlineStatusResponse, EarthquakesLoaded]

    def test_offline_with_stale_cache(self, make_earthquake, now):
        cached = [make_earthquake(id="cached")]
        coordinator = _coordinator(
            now,
            error=TransportError("offline"),
            online=False,
            cached=cached,
            saved_at=now - timedelta(days=1),
        )
        store = create_list_store(_runner(coordinator, now))

        async def scenario():
            await store.send(OnAppear())
            await store.settle()

        asyncio.run(scenario())

        assert store.state.is_online is False
        assert store.state.is_using_cached_data is True
        assert store.state.data_source is DataSource.STALE_CACHE
        assert store.state.error_message is None

    def test_failure_without_cache_sets_error(self, now):
        coordinator = _coordinator(now, error=TransportError("Connection refused"), online=False)
        store = create_list_store(_runner(coordinator, now))

        async def scenario():
            await store.send(OnAppear())
            await store.settle()

        asyncio.run(scenario())

        assert store.state.is_loading is False
        assert store.state.earthquakes == ()
        assert store.state.error_message == "Failed to load earthquakes: Connection refused"

    def test_concurrent_refreshes_fetch_once(self, make_earthquake, now):
        coordinator = _coordinator(now, [make_earthquake()])
        store = create_list_store(_runner(coordinator, now))

        async def scenario():
            await store.send(Refresh())
            await store.send(Refresh())
            await store.send(Refresh())
            await store.settle()

        asyncio.run(scenario())

        assert coordinator.source.fetch_count == 1
        assert coordinator.source.probe_count == 1

    def test_refresh_after_completion_runs_again(self, make_earthquake, now):
        coordinator = _coordinator(now, [make_earthquake()])
        store = create_list_store(_runner(coordinator, now))

        async def scenario():
            await store.send(Refresh())
            await store.settle()
            await store.send(Refresh())
            await store.settle()

        asyncio.run(scenario())

        assert store.state.is_loading is False
        assert coordinator.source.probe_count == 2

    def test_open_link_round_trip(self, make_earthquake, now):
        eq = make_earthquake()
        opened = []
        store = create_list_store(_runner(_coordinator(now), now, opened))

        async def scenario():
            await store.send(EarthquakeSelected(eq))
            await store.send(DetailAction(OpenLink()))
            assert store.state.detail.is_opening_url is True
            await store.settle()

        asyncio.run(scenario())

        assert opened == [eq.url]
        assert store.state.detail.is_opening_url is False

    def test_listeners_see_every_state(self, make_earthquake, now):
        store = create_list_store(_runner(_coordinator(now, [make_earthquake()]), now))
        seen = []
        unsubscribe = store.subscribe(lambda state: seen.append(state.is_loading))

        async def scenario():
            await store.send(OnAppear())
            await store.settle()

        asyncio.run(scenario())
        unsubscribe()

        assert seen == [True, True, False]


class TestMapStore:
    """End-to-end refresh on the map store."""

    def test_load_updates_region(self, make_earthquake, now):
        quakes = [
            make_earthquake(id="a", latitude=34.0, longitude=-118.0),
            make_earthquake(id="b", latitude=36.0, longitude=-116.0),
        ]
        store = create_map_store(_runner(_coordinator(now, quakes), now))

        async def scenario():
            await store.send(OnAppear())
            await store.settle()

        asyncio.run(scenario())

        assert store.state.region != DEFAULT_MAP_REGION
        assert store.state.region.center_latitude == pytest.approx(35.0)

    def test_list_and_map_stores_are_independent(self, make_earthquake, now):
        runner = _runner(_coordinator(now, [make_earthquake()]), now)
        list_store = create_list_store(runner)
        map_store = create_map_store(runner)

        async def scenario():
            await list_store.send(OnAppear())
            await list_store.settle()

        asyncio.run(scenario())

        assert len(list_store.state.earthquakes) == 1
        assert map_store.state.earthquakes == ()
