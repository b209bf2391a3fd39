"""Tests for debounced, failure-tolerant place lookup."""

import asyncio

import pytest

from fare_estimator.adapters.cache import InMemoryCache, NullCache
from fare_estimator.config import GeocodingConfig
from fare_estimator.domain.errors import LocationUnavailableError
from fare_estimator.domain.models import LatLng, Location, LocationFailureReason
from fare_estimator.services.geocoding_resolver import GeocodingResolver

from tests.fakes import FakePlaceSearch


def make_resolver(provider, cache=None, debounce_ms=10):
    return GeocodingResolver(
        provider=provider,
        config=GeocodingConfig(debounce_ms=debounce_ms),
        cache=cache if cache is not None else NullCache(),
    )


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_query_short_circuits(query):
    provider = FakePlaceSearch([Location("Makati", 14.5547, 121.0244)])
    resolver = make_resolver(provider)

    async def scenario():
        future = resolver.lookup(query, "origin")
        assert future.done()
        assert resolver.scheduler.pending_keys() == []
        return await future

    assert asyncio.run(scenario()) == []
    assert provider.queries == []


def test_lookup_returns_provider_results(makati):
    provider = FakePlaceSearch([makati])
    resolver = make_resolver(provider)

    async def scenario():
        return await asyncio.wait_for(resolver.lookup("  Makati ", "origin"), timeout=1)

    assert asyncio.run(scenario()) == [makati]
    assert provider.queries == ["Makati"]


def test_typing_burst_sends_one_request(makati):
    provider = FakePlaceSearch([makati])
    resolver = make_resolver(provider, debounce_ms=30)

    async def scenario():
        for prefix in ("M", "Ma", "Mak", "Makati"):
            future = resolver.lookup(prefix, "origin")
        return await asyncio.wait_for(future, timeout=1)

    assert asyncio.run(scenario()) == [makati]
    assert provider.queries == ["Makati"]


def test_provider_failure_degrades_to_empty_list():
    provider = FakePlaceSearch(error=True)
    resolver = make_resolver(provider)

    async def scenario():
        return await asyncio.wait_for(resolver.lookup("Makati", "origin"), timeout=1)

    assert asyncio.run(scenario()) == []
    assert provider.queries == ["Makati"]


def test_unexpected_provider_exception_degrades_to_empty_list():
    class Exploding:
        def search(self, query):
            raise KeyError("display_name")

    resolver = make_resolver(Exploding())

    assert asyncio.run(resolver.search_now("Makati")) == []


def test_results_are_cached_per_normalized_query(makati):
    provider = FakePlaceSearch([makati])
    resolver = make_resolver(provider, cache=InMemoryCache(name="test"))

    async def scenario():
        first = await resolver.search_now("Makati")
        second = await resolver.search_now("  makati ")
        return first, second

    first, second = asyncio.run(scenario())

    assert first == second == [makati]
    assert provider.queries == ["Makati"]


def test_failures_are_not_cached():
    provider = FakePlaceSearch(error=True)
    resolver = make_resolver(provider, cache=InMemoryCache(name="test"))

    async def scenario():
        await resolver.search_now("Makati")
        await resolver.search_now("Makati")

    asyncio.run(scenario())
    assert provider.queries == ["Makati", "Makati"]


def test_origin_and_destination_lookups_are_independent(makati, quezon_city):
    class ByQuery(FakePlaceSearch):
        def search(self, query):
            self.queries.append(query)
            return [makati] if query == "Makati" else [quezon_city]

    resolver = make_resolver(ByQuery())

    async def scenario():
        origin = resolver.lookup("Makati", "origin")
        destination = resolver.lookup("Quezon City", "destination")
        return await asyncio.wait_for(asyncio.gather(origin, destination), timeout=1)

    assert asyncio.run(scenario()) == [[makati], [quezon_city]]


class FakeDevice:
    def __init__(self, coordinates=None, reason=None):
        self.coordinates = coordinates
        self.reason = reason

    async def get_current_coordinates(self):
        if self.reason is not None:
            raise LocationUnavailableError("location unavailable", reason=self.reason)
        return self.coordinates


@pytest.mark.parametrize("reason", list(LocationFailureReason))
def test_locate_current_without_device_position(reason):
    provider = FakePlaceSearch()
    resolver = make_resolver(provider)

    assert asyncio.run(resolver.locate_current(FakeDevice(reason=reason))) is None
    assert provider.reverse_calls == []


def test_locate_current_uses_reverse_lookup(makati):
    provider = FakePlaceSearch([makati])
    resolver = make_resolver(provider)
    device = FakeDevice(coordinates=LatLng(14.5547, 121.0244))

    assert asyncio.run(resolver.locate_current(device)) == makati
    assert provider.reverse_calls == [LatLng(14.5547, 121.0244)]


def test_locate_current_falls_back_to_coordinates():
    resolver = make_resolver(FakePlaceSearch(error=True))
    device = FakeDevice(coordinates=LatLng(14.5547, 121.0244))

    place = asyncio.run(resolver.locate_current(device))

    assert place == Location("14.55470, 121.02440", 14.5547, 121.0244)


def test_callers_cannot_alter_cached_suggestions(makati):
    provider = FakePlaceSearch([makati])
    resolver = make_resolver(provider, cache=InMemoryCache(name="test"))

    async def scenario():
        first = await resolver.search_now("Makati")
        first.clear()
        second = await resolver.search_now("Makati")
        second.append(makati)
        third = await resolver.search_now("Makati")
        return second, third

    second, third = asyncio.run(scenario())

    assert third == [makati]
    assert second is not third
    assert provider.queries == ["Makati"]
