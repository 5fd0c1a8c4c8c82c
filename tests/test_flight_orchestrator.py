import asyncio
from datetime import date

import pytest

from FlightCache import FlightCache
from FlightOrchestrator import (
    DataProvider,
    HybridStrategy,
    LiveStrategy,
    SyntheticStrategy,
    create_strategy,
    fetch_routes,
)
from data.Flight import BUDGET_FARE_CLASS, FlightSource
from providers.FlightProvider import TotalProviderFailure

FROM = date(2025, 6, 1)
TO = date(2025, 6, 3)


@pytest.mark.asyncio
async def test_fetch_routes_skips_failed_route(fake_provider, make_flight):
    provider = fake_provider(flights={"LAS": [make_flight()]}, fail_routes={"MCO"})
    flights = await fetch_routes(provider, "CMH", FROM)

    assert [f.destination.code for f in flights] == ["LAS"]
    assert [c[1] for c in provider.calls] == ["LAS", "MCO"]


@pytest.mark.asyncio
async def test_fetch_routes_raises_when_every_route_fails(fake_provider):
    with pytest.raises(TotalProviderFailure):
        await fetch_routes(fake_provider(fail_all=True), "CMH", FROM)


@pytest.mark.asyncio
async def test_fetch_routes_never_searches_the_origin(fake_provider):
    provider = fake_provider()
    await fetch_routes(provider, "CMH", FROM, destinations=["CMH", "DEN"])
    assert provider.calls == [("CMH", "DEN", FROM)]


@pytest.mark.asyncio
async def test_synthetic_strategy_scores_and_never_caches(synthetic):
    outcome = await SyntheticStrategy(synthetic).search("CMH", FROM, TO, ["LAS"])

    assert outcome.flights
    assert outcome.cached is False
    assert outcome.timestamp is None
    assert all(f.source == FlightSource.MOCK for f in outcome.flights)
    assert any(f.is_deal for f in outcome.flights)


@pytest.mark.asyncio
async def test_live_second_search_is_a_cache_hit_with_same_timestamp(cache, clock, synthetic, fake_provider, make_flight):
    provider = fake_provider(flights={"LAS": [make_flight()]})
    strategy = LiveStrategy(cache, provider, synthetic)

    first = await strategy.search("CMH", FROM, TO)
    clock.advance(120)
    second = await strategy.search("CMH", FROM, TO)

    assert first.cached is False
    assert second.cached is True
    assert first.timestamp == second.timestamp == int((clock.now - 120) * 1000)
    assert [f.key for f in second.flights] == [f.key for f in first.flights]
    assert len(provider.calls) == 2  # LAS and MCO, once


@pytest.mark.asyncio
async def test_live_expired_entry_is_fetched_again(cache, clock, synthetic, fake_provider, make_flight):
    provider = fake_provider(flights={"LAS": [make_flight()]})
    strategy = LiveStrategy(cache, provider, synthetic)

    await strategy.search("CMH", FROM, TO)
    clock.advance(cache.ttl + 1)
    outcome = await strategy.search("CMH", FROM, TO)

    assert outcome.cached is False
    assert len(provider.calls) == 4


@pytest.mark.asyncio
async def test_live_dedups_and_scores(cache, synthetic, fake_provider, make_flight):
    provider = fake_provider(
        flights={"LAS": [make_flight(id="a", price=20000), make_flight(id="b", price=15000)]},
        default_destinations=["LAS"],
    )
    outcome = await LiveStrategy(cache, provider, synthetic).search("CMH", FROM, TO)

    [flight] = outcome.flights
    assert flight.id == "b"
    assert flight.deal_score == 100


@pytest.mark.asyncio
async def test_live_total_failure_falls_back_without_caching(cache, synthetic, fake_provider):
    outcome = await LiveStrategy(cache, fake_provider(fail_all=True), synthetic).search("CMH", FROM, TO)

    assert outcome.fallback is True
    assert outcome.cached is False
    assert outcome.flights
    assert all(f.source == FlightSource.MOCK for f in outcome.flights)
    assert cache.stats().size == 0


@pytest.mark.asyncio
async def test_narrower_search_served_from_broader_cache_entry(cache, synthetic, fake_provider, make_flight):
    provider = fake_provider(flights={
        "LAS": [make_flight(destination="LAS")],
        "MCO": [make_flight(destination="MCO")],
    })
    strategy = LiveStrategy(cache, provider, synthetic)

    await strategy.search("CMH", FROM, TO)
    outcome = await strategy.search("CMH", FROM, TO, destinations=["LAS"])

    assert outcome.cached is True
    assert {f.destination.code for f in outcome.flights} == {"LAS", "MCO"}


@pytest.mark.asyncio
async def test_hybrid_queries_both_sources_concurrently(cache, synthetic, fake_provider, make_flight):
    primary_started = asyncio.Event()
    secondary_started = asyncio.Event()

    class Waiting(fake_provider):
        def __init__(self, mine, other, **kwargs):
            super().__init__(**kwargs)
            self.mine, self.other = mine, other

        async def search_one_route(self, origin, destination, departure_date):
            self.mine.set()
            await self.other.wait()
            return await super().search_one_route(origin, destination, departure_date)

    primary = Waiting(primary_started, secondary_started, name="serpapi", flights={"LAS": [make_flight()]})
    secondary = Waiting(secondary_started, primary_started, name="southwest")
    strategy = HybridStrategy(cache, primary, secondary, synthetic)

    outcome = await asyncio.wait_for(strategy.search("CMH", FROM, TO), timeout=2)
    assert len(outcome.flights) == 1


@pytest.mark.asyncio
async def test_hybrid_merges_and_reports_sources(cache, synthetic, fake_provider, make_flight):
    primary = fake_provider(name="serpapi", flights={"LAS": [
        make_flight(id="shared", price=20000),
        make_flight(id="serp-only", flight_number="WN 2", price=10000),
    ]})
    secondary = fake_provider(name="southwest", flights={"LAS": [
        make_flight(id="sw-shared", price=12000),
        make_flight(id="sw-only", flight_number="WN 3", price=25000),
    ]})
    outcome = await HybridStrategy(cache, primary, secondary, synthetic).search("CMH", FROM, TO)

    assert outcome.sources.model_dump() == {"serpapi": 1, "southwest": 1, "both": 1}
    # budget fares lead the price ordering
    assert [f.id for f in outcome.flights] == ["sw-shared", "sw-only", "serp-only"]
    assert outcome.flights[0].fare_class == BUDGET_FARE_CLASS
    assert outcome.flights[0].source == FlightSource.BOTH

    hit = await HybridStrategy(cache, primary, secondary, synthetic).search("CMH", FROM, TO)
    assert hit.cached is True
    assert hit.sources == outcome.sources


@pytest.mark.asyncio
async def test_hybrid_one_failed_branch_uses_the_other(cache, synthetic, fake_provider, make_flight):
    primary = fake_provider(name="serpapi", fail_all=True)
    secondary = fake_provider(name="southwest", flights={"LAS": [make_flight()]})

    outcome = await HybridStrategy(cache, primary, secondary, synthetic).search("CMH", FROM, TO)

    assert outcome.fallback is False
    assert [f.source for f in outcome.flights] == [FlightSource.SOUTHWEST]
    assert cache.stats().size == 1


@pytest.mark.asyncio
async def test_hybrid_both_branches_failing_falls_back(cache, synthetic, fake_provider):
    primary = fake_provider(name="serpapi", fail_all=True)
    secondary = fake_provider(name="southwest", fail_all=True)

    outcome = await HybridStrategy(cache, primary, secondary, synthetic).search("CMH", FROM, TO, ["LAS"])

    assert outcome.fallback is True
    assert outcome.cached is False
    assert outcome.flights
    assert {f.destination.code for f in outcome.flights} == {"LAS"}
    assert cache.stats().size == 0


@pytest.mark.asyncio
async def test_hybrid_empty_but_healthy_result_is_cached(cache, synthetic, fake_provider):
    strategy = HybridStrategy(cache, fake_provider(name="serpapi"), fake_provider(name="southwest"), synthetic)

    outcome = await strategy.search("CMH", FROM, TO)

    assert outcome.flights == []
    assert outcome.fallback is False
    assert cache.stats().size == 1
    assert (await strategy.search("CMH", FROM, TO)).cached is True


def test_create_strategy_picks_by_kind(cache, synthetic, fake_provider):
    primary, secondary = fake_provider(), fake_provider()

    assert isinstance(create_strategy("mock", cache, synthetic), SyntheticStrategy)
    assert isinstance(create_strategy(DataProvider.LIVE, cache, synthetic, primary), LiveStrategy)
    assert isinstance(create_strategy("hybrid", cache, synthetic, primary, secondary), HybridStrategy)


def test_create_strategy_rejects_missing_providers(cache, synthetic, fake_provider):
    with pytest.raises(ValueError):
        create_strategy("live", cache, synthetic)
    with pytest.raises(ValueError):
        create_strategy("hybrid", cache, synthetic, fake_provider())
    with pytest.raises(ValueError):
        create_strategy("bogus", cache, synthetic)


@pytest.mark.asyncio
async def test_cache_hit_at_expiry_boundary_keeps_its_timestamp(synthetic, fake_provider, make_flight):
    readings = iter([1000.0, 1000.0 + 6 * 60 * 60, 1000.0 + 6 * 60 * 60 + 1])
    cache = FlightCache(clock=lambda: next(readings))
    cache.set("CMH", FROM.isoformat(), TO.isoformat(), [make_flight()])

    outcome = await LiveStrategy(cache, fake_provider(), synthetic).search("CMH", FROM, TO)

    assert outcome.cached is True
    assert outcome.timestamp == 1_000_000
