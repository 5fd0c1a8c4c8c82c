"""Search strategies: where flights come from and when the cache is used.

The strategy is picked once at startup from DATA_PROVIDER:

* mock   - synthetic data only, no network and no cache.
* live   - SerpAPI, one route at a time, cached.
* hybrid - SerpAPI and the Southwest scraper side by side, consolidated,
  cached.

Live sources never fail a search. A route that errors is skipped, a branch
that errors contributes nothing, and when nothing usable is left because of
errors the strategy answers with synthetic data that is not cached.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel

from DealScorer import calculate_deal_scores
from FlightCache import FlightCache
from FlightConsolidator import consolidate_flights, consolidation_stats, deduplicate_flights
from FlightRanker import sort_flights
from data.Flight import Flight
from data.FlightSearchResult import SourceCounts
from providers.FlightProvider import FlightProvider, TotalProviderFailure
from providers.SyntheticProvider import SyntheticProvider

logger = logging.getLogger(__name__)


class DataProvider(str, Enum):
    MOCK = "mock"
    LIVE = "live"
    HYBRID = "hybrid"


class SearchOutcome(BaseModel):
    flights: List[Flight]
    cached: bool = False
    timestamp: Optional[int] = None
    sources: Optional[SourceCounts] = None
    fallback: bool = False


async def fetch_routes(
    provider: FlightProvider,
    origin: str,
    departure_date: date,
    destinations: Optional[List[str]] = None,
) -> List[Flight]:
    """Query each destination in turn, skipping the ones that fail.

    Only the start date is searched to conserve API credits. Raises
    TotalProviderFailure when every route failed.
    """
    codes = [c for c in (destinations or provider.default_destinations) if c != origin]
    flights: List[Flight] = []
    failures = 0
    for destination in codes:
        try:
            flights.extend(await provider.search_one_route(origin, destination, departure_date))
        except Exception as e:  # noqa: BLE001
            failures += 1
            logger.warning("Error searching %s-%s via %s: %s", origin, destination, provider.name, e)

    if codes and failures == len(codes):
        raise TotalProviderFailure(f"All {failures} {provider.name} route searches failed")

    logger.info("%s returned %s flights for %s routes (%s failed)", provider.name, len(flights), len(codes), failures)
    return flights


class SearchStrategy(ABC):
    kind: DataProvider

    def __init__(self, synthetic: SyntheticProvider):
        self.synthetic = synthetic

    @abstractmethod
    async def search(
        self,
        origin: str,
        from_date: date,
        to_date: date,
        destinations: Optional[List[str]] = None,
    ) -> SearchOutcome:
        raise NotImplementedError

    def _synthetic_flights(self, origin, from_date, to_date, destinations) -> List[Flight]:
        return calculate_deal_scores(self.synthetic.generate(from_date, to_date, destinations, origin=origin))


class SyntheticStrategy(SearchStrategy):
    kind = DataProvider.MOCK

    async def search(self, origin, from_date, to_date, destinations=None) -> SearchOutcome:
        logger.info("Using MOCK data provider")
        return SearchOutcome(flights=self._synthetic_flights(origin, from_date, to_date, destinations))


class _CachedStrategy(SearchStrategy):

    def __init__(self, cache: FlightCache, synthetic: SyntheticProvider):
        super().__init__(synthetic)
        self.cache = cache

    def _from_cache(self, origin: str, from_date: date, to_date: date) -> Optional[SearchOutcome]:
        entry = self.cache.get_entry(origin, from_date.isoformat(), to_date.isoformat())
        if entry is None:
            return None
        cached, metadata = entry
        return SearchOutcome(
            flights=cached,
            cached=True,
            timestamp=metadata.timestamp,
            sources=self._source_counts(cached),
        )

    def _store(self, origin: str, from_date: date, to_date: date, flights: List[Flight]) -> SearchOutcome:
        metadata = self.cache.set(origin, from_date.isoformat(), to_date.isoformat(), flights)
        return SearchOutcome(
            flights=flights,
            cached=False,
            timestamp=metadata.timestamp,
            sources=self._source_counts(flights),
        )

    def _fallback(self, origin, from_date, to_date, destinations) -> SearchOutcome:
        logger.warning("Falling back to mock data for %s %s..%s (not cached)", origin, from_date, to_date)
        return SearchOutcome(
            flights=self._synthetic_flights(origin, from_date, to_date, destinations),
            cached=False,
            fallback=True,
        )

    def _source_counts(self, flights: List[Flight]) -> Optional[SourceCounts]:
        return None


class LiveStrategy(_CachedStrategy):
    kind = DataProvider.LIVE

    def __init__(self, cache: FlightCache, primary: FlightProvider, synthetic: SyntheticProvider):
        super().__init__(cache, synthetic)
        self.primary = primary

    async def search(self, origin, from_date, to_date, destinations=None) -> SearchOutcome:
        logger.info("Using LIVE data provider (%s)", self.primary.name)
        if destinations:
            logger.info("Searching %s selected destinations: %s", len(destinations), ", ".join(destinations))

        # Destinations are not part of the cache key; a hit may hold more of them
        hit = self._from_cache(origin, from_date, to_date)
        if hit is not None:
            return hit

        try:
            flights = await fetch_routes(self.primary, origin, from_date, destinations)
        except TotalProviderFailure as e:
            logger.error("Error fetching live flights: %s", e)
            return self._fallback(origin, from_date, to_date, destinations)

        scored = calculate_deal_scores(deduplicate_flights(flights))
        return self._store(origin, from_date, to_date, scored)


class HybridStrategy(_CachedStrategy):
    kind = DataProvider.HYBRID

    def __init__(
        self,
        cache: FlightCache,
        primary: FlightProvider,
        secondary: FlightProvider,
        synthetic: SyntheticProvider,
    ):
        super().__init__(cache, synthetic)
        self.primary = primary
        self.secondary = secondary

    async def _settle(self, provider: FlightProvider, origin, departure_date, destinations) -> Tuple[List[Flight], bool]:
        try:
            return await fetch_routes(provider, origin, departure_date, destinations), False
        except Exception as e:  # noqa: BLE001
            logger.warning("%s query failed: %s", provider.name, e)
            return [], True

    async def search(self, origin, from_date, to_date, destinations=None) -> SearchOutcome:
        logger.info("Using HYBRID data provider (%s + %s)", self.primary.name, self.secondary.name)

        hit = self._from_cache(origin, from_date, to_date)
        if hit is not None:
            return hit

        # Both branches always settle; a failed branch contributes no flights
        (primary_flights, primary_failed), (secondary_flights, secondary_failed) = await asyncio.gather(
            self._settle(self.primary, origin, from_date, destinations),
            self._settle(self.secondary, origin, from_date, destinations),
        )

        consolidated = consolidate_flights(primary_flights, secondary_flights)
        if not consolidated and (primary_failed or secondary_failed):
            return self._fallback(origin, from_date, to_date, destinations)

        ranked = sort_flights(calculate_deal_scores(consolidated), "price")
        logger.info("Consolidation stats: %s", consolidation_stats(ranked).model_dump())
        return self._store(origin, from_date, to_date, ranked)

    def _source_counts(self, flights: List[Flight]) -> SourceCounts:
        stats = consolidation_stats(flights)
        return SourceCounts(serpapi=stats.serpapi, southwest=stats.southwest, both=stats.both)


def create_strategy(
    kind: DataProvider,
    cache: FlightCache,
    synthetic: SyntheticProvider,
    primary: Optional[FlightProvider] = None,
    secondary: Optional[FlightProvider] = None,
) -> SearchStrategy:
    kind = DataProvider(kind)
    logger.info("Creating flight provider: %s", kind.value.upper())

    if kind is DataProvider.MOCK:
        return SyntheticStrategy(synthetic)
    if primary is None:
        raise ValueError(f"{kind.value} strategy needs a primary provider")
    if kind is DataProvider.LIVE:
        return LiveStrategy(cache, primary, synthetic)
    if secondary is None:
        raise ValueError("hybrid strategy needs a secondary provider")
    return HybridStrategy(cache, primary, secondary, synthetic)
