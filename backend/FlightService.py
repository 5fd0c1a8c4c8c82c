import logging

from FlightOrchestrator import SearchStrategy
from FlightRanker import sort_flights
from data.FlightSearchQuery import FlightSearchQuery
from data.FlightSearchResult import DateRange, FlightSearchResponse, PriceRange, SearchMeta

logger = logging.getLogger(__name__)


async def search_flights(query: FlightSearchQuery, strategy: SearchStrategy) -> FlightSearchResponse:
    outcome = await strategy.search(query.origin, query.from_date, query.to_date, query.destinations)

    flights = [f for f in outcome.flights if f.origin.code == query.origin]
    flights = sort_flights(flights, query.sort_by)

    prices = [f.price for f in flights]
    meta = SearchMeta(
        total_results=len(flights),
        date_range=DateRange(from_date=query.from_date, to_date=query.to_date),
        origin=query.origin,
        cheapest_price=min(prices, default=0),
        average_price=round(sum(prices) / len(prices)) if prices else 0,
        price_range=PriceRange(min=min(prices, default=0), max=max(prices, default=0)),
        cached=outcome.cached,
        timestamp=outcome.timestamp,
        data_source=strategy.kind.value,
        sources=outcome.sources,
    )

    logger.info(
        "Search %s %s..%s returned %s flights (cached=%s, fallback=%s)",
        query.origin,
        query.from_date,
        query.to_date,
        len(flights),
        outcome.cached,
        outcome.fallback,
    )
    return FlightSearchResponse(flights=flights, meta=meta)
