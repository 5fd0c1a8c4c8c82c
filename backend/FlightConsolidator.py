import logging
from typing import Dict, List, Optional

from pydantic import BaseModel

from data.Flight import BUDGET_FARE_CLASS, Flight, FlightKey, FlightSource

logger = logging.getLogger(__name__)


class ConsolidationStats(BaseModel):
    total: int
    serpapi: int
    southwest: int
    both: int
    budget_fares: int
    deals: int


def consolidate_flights(
    primary: List[Flight],
    secondary: List[Flight],
    secondary_fare_class: Optional[str] = BUDGET_FARE_CLASS,
) -> List[Flight]:
    """Merge two provider result sets into one flight per identity key.

    Primary flights are taken as-is and tagged serpapi. A secondary flight
    with a new key is added tagged southwest. When both sources have the same
    flight the cheaper one wins and is tagged both; on equal prices the
    primary flight is kept. Secondary flights carry secondary_fare_class when
    given. Inputs are not modified.
    """
    logger.info("Consolidating flights: serpapi=%s southwest=%s", len(primary), len(secondary))

    consolidated: Dict[FlightKey, Flight] = {}

    for flight in primary:
        consolidated[flight.key] = flight.model_copy(update={"source": FlightSource.SERPAPI})

    secondary_update = {} if secondary_fare_class is None else {"fare_class": secondary_fare_class}
    for flight in secondary:
        existing = consolidated.get(flight.key)
        if existing is None:
            consolidated[flight.key] = flight.model_copy(
                update={**secondary_update, "source": FlightSource.SOUTHWEST}
            )
        elif flight.price < existing.price:
            consolidated[flight.key] = flight.model_copy(
                update={**secondary_update, "source": FlightSource.BOTH}
            )
        else:
            consolidated[flight.key] = existing.model_copy(update={"source": FlightSource.BOTH})

    result = list(consolidated.values())
    stats = consolidation_stats(result)
    logger.info(
        "Consolidated %s unique flights (serpapi only: %s, southwest only: %s, both: %s)",
        stats.total,
        stats.serpapi,
        stats.southwest,
        stats.both,
    )
    return result


def deduplicate_flights(flights: List[Flight]) -> List[Flight]:
    """Keep the cheapest flight for each identity key; the first seen wins ties."""
    seen: Dict[FlightKey, Flight] = {}
    for flight in flights:
        existing = seen.get(flight.key)
        if existing is None or flight.price < existing.price:
            seen[flight.key] = flight

    if len(seen) < len(flights):
        logger.debug("Dropped %s duplicate flights", len(flights) - len(seen))
    return list(seen.values())


def consolidation_stats(flights: List[Flight]) -> ConsolidationStats:
    return ConsolidationStats(
        total=len(flights),
        serpapi=sum(1 for f in flights if f.source == FlightSource.SERPAPI),
        southwest=sum(1 for f in flights if f.source == FlightSource.SOUTHWEST),
        both=sum(1 for f in flights if f.source == FlightSource.BOTH),
        budget_fares=sum(1 for f in flights if f.is_budget_fare),
        deals=sum(1 for f in flights if f.is_deal),
    )
