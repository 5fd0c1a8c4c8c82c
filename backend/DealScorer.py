import math
from collections import defaultdict
from typing import Dict, List

from data.Flight import Flight

DEAL_THRESHOLD = 80


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_deal_scores(flights: List[Flight]) -> List[Flight]:
    """Score each flight against the other flights to the same destination.

    dealScore is 100 minus the percentile of the flight's price within its
    destination group; flights scoring 80 or more (roughly the cheapest 20%)
    are marked as deals. Equal prices share the index of their first
    occurrence in the sorted price list, so a group of one always scores 100.
    Scores are relative to this batch only.
    """
    prices_by_destination: Dict[str, List[int]] = defaultdict(list)
    for flight in flights:
        prices_by_destination[flight.destination.code].append(flight.price)

    for prices in prices_by_destination.values():
        prices.sort()

    scored = []
    for flight in flights:
        prices = prices_by_destination[flight.destination.code]
        percentile = prices.index(flight.price) / len(prices)
        score = round_half_up((1 - percentile) * 100)
        scored.append(flight.model_copy(update={"deal_score": score, "is_deal": score >= DEAL_THRESHOLD}))
    return scored
