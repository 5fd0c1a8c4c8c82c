from typing import List

from data.Flight import Flight


def sort_flights(flights: List[Flight], sort_by: str = "price") -> List[Flight]:
    """Return a new list ordered by sort_by.

    Price ordering puts budget fares ahead of everything else, whatever their
    price. Unknown keys get a plain ascending price sort.
    """
    if sort_by == "price":
        return sorted(flights, key=lambda f: (not f.is_budget_fare, f.price))
    if sort_by == "destination":
        return sorted(flights, key=lambda f: f.destination.city)
    if sort_by == "date":
        return sorted(flights, key=lambda f: (f.departure_date.isoformat(), f.departure_time))
    return sorted(flights, key=lambda f: f.price)
