"""Sample flight generator used by the mock strategy and as the fallback source.

Prices start from each route's base fare and are adjusted for day of week,
how far ahead the flight is, and time of day, then jittered by up to 15% and
rounded to the nearest $10. Pass a seeded random.Random for repeatable output.
"""
import logging
import random
from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable, List, Optional

from DealScorer import round_half_up
from data.Airport import Airport
from data.airports import CMH, get_airport
from data.Flight import Flight, FlightSource
from data.routes import ROUTES, RouteData

logger = logging.getLogger(__name__)

PRICE_INCREMENT = 1000  # cents


class SyntheticProvider:
    name = "mock"

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        routes: Iterable[RouteData] = ROUTES,
        today: Callable[[], date] = date.today,
    ):
        self.rng = rng or random.Random()
        self.routes = list(routes)
        self.today = today

    def generate(
        self,
        from_date: date,
        to_date: date,
        destinations: Optional[List[str]] = None,
        origin: str = CMH.code,
    ) -> List[Flight]:
        origin_airport = get_airport(origin)
        if origin_airport is None:
            logger.warning("No synthetic routes for unknown origin %s", origin)
            return []

        wanted = set(destinations) if destinations else None
        routes = [
            r for r in self.routes
            if (wanted is None or r.destination in wanted) and r.destination != origin_airport.code
        ]

        flights: List[Flight] = []
        day = from_date
        while day <= to_date:
            # 1-2 flights per route per day
            for route in routes:
                flights_per_day = 2 if self.rng.random() > 0.5 else 1
                for i in range(flights_per_day):
                    flight = self._generate_flight(origin_airport, route, day, i)
                    if flight is not None:
                        flights.append(flight)
            day += timedelta(days=1)

        logger.info("Generated %s synthetic flights (%s to %s)", len(flights), from_date, to_date)
        return flights

    def _generate_flight(self, origin: Airport, route: RouteData, day: date, index: int) -> Optional[Flight]:
        destination = get_airport(route.destination)
        if destination is None:
            logger.warning("Unknown destination in route data: %s", route.destination)
            return None

        hour = 6 + self.rng.randrange(16)
        minute = self.rng.randrange(4) * 15
        departure = datetime.combine(day, time(hour, minute))
        arrival = departure + timedelta(minutes=route.duration)

        return Flight(
            id=f"{route.destination}-{day.isoformat()}-{index}",
            flight_number=f"WN {1000 + self.rng.randrange(8000)}",
            origin=origin,
            destination=destination,
            departure_date=day,
            departure_time=departure.strftime("%H:%M"),
            arrival_date=arrival.date(),
            arrival_time=arrival.strftime("%H:%M"),
            price=self.calculate_price(route, day, hour),
            duration=route.duration,
            stops=0,
            source=FlightSource.MOCK,
        )

    def calculate_price(self, route: RouteData, day: date, departure_hour: int) -> int:
        price = float(route.base_price)

        # Friday or Sunday
        if day.weekday() in (4, 6):
            price *= 1.10

        days_until_flight = (day - self.today()).days
        if days_until_flight < 7:
            price *= 1.25
        elif days_until_flight < 14:
            price *= 1.10

        # early morning and late night are cheaper
        if departure_hour < 8 or departure_hour > 20:
            price *= 0.90

        price *= 0.85 + self.rng.random() * 0.30

        return round_half_up(price / PRICE_INCREMENT) * PRICE_INCREMENT
