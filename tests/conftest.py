import random
from datetime import date

import pytest

from FlightCache import FlightCache
from data.airports import get_airport
from data.Flight import Flight
from providers.FlightProvider import FlightProvider, ProviderError
from providers.SyntheticProvider import SyntheticProvider


def build_flight(**overrides) -> Flight:
    fields = dict(
        id="f1",
        flight_number="WN 1234",
        origin="CMH",
        destination="LAS",
        departure_date=date(2025, 6, 1),
        departure_time="08:30",
        arrival_date=date(2025, 6, 1),
        arrival_time="10:15",
        price=15000,
        duration=285,
        stops=0,
    )
    fields.update(overrides)
    for name in ("origin", "destination"):
        if isinstance(fields[name], str):
            fields[name] = get_airport(fields[name])
    return Flight(**fields)


class FakeProvider(FlightProvider):
    def __init__(self, name="fake", flights=None, fail_routes=(), fail_all=False, default_destinations=("LAS", "MCO")):
        self.name = name
        self.flights = flights or {}
        self.fail_routes = set(fail_routes)
        self.fail_all = fail_all
        self.default_destinations = list(default_destinations)
        self.calls = []

    async def search_one_route(self, origin, destination, departure_date):
        self.calls.append((origin, destination, departure_date))
        if self.fail_all or destination in self.fail_routes:
            raise ProviderError(f"{self.name} is down")
        return list(self.flights.get(destination, []))


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def make_flight():
    return build_flight


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return FlightCache(ttl_seconds=6 * 60 * 60, clock=clock)


@pytest.fixture
def synthetic():
    return SyntheticProvider(rng=random.Random(42), today=lambda: date(2025, 1, 1))
