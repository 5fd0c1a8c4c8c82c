import random
from datetime import date, timedelta

import pytest

from data.Flight import BUDGET_FARE_CLASS, FlightSource
from providers.SouthwestScraper import ScraperMode, SouthwestScraper, parse_select_page

DEPARTURE = date(2025, 6, 1)

SELECT_PAGE = """
<html><body><ul>
  <li class="air-booking-select-detail">
    <span class="flight-numbers--flight-number"># 1234</span>
    <div class="air-operations-time-status">Departs <span>6:05</span>AM</div>
    <div class="air-operations-time-status">Arrives 8:40AM</div>
    <span class="flight-stops--duration-time">5h 35m</span>
    <div class="flight-stops-badge">Nonstop</div>
    <button><span class="fare-button--value-total">$189</span></button>
    <button><span class="fare-button--value-total">$129</span></button>
  </li>
  <li class="air-booking-select-detail">
    <span class="flight-numbers--flight-number">#2201</span>
    <span class="flight-numbers--flight-number">#877</span>
    <div class="air-operations-time-status">Departs 10:30PM</div>
    <div class="air-operations-time-status">Arrives 1:15AM</div>
    <span class="flight-stops--duration-time">4h 45m</span>
    <div class="flight-stops-badge">1 stop</div>
    <span class="fare-button--value-total">$1,049</span>
  </li>
  <li class="air-booking-select-detail">
    <span class="flight-numbers--flight-number">#3300</span>
    <div class="air-operations-time-status">Departs 12:00PM</div>
    <div class="air-operations-time-status">Arrives 2:30PM</div>
    <span class="fare-button--sold-out">Sold out</span>
  </li>
</ul></body></html>
"""


@pytest.mark.asyncio
async def test_off_mode_returns_nothing():
    scraper = SouthwestScraper(ScraperMode.OFF)
    assert await scraper.search_one_route("CMH", "LAS", DEPARTURE) == []


@pytest.mark.asyncio
async def test_mock_mode_generates_budget_fares_for_two_days():
    scraper = SouthwestScraper("mock", rng=random.Random(3))
    flights = await scraper.search_one_route("CMH", "LAS", DEPARTURE)

    assert [f.departure_date for f in flights] == [DEPARTURE, DEPARTURE + timedelta(days=1)]
    for f in flights:
        assert f.source == FlightSource.SOUTHWEST
        assert f.fare_class == BUDGET_FARE_CLASS
        assert 7000 <= f.price < 12000
        assert 120 <= f.duration < 180
        assert f.stops == 0


@pytest.mark.asyncio
async def test_mock_mode_unknown_airport():
    scraper = SouthwestScraper(ScraperMode.MOCK, rng=random.Random(3))
    assert await scraper.search_one_route("CMH", "ZZZ", DEPARTURE) == []


def test_parse_select_page():
    nonstop, red_eye = parse_select_page(SELECT_PAGE, "CMH", "LAS", DEPARTURE)

    assert nonstop.flight_number == "WN 1234"
    assert (nonstop.departure_time, nonstop.arrival_time) == ("06:05", "08:40")
    assert nonstop.arrival_date == DEPARTURE
    assert nonstop.price == 12900
    assert nonstop.duration == 335
    assert nonstop.stops == 0
    assert nonstop.fare_class == BUDGET_FARE_CLASS
    assert nonstop.source == FlightSource.SOUTHWEST

    assert red_eye.flight_number == "WN 2201, WN 877"
    assert (red_eye.departure_time, red_eye.arrival_time) == ("22:30", "01:15")
    assert red_eye.arrival_date == DEPARTURE + timedelta(days=1)
    assert red_eye.price == 104900
    assert red_eye.stops == 1


def test_parse_select_page_without_results():
    assert parse_select_page("<html><body>No flights</body></html>", "CMH", "LAS", DEPARTURE) == []
