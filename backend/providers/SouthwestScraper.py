"""Southwest.com fare scraper.

Runs in one of three modes:

* ``off``  - returns no flights; the hybrid strategy then relies on SerpAPI alone.
* ``mock`` - generates a couple of budget fares per route, handy for exercising
  consolidation without a browser.
* ``live`` - drives headless Chromium through Playwright and parses the fare
  selection page with BeautifulSoup.
"""
import logging
import random
import re
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import List, Optional

from bs4 import BeautifulSoup
from playwright.async_api import TimeoutError as PlaywrightTimeoutError, async_playwright
from playwright_stealth import Stealth

from data.airports import get_airport
from data.Flight import BUDGET_FARE_CLASS, Flight, FlightSource
from providers.FlightProvider import FlightProvider, ProviderError

logger = logging.getLogger(__name__)

SELECT_DEPART_URL = "https://www.southwest.com/air/booking/select-depart.html"

TIME_RE = re.compile(r"(\d{1,2}):(\d{2})\s*([AP]M)", re.IGNORECASE)
PRICE_RE = re.compile(r"\$\s*([\d,]+)")
FLIGHT_NUMBER_RE = re.compile(r"\d{1,4}")
HOURS_RE = re.compile(r"(\d+)\s*h", re.IGNORECASE)
MINUTES_RE = re.compile(r"(\d+)\s*m", re.IGNORECASE)


class ScraperMode(str, Enum):
    OFF = "off"
    MOCK = "mock"
    LIVE = "live"


class SouthwestScraper(FlightProvider):
    name = "southwest"
    default_destinations = ["LAS", "MCO", "LAX", "DEN", "BWI"]
    timeout = 30 * 1000

    def __init__(self, mode: ScraperMode = ScraperMode.MOCK, rng: Optional[random.Random] = None):
        self.mode = ScraperMode(mode)
        self.rng = rng or random.Random()

    async def search_one_route(self, origin: str, destination: str, departure_date: date) -> List[Flight]:
        if self.mode is ScraperMode.OFF:
            return []
        if self.mode is ScraperMode.MOCK:
            return self._mock_route(origin, destination, departure_date)
        return await self._scrape_route(origin, destination, departure_date)

    # ------------- mock mode --------------
    def _mock_route(self, origin: str, destination: str, departure_date: date) -> List[Flight]:
        origin_airport = get_airport(origin)
        destination_airport = get_airport(destination)
        if origin_airport is None or destination_airport is None:
            return []

        flights = []
        for i in range(2):
            day = departure_date + timedelta(days=i)
            departure = datetime.combine(day, time(6 + self.rng.randrange(14), self.rng.randrange(4) * 15))
            duration = 120 + self.rng.randrange(60)
            arrival = departure + timedelta(minutes=duration)
            flights.append(Flight(
                id=f"southwest-{destination}-{day.isoformat()}-{i}",
                flight_number=f"WN {2000 + self.rng.randrange(3000)}",
                origin=origin_airport,
                destination=destination_airport,
                departure_date=day,
                departure_time=departure.strftime("%H:%M"),
                arrival_date=arrival.date(),
                arrival_time=arrival.strftime("%H:%M"),
                price=7000 + self.rng.randrange(5000),  # $70-$120
                duration=duration,
                stops=0,
                source=FlightSource.SOUTHWEST,
                fare_class=BUDGET_FARE_CLASS,
            ))
        logger.info("Generated %s mock Southwest flights to %s", len(flights), destination)
        return flights

    # ------------- live mode --------------
    def _build_url(self, origin: str, destination: str, departure_date: date) -> str:
        return (
            f"{SELECT_DEPART_URL}?adultPassengersCount=1&departureDate={departure_date.isoformat()}"
            f"&destinationAirportCode={destination}&fareType=USD&originationAirportCode={origin}"
            "&passengerType=ADULT&tripType=oneway"
        )

    async def _scrape_route(self, origin: str, destination: str, departure_date: date) -> List[Flight]:
        url = self._build_url(origin, destination, departure_date)
        logger.info("Scraping Southwest %s to %s on %s", origin, destination, departure_date)
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                args=["--disable-blink-features=AutomationControlled", "--no-sandbox", "--disable-dev-shm-usage"],
            )
            try:
                context = await browser.new_context(
                    user_agent=(
                        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
                        "AppleWebKit/537.36 (KHTML, like Gecko) "
                        "Chrome/131.0.0.0 Safari/537.36"
                    ),
                    locale="en-US",
                    timezone_id="America/New_York",
                    viewport={"width": 1280, "height": 900},
                )
                # Skip loading images to speed up scraping
                await context.route("**/*.{png,jpg,jpeg,webp,svg,gif}", lambda route: route.abort())
                page = await context.new_page()
                await Stealth().apply_stealth_async(page)
                page.set_default_timeout(self.timeout)

                await page.goto(url)
                await page.wait_for_selector("li.air-booking-select-detail")
                html = await page.content()
            except PlaywrightTimeoutError as e:
                raise ProviderError(f"Southwest page timed out for {origin}-{destination}") from e
            finally:
                await browser.close()

        return parse_select_page(html, origin, destination, departure_date)


def _parse_clock(text: str) -> Optional[str]:
    m = TIME_RE.search(text)
    if not m:
        return None
    hour, minute, meridiem = int(m.group(1)), int(m.group(2)), m.group(3).upper()
    if meridiem == "PM" and hour != 12:
        hour += 12
    if meridiem == "AM" and hour == 12:
        hour = 0
    return f"{hour:02d}:{minute:02d}"


def _first_number(text: str) -> Optional[int]:
    m = FLIGHT_NUMBER_RE.search(text)
    return int(m.group()) if m else None


def _parse_price(text: str) -> Optional[int]:
    m = PRICE_RE.search(text)
    return int(m.group(1).replace(",", "")) if m else None


def _parse_duration(text: str) -> int:
    hours = HOURS_RE.search(text)
    minutes = MINUTES_RE.search(text)
    return (int(hours.group(1)) if hours else 0) * 60 + (int(minutes.group(1)) if minutes else 0)


def parse_select_page(html: str, origin: str, destination: str, departure_date: date) -> List[Flight]:
    """Extract the cheapest fare column of each itinerary on the select-depart page.

    Rows without a departure time or a listed price (sold out) are skipped.
    """
    origin_airport = get_airport(origin)
    destination_airport = get_airport(destination)
    if origin_airport is None or destination_airport is None:
        return []

    soup = BeautifulSoup(html, "lxml")
    flights = []
    for index, row in enumerate(soup.select("li.air-booking-select-detail")):
        numbers = [f"WN {n}" for n in (_first_number(el.get_text()) for el in row.select(".flight-numbers--flight-number")) if n]
        times = [_parse_clock(el.get_text(" ", strip=True)) for el in row.select(".air-operations-time-status")]
        prices = [p for p in (_parse_price(el.get_text()) for el in row.select(".fare-button--value-total")) if p is not None]
        if len(times) < 2 or not times[0] or not times[1] or not prices:
            continue

        duration_el = row.select_one(".flight-stops--duration-time")
        stops_el = row.select_one(".flight-stops-badge")
        stops_text = stops_el.get_text(strip=True).lower() if stops_el else "nonstop"
        stops = 0 if "nonstop" in stops_text else (_first_number(stops_text) or 1)

        arrival_date = departure_date if times[1] >= times[0] else departure_date + timedelta(days=1)

        flights.append(Flight(
            id=f"southwest-{destination}-{departure_date.isoformat()}-{index}",
            flight_number=", ".join(numbers) or "WN XXXX",
            origin=origin_airport,
            destination=destination_airport,
            departure_date=departure_date,
            departure_time=times[0],
            arrival_date=arrival_date,
            arrival_time=times[1],
            price=min(prices) * 100,
            duration=_parse_duration(duration_el.get_text(" ", strip=True)) if duration_el else 0,
            stops=stops,
            source=FlightSource.SOUTHWEST,
            fare_class=BUDGET_FARE_CLASS,
        ))

    logger.info("Parsed %s Southwest fares to %s", len(flights), destination)
    return flights
