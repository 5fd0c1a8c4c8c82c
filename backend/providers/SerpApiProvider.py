import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from data.airports import TOP_DESTINATIONS, get_airport
from data.Flight import Flight, FlightSource
from providers.FlightProvider import FlightProvider, ProviderError

logger = logging.getLogger(__name__)

SERPAPI_SEARCH_URL = "https://serpapi.com/search.json"


def _is_southwest_leg(leg: Dict[str, Any]) -> bool:
    airline = (leg.get("airline") or "").lower()
    flight_number = (leg.get("flight_number") or "").lower()
    return "southwest" in airline or "wn" in airline or flight_number.startswith("wn")


def _split_time(value: Optional[str], fallback_date: str):
    # SerpAPI times look like "2025-06-01 08:30"
    parts = (value or "").split(" ")
    day = parts[0] or fallback_date
    clock = parts[1] if len(parts) > 1 and parts[1] else "00:00"
    if len(clock) == 4:
        clock = f"0{clock}"
    return day, clock


class SerpApiProvider(FlightProvider):
    """Southwest flights from SerpAPI's Google Flights engine, one route per call."""

    name = "serpapi"
    default_destinations = TOP_DESTINATIONS

    def __init__(self, api_key: Optional[str], client: Optional[httpx.AsyncClient] = None, timeout: float = 30):
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    async def search_one_route(self, origin: str, destination: str, departure_date: date) -> List[Flight]:
        if not self.api_key:
            raise ProviderError("SerpAPI key not configured. Please set SERPAPI_KEY environment variable.", status_code=500)

        params = {
            "engine": "google_flights",
            "departure_id": origin,
            "arrival_id": destination,
            "outbound_date": departure_date.isoformat(),
            "type": "2",  # one-way
            "currency": "USD",
            "hl": "en",
            "api_key": self.api_key,
        }

        logger.info("Searching %s to %s on %s", origin, destination, departure_date)
        data = await self._get_json(params)

        options = (data.get("best_flights") or []) + (data.get("other_flights") or [])
        if not options:
            logger.info("No flights found for %s", destination)
            return []

        southwest_options = [o for o in options if any(_is_southwest_leg(leg) for leg in o.get("flights") or [])]
        if not southwest_options:
            logger.info("No Southwest flights to %s (checked %s options)", destination, len(options))
            return []

        logger.info("Found %s Southwest flight options to %s", len(southwest_options), destination)
        flights = []
        for index, option in enumerate(southwest_options):
            flight = parse_serpapi_option(option, origin, destination, departure_date, index)
            if flight is not None:
                flights.append(flight)
        return flights

    async def _get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            if self._client is not None:
                r = await self._client.get(SERPAPI_SEARCH_URL, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    r = await client.get(SERPAPI_SEARCH_URL, params=params, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"SerpAPI returned {e.response.status_code}",
                details={"route": f"{params['departure_id']}-{params['arrival_id']}"},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"SerpAPI request failed: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError("Unexpected SerpAPI response")
        if data.get("error"):
            raise ProviderError(f"SerpAPI error: {data['error']}")
        return data


def parse_serpapi_option(
    option: Dict[str, Any],
    origin_code: str,
    destination_code: str,
    search_date: date,
    index: int,
) -> Optional[Flight]:
    origin = get_airport(origin_code)
    destination = get_airport(destination_code)
    if origin is None or destination is None:
        logger.warning("Unknown airport: %s or %s", origin_code, destination_code)
        return None

    legs = option.get("flights") or []
    if not legs:
        logger.warning("Flight option has no legs")
        return None

    search_day = search_date.isoformat()
    departure_date, departure_time = _split_time((legs[0].get("departure_airport") or {}).get("time"), search_day)
    arrival_date, arrival_time = _split_time((legs[-1].get("arrival_airport") or {}).get("time"), search_day)

    southwest_numbers = [leg.get("flight_number") for leg in legs if _is_southwest_leg(leg) and leg.get("flight_number")]

    try:
        return Flight(
            id=f"serpapi-{destination_code}-{search_day}-{index}",
            flight_number=", ".join(southwest_numbers) or "WN XXXX",
            origin=origin,
            destination=destination,
            departure_date=departure_date,
            departure_time=departure_time,
            arrival_date=arrival_date,
            arrival_time=arrival_time,
            price=round((option.get("price") or 0) * 100),
            duration=option.get("total_duration") or 120,
            stops=len(option.get("layovers") or []),
            source=FlightSource.SERPAPI,
        )
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        logger.warning("Skipping malformed SerpAPI option for %s: %s", destination_code, e)
        return None
