from datetime import date
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from data.Airport import Airport

BUDGET_FARE_CLASS = "Wanna Get Away"

FlightKey = Tuple[str, date, str, str, str]


class FlightSource(str, Enum):
    SERPAPI = "serpapi"
    SOUTHWEST = "southwest"
    BOTH = "both"
    MOCK = "mock"


class Flight(BaseModel):
    """A single one-way itinerary. Prices are integer cents."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    flight_number: str
    origin: Airport
    destination: Airport
    departure_date: date
    departure_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    arrival_date: date
    arrival_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    price: int = Field(..., ge=0)
    duration: int = Field(..., ge=0, description="Minutes")
    stops: int = Field(0, ge=0)
    is_deal: bool = False
    deal_score: int = Field(0, ge=0, le=100)
    source: Optional[FlightSource] = None
    fare_class: Optional[str] = None

    @property
    def key(self) -> FlightKey:
        # same physical flight regardless of which provider returned it
        return (
            self.flight_number,
            self.departure_date,
            self.departure_time,
            self.origin.code,
            self.destination.code,
        )

    @property
    def is_budget_fare(self) -> bool:
        return self.fare_class == BUDGET_FARE_CLASS
