from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from data.Flight import Flight


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceCounts(_CamelModel):
    serpapi: int = 0
    southwest: int = 0
    both: int = 0


class DateRange(BaseModel):
    # serialized as {"from": ..., "to": ...}
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=lambda name: name.removesuffix("_date"),
    )

    from_date: date
    to_date: date


class PriceRange(BaseModel):
    min: int = 0
    max: int = 0


class SearchMeta(_CamelModel):
    total_results: int
    date_range: DateRange
    origin: str
    cheapest_price: int = 0
    average_price: int = 0
    price_range: PriceRange
    cached: bool = False
    timestamp: Optional[int] = None
    data_source: Literal["mock", "live", "hybrid"] = "mock"
    sources: Optional[SourceCounts] = None


class FlightSearchResponse(BaseModel):
    flights: List[Flight]
    meta: SearchMeta
