from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SortBy = Literal["price", "destination", "date"]


class FlightSearchQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    origin: str = Field(
        ...,
        pattern=r"^[A-Z]{3}$",
        description="Origin airport IATA code"
    )

    from_date: date = Field(
        ...,
        alias="from",
        description="First departure date (YYYY-MM-DD)"
    )

    to_date: date = Field(
        ...,
        alias="to",
        description="Last departure date (YYYY-MM-DD)"
    )

    sort_by: SortBy = Field("price", alias="sortBy")

    # Optional subset of destination codes; does not take part in caching
    destinations: Optional[List[str]] = None

    @field_validator("origin", mode="before")
    @classmethod
    def _upper_origin(cls, v):
        # normalised before the pattern check
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def _strict_iso_date(cls, v):
        # pydantic also accepts timestamps and datetimes; only YYYY-MM-DD is allowed here
        if isinstance(v, str) and not _is_iso_date(v):
            raise ValueError("must be in YYYY-MM-DD format")
        return v

    @field_validator("destinations", mode="before")
    @classmethod
    def _split_destinations(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            v = v.split(",")
        codes = [str(c).strip().upper() for c in v if str(c).strip()]
        return codes or None

    @model_validator(mode="after")
    def _check_range(self) -> "FlightSearchQuery":
        if self.from_date > self.to_date:
            raise ValueError("from date must be before or equal to to date")
        return self


def _is_iso_date(value: str) -> bool:
    parts = value.split("-")
    return (
        len(parts) == 3
        and [len(p) for p in parts] == [4, 2, 2]
        and all(p.isdigit() for p in parts)
    )
