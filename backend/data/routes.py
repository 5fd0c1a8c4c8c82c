from typing import List

from pydantic import BaseModel, ConfigDict


class RouteData(BaseModel):
    model_config = ConfigDict(frozen=True)

    destination: str
    base_price: int  # cents
    duration: int  # minutes
    distance: int  # miles
    frequency: str = "daily"


ROUTES: List[RouteData] = [
    RouteData(destination="MDW", base_price=12900, duration=75, distance=284),
    RouteData(destination="BWI", base_price=13900, duration=80, distance=336),
    RouteData(destination="DCA", base_price=14900, duration=85, distance=323),
    RouteData(destination="LAS", base_price=21900, duration=285, distance=1788),
    RouteData(destination="MCO", base_price=16900, duration=140, distance=802),
    RouteData(destination="FLL", base_price=17900, duration=160, distance=961),
    RouteData(destination="TPA", base_price=16900, duration=145, distance=829),
    RouteData(destination="DEN", base_price=18900, duration=200, distance=1155),
    RouteData(destination="PHX", base_price=21900, duration=255, distance=1644),
    RouteData(destination="LAX", base_price=24900, duration=320, distance=1995),
    RouteData(destination="SAN", base_price=24900, duration=315, distance=1897),
    RouteData(destination="DAL", base_price=17900, duration=165, distance=926),
    RouteData(destination="HOU", base_price=18900, duration=175, distance=987),
    RouteData(destination="AUS", base_price=18900, duration=180, distance=1031),
    RouteData(destination="BNA", base_price=11900, duration=70, distance=337),
    RouteData(destination="SEA", base_price=27900, duration=330, distance=1972, frequency="weekly"),
    RouteData(destination="PDX", base_price=27900, duration=320, distance=2009, frequency="weekly"),
    RouteData(destination="MSY", base_price=17900, duration=150, distance=815, frequency="weekly"),
    RouteData(destination="SJC", base_price=26900, duration=335, distance=2083, frequency="weekly"),
    RouteData(destination="OAK", base_price=26900, duration=335, distance=2091, frequency="weekly"),
]
