from typing import Dict, List, Optional

from data.Airport import Airport

CMH = Airport(code="CMH", name="John Glenn Columbus International Airport", city="Columbus", state="OH")

AIRPORTS: Dict[str, Airport] = {
    "CMH": CMH,

    # West Coast
    "LAX": Airport(code="LAX", name="Los Angeles International Airport", city="Los Angeles", state="CA"),
    "SAN": Airport(code="SAN", name="San Diego International Airport", city="San Diego", state="CA"),
    "SFO": Airport(code="SFO", name="San Francisco International Airport", city="San Francisco", state="CA"),
    "SJC": Airport(code="SJC", name="Norman Y. Mineta San Jose International Airport", city="San Jose", state="CA"),
    "OAK": Airport(code="OAK", name="Oakland International Airport", city="Oakland", state="CA"),
    "SEA": Airport(code="SEA", name="Seattle-Tacoma International Airport", city="Seattle", state="WA"),
    "PDX": Airport(code="PDX", name="Portland International Airport", city="Portland", state="OR"),

    # Southwest
    "LAS": Airport(code="LAS", name="Harry Reid International Airport", city="Las Vegas", state="NV"),
    "PHX": Airport(code="PHX", name="Phoenix Sky Harbor International Airport", city="Phoenix", state="AZ"),
    "DEN": Airport(code="DEN", name="Denver International Airport", city="Denver", state="CO"),

    # Southeast
    "MCO": Airport(code="MCO", name="Orlando International Airport", city="Orlando", state="FL"),
    "FLL": Airport(code="FLL", name="Fort Lauderdale-Hollywood International Airport", city="Fort Lauderdale", state="FL"),
    "TPA": Airport(code="TPA", name="Tampa International Airport", city="Tampa", state="FL"),
    "MSY": Airport(code="MSY", name="Louis Armstrong New Orleans International Airport", city="New Orleans", state="LA"),

    # Texas
    "AUS": Airport(code="AUS", name="Austin-Bergstrom International Airport", city="Austin", state="TX"),
    "DAL": Airport(code="DAL", name="Dallas Love Field", city="Dallas", state="TX"),
    "HOU": Airport(code="HOU", name="William P. Hobby Airport", city="Houston", state="TX"),

    # East Coast
    "BWI": Airport(code="BWI", name="Baltimore/Washington International Thurgood Marshall Airport", city="Baltimore", state="MD"),
    "DCA": Airport(code="DCA", name="Ronald Reagan Washington National Airport", city="Washington", state="DC"),

    # Midwest
    "MDW": Airport(code="MDW", name="Chicago Midway International Airport", city="Chicago", state="IL"),
    "BNA": Airport(code="BNA", name="Nashville International Airport", city="Nashville", state="TN"),
}

# Searched by the live provider when no subset is requested, to conserve API credits
TOP_DESTINATIONS: List[str] = [
    "MDW", "BWI", "DCA", "LAS", "MCO", "FLL", "TPA", "DEN",
    "PHX", "LAX", "SAN", "DAL", "HOU", "AUS", "BNA",
]


def get_airport(code: str) -> Optional[Airport]:
    return AIRPORTS.get(code.upper())
