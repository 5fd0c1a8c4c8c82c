from abc import ABC, abstractmethod
from datetime import date
from typing import List

from data.Flight import Flight


class ProviderError(Exception):
    def __init__(self, message, status_code=502, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class TotalProviderFailure(ProviderError):
    """Every configured live source failed; callers fall back to synthetic data."""


class FlightProvider(ABC):
    name: str = "provider"
    default_destinations: List[str] = []

    @abstractmethod
    async def search_one_route(self, origin: str, destination: str, departure_date: date) -> List[Flight]:
        """
        Returns flights for a single origin/destination pair on one date.
        Raises ProviderError when the upstream call fails.
        """
        raise NotImplementedError
