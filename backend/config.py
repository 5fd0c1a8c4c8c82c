"""Configuration utilities.

Loads environment driven settings (provider selection, API keys, cache
timings) once, so the rest of the codebase never calls os.getenv.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from FlightOrchestrator import DataProvider
from providers.SouthwestScraper import ScraperMode

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Settings:
    data_provider: DataProvider = DataProvider.MOCK
    serpapi_key: Optional[str] = None
    southwest_scraper: ScraperMode = ScraperMode.MOCK
    cache_ttl_seconds: int = 6 * 60 * 60
    cache_cleanup_interval_seconds: int = 60 * 60
    synthetic_seed: Optional[int] = None
    http_timeout_seconds: float = 30
    port: int = 3000
    log_level: str = "INFO"

    def serpapi_configured(self) -> bool:
        return bool(self.serpapi_key)


def _enum_from_env(name: str, enum_cls, default):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        logger.warning("Unknown %s=%r, using %s", name, raw, default.value)
        return default


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment, after loading env_file (or the nearest .env)."""
    load_dotenv(env_file)
    seed = os.getenv("SYNTHETIC_SEED")
    return Settings(
        data_provider=_enum_from_env("DATA_PROVIDER", DataProvider, DataProvider.MOCK),
        serpapi_key=os.getenv("SERPAPI_KEY") or None,
        southwest_scraper=_enum_from_env("SOUTHWEST_SCRAPER", ScraperMode, ScraperMode.MOCK),
        cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", str(6 * 60 * 60))),
        cache_cleanup_interval_seconds=int(os.getenv("CACHE_CLEANUP_INTERVAL_SECONDS", str(60 * 60))),
        synthetic_seed=int(seed) if seed else None,
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
        port=int(os.getenv("PORT", "3000")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
