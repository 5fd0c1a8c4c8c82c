from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
import uvicorn
import httpx
import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Optional

from config import Settings, load_settings
from logging_config import setup_logging
from FlightCache import FlightCache
from FlightOrchestrator import DataProvider, create_strategy
from FlightService import search_flights
from data.FlightSearchQuery import FlightSearchQuery
from data.FlightSearchResult import FlightSearchResponse
from providers.SerpApiAccount import get_account_info, usage_percentage
from providers.SerpApiProvider import SerpApiProvider
from providers.SouthwestScraper import SouthwestScraper
from providers.SyntheticProvider import SyntheticProvider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup Logic ---
    settings: Settings = getattr(app.state, "settings", None) or load_settings()
    setup_logging(settings.log_level)

    if settings.data_provider is not DataProvider.MOCK and not settings.serpapi_configured():
        logger.warning("DATA_PROVIDER=%s without SERPAPI_KEY, SerpAPI searches will fail", settings.data_provider.value)

    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    rng = random.Random(settings.synthetic_seed)
    cache = FlightCache(ttl_seconds=settings.cache_ttl_seconds)

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.flight_cache = cache
    app.state.strategy = create_strategy(
        settings.data_provider,
        cache=cache,
        synthetic=SyntheticProvider(rng=rng),
        primary=SerpApiProvider(settings.serpapi_key, client=http_client, timeout=settings.http_timeout_seconds),
        secondary=SouthwestScraper(settings.southwest_scraper, rng=rng),
    )

    # Start the background cleanup task
    cleanup_task = asyncio.create_task(cache_cleaner(cache, settings.cache_cleanup_interval_seconds))
    logger.info("Background cache cleaner started (every %ss)", settings.cache_cleanup_interval_seconds)

    yield  # The app runs while this is yielded

    # --- Shutdown Logic ---
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass
    logger.info("Background cache cleaner stopped.")
    await http_client.aclose()


app = FastAPI(title="Flight Deal Finder", lifespan=lifespan)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


def _error_body(error: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "statusCode": status_code},
    )


def _validation_message(exc: ValidationError | RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("query", "body"))
        msg = str(err.get("msg", "")).removeprefix("Value error, ")
        messages.append(f"{field}: {msg}" if field else msg)
    return ", ".join(messages)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return _error_body("Validation Error", _validation_message(exc), 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_body("Internal Server Error", str(exc) or "Something went wrong", 500)


@app.get("/api/health")
async def get_health():
    """Validates the backend is running."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/flights", response_model=FlightSearchResponse)
async def get_flights(
    request: Request,
    origin: Optional[str] = None,
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    destinations: Optional[str] = None,
):
    params = {"origin": origin, "from": from_date, "to": to_date, "sortBy": sort_by, "destinations": destinations}
    raw = {k: v for k, v in params.items() if v}
    try:
        query = FlightSearchQuery.model_validate(raw)
    except ValidationError as e:
        return _error_body("Validation Error", _validation_message(e), 400)

    return await search_flights(query, request.app.state.strategy)


@app.get("/api/cache/stats")
async def get_cache_stats(request: Request):
    return request.app.state.flight_cache.stats()


@app.delete("/api/cache")
async def clear_cache(request: Request):
    request.app.state.flight_cache.clear()
    return {"cleared": True}


@app.get("/api/usage")
async def get_usage(request: Request):
    settings: Settings = request.app.state.settings
    info = await get_account_info(settings.serpapi_key, client=request.app.state.http_client)
    if info is None:
        return {"available": False}
    return {
        "available": True,
        "plan": info.plan_name,
        "searchesPerMonth": info.searches_per_month,
        "thisMonthUsage": info.this_month_usage,
        "searchesLeft": info.total_searches_left,
        "usagePercentage": usage_percentage(info),
    }


async def cache_cleaner(cache: FlightCache, interval_seconds: int = 3600):
    """Run cleanup every interval (an hour by default)."""
    while True:
        try:
            await asyncio.sleep(interval_seconds)
            cache.cleanup()
        except asyncio.CancelledError:
            break
        except Exception:  # noqa: BLE001
            logger.exception("Error in cache cleaner")


if __name__ == "__main__":
    settings = load_settings()
    app.state.settings = settings
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
