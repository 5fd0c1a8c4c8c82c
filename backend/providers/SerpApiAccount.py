import logging
from typing import Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

SERPAPI_ACCOUNT_URL = "https://serpapi.com/account.json"


class SerpApiAccountInfo(BaseModel):
    account_id: Optional[str] = None
    api_key_id: Optional[str] = None
    plan_id: Optional[str] = None
    plan_name: Optional[str] = None
    searches_per_month: int = 0
    total_searches_left: int = 0
    this_month_usage: int = 0
    last_hour_searches: int = 0
    account_rate_limit_per_hour: int = 0
    plan_searches_left: Optional[int] = None
    extra_credits: Optional[int] = None


async def get_account_info(
    api_key: Optional[str],
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 20,
) -> Optional[SerpApiAccountInfo]:
    """Fetch SerpAPI plan usage. The account endpoint does not count toward quota.

    Returns None when no key is configured or the lookup fails; usage is only
    reported, never enforced.
    """
    if not api_key:
        logger.warning("SerpAPI key not configured")
        return None

    try:
        if client is not None:
            r = await client.get(SERPAPI_ACCOUNT_URL, params={"api_key": api_key}, timeout=timeout)
        else:
            async with httpx.AsyncClient() as own_client:
                r = await own_client.get(SERPAPI_ACCOUNT_URL, params={"api_key": api_key}, timeout=timeout)
        r.raise_for_status()
        info = SerpApiAccountInfo.model_validate(r.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Error fetching SerpAPI account info: %s", e)
        return None

    logger.info(
        "SerpAPI account: plan=%s monthly_limit=%s used=%s remaining=%s",
        info.plan_name,
        info.searches_per_month,
        info.this_month_usage,
        info.total_searches_left,
    )
    return info


def usage_percentage(info: SerpApiAccountInfo) -> int:
    if not info.searches_per_month:
        return 0
    return round(info.this_month_usage / info.searches_per_month * 100)
