import asyncio
import math
import re
import time
import httpx
from loguru import logger
from pydantic import BaseModel
from ..core.config import settings
from .pricing import create_pricing_rules

# Nominatim usage policy: identify the app and keep to about one request per second.

EARTH_RADIUS_MILES = 3958.8
UNIT_TOKENS = re.compile(r"\b(?:Unit|Apt|Apartment|Suite|Ste)\b\.?\s*[0-9A-Za-z\-]+|#\s*[0-9A-Za-z\-]+", re.IGNORECASE)

_last_request_at = 0.0
_rate_limit_lock: asyncio.Lock | None = None
_rate_limit_loop: asyncio.AbstractEventLoop | None = None


class DeliveryEstimate(BaseModel):
    miles: int
    fee: float


def _get_rate_limit_lock() -> asyncio.Lock:
    # asyncio locks are tied to one event loop; the API process runs a single loop
    global _rate_limit_lock, _rate_limit_loop
    loop = asyncio.get_running_loop()
    if _rate_limit_lock is None or _rate_limit_loop is not loop:
        _rate_limit_lock = asyncio.Lock()
        _rate_limit_loop = loop
    return _rate_limit_lock


async def _respect_rate_limit() -> None:
    """Wait until the minimum interval since the previous request has passed, one caller at a time."""
    global _last_request_at
    async with _get_rate_limit_lock():
        wait = settings.geocoder_min_interval - (time.monotonic() - _last_request_at)
        if wait > 0:
            await asyncio.sleep(wait)
        _last_request_at = time.monotonic()


async def geocode_address(address: str) -> tuple[float, float] | None:
    """Look up (lat, lon) for an address; any failure is logged and returns None."""
    if not address or not address.strip():
        return None

    await _respect_rate_limit()
    params = {"format": "json", "q": address, "limit": 1}
    headers = {"Accept": "application/json", "User-Agent": settings.geocoder_user_agent}

    try:
        async with httpx.AsyncClient(timeout=settings.geocoder_timeout) as client:
            r = await client.get(settings.geocoder_url, params=params, headers=headers)
    except httpx.TimeoutException:
        logger.error(f"Geocoding timeout for address: {address}")
        return None
    except httpx.HTTPError as e:
        logger.error(f"Geocode error for address \"{address}\": {e}")
        return None

    if not r.is_success:
        logger.warning(f"Geocoding API returned status {r.status_code} for address: {address}")
        return None

    try:
        results = r.json()
        if isinstance(results, list) and results:
            coords = (float(results[0]["lat"]), float(results[0]["lon"]))
            logger.info(f"Geocoded \"{address}\"", lat=coords[0], lon=coords[1])
            return coords
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"Unreadable geocoding response for \"{address}\": {e}")
        return None

    logger.warning(f"No geocoding results found for address: {address}")
    return None


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def clean_address(address: str) -> str:
    """Drop apartment/unit tokens and stray commas before geocoding."""
    cleaned = UNIT_TOKENS.sub("", address.strip())
    cleaned = re.sub(r"\s+", " ", cleaned)
    cleaned = re.sub(r"\s+,", ",", cleaned)
    cleaned = re.sub(r",\s*,", ",", cleaned)
    return cleaned.strip(" ,")


def address_variations(address: str) -> list[str]:
    cleaned = clean_address(address)
    variations = [cleaned]
    if "Pennsylvania" not in cleaned:
        spelled_out = re.sub(r",\s*PA\b", ", Pennsylvania", cleaned)
        if spelled_out != cleaned:
            variations.append(spelled_out)
    return variations


async def estimate_delivery(address: str) -> DeliveryEstimate | None:
    """
    Estimate the delivery distance and fee from the shop to ``address``.

    Returns None when either end cannot be geocoded.
    """
    if not address or not address.strip():
        return None

    customer_coords = None
    for variation in address_variations(address):
        customer_coords = await geocode_address(variation)
        if customer_coords:
            break
    if not customer_coords:
        return None

    base_coords = await geocode_address(settings.shop_address)
    if not base_coords:
        return None

    miles = haversine_miles(base_coords[0], base_coords[1], customer_coords[0], customer_coords[1])
    rounded_miles = int(miles + 0.5)
    fee = create_pricing_rules().delivery_fee_for_miles(miles)
    logger.info("Delivery estimated", address=address, miles=rounded_miles, fee=fee)
    return DeliveryEstimate(miles=rounded_miles, fee=fee)
