"""
WeatherAPI.com Provider for weather-cli

Single call to the `current.json` endpoint. Location, date and a couple of
fixed parameters (no air quality, one-day range) go in the query string.
"""

import logging
from typing import Optional

import httpx

from weather_cli.dates import normalize_date
from weather_cli.errors import MissingCredentialError
from weather_cli.models import WeatherResult
from weather_cli.transport import to_transport_error

logger = logging.getLogger(__name__)

BASE_URL = "https://api.weatherapi.com/v1/current.json"


async def fetch_weather_api(
    key: Optional[str],
    location: str,
    date: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **options,
) -> WeatherResult:
    """
    Fetch current conditions for a location from WeatherAPI.com.

    Raises:
        MissingCredentialError: No API key configured
        TransportError: Network failure, non-2xx status or malformed body
    """
    if not key:
        raise MissingCredentialError(
            "'WeatherApi' API key not set. Please set it using: 'weather provider wa --key <API_KEY>'"
        )

    date = normalize_date(date)
    params = {
        "key": key,
        "q": location,
        "dt": date,
        "aqi": "no",
        "days": "1",
    }

    logger.info(f"[WeatherApiProvider] Fetching current weather for {location!r} on {date}")

    try:
        async with httpx.AsyncClient(transport=transport, timeout=None) as client:
            resp = await client.get(BASE_URL, params=params)
            logger.info(f"[WeatherApiProvider] Response status: {resp.status_code}")
            resp.raise_for_status()
            data = resp.json()

        current = data["current"]
        return WeatherResult(
            country=data["location"]["country"],
            city=data["location"]["name"],
            date=date,
            temperature=float(current["temp_f"]),
            humidity=int(current["humidity"]),
            description=current["condition"]["text"],
        )
    except (httpx.HTTPError, KeyError, ValueError, TypeError) as e:
        raise to_transport_error(e, "WeatherApiProvider") from e
