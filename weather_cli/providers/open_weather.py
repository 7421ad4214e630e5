"""
OpenWeather Provider for weather-cli

Two-step lookup against the OpenWeather APIs:
1. Geocoding API turns the free-text location into coordinates
2. One Call 3.0 `day_summary` returns the daily aggregation for that point

Units are imperial, so temperatures come back in Fahrenheit. The afternoon
reading is used as the day's representative value.
"""

import logging
from typing import Optional, TypedDict

import httpx

from weather_cli.dates import normalize_date
from weather_cli.errors import LocationNotFoundError, MissingCredentialError
from weather_cli.models import WeatherResult
from weather_cli.transport import to_transport_error

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://api.openweathermap.org/geo/1.0/direct"
DAY_SUMMARY_URL = "https://api.openweathermap.org/data/3.0/onecall/day_summary"


class GeoLocation(TypedDict):
    name: str
    lat: float
    lon: float
    country: str


async def _geocode(client: httpx.AsyncClient, key: str, location: str) -> GeoLocation:
    params = {"appid": key, "q": location, "limit": 1}
    resp = await client.get(GEOCODING_URL, params=params)
    logger.info(f"[OpenWeatherProvider] Geocoding response status: {resp.status_code}")
    resp.raise_for_status()
    matches = resp.json()

    if not matches:
        raise LocationNotFoundError(f"Location not found: '{location}'")

    match = matches[0]
    return GeoLocation(
        name=match["name"],
        lat=float(match["lat"]),
        lon=float(match["lon"]),
        country=match["country"],
    )


async def fetch_open_weather(
    key: Optional[str],
    location: str,
    date: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **options,
) -> WeatherResult:
    """
    Fetch the day summary for a location from OpenWeather.

    Args:
        key: OpenWeather API key (required)
        location: Free-text location, e.g. "London, UK"
        date: Loosely formatted date, defaults to today
        transport: Optional httpx transport (used by tests)

    Raises:
        MissingCredentialError: No API key configured
        LocationNotFoundError: Geocoding found no match
        TransportError: Network failure, non-2xx status or malformed body
    """
    if not key:
        raise MissingCredentialError(
            "'OpenWeather' API key not set. Please set it using: 'weather provider ow --key <API_KEY>'"
        )

    date = normalize_date(date)
    logger.info(f"[OpenWeatherProvider] Fetching day summary for {location!r} on {date}")

    try:
        async with httpx.AsyncClient(transport=transport, timeout=None) as client:
            geo = await _geocode(client, key, location)
            logger.debug(f"[OpenWeatherProvider] Geocoded {location!r} -> {geo}")

            params = {
                "appid": key,
                "lat": geo["lat"],
                "lon": geo["lon"],
                "date": date,
                "units": "imperial",
            }
            resp = await client.get(DAY_SUMMARY_URL, params=params)
            logger.info(f"[OpenWeatherProvider] Day summary response status: {resp.status_code}")
            resp.raise_for_status()
            data = resp.json()

        return WeatherResult(
            country=geo["country"],
            city=geo["name"],
            date=date,
            temperature=float(data["temperature"]["afternoon"]),
            humidity=int(data["humidity"]["afternoon"]),
            description=None,
        )
    except (httpx.HTTPError, KeyError, ValueError, TypeError) as e:
        raise to_transport_error(e, "OpenWeatherProvider") from e
