"""
Offline mock provider.

Returns a fixed fixture without touching the network. Only the date is taken
from the request.
"""

import logging
from typing import Optional

from weather_cli.dates import normalize_date
from weather_cli.models import WeatherResult

logger = logging.getLogger(__name__)

MOCK_COUNTRY = "Mock Country"
MOCK_CITY = "Mock City"
MOCK_TEMPERATURE = 20.0
MOCK_HUMIDITY = 50
MOCK_DESCRIPTION = "Sunny (Mock)"


async def fetch_mock(key: Optional[str], location: str, date: Optional[str] = None, **options) -> WeatherResult:
    """Fixture weather; key and location are ignored."""
    logger.debug(f"[fetch_mock] Returning fixture for {location!r}")
    return WeatherResult(
        country=MOCK_COUNTRY,
        city=MOCK_CITY,
        date=normalize_date(date),
        temperature=MOCK_TEMPERATURE,
        humidity=MOCK_HUMIDITY,
        description=MOCK_DESCRIPTION,
    )
