"""
Providers package for weather-cli

The set of weather backends is closed. Each Provider member carries its
short id (config key and CLI token), a display name and whether it works
offline. fetch_weather() is the single entry point: it looks the member up
in a dispatch table, so callers never branch on the concrete backend.

1. MockWeather (mock)        - offline fixture, no key needed
2. GrpcMockWeather (grpc)    - local gRPC mock, static fallback if absent
3. OpenWeather (ow)          - geocoding + day summary over HTTP
4. WeatherApi (wa)           - single current-weather call over HTTP
"""

from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

from weather_cli.errors import UnknownProviderError
from weather_cli.models import WeatherResult
from weather_cli.providers.grpc_mock import fetch_grpc_mock
from weather_cli.providers.mock import fetch_mock
from weather_cli.providers.open_weather import fetch_open_weather
from weather_cli.providers.weather_api import fetch_weather_api


class Provider(Enum):
    """Known weather backends: (id, display name, is_offline)."""
    MOCK = ("mock", "MockWeather", True)
    GRPC_MOCK = ("grpc", "GrpcMockWeather", False)
    OPEN_WEATHER = ("ow", "OpenWeather", False)
    WEATHER_API = ("wa", "WeatherApi", False)

    def __init__(self, provider_id: str, display_name: str, is_offline: bool):
        self.id = provider_id
        self.display_name = display_name
        self.is_offline = is_offline

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def available(cls) -> str:
        return ", ".join(f"'{p.display_name}' ({p.id})" for p in cls)

    @classmethod
    def parse(cls, text: str) -> "Provider":
        """
        Parse a provider id or display name, case-insensitively.

        Raises:
            UnknownProviderError: If text names no known provider
        """
        needle = text.strip().lower()
        for provider in cls:
            if needle in (provider.id, provider.display_name.lower()):
                return provider
        raise UnknownProviderError(
            f"Unknown provider: '{text}'.\nAvailable providers: {cls.available()}"
        )


FetchFn = Callable[..., Awaitable[WeatherResult]]

_BACKENDS: Dict[Provider, FetchFn] = {
    Provider.MOCK: fetch_mock,
    Provider.GRPC_MOCK: fetch_grpc_mock,
    Provider.OPEN_WEATHER: fetch_open_weather,
    Provider.WEATHER_API: fetch_weather_api,
}


async def fetch_weather(
    provider: Provider,
    key: Optional[str],
    location: str,
    date: Optional[str] = None,
    **options,
) -> WeatherResult:
    """
    Fetch weather from the given provider.

    Args:
        provider: Which backend to use
        key: API key for the backend (ignored by the mocks)
        location: Resolved free-text location
        date: Loosely formatted date, defaults to today
        **options: Backend-specific extras (`transport` for the HTTP
                   backends, `target` for the gRPC mock); others ignore them

    Returns:
        WeatherResult from the backend
    """
    return await _BACKENDS[provider](key, location, date, **options)


__all__ = [
    "Provider",
    "fetch_weather",
    "fetch_mock",
    "fetch_grpc_mock",
    "fetch_open_weather",
    "fetch_weather_api",
]
