"""
gRPC mock provider.

Talks to a mock `weather.WeatherService` on the local machine (see
weather_cli.grpc_server). When nothing is listening there the provider does
NOT fail: it prints a notice and returns its own static fixture, whose
values differ from the offline mock's.
"""

import logging
import os
import sys
from typing import Optional

import grpc

from weather_cli.dates import normalize_date
from weather_cli.models import WeatherResult
from weather_cli.providers.weather_proto import GET_WEATHER_METHOD, WeatherRequest, WeatherResponse
from weather_cli.transport import to_transport_error

logger = logging.getLogger(__name__)

DEFAULT_TARGET = "[::1]:54583"
TARGET_ENV_VAR = "WEATHER_GRPC_TARGET"

# Fallback fixture when the server is unreachable
FALLBACK_COUNTRY = "gRPC Mock Country"
FALLBACK_CITY = "gRPC Mock City"
FALLBACK_TEMPERATURE = 42.0
FALLBACK_HUMIDITY = 88
FALLBACK_DESCRIPTION = "Rain (Mock)"


def resolve_target(target: Optional[str] = None) -> str:
    """Explicit target, then $WEATHER_GRPC_TARGET, then the well-known port."""
    return target or os.getenv(TARGET_ENV_VAR) or DEFAULT_TARGET


def _fallback_result(date: str) -> WeatherResult:
    return WeatherResult(
        country=FALLBACK_COUNTRY,
        city=FALLBACK_CITY,
        date=date,
        temperature=FALLBACK_TEMPERATURE,
        humidity=FALLBACK_HUMIDITY,
        description=FALLBACK_DESCRIPTION,
    )


async def fetch_grpc_mock(
    key: Optional[str],
    location: str,
    date: Optional[str] = None,
    target: Optional[str] = None,
    **options,
) -> WeatherResult:
    """
    Ask the mock gRPC server for weather, falling back to static data.

    Args:
        key: Ignored; the mock server needs no credential
        location: Free-text location forwarded to the server
        date: Loosely formatted date, normalized before sending
        target: host:port override for the server

    Returns:
        WeatherResult mapped from the server response, or the fallback fixture
        if the server is unavailable

    Raises:
        TransportError: If the server is reachable but the call fails
    """
    target = resolve_target(target)
    date_normalized = normalize_date(date)
    request = WeatherRequest(location=location, date=date_normalized)

    logger.info(f"[GrpcMockProvider] Calling {GET_WEATHER_METHOD} at {target}")

    async with grpc.aio.insecure_channel(target) as channel:
        get_weather = channel.unary_unary(
            GET_WEATHER_METHOD,
            request_serializer=WeatherRequest.SerializeToString,
            response_deserializer=WeatherResponse.FromString,
        )
        try:
            response = await get_weather(request)
        except grpc.aio.AioRpcError as e:
            if e.code() == grpc.StatusCode.UNAVAILABLE:
                logger.info(f"[GrpcMockProvider] Server not reachable at {target}: {e.details()}")
                print(
                    f"(gRPC Mock: Server not found at '{target}', returning static data)",
                    file=sys.stderr,
                )
                return _fallback_result(date_normalized)
            raise to_transport_error(e, "GrpcMockProvider") from e

    logger.debug(f"[GrpcMockProvider] Response: {response}")

    return WeatherResult(
        country=response.country,
        city=response.city,
        date=response.date,
        temperature=response.temperature,
        humidity=int(response.humidity),
        description=response.description,
    )
