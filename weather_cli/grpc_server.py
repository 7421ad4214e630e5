"""
Mock `weather.WeatherService` server for local development.

Answers GetWeather with a deterministic record built from the request, so
the `grpc` provider can be exercised end to end without the fallback path.

Usage:
    python -m weather_cli.grpc_server [--port 54583]
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Tuple

import grpc

from weather_cli.dates import normalize_date
from weather_cli.providers.weather_proto import SERVICE_NAME, WeatherRequest, WeatherResponse

logger = logging.getLogger(__name__)

DEFAULT_PORT = 54583

SERVER_COUNTRY = "gRPC Server Country"
SERVER_TEMPERATURE = 18.5
SERVER_HUMIDITY = 64
SERVER_DESCRIPTION = "Cloudy (gRPC)"


async def get_weather(request, context) -> WeatherResponse:
    """GetWeather handler: echoes location as the city."""
    logger.info(f"[grpc_server] GetWeather location={request.location!r} date={request.date!r}")
    return WeatherResponse(
        country=SERVER_COUNTRY,
        city=request.location,
        date=normalize_date(request.date or None),
        temperature=SERVER_TEMPERATURE,
        humidity=SERVER_HUMIDITY,
        description=SERVER_DESCRIPTION,
    )


def _service_handler() -> grpc.GenericRpcHandler:
    return grpc.method_handlers_generic_handler(SERVICE_NAME, {
        "GetWeather": grpc.unary_unary_rpc_method_handler(
            get_weather,
            request_deserializer=WeatherRequest.FromString,
            response_serializer=WeatherResponse.SerializeToString,
        ),
    })


async def serve(port: int = DEFAULT_PORT, host: str = "[::1]") -> Tuple[grpc.aio.Server, int]:
    """
    Start the mock server.

    Args:
        port: Port to bind, 0 picks a free one
        host: Interface to bind

    Returns:
        (server, bound_port); callers stop it with `await server.stop(None)`
    """
    server = grpc.aio.server()
    server.add_generic_rpc_handlers((_service_handler(),))
    bound_port = server.add_insecure_port(f"{host}:{port}")
    await server.start()
    logger.info(f"[grpc_server] Listening on {host}:{bound_port}")
    return server, bound_port


async def _run(port: int, host: str) -> None:
    server, bound_port = await serve(port, host)
    print(f"Mock weather gRPC server listening on {host}:{bound_port}")
    await server.wait_for_termination()


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Mock weather gRPC server")
    parser.add_argument('--port', type=int, default=DEFAULT_PORT)
    parser.add_argument('--host', default="[::1]")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        asyncio.run(_run(args.port, args.host))
    except KeyboardInterrupt:
        logger.info("[grpc_server] Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
