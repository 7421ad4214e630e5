"""
Transport failure handling for the HTTP and RPC providers.

Providers never retry: a failed call is reported once, with the upstream
message, as a TransportError. This module turns the various httpx / gRPC
exceptions into that one error type with a readable message.
"""

import json
import logging
from enum import Enum
from typing import Tuple

import grpc
import httpx

from weather_cli.errors import TransportError

logger = logging.getLogger(__name__)

# Upstream bodies can be large HTML pages; keep messages readable
MAX_MESSAGE_CHARS = 200


class ErrorType(Enum):
    """Categories of transport failures."""
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    CONNECTION = "connection"
    PARSE_ERROR = "parse_error"
    RPC = "rpc"
    UNKNOWN = "unknown"


def categorize_error(exception: Exception) -> Tuple[ErrorType, str]:
    """
    Categorize an exception raised while talking to a provider.

    Returns:
        Tuple of (ErrorType, error_message)
    """
    error_msg = str(exception)[:MAX_MESSAGE_CHARS]

    if isinstance(exception, httpx.TimeoutException):
        return (ErrorType.TIMEOUT, f"Timeout: {error_msg}")

    elif isinstance(exception, httpx.HTTPStatusError):
        response = exception.response
        body = response.text[:MAX_MESSAGE_CHARS].strip()
        detail = f": {body}" if body else ""
        return (ErrorType.HTTP_STATUS, f"HTTP {response.status_code} from {exception.request.url.host}{detail}")

    elif isinstance(exception, httpx.RequestError):
        return (ErrorType.CONNECTION, f"Request error: {error_msg}")

    elif isinstance(exception, grpc.RpcError):
        code = exception.code() if hasattr(exception, "code") else None
        details = exception.details() if hasattr(exception, "details") else error_msg
        name = code.name if code is not None else "UNKNOWN"
        return (ErrorType.RPC, f"gRPC error: {name}: {details}")

    elif isinstance(exception, (json.JSONDecodeError, KeyError, ValueError, TypeError)):
        return (ErrorType.PARSE_ERROR, f"Unexpected response: {error_msg}")

    else:
        return (ErrorType.UNKNOWN, error_msg)


def to_transport_error(exception: Exception, provider_name: str) -> TransportError:
    """Wrap a low-level exception as a TransportError, logging the category."""
    error_type, error_msg = categorize_error(exception)
    logger.error(f"[{provider_name}] {error_type.value} - {error_msg}")
    return TransportError(f"HTTP error: {error_msg}" if error_type is not ErrorType.RPC else error_msg)


__all__ = ["ErrorType", "categorize_error", "to_transport_error", "MAX_MESSAGE_CHARS"]
