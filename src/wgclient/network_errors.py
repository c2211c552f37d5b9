"""
Network error detection and classification.

Separates "the server could not be reached" from "the server answered
badly". All request paths import from here rather than keeping their own
exception tuples.
"""

import asyncio
import socket

import aiohttp

from .exceptions import NetworkError

NETWORK_ERROR_TYPES = (
    aiohttp.ClientConnectorError,
    aiohttp.ServerTimeoutError,
    aiohttp.ServerDisconnectedError,
    aiohttp.ClientOSError,
    asyncio.TimeoutError,
    socket.gaierror,
    OSError,
)

# Anything aiohttp raises while talking to the server, plus raw socket/timeouts.
REQUEST_ERROR_TYPES = NETWORK_ERROR_TYPES + (aiohttp.ClientError,)


def is_network_unreachable_error(exception: BaseException) -> bool:
    """Return True if *exception* means the server could not be reached."""
    if isinstance(exception, NETWORK_ERROR_TYPES):
        return True

    os_error = getattr(exception, "os_error", None)
    return isinstance(os_error, OSError)


def to_network_error(exception: BaseException, *, operation: str) -> NetworkError:
    """Wrap a transport failure in the client's ``NetworkError``."""
    if isinstance(exception, asyncio.TimeoutError):
        detail = "timed out"
    else:
        detail = str(exception) or type(exception).__name__
    error = NetworkError(f"{operation} failed: {detail}", operation=operation)
    error.__cause__ = exception
    return error


__all__ = [
    "NETWORK_ERROR_TYPES",
    "REQUEST_ERROR_TYPES",
    "is_network_unreachable_error",
    "to_network_error",
]
