"""Exception hierarchy for the wg-easy client.

Every failure a caller can observe is one of these types. Like the
application errors they are modelled on, each class supports:
1. No-argument raise: raise SessionExpired()
2. Contextual attributes: err = ServerError(status_code=500); raise err
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class WgClientError(Exception):
    """Base exception for all client errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Client error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ValidationError(WgClientError, ValueError):
    """Input rejected before any network call."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Input validation failed"
        super().__init__(message, **kwargs)


class AuthFormatExhausted(WgClientError):
    """No login encoding was accepted by the server."""

    def __init__(self, message: str = "", *, attempts: Sequence[Any] = (), **kwargs: Any) -> None:
        if not message:
            message = f"Server rejected all {len(attempts)} login formats"
        super().__init__(message, **kwargs)
        self.attempts = tuple(attempts)


class SessionExpired(WgClientError):
    """Server rejected the cached session; re-authentication is required."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Session expired; authenticate again"
        super().__init__(message, **kwargs)


class NetworkError(WgClientError):
    """Server could not be reached (DNS, refused connection, timeout)."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Network communication error"
        super().__init__(message, **kwargs)


class StorageError(WgClientError):
    """Local session state could not be read or written."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Session storage error"
        super().__init__(message, **kwargs)


class CallbackError(WgClientError):
    """A subscriber callback raised while handling a poller event."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Poller callback failed"
        super().__init__(message, **kwargs)


class ServerError(WgClientError):
    """Server answered with an unexpected status or payload."""

    def __init__(self, status_code: int, message: str = "", **kwargs: Any) -> None:
        self.status_code = status_code
        self.message = message
        text = f"Server returned HTTP {status_code}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text, **kwargs)


def describe_error(error: Optional[BaseException]) -> Optional[str]:
    """Return a short, log-safe description of *error*."""
    if error is None:
        return None
    return f"{type(error).__name__}: {error}"


__all__ = [
    "AuthFormatExhausted",
    "CallbackError",
    "NetworkError",
    "ServerError",
    "SessionExpired",
    "StorageError",
    "ValidationError",
    "WgClientError",
    "describe_error",
]
