from __future__ import annotations

"""HTTP helper utilities shared by the prober and the API client."""

from typing import Any, Optional
from urllib.parse import quote, urlsplit

from .exceptions import ValidationError

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 299
HTTP_UNAUTHORIZED = 401
_ERROR_SNIPPET_LIMIT = 240


def is_aiohttp_session_open(session: Optional[Any]) -> bool:
    """Return True when the provided aiohttp session exists and remains open."""
    if session is None:
        return False
    if not hasattr(session, "closed"):
        return False
    return not bool(session.closed)


def is_success_status(status: int) -> bool:
    return HTTP_SUCCESS_MIN <= status <= HTTP_SUCCESS_MAX


def normalize_server_url(raw_url: str) -> str:
    """
    Validate a user-supplied server URL and return it without a trailing slash.

    Accepts ``http(s)://host[:port][/prefix]``. Query strings, fragments and
    credentials embedded in the URL are rejected.

    Raises:
        ValidationError: If the URL is not a well-formed HTTP(S) base URL
    """
    if not isinstance(raw_url, str) or not raw_url.strip():
        raise ValidationError("Server URL must be a non-empty string")

    candidate = raw_url.strip()
    parsed = urlsplit(candidate)
    scheme = parsed.scheme.lower()
    if scheme not in {"http", "https"}:
        raise ValidationError(f"Unsupported URL scheme: {candidate}", url=candidate)
    if not parsed.hostname:
        raise ValidationError(f"URL missing host: {candidate}", url=candidate)
    if parsed.username or parsed.password:
        raise ValidationError("Server URL must not embed credentials", url=parsed.hostname)
    if parsed.query or parsed.fragment:
        raise ValidationError(f"Server URL must not contain a query or fragment: {candidate}", url=candidate)
    try:
        port = parsed.port
    except ValueError as exc:
        raise ValidationError(f"Invalid port in URL: {candidate}", url=candidate) from exc
    if port == 0:
        raise ValidationError(f"Invalid port in URL: {candidate}", url=candidate)

    return f"{scheme}://{parsed.netloc}{parsed.path}".rstrip("/")


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def quote_path_segment(value: str) -> str:
    """Percent-encode a single path segment such as a peer id."""
    return quote(value, safe="")


def error_snippet(text: str, limit: int = _ERROR_SNIPPET_LIMIT) -> str:
    return text[:limit].strip()


__all__ = [
    "HTTP_UNAUTHORIZED",
    "error_snippet",
    "is_aiohttp_session_open",
    "is_success_status",
    "join_url",
    "normalize_server_url",
    "quote_path_segment",
]
