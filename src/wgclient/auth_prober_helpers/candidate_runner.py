"""Run a single login candidate inside its own error boundary."""

from __future__ import annotations

import logging

import aiohttp

from ..data_models import AuthFormat, credential_from_cookies
from ..http_utils import is_success_status
from ..network_errors import REQUEST_ERROR_TYPES
from .attempt import ProbeAttempt

logger = logging.getLogger(__name__)


async def attempt_login(
    session: aiohttp.ClientSession,
    url: str,
    auth_format: AuthFormat,
    password: str,
) -> ProbeAttempt:
    """
    Send one login request encoded as *auth_format*.

    Never raises for transport or HTTP failures; every outcome is reported
    as a ``ProbeAttempt`` so the caller can move on to the next candidate.
    """
    try:
        async with session.post(url, **auth_format.request_kwargs(password)) as response:
            status = response.status
            credential = credential_from_cookies(response.cookies)
            await response.read()
    except REQUEST_ERROR_TYPES as exc:
        logger.debug("Login attempt %s failed before a response: %s", auth_format.name, type(exc).__name__)
        return ProbeAttempt(auth_format, error=f"{type(exc).__name__}: {exc}")

    if not is_success_status(status):
        logger.debug("Login attempt %s rejected with HTTP %d", auth_format.name, status)
        return ProbeAttempt(auth_format, status=status, error=f"HTTP {status}")
    if not credential:
        logger.debug("Login attempt %s returned HTTP %d without a session cookie", auth_format.name, status)
        return ProbeAttempt(auth_format, status=status, error="response carried no session cookie")

    return ProbeAttempt(auth_format, status=status, credential=credential)


async def attempt_without_login(session: aiohttp.ClientSession, url: str) -> ProbeAttempt:
    """
    Check whether *url* answers without any session.

    Like ``attempt_login`` this never raises for transport or HTTP failures.
    """
    try:
        async with session.get(url) as response:
            status = response.status
            await response.read()
    except REQUEST_ERROR_TYPES as exc:
        logger.debug("Unauthenticated check failed before a response: %s", type(exc).__name__)
        return ProbeAttempt(None, error=f"{type(exc).__name__}: {exc}")

    if not is_success_status(status):
        logger.debug("Unauthenticated check rejected with HTTP %d", status)
        return ProbeAttempt(None, status=status, error=f"HTTP {status}")
    return ProbeAttempt(None, status=status)
