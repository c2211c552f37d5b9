"""
Discovers which login body encoding a server accepts.

Deployments disagree on the shape of ``POST /api/session``; rather than
guess, the prober walks a fixed priority list and stops at the first
encoding that yields a session cookie. Servers run without a password are
detected with a single unauthenticated read of the client list.
"""

from __future__ import annotations

import logging
from typing import Sequence

import aiohttp

from .auth_prober_helpers import ProbeAttempt, ProbeResult, attempt_login, attempt_without_login
from .data_models import PROBE_ORDER, AuthFormat, ServerProfile
from .exceptions import AuthFormatExhausted, ValidationError
from .http_session import HttpSessionManager
from .http_utils import join_url

logger = logging.getLogger(__name__)

SESSION_ENDPOINT = "/api/session"
CLIENTS_ENDPOINT = "/api/wireguard/client"


class AuthFormatProber:
    """Tries candidate login encodings strictly in priority order."""

    def __init__(
        self,
        session_manager: HttpSessionManager,
        *,
        candidates: Sequence[AuthFormat] = PROBE_ORDER,
        endpoint: str = SESSION_ENDPOINT,
    ) -> None:
        if not candidates:
            raise ValidationError("At least one login format candidate is required")
        self._session_manager = session_manager
        self._candidates = tuple(candidates)
        self._endpoint = endpoint

    @property
    def candidates(self) -> tuple[AuthFormat, ...]:
        return self._candidates

    async def probe(self, profile: ServerProfile) -> ProbeResult:
        """
        Find the first login encoding the server accepts.

        Candidates are tried sequentially; exactly *k* requests are sent when
        the *k*-th candidate is the first to succeed. A profile without a
        password sends one unauthenticated ``GET`` instead, and a 2xx answer
        yields a result with no format and no credential.

        Raises:
            AuthFormatExhausted: If every candidate was rejected, or the
                server requires a password the profile does not have
        """
        session = await self._session_manager.initialize()
        if not profile.has_password:
            return await self._probe_without_password(session, profile)

        password = profile.require_password()
        url = join_url(profile.url, self._endpoint)
        logger.info("Probing %d login formats against %s", len(self._candidates), profile.url)
        attempts: list[ProbeAttempt] = []
        for auth_format in self._candidates:
            attempt = await attempt_login(session, url, auth_format, password)
            attempts.append(attempt)
            if attempt.succeeded:
                logger.info(
                    "Server %s accepted login format %s after %d attempt(s)",
                    profile.url,
                    auth_format.name,
                    len(attempts),
                )
                return ProbeResult(auth_format, attempt.credential, tuple(attempts))

        logger.warning("Server %s rejected all %d login formats", profile.url, len(attempts))
        raise AuthFormatExhausted(attempts=attempts, server_url=profile.url)

    async def _probe_without_password(self, session: aiohttp.ClientSession, profile: ServerProfile) -> ProbeResult:
        logger.info("No password configured; checking whether %s requires a login", profile.url)
        attempt = await attempt_without_login(session, join_url(profile.url, CLIENTS_ENDPOINT))
        if attempt.succeeded:
            logger.info("Server %s answers without a login", profile.url)
            return ProbeResult(None, "", (attempt,))

        logger.warning("Server %s refused unauthenticated access (%s)", profile.url, attempt.error)
        raise AuthFormatExhausted(
            f"Server requires a password ({attempt.error})",
            attempts=[attempt],
            server_url=profile.url,
        )


__all__ = ["AuthFormatProber", "CLIENTS_ENDPOINT", "SESSION_ENDPOINT"]
