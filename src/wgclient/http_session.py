"""aiohttp session ownership shared by the prober and the API client."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from .config import ClientSettings
from .http_utils import is_aiohttp_session_open

logger = logging.getLogger(__name__)

_CLOSE_TIMEOUT_SECONDS = 5.0


class HttpSessionManager:
    """
    Manages the aiohttp session lifecycle.

    The session never stores cookies itself (``DummyCookieJar``): the
    credential is attached per request from the session store, so clearing
    the store takes effect on the very next call.
    """

    def __init__(self, settings: ClientSettings) -> None:
        self._settings = settings
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self._settings.request_timeout_seconds,
            connect=self._settings.connect_timeout_seconds,
        )

    async def initialize(self) -> aiohttp.ClientSession:
        """Ensure the HTTP session is ready and return it."""
        async with self._session_lock:
            if self._session is not None and not self._session.closed:
                return self._session

            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                cookie_jar=aiohttp.DummyCookieJar(),
                headers={"User-Agent": self._settings.user_agent},
            )
            logger.debug("HTTP session created")
            return self._session

    async def close(self) -> None:
        """Close the HTTP session if one exists."""
        async with self._session_lock:
            session = self._session
            self._session = None
            if session is None or session.closed:
                return
            try:
                await asyncio.wait_for(session.close(), timeout=_CLOSE_TIMEOUT_SECONDS)
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError):
                logger.warning("Error closing HTTP session", exc_info=True)
            else:
                logger.debug("HTTP session closed")

    def get_session(self) -> aiohttp.ClientSession:
        """Get the current session, raising if not initialized."""
        if self._session is None:
            raise RuntimeError("HTTP session not initialized")
        return self._session

    @property
    def session(self) -> Optional[aiohttp.ClientSession]:
        """Access the current session without raising if absent."""
        return self._session

    def is_open(self) -> bool:
        return is_aiohttp_session_open(self._session)


__all__ = ["HttpSessionManager"]
