"""
Session-scoped wiring of the client components.

A ``ServerConnection`` owns the HTTP session, the session store, the prober,
the API client and every poller created through it. Nothing is global: open
one, use it, close it.
"""

from __future__ import annotations

import itertools
import logging
from typing import List, Optional

from .api_client import AdaptiveApiClient
from .auth_prober import AuthFormatProber
from .config import ClientSettings
from .data_models import AuthFormat, ServerProfile
from .exceptions import SessionExpired
from .http_session import HttpSessionManager
from .peer_poller import Clock, LogoutCallback, PeerListPoller, Sleeper, SnapshotCallback
from .peer_poller_helpers import PollingPolicy
from .session_store import SessionStore

logger = logging.getLogger(__name__)


class ServerConnection:
    """Explicit lifetime for one server connection."""

    def __init__(self, settings: Optional[ClientSettings] = None, *, store: Optional[SessionStore] = None) -> None:
        self._settings = settings or ClientSettings.from_env()
        self._store = store or SessionStore.from_settings(self._settings)
        self._session_manager = HttpSessionManager(self._settings)
        self._prober = AuthFormatProber(self._session_manager)
        self._client = AdaptiveApiClient(self._store, self._prober, self._session_manager)
        self._pollers: List[PeerListPoller] = []
        self._poller_ids = itertools.count(1)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def prober(self) -> AuthFormatProber:
        return self._prober

    @property
    def client(self) -> AdaptiveApiClient:
        return self._client

    async def open(self) -> "ServerConnection":
        await self._session_manager.initialize()
        logger.debug("Server connection opened")
        return self

    async def close(self) -> None:
        """Stop every poller created here, then release the HTTP session."""
        await self._stop_pollers()
        await self._session_manager.close()
        logger.debug("Server connection closed")

    async def __aenter__(self) -> "ServerConnection":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def authenticate(self, profile: ServerProfile) -> Optional[AuthFormat]:
        """
        Log in to *profile*, replacing any session cached for another server.

        Returns None when the server needs no login.

        Raises:
            AuthFormatExhausted: If the server rejected every login format,
                or requires a password the profile does not have
        """
        return await self._client.authenticate(profile)

    async def restore(self) -> bool:
        """
        Resume the saved session, confirming it with one live request.

        Returns True only when the server accepted the cached credential.
        The saved profile is kept either way so a later call can re-probe.
        Network failures propagate.
        """
        profile = await self._store.load_profile_async()
        if profile is None:
            logger.info("No saved server to restore")
            return False
        self._client.configure(profile)
        if not await self._store.has_cached_session_async():
            logger.info("Saved server %s has no cached session", profile.url)
            return False
        try:
            await self._client.list_peers()
        except SessionExpired:
            logger.info("Saved session for %s is no longer accepted", profile.url)
            return False
        logger.info("Restored session for %s", profile.url)
        return True

    async def logout(self) -> None:
        """Stop every poller created here and forget the session and server."""
        await self._stop_pollers()
        await self._client.logout()

    def default_policy(self) -> PollingPolicy:
        return PollingPolicy.from_settings(self._settings)

    def create_poller(
        self,
        *,
        on_snapshot: Optional[SnapshotCallback] = None,
        on_logout: Optional[LogoutCallback] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleeper] = None,
        name: Optional[str] = None,
    ) -> PeerListPoller:
        """Build a poller whose lifetime ends no later than this connection's."""
        poller = PeerListPoller(
            self._client,
            on_snapshot=on_snapshot,
            on_logout=on_logout,
            clock=clock,
            sleep=sleep,
            name=name or f"peer-poller-{next(self._poller_ids)}",
        )
        self._pollers.append(poller)
        return poller

    async def _stop_pollers(self) -> None:
        pollers, self._pollers = self._pollers, []
        for poller in pollers:
            await poller.stop()


__all__ = ["ServerConnection"]
