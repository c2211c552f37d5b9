"""
Session-aware client for the wg-easy REST API.

Every operation authenticates lazily: when no session is cached the client
probes for a working login format, saves the result and then continues.
A 401 from the server clears the cached session and surfaces as
``SessionExpired``; the client never re-probes on its own after that.
``logout()`` also forgets the configured server, so nothing logs back in
until the caller configures or authenticates again.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from .api_client_helpers import RequestExecutor, ResponseEnvelope, ResponseParser
from .auth_prober import CLIENTS_ENDPOINT, SESSION_ENDPOINT, AuthFormatProber
from .data_models import AuthFormat, PeerRecord, ServerInfo, ServerProfile, SessionRecord
from .exceptions import ServerError, SessionExpired, ValidationError
from .http_session import HttpSessionManager
from .http_utils import HTTP_UNAUTHORIZED, is_success_status, join_url, quote_path_segment
from .session_store import SessionStore

logger = logging.getLogger(__name__)


def _require_identifier(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Peer {field_name} must be a non-empty string", field=field_name)
    return value.strip()


def _peer_path(peer_id: str, action: Optional[str] = None) -> str:
    path = f"{CLIENTS_ENDPOINT}/{quote_path_segment(peer_id)}"
    if action:
        path = f"{path}/{action}"
    return path


class AdaptiveApiClient:
    """
    Typed wrapper around the peer-management endpoints.

    Authentication and clearing share one ``asyncio.Lock`` so concurrent
    callers trigger at most one probe.
    """

    def __init__(
        self,
        store: SessionStore,
        prober: AuthFormatProber,
        session_manager: HttpSessionManager,
        *,
        profile: Optional[ServerProfile] = None,
    ) -> None:
        self._store = store
        self._prober = prober
        self._executor = RequestExecutor(session_manager)
        self._profile = profile
        self._auth_lock = asyncio.Lock()

    @property
    def profile(self) -> Optional[ServerProfile]:
        return self._profile

    def configure(self, profile: ServerProfile) -> None:
        """Set the server used for future probes. Does not touch the store."""
        self._profile = profile

    def has_cached_session(self) -> bool:
        """Blocking syntactic check; coroutines use ``has_cached_session_async``."""
        return self._store.has_cached_session()

    async def has_cached_session_async(self) -> bool:
        return await self._store.has_cached_session_async()

    async def authenticate(self, profile: Optional[ServerProfile] = None) -> Optional[AuthFormat]:
        """
        Probe the server and persist the winning format.

        Any session cached for a different server is cleared first. Returns
        None when the server needs no login.

        Raises:
            ValidationError: If no server profile is available
            AuthFormatExhausted: If the server rejected every login format
        """
        if profile is not None:
            self._profile = profile
        async with self._auth_lock:
            record = await self._probe_and_save(await self._resolve_profile())
        return record.chosen_format

    async def verify_session(self) -> bool:
        """
        Confirm the cached session with one live request.

        Returns False when nothing is cached or the server rejects the
        session. Network failures propagate since they prove nothing.
        """
        if not await self.has_cached_session_async():
            return False
        try:
            await self.list_peers()
        except SessionExpired:
            return False
        return True

    async def logout(self) -> None:
        """Clear the stored session and forget the configured server."""
        async with self._auth_lock:
            await self._store.clear_async()
            self._profile = None
        logger.info("Logged out")

    async def list_peers(self) -> List[PeerRecord]:
        envelope = await self._send("GET", CLIENTS_ENDPOINT, operation="list_peers")
        return ResponseParser.parse_peers(envelope)

    async def create_peer(self, name: str) -> Optional[PeerRecord]:
        """Create a peer; returns it when the server echoes the new record."""
        peer_name = _require_identifier(name, "name")
        envelope = await self._send("POST", CLIENTS_ENDPOINT, operation="create_peer", json={"name": peer_name})
        return ResponseParser.parse_created_peer(envelope)

    async def delete_peer(self, peer_id: str) -> None:
        path = _peer_path(_require_identifier(peer_id, "id"))
        await self._send("DELETE", path, operation="delete_peer")

    async def enable_peer(self, peer_id: str) -> None:
        path = _peer_path(_require_identifier(peer_id, "id"), "enable")
        await self._send("POST", path, operation="enable_peer")

    async def disable_peer(self, peer_id: str) -> None:
        path = _peer_path(_require_identifier(peer_id, "id"), "disable")
        await self._send("POST", path, operation="disable_peer")

    async def get_peer_config(self, peer_id: str) -> str:
        """Return the peer's WireGuard configuration file as text."""
        path = _peer_path(_require_identifier(peer_id, "id"), "configuration")
        envelope = await self._send("GET", path, operation="get_peer_config")
        return envelope.text()

    async def get_server_info(self) -> ServerInfo:
        envelope = await self._send("GET", SESSION_ENDPOINT, operation="get_server_info")
        return ResponseParser.parse_server_info(envelope)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        json: Optional[Any] = None,
    ) -> ResponseEnvelope:
        record = await self._ensure_session()
        envelope = await self._executor.execute(
            method,
            join_url(record.server_url, path),
            operation=operation,
            headers=record.cookie_header(),
            json=json,
        )
        if envelope.status == HTTP_UNAUTHORIZED:
            await self._expire(record)
            raise SessionExpired(f"{operation} rejected the cached session", server_url=record.server_url)
        if not is_success_status(envelope.status):
            message = ResponseParser.error_message(envelope)
            logger.warning("%s returned HTTP %d", operation, envelope.status)
            raise ServerError(envelope.status, message, operation=operation)
        return envelope

    async def _ensure_session(self) -> SessionRecord:
        record = await self._store.load_async()
        if record is not None and record.is_populated():
            return record

        async with self._auth_lock:
            record = await self._store.load_async()
            if record is not None and record.is_populated():
                return record
            profile = await self._resolve_profile()
            logger.info("No cached session; authenticating before the request")
            return await self._probe_and_save(profile)

    async def _probe_and_save(self, profile: ServerProfile) -> SessionRecord:
        """Must be called with the auth lock held."""
        cached = await self._store.load_async()
        if cached is not None and cached.server_url != profile.url:
            logger.info("Switching server from %s to %s", cached.server_url, profile.url)
            await self._store.clear_async()
        result = await self._prober.probe(profile)
        return await self._store.save_async(profile, result.auth_format, result.credential)

    async def _expire(self, rejected: SessionRecord) -> None:
        async with self._auth_lock:
            current = await self._store.load_async()
            if current is not None and current.credential == rejected.credential:
                if self._profile is None:
                    self._profile = await self._store.load_profile_async()
                await self._store.clear_async()
                logger.warning("Server rejected the session for %s; cleared it", rejected.server_url)

    async def _resolve_profile(self) -> ServerProfile:
        if self._profile is not None:
            return self._profile
        stored = await self._store.load_profile_async()
        if stored is None:
            raise ValidationError("No server configured; call configure() or authenticate() first")
        self._profile = stored
        return stored


__all__ = ["AdaptiveApiClient", "CLIENTS_ENDPOINT"]
