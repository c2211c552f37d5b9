"""
Persistent store for the single active server session.

Non-secret metadata (server URL, login format, creation time) lives in a
JSON file; the password and session credential live in the OS keyring.
All operations are serialized by one re-entrant lock so a writer never
interleaves with another writer and readers always see a whole record.

Keyring backends and file I/O block, so async callers use the ``*_async``
variants, which run the same operation in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import ClientSettings
from .data_models import AuthFormat, ServerProfile, SessionRecord
from .exceptions import StorageError, ValidationError
from .session_store_helpers import SecretVault, SessionMetadata, SessionMetadataFile
from .session_store_helpers.secret_vault import CREDENTIAL_KEY, PASSWORD_KEY

logger = logging.getLogger(__name__)


class SessionStore:
    """Saves, loads and clears the cached ``SessionRecord``."""

    def __init__(self, session_file: Path, keyring_service: str) -> None:
        self._metadata = SessionMetadataFile(session_file)
        self._vault = SecretVault(keyring_service)
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "SessionStore":
        return cls(settings.session_file, settings.keyring_service)

    @property
    def session_file(self) -> Path:
        return self._metadata.path

    def save(self, profile: ServerProfile, auth_format: Optional[AuthFormat], credential: str) -> SessionRecord:
        """
        Persist a new session, replacing any previous record.

        An *auth_format* of None records a server that needs no login; no
        credential is stored for it. If any of the writes fails, everything
        is cleared before the error propagates, so a later ``load()`` sees
        either the new record or nothing.

        Raises:
            ValidationError: If a login session has no credential
            StorageError: If the keyring or the metadata file rejects a write
        """
        if auth_format is not None and (not credential or not credential.strip()):
            raise ValidationError("Cannot save a session without a credential")

        record = SessionRecord(
            server_url=profile.url,
            chosen_format=auth_format,
            credential=credential if auth_format is not None else "",
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            try:
                self._vault.put(CREDENTIAL_KEY, record.credential)
                self._vault.put(PASSWORD_KEY, profile.password)
                self._metadata.write(SessionMetadata(record.server_url, auth_format, record.created_at))
            except StorageError:
                logger.error("Failed to save session for %s; clearing partial state", record.server_url)
                self._clear_locked()
                raise
        logger.info("Saved session for %s using %s", record.server_url, _describe_format(auth_format))
        return record

    def load(self) -> Optional[SessionRecord]:
        """Return the last saved record, or None."""
        with self._lock:
            metadata = self._metadata.read()
            if metadata is None:
                return None
            if metadata.no_auth:
                return SessionRecord(metadata.server_url, None, "", metadata.created_at)
            credential = self._vault.get(CREDENTIAL_KEY)
        if not credential:
            logger.debug("Session metadata present but credential missing from keyring")
            return None
        return SessionRecord(
            server_url=metadata.server_url,
            chosen_format=metadata.auth_format,
            credential=credential,
            created_at=metadata.created_at,
        )

    def load_profile(self) -> Optional[ServerProfile]:
        """Rebuild the saved server profile (URL plus keyring password)."""
        with self._lock:
            metadata = self._metadata.read()
            if metadata is None:
                return None
            password = self._vault.get(PASSWORD_KEY)
        try:
            return ServerProfile(metadata.server_url, password)
        except ValidationError:
            logger.warning("Saved server URL is no longer valid; ignoring it")
            return None

    def clear(self) -> None:
        """Erase the record and its secrets. Safe to call repeatedly."""
        with self._lock:
            self._clear_locked()
        logger.info("Cleared cached session")

    def has_cached_session(self) -> bool:
        """
        Syntactic check that a populated record exists.

        This does not prove the server still accepts the session; only a live
        request can do that.
        """
        record = self.load()
        return record is not None and record.is_populated()

    async def save_async(
        self, profile: ServerProfile, auth_format: Optional[AuthFormat], credential: str
    ) -> SessionRecord:
        return await asyncio.to_thread(self.save, profile, auth_format, credential)

    async def load_async(self) -> Optional[SessionRecord]:
        return await asyncio.to_thread(self.load)

    async def load_profile_async(self) -> Optional[ServerProfile]:
        return await asyncio.to_thread(self.load_profile)

    async def clear_async(self) -> None:
        await asyncio.to_thread(self.clear)

    async def has_cached_session_async(self) -> bool:
        return await asyncio.to_thread(self.has_cached_session)

    def _clear_locked(self) -> None:
        self._metadata.remove()
        self._vault.delete(CREDENTIAL_KEY)
        self._vault.delete(PASSWORD_KEY)


def _describe_format(auth_format: Optional[AuthFormat]) -> str:
    return "no login" if auth_format is None else auth_format.name


__all__ = ["SessionStore"]
