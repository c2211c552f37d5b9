"""Secrets (password, session credential) kept in the OS keyring."""

from __future__ import annotations

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..exceptions import StorageError

logger = logging.getLogger(__name__)

PASSWORD_KEY = "server-password"
CREDENTIAL_KEY = "session-credential"


class SecretVault:
    """Thin wrapper over ``keyring`` scoped to one service name."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name

    def get(self, key: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service_name, key)
        except KeyringError as exc:
            raise StorageError(f"Keyring lookup failed for {key}") from exc

    def put(self, key: str, value: Optional[str]) -> None:
        """Store *value*; a None or empty value deletes the entry instead."""
        if not value:
            self.delete(key)
            return
        try:
            keyring.set_password(self.service_name, key, value)
        except KeyringError as exc:
            raise StorageError(f"Keyring write failed for {key}") from exc

    def delete(self, key: str) -> None:
        try:
            keyring.delete_password(self.service_name, key)
        except PasswordDeleteError:
            logger.debug("No %s entry to delete in keyring service %s", key, self.service_name)
        except KeyringError as exc:
            raise StorageError(f"Keyring delete failed for {key}") from exc
