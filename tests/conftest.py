"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import PasswordDeleteError

from wgclient.config import ClientSettings, reset_default_values
from wgclient.session_store import SessionStore

_WGCLIENT_ENV_VARS = (
    "WGCLIENT_REQUEST_TIMEOUT_SECONDS",
    "WGCLIENT_CONNECT_TIMEOUT_SECONDS",
    "WGCLIENT_POLL_INTERVAL_SECONDS",
    "WGCLIENT_STATE_DIR",
    "WGCLIENT_KEYRING_SERVICE",
    "WGCLIENT_LOG_DIR",
    "WGCLIENT_LOG_APPEND",
)


class InMemoryKeyring(KeyringBackend):
    """Keyring backend that keeps secrets in a dict for the test's lifetime."""

    priority = 1

    def __init__(self) -> None:
        super().__init__()
        self.entries: Dict[Tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> Optional[str]:
        return self.entries.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.entries[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        try:
            del self.entries[(service, username)]
        except KeyError as exc:
            raise PasswordDeleteError(f"{username} not found") from exc


@pytest.fixture(autouse=True)
def memory_keyring():
    """Route every keyring call to an isolated in-memory backend."""
    previous = keyring.get_keyring()
    backend = InMemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Clear WGCLIENT_* variables and keep .env lookups away from the developer's files."""
    for name in _WGCLIENT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("wgclient.config.runtime._DOTENV_CANDIDATES", (tmp_path / ".env",))
    reset_default_values()
    yield
    reset_default_values()


@pytest.fixture
def settings(tmp_path) -> ClientSettings:
    return ClientSettings(
        request_timeout_seconds=5,
        connect_timeout_seconds=2,
        poll_interval_seconds=0.05,
        state_dir=tmp_path / "state",
        keyring_service="wgclient-test",
    )


@pytest.fixture
def store(settings) -> SessionStore:
    return SessionStore.from_settings(settings)


@pytest.fixture
def restore_root_logger():
    """Snapshot and restore root logger handlers around logging tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
