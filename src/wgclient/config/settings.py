"""Client settings resolved from the environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .. import __version__
from .errors import ConfigurationError
from .runtime import env_path, env_seconds, env_str

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 5.0
DEFAULT_POLL_INTERVAL_SECONDS = 3.0
DEFAULT_STATE_DIR = Path.home() / ".wgclient"
DEFAULT_KEYRING_SERVICE = "wgclient"

SESSION_FILE_NAME = "session.json"


@dataclass(frozen=True)
class ClientSettings:
    """Configuration shared by the prober, API client and session store."""

    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    state_dir: Path = field(default_factory=lambda: DEFAULT_STATE_DIR)
    keyring_service: str = DEFAULT_KEYRING_SERVICE
    user_agent: str = f"wgclient/{__version__}"

    def __post_init__(self) -> None:
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError.invalid_value("request_timeout_seconds", self.request_timeout_seconds, "Must be positive")
        if self.connect_timeout_seconds <= 0:
            raise ConfigurationError.invalid_value("connect_timeout_seconds", self.connect_timeout_seconds, "Must be positive")
        if self.connect_timeout_seconds > self.request_timeout_seconds:
            raise ConfigurationError.invalid_value(
                "connect_timeout_seconds",
                self.connect_timeout_seconds,
                "Cannot exceed request_timeout_seconds",
            )
        if self.poll_interval_seconds <= 0:
            raise ConfigurationError.invalid_value("poll_interval_seconds", self.poll_interval_seconds, "Must be positive")
        if not self.keyring_service.strip():
            raise ConfigurationError.missing_value("keyring_service")

    @property
    def session_file(self) -> Path:
        return self.state_dir / SESSION_FILE_NAME

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Build settings from ``WGCLIENT_*`` variables and ``.env`` defaults."""
        return cls(
            request_timeout_seconds=env_seconds("WGCLIENT_REQUEST_TIMEOUT_SECONDS", DEFAULT_REQUEST_TIMEOUT_SECONDS),
            connect_timeout_seconds=env_seconds("WGCLIENT_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS),
            poll_interval_seconds=env_seconds("WGCLIENT_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS),
            state_dir=env_path("WGCLIENT_STATE_DIR", DEFAULT_STATE_DIR),
            keyring_service=env_str("WGCLIENT_KEYRING_SERVICE", DEFAULT_KEYRING_SERVICE),
        )


__all__ = ["ClientSettings", "SESSION_FILE_NAME"]
