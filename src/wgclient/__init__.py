"""
wgclient: adaptive authentication and live peer sync for wg-easy servers.

Typical use::

    async with ServerConnection() as connection:
        await connection.authenticate(ServerProfile("http://vpn.local:51821", "secret"))
        poller = connection.create_poller(on_snapshot=render)
        await poller.start(connection.default_policy())
"""

__version__ = "0.1.0"

from .api_client import AdaptiveApiClient
from .auth_prober import AuthFormatProber
from .config import ClientSettings, ConfigurationError
from .connection import ServerConnection
from .data_models import AuthFormat, PeerRecord, ServerInfo, ServerProfile, SessionRecord
from .exceptions import (
    AuthFormatExhausted,
    CallbackError,
    NetworkError,
    ServerError,
    SessionExpired,
    StorageError,
    ValidationError,
    WgClientError,
)
from .peer_poller import PeerListPoller
from .peer_poller_helpers import PeerSnapshot, PollerState, PollingPolicy, TickOutcome
from .peer_state import HandshakeAge, HandshakeKind, PeerStats, aggregate, is_online, time_since_last_handshake
from .session_store import SessionStore

__all__ = [
    "AdaptiveApiClient",
    "AuthFormat",
    "AuthFormatExhausted",
    "AuthFormatProber",
    "CallbackError",
    "ClientSettings",
    "ConfigurationError",
    "HandshakeAge",
    "HandshakeKind",
    "NetworkError",
    "PeerListPoller",
    "PeerRecord",
    "PeerSnapshot",
    "PeerStats",
    "PollerState",
    "PollingPolicy",
    "ServerConnection",
    "ServerError",
    "ServerInfo",
    "ServerProfile",
    "SessionExpired",
    "SessionRecord",
    "SessionStore",
    "StorageError",
    "TickOutcome",
    "ValidationError",
    "WgClientError",
    "__version__",
    "aggregate",
    "is_online",
    "time_since_last_handshake",
]
