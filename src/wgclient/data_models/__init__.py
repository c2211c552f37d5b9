"""Typed records exchanged between the client layers and their callers."""

from .auth_format import PROBE_ORDER, AuthFormat
from .peer import PeerRecord, parse_timestamp
from .profile import ServerProfile
from .server_info import ReleaseInfo, ServerInfo
from .session import SessionRecord, cookies_from_credential, credential_from_cookies

__all__ = [
    "AuthFormat",
    "PROBE_ORDER",
    "PeerRecord",
    "ReleaseInfo",
    "ServerInfo",
    "ServerProfile",
    "SessionRecord",
    "cookies_from_credential",
    "credential_from_cookies",
    "parse_timestamp",
]
