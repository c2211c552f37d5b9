"""Persisted authentication state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.cookies import SimpleCookie
from typing import Dict, Mapping, Optional

from .auth_format import AuthFormat


@dataclass(frozen=True)
class SessionRecord:
    """
    The single active server session.

    ``credential`` is the cookie header value returned by the login call. It
    carries no expiry: validity is only ever established by a live request.
    A ``chosen_format`` of None marks a server that answers without a login;
    such a record has no credential.
    """

    server_url: str
    chosen_format: Optional[AuthFormat]
    credential: str = field(repr=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def no_auth(self) -> bool:
        return self.chosen_format is None

    def is_populated(self) -> bool:
        if not self.server_url.strip():
            return False
        return self.no_auth or bool(self.credential.strip())

    def cookie_header(self) -> Dict[str, str]:
        return {"Cookie": self.credential} if self.credential else {}


def credential_from_cookies(cookies: Mapping[str, object]) -> str:
    """
    Serialize response cookies into a ``Cookie`` request header value.

    Accepts a ``SimpleCookie`` (morsels) or a plain name/value mapping.
    """
    parts = []
    for name, value in cookies.items():
        raw = getattr(value, "value", value)
        if raw is None:
            continue
        parts.append(f"{name}={raw}")
    return "; ".join(parts)


def cookies_from_credential(credential: str) -> Dict[str, str]:
    parsed = SimpleCookie()
    parsed.load(credential)
    return {name: morsel.value for name, morsel in parsed.items()}


__all__ = ["SessionRecord", "cookies_from_credential", "credential_from_cookies"]
