"""Server metadata returned by ``GET /api/session``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class ReleaseInfo:
    version: str
    changelog: str = ""


@dataclass(frozen=True)
class ServerInfo:
    """
    Version and session details reported by the server.

    Deployments differ in which fields they return, so every field is optional.
    """

    version: Optional[str] = None
    latest_release: Optional[ReleaseInfo] = None
    requires_password: Optional[bool] = None
    authenticated: Optional[bool] = None

    @property
    def update_available(self) -> bool:
        if not self.version or self.latest_release is None:
            return False
        return self.latest_release.version != self.version

    @classmethod
    def from_payload(cls, payload: Any) -> "ServerInfo":
        if not isinstance(payload, Mapping):
            return cls()

        release = None
        raw_release = payload.get("latestRelease")
        if isinstance(raw_release, Mapping) and raw_release.get("version"):
            release = ReleaseInfo(
                version=str(raw_release["version"]),
                changelog=str(raw_release.get("changelog") or ""),
            )

        version = payload.get("version")
        return cls(
            version=str(version) if version is not None else None,
            latest_release=release,
            requires_password=_optional_bool(payload.get("requiresPassword")),
            authenticated=_optional_bool(payload.get("authenticated")),
        )


def _optional_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    return bool(value)


__all__ = ["ReleaseInfo", "ServerInfo"]
